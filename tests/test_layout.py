"""Tests for the layout model used by the template designer."""

import pytest

from barangay.domain.errors import (
    DuplicateFieldError,
    FieldNotFoundError,
    InvalidFieldNameError,
    NotATextFieldError,
    UnknownAttributeError,
)
from barangay.domain.layout import (
    LayoutEditor,
    LayoutItem,
    STARTER_LAYOUT,
    derive_field_key,
    is_image_key,
    starter_layout,
)


@pytest.fixture
def editor():
    return LayoutEditor.from_settings({
        "brgy": {"label": "BARANGAY POBLACION", "x": 275, "y": 60, "fontSize": 16, "isBold": True},
        "content": {"label": "This is to certify that", "x": 50, "y": 250},
        "logoLeft": {"label": "", "x": 20, "y": 20, "fontSize": 80},
    })


class TestDeriveFieldKey:
    """Custom field names become camelCase keys."""

    def test_two_words(self):
        assert derive_field_key("Birth Place") == "birthPlace"

    def test_strips_punctuation(self):
        assert derive_field_key("  O.R. number #2 ") == "oRNumber2"

    def test_already_camel(self):
        assert derive_field_key("purpose") == "purpose"

    def test_no_alphanumerics(self):
        assert derive_field_key("--- !!") == ""
        assert derive_field_key("") == ""


class TestLayoutItem:
    """Defaults and tolerant coercion of item attributes."""

    def test_defaults_applied(self):
        item = LayoutItem.model_validate({"label": "Hi"})
        assert item.x == 0 and item.y == 0
        assert item.font_size == 12
        assert item.is_bold is False

    def test_invalid_numbers_default(self):
        item = LayoutItem.model_validate({"x": "abc", "y": None, "fontSize": "", "width": "wide"})
        assert item.x == 0
        assert item.y == 0
        assert item.font_size == 12
        assert item.width is None

    def test_oversized_numbers_default(self):
        item = LayoutItem.model_validate({"x": 10**400, "fontSize": 10**400, "height": -(10**400)})
        assert item.x == 0
        assert item.font_size == 12
        assert item.height is None

    def test_numeric_strings_coerced(self):
        item = LayoutItem.model_validate({"x": "12.5", "fontSize": "18"})
        assert item.x == 12.5
        assert item.font_size == 18

    def test_settings_use_wire_names_and_skip_unset(self):
        settings = LayoutItem(label="A", font_size=14, is_bold=True).to_settings()
        assert settings == {"label": "A", "x": 0, "y": 0, "fontSize": 14, "isBold": True}


class TestLayoutEditor:
    """Editing operations on one in-memory layout."""

    def test_round_trip_preserves_order(self, editor):
        assert list(editor.to_settings()) == ["brgy", "content", "logoLeft"]

    def test_update_field_changes_one_attribute(self, editor):
        before = editor.to_settings()
        editor.update_field("brgy", "fontSize", 20)
        after = editor.to_settings()
        assert after["brgy"]["fontSize"] == 20
        assert after["brgy"]["label"] == before["brgy"]["label"]
        assert after["content"] == before["content"]

    def test_update_field_accepts_python_name(self, editor):
        editor.update_field("brgy", "is_bold", False)
        assert editor.get("brgy").is_bold is False

    def test_update_field_invalid_number_defaults(self, editor):
        editor.update_field("brgy", "fontSize", "not a number")
        assert editor.get("brgy").font_size == 12

    def test_update_field_oversized_number_defaults(self, editor):
        editor.update_field("brgy", "x", 10**400)
        assert editor.get("brgy").x == 0

    def test_update_missing_key_does_not_create(self, editor):
        with pytest.raises(FieldNotFoundError):
            editor.update_field("missing", "label", "x")
        assert "missing" not in editor

    def test_update_unknown_attribute(self, editor):
        with pytest.raises(UnknownAttributeError):
            editor.update_field("brgy", "colour", "red")

    def test_add_field_defaults(self, editor):
        key = editor.add_field("Birth Place")
        assert key == "birthPlace"
        item = editor.get("birthPlace")
        assert (item.x, item.y) == (50, 300)
        assert item.font_size == 12
        assert item.is_bold is False
        assert item.label == "Birth Place"

    def test_add_image_field_has_empty_label(self, editor):
        key = editor.add_field("Logo Right")
        assert key == "logoRight"
        assert editor.get(key).label == ""

    def test_add_duplicate_leaves_layout_unchanged(self, editor):
        before = editor.to_settings()
        with pytest.raises(DuplicateFieldError):
            editor.add_field("BRGY")
        assert editor.to_settings() == before

    def test_add_unusable_name(self, editor):
        with pytest.raises(InvalidFieldNameError):
            editor.add_field("***")

    def test_move_and_resize_are_not_clamped(self, editor):
        editor.move_field("content", -40, 5000)
        editor.resize_field("content", 900, "bad")
        item = editor.get("content")
        assert (item.x, item.y) == (-40, 5000)
        assert item.width == 900
        assert item.height is None

    def test_inject_appends_with_space(self, editor):
        editor.inject_placeholder("content", "{{fullName}}")
        assert editor.get("content").label == "This is to certify that {{fullName}}"

    def test_inject_into_empty_label(self, editor):
        editor.update_field("content", "label", "")
        editor.inject_placeholder("content", "{{age}}")
        assert editor.get("content").label == "{{age}}"

    def test_inject_at_offset(self, editor):
        editor.update_field("content", "label", "Hello !")
        editor.inject_placeholder("content", "{{firstName}}", offset=6)
        assert editor.get("content").label == "Hello {{firstName}}!"

    def test_inject_offset_past_end_appends(self, editor):
        editor.update_field("content", "label", "Hi ")
        editor.inject_placeholder("content", "{{age}}", offset=99)
        assert editor.get("content").label == "Hi {{age}}"

    def test_inject_into_image_rejected(self, editor):
        with pytest.raises(NotATextFieldError):
            editor.inject_placeholder("logoLeft", "{{fullName}}")

    def test_remove_field(self, editor):
        editor.remove_field("content")
        assert "content" not in editor
        with pytest.raises(FieldNotFoundError):
            editor.remove_field("content")


class TestStarterLayout:
    """The layout a new template starts from."""

    def test_starter_keys(self):
        assert list(starter_layout()) == list(STARTER_LAYOUT)

    def test_starter_is_a_copy(self):
        first = starter_layout()
        first.update_field("brgy", "label", "changed")
        assert starter_layout().get("brgy").label == "BARANGAY POBLACION"


def test_is_image_key():
    assert is_image_key("logoLeft")
    assert is_image_key("sealLogo") is False
    assert is_image_key("brgy") is False
