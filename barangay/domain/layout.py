# barangay/domain/layout.py
"""Layout model for certificate templates.

A layout maps a field key (``"brgy"``, ``"documentTitle"``, ``"logoLeft"``) to a
positioned item. Keys containing ``"logo"`` hold images, every other key holds
text. The layout is persisted verbatim as the template's ``layoutSettings``.
"""
import base64
import math
import re
from typing import Any, Dict, Iterator, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from barangay.domain.errors import (
    DuplicateFieldError,
    FieldNotFoundError,
    InvalidFieldNameError,
    NotATextFieldError,
    UnknownAttributeError,
)

IMAGE_KEY_MARKER = "logo"

DEFAULT_FONT_SIZE = 12
NEW_FIELD_POSITION = (50, 300)
NEW_TEXT_BOX = (200, 24)
NEW_IMAGE_BOX = (80, 80)

_TRUE_FLAGS = {"true", "1", "yes", "on"}


def is_image_key(key: str) -> bool:
    return IMAGE_KEY_MARKER in key


def coerce_number(value: Any, default):
    """Best-effort numeric coercion; anything unusable falls back to ``default``."""
    if isinstance(value, bool):
        return default
    try:
        if isinstance(value, (int, float)):
            number = float(value)
        else:
            number = float(str(value).strip())
    except (TypeError, ValueError, OverflowError):
        return default
    if not math.isfinite(number):
        return default
    return number


def coerce_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_FLAGS
    return bool(value)


class LayoutItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True, validate_assignment=True, extra="ignore")

    label: str = ""
    x: float = 0
    y: float = 0
    font_size: int = Field(DEFAULT_FONT_SIZE, alias="fontSize")
    is_bold: bool = Field(False, alias="isBold")
    width: Optional[float] = None
    height: Optional[float] = None
    line_height: Optional[float] = Field(None, alias="lineHeight")
    letter_spacing: Optional[float] = Field(None, alias="letterSpacing")
    font_family: Optional[str] = Field(None, alias="fontFamily")

    @field_validator("label", mode="before")
    @classmethod
    def _coerce_label(cls, value):
        if value is None:
            return ""
        if isinstance(value, (bytes, bytearray)):
            # raw image bytes are kept as a self-describing data URI
            return "data:application/octet-stream;base64," + base64.b64encode(bytes(value)).decode("ascii")
        return value if isinstance(value, str) else str(value)

    @field_validator("x", "y", mode="before")
    @classmethod
    def _coerce_position(cls, value):
        return coerce_number(value, 0.0)

    @field_validator("font_size", mode="before")
    @classmethod
    def _coerce_font_size(cls, value):
        return int(coerce_number(value, DEFAULT_FONT_SIZE))

    @field_validator("is_bold", mode="before")
    @classmethod
    def _coerce_bold(cls, value):
        return coerce_flag(value)

    @field_validator("width", "height", "line_height", "letter_spacing", mode="before")
    @classmethod
    def _coerce_optional_number(cls, value):
        if value is None or value == "":
            return None
        return coerce_number(value, None)

    @field_validator("font_family", mode="before")
    @classmethod
    def _coerce_font_family(cls, value):
        if value is None or not str(value).strip():
            return None
        return str(value).strip()

    def to_settings(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


# Accept both wire names (fontSize) and attribute names (font_size)
ATTRIBUTE_NAMES: Dict[str, str] = {}
for _name, _info in LayoutItem.model_fields.items():
    ATTRIBUTE_NAMES[_name] = _name
    if _info.alias:
        ATTRIBUTE_NAMES[_info.alias] = _name

_KEY_WORD_SPLIT = re.compile(r"[\W_]+")


def derive_field_key(name: str) -> str:
    """Turn a human field name into a layout key: ``"Birth Place"`` -> ``"birthPlace"``.

    Returns an empty string when the name has no letters or digits.
    """
    words = [w for w in _KEY_WORD_SPLIT.split((name or "").lower()) if w]
    if not words:
        return ""
    return words[0] + "".join(w[:1].upper() + w[1:] for w in words[1:])


class LayoutEditor:
    """Holds one layout while it is being authored.

    Every operation edits a single item in place; nothing here persists.
    """

    def __init__(self, items: Optional[Mapping[str, LayoutItem]] = None):
        self.items: Dict[str, LayoutItem] = dict(items or {})

    @classmethod
    def from_settings(cls, settings: Optional[Mapping[str, Any]]) -> "LayoutEditor":
        items = {}
        for key, raw in (settings or {}).items():
            if isinstance(raw, LayoutItem):
                items[str(key)] = raw.model_copy()
            else:
                items[str(key)] = LayoutItem.model_validate(raw or {})
        return cls(items)

    def to_settings(self) -> Dict[str, Dict[str, Any]]:
        return {key: item.to_settings() for key, item in self.items.items()}

    def __contains__(self, key) -> bool:
        return key in self.items

    def __iter__(self) -> Iterator[str]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def get(self, key: str) -> LayoutItem:
        try:
            return self.items[key]
        except KeyError:
            raise FieldNotFoundError(key) from None

    def update_field(self, key: str, attribute: str, value: Any) -> LayoutItem:
        item = self.get(key)
        name = ATTRIBUTE_NAMES.get(attribute)
        if name is None:
            raise UnknownAttributeError(f"Unknown layout attribute '{attribute}'")
        setattr(item, name, value)
        return item

    def add_field(self, name: str) -> str:
        key = derive_field_key(name)
        if not key:
            raise InvalidFieldNameError(f"'{name}' has no letters or digits to build a field key from")
        if key in self.items:
            raise DuplicateFieldError(key)

        x, y = NEW_FIELD_POSITION
        if is_image_key(key):
            width, height = NEW_IMAGE_BOX
            label = ""
        else:
            width, height = NEW_TEXT_BOX
            label = name.strip()
        self.items[key] = LayoutItem(
            label=label,
            x=x,
            y=y,
            font_size=DEFAULT_FONT_SIZE,
            is_bold=False,
            width=width,
            height=height,
        )
        return key

    def remove_field(self, key: str) -> None:
        self.get(key)
        del self.items[key]

    def move_field(self, key: str, x: Any, y: Any) -> LayoutItem:
        item = self.get(key)
        item.x = x
        item.y = y
        return item

    def resize_field(self, key: str, width: Any, height: Any) -> LayoutItem:
        item = self.get(key)
        item.width = width
        item.height = height
        return item

    def inject_placeholder(self, key: str, token: str, offset: Optional[int] = None) -> LayoutItem:
        item = self.get(key)
        if is_image_key(key):
            raise NotATextFieldError(key)

        label = item.label
        if offset is None:
            item.label = f"{label} {token}" if label else token
        else:
            pos = max(0, min(int(offset), len(label)))
            item.label = label[:pos] + token + label[pos:]
        return item


STARTER_LAYOUT: Dict[str, Dict[str, Any]] = {
    "province": {"label": "Province of Cebu", "x": 280, "y": 20, "fontSize": 14, "isBold": False},
    "municipality": {"label": "Municipality of Argao", "x": 270, "y": 40, "fontSize": 14, "isBold": False},
    "brgy": {"label": "BARANGAY POBLACION", "x": 275, "y": 60, "fontSize": 16, "isBold": True},
    "title": {"label": "OFFICE OF THE BARANGAY CHAIRMAN", "x": 230, "y": 100, "fontSize": 18, "isBold": True},
    "documentTitle": {"label": "BARANGAY CLEARANCE", "x": 250, "y": 180, "fontSize": 28, "isBold": True},
    "content": {
        "label": "This is to certify that the person named below...",
        "x": 50, "y": 250, "fontSize": 12, "isBold": False,
    },
    "captain": {"label": "HON. JUAN DELA CRUZ", "x": 450, "y": 500, "fontSize": 14, "isBold": True},
    "position": {"label": "Barangay Captain", "x": 470, "y": 520, "fontSize": 12, "isBold": False},
}


def starter_layout() -> LayoutEditor:
    return LayoutEditor.from_settings(STARTER_LAYOUT)
