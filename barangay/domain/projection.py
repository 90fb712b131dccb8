# barangay/domain/projection.py
from dataclasses import dataclass
from typing import List, Optional, Tuple

from barangay.domain.layout import LayoutEditor, is_image_key

DEFAULT_LINE_HEIGHT = 1.2
# Body text ("content" keys) wraps at 7.5in when no width is set
CONTENT_WRAP_WIDTH = 720.0


@dataclass(frozen=True)
class PositionedElement:
    key: str
    kind: str  # "text" or "image"
    x: float
    y: float
    font_size: int
    bold: bool = False
    width: Optional[float] = None
    height: Optional[float] = None
    font_family: Optional[str] = None
    lines: Tuple[str, ...] = ()
    line_height: float = 0.0
    letter_spacing: float = 0.0
    image: Optional[str] = None
    placeholder: bool = False


def project(layout) -> List[PositionedElement]:
    """Map a finished layout to absolutely positioned elements, in layout order."""
    editor = layout if isinstance(layout, LayoutEditor) else LayoutEditor.from_settings(layout)

    elements = []
    for key, item in editor.items.items():
        if is_image_key(key):
            payload = item.label or None
            elements.append(PositionedElement(
                key=key,
                kind="image",
                x=item.x,
                y=item.y,
                font_size=item.font_size,
                # the print view sizes logos by fontSize when no box is given
                width=item.width if item.width else float(item.font_size),
                height=item.height if item.height else None,
                image=payload,
                placeholder=payload is None,
            ))
            continue

        width = item.width
        if width is None and "content" in key:
            width = CONTENT_WRAP_WIDTH
        elements.append(PositionedElement(
            key=key,
            kind="text",
            x=item.x,
            y=item.y,
            font_size=item.font_size,
            bold=item.is_bold,
            width=width,
            height=item.height,
            font_family=item.font_family,
            lines=tuple(item.label.splitlines()) or ("",),
            line_height=(item.line_height or DEFAULT_LINE_HEIGHT) * item.font_size,
            letter_spacing=item.letter_spacing or 0.0,
        ))
    return elements
