# barangay/infrastructure/render/page_renderer.py
import base64
import binascii
import io
import logging
import os
from functools import lru_cache
from typing import Iterable, List, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from barangay.config.settings import settings
from barangay.domain.projection import PositionedElement, project

# Letter, 8.5in x 11in at 96 dpi
PAGE_SIZE = (816, 1056)
PLACEHOLDER_FILL = (229, 231, 235)
PLACEHOLDER_LINE = (156, 163, 175)

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter('%(asctime)s [%(levelname)s] [RENDER] %(message)s', '%Y-%m-%d %H:%M:%S')
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False


def _font_candidates(family: Optional[str], bold: bool) -> List[str]:
    names = []
    if family:
        base = family.replace(" ", "")
        if bold:
            names += [f"{base}-Bold.ttf", f"{base}bd.ttf"]
        names.append(f"{base}.ttf")
    names += ["DejaVuSans-Bold.ttf", "arialbd.ttf"] if bold else ["DejaVuSans.ttf", "arial.ttf"]
    if settings.FONTS_DIR:
        names = [os.path.join(settings.FONTS_DIR, n) for n in names] + names
    return names


@lru_cache(maxsize=64)
def load_font(size: int, bold: bool = False, family: Optional[str] = None) -> Tuple[ImageFont.ImageFont, bool]:
    """Return ``(font, has_bold_face)``; falls back to Pillow's built-in font."""
    size = max(1, int(size))
    for name in _font_candidates(family, bold):
        try:
            return ImageFont.truetype(name, size), bold
        except OSError:
            continue
    logger.warning(f"No TrueType font found for family={family!r} bold={bold}, using built-in font.")
    return ImageFont.load_default(size=size), False


def decode_image_payload(payload) -> Optional[Image.Image]:
    """Decode a data URI, bare base64 string or raw bytes into an image."""
    if not payload:
        return None
    try:
        if isinstance(payload, (bytes, bytearray)):
            raw = bytes(payload)
        elif payload.startswith("data:"):
            _, encoded = payload.split(",", 1)
            raw = base64.b64decode(encoded + "===")
        else:
            raw = base64.b64decode(payload + "===")
        img = Image.open(io.BytesIO(raw))
        img.load()
        return img
    except (ValueError, OSError, binascii.Error, Image.DecompressionBombError) as e:
        logger.warning(f"Could not decode image payload '{str(payload)[:40]}...': {type(e).__name__}")
        return None


def wrap_line(text: str, font, max_width: float) -> List[str]:
    words = text.split(" ")
    lines, current = [], ""
    for word in words:
        candidate = f"{current} {word}" if current else word
        if current and font.getlength(candidate) > max_width:
            lines.append(current)
            current = word
        else:
            current = candidate
    lines.append(current)
    return lines


def _draw_text(draw: ImageDraw.ImageDraw, el: PositionedElement) -> None:
    font, has_bold_face = load_font(el.font_size, el.bold, el.font_family)
    stroke = 1 if el.bold and not has_bold_face else 0

    lines = []
    for line in el.lines:
        lines.extend(wrap_line(line, font, el.width) if el.width else [line])

    y = el.y
    for line in lines:
        if el.letter_spacing:
            x = el.x
            for ch in line:
                draw.text((x, y), ch, font=font, fill="black", stroke_width=stroke, stroke_fill="black")
                x += font.getlength(ch) + el.letter_spacing
        else:
            draw.text((el.x, y), line, font=font, fill="black", stroke_width=stroke, stroke_fill="black")
        y += el.line_height


def _draw_placeholder(draw: ImageDraw.ImageDraw, box: Tuple[int, int, int, int]) -> None:
    draw.rectangle(box, fill=PLACEHOLDER_FILL, outline=PLACEHOLDER_LINE)
    x1, y1, x2, y2 = box
    draw.line((x1, y1, x2, y2), fill=PLACEHOLDER_LINE)
    draw.line((x1, y2, x2, y1), fill=PLACEHOLDER_LINE)


def _draw_image(page: Image.Image, draw: ImageDraw.ImageDraw, el: PositionedElement) -> None:
    width = max(1, int(round(el.width or el.font_size)))
    img = None if el.placeholder else decode_image_payload(el.image)
    if img is None:
        height = max(1, int(round(el.height or width)))
        _draw_placeholder(draw, (int(el.x), int(el.y), int(el.x) + width - 1, int(el.y) + height - 1))
        return

    if el.height:
        height = max(1, int(round(el.height)))
    else:
        height = max(1, int(round(width * img.height / img.width)))
    scaled = img.convert("RGBA").resize((width, height), Image.LANCZOS)
    page.paste(scaled, (int(el.x), int(el.y)), scaled)
    img.close()


def render_page(elements: Iterable[PositionedElement], page_size: Tuple[int, int] = PAGE_SIZE) -> Image.Image:
    page = Image.new("RGB", page_size, "white")
    draw = ImageDraw.Draw(page)
    for el in elements:
        if el.kind == "image":
            _draw_image(page, draw, el)
        else:
            _draw_text(draw, el)
    return page


def render_layout(layout, page_size: Tuple[int, int] = PAGE_SIZE) -> Image.Image:
    return render_page(project(layout), page_size)


def encode_png(img: Image.Image) -> bytes:
    buf = io.BytesIO()
    img.save(buf, format="PNG", optimize=True)
    return buf.getvalue()


def save_png(img: Image.Image, directory: str, name: str) -> str:
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, f"{name}.png")
    img.save(path, format="PNG", optimize=True)
    return path
