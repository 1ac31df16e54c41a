"""
Drawing surfaces for colorblock rendering.

The compositor only talks to the small DrawingSurface protocol below. Two
adapters satisfy it:
- PillowSurface: an offscreen RGBA raster used for final renders and PNG previews.
- RecordingSurface: records canvas-style draw calls so a browser canvas can
  replay exactly the same layout in the live editor.

Both measure text with the same Pillow fonts, so wrapping is identical.
"""
import logging
import re
from io import BytesIO
from typing import Any, Dict, List, Protocol, Tuple

from PIL import Image, ImageColor, ImageDraw

from domain.models import TextAlignment
from services.fonts import FontSpec, font_for, measure_text
from services.layout_engine import CANVAS_HEIGHT, CANVAS_WIDTH

logger = logging.getLogger(__name__)

# Pillow anchors: horizontal position + alphabetic baseline, like canvas textBaseline="alphabetic"
_PIL_ANCHORS = {
    TextAlignment.LEFT: "ls",
    TextAlignment.CENTER: "ms",
    TextAlignment.RIGHT: "rs",
}
_CSS_RGBA = re.compile(r"^rgba\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d*\.?\d+)\s*\)$")


class DrawingSurface(Protocol):
    width: int
    height: int

    def measure_text(self, text: str, font: FontSpec) -> float:
        ...

    def fill_rect(self, x: float, y: float, w: float, h: float, color: str) -> None:
        ...

    def fill_text(
        self, text: str, x: float, y: float, font: FontSpec, color: str, align: TextAlignment
    ) -> None:
        ...

    def draw_image(self, image: Image.Image, x: float, y: float, w: float, h: float) -> None:
        ...


def _to_rgba(value: str) -> Tuple[int, int, int, int]:
    # CSS rgba() takes a 0..1 alpha; ImageColor only knows 0..255.
    match = _CSS_RGBA.match(value.strip())
    if match:
        r, g, b = (min(255, int(match.group(i))) for i in (1, 2, 3))
        alpha = max(0.0, min(1.0, float(match.group(4))))
        return (r, g, b, int(alpha * 255 + 0.5))
    rgb = ImageColor.getrgb(value)
    if len(rgb) == 3:
        return (rgb[0], rgb[1], rgb[2], 255)
    return rgb


def parse_color(value: str, default: str) -> Tuple[int, int, int, int]:
    """Parse a CSS-style color to RGBA, falling back to `default` when unparseable."""
    try:
        return _to_rgba(value)
    except (ValueError, AttributeError, TypeError):
        logger.warning("Unparseable color %r; using %s", value, default)
        return _to_rgba(default)


def is_valid_color(value: str) -> bool:
    try:
        _to_rgba(value)
    except (ValueError, AttributeError, TypeError):
        return False
    return True


class PillowSurface:
    """Offscreen 1080x1080 raster. Each render allocates its own surface."""

    def __init__(self, width: int = CANVAS_WIDTH, height: int = CANVAS_HEIGHT):
        self.width = width
        self.height = height
        # Cleared canvas: fully transparent, as after clearRect().
        self.image = Image.new("RGBA", (width, height), (0, 0, 0, 0))

    def measure_text(self, text: str, font: FontSpec) -> float:
        return measure_text(text, font)

    def fill_rect(self, x: float, y: float, w: float, h: float, color: str) -> None:
        rgba = parse_color(color, "#000000")
        box = (int(round(x)), int(round(y)), int(round(x + w)), int(round(y + h)))
        if rgba[3] == 255:
            ImageDraw.Draw(self.image).rectangle((box[0], box[1], box[2] - 1, box[3] - 1), fill=rgba)
            return
        layer = Image.new("RGBA", (box[2] - box[0], box[3] - box[1]), rgba)
        self.image.alpha_composite(layer, dest=(box[0], box[1]))

    def fill_text(
        self, text: str, x: float, y: float, font: FontSpec, color: str, align: TextAlignment
    ) -> None:
        if not text:
            return
        draw = ImageDraw.Draw(self.image)
        draw.text(
            (x, y),
            text,
            font=font_for(font),
            fill=parse_color(color, "#FFFFFF"),
            anchor=_PIL_ANCHORS[TextAlignment(align)],
        )

    def draw_image(self, image: Image.Image, x: float, y: float, w: float, h: float) -> None:
        # Stretched to the destination box, no aspect preservation (drawImage semantics).
        size = (max(1, int(round(w))), max(1, int(round(h))))
        resized = image.convert("RGBA").resize(size, resample=Image.Resampling.LANCZOS)
        self.image.alpha_composite(resized, dest=(int(round(x)), int(round(y))))

    def to_image(self) -> Image.Image:
        return self.image.convert("RGB")

    def encode_png(self) -> bytes:
        # Alpha is kept so a translucent background exports as the browser canvas does.
        buf = BytesIO()
        self.image.save(buf, format="PNG")
        return buf.getvalue()


class RecordingSurface:
    """
    Records draw calls as canvas 2D operations.

    Ops use canvas vocabulary (fillRect / drawImage / fillText, CSS font strings,
    textAlign) so the editor can replay them onto its own 1080x1080 canvas.
    """

    def __init__(self, width: int = CANVAS_WIDTH, height: int = CANVAS_HEIGHT):
        self.width = width
        self.height = height
        self.ops: List[Dict[str, Any]] = []

    def measure_text(self, text: str, font: FontSpec) -> float:
        return measure_text(text, font)

    def fill_rect(self, x: float, y: float, w: float, h: float, color: str) -> None:
        self.ops.append({"op": "fillRect", "x": x, "y": y, "w": w, "h": h, "fillStyle": color})

    def fill_text(
        self, text: str, x: float, y: float, font: FontSpec, color: str, align: TextAlignment
    ) -> None:
        self.ops.append(
            {
                "op": "fillText",
                "text": text,
                "x": x,
                "y": y,
                "font": font.css,
                "fillStyle": color,
                "textAlign": TextAlignment(align).value,
            }
        )

    def draw_image(self, image: Image.Image, x: float, y: float, w: float, h: float) -> None:
        self.ops.append(
            {
                "op": "drawImage",
                "x": x,
                "y": y,
                "w": w,
                "h": h,
                "source_size": list(image.size),
            }
        )
