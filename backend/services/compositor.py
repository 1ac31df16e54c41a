"""
Colorblock compositor.

Renders a RenderSpec onto a drawing surface as a sequential pipeline:
resolve background -> fill/draw background -> compute layout -> paint zones -> encode.

The same pipeline drives the final stored render (PillowSurface) and the
editor preview (PillowSurface scaled down, or RecordingSurface replayed in the
browser), which keeps preview and export pixel-identical.
"""
import base64
import logging
from dataclasses import dataclass
from io import BytesIO
from typing import Optional, Union

from PIL import Image

from domain.models import DEFAULT_BACKGROUND_COLOR, RenderSpec
from services.background import (
    BackgroundResult,
    BitmapBackground,
    FallbackColorBackground,
    resolve_background,
)
from services.drawing import DrawingSurface, PillowSurface, is_valid_color
from services.layout_engine import CANVAS_HEIGHT, CANVAS_WIDTH, ColorblockLayout, compute_layout

logger = logging.getLogger(__name__)

# Darkening layer painted over bitmap backgrounds for text readability
IMAGE_OVERLAY_COLOR = "rgba(0, 0, 0, 0.3)"


@dataclass
class RenderedColorblock:
    surface: DrawingSurface
    layout: ColorblockLayout
    background: BackgroundResult

    @property
    def used_fallback(self) -> bool:
        return isinstance(self.background, FallbackColorBackground) and self.background.reason is not None

    def encode_png(self) -> bytes:
        if not isinstance(self.surface, PillowSurface):
            raise TypeError("Only raster surfaces can be encoded")
        return self.surface.encode_png()


def _background_fill(spec: RenderSpec) -> str:
    if spec.background_color and is_valid_color(spec.background_color):
        return spec.background_color
    logger.warning("Invalid background color %r; using %s", spec.background_color, DEFAULT_BACKGROUND_COLOR)
    return DEFAULT_BACKGROUND_COLOR


def paint_background(surface: DrawingSurface, background: BackgroundResult) -> None:
    if isinstance(background, BitmapBackground):
        surface.draw_image(background.image, 0, 0, CANVAS_WIDTH, CANVAS_HEIGHT)
        surface.fill_rect(0, 0, CANVAS_WIDTH, CANVAS_HEIGHT, IMAGE_OVERLAY_COLOR)
    else:
        surface.fill_rect(0, 0, CANVAS_WIDTH, CANVAS_HEIGHT, background.color)


def paint_layout(surface: DrawingSurface, layout: ColorblockLayout) -> None:
    """Paint heading, statement and footer lines in that order."""
    for zone in layout.zones:
        for text, x, y in zone.positioned_lines():
            surface.fill_text(text, x, y, zone.font, zone.color, layout.alignment)


def render_colorblock(
    spec: RenderSpec,
    surface: Optional[DrawingSurface] = None,
    origin: Optional[str] = None,
    background: Optional[BackgroundResult] = None,
) -> RenderedColorblock:
    """
    Render a colorblock onto `surface` (a fresh 1080x1080 raster by default).

    Args:
        spec: Render input
        surface: Target surface; callers must not share one between renders
        origin: Origin used to resolve root-relative background URLs
        background: Pre-resolved background, skipping the fetch

    Returns:
        RenderedColorblock with the painted surface, its layout and the background used
    """
    surface = surface if surface is not None else PillowSurface()
    fill = _background_fill(spec)
    if background is None:
        background = resolve_background(spec.background_image_url, fill, origin=origin)

    paint_background(surface, background)
    layout = compute_layout(spec, surface.measure_text)
    paint_layout(surface, layout)

    logger.debug(
        "Rendered colorblock background=%s zones=%s",
        type(background).__name__,
        {z.zone.value: len(z.lines) for z in layout.zones},
    )
    return RenderedColorblock(surface=surface, layout=layout, background=background)


def render_colorblock_png(spec: RenderSpec, origin: Optional[str] = None) -> bytes:
    """Render and PNG-encode a full-size colorblock."""
    return render_colorblock(spec, origin=origin).encode_png()


def to_data_uri(png: bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(png).decode("ascii")


def scale_for_display(source: Union[bytes, Image.Image], size: int) -> bytes:
    """
    Downscale a rendered colorblock for on-screen preview.

    Only the displayed copy is resized; the render itself stays 1080x1080.
    """
    if size <= 0:
        raise ValueError(f"Display size must be positive, got {size}")
    image = Image.open(BytesIO(source)) if isinstance(source, (bytes, bytearray)) else source
    preview = image.convert("RGBA").resize((size, size), resample=Image.Resampling.LANCZOS)
    buf = BytesIO()
    preview.save(buf, format="PNG")
    return buf.getvalue()
