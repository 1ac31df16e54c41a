"""
Colorblock preview API routes.

Live previews for the statement editor. Rendering goes through the same
compositor as stored renders; root-relative background URLs are resolved
against the request origin here.
"""
import logging
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Query, Request
from fastapi.responses import Response
from pydantic import BaseModel, Field, field_validator

from domain.models import (
    DEFAULT_BACKGROUND_COLOR,
    DEFAULT_FONT_COLOR,
    DEFAULT_FOOTER_FONT_SIZE,
    DEFAULT_HEADING_FONT_SIZE,
    DEFAULT_STATEMENT_FONT_SIZE,
    RenderSpec,
    TextAlignment,
)
from services.background import BitmapBackground
from services.compositor import render_colorblock, scale_for_display
from services.drawing import RecordingSurface, is_valid_color
from services.export import download_filename
from services.layout_engine import CANVAS_HEIGHT, CANVAS_WIDTH

router = APIRouter()
logger = logging.getLogger(__name__)

MAX_FONT_SIZE_PX = 400
COLOR_FIELDS = (
    "background_color",
    "heading_font_color",
    "statement_font_color",
    "footer_font_color",
)


def check_color(value: Optional[str]) -> Optional[str]:
    if value is not None and not is_valid_color(value):
        raise ValueError(f"Invalid color: {value!r}")
    return value


class ColorblockSettings(BaseModel):
    heading: Optional[str] = None
    footer: Optional[str] = None
    heading_font_size: int = Field(DEFAULT_HEADING_FONT_SIZE, gt=0, le=MAX_FONT_SIZE_PX)
    statement_font_size: int = Field(DEFAULT_STATEMENT_FONT_SIZE, gt=0, le=MAX_FONT_SIZE_PX)
    footer_font_size: int = Field(DEFAULT_FOOTER_FONT_SIZE, gt=0, le=MAX_FONT_SIZE_PX)
    text_alignment: TextAlignment = TextAlignment.CENTER
    background_color: str = DEFAULT_BACKGROUND_COLOR
    background_image_url: Optional[str] = None
    heading_font_color: str = DEFAULT_FONT_COLOR
    statement_font_color: str = DEFAULT_FONT_COLOR
    footer_font_color: str = DEFAULT_FONT_COLOR

    @field_validator(*COLOR_FIELDS)
    @classmethod
    def validate_color(cls, value: str) -> str:
        return check_color(value)


class PreviewRequest(ColorblockSettings):
    statement: str = ""

    def to_render_spec(self) -> RenderSpec:
        return RenderSpec.from_dict(self.model_dump())


class ZoneLayoutResponse(BaseModel):
    zone: str
    lines: List[str]
    font: str
    color: str
    start_y: float
    x: float


class BackgroundResponse(BaseModel):
    kind: str  # "bitmap" or "color"
    color: Optional[str] = None
    url: Optional[str] = None
    fallback_reason: Optional[str] = None


class PreviewOpsResponse(BaseModel):
    width: int
    height: int
    background: BackgroundResponse
    zones: List[ZoneLayoutResponse]
    ops: List[Dict[str, Any]]


def _origin(request: Request) -> str:
    return str(request.base_url)


@router.post("/preview")
def preview_colorblock(
    body: PreviewRequest,
    request: Request,
    display_size: Optional[int] = Query(None, ge=16, le=CANVAS_WIDTH),
):
    """
    Render a preview PNG.

    The render is always 1080x1080; `display_size` (e.g. 200 or 320) only
    scales the returned copy for on-screen display.
    """
    rendered = render_colorblock(body.to_render_spec(), origin=_origin(request))
    png = rendered.encode_png()
    if display_size and display_size != CANVAS_WIDTH:
        png = scale_for_display(rendered.surface.image, display_size)
    return Response(content=png, media_type="image/png", headers={"Cache-Control": "no-store"})


@router.post("/preview/download")
def download_preview(body: PreviewRequest, request: Request):
    """Full-size preview PNG as an attachment named colorblock-<timestamp>.png."""
    png = render_colorblock(body.to_render_spec(), origin=_origin(request)).encode_png()
    filename = download_filename()
    return Response(
        content=png,
        media_type="image/png",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/preview/ops", response_model=PreviewOpsResponse)
def preview_ops(body: PreviewRequest, request: Request):
    """
    Canvas draw operations for the live editor.

    The editor replays these ops on its own canvas, so its preview uses the
    exact wrapping and placement of the final render.
    """
    surface = RecordingSurface()
    rendered = render_colorblock(body.to_render_spec(), surface=surface, origin=_origin(request))

    background = rendered.background
    if isinstance(background, BitmapBackground):
        bg = BackgroundResponse(kind="bitmap", url=background.source_url)
    else:
        if background.reason:
            logger.info("[preview] background image unavailable, using %s: %s", background.color, background.reason)
        bg = BackgroundResponse(kind="color", color=background.color, fallback_reason=background.reason)

    zones = [
        ZoneLayoutResponse(
            zone=z.zone.value,
            lines=list(z.lines),
            font=z.font.css,
            color=z.color,
            start_y=z.start_y,
            x=z.x,
        )
        for z in rendered.layout.zones
    ]
    return PreviewOpsResponse(
        width=CANVAS_WIDTH,
        height=CANVAS_HEIGHT,
        background=bg,
        zones=zones,
        ops=surface.ops,
    )
