"""
Layout engine service.

Computes the text layout of a colorblock: greedy word-wrapping per zone and
the vertical/horizontal placement of the heading, statement and footer blocks
on the fixed 1080x1080 canvas.

Everything here is pure. Measurement is injected so the same layout is
produced for the raster renderer and for the canvas replay used by previews.
"""
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from domain.models import RenderSpec, TextAlignment, Zone
from services.fonts import FontSpec


# Canvas geometry (square ad-platform format, not configurable)
CANVAS_WIDTH = 1080
CANVAS_HEIGHT = 1080
TEXT_PADDING_PX = 80
USABLE_TEXT_WIDTH = CANVAS_WIDTH - TEXT_PADDING_PX * 2

# Vertical rhythm
LINE_HEIGHT_MULTIPLIER = 1.2
ZONE_GAP_PX = 40
FOOTER_BOTTOM_MARGIN_PX = 60
SINGLE_ZONE_ANCHOR_Y = CANVAS_HEIGHT / 2
TWO_ZONE_ANCHOR_Y = 400
THREE_ZONE_ANCHOR_Y = 300

ZONE_ORDER = (Zone.HEADING, Zone.STATEMENT, Zone.FOOTER)

_PARAGRAPH_SPLIT = re.compile(r"\r?\n")


# Type alias for width measurement of a candidate line
MeasureFunction = Callable[[str], float]
FontMeasureFunction = Callable[[str, FontSpec], float]


class LayoutError(ValueError):
    """Raised when the layout engine is invoked with an unusable setup."""


@dataclass(frozen=True)
class ZoneLayout:
    """Wrapped lines and placement of one zone for a single render."""
    zone: Zone
    lines: Tuple[str, ...]
    font: FontSpec
    color: str
    start_y: float
    x: float

    @property
    def line_height(self) -> float:
        return self.font.size_px * LINE_HEIGHT_MULTIPLIER

    def line_y(self, index: int) -> float:
        return self.start_y + index * self.line_height

    def positioned_lines(self) -> List[Tuple[str, float, float]]:
        """(text, x, baseline_y) for every line, in order."""
        return [(line, self.x, self.line_y(i)) for i, line in enumerate(self.lines)]


@dataclass(frozen=True)
class ColorblockLayout:
    alignment: TextAlignment
    zones: Tuple[ZoneLayout, ...]

    def zone(self, zone: Zone) -> Optional[ZoneLayout]:
        return next((z for z in self.zones if z.zone == zone), None)

    @property
    def is_empty(self) -> bool:
        return not self.zones


def wrap_text(text: str, max_width_px: float, measure: MeasureFunction) -> List[str]:
    """
    Greedily wrap `text` into lines no wider than `max_width_px`.

    Manual line breaks (\\n or \\r\\n) are always kept. A blank or
    whitespace-only paragraph yields one empty line. Words are split on single
    spaces; a word wider than the limit is placed alone on its own line
    without being broken.
    """
    if measure is None or not callable(measure):
        raise LayoutError("wrap_text requires a measurement function")
    if max_width_px is None or max_width_px <= 0:
        raise LayoutError(f"wrap_text requires a positive max width, got {max_width_px!r}")
    if not text:
        return []

    lines: List[str] = []
    for paragraph in _PARAGRAPH_SPLIT.split(text):
        if paragraph.strip() == "":
            lines.append("")
            continue

        current_line = ""
        for word in paragraph.split(" "):
            candidate = current_line + (" " if current_line else "") + word
            if measure(candidate) > max_width_px and current_line:
                lines.append(current_line)
                current_line = word
            else:
                current_line = candidate

        if current_line:
            lines.append(current_line)

    return lines


def x_for_alignment(alignment: TextAlignment) -> float:
    """Anchor X shared by every line of every zone."""
    if alignment == TextAlignment.LEFT:
        return TEXT_PADDING_PX
    if alignment == TextAlignment.RIGHT:
        return CANVAS_WIDTH - TEXT_PADDING_PX
    return CANVAS_WIDTH / 2


def footer_start_y(line_count: int, font_size_px: int) -> float:
    """Footer blocks are anchored to the bottom edge, independent of stacking."""
    return CANVAS_HEIGHT - (line_count * font_size_px * LINE_HEIGHT_MULTIPLIER) - FOOTER_BOTTOM_MARGIN_PX


def place_zones(blocks: Dict[Zone, Tuple[int, int]]) -> Dict[Zone, float]:
    """
    Choose the starting baseline Y of each present zone.

    Args:
        blocks: zone -> (line_count, font_size_px) for every non-empty zone

    Returns:
        zone -> start Y. Only zones present in `blocks` appear.
    """
    order = [z for z in ZONE_ORDER if z in blocks]
    if not order:
        return {}

    starts: Dict[Zone, float] = {}
    if order == [Zone.STATEMENT]:
        line_count, font_size = blocks[Zone.STATEMENT]
        total_height = line_count * font_size * LINE_HEIGHT_MULTIPLIER
        starts[Zone.STATEMENT] = (CANVAS_HEIGHT - total_height) / 2 + font_size
        return starts

    if len(order) == 1:
        # Heading-only keeps the default mid-canvas anchor; no centering.
        current_y = SINGLE_ZONE_ANCHOR_Y
    elif len(order) == 2:
        current_y = TWO_ZONE_ANCHOR_Y
    else:
        current_y = THREE_ZONE_ANCHOR_Y

    for zone in order:
        line_count, font_size = blocks[zone]
        starts[zone] = current_y
        current_y += line_count * font_size * LINE_HEIGHT_MULTIPLIER + ZONE_GAP_PX

    if Zone.FOOTER in blocks:
        line_count, font_size = blocks[Zone.FOOTER]
        starts[Zone.FOOTER] = footer_start_y(line_count, font_size)

    return starts


def zone_font(spec: RenderSpec, zone: Zone) -> FontSpec:
    size = spec.zone_font_size(zone)
    if not isinstance(size, int) or isinstance(size, bool) or size <= 0:
        raise LayoutError(f"{zone.value} font size must be a positive integer, got {size!r}")
    return FontSpec(size_px=size, bold=zone == Zone.HEADING)


def _bind_font(measure_text: FontMeasureFunction, font: FontSpec) -> MeasureFunction:
    def measure(candidate: str) -> float:
        return measure_text(candidate, font)
    return measure


def compute_layout(
    spec: RenderSpec,
    measure_text: FontMeasureFunction,
    max_width_px: float = USABLE_TEXT_WIDTH,
) -> ColorblockLayout:
    """
    Compute the full layout for a colorblock.

    Args:
        spec: Render input (text, typography, alignment)
        measure_text: (text, font) -> width in px, backed by the fonts in effect
        max_width_px: Usable line width; the canvas contract fixes it at 920

    Returns:
        ColorblockLayout with one ZoneLayout per non-empty zone, in paint order

    Raises:
        LayoutError: If measurement is unavailable or the width is not positive
    """
    if measure_text is None or not callable(measure_text):
        raise LayoutError("compute_layout requires a measure_text function")

    wrapped: Dict[Zone, Sequence[str]] = {}
    fonts: Dict[Zone, FontSpec] = {}
    for zone in ZONE_ORDER:
        text = spec.zone_text(zone)
        if not text:
            continue
        font = zone_font(spec, zone)
        fonts[zone] = font
        wrapped[zone] = wrap_text(text, max_width_px, _bind_font(measure_text, font))

    starts = place_zones({z: (len(lines), fonts[z].size_px) for z, lines in wrapped.items()})
    x = x_for_alignment(spec.text_alignment)

    zones = tuple(
        ZoneLayout(
            zone=zone,
            lines=tuple(wrapped[zone]),
            font=fonts[zone],
            color=spec.zone_font_color(zone),
            start_y=starts[zone],
            x=x,
        )
        for zone in ZONE_ORDER
        if zone in wrapped
    )
    return ColorblockLayout(alignment=spec.text_alignment, zones=zones)
