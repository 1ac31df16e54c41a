"""
Font resolution for colorblock text.

Prefers configured TrueType files, then common system fonts, and finally
Pillow's bundled scalable default so rendering never fails on a bare host.
"""
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from PIL import ImageFont

from settings import settings

logger = logging.getLogger(__name__)

CSS_FONT_FAMILY = "Inter, Arial, sans-serif"

REGULAR_FONT_CANDIDATES = [
    "Inter-Regular.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/System/Library/Fonts/Supplemental/Arial.ttf",
    "/Library/Fonts/Arial.ttf",
    "C:\\Windows\\Fonts\\arial.ttf",
    "DejaVuSans.ttf",
]

BOLD_FONT_CANDIDATES = [
    "Inter-Bold.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/System/Library/Fonts/Supplemental/Arial Bold.ttf",
    "/Library/Fonts/Arial Bold.ttf",
    "C:\\Windows\\Fonts\\arialbd.ttf",
    "DejaVuSans-Bold.ttf",
]


@dataclass(frozen=True)
class FontSpec:
    """Size and weight of one text zone."""
    size_px: int
    bold: bool = False

    @property
    def css(self) -> str:
        """CSS font shorthand, as a browser canvas would be given it."""
        weight = "bold " if self.bold else ""
        return f"{weight}{self.size_px}px {CSS_FONT_FAMILY}"


def _candidates(bold: bool) -> List[str]:
    configured: Optional[str] = settings.COLORBLOCK_BOLD_FONT_PATH if bold else settings.COLORBLOCK_FONT_PATH
    base = BOLD_FONT_CANDIDATES if bold else REGULAR_FONT_CANDIDATES
    out = [configured] if configured else []
    if bold and settings.COLORBLOCK_FONT_PATH:
        # A bold request can still use the regular face if no bold face exists.
        base = base + [settings.COLORBLOCK_FONT_PATH]
    return out + base


@lru_cache(maxsize=64)
def load_font(size_px: int, bold: bool = False) -> ImageFont.FreeTypeFont:
    """Load a font for the given pixel size and weight, cached per (size, bold)."""
    for candidate in _candidates(bold):
        path = Path(candidate)
        # Bare file names are resolved by FreeType against the system font dirs.
        if path.is_absolute() and not path.exists():
            continue
        try:
            return ImageFont.truetype(candidate, size=size_px)
        except OSError:
            continue
    logger.warning("No TrueType font found (bold=%s); using Pillow default font", bold)
    return ImageFont.load_default(size=size_px)


def font_for(spec: FontSpec) -> ImageFont.FreeTypeFont:
    return load_font(spec.size_px, spec.bold)


def measure_text(text: str, spec: FontSpec) -> float:
    """Advance width of `text` in pixels, matching canvas measureText().width."""
    return font_for(spec).getlength(text)
