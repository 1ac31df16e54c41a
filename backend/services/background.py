"""
Background resolution for colorblocks.

Loading the background is the one I/O step of a render, so it is modelled as
a separate phase: resolve_background() returns either a decoded bitmap or an
instruction to fill with the solid background color. It never raises for a
bad image; the caller always gets something it can paint.
"""
from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass
from io import BytesIO
from typing import Optional, Union
from urllib.parse import unquote_to_bytes, urljoin

import requests
from PIL import Image, UnidentifiedImageError

from settings import settings

logger = logging.getLogger(__name__)

_SESSION = requests.Session()
BACKGROUND_HEADERS = {"User-Agent": settings.BACKGROUND_USER_AGENT}


@dataclass(frozen=True)
class BitmapBackground:
    image: Image.Image
    source_url: str


@dataclass(frozen=True)
class FallbackColorBackground:
    color: str
    reason: Optional[str] = None  # None when no image was requested


BackgroundResult = Union[BitmapBackground, FallbackColorBackground]


def resolve_image_url(url: str, origin: Optional[str] = None) -> str:
    """
    Resolve a root-relative URL ("/media/...") against `origin` when one is known.

    Absolute URLs, data URIs and protocol-relative URLs are returned unchanged,
    as are relative URLs when there is no origin to resolve against.
    """
    url = url.strip()
    if origin and url.startswith("/") and not url.startswith("//"):
        return urljoin(origin.rstrip("/") + "/", url.lstrip("/"))
    return url


def _decode_data_uri(url: str) -> bytes:
    header, sep, payload = url.partition(",")
    if not sep:
        raise ValueError("data URI without payload")
    if ";base64" in header:
        return base64.b64decode(payload, validate=True)
    return unquote_to_bytes(payload)


def _fetch_bytes(url: str, timeout: float) -> bytes:
    if url.startswith("data:"):
        return _decode_data_uri(url)
    resp = _SESSION.get(url, headers=BACKGROUND_HEADERS, timeout=timeout)
    resp.raise_for_status()
    return resp.content


def _decode_image(data: bytes) -> Image.Image:
    img = Image.open(BytesIO(data))
    img.load()
    return img.convert("RGBA")


def resolve_background(
    background_image_url: Optional[str],
    background_color: str,
    origin: Optional[str] = None,
    timeout: Optional[float] = None,
) -> BackgroundResult:
    """
    Load the background bitmap, or fall back to the solid color.

    Args:
        background_image_url: Optional image URL (http(s), data URI, or root-relative)
        background_color: Fill used when there is no image or it cannot be loaded
        origin: Origin to resolve root-relative URLs against (previews)
        timeout: Fetch timeout in seconds; expiry takes the fallback path

    Returns:
        BitmapBackground on success, FallbackColorBackground otherwise
    """
    if not background_image_url or not background_image_url.strip():
        return FallbackColorBackground(color=background_color)

    url = resolve_image_url(background_image_url, origin)
    timeout = settings.BACKGROUND_FETCH_TIMEOUT if timeout is None else timeout

    try:
        data = _fetch_bytes(url, timeout)
    except requests.RequestException as exc:
        logger.warning("Background fetch failed for %s: %s", _short(url), exc)
        return FallbackColorBackground(color=background_color, reason=f"fetch failed: {exc}")
    except (ValueError, binascii.Error) as exc:
        logger.warning("Background data URI invalid for %s: %s", _short(url), exc)
        return FallbackColorBackground(color=background_color, reason=f"invalid data URI: {exc}")

    try:
        image = _decode_image(data)
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as exc:
        logger.warning("Background decode failed for %s: %s", _short(url), exc)
        return FallbackColorBackground(color=background_color, reason=f"decode failed: {exc}")

    logger.debug("Background loaded from %s (%sx%s)", _short(url), image.width, image.height)
    return BitmapBackground(image=image, source_url=url)


def _short(url: str) -> str:
    # Keep data URIs out of the logs.
    return url[:60] + "..." if len(url) > 60 else url
