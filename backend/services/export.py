"""
Colorblock export service.

Names rendered colorblocks for download and batch export, and packs a
project's colorblocks into a ZIP archive.
"""
import logging
import re
import zipfile
from datetime import date, datetime, timezone
from io import BytesIO
from typing import Callable, Iterable, List, Optional, Tuple

from domain.models import Statement

logger = logging.getLogger(__name__)

MAX_HEADING_SLUG_LENGTH = 50
STATEMENT_ID_PREFIX_LENGTH = 8

_DISALLOWED_CHARS = re.compile(r"[^a-zA-Z0-9\s_-]")
_WHITESPACE_RUN = re.compile(r"\s+")


def download_filename(now: Optional[datetime] = None) -> str:
    """Filename for a single preview download: colorblock-<epoch ms>.png."""
    now = now or datetime.now(timezone.utc)
    return f"colorblock-{int(now.timestamp() * 1000)}.png"


def sanitize_heading(heading: Optional[str], index: int) -> str:
    """
    Filesystem-safe slug from a heading.

    Drops anything but letters, digits, whitespace, '-' and '_', turns
    whitespace runs into '_' and truncates. Falls back to statement_<n>.
    """
    if not heading:
        return f"statement_{index + 1}"
    slug = _DISALLOWED_CHARS.sub("", heading)
    slug = _WHITESPACE_RUN.sub("_", slug)[:MAX_HEADING_SLUG_LENGTH]
    return slug or f"statement_{index + 1}"


def colorblock_filename(statement: Statement, index: int) -> str:
    slug = sanitize_heading(statement.heading, index)
    return f"{slug}_{statement.id[:STATEMENT_ID_PREFIX_LENGTH]}.png"


def archive_filename(project_name: Optional[str], today: Optional[date] = None) -> str:
    """ASCII-safe archive name; the project name is slugged like headings."""
    today = today or datetime.now(timezone.utc).date()
    slug = _WHITESPACE_RUN.sub("_", _DISALLOWED_CHARS.sub("", project_name or "").strip())
    name = slug[:MAX_HEADING_SLUG_LENGTH] or "project"
    return f"{name}_approved_colorblocks_{today.isoformat()}.zip"


def build_colorblock_archive(
    statements: Iterable[Statement],
    load_png: Callable[[Statement], bytes],
) -> Tuple[bytes, List[str]]:
    """
    Pack colorblock PNGs into a ZIP archive.

    Args:
        statements: Statements to export, in archive order
        load_png: Produces the PNG bytes for a statement (stored file or fresh render)

    Returns:
        (zip bytes, list of archive member names). A statement whose image
        cannot be produced is logged and left out; the rest are still archived.
    """
    buf = BytesIO()
    names: List[str] = []
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=9) as archive:
        for index, statement in enumerate(statements):
            filename = colorblock_filename(statement, index)
            try:
                png = load_png(statement)
            except Exception:
                logger.exception("[export] Failed to add colorblock for statement %s", statement.id)
                continue
            archive.writestr(filename, png)
            names.append(filename)
    return buf.getvalue(), names
