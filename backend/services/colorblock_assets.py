"""
Final colorblock renders for statements.

Renders a statement's colorblock and stores it through FileStorage, and
loads stored renders back for download and export.
"""
import hashlib
import logging
from typing import Optional

from domain.models import RenderSpec, Statement
from services.compositor import render_colorblock_png
from settings import settings
from storage.file_storage import FileStorage

logger = logging.getLogger(__name__)


def generate_statement_colorblock(
    statement: Statement,
    storage: FileStorage,
    origin: Optional[str] = None,
) -> str:
    """
    Render the statement's colorblock and store it.

    Root-relative background URLs are resolved against `origin`, or
    PUBLIC_BASE_URL when no origin is given.

    Returns:
        Relative media path of the stored PNG
    """
    spec = RenderSpec.from_statement(statement)
    png = render_colorblock_png(spec, origin=origin or settings.PUBLIC_BASE_URL)
    rel_path = storage.save_colorblock(statement.project_id, statement.id, png)
    logger.info(
        "[colorblock] statement=%s project=%s path=%s size=%s sha=%s",
        statement.id,
        statement.project_id,
        rel_path,
        len(png),
        hashlib.sha256(png).hexdigest()[:12],
    )
    return rel_path


def load_statement_colorblock(
    statement: Statement,
    storage: FileStorage,
    origin: Optional[str] = None,
) -> bytes:
    """Stored PNG for the statement, or a fresh render when none is stored."""
    if statement.colorblock_image_path and storage.file_exists(statement.colorblock_image_path):
        return storage.read_bytes(statement.colorblock_image_path)
    if statement.colorblock_image_path:
        logger.warning(
            "[colorblock] stored render missing for statement=%s path=%s; re-rendering",
            statement.id,
            statement.colorblock_image_path,
        )
    return render_colorblock_png(RenderSpec.from_statement(statement), origin=origin or settings.PUBLIC_BASE_URL)
