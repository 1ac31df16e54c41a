"""
Core domain models for the colorblock studio.
These are framework-agnostic and can be used across all services.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
import uuid


DEFAULT_HEADING_FONT_SIZE = 48
DEFAULT_STATEMENT_FONT_SIZE = 43
DEFAULT_FOOTER_FONT_SIZE = 35
DEFAULT_BACKGROUND_COLOR = "#4CAF50"
DEFAULT_FONT_COLOR = "#FFFFFF"


class TextAlignment(str, Enum):
    """Horizontal alignment shared by every text zone."""
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class StatementStatus(str, Enum):
    """
    Status of a statement in the review workflow.

    Stored as-is; transitions are owned by the surrounding workflow.
    """
    DRAFT = "draft"
    UNDER_REVIEW = "under_review"
    NEEDS_REVISION = "needs_revision"
    APPROVED = "approved"


class Zone(str, Enum):
    """The three independent text regions of a colorblock, in paint order."""
    HEADING = "heading"
    STATEMENT = "statement"
    FOOTER = "footer"


@dataclass
class Project:
    """A container for statements belonging to one client campaign."""
    id: str
    name: str
    description: Optional[str] = None
    client_name: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @staticmethod
    def generate_id() -> str:
        return str(uuid.uuid4())


@dataclass
class Statement:
    """
    A marketing statement and its colorblock settings.

    `content` is the primary statement text; `heading` and `footer` are optional.
    `colorblock_image_path` is set once a final render has been stored.
    """
    id: str
    project_id: str
    content: str
    heading: Optional[str] = None
    footer: Optional[str] = None
    status: StatementStatus = StatementStatus.DRAFT
    heading_font_size: int = DEFAULT_HEADING_FONT_SIZE
    statement_font_size: int = DEFAULT_STATEMENT_FONT_SIZE
    footer_font_size: int = DEFAULT_FOOTER_FONT_SIZE
    text_alignment: TextAlignment = TextAlignment.CENTER
    background_color: str = DEFAULT_BACKGROUND_COLOR
    background_image_url: Optional[str] = None
    heading_font_color: str = DEFAULT_FONT_COLOR
    statement_font_color: str = DEFAULT_FONT_COLOR
    footer_font_color: str = DEFAULT_FONT_COLOR
    colorblock_image_path: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @staticmethod
    def generate_id() -> str:
        return str(uuid.uuid4())


@dataclass(frozen=True)
class RenderSpec:
    """
    Input bundle for a single colorblock render.

    Built fresh from a Statement (or a preview request) at the start of every
    render; nothing derived from it outlives the render call.
    """
    statement: str
    heading: Optional[str] = None
    footer: Optional[str] = None
    heading_font_size: int = DEFAULT_HEADING_FONT_SIZE
    statement_font_size: int = DEFAULT_STATEMENT_FONT_SIZE
    footer_font_size: int = DEFAULT_FOOTER_FONT_SIZE
    text_alignment: TextAlignment = TextAlignment.CENTER
    background_color: str = DEFAULT_BACKGROUND_COLOR
    background_image_url: Optional[str] = None
    heading_font_color: str = DEFAULT_FONT_COLOR
    statement_font_color: str = DEFAULT_FONT_COLOR
    footer_font_color: str = DEFAULT_FONT_COLOR

    @classmethod
    def from_statement(cls, statement: Statement) -> "RenderSpec":
        return cls(
            statement=statement.content or "",
            heading=statement.heading,
            footer=statement.footer,
            heading_font_size=statement.heading_font_size or DEFAULT_HEADING_FONT_SIZE,
            statement_font_size=statement.statement_font_size or DEFAULT_STATEMENT_FONT_SIZE,
            footer_font_size=statement.footer_font_size or DEFAULT_FOOTER_FONT_SIZE,
            text_alignment=TextAlignment(statement.text_alignment or TextAlignment.CENTER),
            background_color=statement.background_color or DEFAULT_BACKGROUND_COLOR,
            background_image_url=statement.background_image_url or None,
            heading_font_color=statement.heading_font_color or DEFAULT_FONT_COLOR,
            statement_font_color=statement.statement_font_color or DEFAULT_FONT_COLOR,
            footer_font_color=statement.footer_font_color or DEFAULT_FONT_COLOR,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RenderSpec":
        return cls(
            statement=data.get("statement") or data.get("content") or "",
            heading=data.get("heading"),
            footer=data.get("footer"),
            heading_font_size=data.get("heading_font_size") or DEFAULT_HEADING_FONT_SIZE,
            statement_font_size=data.get("statement_font_size") or DEFAULT_STATEMENT_FONT_SIZE,
            footer_font_size=data.get("footer_font_size") or DEFAULT_FOOTER_FONT_SIZE,
            text_alignment=TextAlignment(data.get("text_alignment") or TextAlignment.CENTER),
            background_color=data.get("background_color") or DEFAULT_BACKGROUND_COLOR,
            background_image_url=data.get("background_image_url") or None,
            heading_font_color=data.get("heading_font_color") or DEFAULT_FONT_COLOR,
            statement_font_color=data.get("statement_font_color") or DEFAULT_FONT_COLOR,
            footer_font_color=data.get("footer_font_color") or DEFAULT_FONT_COLOR,
        )

    def zone_text(self, zone: Zone) -> str:
        if zone == Zone.HEADING:
            return self.heading or ""
        if zone == Zone.FOOTER:
            return self.footer or ""
        return self.statement or ""

    def zone_font_size(self, zone: Zone) -> int:
        if zone == Zone.HEADING:
            return self.heading_font_size
        if zone == Zone.FOOTER:
            return self.footer_font_size
        return self.statement_font_size

    def zone_font_color(self, zone: Zone) -> str:
        if zone == Zone.HEADING:
            return self.heading_font_color
        if zone == Zone.FOOTER:
            return self.footer_font_color
        return self.statement_font_color
