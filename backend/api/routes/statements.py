"""
Statements API routes.
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import Response
from pydantic import BaseModel, Field, field_validator

from db import SessionLocal
from domain.models import Statement, StatementStatus, TextAlignment
from repositories import ProjectsRepository, StatementsRepository
from services.colorblock_assets import generate_statement_colorblock, load_statement_colorblock
from services.export import colorblock_filename
from settings import settings
from storage.file_storage import FileStorage
from api.routes.colorblocks import COLOR_FIELDS, MAX_FONT_SIZE_PX, ColorblockSettings, check_color

router = APIRouter()
projects_repo = ProjectsRepository()
statements_repo = StatementsRepository()
storage = FileStorage()
logger = logging.getLogger(__name__)

# Fields that change the rendered image; editing any of them makes a stored render stale.
RENDER_FIELDS = (
    "heading",
    "content",
    "footer",
    "heading_font_size",
    "statement_font_size",
    "footer_font_size",
    "text_alignment",
    "background_image_url",
) + COLOR_FIELDS
NULLABLE_FIELDS = ("heading", "footer", "background_image_url")


class StatementCreate(ColorblockSettings):
    content: str
    status: StatementStatus = StatementStatus.DRAFT


class StatementUpdate(BaseModel):
    heading: Optional[str] = None
    content: Optional[str] = None
    footer: Optional[str] = None
    status: Optional[StatementStatus] = None
    heading_font_size: Optional[int] = Field(None, gt=0, le=MAX_FONT_SIZE_PX)
    statement_font_size: Optional[int] = Field(None, gt=0, le=MAX_FONT_SIZE_PX)
    footer_font_size: Optional[int] = Field(None, gt=0, le=MAX_FONT_SIZE_PX)
    text_alignment: Optional[TextAlignment] = None
    background_color: Optional[str] = None
    background_image_url: Optional[str] = None
    heading_font_color: Optional[str] = None
    statement_font_color: Optional[str] = None
    footer_font_color: Optional[str] = None

    @field_validator(*COLOR_FIELDS)
    @classmethod
    def validate_color(cls, value: Optional[str]) -> Optional[str]:
        return check_color(value)


class StatementResponse(BaseModel):
    id: str
    project_id: str
    heading: Optional[str] = None
    content: str
    footer: Optional[str] = None
    status: str
    heading_font_size: int
    statement_font_size: int
    footer_font_size: int
    text_alignment: str
    background_color: str
    background_image_url: Optional[str] = None
    heading_font_color: str
    statement_font_color: str
    footer_font_color: str
    colorblock_image_path: Optional[str] = None
    created_at: str
    updated_at: str


def statement_to_response(statement: Statement) -> StatementResponse:
    """Convert domain Statement to API response."""
    return StatementResponse(
        id=statement.id,
        project_id=statement.project_id,
        heading=statement.heading,
        content=statement.content,
        footer=statement.footer,
        status=statement.status.value,
        heading_font_size=statement.heading_font_size,
        statement_font_size=statement.statement_font_size,
        footer_font_size=statement.footer_font_size,
        text_alignment=statement.text_alignment.value,
        background_color=statement.background_color,
        background_image_url=statement.background_image_url,
        heading_font_color=statement.heading_font_color,
        statement_font_color=statement.statement_font_color,
        footer_font_color=statement.footer_font_color,
        colorblock_image_path=statement.colorblock_image_path,
        created_at=statement.created_at.isoformat(),
        updated_at=statement.updated_at.isoformat(),
    )


def _get_statement_or_404(session, statement_id: str) -> Statement:
    statement = statements_repo.get_statement(session, statement_id)
    if not statement:
        raise HTTPException(status_code=404, detail="Statement not found")
    return statement


@router.post("/projects/{project_id}/statements", response_model=StatementResponse)
async def create_statement(project_id: str, body: StatementCreate):
    """Create a statement in a project."""
    with SessionLocal() as session:
        if not projects_repo.get_project(session, project_id):
            raise HTTPException(status_code=404, detail="Project not found")
        statement = Statement(
            id=Statement.generate_id(),
            project_id=project_id,
            **body.model_dump(),
        )
        created = statements_repo.create_statement(session, statement)
        return statement_to_response(created)


@router.get("/projects/{project_id}/statements", response_model=List[StatementResponse])
async def list_statements(project_id: str, status: Optional[str] = None):
    """List statements for a project, optionally filtered by status."""
    with SessionLocal() as session:
        if not projects_repo.get_project(session, project_id):
            raise HTTPException(status_code=404, detail="Project not found")

        status_enum = None
        if status:
            try:
                status_enum = StatementStatus(status)
            except ValueError:
                raise HTTPException(status_code=400, detail=f"Invalid status: {status}")

        statements = statements_repo.list_statements(session, project_id, status_enum)
        return [statement_to_response(s) for s in statements]


@router.get("/statements/{statement_id}", response_model=StatementResponse)
async def get_statement(statement_id: str):
    with SessionLocal() as session:
        return statement_to_response(_get_statement_or_404(session, statement_id))


@router.put("/statements/{statement_id}", response_model=StatementResponse)
def update_statement(statement_id: str, body: StatementUpdate, request: Request):
    """
    Partially update a statement.

    Editing any render field drops the stored colorblock. Moving the statement
    to under_review renders and stores a fresh colorblock; a render failure is
    logged and does not block the update.
    """
    updates = {
        name: value
        for name, value in body.model_dump(exclude_unset=True).items()
        if value is not None or name in NULLABLE_FIELDS
    }
    with SessionLocal() as session:
        statement = _get_statement_or_404(session, statement_id)
        previous_status = statement.status

        for name, value in updates.items():
            setattr(statement, name, value)

        if any(name in updates for name in RENDER_FIELDS) and statement.colorblock_image_path:
            storage.delete_file(statement.colorblock_image_path)
            statement.colorblock_image_path = None

        entering_review = (
            statement.status == StatementStatus.UNDER_REVIEW
            and previous_status != StatementStatus.UNDER_REVIEW
        )
        if entering_review and settings.RENDER_ON_REVIEW:
            try:
                statement.colorblock_image_path = generate_statement_colorblock(
                    statement, storage, origin=str(request.base_url)
                )
            except Exception:
                logger.exception("[colorblock] Failed to render on review for statement %s", statement.id)

        updated = statements_repo.update_statement(session, statement)
        return statement_to_response(updated)


@router.delete("/statements/{statement_id}")
async def delete_statement(statement_id: str):
    with SessionLocal() as session:
        statement = _get_statement_or_404(session, statement_id)
        if statement.colorblock_image_path:
            storage.delete_file(statement.colorblock_image_path)
        statements_repo.delete_statement(session, statement_id)
        return {"success": True}


@router.post("/statements/{statement_id}/colorblock", response_model=StatementResponse)
def render_statement_colorblock(statement_id: str, request: Request):
    """Render the statement's colorblock now and store it."""
    with SessionLocal() as session:
        statement = _get_statement_or_404(session, statement_id)
        statement.colorblock_image_path = generate_statement_colorblock(
            statement, storage, origin=str(request.base_url)
        )
        updated = statements_repo.update_statement(session, statement)
        return statement_to_response(updated)


@router.get("/statements/{statement_id}/colorblock")
def get_statement_colorblock(statement_id: str, request: Request):
    """Stored colorblock PNG, or a fresh render if none has been stored yet."""
    with SessionLocal() as session:
        statement = _get_statement_or_404(session, statement_id)
    png = load_statement_colorblock(statement, storage, origin=str(request.base_url))
    filename = colorblock_filename(statement, 0)
    return Response(
        content=png,
        media_type="image/png",
        headers={"Content-Disposition": f'inline; filename="{filename}"'},
    )
