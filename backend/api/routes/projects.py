"""
Projects API routes.

Project CRUD plus the batch ZIP export of a project's colorblocks.
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import Response
from pydantic import BaseModel

from db import SessionLocal
from domain.models import Project, StatementStatus
from repositories import ProjectsRepository, StatementsRepository
from services.colorblock_assets import load_statement_colorblock
from services.export import archive_filename, build_colorblock_archive
from storage.file_storage import FileStorage

router = APIRouter()
projects_repo = ProjectsRepository()
statements_repo = StatementsRepository()
storage = FileStorage()
logger = logging.getLogger(__name__)


class ProjectCreate(BaseModel):
    name: str
    description: Optional[str] = None
    client_name: Optional[str] = None


class ProjectResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    client_name: Optional[str] = None
    created_at: str
    updated_at: str


def project_to_response(project: Project) -> ProjectResponse:
    """Convert domain Project to API response."""
    return ProjectResponse(
        id=project.id,
        name=project.name,
        description=project.description,
        client_name=project.client_name,
        created_at=project.created_at.isoformat(),
        updated_at=project.updated_at.isoformat(),
    )


@router.post("", response_model=ProjectResponse)
async def create_project(body: ProjectCreate):
    with SessionLocal() as session:
        project = Project(
            id=Project.generate_id(),
            name=body.name,
            description=body.description,
            client_name=body.client_name,
        )
        return project_to_response(projects_repo.create_project(session, project))


@router.get("", response_model=List[ProjectResponse])
async def list_projects():
    with SessionLocal() as session:
        return [project_to_response(p) for p in projects_repo.list_projects(session)]


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(project_id: str):
    with SessionLocal() as session:
        project = projects_repo.get_project(session, project_id)
        if not project:
            raise HTTPException(status_code=404, detail="Project not found")
        return project_to_response(project)


@router.delete("/{project_id}")
async def delete_project(project_id: str):
    """Delete a project, its statements and its stored colorblocks."""
    with SessionLocal() as session:
        project = projects_repo.get_project(session, project_id)
        if not project:
            raise HTTPException(status_code=404, detail="Project not found")
        projects_repo.delete_project(session, project_id)
    storage.delete_project_files(project_id)
    return {"success": True}


@router.get("/{project_id}/export")
def export_project_colorblocks(project_id: str, request: Request, status: str = StatementStatus.APPROVED.value):
    """
    Export a project's colorblocks as a ZIP archive.

    Stored renders are used where present; statements without one are
    rendered on the fly. Images that cannot be produced are skipped.
    """
    try:
        status_enum = StatementStatus(status)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid status: {status}")

    with SessionLocal() as session:
        project = projects_repo.get_project(session, project_id)
        if not project:
            raise HTTPException(status_code=404, detail="Project not found")
        statements = statements_repo.list_statements(session, project_id, status_enum)

    if not statements:
        raise HTTPException(status_code=404, detail=f"No {status_enum.value} colorblocks found")

    origin = str(request.base_url)
    archive, names = build_colorblock_archive(
        statements,
        lambda s: load_statement_colorblock(s, storage, origin=origin),
    )
    if len(names) < len(statements):
        logger.warning(
            "[export] project=%s archived %s of %s colorblocks",
            project_id,
            len(names),
            len(statements),
        )

    filename = archive_filename(project.name)
    return Response(
        content=archive,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
