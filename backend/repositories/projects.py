"""
Project repository backed by SQLAlchemy/SQLite.
"""
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session

from domain.models import Project
from repositories.models import ProjectORM


def _project_from_orm(orm: ProjectORM) -> Project:
    return Project(
        id=orm.id,
        name=orm.name,
        description=orm.description,
        client_name=orm.client_name,
        created_at=orm.created_at,
        updated_at=orm.updated_at,
    )


class ProjectsRepository:
    """CRUD operations for projects."""

    def list_projects(self, session: Session) -> List[Project]:
        projects = session.query(ProjectORM).order_by(ProjectORM.created_at.desc()).all()
        return [_project_from_orm(p) for p in projects]

    def get_project(self, session: Session, project_id: str) -> Optional[Project]:
        orm = session.get(ProjectORM, project_id)
        if not orm:
            return None
        return _project_from_orm(orm)

    def create_project(self, session: Session, project: Project) -> Project:
        now = datetime.utcnow()
        orm = ProjectORM(
            id=project.id,
            name=project.name,
            description=project.description,
            client_name=project.client_name,
            created_at=project.created_at or now,
            updated_at=project.updated_at or now,
        )
        session.add(orm)
        session.commit()
        session.refresh(orm)
        return _project_from_orm(orm)

    def delete_project(self, session: Session, project_id: str) -> None:
        orm = session.get(ProjectORM, project_id)
        if orm:
            session.delete(orm)
            session.commit()
