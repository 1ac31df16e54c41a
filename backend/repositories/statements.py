"""
Statement repository backed by SQLAlchemy/SQLite.
"""
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session

from domain.models import Statement, StatementStatus, TextAlignment
from repositories.models import StatementORM


# Columns copied 1:1 between the domain dataclass and the ORM row
_PLAIN_FIELDS = (
    "heading",
    "content",
    "footer",
    "heading_font_size",
    "statement_font_size",
    "footer_font_size",
    "background_color",
    "background_image_url",
    "heading_font_color",
    "statement_font_color",
    "footer_font_color",
    "colorblock_image_path",
)


def _statement_from_orm(orm: StatementORM) -> Statement:
    return Statement(
        id=orm.id,
        project_id=orm.project_id,
        status=StatementStatus(orm.status),
        text_alignment=TextAlignment(orm.text_alignment),
        created_at=orm.created_at,
        updated_at=orm.updated_at,
        **{name: getattr(orm, name) for name in _PLAIN_FIELDS},
    )


def _update_orm_from_statement(orm: StatementORM, statement: Statement) -> None:
    for name in _PLAIN_FIELDS:
        setattr(orm, name, getattr(statement, name))
    orm.status = statement.status.value
    orm.text_alignment = statement.text_alignment.value
    orm.updated_at = statement.updated_at


class StatementsRepository:
    """CRUD operations for statements."""

    def list_statements(
        self, session: Session, project_id: str, status: Optional[StatementStatus] = None
    ) -> List[Statement]:
        query = session.query(StatementORM).filter(StatementORM.project_id == project_id)
        if status:
            query = query.filter(StatementORM.status == status.value)
        statements = query.order_by(StatementORM.created_at.asc()).all()
        return [_statement_from_orm(s) for s in statements]

    def get_statement(self, session: Session, statement_id: str) -> Optional[Statement]:
        orm = session.get(StatementORM, statement_id)
        if not orm:
            return None
        return _statement_from_orm(orm)

    def create_statement(self, session: Session, statement: Statement) -> Statement:
        now = datetime.utcnow()
        orm = StatementORM(
            id=statement.id,
            project_id=statement.project_id,
            created_at=statement.created_at or now,
        )
        statement.updated_at = statement.updated_at or now
        _update_orm_from_statement(orm, statement)
        session.add(orm)
        session.commit()
        session.refresh(orm)
        return _statement_from_orm(orm)

    def update_statement(self, session: Session, statement: Statement) -> Statement:
        orm = session.get(StatementORM, statement.id)
        if not orm:
            raise ValueError("Statement not found")
        statement.updated_at = datetime.utcnow()
        _update_orm_from_statement(orm, statement)
        session.add(orm)
        session.commit()
        session.refresh(orm)
        return _statement_from_orm(orm)

    def delete_statement(self, session: Session, statement_id: str) -> None:
        orm = session.get(StatementORM, statement_id)
        if orm:
            session.delete(orm)
            session.commit()
