from datetime import datetime, timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from db import Base
from domain.models import Project, Statement, StatementStatus, TextAlignment
from repositories import ProjectsRepository, StatementsRepository
from repositories import models  # noqa: F401  registers ORM tables


@pytest.fixture
def session(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    with Session() as s:
        yield s
    engine.dispose()


def _seed(session):
    projects = ProjectsRepository()
    statements = StatementsRepository()
    project = projects.create_project(session, Project(id="proj1", name="Acme", client_name="Acme Inc"))
    base = datetime(2025, 3, 1, 9, 0, 0)
    created = []
    for i, status in enumerate([StatementStatus.APPROVED, StatementStatus.DRAFT, StatementStatus.APPROVED]):
        created.append(
            statements.create_statement(
                session,
                Statement(
                    id=f"s{i}",
                    project_id=project.id,
                    content=f"Statement {i}",
                    status=status,
                    created_at=base + timedelta(minutes=i),
                ),
            )
        )
    return project, created


def test_statement_defaults_round_trip(session):
    _seed(session)
    stored = StatementsRepository().get_statement(session, "s0")

    assert stored.heading_font_size == 48
    assert stored.statement_font_size == 43
    assert stored.footer_font_size == 35
    assert stored.background_color == "#4CAF50"
    assert stored.text_alignment == TextAlignment.CENTER
    assert stored.status == StatementStatus.APPROVED


def test_list_filters_by_status_in_creation_order(session):
    _seed(session)
    repo = StatementsRepository()

    assert [s.id for s in repo.list_statements(session, "proj1")] == ["s0", "s1", "s2"]
    assert [s.id for s in repo.list_statements(session, "proj1", StatementStatus.APPROVED)] == ["s0", "s2"]


def test_update_statement_persists_fields(session):
    _seed(session)
    repo = StatementsRepository()
    statement = repo.get_statement(session, "s1")
    statement.footer = "acme.example"
    statement.text_alignment = TextAlignment.RIGHT
    statement.colorblock_image_path = "projects/proj1/colorblocks/s1.png"

    repo.update_statement(session, statement)
    stored = repo.get_statement(session, "s1")

    assert stored.footer == "acme.example"
    assert stored.text_alignment == TextAlignment.RIGHT
    assert stored.colorblock_image_path == "projects/proj1/colorblocks/s1.png"


def test_update_missing_statement_raises(session):
    with pytest.raises(ValueError):
        StatementsRepository().update_statement(session, Statement(id="nope", project_id="proj1", content="x"))


def test_deleting_project_removes_statements(session):
    _seed(session)
    ProjectsRepository().delete_project(session, "proj1")

    assert ProjectsRepository().get_project(session, "proj1") is None
    assert StatementsRepository().list_statements(session, "proj1") == []
