"""
SQLAlchemy ORM models for persistence.
"""
from datetime import datetime
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from db import Base


class ProjectORM(Base):
    __tablename__ = "projects"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    client_name = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    statements = relationship(
        "StatementORM",
        back_populates="project",
        cascade="all, delete-orphan",
    )


class StatementORM(Base):
    __tablename__ = "statements"

    id = Column(String, primary_key=True, index=True)
    project_id = Column(String, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    heading = Column(Text, nullable=True)
    content = Column(Text, nullable=False)
    footer = Column(Text, nullable=True)
    status = Column(String, nullable=False, default="draft")
    heading_font_size = Column(Integer, nullable=False, default=48)
    statement_font_size = Column(Integer, nullable=False, default=43)
    footer_font_size = Column(Integer, nullable=False, default=35)
    text_alignment = Column(String, nullable=False, default="center")
    background_color = Column(String, nullable=False, default="#4CAF50")
    background_image_url = Column(String, nullable=True)
    heading_font_color = Column(String, nullable=False, default="#FFFFFF")
    statement_font_color = Column(String, nullable=False, default="#FFFFFF")
    footer_font_color = Column(String, nullable=False, default="#FFFFFF")
    colorblock_image_path = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    project = relationship("ProjectORM", back_populates="statements")
