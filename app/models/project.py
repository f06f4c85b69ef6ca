"""ORM model for showcased projects."""

from sqlalchemy import JSON, Column, DateTime, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB

from app.models.base import Base

# JSONB on Postgres, plain JSON elsewhere (SQLite in dev/tests).
JSONList = JSON().with_variant(JSONB(), "postgresql")


class Project(Base):
    """
    A portfolio entry: description, category, links and media URLs.

    Media is stored as lists of URLs; uploading the files is the client's concern.
    """

    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    type = Column(String(64), nullable=True, index=True)
    area = Column(String(255), nullable=True)
    github_link = Column(String(2048), nullable=True)
    live_link = Column(String(2048), nullable=True)
    tech_stack = Column(JSONList, nullable=False, default=list)
    images = Column(JSONList, nullable=False, default=list)
    videos = Column(JSONList, nullable=False, default=list)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
