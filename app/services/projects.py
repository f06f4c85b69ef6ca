"""Project CRUD and the browse filters (text search, category)."""

import logging
from collections.abc import Sequence

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.models import Project
from app.schemas.project import PROJECT_TYPES, CategoryCount, ProjectIn

logger = logging.getLogger(__name__)


def create_project(db: Session, data: ProjectIn) -> Project:
    project = Project(**data.model_dump())
    db.add(project)
    db.commit()
    db.refresh(project)
    logger.info("Created project_id=%s type=%s", project.id, project.type)
    return project


def get_project(db: Session, project_id: int) -> Project | None:
    return db.get(Project, project_id)


def list_projects(
    db: Session,
    search: str | None = None,
    types: Sequence[str] | None = None,
) -> list[Project]:
    """
    Return projects newest first.

    search matches title or description case-insensitively; types keeps projects
    whose category is any of the given values (no filter when empty).
    """
    query = db.query(Project)
    if search and search.strip():
        term = search.strip().lower()
        # autoescape: % and _ in the search text match literally
        query = query.filter(
            or_(
                func.lower(Project.title).contains(term, autoescape=True),
                func.lower(Project.description).contains(term, autoescape=True),
            )
        )
    if types:
        query = query.filter(Project.type.in_(list(types)))
    return query.order_by(Project.created_at.desc(), Project.id.desc()).all()


def count_by_category(db: Session) -> list[CategoryCount]:
    """Known categories in display order, then any other stored category, with counts."""
    rows = (
        db.query(Project.type, func.count(Project.id))
        .filter(Project.type.isnot(None))
        .group_by(Project.type)
        .all()
    )
    counts = {project_type: count for project_type, count in rows}
    result = [CategoryCount(type=t, count=counts.pop(t, 0)) for t in PROJECT_TYPES]
    result.extend(CategoryCount(type=t, count=c) for t, c in sorted(counts.items()))
    return result


def replace_project(db: Session, project: Project, data: ProjectIn) -> Project:
    for field, value in data.model_dump().items():
        setattr(project, field, value)
    db.commit()
    db.refresh(project)
    logger.info("Replaced project_id=%s", project.id)
    return project


def update_description(db: Session, project: Project, description: str) -> Project:
    project.description = description
    db.commit()
    db.refresh(project)
    logger.info("Updated description of project_id=%s", project.id)
    return project


def delete_project(db: Session, project: Project) -> None:
    project_id = project.id
    db.delete(project)
    db.commit()
    logger.info("Deleted project_id=%s", project_id)
