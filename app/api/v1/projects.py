"""Project endpoints: authenticated reads, admin-only writes."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_identity, require_admin
from app.core.database import get_db
from app.models import Project
from app.schemas.auth import AuthorizedIdentity
from app.schemas.project import (
    CategoryCount,
    DescriptionUpdate,
    ProjectEnvelope,
    ProjectIn,
    ProjectOut,
)
from app.services import projects as project_service

router = APIRouter()


def _get_project_or_404(db: Session, project_id: int) -> Project:
    project = project_service.get_project(db, project_id)
    if project is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    return project


@router.post("/add", response_model=ProjectEnvelope, status_code=status.HTTP_201_CREATED)
def add_project(
    body: ProjectIn,
    _admin: Annotated[AuthorizedIdentity, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> ProjectEnvelope:
    project = project_service.create_project(db, body)
    return ProjectEnvelope(
        message="Project added successfully",
        project=ProjectOut.model_validate(project),
    )


@router.get("/getall", response_model=list[ProjectOut])
def get_all_projects(
    _identity: Annotated[AuthorizedIdentity, Depends(get_current_identity)],
    db: Annotated[Session, Depends(get_db)],
    search: Annotated[str | None, Query(max_length=255)] = None,
    project_type: Annotated[list[str] | None, Query(alias="type")] = None,
) -> list[ProjectOut]:
    """
    Return projects newest first.

    Optional filters: search (title or description, case-insensitive) and one or
    more type parameters (?type=Mobile%20App&type=Other matches either).
    """
    projects = project_service.list_projects(db, search=search, types=project_type)
    return [ProjectOut.model_validate(p) for p in projects]


@router.get("/categories", response_model=list[CategoryCount])
def get_categories(
    _identity: Annotated[AuthorizedIdentity, Depends(get_current_identity)],
    db: Annotated[Session, Depends(get_db)],
) -> list[CategoryCount]:
    """Known categories with the number of projects in each."""
    return project_service.count_by_category(db)


@router.get("/get/{project_id}", response_model=ProjectOut)
def get_project(
    project_id: int,
    _identity: Annotated[AuthorizedIdentity, Depends(get_current_identity)],
    db: Annotated[Session, Depends(get_db)],
) -> ProjectOut:
    return ProjectOut.model_validate(_get_project_or_404(db, project_id))


@router.put("/update/{project_id}", response_model=ProjectEnvelope)
def replace_project(
    project_id: int,
    body: ProjectIn,
    _admin: Annotated[AuthorizedIdentity, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> ProjectEnvelope:
    """Replace every editable field of a project (admin only)."""
    project = project_service.replace_project(db, _get_project_or_404(db, project_id), body)
    return ProjectEnvelope(
        message="Project updated successfully",
        project=ProjectOut.model_validate(project),
    )


@router.patch("/update/{project_id}", response_model=ProjectEnvelope)
def update_project_description(
    project_id: int,
    body: DescriptionUpdate,
    _admin: Annotated[AuthorizedIdentity, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> ProjectEnvelope:
    project = project_service.update_description(
        db, _get_project_or_404(db, project_id), body.description
    )
    return ProjectEnvelope(
        message="Description updated successfully",
        project=ProjectOut.model_validate(project),
    )


@router.delete("/delete/{project_id}", response_model=ProjectEnvelope)
def delete_project(
    project_id: int,
    _admin: Annotated[AuthorizedIdentity, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> ProjectEnvelope:
    project = _get_project_or_404(db, project_id)
    envelope = ProjectEnvelope(
        message="Project deleted successfully",
        project=ProjectOut.model_validate(project),
    )
    project_service.delete_project(db, project)
    return envelope
