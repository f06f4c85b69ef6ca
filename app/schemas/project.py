"""Pydantic schemas for project records. Wire format is camelCase (githubLink, techStack)."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Categories offered by the browse pages; other values are stored as-is.
PROJECT_TYPES = (
    "Web Development",
    "Mobile App",
    "UI/UX Design",
    "Machine Learning",
    "Data Science",
    "Other",
)


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ProjectIn(_CamelModel):
    """Body for creating a project or fully replacing its editable fields."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    type: str | None = Field(default=None, max_length=64)
    area: str | None = Field(default=None, max_length=255)
    github_link: str | None = Field(default=None, max_length=2048)
    live_link: str | None = Field(default=None, max_length=2048)
    tech_stack: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    videos: list[str] = Field(default_factory=list)


class DescriptionUpdate(_CamelModel):
    """Body for PATCH /project/update/{id}: description only."""

    description: str


class ProjectOut(ProjectIn):
    id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProjectEnvelope(_CamelModel):
    """Response wrapper for write operations: a message plus the affected project."""

    message: str
    project: ProjectOut


class CategoryCount(_CamelModel):
    type: str
    count: int
