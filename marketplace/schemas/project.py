"""Project schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from marketplace.models.enums import Currency

MAX_BUDGET = 50_000_000_000


class ProjectCreate(BaseModel):
    """Create a new project."""

    title: str = Field(..., min_length=5, max_length=255)
    description: str = Field(..., min_length=20)
    category: str = Field(..., min_length=1, max_length=255)
    budget: float = Field(..., gt=0, le=MAX_BUDGET)
    budget_currency: Currency = Currency.COP
    skills_required: list[str] = Field(..., min_length=1, max_length=10)
    # Links the caller's pending category suggestion to the new project
    suggested_category_id: int | None = None


class ProjectUpdate(BaseModel):
    """Full update of a project. Same rules as creation."""

    title: str = Field(..., min_length=5, max_length=255)
    description: str = Field(..., min_length=20)
    category: str = Field(..., min_length=1, max_length=255)
    budget: float = Field(..., gt=0, le=MAX_BUDGET)
    budget_currency: Currency = Currency.COP
    skills_required: list[str] = Field(..., min_length=1, max_length=10)


class ProjectStatusUpdate(BaseModel):
    """Status transition out of ``open``."""

    status: Literal["closed", "completed", "cancelled"]


class ProjectResponse(BaseModel):
    """Project with employer info."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str | None
    category: str | None
    budget: float | None
    budget_currency: str
    skills_required: list[str]
    status: str
    employer_id: int
    employer_name: str | None = None
    employer_email: str | None = None
    employer_image: str | None = None
    suggested_category_name: str | None = None
    suggested_skills: list[str] | None = None
    created_at: datetime
    updated_at: datetime


class ProjectEnvelope(BaseModel):
    """Single project envelope."""

    success: bool = True
    project: ProjectResponse
    message: str | None = None


class ProjectListEnvelope(BaseModel):
    """Paginated project listing."""

    success: bool = True
    projects: list[ProjectResponse]
    count: int
    total_count: int
    total_pages: int
    current_page: int
