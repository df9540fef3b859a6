"""Application schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ApplicationCreate(BaseModel):
    """Apply to an open project."""

    project_id: int = Field(..., gt=0)
    proposal: str = Field(..., min_length=50)
    bid: float | None = Field(None, gt=0)


class ApplicationUpdate(BaseModel):
    """Edit an application's proposal and bid."""

    proposal: str = Field(..., min_length=50)
    bid: float | None = Field(None, gt=0)


class ApplicationResponse(BaseModel):
    """Application with project summary."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    freelancer_id: int
    proposal: str
    bid: float | None
    status: str
    project_title: str | None = None
    project_budget: float | None = None
    project_budget_currency: str | None = None
    project_status: str | None = None
    project_employer_id: int | None = None
    created_at: datetime


class ProjectApplicationResponse(BaseModel):
    """Application as seen by the project owner."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    freelancer_id: int
    proposal: str
    bid: float | None
    status: str
    freelancer_name: str | None = None
    freelancer_email: str | None = None
    freelancer_image: str | None = None
    created_at: datetime


class ApplicationEnvelope(BaseModel):
    success: bool = True
    application: ApplicationResponse
    message: str | None = None


class ApplicationListEnvelope(BaseModel):
    success: bool = True
    applications: list[ApplicationResponse]


class ProjectApplicationListEnvelope(BaseModel):
    success: bool = True
    applications: list[ProjectApplicationResponse]
