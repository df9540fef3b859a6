"""Category schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class CategorySuggestionCreate(BaseModel):
    """Suggest a new category."""

    name: str = Field(..., min_length=2, max_length=255)


class CategorySuggestionUpdate(BaseModel):
    """Rename an own pending suggestion."""

    id: int
    name: str = Field(..., min_length=2, max_length=255)


class CategoryModerationRequest(BaseModel):
    """Admin decision on a pending suggestion."""

    id: int
    action: Literal["approve", "reassign"]
    new_name: str | None = Field(None, max_length=255)
    existing_category_id: int | None = None
    approved_skills: list[str] = Field(default_factory=list)


class SkillResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class CategoryResponse(BaseModel):
    """Approved category with its skills."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    skills: list[SkillResponse] = []


class SuggestionResponse(BaseModel):
    """A category suggestion."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    status: str
    suggested_by: int | None
    related_project_id: int | None = None
    suggested_skills: list[str] | None = None
    created_at: datetime


class RelatedProjectSummary(BaseModel):
    """Project context shown next to a pending suggestion."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str | None
    category: str | None
    budget: float | None
    budget_currency: str
    skills_required: list[str]
    status: str
    employer_name: str | None = None
    created_at: datetime


class AdminCategoryResponse(BaseModel):
    """Category as listed for moderation."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    status: str
    suggested_by: int | None
    suggested_by_name: str | None
    suggested_by_email: str | None
    suggested_skills: list[str] | None
    skills: list[SkillResponse]
    related_project_id: int | None
    related_project: RelatedProjectSummary | None
    created_at: datetime


class SkillPreviewEntry(BaseModel):
    name: str
    is_duplicate: bool


class CategoryListEnvelope(BaseModel):
    success: bool = True
    categories: list[CategoryResponse]
    my_suggestions: list[SuggestionResponse]


class SuggestionEnvelope(BaseModel):
    success: bool = True
    category: SuggestionResponse
    message: str | None = None


class AdminCategoryListEnvelope(BaseModel):
    success: bool = True
    categories: list[AdminCategoryResponse]


class SkillPreviewEnvelope(BaseModel):
    success: bool = True
    skills: list[SkillPreviewEntry]


class MessageEnvelope(BaseModel):
    success: bool = True
    message: str
