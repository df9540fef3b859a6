"""Pydantic schemas for API requests and responses."""

from marketplace.schemas.application import (
    ApplicationCreate,
    ApplicationResponse,
    ApplicationUpdate,
)
from marketplace.schemas.auth import AuthResponse, SignInRequest, UserResponse
from marketplace.schemas.category import (
    CategoryModerationRequest,
    CategoryResponse,
    CategorySuggestionCreate,
    CategorySuggestionUpdate,
)
from marketplace.schemas.project import (
    ProjectCreate,
    ProjectResponse,
    ProjectStatusUpdate,
    ProjectUpdate,
)

__all__ = [
    "SignInRequest",
    "AuthResponse",
    "UserResponse",
    "ProjectCreate",
    "ProjectUpdate",
    "ProjectStatusUpdate",
    "ProjectResponse",
    "ApplicationCreate",
    "ApplicationUpdate",
    "ApplicationResponse",
    "CategorySuggestionCreate",
    "CategorySuggestionUpdate",
    "CategoryModerationRequest",
    "CategoryResponse",
]
