"""Category API endpoints for suggesters."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from marketplace.api.dependencies import get_category_service, get_current_user, get_optional_user
from marketplace.models.user import User
from marketplace.schemas.category import (
    CategoryListEnvelope,
    CategoryResponse,
    CategorySuggestionCreate,
    CategorySuggestionUpdate,
    MessageEnvelope,
    SuggestionEnvelope,
    SuggestionResponse,
)
from marketplace.services.category_service import CategoryService

router = APIRouter(prefix="/api/v1/categories", tags=["categories"])


@router.get("", response_model=CategoryListEnvelope)
def list_categories(
    category_service: Annotated[CategoryService, Depends(get_category_service)],
    current_user: Annotated[User | None, Depends(get_optional_user)],
):
    """Approved categories, plus the caller's own pending suggestions."""
    categories = category_service.list_approved()
    my_suggestions = (
        category_service.list_pending_for_user(current_user.id) if current_user else []
    )
    return CategoryListEnvelope(
        categories=[CategoryResponse.model_validate(c) for c in categories],
        my_suggestions=[SuggestionResponse.model_validate(c) for c in my_suggestions],
    )


@router.post("", response_model=SuggestionEnvelope)
def suggest_category(
    suggestion: CategorySuggestionCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    category_service: Annotated[CategoryService, Depends(get_category_service)],
):
    """Suggest a new category; it stays pending until an admin reviews it."""
    category = category_service.propose(suggestion.name, current_user)
    return SuggestionEnvelope(
        category=SuggestionResponse.model_validate(category),
        message="Category suggestion submitted for review",
    )


@router.put("", response_model=SuggestionEnvelope)
def edit_suggestion(
    suggestion: CategorySuggestionUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    category_service: Annotated[CategoryService, Depends(get_category_service)],
):
    """Rename an own pending suggestion."""
    category = category_service.edit(suggestion.id, suggestion.name, current_user)
    return SuggestionEnvelope(
        category=SuggestionResponse.model_validate(category),
        message="Category suggestion updated",
    )


@router.delete("", response_model=MessageEnvelope)
def cancel_suggestion(
    category_id: Annotated[int, Query(alias="id")],
    current_user: Annotated[User, Depends(get_current_user)],
    category_service: Annotated[CategoryService, Depends(get_category_service)],
):
    """Withdraw an own pending suggestion. Deleting twice is not an error."""
    category_service.cancel(category_id, current_user)
    return MessageEnvelope(message="Category suggestion cancelled")
