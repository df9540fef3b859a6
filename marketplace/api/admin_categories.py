"""Admin API endpoints for category moderation."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from marketplace.api.dependencies import get_admin_user, get_category_service
from marketplace.exceptions import InvalidInputError
from marketplace.models.user import User
from marketplace.schemas.category import (
    AdminCategoryListEnvelope,
    AdminCategoryResponse,
    CategoryModerationRequest,
    MessageEnvelope,
    SkillPreviewEntry,
    SkillPreviewEnvelope,
    SuggestionEnvelope,
    SuggestionResponse,
)
from marketplace.services.category_service import CategoryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/admin/categories", tags=["admin"])


@router.get("", response_model=AdminCategoryListEnvelope)
def list_all_categories(
    admin: Annotated[User, Depends(get_admin_user)],
    category_service: Annotated[CategoryService, Depends(get_category_service)],
):
    """All categories for moderation, pending suggestions first."""
    return AdminCategoryListEnvelope(
        categories=[
            AdminCategoryResponse.model_validate(c) for c in category_service.list_for_admin()
        ]
    )


@router.get("/{category_id}/skill-preview", response_model=SkillPreviewEnvelope)
def preview_skills(
    category_id: int,
    target_category_id: int,
    admin: Annotated[User, Depends(get_admin_user)],
    category_service: Annotated[CategoryService, Depends(get_category_service)],
):
    """Preview a suggestion's skills against an existing category before reassigning."""
    entries = category_service.skill_preview(category_id, target_category_id)
    return SkillPreviewEnvelope(skills=[SkillPreviewEntry(**entry) for entry in entries])


@router.patch("", response_model=SuggestionEnvelope)
def moderate_category(
    request: CategoryModerationRequest,
    admin: Annotated[User, Depends(get_admin_user)],
    category_service: Annotated[CategoryService, Depends(get_category_service)],
):
    """Approve a suggestion (optionally renamed) or fold it into an existing category."""
    if request.action == "approve":
        category = category_service.approve(
            request.id, new_name=request.new_name, approved_skills=request.approved_skills
        )
        message = f'Category "{category.name}" approved'
    else:
        if request.existing_category_id is None:
            raise InvalidInputError("existing_category_id is required to reassign")
        category = category_service.reassign(
            request.id,
            request.existing_category_id,
            approved_skills=request.approved_skills,
        )
        message = f'Suggestion merged into "{category.name}"'

    logger.info(f"Admin {admin.id}: {request.action} on category {request.id}")
    return SuggestionEnvelope(category=SuggestionResponse.model_validate(category), message=message)


@router.delete("", response_model=MessageEnvelope)
def reject_category(
    category_id: Annotated[int, Query(alias="id")],
    admin: Annotated[User, Depends(get_admin_user)],
    category_service: Annotated[CategoryService, Depends(get_category_service)],
):
    """Reject a pending suggestion."""
    category_service.reject(category_id)
    return MessageEnvelope(message="Category suggestion rejected")
