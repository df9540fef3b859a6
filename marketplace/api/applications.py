"""Application API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from marketplace.api.dependencies import get_current_user, require_ownership
from marketplace.database import get_db
from marketplace.exceptions import ConflictError, ForbiddenError, InvalidInputError, NotFoundError
from marketplace.models.application import Application
from marketplace.models.enums import ApplicationStatus, ProjectStatus
from marketplace.models.project import Project
from marketplace.models.user import User
from marketplace.schemas.application import (
    ApplicationCreate,
    ApplicationEnvelope,
    ApplicationListEnvelope,
    ApplicationResponse,
    ApplicationUpdate,
)
from marketplace.schemas.category import MessageEnvelope

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/applications", tags=["applications"])

DUPLICATE_APPLICATION_MESSAGE = "You have already applied to this project"


def get_application(db: Session, application_id: int) -> Application:
    """Get an application or fail with 404."""
    application = db.get(Application, application_id)
    if not application:
        raise NotFoundError("Application not found")
    return application


@router.post("", response_model=ApplicationEnvelope)
def create_application(
    application_data: ApplicationCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Apply to an open project. One application per project and freelancer."""
    project = db.get(Project, application_data.project_id)
    if not project:
        raise NotFoundError("Project not found")
    if project.status != ProjectStatus.OPEN.value:
        raise InvalidInputError("This project is not open for applications")

    # Fast path; the unique constraint below is what actually guarantees it
    existing = (
        db.query(Application.id)
        .filter(
            Application.project_id == project.id,
            Application.freelancer_id == current_user.id,
        )
        .first()
    )
    if existing:
        raise ConflictError(DUPLICATE_APPLICATION_MESSAGE)

    application = Application(
        project_id=project.id,
        freelancer_id=current_user.id,
        proposal=application_data.proposal,
        bid=application_data.bid,
        status=ApplicationStatus.PENDING.value,
    )
    db.add(application)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(DUPLICATE_APPLICATION_MESSAGE) from None
    db.refresh(application)
    logger.info(f"User {current_user.id} applied to project {project.id}")

    return ApplicationEnvelope(
        application=ApplicationResponse.model_validate(application),
        message="Application submitted successfully",
    )


@router.get("", response_model=ApplicationListEnvelope)
def list_my_applications(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get the current user's applications, newest first."""
    applications = (
        db.query(Application)
        .filter(Application.freelancer_id == current_user.id)
        .order_by(Application.created_at.desc(), Application.id.desc())
        .all()
    )
    return ApplicationListEnvelope(
        applications=[ApplicationResponse.model_validate(a) for a in applications]
    )


@router.get("/{application_id}", response_model=ApplicationEnvelope)
def read_application(
    application_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get an application. Visible to the applicant and the project owner."""
    application = get_application(db, application_id)
    if current_user.id not in (application.freelancer_id, application.project_employer_id):
        raise ForbiddenError("You don't have permission")
    return ApplicationEnvelope(application=ApplicationResponse.model_validate(application))


@router.put("/{application_id}", response_model=ApplicationEnvelope)
def update_application(
    application_id: int,
    application_data: ApplicationUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Edit an own application's proposal and bid."""
    application = get_application(db, application_id)
    require_ownership(
        application.freelancer_id,
        current_user,
        "You don't have permission to edit this application",
    )

    application.proposal = application_data.proposal
    application.bid = application_data.bid
    db.commit()
    db.refresh(application)
    return ApplicationEnvelope(application=ApplicationResponse.model_validate(application))


@router.delete("/{application_id}", response_model=MessageEnvelope)
def delete_application(
    application_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Withdraw an own application."""
    application = get_application(db, application_id)
    require_ownership(
        application.freelancer_id,
        current_user,
        "You don't have permission to delete this application",
    )

    db.delete(application)
    db.commit()
    return MessageEnvelope(message="Application deleted successfully")
