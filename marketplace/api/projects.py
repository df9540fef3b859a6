"""Project API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from marketplace.api.dependencies import get_category_service, get_current_user, require_ownership
from marketplace.database import get_db
from marketplace.exceptions import InvalidInputError, NotFoundError
from marketplace.models.application import Application
from marketplace.models.category import Category
from marketplace.models.enums import ProjectStatus
from marketplace.models.project import Project
from marketplace.models.user import User
from marketplace.schemas.application import (
    ProjectApplicationListEnvelope,
    ProjectApplicationResponse,
)
from marketplace.schemas.category import MessageEnvelope
from marketplace.schemas.project import (
    ProjectCreate,
    ProjectEnvelope,
    ProjectListEnvelope,
    ProjectResponse,
    ProjectStatusUpdate,
    ProjectUpdate,
)
from marketplace.services.category_service import CategoryService
from marketplace.services.project_query import (
    DEFAULT_PAGE_SIZE,
    ProjectFilters,
    ProjectQuery,
    parse_skills,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/projects", tags=["projects"])


def get_project(db: Session, project_id: int) -> Project:
    """Get a project or fail with 404."""
    project = db.get(Project, project_id)
    if not project:
        raise NotFoundError("Project not found")
    return project


@router.get("", response_model=ProjectListEnvelope)
def list_projects(
    db: Annotated[Session, Depends(get_db)],
    search: str | None = None,
    category: str | None = None,
    budget_min: Annotated[float | None, Query(alias="budgetMin")] = None,
    budget_max: Annotated[float | None, Query(alias="budgetMax")] = None,
    skills: str | None = None,
    user_id: Annotated[int | None, Query(alias="userId")] = None,
    status_filter: Annotated[ProjectStatus, Query(alias="status")] = ProjectStatus.OPEN,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
):
    """List projects with search, filters and pagination.

    Open projects by default; ``userId`` lists every project of that employer
    regardless of status.
    """
    filters = ProjectFilters(
        search=search,
        category=category,
        budget_min=budget_min,
        budget_max=budget_max,
        skills=parse_skills(skills),
        user_id=user_id,
        status=status_filter.value,
        page=page,
        limit=limit,
    )
    result = ProjectQuery(db, filters).fetch()

    return ProjectListEnvelope(
        projects=[ProjectResponse.model_validate(p) for p in result.items],
        count=len(result.items),
        total_count=result.total_count,
        total_pages=result.total_pages,
        current_page=result.current_page,
    )


@router.post("", response_model=ProjectEnvelope)
def create_project(
    project_data: ProjectCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    category_service: Annotated[CategoryService, Depends(get_category_service)],
):
    """Create a new project, optionally linking a pending category suggestion."""
    project = Project(
        title=project_data.title,
        description=project_data.description,
        category=project_data.category,
        budget=project_data.budget,
        budget_currency=project_data.budget_currency.value,
        employer_id=current_user.id,
        status=ProjectStatus.OPEN.value,
        skills_required=project_data.skills_required,
    )
    db.add(project)
    db.flush()

    if project_data.suggested_category_id:
        suggested_name = category_service.link_to_project(
            project_data.suggested_category_id, project, current_user
        )
        if suggested_name:
            project.suggested_category_name = suggested_name
            project.suggested_skills = list(project.skills_required)

    db.commit()
    db.refresh(project)
    logger.info(f"User {current_user.id} created project {project.id}")

    return ProjectEnvelope(
        project=ProjectResponse.model_validate(project),
        message="Project created successfully",
    )


@router.get("/{project_id}", response_model=ProjectEnvelope)
def read_project(
    project_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    """Get a project with its employer info."""
    project = get_project(db, project_id)
    return ProjectEnvelope(project=ProjectResponse.model_validate(project))


@router.put("/{project_id}", response_model=ProjectEnvelope)
def update_project(
    project_id: int,
    project_data: ProjectUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Replace a project's editable fields (owner only)."""
    project = get_project(db, project_id)
    require_ownership(
        project.employer_id, current_user, "You don't have permission to edit this project"
    )

    project.title = project_data.title
    project.description = project_data.description
    project.category = project_data.category
    project.budget = project_data.budget
    project.budget_currency = project_data.budget_currency.value
    project.skills_required = project_data.skills_required

    db.commit()
    db.refresh(project)
    return ProjectEnvelope(project=ProjectResponse.model_validate(project))


@router.patch("/{project_id}", response_model=ProjectEnvelope)
def change_project_status(
    project_id: int,
    status_data: ProjectStatusUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Move an open project to closed, completed or cancelled (owner only).

    Existing applications keep their state.
    """
    project = get_project(db, project_id)
    require_ownership(
        project.employer_id, current_user, "You don't have permission to modify this project"
    )

    if ProjectStatus(project.status).is_terminal():
        raise InvalidInputError(f"Project is already {project.status}")

    project.status = status_data.status
    db.commit()
    db.refresh(project)
    logger.info(f"Project {project.id} moved to {project.status}")
    return ProjectEnvelope(project=ProjectResponse.model_validate(project))


@router.delete("/{project_id}", response_model=MessageEnvelope)
def delete_project(
    project_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Delete a project and its applications (owner only)."""
    project = get_project(db, project_id)
    require_ownership(
        project.employer_id, current_user, "You don't have permission to delete this project"
    )

    db.query(Category).filter(Category.related_project_id == project.id).update(
        {Category.related_project_id: None}, synchronize_session=False
    )
    db.delete(project)
    db.commit()
    logger.info(f"Project {project_id} deleted by user {current_user.id}")

    return MessageEnvelope(message="Project deleted successfully")


@router.get("/{project_id}/applications", response_model=ProjectApplicationListEnvelope)
def list_project_applications(
    project_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get all applications for a project (owner only), newest first."""
    project = get_project(db, project_id)
    require_ownership(project.employer_id, current_user, "You don't have permission")

    applications = (
        db.query(Application)
        .filter(Application.project_id == project.id)
        .order_by(Application.created_at.desc(), Application.id.desc())
        .all()
    )
    return ProjectApplicationListEnvelope(
        applications=[ProjectApplicationResponse.model_validate(a) for a in applications]
    )
