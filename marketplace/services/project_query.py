"""Filtered, paginated project listing."""

import math
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload, selectinload

from marketplace.models.enums import ProjectStatus
from marketplace.models.project import Project, ProjectSkill

DEFAULT_PAGE_SIZE = 12
MAX_PAGE_SIZE = 50
MAX_PAGE_NUMBER = 10_000


def parse_skills(raw: str | None) -> list[str]:
    """Split a comma-separated skills parameter, dropping blanks."""
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def _contains_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


@dataclass
class ProjectFilters:
    """Optional listing filters. ``user_id`` replaces the status filter."""

    search: str | None = None
    category: str | None = None
    budget_min: float | None = None
    budget_max: float | None = None
    skills: list[str] = field(default_factory=list)
    user_id: int | None = None
    status: str = ProjectStatus.OPEN.value
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE

    @property
    def page_size(self) -> int:
        return max(1, min(self.limit, MAX_PAGE_SIZE))

    @property
    def page_number(self) -> int:
        return max(1, min(self.page, MAX_PAGE_NUMBER))


@dataclass
class ProjectPage:
    """One page of projects plus totals for the whole filter."""

    items: list[Project]
    total_count: int
    total_pages: int
    current_page: int
    limit: int


class ProjectQuery:
    """Builds the listing query from a set of filters."""

    def __init__(self, db: Session, filters: ProjectFilters):
        self.db = db
        self.filters = filters

    def predicates(self) -> list[Any]:
        """Conditions for the current filters, in a fixed order."""
        f = self.filters
        conditions: list[Any] = []

        if f.user_id is not None:
            conditions.append(Project.employer_id == f.user_id)
        else:
            conditions.append(Project.status == f.status)

        if f.search:
            pattern = _contains_pattern(f.search)
            conditions.append(
                or_(
                    Project.title.ilike(pattern, escape="\\"),
                    Project.description.ilike(pattern, escape="\\"),
                )
            )

        if f.category:
            conditions.append(Project.category == f.category)

        if f.budget_min is not None:
            conditions.append(Project.budget >= f.budget_min)

        if f.budget_max is not None:
            conditions.append(Project.budget <= f.budget_max)

        if f.skills:
            # Overlap: any required skill in the requested list
            conditions.append(Project.skill_entries.any(ProjectSkill.name.in_(f.skills)))

        return conditions

    def count(self) -> int:
        """Number of projects matching the filters, ignoring pagination."""
        return self.db.query(Project.id).filter(*self.predicates()).count()

    def fetch(self) -> ProjectPage:
        """Fetch the requested page, newest first."""
        limit = self.filters.page_size
        page = self.filters.page_number
        total_count = self.count()

        items = (
            self.db.query(Project)
            .options(joinedload(Project.employer), selectinload(Project.skill_entries))
            .filter(*self.predicates())
            .order_by(Project.created_at.desc(), Project.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )

        return ProjectPage(
            items=items,
            total_count=total_count,
            total_pages=math.ceil(total_count / limit),
            current_page=page,
            limit=limit,
        )
