"""Category suggestion workflow: proposals by users, moderation by admins."""

import logging
import re
import unicodedata
from collections.abc import Iterable
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from marketplace.exceptions import ConflictError, InvalidInputError, NotFoundError
from marketplace.models.category import Category
from marketplace.models.enums import CategoryStatus
from marketplace.models.project import Project
from marketplace.models.user import User
from marketplace.services.skills import (
    add_category_skills,
    clean_skill_names,
    flag_display_duplicates,
    get_category_skill_names,
    merge_skill_names,
)

logger = logging.getLogger(__name__)

# Projects filed under this category while their real category is pending
FALLBACK_CATEGORY = "Otro"

MIN_NAME_LENGTH = 2

_DISALLOWED_NAME_CHARS = re.compile(r"[^a-zA-ZáéíóúÁÉÍÓÚñÑüÜ0-9\s\-/]")
_WHITESPACE = re.compile(r"\s+")
_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")

DUPLICATE_CATEGORY_MESSAGE = "A similar category already exists"


def normalize_category_name(name: str) -> str:
    """Sanitize a suggested name and Title-Case each word.

    "  diseño   de   INTERIORES!! " -> "Diseño De Interiores"
    """
    sanitized = _DISALLOWED_NAME_CHARS.sub("", name.strip())
    sanitized = _WHITESPACE.sub(" ", sanitized).strip()
    return " ".join(word[:1].upper() + word[1:].lower() for word in sanitized.split(" ") if word)


def slugify(name: str) -> str:
    """URL-safe slug: lowercase, accents stripped, non-alphanumerics collapsed to '-'."""
    decomposed = unicodedata.normalize("NFD", name.lower())
    ascii_only = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _NON_SLUG_CHARS.sub("-", ascii_only).strip("-")


class CategoryService:
    """Service for category suggestions and their moderation."""

    def __init__(self, db: Session):
        self.db = db

    # Reads

    def list_approved(self) -> list[Category]:
        """Approved categories with their skills, by name."""
        return (
            self.db.query(Category)
            .options(joinedload(Category.skills))
            .filter(Category.status == CategoryStatus.APPROVED.value)
            .order_by(Category.name)
            .all()
        )

    def list_pending_for_user(self, user_id: int) -> list[Category]:
        """A user's pending suggestions, newest first."""
        return (
            self.db.query(Category)
            .filter(
                Category.suggested_by == user_id,
                Category.status == CategoryStatus.PENDING.value,
            )
            .order_by(Category.created_at.desc(), Category.id.desc())
            .all()
        )

    def list_for_admin(self) -> list[dict[str, Any]]:
        """All categories, pending first, with suggester and project context."""
        categories = (
            self.db.query(Category)
            .options(
                joinedload(Category.suggester),
                joinedload(Category.skills),
                joinedload(Category.related_project).joinedload(Project.employer),
            )
            .order_by(Category.status.desc(), Category.created_at.desc(), Category.id.desc())
            .all()
        )

        result = []
        for category in categories:
            related = category.related_project if category.is_pending else None
            result.append(
                {
                    "id": category.id,
                    "name": category.name,
                    "slug": category.slug,
                    "status": category.status,
                    "suggested_by": category.suggested_by,
                    "suggested_by_name": category.suggester.name if category.suggester else None,
                    "suggested_by_email": category.suggester.email if category.suggester else None,
                    "suggested_skills": category.suggested_skills,
                    "skills": category.skills,
                    "related_project_id": category.related_project_id,
                    "related_project": related,
                    "created_at": category.created_at,
                }
            )
        return result

    def skill_preview(self, category_id: int, target_category_id: int) -> list[dict]:
        """Suggested skills flagged when the target category already has them (any case)."""
        category = self._get(category_id)
        target = self._get(target_category_id)
        existing = get_category_skill_names(self.db, target.id)
        return flag_display_duplicates(category.suggested_skills or [], existing)

    # Suggester operations

    def propose(self, name: str, user: User) -> Category:
        """Create a pending category suggested by ``user``."""
        normalized = normalize_category_name(name)
        if len(normalized) < MIN_NAME_LENGTH:
            raise InvalidInputError("Category name is invalid after formatting")

        slug = slugify(normalized)
        if not slug:
            raise InvalidInputError("Category name is invalid after formatting")
        if self._slug_taken(slug):
            raise ConflictError(DUPLICATE_CATEGORY_MESSAGE)

        category = Category(
            name=normalized,
            slug=slug,
            status=CategoryStatus.PENDING.value,
            suggested_by=user.id,
        )
        self.db.add(category)
        self._commit_or_conflict(DUPLICATE_CATEGORY_MESSAGE)
        self.db.refresh(category)

        logger.info(f"User {user.id} suggested category '{normalized}' ({slug})")
        return category

    def edit(self, category_id: int, name: str, user: User) -> Category:
        """Rename a pending suggestion owned by ``user``."""
        category = (
            self.db.query(Category)
            .filter(
                Category.id == category_id,
                Category.suggested_by == user.id,
                Category.status == CategoryStatus.PENDING.value,
            )
            .first()
        )
        if not category:
            raise NotFoundError("Suggestion not found or already approved")

        trimmed = name.strip()
        if len(trimmed) < MIN_NAME_LENGTH:
            raise InvalidInputError("Category name is too short")
        slug = slugify(trimmed)
        if not slug:
            raise InvalidInputError("Category name is invalid")
        if self._slug_taken(slug, exclude_id=category.id):
            raise ConflictError(DUPLICATE_CATEGORY_MESSAGE)

        category.name = trimmed
        category.slug = slug
        self._commit_or_conflict(DUPLICATE_CATEGORY_MESSAGE)
        self.db.refresh(category)
        return category

    def cancel(self, category_id: int, user: User) -> bool:
        """Delete a pending suggestion owned by ``user``. No-op otherwise."""
        deleted = (
            self.db.query(Category)
            .filter(
                Category.id == category_id,
                Category.suggested_by == user.id,
                Category.status == CategoryStatus.PENDING.value,
            )
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return bool(deleted)

    def link_to_project(self, category_id: int, project: Project, user: User) -> str | None:
        """Attach ``user``'s pending suggestion to a freshly created project.

        Returns the suggestion's name for the project's placeholder, or None
        when the id does not name a pending suggestion of this user. The
        caller commits.
        """
        category = (
            self.db.query(Category)
            .filter(
                Category.id == category_id,
                Category.suggested_by == user.id,
                Category.status == CategoryStatus.PENDING.value,
            )
            .first()
        )
        if not category:
            return None

        category.related_project_id = project.id
        category.suggested_skills = list(project.skills_required)
        return category.name

    # Admin operations

    def approve(
        self,
        category_id: int,
        new_name: str | None = None,
        approved_skills: Iterable[str] | None = None,
    ) -> Category:
        """Approve a pending suggestion, optionally renaming it first."""
        category = self._get(category_id)
        if not category.is_pending:
            raise ConflictError(f'Category "{category.name}" is already approved')

        final_name = category.name
        new_slug = None
        if new_name and len(new_name.strip()) >= MIN_NAME_LENGTH:
            final_name = new_name.strip()
            new_slug = slugify(final_name)
            if not new_slug:
                raise InvalidInputError(f'"{final_name}" is not a valid category name')
            if self._slug_taken(new_slug, exclude_id=category.id):
                raise ConflictError(
                    f'A category with a name similar to "{final_name}" already exists'
                )

        skills = clean_skill_names(approved_skills)

        category.name = final_name
        if new_slug:
            category.slug = new_slug
        category.status = CategoryStatus.APPROVED.value

        if category.related_project_id:
            project = self.db.get(Project, category.related_project_id)
            if project:
                self._resolve_project(project, final_name, skills)

        conflict_message = f'A category with a name similar to "{final_name}" already exists'
        try:
            self.db.flush()
            add_category_skills(self.db, category.id, skills)
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(conflict_message) from None
        self._commit_or_conflict(conflict_message)
        self.db.refresh(category)

        logger.info(
            f"Approved category {category.id} as '{final_name}' with {len(skills)} skills "
            f"(project: {category.related_project_id})"
        )
        return category

    def reassign(
        self,
        category_id: int,
        existing_category_id: int,
        approved_skills: Iterable[str] | None = None,
    ) -> Category:
        """Fold a pending suggestion into an existing category and delete it.

        Returns the existing category.
        """
        category = self._get(category_id)
        target = self.db.get(Category, existing_category_id)
        if not target:
            raise NotFoundError("Existing category not found")
        if not category.is_pending:
            raise ConflictError(f'Category "{category.name}" is already approved')
        if target.id == category.id or target.is_pending:
            raise InvalidInputError("Target must be a different, approved category")

        skills = clean_skill_names(approved_skills)

        if category.related_project_id:
            project = self.db.get(Project, category.related_project_id)
            if project:
                merged = merge_skill_names(get_category_skill_names(self.db, target.id), skills)
                self._resolve_project(project, target.name, merged)

        add_category_skills(self.db, target.id, skills)
        self.db.delete(category)
        self.db.commit()
        self.db.refresh(target)

        logger.info(f"Reassigned suggestion {category_id} to category {target.id} ({target.name})")
        return target

    def reject(self, category_id: int) -> None:
        """Delete a pending suggestion."""
        category = self._get(category_id)
        if not category.is_pending:
            raise ConflictError(f'Category "{category.name}" is already approved')
        self.db.delete(category)
        self.db.commit()
        logger.info(f"Rejected category suggestion {category_id}")

    # Data migration

    def link_legacy_suggestions(self) -> int:
        """Link suggestions made before projects carried an explicit link id.

        For each suggester, the most recent unlinked pending suggestion is
        linked to their most recent project filed under the fallback category
        that no suggestion references yet. Returns the number of links made.
        """
        referenced = {
            project_id
            for (project_id,) in self.db.query(Category.related_project_id)
            .filter(Category.related_project_id.isnot(None))
            .all()
        }
        unlinked = (
            self.db.query(Category)
            .filter(
                Category.status == CategoryStatus.PENDING.value,
                Category.related_project_id.is_(None),
                Category.suggested_by.isnot(None),
            )
            .order_by(Category.created_at.desc(), Category.id.desc())
            .all()
        )

        linked = 0
        seen_users: set[int] = set()
        for category in unlinked:
            if category.suggested_by in seen_users:
                continue
            seen_users.add(category.suggested_by)

            query = self.db.query(Project).filter(
                Project.employer_id == category.suggested_by,
                Project.category == FALLBACK_CATEGORY,
            )
            if referenced:
                query = query.filter(Project.id.notin_(referenced))
            project = query.order_by(Project.created_at.desc(), Project.id.desc()).first()
            if not project:
                continue

            category.related_project_id = project.id
            category.suggested_skills = list(project.skills_required)
            if not project.suggested_category_name:
                project.suggested_category_name = category.name
            referenced.add(project.id)
            linked += 1
            logger.info(f"Linked legacy suggestion {category.id} to project {project.id}")

        self.db.commit()
        return linked

    # Helpers

    def _get(self, category_id: int) -> Category:
        category = self.db.get(Category, category_id)
        if not category:
            raise NotFoundError("Category not found")
        return category

    def _slug_taken(self, slug: str, exclude_id: int | None = None) -> bool:
        query = self.db.query(Category.id).filter(Category.slug == slug)
        if exclude_id is not None:
            query = query.filter(Category.id != exclude_id)
        return query.first() is not None

    def _commit_or_conflict(self, message: str) -> None:
        # The unique slug index is the authority; the lookup above is a fast path.
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(message) from None

    @staticmethod
    def _resolve_project(project: Project, category_name: str, skills: list[str]) -> None:
        project.category = category_name
        project.suggested_category_name = None
        project.suggested_skills = None
        project.skills_required = skills
