"""SQLAlchemy models."""

from marketplace.models.application import Application
from marketplace.models.category import Category, CategorySkill
from marketplace.models.project import Project, ProjectSkill
from marketplace.models.user import User

__all__ = [
    "User",
    "Project",
    "ProjectSkill",
    "Application",
    "Category",
    "CategorySkill",
]
