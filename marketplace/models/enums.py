"""Enums for model fields."""

from enum import Enum


class SubscriptionTier(str, Enum):
    """Subscription plans for users."""

    FREE = "free"
    PREMIUM = "premium"


class UserRole(str, Enum):
    """Roles that gate admin-only operations."""

    USER = "user"
    ADMIN = "admin"


class Currency(str, Enum):
    """Currencies a project budget can be expressed in."""

    COP = "COP"
    USD = "USD"


class ProjectStatus(str, Enum):
    """Lifecycle of a project. Every status other than OPEN is terminal."""

    OPEN = "open"
    CLOSED = "closed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    def is_terminal(self) -> bool:
        """Check if no further transition is allowed from this status."""
        return self != ProjectStatus.OPEN


class ApplicationStatus(str, Enum):
    """Review state of an application."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class CategoryStatus(str, Enum):
    """Moderation state of a category."""

    PENDING = "pending"
    APPROVED = "approved"
