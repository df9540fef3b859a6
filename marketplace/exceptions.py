"""
Domain exceptions for the marketplace API.

Services raise these; the handlers registered in ``marketplace.main`` turn
them into the ``{"success": false, "error": ...}`` envelope with the
matching HTTP status.
"""

from typing import Any

from fastapi import status


class MarketplaceError(Exception):
    """Base exception for all marketplace errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to the error envelope used in API responses."""
        body: dict[str, Any] = {"success": False, "error": self.message, "code": self.code}
        if self.details:
            body["details"] = self.details
        return body


class UnauthorizedError(MarketplaceError):
    """No active session."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(MarketplaceError):
    """Session present but the caller lacks rights on the resource."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(MarketplaceError):
    """Resource (or the session's user row) not found."""

    status_code = status.HTTP_404_NOT_FOUND


class InvalidInputError(MarketplaceError):
    """Input failed validation or violates a state precondition."""

    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(MarketplaceError):
    """Uniqueness violation (duplicate application, duplicate category slug)."""

    status_code = status.HTTP_409_CONFLICT
