"""FastAPI dependencies for caller identity, authorization and services."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from marketplace.config import get_settings
from marketplace.database import get_db
from marketplace.exceptions import ForbiddenError, NotFoundError, UnauthorizedError
from marketplace.models.enums import UserRole
from marketplace.models.user import User
from marketplace.services.auth import decode_access_token, get_user_by_email
from marketplace.services.category_service import CategoryService
from marketplace.services.currency import ExchangeRateService, TTLCache

# auto_error=False so a missing header is a 401 in our envelope
security = HTTPBearer(auto_error=False)


def get_session_email(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str:
    """Email of the active session, from the bearer token."""
    if credentials is None:
        raise UnauthorizedError("Unauthorized")

    payload = decode_access_token(credentials.credentials)
    if payload is None or not payload.get("sub"):
        raise UnauthorizedError("Invalid authentication credentials")

    return payload["sub"]


def get_optional_session_email(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str | None:
    """Email of the active session, or None for anonymous callers."""
    if credentials is None:
        return None
    payload = decode_access_token(credentials.credentials)
    if payload is None:
        return None
    return payload.get("sub")


def resolve_user(db: Session, email: str) -> User:
    """Look up the user row behind a session.

    A session can outlive a failed sign-in write, so a missing row is a 404
    rather than an assumption.
    """
    user = get_user_by_email(db, email)
    if user is None:
        raise NotFoundError("User not found")
    return user


def get_current_user(
    email: Annotated[str, Depends(get_session_email)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the current authenticated user."""
    return resolve_user(db, email)


def get_optional_user(
    email: Annotated[str | None, Depends(get_optional_session_email)],
    db: Annotated[Session, Depends(get_db)],
) -> User | None:
    """Get the current user if there is a session with a user row."""
    if email is None:
        return None
    return get_user_by_email(db, email)


def require_ownership(owner_id: int | None, user: User, message: str = "Forbidden") -> None:
    """Only the owner of a resource may continue."""
    if owner_id != user.id:
        raise ForbiddenError(message)


def require_role(user: User, role: UserRole) -> None:
    """Only callers holding ``role`` may continue."""
    if user.role != role.value:
        raise ForbiddenError("Unauthorized")


def get_admin_user(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Get the current user, who must be an admin."""
    require_role(current_user, UserRole.ADMIN)
    return current_user


def get_category_service(
    db: Annotated[Session, Depends(get_db)],
) -> CategoryService:
    """Get category service with dependencies."""
    return CategoryService(db)


@lru_cache
def get_exchange_rate_service() -> ExchangeRateService:
    """Process-wide exchange rate service; its cache is shared across requests."""
    settings = get_settings()
    return ExchangeRateService(
        cache=TTLCache(ttl_seconds=settings.exchange_rate_ttl_seconds),
        url=settings.exchange_rate_url,
        fallback_rate=settings.fallback_exchange_rate,
        timeout=settings.exchange_rate_timeout,
    )
