"""Authentication API endpoints."""

import hmac
from typing import Annotated

from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session

from marketplace.api.dependencies import get_current_user
from marketplace.config import get_settings
from marketplace.database import get_db
from marketplace.exceptions import UnauthorizedError
from marketplace.models.user import User
from marketplace.schemas.auth import AuthResponse, MeResponse, SignInRequest, UserResponse
from marketplace.services.auth import create_access_token, sign_in

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/sign-in", response_model=AuthResponse)
def oauth_sign_in(
    profile: SignInRequest,
    db: Annotated[Session, Depends(get_db)],
    x_auth_callback_secret: Annotated[str | None, Header()] = None,
):
    """Record a completed OAuth sign-in and issue a session token.

    Called by the trusted sign-in front-end once the provider has verified
    the email.
    """
    expected = get_settings().auth_callback_secret
    if not x_auth_callback_secret or not hmac.compare_digest(
        x_auth_callback_secret.encode(), expected.encode()
    ):
        raise UnauthorizedError("Invalid sign-in callback secret")

    user = sign_in(db, profile.email, profile.name, profile.image)

    return AuthResponse(
        access_token=create_access_token(profile.email),
        user=UserResponse.model_validate(user) if user else None,
    )


@router.get("/me", response_model=MeResponse)
def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Get current user information."""
    return MeResponse(user=UserResponse.model_validate(current_user))
