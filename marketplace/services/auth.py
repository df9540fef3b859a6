"""Authentication service for session tokens and OAuth sign-in bookkeeping."""

import logging
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from marketplace.config import get_settings
from marketplace.models.enums import SubscriptionTier, UserRole
from marketplace.models.user import User

logger = logging.getLogger(__name__)

settings = get_settings()

DEFAULT_DISPLAY_NAME = "User"


def create_access_token(email: str) -> str:
    """Create a JWT session token for an OAuth-verified email."""
    expire = datetime.now(UTC) + timedelta(minutes=settings.jwt_expiration_minutes)
    to_encode = {
        "sub": email,
        "exp": expire,
    }
    encoded_jwt = jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    return encoded_jwt


def decode_access_token(token: str) -> dict | None:
    """Decode and validate a JWT token."""
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        return payload
    except JWTError:
        return None


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == email).first()


def sign_in(
    db: Session, email: str, name: str | None = None, image: str | None = None
) -> User | None:
    """Create the user on first sign-in, refresh name and avatar afterwards.

    A database failure here does not block sign-in: it is logged and None is
    returned, so a session may exist without a user row. Handlers resolve
    the user per request and answer 404 in that case.
    """
    try:
        user = get_user_by_email(db, email)
        if user is None:
            user = User(
                email=email,
                name=name or DEFAULT_DISPLAY_NAME,
                image=image,
                subscription_tier=SubscriptionTier.FREE.value,
                role=UserRole.USER.value,
            )
            db.add(user)
            db.commit()
            logger.info(f"New user created: {email}")
        else:
            user.name = name or DEFAULT_DISPLAY_NAME
            user.image = image
            db.commit()
            logger.info(f"User updated: {email}")
        db.refresh(user)
        return user
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning(f"Error saving user {email} to database, continuing sign-in: {e}")
        return None
