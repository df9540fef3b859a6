"""User model."""

from sqlalchemy import Column, Integer, String

from marketplace.database import Base
from marketplace.models.enums import SubscriptionTier, UserRole
from marketplace.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """User created on first OAuth sign-in and refreshed on every later one."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=True)
    image = Column(String(500), nullable=True)  # avatar URL from the OAuth provider
    subscription_tier = Column(String(50), nullable=False, default=SubscriptionTier.FREE.value)
    role = Column(String(50), nullable=False, default=UserRole.USER.value)
