"""Authentication schemas."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class SignInRequest(BaseModel):
    """Verified OAuth profile reported by the sign-in front-end."""

    email: EmailStr = Field(..., max_length=255)
    name: str | None = Field(None, max_length=255)
    image: str | None = Field(None, max_length=500)


class UserResponse(BaseModel):
    """User information response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str | None
    image: str | None
    subscription_tier: str
    role: str


class AuthResponse(BaseModel):
    """Session token issued after sign-in.

    ``user`` is None when the local user row could not be written.
    """

    success: bool = True
    access_token: str
    token_type: str = "bearer"  # noqa: S105
    user: UserResponse | None


class MeResponse(BaseModel):
    """Current user envelope."""

    success: bool = True
    user: UserResponse
