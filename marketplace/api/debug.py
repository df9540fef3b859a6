"""Debug API endpoints for development and troubleshooting."""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from marketplace.config import Settings, get_settings
from marketplace.exceptions import ForbiddenError

router = APIRouter(prefix="/debug", tags=["debug"])


class ConfigStatusResponse(BaseModel):
    """Which settings are configured. Never carries secret values."""

    environment: str
    database_url_set: bool
    jwt_secret_set: bool
    auth_callback_secret_set: bool
    admin_emails_count: int
    exchange_rate_url: str
    cors_origins: list[str]


@router.get("/config", response_model=ConfigStatusResponse)
def get_config_status(
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Report which settings are set. Disabled in production unless ENABLE_DEBUG is on."""
    if settings.is_production and not settings.enable_debug:
        raise ForbiddenError("Debug endpoints are disabled in production")

    defaults = Settings.model_fields
    return ConfigStatusResponse(
        environment=settings.environment,
        database_url_set=bool(settings.database_url),
        jwt_secret_set=settings.jwt_secret != defaults["jwt_secret"].default,
        auth_callback_secret_set=(
            settings.auth_callback_secret != defaults["auth_callback_secret"].default
        ),
        admin_emails_count=len(settings.admin_emails),
        exchange_rate_url=settings.exchange_rate_url,
        cors_origins=settings.cors_origins,
    )
