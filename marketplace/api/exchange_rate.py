"""Exchange rate API endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from marketplace.api.dependencies import get_exchange_rate_service
from marketplace.models.enums import Currency
from marketplace.services.currency import (
    ExchangeRateService,
    cop_to_usd,
    format_cop,
    format_usd,
    usd_to_cop,
)

router = APIRouter(prefix="/api/v1/exchange-rate", tags=["exchange-rate"])


class ExchangeRateResponse(BaseModel):
    """Current COP/USD rate and, optionally, a converted amount."""

    success: bool = True
    rate: float
    currency: str = "COP/USD"
    converted: float | None = None
    formatted: str | None = None


@router.get("", response_model=ExchangeRateResponse)
async def get_exchange_rate(
    service: Annotated[ExchangeRateService, Depends(get_exchange_rate_service)],
    amount: Annotated[float | None, Query(ge=0)] = None,
    from_currency: Currency = Currency.COP,
):
    """Get the COP per USD rate; with ``amount``, convert it to the other currency."""
    rate = await service.get_rate()
    if amount is None:
        return ExchangeRateResponse(rate=rate)

    if from_currency == Currency.COP:
        converted = cop_to_usd(amount, rate)
        formatted = format_usd(converted)
    else:
        converted = usd_to_cop(amount, rate)
        formatted = format_cop(converted)

    return ExchangeRateResponse(rate=rate, converted=converted, formatted=formatted)
