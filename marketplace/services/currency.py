"""Exchange rates between COP and USD, and currency formatting."""

import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

import httpx

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class _Entry(Generic[T]):
    value: T
    stored_at: float


class TTLCache(Generic[T]):
    """A single cached value that expires ``ttl_seconds`` after it was stored.

    ``clock`` returns seconds; tests pass a fake one to move time.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entry: _Entry[T] | None = None

    def get(self) -> T | None:
        """Return the cached value if still fresh."""
        if self._entry is None:
            return None
        if self.clock() - self._entry.stored_at >= self.ttl_seconds:
            return None
        return self._entry.value

    def set(self, value: T) -> None:
        self._entry = _Entry(value=value, stored_at=self.clock())

    def clear(self) -> None:
        self._entry = None

    async def get_or_refresh(self, loader: Callable[[], Awaitable[T | None]]) -> T | None:
        """Return the fresh cached value, or load, store and return a new one.

        A None result from ``loader`` is returned but not cached.
        """
        cached = self.get()
        if cached is not None:
            return cached
        value = await loader()
        if value is not None:
            self.set(value)
        return value


class ExchangeRateService:
    """COP-per-USD rate from open.er-api.com, cached with a TTL."""

    def __init__(
        self,
        cache: TTLCache[float],
        url: str,
        fallback_rate: float,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.cache = cache
        self.url = url
        self.fallback_rate = fallback_rate
        self.timeout = timeout
        self.transport = transport

    async def get_rate(self) -> float:
        """Current rate; the fallback when the provider is unavailable."""
        rate = await self.cache.get_or_refresh(self._fetch_rate)
        if rate is None:
            logger.warning(f"Using fallback exchange rate {self.fallback_rate}")
            return self.fallback_rate
        return rate

    async def _fetch_rate(self) -> float | None:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(self.url)
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error fetching exchange rate: {e}")
            return None

        if not isinstance(data, dict) or data.get("result") != "success":
            logger.warning(f"Unexpected exchange rate payload: {data}")
            return None
        rates = data.get("rates")
        rate = rates.get("COP") if isinstance(rates, dict) else None
        if not isinstance(rate, int | float) or rate <= 0:
            logger.warning(f"Unexpected exchange rate payload: {data}")
            return None
        return float(rate)


def cop_to_usd(cop_amount: float, rate: float) -> float:
    return cop_amount / rate


def usd_to_cop(usd_amount: float, rate: float) -> float:
    return usd_amount * rate


def format_cop(amount: float) -> str:
    """Colombian style, no decimals: ``$ 1.500.000``."""
    return "$ " + f"{round(amount):,}".replace(",", ".")


def format_usd(amount: float) -> str:
    """US style, two decimals: ``$1,234.56``."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"
