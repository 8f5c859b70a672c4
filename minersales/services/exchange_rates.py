"""
Exchange Rate Service.

Converts foreign-currency amounts (card expenses arrive in AED, EUR or
GBP) to USD before they reach the engine.  Rates come from an injected
fetch callable and are cached with a time-to-live; when no fetcher is
configured or the fetch fails, the configured fixed rates are used.

The cache is an injected collaborator owned by the service instance, not
module state, so two services never share stale rates by accident.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Mapping
from decimal import Decimal
from typing import Generic, Optional, TypeVar, Union

from minersales.config import AppConfig
from minersales.logger import StructuredLogger
from minersales.models.enums import Currency
from minersales.services.base_service import BaseService
from minersales.utils.numbers import to_decimal

__all__ = ["ExchangeRateService", "RateFetcher", "TTLCache"]

V = TypeVar("V")

# Returns currency -> USD value of one unit of that currency.
RateFetcher = Callable[[], Mapping[str, Decimal]]

_RATES_KEY: str = "usd_rates"


class TTLCache(Generic[V]):
    """Thread-safe key/value cache whose entries expire after a TTL.

    Args:
        clock: Monotonic time source in seconds; injectable for tests.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[float, V]] = {}
        self._lock = threading.Lock()

    def get_or_refresh(
        self,
        key: str,
        ttl_s: float,
        refresh_fn: Callable[[], V],
    ) -> V:
        """Return the cached value for *key*, refreshing it once expired.

        Exceptions raised by *refresh_fn* propagate and leave any previous
        entry untouched.
        """
        with self._lock:
            now = self._clock()
            entry = self._entries.get(key)
            if entry is not None and now - entry[0] < ttl_s:
                return entry[1]

            value = refresh_fn()
            self._entries[key] = (now, value)
            return value

    def invalidate(self, key: Optional[str] = None) -> None:
        """Drop one entry, or every entry when *key* is None."""
        with self._lock:
            if key is None:
                self._entries.clear()
            else:
                self._entries.pop(key, None)


class ExchangeRateService(BaseService):
    """
    Fixed-rate currency lookup with an optional cached live refresh.
    """

    def __init__(
        self,
        config: AppConfig,
        logger: StructuredLogger,
        fetcher: Optional[RateFetcher] = None,
        cache: Optional[TTLCache[dict[str, Decimal]]] = None,
    ) -> None:
        super().__init__(logger)
        self._config = config
        self._fetcher = fetcher
        self._cache: TTLCache[dict[str, Decimal]] = cache if cache is not None else TTLCache()

    def _fallback_rates(self) -> dict[str, Decimal]:
        return {k.upper(): v for k, v in self._config.FALLBACK_USD_RATES.items()}

    def _fetch_rates(self) -> dict[str, Decimal]:
        if self._fetcher is None:
            return self._fallback_rates()
        fetched = self._fetcher()
        rates: dict[str, Decimal] = {}
        for currency, rate in fetched.items():
            value = to_decimal(rate)
            if value > 0:
                rates[str(currency).upper()] = value
        rates[Currency.USD] = Decimal("1")
        self._logger.info("Exchange rates refreshed for %d currencies", len(rates))
        return rates

    def get_rates(self) -> dict[str, Decimal]:
        """Current currency -> USD rates.

        Falls back to the configured fixed rates when no fetcher is set or
        the fetch raises.
        """
        if self._fetcher is None:
            return self._fallback_rates()
        try:
            return self._cache.get_or_refresh(
                _RATES_KEY,
                self._config.EXCHANGE_RATE_CACHE_TTL_S,
                self._fetch_rates,
            )
        except Exception as exc:
            self._logger.warning(
                "Failed to refresh exchange rates, using fallback rates: %s", exc,
            )
            return self._fallback_rates()

    def get_rate(self, currency: Union[Currency, str]) -> Decimal:
        """USD value of one unit of *currency*; 1 for unknown currencies."""
        code: str = str(currency or Currency.USD).strip().upper()
        rate: Optional[Decimal] = self.get_rates().get(code)
        if rate is None:
            self._logger.warning("No exchange rate for %s; assuming 1", code)
            return Decimal("1")
        return rate

    def to_usd(self, amount: object, currency: Union[Currency, str]) -> Decimal:
        """Convert *amount* in *currency* to USD (invalid amounts become 0)."""
        return to_decimal(amount) * self.get_rate(currency)
