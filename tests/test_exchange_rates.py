"""
Tests for the TTL cache and the exchange-rate service.
"""

from decimal import Decimal

import pytest

from minersales.models import Currency
from minersales.services.exchange_rates import ExchangeRateService, TTLCache


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.value = start

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


class CountingFetcher:
    def __init__(self, rates=None, error=None) -> None:
        self.calls = 0
        self.rates = rates or {"aed": "0.2723", "EUR": 1.1, "JPY": "-1", "XXX": "n/a"}
        self.error = error

    def __call__(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.rates


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


class TestTTLCache:
    def test_value_is_reused_within_ttl(self, clock):
        cache = TTLCache(clock=clock)
        calls = []

        def refresh():
            calls.append(1)
            return len(calls)

        assert cache.get_or_refresh("k", 60, refresh) == 1
        clock.advance(30)
        assert cache.get_or_refresh("k", 60, refresh) == 1
        clock.advance(30)
        assert cache.get_or_refresh("k", 60, refresh) == 2

    def test_failed_refresh_keeps_previous_entry(self, clock):
        cache = TTLCache(clock=clock)
        cache.get_or_refresh("k", 10, lambda: "old")
        clock.advance(11)

        def boom():
            raise ConnectionError("offline")

        with pytest.raises(ConnectionError):
            cache.get_or_refresh("k", 10, boom)
        clock.advance(-11)
        assert cache.get_or_refresh("k", 10, lambda: "new") == "old"

    def test_invalidate(self, clock):
        cache = TTLCache(clock=clock)
        cache.get_or_refresh("a", 60, lambda: 1)
        cache.get_or_refresh("b", 60, lambda: 1)
        cache.invalidate("a")
        assert cache.get_or_refresh("a", 60, lambda: 2) == 2
        assert cache.get_or_refresh("b", 60, lambda: 2) == 1
        cache.invalidate()
        assert cache.get_or_refresh("b", 60, lambda: 3) == 3


class TestExchangeRateService:
    def test_fixed_rates_without_fetcher(self, config, logger):
        service = ExchangeRateService(config=config, logger=logger)
        assert service.get_rate(Currency.AED) == Decimal("0.272")
        assert service.get_rate("usd") == Decimal("1")
        assert service.to_usd("1,000", "AED") == Decimal("272.000")

    def test_fetched_rates_are_cleaned_and_cached(self, config, logger, clock):
        fetcher = CountingFetcher()
        service = ExchangeRateService(
            config=config, logger=logger, fetcher=fetcher, cache=TTLCache(clock=clock),
        )
        rates = service.get_rates()
        assert rates == {"AED": Decimal("0.2723"), "EUR": Decimal("1.1"), "USD": Decimal("1")}

        service.get_rate("EUR")
        assert fetcher.calls == 1

        clock.advance(config.EXCHANGE_RATE_CACHE_TTL_S)
        service.get_rate("EUR")
        assert fetcher.calls == 2

    def test_fetch_failure_falls_back(self, config, logger, log_stream, clock):
        fetcher = CountingFetcher(error=TimeoutError("rate API timed out"))
        service = ExchangeRateService(
            config=config, logger=logger, fetcher=fetcher, cache=TTLCache(clock=clock),
        )
        assert service.get_rate("GBP") == Decimal("1.27")
        assert "using fallback rates" in log_stream.getvalue()

    def test_unknown_currency_assumes_one(self, config, logger, log_stream):
        service = ExchangeRateService(config=config, logger=logger)
        assert service.get_rate("CHF") == Decimal("1")
        assert service.to_usd(50, "") == Decimal("50")
        assert "No exchange rate for CHF" in log_stream.getvalue()

    def test_invalid_amount_is_zero(self, config, logger):
        service = ExchangeRateService(config=config, logger=logger)
        assert service.to_usd("abc", "EUR") == Decimal("0")
