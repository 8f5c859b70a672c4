"""
Business Logic Services Package.

Pure computation modules (vendor classifier, sale economics, commission
rules, period filter, aggregator) plus the injectable services built on
them.

The ``create_services()`` factory wires the services together, returning
a typed dict that the web layer can consume without knowing the internal
dependency graph.
"""

from __future__ import annotations

from typing import Optional, TypedDict

from minersales.config import AppConfig, get_config
from minersales.logger import get_logger
from minersales.services.exchange_rates import ExchangeRateService, RateFetcher
from minersales.services.performance import PerformanceService


class ServiceContainer(TypedDict):
    """Typed container for all application services."""

    performance_service: PerformanceService
    exchange_rate_service: ExchangeRateService


def create_services(
    config: Optional[AppConfig] = None,
    rate_fetcher: Optional[RateFetcher] = None,
) -> ServiceContainer:
    """
    Wire all services together.

    Args:
        config: Application configuration; the cached singleton when omitted.
        rate_fetcher: Optional live exchange-rate source.  Without one the
                      configured fixed rates are used.

    Returns:
        ServiceContainer mapping service names to fully-wired instances.
    """
    resolved_config: AppConfig = config if config is not None else get_config()

    return ServiceContainer(
        performance_service=PerformanceService(
            config=resolved_config,
            logger=get_logger("minersales.performance"),
        ),
        exchange_rate_service=ExchangeRateService(
            config=resolved_config,
            logger=get_logger("minersales.exchange_rates"),
            fetcher=rate_fetcher,
        ),
    )
