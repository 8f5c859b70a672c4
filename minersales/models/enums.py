"""
Shared Enumerations for MinerSales Models.

StrEnum values compare equal to their string equivalents, so callers
passing ``"month"`` straight from a query string keep working.
"""

from __future__ import annotations
from enum import StrEnum


class Period(StrEnum):
    """Reporting windows offered by the performance views."""

    MONTH = "month"
    LAST = "last"
    LIFE = "life"
    CUSTOM = "custom"


class SortKey(StrEnum):
    """Orderings offered by the performance list.

    ``PROFIT`` orders by net profit (margin minus expense), ``MARGIN`` by
    margin ratio.
    """

    NAME = "name"
    REVENUE = "revenue"
    PROFIT = "profit"
    MARGIN = "margin"
    EXPENSE = "expense"


class CompensationPolicy(StrEnum):
    """How a salesperson's compensation is derived."""

    TIERED = "TIERED"
    PASS_THROUGH = "PASS_THROUGH"


class Currency(StrEnum):
    """Currencies with a configured fallback USD rate."""

    USD = "USD"
    AED = "AED"
    EUR = "EUR"
    GBP = "GBP"
