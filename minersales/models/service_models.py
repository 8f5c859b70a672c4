"""
Service Layer Data Transfer Objects.

Pydantic models for the values the engine derives.  None of these are
persisted; every report request recomputes them from the raw records.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from minersales.models.enums import CompensationPolicy
from minersales.models.expense import ExpenseRecord
from minersales.models.sale import SaleRecord
from minersales.utils.numbers import ZERO

T = TypeVar("T")

__all__ = [
    "DashboardReport",
    "PerformanceReport",
    "PerformanceRollup",
    "PeriodRange",
    "SaleEconomics",
    "SaleLine",
    "SalesPersonDetail",
    "SalesPersonSummary",
    "ServiceResult",
]


# ---------------------------------------------------------------------------
# Per-sale and period models
# ---------------------------------------------------------------------------

class SaleEconomics(BaseModel):
    """Revenue, procurement cost and margin of a single sale."""

    model_config = ConfigDict(frozen=True)

    revenue: Decimal = ZERO
    procurement: Decimal = ZERO
    margin: Decimal = ZERO


class PeriodRange(BaseModel):
    """Inclusive reporting window; ``None`` on either side is unbounded."""

    model_config = ConfigDict(frozen=True)

    start: Optional[datetime] = None
    end: Optional[datetime] = None

    @property
    def is_unbounded(self) -> bool:
        return self.start is None or self.end is None


# ---------------------------------------------------------------------------
# Aggregation output models
# ---------------------------------------------------------------------------

class SalesPersonSummary(BaseModel):
    """Per-salesperson totals for one reporting period.

    ``margin`` is the figure the UI labels "profit"; ``margin_ratio`` is
    margin over revenue (0 when there is no revenue).  ``is_known`` is
    False for buckets created for records whose salesperson is missing
    from the master list.
    """

    id: str
    name: str
    role: str
    image_url: Optional[str] = None
    is_known: bool = True

    revenue: Decimal = ZERO
    margin: Decimal = ZERO
    expense: Decimal = ZERO
    margin_ratio: Decimal = ZERO
    net_profit: Decimal = ZERO

    compensation: Decimal = ZERO
    compensation_rate: Optional[Decimal] = None
    compensation_policy: CompensationPolicy = CompensationPolicy.TIERED

    sale_count: int = 0
    expense_count: int = 0

    @property
    def profit(self) -> Decimal:
        """UI alias for ``margin``."""
        return self.margin


class PerformanceRollup(BaseModel):
    """Totals across a set of summaries, used by the dashboard cards."""

    revenue: Decimal = ZERO
    margin: Decimal = ZERO
    expense: Decimal = ZERO
    net_profit: Decimal = ZERO
    compensation: Decimal = ZERO
    margin_ratio: Decimal = ZERO


class PerformanceReport(BaseModel):
    """Everything the performance list renders for one period."""

    period: str
    month_key: Optional[str] = None
    range: PeriodRange
    summaries: list[SalesPersonSummary] = Field(default_factory=list)
    rollup: PerformanceRollup


class SaleLine(BaseModel):
    """A sale together with its derived economics."""

    sale: SaleRecord
    economics: SaleEconomics


class DashboardReport(BaseModel):
    """Dashboard cards plus the latest activity feeds, newest first."""

    totals: PerformanceRollup
    recent_sales: list[SaleLine] = Field(default_factory=list)
    recent_expenses: list[ExpenseRecord] = Field(default_factory=list)


class SalesPersonDetail(BaseModel):
    """One salesperson's summary plus the in-period rows behind it."""

    summary: SalesPersonSummary
    range: PeriodRange
    sales: list[SaleLine] = Field(default_factory=list)
    expenses: list[ExpenseRecord] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Generic service models
# ---------------------------------------------------------------------------

class ServiceResult(BaseModel, Generic[T]):
    """
    Standard service return envelope.

    All service methods return this, providing a consistent contract
    for the web layer that renders the numbers.
    """

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    status_code: int = 200
