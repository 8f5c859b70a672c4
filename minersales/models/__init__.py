"""
Data Models Package.

Re-exports all Pydantic models:
    from minersales.models import SaleRecord, ExpenseRecord, SalesPerson
    from minersales.models import Period, SortKey, CompensationPolicy
    from minersales.models import SalesPersonSummary, PerformanceRollup
"""

from __future__ import annotations

from minersales.models.enums import CompensationPolicy, Currency, Period, SortKey
from minersales.models.expense import ExpenseRecord
from minersales.models.sale import SaleRecord
from minersales.models.sales_person import SalesPerson
from minersales.models.service_models import (
    DashboardReport,
    PerformanceReport,
    PerformanceRollup,
    PeriodRange,
    SaleEconomics,
    SaleLine,
    SalesPersonDetail,
    SalesPersonSummary,
    ServiceResult,
)

__all__ = [
    "CompensationPolicy",
    "Currency",
    "DashboardReport",
    "ExpenseRecord",
    "PerformanceReport",
    "PerformanceRollup",
    "Period",
    "PeriodRange",
    "SaleEconomics",
    "SaleLine",
    "SaleRecord",
    "SalesPerson",
    "SalesPersonDetail",
    "SalesPersonSummary",
    "ServiceResult",
    "SortKey",
]
