"""
Performance Aggregator.

Folds sale and expense records into one ``SalesPersonSummary`` per
salesperson for a reporting period, then applies each salesperson's
compensation policy.  This is the single implementation behind the
dashboard, the performance list and the salesperson detail page.

Pure: inputs are never modified, no state survives between calls, and
malformed records degrade to zero instead of raising.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime
from decimal import Decimal
from typing import Optional, TypeVar, Union

from minersales.config import AppConfig
from minersales.logger import StructuredLogger
from minersales.models.base import LedgerRecord
from minersales.models.enums import Period, SortKey
from minersales.models.expense import ExpenseRecord
from minersales.models.sale import SaleRecord
from minersales.models.sales_person import SalesPerson
from minersales.models.service_models import (
    PerformanceRollup,
    PeriodRange,
    SalesPersonSummary,
)
from minersales.services.commission_rules import (
    COMMISSION_TIERS,
    build_commission_tiers,
    calculate_compensation,
)
from minersales.services.period_filter import (
    in_range,
    parse_record_date,
    resolve_period_range,
)
from minersales.services.sale_economics import compute_sale_economics
from minersales.utils.numbers import ZERO, finite_or_zero

__all__ = [
    "aggregate",
    "default_order",
    "filter_records",
    "most_recent",
    "rollup",
    "sort_summaries",
]

R = TypeVar("R", bound=LedgerRecord)

_DEFAULT_ROLE: str = "Sales Executive"
_DEFAULT_SALARY_MULTIPLIER: Decimal = Decimal("3")


def _seed_summary(sales_person: SalesPerson, default_role: str) -> SalesPersonSummary:
    return SalesPersonSummary(
        id=sales_person.id,
        name=sales_person.name,
        role=sales_person.role or default_role,
        image_url=sales_person.image_url,
    )


def _adhoc_summary(
    sales_person_id: str,
    name: Optional[str],
    default_role: str,
) -> SalesPersonSummary:
    return SalesPersonSummary(
        id=sales_person_id,
        name=name or f"ID {sales_person_id}",
        role=default_role,
        is_known=False,
    )


def _in_period(
    record: LedgerRecord,
    period_range: PeriodRange,
    now: datetime,
    logger: Optional[StructuredLogger],
) -> bool:
    when: datetime = parse_record_date(record.date, now, logger)
    return in_range(when, period_range.start, period_range.end)


def default_order(summaries: Iterable[SalesPersonSummary]) -> list[SalesPersonSummary]:
    """Alphabetical by name (case-insensitive), ties broken by id."""
    return sorted(summaries, key=lambda s: (s.name.casefold(), s.name, s.id))


def sort_summaries(
    summaries: Iterable[SalesPersonSummary],
    sort_by: Union[SortKey, str, None] = SortKey.NAME,
) -> list[SalesPersonSummary]:
    """
    Order summaries for display.

    Numeric keys sort descending; ties keep the default name order so the
    list does not shuffle when the user switches period.

    Raises:
        ValueError: For an unknown sort key.
    """
    ordered: list[SalesPersonSummary] = default_order(summaries)
    key = SortKey(sort_by) if sort_by else SortKey.NAME

    if key is SortKey.REVENUE:
        ordered.sort(key=lambda s: s.revenue, reverse=True)
    elif key is SortKey.PROFIT:
        ordered.sort(key=lambda s: s.net_profit, reverse=True)
    elif key is SortKey.MARGIN:
        ordered.sort(key=lambda s: s.margin_ratio, reverse=True)
    elif key is SortKey.EXPENSE:
        ordered.sort(key=lambda s: s.expense, reverse=True)
    return ordered


def filter_records(
    records: Iterable[R],
    period_range: PeriodRange,
    sales_person_id: Optional[str] = None,
    now: Optional[datetime] = None,
    logger: Optional[StructuredLogger] = None,
) -> list[R]:
    """Records inside *period_range*, optionally for one salesperson only."""
    reference: datetime = now if now is not None else datetime.now()
    return [
        r for r in records
        if (sales_person_id is None or r.sales_person_id == sales_person_id)
        and _in_period(r, period_range, reference, logger)
    ]


def most_recent(
    records: Iterable[R],
    limit: int,
    now: Optional[datetime] = None,
    logger: Optional[StructuredLogger] = None,
) -> list[R]:
    """The *limit* latest records by date, newest first; ties keep input order."""
    if limit <= 0:
        return []
    reference: datetime = now if now is not None else datetime.now()
    dated = [(parse_record_date(r.date, reference, logger), r) for r in records]
    dated.sort(key=lambda pair: pair[0], reverse=True)
    return [r for _, r in dated[:limit]]


def aggregate(
    sales_persons: Sequence[SalesPerson],
    sales: Iterable[SaleRecord],
    expenses: Iterable[ExpenseRecord],
    period: Union[Period, str],
    month_key: Optional[str] = None,
    now: Optional[datetime] = None,
    config: Optional[AppConfig] = None,
    logger: Optional[StructuredLogger] = None,
) -> list[SalesPersonSummary]:
    """
    Build per-salesperson summaries for one reporting period.

    Steps:
        1. Seed a zeroed summary for every known salesperson.
        2. Fold in-period sales into revenue and margin.
        3. Fold in-period expenses into expense.
        4. Derive margin ratio and net profit.
        5. Apply the compensation policy.

    Records without a salesperson id are skipped.  Records whose id is not
    in *sales_persons* get an ad-hoc summary (``is_known=False``) so totals
    stay reconcilable.

    Args:
        sales_persons: Master records.
        sales: Sale records.
        expenses: Expense records.
        period: ``month``, ``last``, ``life`` or ``custom``.
        month_key: ``YYYY-MM`` for the ``custom`` period.
        now: Reference time for the period and for undated records.
        config: Optional configuration; defaults match the standard plan.
        logger: Optional ``StructuredLogger`` for per-record diagnostics.

    Returns:
        Summaries in default order (name, then id).

    Raises:
        ValueError: If the period selector or month key is invalid.
    """
    reference: datetime = now if now is not None else datetime.now()
    period_range: PeriodRange = resolve_period_range(period, month_key, reference)

    if config is not None:
        default_role: str = config.DEFAULT_SALESPERSON_ROLE
        salary_multiplier: Decimal = config.COMMISSION_SALARY_MULTIPLIER
        vendor_code: Optional[str] = config.PREFERRED_VENDOR_CODE
        tiers = build_commission_tiers(config.AED_TO_USD_RATE)
    else:
        default_role = _DEFAULT_ROLE
        salary_multiplier = _DEFAULT_SALARY_MULTIPLIER
        vendor_code = None
        tiers = COMMISSION_TIERS

    masters: dict[str, SalesPerson] = {}
    buckets: dict[str, SalesPersonSummary] = {}
    for sp in sales_persons:
        masters[sp.id] = sp
        buckets[sp.id] = _seed_summary(sp, default_role)

    manual_commissions: dict[str, list[Decimal]] = {key: [] for key in buckets}

    def _bucket_for(record: LedgerRecord) -> Optional[SalesPersonSummary]:
        key: Optional[str] = record.sales_person_id
        if key is None:
            if logger is not None:
                logger.debug("Skipping record %s without salesperson", record.id)
            return None
        if key not in buckets:
            buckets[key] = _adhoc_summary(key, record.sales_person_name, default_role)
            manual_commissions[key] = []
            if logger is not None:
                logger.info("Record %s references unknown salesperson %s", record.id, key)
        return buckets[key]

    for sale in sales:
        bucket = _bucket_for(sale)
        if bucket is None or not _in_period(sale, period_range, reference, logger):
            continue
        economics = compute_sale_economics(sale, vendor_code)
        bucket.revenue += economics.revenue
        bucket.margin += economics.margin
        bucket.sale_count += 1
        manual_commissions[bucket.id].append(sale.commission)

    for expense in expenses:
        bucket = _bucket_for(expense)
        if bucket is None or not _in_period(expense, period_range, reference, logger):
            continue
        bucket.expense += expense.amount
        bucket.expense_count += 1

    results: list[SalesPersonSummary] = []
    for key, bucket in buckets.items():
        margin_ratio: Decimal = (
            finite_or_zero(bucket.margin / bucket.revenue)
            if bucket.revenue > 0
            else ZERO
        )
        net_profit: Decimal = bucket.margin - bucket.expense
        compensation, rate, policy = calculate_compensation(
            masters.get(key),
            net_profit,
            manual_commissions[key],
            salary_multiplier=salary_multiplier,
            tiers=tiers,
            logger=logger,
        )
        results.append(bucket.model_copy(update={
            "margin_ratio": margin_ratio,
            "net_profit": net_profit,
            "compensation": compensation,
            "compensation_rate": rate,
            "compensation_policy": policy,
        }))

    return default_order(results)


def rollup(summaries: Iterable[SalesPersonSummary]) -> PerformanceRollup:
    """Sum summaries into dashboard totals."""
    revenue = margin = expense = net_profit = compensation = ZERO
    for s in summaries:
        revenue += s.revenue
        margin += s.margin
        expense += s.expense
        net_profit += s.net_profit
        compensation += s.compensation

    margin_ratio: Decimal = finite_or_zero(margin / revenue) if revenue > 0 else ZERO
    return PerformanceRollup(
        revenue=revenue,
        margin=margin,
        expense=expense,
        net_profit=net_profit,
        compensation=compensation,
        margin_ratio=margin_ratio,
    )
