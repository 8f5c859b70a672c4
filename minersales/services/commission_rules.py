"""
Commission Rules Engine.

Pure-function module containing the tiered commission table and the
compensation policy applied to each salesperson's net profit.

The slabs are agreed in AED and paid against USD figures, so each
threshold is the round AED amount converted at the fixed 0.272 USD/AED
rate.  Functions are stateless: input data -> output result.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal
from typing import Optional

from minersales.logger import StructuredLogger
from minersales.models.enums import CompensationPolicy
from minersales.models.sales_person import SalesPerson
from minersales.utils.numbers import ZERO, finite_or_zero

__all__ = [
    "AED_COMMISSION_SLABS",
    "AED_TO_USD_RATE",
    "COMMISSION_TIERS",
    "build_commission_tiers",
    "calculate_compensation",
    "commission_rate",
]

AED_TO_USD_RATE: Decimal = Decimal("0.272")

# (net profit in AED, rate), highest slab first.
AED_COMMISSION_SLABS: tuple[tuple[Decimal, Decimal], ...] = (
    (Decimal("1000000"), Decimal("0.15")),
    (Decimal("900000"), Decimal("0.13")),
    (Decimal("800000"), Decimal("0.12")),
    (Decimal("700000"), Decimal("0.11")),
    (Decimal("600000"), Decimal("0.10")),
    (Decimal("500000"), Decimal("0.09")),
    (Decimal("400000"), Decimal("0.07")),
    (Decimal("300000"), Decimal("0.06")),
    (Decimal("200000"), Decimal("0.05")),
    (Decimal("100000"), Decimal("0.04")),
)

_SALARY_MULTIPLIER: Decimal = Decimal("3")


def build_commission_tiers(
    aed_to_usd: Decimal = AED_TO_USD_RATE,
) -> tuple[tuple[Decimal, Decimal], ...]:
    """Convert the AED slabs to USD thresholds, highest first."""
    return tuple((aed * aed_to_usd, rate) for aed, rate in AED_COMMISSION_SLABS)


# 272,000 / 244,800 / ... / 27,200 USD
COMMISSION_TIERS: tuple[tuple[Decimal, Decimal], ...] = build_commission_tiers()


def commission_rate(
    net_profit_usd: Decimal,
    tiers: tuple[tuple[Decimal, Decimal], ...] = COMMISSION_TIERS,
) -> Decimal:
    """
    Map a net-profit amount to its commission rate.

    Lower bounds are inclusive and the highest threshold met wins, so the
    result is a non-decreasing step function of *net_profit_usd*.

    Args:
        net_profit_usd: Net profit for the period, in USD.
        tiers: ``(threshold, rate)`` pairs sorted highest first.

    Returns:
        A rate between ``0`` and ``0.15``.
    """
    for threshold, rate in tiers:
        if net_profit_usd >= threshold:
            return rate
    return ZERO


def calculate_compensation(
    sales_person: Optional[SalesPerson],
    net_profit: Decimal,
    manual_commissions: Iterable[Decimal] = (),
    salary_multiplier: Decimal = _SALARY_MULTIPLIER,
    tiers: tuple[tuple[Decimal, Decimal], ...] = COMMISSION_TIERS,
    logger: Optional[StructuredLogger] = None,
) -> tuple[Decimal, Optional[Decimal], CompensationPolicy]:
    """
    Apply a salesperson's compensation policy to their period figures.

    Salespeople excluded from commission are paid the positive manual
    commissions recorded on their sales, with no rate applied.  Everyone
    else earns ``net_profit * commission_rate(net_profit)`` once net
    profit exceeds ``salary_multiplier`` times their salary.

    Args:
        sales_person: Master record, or ``None`` for an unknown id (treated
                      as a zero-salary, commission-eligible salesperson).
        net_profit: Margin minus expense for the period.
        manual_commissions: Per-sale ``commission`` values in the period.
        salary_multiplier: Multiple of salary net profit must exceed.
        tiers: Commission table, highest threshold first.
        logger: Optional ``StructuredLogger``; threshold misses are logged
                at DEBUG.

    Returns:
        Tuple of (compensation, rate, policy).  ``rate`` is ``None`` for
        the pass-through policy.
    """
    if sales_person is not None and sales_person.exclude_from_commission:
        passed_through: Decimal = sum(
            (c for c in manual_commissions if c > 0), ZERO
        )
        return finite_or_zero(passed_through), None, CompensationPolicy.PASS_THROUGH

    salary: Decimal = sales_person.salary if sales_person is not None else ZERO
    threshold: Decimal = salary_multiplier * salary

    if net_profit > threshold and net_profit > 0:
        rate: Decimal = commission_rate(net_profit, tiers)
        return finite_or_zero(net_profit * rate), rate, CompensationPolicy.TIERED

    if logger is not None and sales_person is not None:
        logger.debug(
            "Net profit %s does not exceed commission threshold %s for %s",
            net_profit,
            threshold,
            sales_person.id,
        )
    return ZERO, ZERO, CompensationPolicy.TIERED
