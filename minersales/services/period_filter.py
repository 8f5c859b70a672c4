"""
Period Filter.

Resolves a reporting period selector into an inclusive date window and
decides whether a record date falls inside it.  All datetimes are naive
local time, matching what the sales team sees on the dashboard.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import date, datetime, time, timedelta
from typing import Optional, Union

from minersales.logger import StructuredLogger
from minersales.models.base import LedgerRecord, RawDate
from minersales.models.enums import Period
from minersales.models.service_models import PeriodRange

__all__ = [
    "available_month_keys",
    "in_range",
    "parse_month_key",
    "parse_record_date",
    "resolve_period_range",
    "to_month_key",
]

_MONTH_KEY_RE: re.Pattern[str] = re.compile(r"(\d{4})-(\d{2})")

# Smallest step the dashboard distinguishes; "last instant" of a month is
# the first instant of the next month minus this.
_RESOLUTION: timedelta = timedelta(milliseconds=1)


def _to_local_naive(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def _now(now: Optional[datetime]) -> datetime:
    return _to_local_naive(now) if now is not None else datetime.now()


def _month_start(year: int, month: int) -> datetime:
    return datetime(year, month, 1)


def _next_month_start(start: datetime) -> datetime:
    if start.month == 12:
        return _month_start(start.year + 1, 1)
    return _month_start(start.year, start.month + 1)


def parse_month_key(key: str) -> tuple[int, int]:
    """Split a ``YYYY-MM`` key into ``(year, month)``.

    Raises:
        ValueError: If *key* is not a valid year-month.
    """
    match = _MONTH_KEY_RE.fullmatch(str(key or "").strip())
    if match is None:
        raise ValueError(f"Invalid month key {key!r}; expected YYYY-MM.")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12 or year < 1:
        raise ValueError(f"Invalid month key {key!r}; month must be 01-12.")
    return year, month


def to_month_key(when: datetime) -> str:
    """Return the ``YYYY-MM`` key of *when*."""
    return f"{when.year:04d}-{when.month:02d}"


def resolve_period_range(
    period: Union[Period, str],
    month_key: Optional[str] = None,
    now: Optional[datetime] = None,
) -> PeriodRange:
    """
    Resolve a period selector into an inclusive ``PeriodRange``.

    - ``month``: first instant of the current month .. *now*.
    - ``last``: the whole previous month, ending at 23:59:59.999.
    - ``life``: unbounded.
    - ``custom``: the whole month named by *month_key* (``YYYY-MM``).

    Args:
        period: A ``Period`` or its string value.
        month_key: Required for ``custom``; ignored otherwise.
        now: Reference time; defaults to the current local time.

    Raises:
        ValueError: For an unknown period or a missing/invalid month key.
    """
    try:
        selector = Period(period)
    except ValueError:
        raise ValueError(
            f"Unknown period {period!r}; expected one of "
            f"{', '.join(p.value for p in Period)}."
        ) from None

    if selector is Period.LIFE:
        return PeriodRange(start=None, end=None)

    if selector is Period.CUSTOM:
        if not month_key:
            raise ValueError("A custom period requires a YYYY-MM month key.")
        year, month = parse_month_key(month_key)
        start = _month_start(year, month)
        return PeriodRange(start=start, end=_next_month_start(start) - _RESOLUTION)

    current = _now(now)
    first_this_month = _month_start(current.year, current.month)

    if selector is Period.MONTH:
        return PeriodRange(start=first_this_month, end=current)

    end_last_month = first_this_month - _RESOLUTION
    return PeriodRange(
        start=_month_start(end_last_month.year, end_last_month.month),
        end=end_last_month,
    )


def in_range(
    when: datetime,
    start: Optional[datetime],
    end: Optional[datetime],
) -> bool:
    """Inclusive bounds check; a missing bound means unbounded."""
    if start is None or end is None:
        return True
    return start <= when <= end


def parse_record_date(
    value: RawDate,
    now: Optional[datetime] = None,
    logger: Optional[StructuredLogger] = None,
) -> datetime:
    """
    Read a record's raw date as a naive local datetime.

    Accepts ``datetime``, ``date`` and ISO-8601 strings.  A missing or
    unparseable value is read as *now*, so a malformed row is counted in
    the current month instead of being dropped.
    """
    if isinstance(value, datetime):
        return _to_local_naive(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return _to_local_naive(datetime.fromisoformat(text))
        except ValueError:
            pass

    if logger is not None:
        logger.debug("Unreadable record date %r; using current time", value)
    return _now(now)


def available_month_keys(
    records: Iterable[LedgerRecord],
    now: Optional[datetime] = None,
) -> list[str]:
    """Distinct ``YYYY-MM`` keys present in *records*, newest first."""
    keys = {to_month_key(parse_record_date(r.date, now)) for r in records}
    return sorted(keys, reverse=True)
