"""
Tests for reporting-period resolution and record date handling.
"""

from datetime import date, datetime, timedelta

import pytest

from minersales.models import Period, SaleRecord
from minersales.services.period_filter import (
    available_month_keys,
    in_range,
    parse_month_key,
    parse_record_date,
    resolve_period_range,
    to_month_key,
)

ONE_MS = timedelta(milliseconds=1)


class TestResolvePeriodRange:
    def test_this_month_runs_until_now(self, now):
        rng = resolve_period_range("month", now=now)
        assert rng.start == datetime(2025, 6, 1)
        assert rng.end == now

    def test_last_month_covers_whole_previous_month(self, now):
        rng = resolve_period_range(Period.LAST, now=now)
        assert rng.start == datetime(2025, 5, 1)
        assert rng.end == datetime(2025, 5, 31, 23, 59, 59, 999000)

    def test_last_month_across_year_boundary(self):
        rng = resolve_period_range("last", now=datetime(2025, 1, 3, 8, 0))
        assert rng.start == datetime(2024, 12, 1)
        assert rng.end == datetime(2024, 12, 31, 23, 59, 59, 999000)

    def test_lifetime_is_unbounded(self, now):
        rng = resolve_period_range("life", now=now)
        assert rng.start is None
        assert rng.end is None
        assert rng.is_unbounded

    def test_custom_month(self):
        rng = resolve_period_range("custom", "2024-02")
        assert rng.start == datetime(2024, 2, 1)
        assert rng.end == datetime(2024, 2, 29, 23, 59, 59, 999000)

    def test_custom_december(self):
        rng = resolve_period_range("custom", "2023-12")
        assert rng.end == datetime(2023, 12, 31, 23, 59, 59, 999000)

    def test_custom_without_key_is_rejected(self):
        with pytest.raises(ValueError, match="month key"):
            resolve_period_range("custom")

    @pytest.mark.parametrize("key", ["2024-13", "2024-00", "24-01", "2024/01", "abc"])
    def test_invalid_month_key_is_rejected(self, key):
        with pytest.raises(ValueError):
            resolve_period_range("custom", key)

    def test_unknown_period_is_rejected(self):
        with pytest.raises(ValueError, match="Unknown period"):
            resolve_period_range("quarter")

    def test_aware_now_is_localised(self):
        aware = datetime(2025, 6, 15, 12, 0).astimezone()
        rng = resolve_period_range("month", now=aware)
        assert rng.end.tzinfo is None
        assert rng.start == datetime(2025, 6, 1)


class TestInRange:
    def test_bounds_are_inclusive(self, now):
        rng = resolve_period_range("last", now=now)
        assert in_range(rng.start, rng.start, rng.end)
        assert in_range(rng.end, rng.start, rng.end)

    def test_one_millisecond_after_last_month_falls_into_this_month(self, now):
        last = resolve_period_range("last", now=now)
        this = resolve_period_range("month", now=now)
        boundary = datetime(2025, 5, 31, 23, 59, 59, 999000)
        assert in_range(boundary, last.start, last.end)
        assert not in_range(boundary + ONE_MS, last.start, last.end)
        assert in_range(boundary + ONE_MS, this.start, this.end)

    def test_missing_bound_means_unbounded(self):
        assert in_range(datetime(1999, 1, 1), None, None)
        assert in_range(datetime(1999, 1, 1), datetime(2025, 1, 1), None)

    def test_future_date_is_outside_this_month(self, now):
        rng = resolve_period_range("month", now=now)
        assert not in_range(now + timedelta(days=1), rng.start, rng.end)


class TestParseRecordDate:
    def test_datetime_passes_through(self, now):
        value = datetime(2025, 3, 4, 5, 6)
        assert parse_record_date(value, now) == value

    def test_date_is_midnight(self, now):
        assert parse_record_date(date(2025, 3, 4), now) == datetime(2025, 3, 4)

    def test_iso_strings(self, now):
        assert parse_record_date("2025-03-04", now) == datetime(2025, 3, 4)
        assert parse_record_date("2025-03-04T10:15:00", now) == datetime(2025, 3, 4, 10, 15)

    def test_utc_suffix_is_localised(self, now):
        parsed = parse_record_date("2025-03-15T12:00:00Z", now)
        assert parsed.tzinfo is None
        assert (parsed.year, parsed.month, parsed.day) == (2025, 3, 15)

    @pytest.mark.parametrize("value", [None, "", "yesterday", "31/02/2025"])
    def test_unreadable_date_falls_back_to_now(self, value, now):
        assert parse_record_date(value, now) == now


class TestMonthKeys:
    def test_parse_and_format(self):
        assert parse_month_key("2025-06") == (2025, 6)
        assert to_month_key(datetime(2025, 6, 30, 23, 0)) == "2025-06"

    def test_available_month_keys_newest_first(self, now):
        records = [
            SaleRecord(date="2025-04-02"),
            SaleRecord(date=datetime(2025, 6, 1)),
            SaleRecord(date="2024-12-31T10:00:00"),
            SaleRecord(date="2025-04-20"),
            SaleRecord(date="garbage"),
        ]
        assert available_month_keys(records, now) == ["2025-06", "2025-04", "2024-12"]
