"""Unit tests for date-range filters, presets and query-parameter resolution."""

from datetime import date, datetime, timezone

import pytest

from src.ft_common.errors import InvalidDateRangeError
from src.ft_query.date_range import (
    DateRange,
    build_date_range_filter,
    get_date_range_preset,
    resolve_date_range,
)

# Wednesday
NOW = datetime(2024, 3, 13, 15, 30, tzinfo=timezone.utc)


class TestBuildDateRangeFilter:
    def test_end_date_widened_to_end_of_day(self) -> None:
        f = build_date_range_filter(DateRange(end_date="2024-03-15"))
        assert f == {"date": {"$lte": datetime(2024, 3, 15, 23, 59, 59, 999000)}}

    def test_start_date_used_as_given(self) -> None:
        f = build_date_range_filter(DateRange(start_date="2024-03-01T10:00:00"))
        assert f == {"date": {"$gte": datetime(2024, 3, 1, 10, 0)}}

    def test_both_bounds(self) -> None:
        f = build_date_range_filter(DateRange(date(2024, 3, 1), date(2024, 3, 31)))
        assert f["date"]["$gte"] == datetime(2024, 3, 1)
        assert f["date"]["$lte"] == datetime(2024, 3, 31, 23, 59, 59, 999000)

    def test_empty_range_is_empty_filter(self) -> None:
        assert build_date_range_filter(DateRange()) == {}

    def test_custom_field(self) -> None:
        f = build_date_range_filter(DateRange(start_date="2024-01-01"), field="createdAt")
        assert "createdAt" in f

    def test_trailing_z_is_utc(self) -> None:
        f = build_date_range_filter(DateRange(start_date="2024-03-01T00:00:00Z"))
        assert f["date"]["$gte"] == datetime(2024, 3, 1, tzinfo=timezone.utc)


class TestPresets:
    def test_today(self) -> None:
        r = get_date_range_preset("today", NOW)
        assert r.start_date == datetime(2024, 3, 13, tzinfo=timezone.utc)
        assert r.end_date == NOW

    def test_yesterday(self) -> None:
        r = get_date_range_preset("yesterday", NOW)
        assert r.start_date == datetime(2024, 3, 12, tzinfo=timezone.utc)
        assert r.end_date == datetime(2024, 3, 13, tzinfo=timezone.utc)

    def test_this_week_starts_on_sunday(self) -> None:
        r = get_date_range_preset("thisWeek", NOW)
        assert r.start_date == datetime(2024, 3, 10, tzinfo=timezone.utc)

    def test_this_week_on_sunday_is_today(self) -> None:
        sunday = datetime(2024, 3, 10, 9, tzinfo=timezone.utc)
        r = get_date_range_preset("thisWeek", sunday)
        assert r.start_date == datetime(2024, 3, 10, tzinfo=timezone.utc)

    def test_this_month(self) -> None:
        r = get_date_range_preset("thisMonth", NOW)
        assert r.start_date == datetime(2024, 3, 1, tzinfo=timezone.utc)

    def test_last_month_handles_leap_february(self) -> None:
        r = get_date_range_preset("lastMonth", NOW)
        assert r.start_date == datetime(2024, 2, 1, tzinfo=timezone.utc)
        assert r.end_date == datetime(2024, 2, 29, tzinfo=timezone.utc)

    def test_last_month_across_year_boundary(self) -> None:
        r = get_date_range_preset("lastMonth", datetime(2024, 1, 5, tzinfo=timezone.utc))
        assert r.start_date == datetime(2023, 12, 1, tzinfo=timezone.utc)
        assert r.end_date == datetime(2023, 12, 31, tzinfo=timezone.utc)

    def test_this_year(self) -> None:
        r = get_date_range_preset("thisYear", NOW)
        assert r.start_date == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_rolling_windows(self) -> None:
        assert get_date_range_preset("last30Days", NOW).start_date == datetime(
            2024, 2, 12, tzinfo=timezone.utc
        )
        assert get_date_range_preset("last90Days", NOW).start_date == datetime(
            2023, 12, 14, tzinfo=timezone.utc
        )

    def test_unknown_preset_is_empty(self) -> None:
        assert get_date_range_preset("nextDecade", NOW).is_empty


class TestResolveDateRange:
    def test_preset_wins_over_explicit_bounds(self) -> None:
        r = resolve_date_range("today", "2020-01-01", "2020-01-31", now=NOW)
        assert r.end_date == NOW

    def test_unknown_preset_falls_back_to_bounds(self) -> None:
        r = resolve_date_range("bogus", "2024-01-01", None, now=NOW)
        assert r.start_date == datetime(2024, 1, 1)
        assert r.end_date is None

    def test_no_input_is_open_range(self) -> None:
        assert resolve_date_range(None, None, None).is_empty

    def test_same_day_bounds_allowed(self) -> None:
        r = resolve_date_range(None, "2024-03-15", "2024-03-15")
        assert r.start_date == r.end_date

    def test_malformed_date_raises(self) -> None:
        with pytest.raises(InvalidDateRangeError):
            resolve_date_range(None, "15/03/2024", None)

    def test_start_after_end_raises(self) -> None:
        with pytest.raises(InvalidDateRangeError):
            resolve_date_range(None, "2024-03-16", "2024-03-15")


class TestCacheSuffix:
    def test_open_range(self) -> None:
        assert DateRange().cache_suffix() == "all"

    def test_equivalent_inputs_share_suffix(self) -> None:
        assert (
            DateRange("2024-03-01", None).cache_suffix()
            == DateRange(date(2024, 3, 1), None).cache_suffix()
        )

    def test_preset_keyed_by_name_and_start_day(self) -> None:
        morning = resolve_date_range("thisMonth", None, None, now=NOW)
        evening = resolve_date_range("thisMonth", None, None, now=NOW.replace(hour=22))
        assert morning.end_date != evening.end_date
        assert morning.cache_suffix() == evening.cache_suffix() == "thisMonth@2024-03-01"

    def test_preset_key_rolls_with_the_day(self) -> None:
        today = get_date_range_preset("today", NOW)
        tomorrow = get_date_range_preset("today", NOW.replace(day=14))
        assert today.cache_suffix() != tomorrow.cache_suffix()

    def test_preset_does_not_affect_equality(self) -> None:
        r = get_date_range_preset("yesterday", NOW)
        assert r == DateRange(r.start_date, r.end_date)
