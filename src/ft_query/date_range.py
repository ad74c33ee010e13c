"""Date-range filters and named presets.

build_date_range_filter is asymmetric: the start bound is used
exactly as given, while the end bound is widened to 23:59:59.999 of its
calendar day so a date-only end ("2024-03-15") covers the whole day.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any

from src.ft_common.datetime_utils import end_of_day, start_of_day, to_datetime, utc_now
from src.ft_common.errors import InvalidDateRangeError

DateLike = datetime | date | str

PRESETS = (
    "today",
    "yesterday",
    "thisWeek",
    "thisMonth",
    "lastMonth",
    "thisYear",
    "last30Days",
    "last90Days",
)


@dataclass(frozen=True)
class DateRange:
    start_date: DateLike | None = None
    end_date: DateLike | None = None
    # Set when the range came from a named preset.
    preset: str | None = field(default=None, compare=False)

    @property
    def is_empty(self) -> bool:
        return self.start_date is None and self.end_date is None

    def cache_suffix(self) -> str:
        """Stable string form for cache keys.

        `all` when open, `<preset>@<start day>` for preset ranges (their end
        is usually the current instant), `<start>_<end>` otherwise.
        """
        if self.is_empty:
            return "all"
        if self.preset and self.start_date is not None:
            return f"{self.preset}@{to_datetime(self.start_date).date().isoformat()}"
        start = to_datetime(self.start_date).isoformat() if self.start_date else ""
        end = to_datetime(self.end_date).isoformat() if self.end_date else ""
        return f"{start}_{end}"


def build_date_range_filter(date_range: DateRange, field: str = "date") -> dict[str, Any]:
    if date_range.is_empty:
        return {}
    bounds: dict[str, datetime] = {}
    if date_range.start_date is not None:
        bounds["$gte"] = to_datetime(date_range.start_date)
    if date_range.end_date is not None:
        bounds["$lte"] = end_of_day(to_datetime(date_range.end_date))
    return {field: bounds}


def get_date_range_preset(name: str, now: datetime | None = None) -> DateRange:
    """Map a preset name to a concrete range anchored on `now`.

    `now` defaults to the current UTC instant; midnight boundaries are taken
    in `now`'s timezone. Unknown names return an empty range.
    """
    now = now or utc_now()
    today = start_of_day(now)

    if name == "today":
        return DateRange(today, now, preset=name)
    if name == "yesterday":
        return DateRange(today - timedelta(days=1), today, preset=name)
    if name == "thisWeek":
        # weekday(): Monday=0 .. Sunday=6; weeks start on Sunday
        days_since_sunday = (today.weekday() + 1) % 7
        return DateRange(today - timedelta(days=days_since_sunday), now, preset=name)
    if name == "thisMonth":
        return DateRange(today.replace(day=1), now, preset=name)
    if name == "lastMonth":
        first_this_month = today.replace(day=1)
        last_prev_month = first_this_month - timedelta(days=1)
        return DateRange(last_prev_month.replace(day=1), last_prev_month, preset=name)
    if name == "thisYear":
        return DateRange(today.replace(month=1, day=1), now, preset=name)
    if name == "last30Days":
        return DateRange(today - timedelta(days=30), now, preset=name)
    if name == "last90Days":
        return DateRange(today - timedelta(days=90), now, preset=name)
    return DateRange()


def resolve_date_range(
    preset: str | None,
    start_date: str | None,
    end_date: str | None,
    now: datetime | None = None,
) -> DateRange:
    """Combine HTTP query parameters into a DateRange.

    A known preset wins over explicit bounds. Explicit bounds are parsed
    eagerly so malformed input fails with a 422 rather than a store error.
    """
    if preset in PRESETS:
        return get_date_range_preset(preset, now)
    try:
        start = to_datetime(start_date) if start_date else None
        end = to_datetime(end_date) if end_date else None
    except ValueError as exc:
        raise InvalidDateRangeError(str(exc)) from None
    if start is not None and end is not None and _naive(start) > _naive(end_of_day(end)):
        raise InvalidDateRangeError("startDate is after endDate")
    return DateRange(start, end)


def _naive(value: datetime) -> datetime:
    return value.replace(tzinfo=None)
