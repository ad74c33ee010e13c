"""Datetime utilities shared by query helpers and domain models."""

from datetime import date, datetime, time, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def to_datetime(value: datetime | date | str) -> datetime:
    """Coerce a datetime, date or ISO-8601 string into a datetime.

    Date-only inputs ("2024-03-15" or a `date`) become midnight of that day.
    A trailing "Z" is accepted as UTC. Timezone info is kept as given.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def start_of_day(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(value: datetime) -> datetime:
    """Last representable millisecond of the calendar day (23:59:59.999)."""
    return value.replace(hour=23, minute=59, second=59, microsecond=999000)
