"""Date and time helpers. All persisted datetimes are naive UTC."""

from datetime import date, datetime, time, timedelta, timezone
from typing import Iterator, Optional

from ..constants import WEEK_DAYS


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to naive UTC; naive values are assumed to be UTC already"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def week_start(value: date) -> date:
    """Return the Monday of the week containing the provided date"""
    if isinstance(value, datetime):
        value = value.date()
    return value - timedelta(days=value.weekday())


def daterange(start: date, end: date) -> Iterator[date]:
    """Yield every date from start to end, both inclusive"""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def weekday_code(value: date) -> str:
    return WEEK_DAYS[value.weekday()]


def shift_hours(start_time: time, end_time: time) -> float:
    start = datetime.combine(date.min, start_time)
    end = datetime.combine(date.min, end_time)
    return round((end - start).total_seconds() / 3600, 2)


def times_overlap(start_a: time, end_a: time, start_b: time, end_b: time) -> bool:
    """Half-open interval overlap: back-to-back shifts do not overlap"""
    return start_a < end_b and start_b < end_a


def format_wait_time(minutes: int) -> str:
    """
    Human readable wait estimate.

    45 -> "45 min", 120 -> "2 hours", 135 -> "2h 15m"
    """
    if minutes < 60:
        return f"{minutes} min"
    hours = minutes // 60
    remaining_minutes = minutes % 60
    return f"{hours}h {remaining_minutes}m" if remaining_minutes > 0 else f"{hours} hours"


def format_time_remaining(expires_at: datetime, now: Optional[datetime] = None) -> str:
    now = now or utcnow()
    if expires_at <= now:
        return "Expired"

    total_minutes = int((expires_at - now).total_seconds() // 60)
    hours, minutes = divmod(total_minutes, 60)
    if hours:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"
