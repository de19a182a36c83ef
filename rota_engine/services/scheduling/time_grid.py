"""
Week boundary and grid coordinate math.
Weeks start on Monday; all helpers work on calendar dates in the instant's own zone.
"""

from datetime import date, datetime, time, timedelta
from typing import Union

from rota_engine.core.config import local_timezone

from .errors import InvalidPeriod

Instant = Union[date, datetime]


def local_now() -> datetime:
    """Current time in the configured zone."""
    return datetime.now(local_timezone())


def wall_time(value: datetime) -> datetime:
    """Naive wall-clock time in the configured zone; naive input is taken as already local."""
    if value.tzinfo is None:
        return value
    return value.astimezone(local_timezone()).replace(tzinfo=None)


def _as_datetime(value: Instant) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def _as_date(value: Instant) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def week_start(reference: Instant) -> datetime:
    """Monday 00:00 of the week containing `reference` (tzinfo preserved)."""
    ref = _as_datetime(reference)
    midnight = ref.replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight - timedelta(days=ref.weekday())


def day_offset(instant: Instant, start: Instant) -> int:
    """Whole calendar days from `start` to `instant`, unclamped."""
    return (_as_date(instant) - _as_date(start)).days


def day_index_in_week(instant: Instant, start: Instant) -> int:
    """Day column 0-6 for `instant`; out-of-week values are clamped."""
    return max(0, min(6, day_offset(instant, start)))


def is_in_week(instant: Instant, start: Instant) -> bool:
    return 0 <= day_offset(instant, start) <= 6


def week_dates(start: Instant) -> list[date]:
    monday = _as_date(week_start(start))
    return [monday + timedelta(days=i) for i in range(7)]


def _thursday_of(instant: Instant) -> date:
    d = _as_date(instant)
    return d + timedelta(days=3 - d.weekday())


def iso_week_number(instant: Instant) -> int:
    """ISO-8601 week number: the Thursday of the week decides the year."""
    thursday = _thursday_of(instant)
    return (thursday - date(thursday.year, 1, 1)).days // 7 + 1


def iso_week_year(instant: Instant) -> int:
    return _thursday_of(instant).year


def iso_week_token(instant: Instant) -> str:
    """e.g. '2025-W03'."""
    return f"{iso_week_year(instant)}-W{iso_week_number(instant):02d}"


def iso_week_monday(year: int, week: int) -> date:
    """Monday of ISO week `week` of `year` (week 1 contains January 4th)."""
    if not 1 <= week <= 53:
        raise InvalidPeriod(f"Week number must be between 1 and 53, got {week}")
    jan_4 = date(year, 1, 4)
    monday = jan_4 - timedelta(days=jan_4.weekday()) + timedelta(weeks=week - 1)
    if week == 53 and iso_week_year(monday) != year:
        raise InvalidPeriod(f"{year} has no ISO week 53")
    return monday
