"""
Day-granular time helpers for the reminder engine.

Every "today" and every contact timestamp is reduced to a calendar date in
REMINDER_TIME_ZONE. Callers fetch "today" once per run and pass it down so a
run that straddles midnight still works against a single date.
"""

from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from django.conf import settings
from django.utils import timezone


def get_reminder_zone():
    """Return the configured reminder time zone."""
    return ZoneInfo(settings.REMINDER_TIME_ZONE)


def local_today(tz=None, now=None) -> date:
    """Current calendar date in the reminder zone."""
    return timezone.localdate(now, timezone=tz or get_reminder_zone())


def to_local_date(value, tz=None) -> date:
    """
    Truncate a timestamp to a calendar date in the reminder zone.

    Naive datetimes are assumed to already be in that zone; plain dates are
    returned unchanged.
    """
    tz = tz or get_reminder_zone()
    if isinstance(value, datetime):
        if timezone.is_naive(value):
            value = timezone.make_aware(value, tz)
        return timezone.localtime(value, tz).date()
    return value


def start_of_day(day: date, tz=None) -> datetime:
    """Aware datetime for 00:00 of `day` in the reminder zone."""
    return datetime.combine(day, time.min, tzinfo=tz or get_reminder_zone())


def end_of_day_exclusive(day: date, tz=None) -> datetime:
    """Aware datetime for 00:00 of the day after `day`."""
    return start_of_day(day + timedelta(days=1), tz)


def days_between(start: date, end: date) -> int:
    """Whole days from `start` to `end` (negative if end precedes start)."""
    return (end - start).days
