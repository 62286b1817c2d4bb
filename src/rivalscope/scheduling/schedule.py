"""Next-run computation for recurring missions."""

from datetime import datetime, time, timedelta

from .models import Frequency

RUN_TIME = time(9, 0)

_WEEKDAYS = {
    Frequency.WEEKLY_MONDAY: 0,
    Frequency.WEEKLY_FRIDAY: 4,
}


def next_run_datetime(frequency: Frequency, now: datetime | None = None) -> datetime:
    """
    Next 09:00 local run strictly after today for a frequency.

    Weekly schedules jump 1-7 days ahead: running on a Monday schedules the
    following Monday, never the same day.
    """
    now = now or datetime.now()
    frequency = Frequency(frequency)

    if frequency is Frequency.DAILY_MORNING:
        day = now.date() + timedelta(days=1)
    elif frequency in _WEEKDAYS:
        distance = (_WEEKDAYS[frequency] - now.weekday()) % 7 or 7
        day = now.date() + timedelta(days=distance)
    else:
        if now.month == 12:
            day = now.date().replace(year=now.year + 1, month=1, day=1)
        else:
            day = now.date().replace(month=now.month + 1, day=1)

    return datetime.combine(day, RUN_TIME)


def format_timestamp(value: datetime) -> str:
    """
    Naive local ISO-8601 timestamp with millisecond precision.

    Stored run times are compared as strings, so every value written or
    queried must go through here. Aware datetimes are converted to local time.
    """
    if value.tzinfo is not None:
        value = value.astimezone().replace(tzinfo=None)
    return value.isoformat(timespec="milliseconds")


def calculate_next_run(frequency: Frequency, now: datetime | None = None) -> str:
    """Next run as an ISO-8601 local timestamp with millisecond precision."""
    return format_timestamp(next_run_datetime(frequency, now))
