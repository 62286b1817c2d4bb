"""Tests for recurring schedule computation."""

from datetime import datetime, timezone

import pytest

from rivalscope.scheduling.models import Frequency
from rivalscope.scheduling.schedule import calculate_next_run, format_timestamp, next_run_datetime

SUNDAY = datetime(2026, 3, 15, 10, 30)
MONDAY = datetime(2026, 3, 16, 8, 0)


@pytest.mark.parametrize(
    ("frequency", "now", "expected"),
    [
        (Frequency.DAILY_MORNING, SUNDAY, datetime(2026, 3, 16, 9, 0)),
        (Frequency.WEEKLY_MONDAY, SUNDAY, datetime(2026, 3, 16, 9, 0)),
        (Frequency.WEEKLY_FRIDAY, SUNDAY, datetime(2026, 3, 20, 9, 0)),
        (Frequency.WEEKLY_MONDAY, MONDAY, datetime(2026, 3, 23, 9, 0)),
        (Frequency.MONTHLY_1ST, SUNDAY, datetime(2026, 4, 1, 9, 0)),
        (Frequency.MONTHLY_1ST, datetime(2026, 12, 31, 23, 0), datetime(2027, 1, 1, 9, 0)),
        (Frequency.DAILY_MORNING, datetime(2026, 2, 28, 7, 0), datetime(2026, 3, 1, 9, 0)),
    ],
)
def test_next_run_datetime(frequency, now, expected):
    assert next_run_datetime(frequency, now) == expected


def test_accepts_plain_string():
    assert next_run_datetime("WEEKLY_FRIDAY", SUNDAY) == datetime(2026, 3, 20, 9, 0)


def test_unknown_frequency_rejected():
    with pytest.raises(ValueError):
        next_run_datetime("HOURLY", SUNDAY)


def test_calculate_next_run_iso_format():
    assert calculate_next_run(Frequency.DAILY_MORNING, SUNDAY) == "2026-03-16T09:00:00.000"


def test_format_timestamp_is_naive_milliseconds():
    assert format_timestamp(datetime(2026, 3, 16, 9)) == "2026-03-16T09:00:00.000"
    assert format_timestamp(datetime(2026, 3, 16, 9, 0, 0, 123456)) == "2026-03-16T09:00:00.123"
    aware = datetime(2026, 3, 16, 9, tzinfo=timezone.utc)
    assert "+" not in format_timestamp(aware)
    assert format_timestamp(aware) == format_timestamp(aware.astimezone().replace(tzinfo=None))
