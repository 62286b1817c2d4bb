"""Recurring missions: jobs, schedules, templates and the periodic sweep."""

from .models import Frequency, RecurringJob
from .schedule import calculate_next_run, format_timestamp, next_run_datetime
from .store import JobStore
from .sweeper import RecurringMissionSweeper
from .templates import RECURRING_TEMPLATES, build_mission_context, get_template

__all__ = [
    "RECURRING_TEMPLATES",
    "Frequency",
    "JobStore",
    "RecurringJob",
    "RecurringMissionSweeper",
    "build_mission_context",
    "calculate_next_run",
    "format_timestamp",
    "get_template",
    "next_run_datetime",
]
