"""Recurring mission job models."""

from datetime import datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Frequency(str, Enum):
    """How often a recurring mission runs (always at 09:00 local time)."""

    DAILY_MORNING = "DAILY_MORNING"
    WEEKLY_MONDAY = "WEEKLY_MONDAY"
    WEEKLY_FRIDAY = "WEEKLY_FRIDAY"
    MONTHLY_1ST = "MONTHLY_1ST"


class RecurringJob(BaseModel):
    """A persisted recurring mission."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    user_id: str
    target_name: str
    target_url: str = "https://google.com"
    template_id: str
    user_email: str
    frequency: Frequency = Frequency.DAILY_MORNING
    custom_query: str | None = None
    next_run: datetime
    last_run: datetime | None = None
    active: bool = True
    created_at: datetime = Field(default_factory=datetime.now)
