"""
Pydantic models for API requests and responses.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ...scheduling.models import Frequency, RecurringJob


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Mission API models


class TriggerMissionResponse(_CamelModel):
    """Acknowledgment returned as soon as a mission is deployed."""

    success: bool = True
    mission_id: str
    status: Literal["deployed"] = "deployed"
    message: str


class MissionStatusResponse(_CamelModel):
    """State of a mission started by this server."""

    mission_id: str
    status: Literal["running", "completed", "failed"]
    started_at: datetime
    completed_at: datetime | None = None
    findings_count: int = Field(default=0, ge=0)
    tool_calls: int = Field(default=0, ge=0)
    delivered: bool = False
    error_message: str | None = None


# Recurring job API models


class CreateJobRequest(_CamelModel):
    """Recurring job creation payload; required fields are checked by the route."""

    target_name: str | None = None
    template_id: str | None = None
    user_email: str | None = None
    target_url: str | None = None
    frequency: Frequency = Frequency.DAILY_MORNING
    custom_query: str | None = None


class CreateJobResponse(_CamelModel):
    success: bool = True
    job_id: str


class JobsListResponse(_CamelModel):
    jobs: list[RecurringJob]


class SuccessResponse(_CamelModel):
    success: bool = True
