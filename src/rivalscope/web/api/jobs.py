"""
Recurring jobs REST API endpoints.

Provides:
- GET /api/jobs - Jobs of the requesting user
- POST /api/jobs - Create a recurring mission
- DELETE /api/jobs/{job_id} - Delete one of the user's jobs

The user is identified by the X-User-ID header (placeholder for real auth).
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException

from ...scheduling.models import RecurringJob
from ...scheduling.schedule import next_run_datetime
from ...scheduling.store import JobStore
from ...scheduling.templates import RECURRING_TEMPLATES
from ..models.api_models import (
    CreateJobRequest,
    CreateJobResponse,
    JobsListResponse,
    SuccessResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["jobs"])

DEFAULT_USER_ID = "default_user"

_job_store: JobStore | None = None


def init_job_store(store: JobStore) -> None:
    """Install the job store (called by server.py on startup)."""
    global _job_store
    _job_store = store


async def shutdown_job_store() -> None:
    global _job_store
    if _job_store:
        await _job_store.close()
        _job_store = None


def get_job_store() -> JobStore:
    """Get initialized job store dependency."""
    if _job_store is None:
        raise HTTPException(status_code=500, detail="Job store not initialized")
    return _job_store


def get_user_id(x_user_id: Annotated[str | None, Header()] = None) -> str:
    return x_user_id or DEFAULT_USER_ID


@router.get("", response_model=JobsListResponse)
async def list_jobs(
    user_id: Annotated[str, Depends(get_user_id)],
    store: Annotated[JobStore, Depends(get_job_store)],
) -> JobsListResponse:
    return JobsListResponse(jobs=await store.list_user_jobs(user_id))


@router.post("", response_model=CreateJobResponse)
async def create_job(
    request: CreateJobRequest,
    user_id: Annotated[str, Depends(get_user_id)],
    store: Annotated[JobStore, Depends(get_job_store)],
) -> CreateJobResponse:
    """
    Create a recurring mission; the first run is the next scheduled slot.

    Raises:
        400: targetName, templateId or userEmail missing, or unknown template
    """
    if not (request.target_name and request.template_id and request.user_email):
        raise HTTPException(
            status_code=400,
            detail="Missing required job fields (targetName, templateId, userEmail)",
        )
    if request.template_id not in RECURRING_TEMPLATES:
        raise HTTPException(status_code=400, detail=f"Unknown template '{request.template_id}'")

    job = RecurringJob(
        user_id=user_id,
        target_name=request.target_name,
        target_url=request.target_url or "https://google.com",
        template_id=request.template_id,
        user_email=request.user_email,
        frequency=request.frequency,
        custom_query=request.custom_query,
        next_run=next_run_datetime(request.frequency),
    )
    await store.create_job(job)
    return CreateJobResponse(job_id=job.id)


@router.delete("/{job_id}", response_model=SuccessResponse)
async def delete_job(
    job_id: str,
    user_id: Annotated[str, Depends(get_user_id)],
    store: Annotated[JobStore, Depends(get_job_store)],
) -> SuccessResponse:
    """Delete a job; deleting another user's (or an unknown) job is a no-op."""
    await store.delete_job(job_id, user_id)
    return SuccessResponse()
