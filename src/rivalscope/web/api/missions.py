"""
Missions REST API endpoints.

Provides:
- POST /api/missions - Deploy an intelligence mission (fire and forget)
- GET /api/missions/{mission_id} - Status of a deployed mission
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from pydantic import ValidationError

from ...mission.models import MissionContext
from ..models.api_models import MissionStatusResponse, TriggerMissionResponse
from ..services.mission_runner import MissionRunner

logger = logging.getLogger(__name__)

router = APIRouter(tags=["missions"])

_mission_runner: MissionRunner | None = None


def init_mission_runner(runner: MissionRunner) -> None:
    """Install the mission runner (called by server.py on startup)."""
    global _mission_runner
    _mission_runner = runner


async def shutdown_mission_runner() -> None:
    """Stop the mission runner (called by server.py on shutdown)."""
    global _mission_runner
    if _mission_runner:
        await _mission_runner.close()
        _mission_runner = None


def get_mission_runner() -> MissionRunner:
    """Get initialized mission runner dependency."""
    if _mission_runner is None:
        raise HTTPException(status_code=500, detail="Mission runner not initialized")
    return _mission_runner


def _pick(data: Any, *keys: str) -> Any:
    """First present value among camelCase/snake_case spellings."""
    if not isinstance(data, dict):
        return None
    for key in keys:
        if data.get(key):
            return data[key]
    return None


def missing_field_error(payload: dict[str, Any]) -> str | None:
    """Describe the first missing required field, if any."""
    if not _pick(_pick(payload, "identity"), "email"):
        return "Missing 'identity.email'"
    if not _pick(_pick(payload, "company"), "name"):
        return "Missing 'company.name'"
    if not _pick(_pick(payload, "targets"), "competitorNames", "competitor_names"):
        return "At least one competitor name is required."
    return None


@router.post("", response_model=TriggerMissionResponse, status_code=202)
async def trigger_mission(
    payload: Annotated[dict[str, Any], Body()],
    runner: Annotated[MissionRunner, Depends(get_mission_runner)],
    duration_minutes: Annotated[float | None, Query(gt=0, le=240)] = None,
) -> TriggerMissionResponse:
    """
    Deploy a mission for a MissionContext payload.

    The mission runs in the background; the report is emailed to
    identity.email when it completes.

    Raises:
        400: Email, company name or competitor names missing
        422: Payload is not a valid MissionContext
    """
    error = missing_field_error(payload)
    if error:
        raise HTTPException(status_code=400, detail=error)

    try:
        context = MissionContext.model_validate(payload)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False)) from e

    duration = duration_minutes or runner.default_duration_minutes
    mission_id = runner.start_mission(context, duration)

    return TriggerMissionResponse(
        mission_id=mission_id,
        message=(
            f"Intelligence agents deployed. Report will be sent to "
            f"{context.identity.email} in ~{duration:g} minutes."
        ),
    )


@router.get("/{mission_id}", response_model=MissionStatusResponse)
async def get_mission(
    mission_id: str,
    runner: Annotated[MissionRunner, Depends(get_mission_runner)],
) -> MissionStatusResponse:
    """
    Get the status of a mission started by this server.

    Raises:
        404: Unknown mission id
    """
    status = runner.get_status(mission_id)
    if status is None:
        raise HTTPException(status_code=404, detail=f"Mission {mission_id} not found")
    return status
