"""
Mission runner service for API-triggered missions.

Missions run as independent background tasks; the caller only receives an
acknowledgment. There is no cap on concurrently running missions; only
the status map is bounded, and it forgets finished missions oldest first.
"""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from datetime import datetime
from uuid import uuid4

from ...mission.models import MissionContext
from ...mission.runner import MissionExecutor
from ..models.api_models import MissionStatusResponse

logger = logging.getLogger(__name__)


class MissionRunner:
    """Starts missions in the background and tracks their status."""

    def __init__(
        self,
        executor: MissionExecutor,
        default_duration_minutes: float = 45.0,
        max_tracked: int = 500,
    ):
        self.executor = executor
        self.default_duration_minutes = default_duration_minutes
        self.max_tracked = max_tracked
        self._statuses: OrderedDict[str, MissionStatusResponse] = OrderedDict()
        self._tasks: dict[str, asyncio.Task[None]] = {}

    async def close(self) -> None:
        """Cancel running missions during app shutdown."""
        tasks = [t for t in self._tasks.values() if not t.done()]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()

    def get_status(self, mission_id: str) -> MissionStatusResponse | None:
        return self._statuses.get(mission_id)

    def start_mission(self, context: MissionContext, duration_minutes: float | None = None) -> str:
        """
        Deploy a mission.

        Returns:
            The new mission id
        """
        mission_id = str(uuid4())
        duration = duration_minutes or self.default_duration_minutes

        self._statuses[mission_id] = MissionStatusResponse(
            mission_id=mission_id,
            status="running",
            started_at=datetime.now(),
        )
        self._evict_finished()
        self._tasks[mission_id] = asyncio.create_task(
            self._run_mission(mission_id, context, duration)
        )

        logger.info(f"Deployed mission {mission_id} for {context.company.name} ({duration:g} min)")
        return mission_id

    def _evict_finished(self) -> None:
        """Drop the oldest finished statuses while over capacity. Running missions are kept."""
        excess = len(self._statuses) - self.max_tracked
        if excess <= 0:
            return
        finished = [mid for mid, s in self._statuses.items() if s.status != "running"]
        for mid in finished[:excess]:
            del self._statuses[mid]

    async def _run_mission(self, mission_id: str, context: MissionContext, duration: float) -> None:
        status = self._statuses[mission_id]
        try:
            result = await self.executor.execute(mission_id, context, duration)
        except asyncio.CancelledError:
            status.status = "failed"
            status.error_message = "cancelled"
            raise
        except Exception as e:
            logger.error("Mission %s crashed: %s", mission_id, e, exc_info=True)
            status.status = "failed"
            status.error_message = str(e)
        else:
            status.status = "completed"
            status.findings_count = len(result.state.findings)
            status.tool_calls = result.state.metrics.total_tool_calls
            status.delivered = result.delivered
        finally:
            status.completed_at = datetime.now()
            self._tasks.pop(mission_id, None)
