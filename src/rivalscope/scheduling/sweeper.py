"""
Periodic sweep over due recurring missions.

Due jobs run one after another. A failed job is logged and left with its
old next-run time, so the next sweep picks it up again.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import TYPE_CHECKING

from .schedule import next_run_datetime
from .templates import build_mission_context

if TYPE_CHECKING:
    from ..mission.runner import MissionExecutor
    from .store import JobStore

logger = logging.getLogger(__name__)


class RecurringMissionSweeper:
    """Runs due recurring missions and reschedules them."""

    def __init__(
        self,
        store: JobStore,
        executor: MissionExecutor,
        duration_minutes: float = 45.0,
    ):
        self.store = store
        self.executor = executor
        self.duration_minutes = duration_minutes

    async def sweep(self, now: datetime | None = None) -> list[str]:
        """
        Run every job due at ``now``.

        Returns:
            Ids of jobs that completed and were rescheduled
        """
        now = now or datetime.now()
        due = await self.store.get_due_jobs(now)
        if due:
            logger.info(f"Processing {len(due)} recurring missions")

        completed: list[str] = []
        for job in due:
            try:
                context = build_mission_context(job)
                await self.executor.execute(f"RECURRING-{job.id}", context, self.duration_minutes)
                await self.store.update_job_after_run(job.id, next_run_datetime(job.frequency, now), ran_at=now)
            except Exception as e:
                logger.error(f"Job {job.id} failed: {e}", exc_info=True)
                continue
            completed.append(job.id)

        return completed

    async def run_forever(self, interval_seconds: float = 60.0) -> None:
        """Sweep on a fixed interval until cancelled."""
        logger.info(f"Scheduler online (every {interval_seconds:g}s)")
        while True:
            try:
                await self.sweep()
            except Exception as e:
                logger.error(f"Sweep failed: {e}", exc_info=True)
            await asyncio.sleep(interval_seconds)
