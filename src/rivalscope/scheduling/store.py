"""
SQLite-backed storage for recurring mission jobs.

Jobs are stored as JSON payloads alongside the columns queried by the
sweep (owner, next run, active flag).
"""

import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path

import aiosqlite

from .models import RecurringJob
from .schedule import format_timestamp

logger = logging.getLogger(__name__)

SCHEMA_STATEMENTS = [
    """
    CREATE TABLE IF NOT EXISTS recurring_jobs (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        next_run TIMESTAMP NOT NULL,
        active INTEGER NOT NULL DEFAULT 1,
        data JSON NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_jobs_user ON recurring_jobs(user_id)",
    "CREATE INDEX IF NOT EXISTS idx_jobs_due ON recurring_jobs(active, next_run)",
]


class JobStore:
    """Async store of recurring jobs."""

    def __init__(self, db_path: str | Path):
        """
        Initialize job store.

        Args:
            db_path: Path to SQLite database (use ':memory:' for in-memory)
        """
        self.db_path = str(db_path)
        self._initialized = False
        self._is_memory = self.db_path == ":memory:"
        self._conn: aiosqlite.Connection | None = None

    async def initialize(self) -> None:
        """Create the schema. Safe to call repeatedly."""
        if self._initialized:
            return

        if self._is_memory:
            self._conn = await aiosqlite.connect(self.db_path)
        else:
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        async with self._get_db() as db:
            for statement in SCHEMA_STATEMENTS:
                await db.execute(statement.strip())
            await db.commit()

        self._initialized = True
        logger.info(f"Initialized job store at {self.db_path}")

    async def close(self) -> None:
        if self._conn is not None:
            await self._conn.close()
            self._conn = None
        self._initialized = False

    @asynccontextmanager
    async def _get_db(self) -> AsyncIterator[aiosqlite.Connection]:
        if self._is_memory:
            if self._conn is None:
                raise RuntimeError("Job store not initialized. Call initialize() first.")
            yield self._conn
        else:
            async with aiosqlite.connect(self.db_path) as db:
                yield db

    async def _ensure_initialized(self) -> None:
        if not self._initialized:
            await self.initialize()

    @staticmethod
    def _row_params(job: RecurringJob) -> tuple:
        return (
            job.id,
            job.user_id,
            format_timestamp(job.next_run),
            int(job.active),
            json.dumps(job.model_dump(mode="json")),
        )

    # --- Write Operations ---

    async def create_job(self, job: RecurringJob) -> RecurringJob:
        await self._ensure_initialized()
        async with self._get_db() as db:
            await db.execute(
                "INSERT INTO recurring_jobs (id, user_id, next_run, active, data) VALUES (?, ?, ?, ?, ?)",
                self._row_params(job),
            )
            await db.commit()

        logger.info(f"Created job {job.id}: {job.target_name} ({job.frequency.value})")
        return job

    async def delete_job(self, job_id: str, user_id: str) -> bool:
        """
        Delete a job owned by a user.

        Returns:
            Whether a job was deleted
        """
        await self._ensure_initialized()
        async with self._get_db() as db:
            cursor = await db.execute(
                "DELETE FROM recurring_jobs WHERE id = ? AND user_id = ?",
                (job_id, user_id),
            )
            await db.commit()
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info(f"Deleted job {job_id}")
        return deleted

    async def update_job_after_run(self, job_id: str, next_run: datetime, ran_at: datetime | None = None) -> None:
        """Record a completed run and reschedule."""
        job = await self.get_job(job_id)
        if job is None:
            logger.warning(f"Cannot reschedule missing job {job_id}")
            return

        job.last_run = ran_at or datetime.now()
        job.next_run = next_run

        async with self._get_db() as db:
            await db.execute(
                "UPDATE recurring_jobs SET next_run = ?, data = ? WHERE id = ?",
                (format_timestamp(job.next_run), json.dumps(job.model_dump(mode="json")), job.id),
            )
            await db.commit()

    # --- Read Operations ---

    async def get_job(self, job_id: str) -> RecurringJob | None:
        await self._ensure_initialized()
        async with self._get_db() as db:
            async with db.execute("SELECT data FROM recurring_jobs WHERE id = ?", (job_id,)) as cursor:
                row = await cursor.fetchone()

        return RecurringJob.model_validate(json.loads(row[0])) if row else None

    async def list_user_jobs(self, user_id: str) -> list[RecurringJob]:
        await self._ensure_initialized()
        async with self._get_db() as db:
            async with db.execute(
                "SELECT data FROM recurring_jobs WHERE user_id = ? ORDER BY next_run",
                (user_id,),
            ) as cursor:
                rows = await cursor.fetchall()

        return [RecurringJob.model_validate(json.loads(row[0])) for row in rows]

    async def get_due_jobs(self, now: datetime | None = None) -> list[RecurringJob]:
        """Active jobs whose next run is at or before now."""
        await self._ensure_initialized()
        now = now or datetime.now()
        async with self._get_db() as db:
            async with db.execute(
                "SELECT data FROM recurring_jobs WHERE active = 1 AND next_run <= ? ORDER BY next_run",
                (format_timestamp(now),),
            ) as cursor:
                rows = await cursor.fetchall()

        return [RecurringJob.model_validate(json.loads(row[0])) for row in rows]
