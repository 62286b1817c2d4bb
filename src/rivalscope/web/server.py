"""
FastAPI app factory for the rivalscope API.

Creates and configures the FastAPI application with:
- Mission trigger and recurring job routers
- CORS middleware
- Service initialization (mission runner, job store, optional scheduler)
"""

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import AppConfig
from ..mission.runner import MissionExecutor
from ..scheduling.store import JobStore
from ..scheduling.sweeper import RecurringMissionSweeper
from .api import jobs, missions
from .services.mission_runner import MissionRunner

logger = logging.getLogger(__name__)


def create_app(
    config: AppConfig,
    executor: MissionExecutor,
    job_store: JobStore | None = None,
    run_scheduler: bool = True,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        config: Application configuration
        executor: Executes missions (triggered and recurring)
        job_store: Recurring job store (defaults to config.storage.jobs_db_path)
        run_scheduler: Sweep due recurring jobs in the background

    Returns:
        Configured FastAPI application
    """
    store = job_store or JobStore(config.storage.jobs_db_path)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting rivalscope API...")

        await store.initialize()
        jobs.init_job_store(store)
        missions.init_mission_runner(
            MissionRunner(executor, config.mission.default_duration_minutes)
        )

        sweeper_task: asyncio.Task[None] | None = None
        if run_scheduler:
            sweeper = RecurringMissionSweeper(
                store, executor, config.scheduler.mission_duration_minutes
            )
            sweeper_task = asyncio.create_task(
                sweeper.run_forever(config.scheduler.sweep_interval_seconds)
            )

        logger.info("API ready")

        yield

        logger.info("Shutting down API...")
        if sweeper_task:
            sweeper_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await sweeper_task
        await missions.shutdown_mission_runner()
        await jobs.shutdown_job_store()
        logger.info("API stopped")

    app = FastAPI(
        title="RivalScope API",
        description="Autonomous competitive-intelligence missions",
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(missions.router, prefix="/api/missions", tags=["missions"])
    app.include_router(jobs.router, prefix="/api/jobs", tags=["jobs"])

    @app.get("/")
    async def root():
        return {"status": "RivalScope API Online", "version": __version__}

    return app
