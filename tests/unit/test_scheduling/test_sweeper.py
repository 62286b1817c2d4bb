"""Tests for the recurring mission sweep."""

from datetime import datetime

import pytest
import pytest_asyncio

from rivalscope.scheduling.models import Frequency, RecurringJob
from rivalscope.scheduling.store import JobStore
from rivalscope.scheduling.sweeper import RecurringMissionSweeper

NOW = datetime(2026, 3, 15, 10, 30)


class FakeExecutor:
    def __init__(self, failing_targets: set[str] | None = None):
        self.failing_targets = failing_targets or set()
        self.runs: list[tuple[str, str, float]] = []

    async def execute(self, mission_id, context, duration_minutes, send=True):
        target = context.targets.competitor_names[0]
        self.runs.append((mission_id, target, duration_minutes))
        if target in self.failing_targets:
            raise RuntimeError("gateway unavailable")


@pytest_asyncio.fixture
async def store():
    store = JobStore(":memory:")
    await store.initialize()
    yield store
    await store.close()


async def add_job(store, target, next_run, frequency=Frequency.DAILY_MORNING):
    return await store.create_job(RecurringJob(
        user_id="u1",
        target_name=target,
        template_id="pricing_monitor",
        user_email="ada@example.com",
        frequency=frequency,
        next_run=next_run,
    ))


@pytest.mark.asyncio
async def test_due_jobs_run_and_reschedule(store):
    daily = await add_job(store, "Globex", datetime(2026, 3, 15, 9))
    weekly = await add_job(store, "Initech", datetime(2026, 3, 14, 9), Frequency.WEEKLY_FRIDAY)
    await add_job(store, "Future", datetime(2026, 3, 16, 9))
    executor = FakeExecutor()

    completed = await RecurringMissionSweeper(store, executor, duration_minutes=30).sweep(NOW)

    assert completed == [weekly.id, daily.id]
    assert executor.runs == [
        (f"RECURRING-{weekly.id}", "Initech", 30),
        (f"RECURRING-{daily.id}", "Globex", 30),
    ]
    assert (await store.get_job(daily.id)).next_run == datetime(2026, 3, 16, 9)
    assert (await store.get_job(weekly.id)).next_run == datetime(2026, 3, 20, 9)
    assert (await store.get_job(daily.id)).last_run == NOW


@pytest.mark.asyncio
async def test_failed_job_keeps_schedule(store):
    failing = await add_job(store, "Globex", datetime(2026, 3, 15, 8))
    healthy = await add_job(store, "Initech", datetime(2026, 3, 15, 9))
    sweeper = RecurringMissionSweeper(store, FakeExecutor(failing_targets={"Globex"}))

    completed = await sweeper.sweep(NOW)

    assert completed == [healthy.id]
    reloaded = await store.get_job(failing.id)
    assert reloaded.next_run == datetime(2026, 3, 15, 8)
    assert reloaded.last_run is None
    assert [j.id for j in await store.get_due_jobs(NOW)] == [failing.id]


@pytest.mark.asyncio
async def test_nothing_due(store):
    executor = FakeExecutor()
    assert await RecurringMissionSweeper(store, executor).sweep(NOW) == []
    assert executor.runs == []
