import asyncio

import pytest

from rivalscope.mission.models import ResearchState
from rivalscope.mission.runner import MissionResult
from rivalscope.orchestrator.critical_path import CriticalPathAnalysis
from rivalscope.web.services.mission_runner import MissionRunner


class _FakeExecutor:
    def __init__(self, error=None, hold=None):
        self.error = error
        self.hold = hold
        self.calls = []

    async def execute(self, mission_id, context, duration_minutes, send=True):
        self.calls.append((mission_id, duration_minutes))
        if self.hold:
            await self.hold.wait()
        if self.error:
            raise self.error
        state = ResearchState()
        state.metrics.total_tool_calls = 9
        return MissionResult(mission_id, "<html/>", state, CriticalPathAnalysis(), delivered=True)


async def _settle():
    for _ in range(5):
        await asyncio.sleep(0)


@pytest.mark.asyncio
async def test_completed_mission_status(mission_context):
    executor = _FakeExecutor()
    runner = MissionRunner(executor, default_duration_minutes=30)

    mission_id = runner.start_mission(mission_context)
    assert runner.get_status(mission_id).status == "running"
    await _settle()

    status = runner.get_status(mission_id)
    assert status.status == "completed"
    assert status.tool_calls == 9
    assert status.delivered
    assert status.completed_at is not None
    assert executor.calls == [(mission_id, 30)]


@pytest.mark.asyncio
async def test_failed_mission_status(mission_context):
    runner = MissionRunner(_FakeExecutor(error=RuntimeError("gateway down")))

    mission_id = runner.start_mission(mission_context, 5)
    await _settle()

    status = runner.get_status(mission_id)
    assert status.status == "failed"
    assert status.error_message == "gateway down"


@pytest.mark.asyncio
async def test_missions_run_concurrently(mission_context):
    hold = asyncio.Event()
    executor = _FakeExecutor(hold=hold)
    runner = MissionRunner(executor)

    first = runner.start_mission(mission_context)
    second = runner.start_mission(mission_context)
    await _settle()

    assert first != second
    assert len(executor.calls) == 2

    hold.set()
    await _settle()
    assert runner.get_status(first).status == runner.get_status(second).status == "completed"


@pytest.mark.asyncio
async def test_close_cancels_running(mission_context):
    runner = MissionRunner(_FakeExecutor(hold=asyncio.Event()))

    mission_id = runner.start_mission(mission_context)
    await _settle()
    await runner.close()

    status = runner.get_status(mission_id)
    assert status.status == "failed"
    assert status.error_message == "cancelled"


def test_unknown_mission():
    assert MissionRunner(_FakeExecutor()).get_status("nope") is None


@pytest.mark.asyncio
async def test_status_map_forgets_oldest_finished(mission_context):
    runner = MissionRunner(_FakeExecutor(), max_tracked=2)

    first = runner.start_mission(mission_context)
    await _settle()
    second = runner.start_mission(mission_context)
    await _settle()
    third = runner.start_mission(mission_context)
    await _settle()

    assert runner.get_status(first) is None
    assert runner.get_status(second).status == "completed"
    assert runner.get_status(third).status == "completed"


@pytest.mark.asyncio
async def test_running_missions_never_evicted(mission_context):
    hold = asyncio.Event()
    runner = MissionRunner(_FakeExecutor(hold=hold), max_tracked=1)

    first = runner.start_mission(mission_context)
    second = runner.start_mission(mission_context)
    await _settle()

    assert runner.get_status(first).status == "running"
    assert runner.get_status(second).status == "running"

    hold.set()
    await _settle()
    third = runner.start_mission(mission_context)

    assert runner.get_status(first) is None
    assert runner.get_status(second) is None
    assert runner.get_status(third).status == "running"
    await runner.close()
