"""Tests for the deep research loop."""

import pytest

from rivalscope.capabilities.base import MissingCapabilityError
from rivalscope.graph.client import KnowledgeGraphClient
from rivalscope.mission.models import ResearchState
from rivalscope.orchestrator.core import FOCUS_AREAS, DeepResearchOrchestrator, next_focus

from conftest import InMemoryGraphTransport

TOOLS = ("exa", "perplexity", "xai")


class FakeClock:
    """Monotonic clock advanced only by the orchestrator's pauses."""

    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.now += seconds


def build(registry_with, provider_factory, gate, response, transport=None, pause=4.0):
    registry = registry_with({t: provider_factory(t, responses=response) for t in TOOLS})
    state = ResearchState()
    transport = transport or InMemoryGraphTransport()
    clock = FakeClock()
    orchestrator = DeepResearchOrchestrator(
        registry,
        KnowledgeGraphClient(transport, state.metrics),
        state,
        gate=gate,
        pause_seconds=pause,
        clock=clock,
        sleep=clock.sleep,
    )
    return orchestrator, state, transport


def test_next_focus_wraps():
    assert next_focus(3) == "market expansion"
    assert next_focus(len(FOCUS_AREAS)) == FOCUS_AREAS[0]


@pytest.mark.asyncio
async def test_recent_findings_are_persisted(registry_with, provider_factory, fixed_gate):
    orchestrator, state, transport = build(
        registry_with, provider_factory, fixed_gate,
        "Globex cut prices in March 2026, a critical move",
    )

    iterations = await orchestrator.run("Globex", "pricing strategy", 10)

    assert iterations == 3
    assert state.iteration_count == 3
    assert len(state.findings) == 3
    assert state.metrics.graph_writes == 3
    assert state.metrics.recency_filtered == 0
    assert state.metrics.total_tool_calls == 9
    assert transport.operations().count("create_entities") == 3


@pytest.mark.asyncio
async def test_stale_findings_counted_not_persisted(registry_with, provider_factory, fixed_gate):
    orchestrator, state, transport = build(
        registry_with, provider_factory, fixed_gate, "Globex cut prices back in 2019",
    )

    await orchestrator.run("Globex", "pricing strategy", 10)

    assert state.findings == []
    assert state.metrics.recency_filtered == 3
    assert state.metrics.graph_writes == 0
    assert "create_entities" not in transport.operations()


@pytest.mark.asyncio
async def test_graph_failure_keeps_finding(registry_with, provider_factory, fixed_gate):
    transport = InMemoryGraphTransport(fail_operations={"create_entities"})
    orchestrator, state, _ = build(
        registry_with, provider_factory, fixed_gate,
        "New Globex launch in March 2026", transport=transport,
    )

    await orchestrator.run("Globex", "product launches", 5)

    assert len(state.findings) == 2
    assert state.metrics.graph_writes == 0


@pytest.mark.asyncio
async def test_focus_rotates_every_third_iteration(registry_with, provider_factory, fixed_gate):
    orchestrator, _, _ = build(registry_with, provider_factory, fixed_gate, None)
    seen: list[tuple[str, str]] = []

    async def record(competitor, focus, tool_ids):
        seen.append((competitor, focus))
        assert len(set(tool_ids)) == 3
        return []

    orchestrator.cycle.execute = record
    await orchestrator.run("Globex", "market strategy", 27)

    assert [focus for _, focus in seen] == [
        "market strategy", "market strategy", "market strategy",
        "market expansion", "market expansion", "market expansion",
        "funding",
    ]


@pytest.mark.asyncio
async def test_run_all_splits_time_in_order(registry_with, provider_factory, fixed_gate):
    orchestrator, state, _ = build(registry_with, provider_factory, fixed_gate, None)
    seen: list[str] = []

    async def record(competitor, focus, tool_ids):
        seen.append(competitor)
        return []

    orchestrator.cycle.execute = record
    findings = await orchestrator.run_all(["Globex", "Initech"], 20)

    assert findings == []
    assert seen == ["Globex"] * 3 + ["Initech"] * 3
    assert state.iteration_count == 6


@pytest.mark.asyncio
async def test_run_all_requires_competitors(registry_with, provider_factory, fixed_gate):
    orchestrator, _, _ = build(registry_with, provider_factory, fixed_gate, None)
    with pytest.raises(ValueError):
        await orchestrator.run_all([], 60)


def test_missing_capability_rejected(registry_with, provider_factory, fixed_gate):
    registry = registry_with({"exa": provider_factory("exa"), "xai": provider_factory("xai")})
    state = ResearchState()
    with pytest.raises(MissingCapabilityError) as exc_info:
        DeepResearchOrchestrator(
            registry, KnowledgeGraphClient(InMemoryGraphTransport()), state, gate=fixed_gate
        )
    assert exc_info.value.missing == ["perplexity"]


def test_needs_three_tools(registry_with, provider_factory, fixed_gate):
    registry = registry_with({"exa": provider_factory("exa")})
    with pytest.raises(ValueError):
        DeepResearchOrchestrator(
            registry,
            KnowledgeGraphClient(InMemoryGraphTransport()),
            ResearchState(),
            gate=fixed_gate,
            tool_ids=["exa"],
        )
