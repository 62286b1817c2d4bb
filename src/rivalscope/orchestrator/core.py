"""
Deep research orchestrator driving time-boxed competitor investigations.

The DeepResearchOrchestrator:
- Splits the mission budget evenly across competitors (processed in order)
- Picks three distinct capabilities per cycle via the diversity enforcer
- Gates each finding on recency before persisting and accumulating it
- Rotates the focus area every few iterations
- Paces calls to external providers
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Sequence
from typing import TYPE_CHECKING

from ..capabilities.base import DEFAULT_RESEARCH_CAPABILITIES
from .cycle import ResearchCycle
from .diversity import ToolDiversityEnforcer
from .recency import RecencyGate

if TYPE_CHECKING:
    from ..capabilities.base import CapabilityRegistry
    from ..graph.client import KnowledgeGraphClient
    from ..mission.models import Finding, ResearchState

logger = logging.getLogger(__name__)

FOCUS_AREAS = (
    "product launches",
    "pricing strategy",
    "leadership hires",
    "market expansion",
    "customer sentiment",
    "partnerships",
    "funding",
    "positioning",
)

DEFAULT_INITIAL_FOCUS = "market strategy"
FOCUS_ROTATION_INTERVAL = 3


def next_focus(iteration: int) -> str:
    """Focus theme for a given iteration count."""
    return FOCUS_AREAS[iteration % len(FOCUS_AREAS)]


class DeepResearchOrchestrator:
    """Runs the time-boxed research loop for each competitor in turn."""

    def __init__(
        self,
        registry: CapabilityRegistry,
        graph: KnowledgeGraphClient,
        state: ResearchState,
        gate: RecencyGate | None = None,
        tool_ids: Sequence[str] = DEFAULT_RESEARCH_CAPABILITIES,
        pause_seconds: float = 2.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize orchestrator.

        Args:
            registry: Capability registry (must hold every id in tool_ids)
            graph: Knowledge-graph client for persisting findings
            state: Per-mission accumulator
            gate: Recency gate (defaults to wall-clock gate)
            tool_ids: Research capability ids to rotate through (at least 3)
            pause_seconds: Courtesy delay between iterations
            clock: Monotonic clock in seconds
            sleep: Async sleep used for pacing

        Raises:
            MissingCapabilityError: If a research capability is unregistered
            ValueError: If fewer than three tool ids are given
        """
        if len(tool_ids) < 3:
            raise ValueError("At least 3 research capabilities are required")
        registry.require(*tool_ids)

        self.registry = registry
        self.graph = graph
        self.state = state
        self.gate = gate or RecencyGate()
        self.pause_seconds = pause_seconds
        self._clock = clock
        self._sleep = sleep

        self.enforcer = ToolDiversityEnforcer(tool_ids)
        self.cycle = ResearchCycle(registry, self.gate, state.metrics)

    async def run(
        self,
        competitor: str,
        initial_focus: str,
        duration_seconds: float,
    ) -> int:
        """
        Research one competitor until the time budget is spent.

        The budget is checked between iterations only, so the loop may
        overrun by up to one cycle.

        Returns:
            Number of iterations run
        """
        logger.info(f"Researching {competitor} ({duration_seconds / 60:.0f} min)")

        start = self._clock()
        focus = initial_focus
        iteration = 0

        while self._clock() - start < duration_seconds:
            iteration += 1
            self.state.iteration_count += 1
            elapsed_min = int((self._clock() - start) // 60)
            logger.info(f"[{competitor}] [{elapsed_min}m] Iteration {iteration}, focus: {focus}")

            tool_ids = self.enforcer.select_distinct(3)
            findings = await self.cycle.execute(competitor, focus, tool_ids)
            await self._accept(findings, competitor, focus)

            if iteration % FOCUS_ROTATION_INTERVAL == 0:
                focus = next_focus(iteration)

            await self._sleep(self.pause_seconds)

        logger.info(
            f"[{competitor}] Done after {iteration} iterations, "
            f"{len(self.state.findings)} findings accumulated"
        )
        return iteration

    async def _accept(self, findings: list[Finding], competitor: str, focus: str) -> None:
        """Persist and accumulate recent findings; count and drop stale ones."""
        for finding in findings:
            if not self.gate.is_recent(finding.signal):
                self.state.metrics.recency_filtered += 1
                logger.info(f"[{competitor}] Dropped stale finding: {finding.signal[:60]}...")
                continue

            if await self.graph.record_finding(finding, competitor, focus):
                self.state.metrics.graph_writes += 1
            self.state.findings.append(finding)

    async def run_all(
        self,
        competitors: Sequence[str],
        total_duration_seconds: float,
        initial_focus: str = DEFAULT_INITIAL_FOCUS,
    ) -> list[Finding]:
        """
        Research every competitor sequentially with an equal share of time.

        Returns:
            Accumulated findings across all competitors
        """
        if not competitors:
            raise ValueError("At least one competitor required")

        per_competitor = total_duration_seconds / len(competitors)
        for competitor in competitors:
            await self.run(competitor, initial_focus, per_competitor)

        return self.state.findings
