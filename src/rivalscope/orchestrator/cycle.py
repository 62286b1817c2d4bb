"""
Research cycle execution logic.

A research cycle chains three capability calls:
1. Research: what is happening with the competitor in the focus area
2. Analyze: what the first insight indicates
3. Validate: whether the analysis holds up

It yields exactly one Finding when all three calls return something, and
nothing otherwise.
"""

import logging
from collections.abc import Sequence
from datetime import datetime
from typing import TYPE_CHECKING

from ..mission.models import SIGNAL_MAX_CHARS, SNIPPET_MAX_CHARS, Evidence, Finding
from .classify import assess_impact, categorize_focus, clean_text

if TYPE_CHECKING:
    from ..capabilities.base import CapabilityRegistry
    from ..mission.models import ResearchMetrics
    from .recency import RecencyGate

logger = logging.getLogger(__name__)

# Credibility assigned to the research, analysis and validation slots
SLOT_CREDIBILITY = (85, 90, 88)


def build_signal(competitor: str, insight: str) -> str:
    """Headline for a finding: single line, bounded length."""
    return f"{competitor}: {insight}".replace("\n", " ")[:SIGNAL_MAX_CHARS]


class ResearchCycle:
    """Executes the research -> analyze -> validate chain."""

    def __init__(
        self,
        registry: "CapabilityRegistry",
        gate: "RecencyGate",
        metrics: "ResearchMetrics | None" = None,
    ):
        """
        Initialize research cycle.

        Args:
            registry: Capability registry used for every call
            gate: Recency gate qualifying each query
            metrics: Per-mission metrics for call counting
        """
        self.registry = registry
        self.gate = gate
        self.metrics = metrics

    async def _call(self, tool_id: str, query: str) -> str | None:
        return await self.registry.invoke(
            tool_id, self.gate.qualify(query), metrics=self.metrics
        )

    async def execute(
        self,
        competitor: str,
        focus: str,
        tool_ids: Sequence[str],
    ) -> list[Finding]:
        """
        Run one cycle.

        Args:
            competitor: Competitor under investigation
            focus: Current focus area
            tool_ids: Three distinct capability ids, in call order

        Returns:
            A single-element list on success, empty list otherwise
        """
        if len(tool_ids) != 3:
            raise ValueError(f"A research cycle needs exactly 3 tools, got {len(tool_ids)}")

        research_tool, analysis_tool, validation_tool = tool_ids

        result1 = await self._call(research_tool, f"{competitor} {focus}")
        if not result1:
            logger.info(f"[{competitor}] No research result from {research_tool}, skipping cycle")
            return []
        insight1 = clean_text(result1)

        result2 = await self._call(
            analysis_tool,
            f"Analyze: {insight1}. What does this indicate about {competitor}?",
        )
        insight2 = clean_text(result2)

        result3 = await self._call(
            validation_tool,
            f"Validate: {insight2}. Is this accurate?",
        )
        insight3 = clean_text(result3)

        if not (result2 and result3):
            logger.info(f"[{competitor}] Cycle incomplete ({tool_ids}), no finding")
            return []

        evidence = [
            Evidence(
                tool=tool_id,
                snippet=insight[:SNIPPET_MAX_CHARS],
                credibility=credibility,
                timestamp=datetime.now(),
            )
            for tool_id, insight, credibility in zip(
                tool_ids, (insight1, insight2, insight3), SLOT_CREDIBILITY
            )
        ]

        finding = Finding(
            category=categorize_focus(focus),
            signal=build_signal(competitor, insight2),
            evidence=evidence,
            confidence="HIGH",
            impact=assess_impact(insight2),
        )

        logger.info(f"[{competitor}] Finding ({finding.impact}/{finding.category}): {finding.signal}")
        return [finding]
