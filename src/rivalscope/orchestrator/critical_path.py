"""Post-research analysis: rank findings and surface graph patterns."""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..graph.client import KnowledgeGraphClient
    from ..mission.models import Finding, Pattern

logger = logging.getLogger(__name__)

CRITICAL_FINDINGS_LIMIT = 15


@dataclass
class CriticalPathAnalysis:
    """Top findings, detected patterns and (later) recommendations."""

    critical_findings: list["Finding"] = field(default_factory=list)
    patterns: list["Pattern"] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)


def rank_findings(findings: list["Finding"], limit: int = CRITICAL_FINDINGS_LIMIT) -> list["Finding"]:
    """Best-evidenced findings first; ties keep accumulation order."""
    return sorted(findings, key=lambda f: len(f.evidence), reverse=True)[:limit]


class CriticalPathAnalyzer:
    """Reads the knowledge graph and ranks accumulated findings."""

    def __init__(self, graph: "KnowledgeGraphClient"):
        self.graph = graph

    async def analyze(self, findings: list["Finding"]) -> CriticalPathAnalysis:
        """
        Build the critical-path view of a mission.

        Args:
            findings: Findings accepted during research

        Returns:
            Analysis with empty recommendations
        """
        logger.info(f"Analyzing critical path ({len(findings)} findings)")

        snapshot = await self.graph.get_full_context()
        logger.debug(
            f"Graph holds {len(snapshot.entities)} entities, {len(snapshot.relations)} relations"
        )
        patterns = await self.graph.detect_patterns()

        return CriticalPathAnalysis(
            critical_findings=rank_findings(findings),
            patterns=patterns,
        )
