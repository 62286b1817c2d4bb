"""
Knowledge-graph read/write contract for intelligence missions.

Findings become entities typed "{CATEGORY}_FINDING" with observations for
their metadata and evidence, linked to the competitor and focus area.
Writes are best-effort: the memory service offers no transactions, and a
failed write must never abort a mission.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

from ..mission.models import Pattern

if TYPE_CHECKING:
    from ..mission.models import Evidence, Finding, Hypothesis, ResearchMetrics
    from .transport import GraphMemoryTransport

logger = logging.getLogger(__name__)

ENTITY_NAME_MAX_CHARS = 100
FINDING_TYPE_SUFFIX = "_FINDING"
HYPOTHESIS_TYPE = "STRATEGIC_HYPOTHESIS"
PATTERN_MIN_ENTITIES = 3

_QUESTION_STOPWORDS = {"about", "what", "when", "where", "which"}


def sanitize_entity_name(name: str) -> str:
    """
    Derive a graph entity name from free text.

    Distinct texts sharing their first 100 sanitized characters collide;
    the memory service decides what happens on a duplicate name.
    """
    name = re.sub(r"[^a-zA-Z0-9\s]", "", name)
    name = re.sub(r"\s+", "_", name)
    return name[:ENTITY_NAME_MAX_CHARS]


def _entities_of(result: Any) -> list[dict[str, Any]]:
    """Normalize search/open results to a list of entity dicts."""
    if isinstance(result, dict):
        return list(result.get("entities") or [])
    if isinstance(result, list):
        return [e for e in result if isinstance(e, dict)]
    return []


def _as_text(result: Any) -> str:
    if result is None:
        return ""
    return result if isinstance(result, str) else json.dumps(result)


@dataclass
class KnowledgeLookup:
    """Result of checking whether the graph already knows about a topic."""

    exists: bool
    entity: dict[str, Any] | None = None
    confidence: str | None = None


@dataclass
class HypothesisEvidence:
    """Relations supporting and refuting a hypothesis."""

    supporting: list[dict[str, Any]] = field(default_factory=list)
    refuting: list[dict[str, Any]] = field(default_factory=list)

    @property
    def strength(self) -> int:
        return len(self.supporting) - len(self.refuting)


@dataclass
class GraphSnapshot:
    """Entire graph contents."""

    entities: list[dict[str, Any]] = field(default_factory=list)
    relations: list[dict[str, Any]] = field(default_factory=list)


class KnowledgeGraphClient:
    """Entity/relation read-write contract over the graph-memory service."""

    def __init__(
        self,
        transport: "GraphMemoryTransport",
        metrics: "ResearchMetrics | None" = None,
    ):
        """
        Initialize client.

        Args:
            transport: Graph-memory transport
            metrics: Optional per-mission metrics to count reads against
        """
        self.transport = transport
        self.metrics = metrics

    def _count_read(self) -> None:
        if self.metrics is not None:
            self.metrics.graph_reads += 1

    # --- Findings ---

    async def record_finding(
        self,
        finding: "Finding",
        competitor: str,
        focus_area: str,
    ) -> bool:
        """
        Persist a finding with its relations and evidence.

        Every sub-call is best-effort; failures are logged and skipped.

        Returns:
            Whether the finding entity itself was written
        """
        entity_name = sanitize_entity_name(finding.signal)
        logger.info(f"[KG] Recording finding: {finding.signal}")

        try:
            await self.transport.call("create_entities", {
                "entities": [{
                    "name": entity_name,
                    "entityType": f"{finding.category}{FINDING_TYPE_SUFFIX}",
                    "observations": [
                        f"Category: {finding.category}",
                        f"Confidence: {finding.confidence}",
                        f"Impact: {finding.impact}",
                        f"Discovered: {finding.timestamp.isoformat()}",
                        f"Signal: {finding.signal}",
                    ],
                }],
            })
        except Exception as e:
            logger.error(f"[KG] Failed to create entity {entity_name}: {e}")
            return False

        try:
            await self.transport.call("create_relations", {
                "relations": [
                    {"from": entity_name, "to": competitor, "relationType": "discovered_about"},
                    {"from": entity_name, "to": focus_area, "relationType": "relates_to"},
                ],
            })
        except Exception as e:
            logger.error(f"[KG] Failed to link {entity_name}: {e}")

        for evidence in finding.evidence:
            await self.add_evidence(entity_name, evidence)

        logger.debug(f"[KG] Entity created: {entity_name}")
        return True

    async def add_evidence(self, entity_name: str, evidence: "Evidence") -> None:
        """Append one evidence item as observations on an entity."""
        contents = [
            f"Evidence from {evidence.tool}: {evidence.snippet}",
            f"Source credibility: {evidence.credibility}%",
            f"Timestamp: {evidence.timestamp.isoformat()}",
        ]
        if evidence.url:
            contents.append(f"URL: {evidence.url}")

        try:
            await self.transport.call("add_observations", {
                "observations": [{"entityName": entity_name, "contents": contents}],
            })
        except Exception as e:
            logger.error(f"[KG] Failed to add evidence to {entity_name}: {e}")

    async def check_existing_knowledge(self, topic: str) -> KnowledgeLookup:
        """Fuzzy-search the graph for a topic."""
        logger.info(f'[KG] Checking existing knowledge: "{topic}"')
        self._count_read()

        try:
            result = await self.transport.call("search_nodes", {"query": topic})
        except Exception as e:
            logger.warning(f"[KG] Knowledge lookup failed: {e}")
            return KnowledgeLookup(exists=False)

        entities = _entities_of(result)
        if not entities:
            return KnowledgeLookup(exists=False)

        logger.info(f"[KG] Found {len(entities)} related entities")
        return KnowledgeLookup(
            exists=True,
            entity=entities[0],
            confidence=self._extract_confidence(entities[0]),
        )

    # --- Hypotheses ---

    async def create_hypothesis(self, hypothesis: "Hypothesis") -> str:
        """
        Create a STRATEGIC_HYPOTHESIS entity.

        Returns:
            Entity name of the hypothesis
        """
        logger.info(f"[KG] Creating hypothesis: {hypothesis.claim}")
        entity_name = sanitize_entity_name(f"HYPOTHESIS_{hypothesis.claim}")

        await self.transport.call("create_entities", {
            "entities": [{
                "name": entity_name,
                "entityType": HYPOTHESIS_TYPE,
                "observations": [
                    f"Claim: {hypothesis.claim}",
                    f"Implications: {hypothesis.implications}",
                    f"Status: {hypothesis.validation_status}",
                    f"Created: {datetime.now().isoformat()}",
                ],
            }],
        })
        return entity_name

    async def get_hypothesis_evidence(self, entity_name: str) -> HypothesisEvidence:
        """Collect supports/refutes relations of a hypothesis."""
        self._count_read()

        try:
            result = await self.transport.call("open_nodes", {"names": [entity_name]})
        except Exception as e:
            logger.warning(f"[KG] Failed to open hypothesis {entity_name}: {e}")
            return HypothesisEvidence()

        if not isinstance(result, dict):
            return HypothesisEvidence()

        relations = [r for r in result.get("relations") or [] if isinstance(r, dict)]
        return HypothesisEvidence(
            supporting=[r for r in relations if r.get("relationType") == "supports_hypothesis"],
            refuting=[r for r in relations if r.get("relationType") == "refutes_hypothesis"],
        )

    # --- Strategic queries ---

    async def query_strategic(self, question: str) -> str:
        """
        Answer a question from the graph.

        Opens entities named by the question's longer words, or falls back to
        full-text search when there are none.
        """
        logger.info(f'[KG] Strategic query: "{question}"')
        self._count_read()
        names = self._extract_key_entities(question)

        if not names:
            result = await self.transport.call("search_nodes", {"query": question})
            return _as_text(result) or "No relevant knowledge found"

        result = await self.transport.call("open_nodes", {"names": names})
        return _as_text(result) or "Entity not found"

    async def get_full_context(self) -> GraphSnapshot:
        """Read the entire graph; empty on failure."""
        logger.info("[KG] Reading full knowledge graph...")
        self._count_read()

        try:
            result = await self.transport.call("read_graph", {})
        except Exception as e:
            logger.warning(f"[KG] Failed to read graph: {e}")
            return GraphSnapshot()

        if not isinstance(result, dict):
            return GraphSnapshot()

        return GraphSnapshot(
            entities=_entities_of(result),
            relations=[r for r in result.get("relations") or [] if isinstance(r, dict)],
        )

    # --- Patterns ---

    async def detect_patterns(self) -> list[Pattern]:
        """Flag categories with at least three recorded findings."""
        snapshot = await self.get_full_context()
        by_category: dict[str, list[str]] = {}

        for entity in snapshot.entities:
            entity_type = str(entity.get("entityType", ""))
            if not entity_type.endswith(FINDING_TYPE_SUFFIX):
                continue
            category = entity_type[: -len(FINDING_TYPE_SUFFIX)]
            by_category.setdefault(category, []).append(str(entity.get("name", "")))

        patterns = [
            Pattern(
                description=f"High activity in {category} - {len(names)} signals detected",
                entities=names,
                confidence=min(90, len(names) * 20),
            )
            for category, names in by_category.items()
            if len(names) >= PATTERN_MIN_ENTITIES
        ]

        logger.info(f"[KG] Detected {len(patterns)} patterns")
        return patterns

    # --- Utilities ---

    @staticmethod
    def _extract_confidence(entity: dict[str, Any]) -> str:
        for observation in entity.get("observations") or []:
            if "Confidence:" in observation:
                return observation.split("Confidence:", 1)[1].strip()
        return "UNKNOWN"

    @staticmethod
    def _extract_key_entities(question: str) -> list[str]:
        words = question.lower().split(" ")
        return [
            w for w in words if len(w) > 5 and w not in _QUESTION_STOPWORDS
        ][:3]
