"""
Shared fakes for rivalscope tests.

- FakeProvider: scripted capability provider
- InMemoryGraphTransport: dict-backed graph-memory service
- ScriptedReasoning: reasoning service replaying canned replies
"""

from datetime import datetime
from typing import Any

import pytest

from rivalscope.capabilities.base import CapabilityRegistry
from rivalscope.mission.models import MissionContext
from rivalscope.orchestrator.recency import RecencyGate
from rivalscope.reasoning.protocol import ReasoningReply

FIXED_NOW = datetime(2026, 3, 15, 10, 30)


class FakeProvider:
    """Capability provider returning canned responses in order."""

    def __init__(
        self,
        name: str = "fake",
        responses: list[str | None] | str | None = None,
        error: Exception | None = None,
    ):
        self._name = name
        self.responses = responses
        self.error = error
        self.queries: list[str] = []

    @property
    def name(self) -> str:
        return self._name

    async def invoke(self, query: str, params: dict[str, Any]) -> str | None:
        self.queries.append(query)
        if self.error:
            raise self.error
        if isinstance(self.responses, list):
            return self.responses.pop(0) if self.responses else None
        return self.responses


class InMemoryGraphTransport:
    """Minimal graph-memory service keeping entities and relations in memory."""

    def __init__(self, fail_operations: set[str] | None = None):
        self.entities: dict[str, dict[str, Any]] = {}
        self.relations: list[dict[str, Any]] = []
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.fail_operations = fail_operations or set()

    async def call(self, operation: str, arguments: dict[str, Any]) -> Any:
        self.calls.append((operation, arguments))
        if operation in self.fail_operations:
            raise RuntimeError(f"{operation} unavailable")

        if operation == "create_entities":
            for entity in arguments["entities"]:
                self.entities.setdefault(entity["name"], {
                    "name": entity["name"],
                    "entityType": entity["entityType"],
                    "observations": list(entity["observations"]),
                })
            return {"created": len(arguments["entities"])}

        if operation == "create_relations":
            self.relations.extend(arguments["relations"])
            return {"created": len(arguments["relations"])}

        if operation == "add_observations":
            for item in arguments["observations"]:
                self.entities[item["entityName"]]["observations"].extend(item["contents"])
            return {"added": len(arguments["observations"])}

        if operation == "search_nodes":
            query = arguments["query"].lower()
            matches = [
                e for e in self.entities.values()
                if query in e["name"].lower()
                or any(query in o.lower() for o in e["observations"])
            ]
            return {"entities": matches, "relations": []}

        if operation == "open_nodes":
            names = set(arguments["names"])
            return {
                "entities": [e for n, e in self.entities.items() if n in names],
                "relations": [r for r in self.relations if r["from"] in names or r["to"] in names],
            }

        if operation == "read_graph":
            return {"entities": list(self.entities.values()), "relations": list(self.relations)}

        raise ValueError(f"Unknown operation {operation}")

    def operations(self) -> list[str]:
        return [op for op, _ in self.calls]


class ScriptedReasoning:
    """Reasoning service replaying a fixed list of replies."""

    def __init__(self, replies: list[ReasoningReply] | None = None, error: Exception | None = None):
        self.replies = list(replies or [])
        self.error = error
        self.requests: list[tuple[list[dict[str, Any]], list[dict[str, Any]] | None]] = []

    @property
    def name(self) -> str:
        return "scripted"

    async def complete(self, messages, tools=None) -> ReasoningReply:
        self.requests.append((list(messages), tools))
        if self.error:
            raise self.error
        return self.replies.pop(0) if self.replies else ReasoningReply(content="")


@pytest.fixture
def fixed_gate() -> RecencyGate:
    """Recency gate frozen at 15 March 2026."""
    return RecencyGate(now=lambda: FIXED_NOW)


@pytest.fixture
def graph_transport() -> InMemoryGraphTransport:
    return InMemoryGraphTransport()


@pytest.fixture
def provider_factory():
    return FakeProvider


@pytest.fixture
def reasoning_factory():
    return ScriptedReasoning


@pytest.fixture
def registry_with():
    """Build a registry from {capability_id: provider}."""

    def _build(providers: dict[str, Any], call_timeout: float = 5.0) -> CapabilityRegistry:
        registry = CapabilityRegistry(call_timeout=call_timeout)
        for capability_id, provider in providers.items():
            registry.register(capability_id, provider)
        return registry

    return _build


@pytest.fixture
def mission_context() -> MissionContext:
    return MissionContext.model_validate({
        "identity": {"fullName": "Ada Founder", "email": "ada@example.com", "role": "CEO"},
        "company": {"name": "Acme Analytics", "websiteDomain": "acme.io"},
        "targets": {"competitorNames": ["Globex", "Initech"]},
    })
