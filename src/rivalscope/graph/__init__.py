"""Knowledge-graph client over the external graph-memory service."""

from .client import (
    GraphSnapshot,
    HypothesisEvidence,
    KnowledgeGraphClient,
    KnowledgeLookup,
    sanitize_entity_name,
)
from .transport import GraphMemoryTransport, McpGraphMemoryTransport

__all__ = [
    "GraphMemoryTransport",
    "GraphSnapshot",
    "HypothesisEvidence",
    "KnowledgeGraphClient",
    "KnowledgeLookup",
    "McpGraphMemoryTransport",
    "sanitize_entity_name",
]
