"""
Transport to the external graph-memory service.

The memory service speaks a generic "operation + arguments" protocol
(create_entities, create_relations, add_observations, search_nodes,
open_nodes, read_graph). That dispatch is an internal detail; callers use
KnowledgeGraphClient.
"""

import json
import logging
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from ..runtime.gateway import ToolGateway

logger = logging.getLogger(__name__)


class GraphMemoryTransport(Protocol):
    """Generic call into the graph-memory service."""

    async def call(self, operation: str, arguments: dict[str, Any]) -> Any:
        """
        Run one memory operation.

        Returns:
            Decoded JSON result (dict/list) or raw text if not JSON
        """
        ...


class McpGraphMemoryTransport:
    """Graph-memory operations exposed as prefixed tools on the MCP gateway."""

    def __init__(self, gateway: "ToolGateway", prefix: str = "memory-"):
        self.gateway = gateway
        self.prefix = prefix

    async def call(self, operation: str, arguments: dict[str, Any]) -> Any:
        text = await self.gateway.call_tool(f"{self.prefix}{operation}", arguments)
        if not text:
            return None

        try:
            return json.loads(text)
        except json.JSONDecodeError:
            logger.debug(f"Non-JSON result from {operation}: {text[:100]}")
            return text
