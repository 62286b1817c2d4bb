"""
Capabilities backed by tools on the MCP gateway.

Registration is explicit: each logical capability id lists the gateway
tool names that can serve it, matched by substring because the gateway
prefixes tool names with its server alias (e.g. "exa-web_search_exa").
"""

import logging
import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .base import DEEP_RESEARCH, THINKING, WEB_SEARCH, CapabilityRegistry

if TYPE_CHECKING:
    from ..runtime.gateway import ToolGateway

logger = logging.getLogger(__name__)

ArgumentBuilder = Callable[[str, dict[str, Any]], dict[str, Any]]


def search_arguments(query: str, params: dict[str, Any]) -> dict[str, Any]:
    """Arguments for neural web-search tools."""
    return {
        "query": query,
        "num_results": params.get("num_results", 10),
        "search_type": params.get("search_type", "neural"),
    }


def chat_arguments(query: str, params: dict[str, Any]) -> dict[str, Any]:
    """Arguments for chat-style research tools."""
    return {"messages": [{"role": "user", "content": query}]}


@dataclass(frozen=True)
class GatewayRule:
    """Which gateway tools may serve a capability, and how to call them."""

    capability_id: str
    tool_markers: tuple[str, ...]
    build_arguments: ArgumentBuilder = search_arguments


DEFAULT_GATEWAY_RULES = (
    GatewayRule(WEB_SEARCH, ("web_search_exa",), search_arguments),
    GatewayRule(DEEP_RESEARCH, ("perplexity_reason", "perplexity_research"), chat_arguments),
    GatewayRule(THINKING, ("sequentialthinking",), chat_arguments),
)


class McpToolCapability:
    """Capability served by one or more interchangeable gateway tools."""

    def __init__(
        self,
        gateway: "ToolGateway",
        tool_names: Sequence[str],
        build_arguments: ArgumentBuilder = search_arguments,
    ):
        if not tool_names:
            raise ValueError("At least one gateway tool name required")
        self.gateway = gateway
        self.tool_names = list(tool_names)
        self.build_arguments = build_arguments

    @property
    def name(self) -> str:
        return self.tool_names[0]

    async def invoke(self, query: str, params: dict[str, Any]) -> str | None:
        # Interchangeable tools are sampled to spread load across them
        tool_name = random.choice(self.tool_names)
        logger.debug(f"Calling gateway tool {tool_name}: {query[:80]}...")
        text = await self.gateway.call_tool(tool_name, self.build_arguments(query, params))
        return text or None


async def register_from_gateway(
    registry: CapabilityRegistry,
    gateway: "ToolGateway",
    rules: Sequence[GatewayRule] = DEFAULT_GATEWAY_RULES,
) -> list[str]:
    """
    Register every capability the gateway can serve.

    Args:
        registry: Registry to populate
        gateway: Connected gateway
        rules: Matching rules (capability id -> tool name markers)

    Returns:
        Capability ids that were registered
    """
    available = await gateway.list_tool_names()
    registered: list[str] = []

    for rule in rules:
        matches = [
            tool_name
            for marker in rule.tool_markers
            for tool_name in available
            if marker in tool_name
        ]
        if not matches:
            logger.warning(
                f"No gateway tool for capability '{rule.capability_id}' "
                f"(looked for {', '.join(rule.tool_markers)})"
            )
            continue

        registry.register(
            rule.capability_id,
            McpToolCapability(gateway, matches, rule.build_arguments),
        )
        registered.append(rule.capability_id)

    logger.info(f"Gateway capabilities: {', '.join(registered) or 'none'}")
    return registered
