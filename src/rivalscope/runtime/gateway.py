"""
MCP tool gateway client.

The execution context exposes every backend (search, research, graph
memory, sequential thinking) as tools on one MCP endpoint reached over
streamable HTTP. This wraps the session lifecycle and flattens tool
results to text.
"""

import logging
from contextlib import AsyncExitStack
from datetime import timedelta
from typing import Any, Protocol

from mcp import ClientSession
from mcp.client.streamable_http import streamablehttp_client

logger = logging.getLogger(__name__)


class GatewayToolError(RuntimeError):
    """Raised when a gateway tool reports an error result."""


class ToolGateway(Protocol):
    """Anything that can list and call named tools."""

    async def list_tool_names(self) -> list[str]:
        ...

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> str:
        ...


class McpGateway:
    """Async context manager holding one MCP session to the tool gateway."""

    def __init__(self, url: str, token: str | None = None, timeout: float = 600.0):
        """
        Initialize gateway client.

        Args:
            url: Streamable HTTP endpoint of the gateway
            token: Optional bearer token
            timeout: Read timeout for tool calls in seconds
        """
        self.url = url
        self.token = token
        self.timeout = timeout
        self.session: ClientSession | None = None
        self._stack: AsyncExitStack | None = None

    async def __aenter__(self) -> "McpGateway":
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else None
        self._stack = AsyncExitStack()

        try:
            read_stream, write_stream, _ = await self._stack.enter_async_context(
                streamablehttp_client(self.url, headers=headers)
            )
            self.session = await self._stack.enter_async_context(
                ClientSession(
                    read_stream,
                    write_stream,
                    read_timeout_seconds=timedelta(seconds=self.timeout),
                )
            )
            await self.session.initialize()
        except BaseException:
            await self._stack.aclose()
            raise

        logger.info(f"Connected to tool gateway at {self.url}")
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        if self._stack is not None:
            await self._stack.aclose()
        self._stack = None
        self.session = None

    def _require_session(self) -> ClientSession:
        if self.session is None:
            raise RuntimeError("Gateway not connected. Use 'async with McpGateway(...)'.")
        return self.session

    async def list_tool_names(self) -> list[str]:
        """Names of every tool the gateway exposes."""
        session = self._require_session()
        names: list[str] = []
        cursor: str | None = None
        while True:
            result = await session.list_tools(cursor=cursor)
            names.extend(tool.name for tool in result.tools)
            cursor = result.nextCursor
            if not cursor:
                return names

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> str:
        """
        Call a gateway tool and return the text of its first text block.

        Raises:
            GatewayToolError: If the tool reports an error
        """
        result = await self._require_session().call_tool(name, arguments)

        text = next(
            (block.text for block in result.content if getattr(block, "type", None) == "text"),
            "",
        )
        if result.isError:
            raise GatewayToolError(f"{name}: {text[:200] or 'tool error'}")
        return text
