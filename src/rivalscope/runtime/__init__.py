"""Execution contexts and the tool gateway they expose."""

from .context import (
    ExecutionContext,
    ExecutionContextProvider,
    StaticGatewayProvider,
    provisioned,
)
from .gateway import GatewayToolError, McpGateway, ToolGateway

__all__ = [
    "ExecutionContext",
    "ExecutionContextProvider",
    "GatewayToolError",
    "McpGateway",
    "StaticGatewayProvider",
    "ToolGateway",
    "provisioned",
]
