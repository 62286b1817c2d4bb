"""
Execution contexts for missions.

A mission owns one externally provisioned execution context (a tool-gateway
endpoint plus credentials) for its whole lifetime. Contexts are only ever
used through ``provisioned()``, which releases them on every exit path.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecutionContext:
    """Connection details for a provisioned tool gateway."""

    gateway_url: str
    token: str | None = None
    context_id: str = "static"


class ExecutionContextProvider(Protocol):
    """Provisions and tears down execution contexts."""

    async def acquire(self) -> ExecutionContext:
        ...

    async def release(self, context: ExecutionContext) -> None:
        ...


@asynccontextmanager
async def provisioned(provider: ExecutionContextProvider) -> AsyncIterator[ExecutionContext]:
    """
    Acquire a context for the duration of a block.

    Release failures are logged and never mask the block's own outcome.
    """
    context = await provider.acquire()
    logger.info(f"Execution context {context.context_id} acquired")
    try:
        yield context
    finally:
        try:
            await provider.release(context)
            logger.info(f"Execution context {context.context_id} released")
        except Exception as e:
            logger.error(f"Failed to release execution context {context.context_id}: {e}")


class StaticGatewayProvider:
    """Hands out a fixed, already-running gateway; release is a no-op."""

    def __init__(self, gateway_url: str, token: str | None = None):
        self.gateway_url = gateway_url
        self.token = token
        self.active = 0

    async def acquire(self) -> ExecutionContext:
        self.active += 1
        return ExecutionContext(gateway_url=self.gateway_url, token=self.token)

    async def release(self, context: ExecutionContext) -> None:
        self.active -= 1
