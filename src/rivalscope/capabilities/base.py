"""
Capability provider protocol and registry.

A capability is an external search or reasoning backend addressed by a
logical id ("exa", "perplexity", "xai", ...). Backends are registered
explicitly; asking for one that was never registered is an error, while a
registered backend that fails at call time simply yields no result.
"""

import asyncio
import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from ..mission.models import ResearchMetrics

logger = logging.getLogger(__name__)

WEB_SEARCH = "exa"
DEEP_RESEARCH = "perplexity"
SOCIAL_SEARCH = "xai"
THINKING = "thinking"

DEFAULT_RESEARCH_CAPABILITIES = (WEB_SEARCH, DEEP_RESEARCH, SOCIAL_SEARCH)


class MissingCapabilityError(LookupError):
    """Raised when required capabilities were never registered."""

    def __init__(self, missing: list[str], available: list[str]):
        self.missing = missing
        self.available = available
        super().__init__(
            f"Missing required capabilities: {', '.join(missing)} "
            f"(registered: {', '.join(available) or 'none'})"
        )


class CapabilityProvider(Protocol):
    """Protocol for search/reasoning backends."""

    @property
    def name(self) -> str:
        """Backend name (tool name on the gateway, provider name, etc.)."""
        ...

    async def invoke(self, query: str, params: dict[str, Any]) -> str | None:
        """
        Run a query against the backend.

        Args:
            query: Natural-language query
            params: Backend-specific options

        Returns:
            Result text, or None when the backend had nothing to say
        """
        ...


class CapabilityRegistry:
    """Typed mapping from logical capability id to provider."""

    def __init__(self, call_timeout: float = 600.0):
        """
        Initialize registry.

        Args:
            call_timeout: Per-call timeout in seconds for every invocation
        """
        self.call_timeout = call_timeout
        self._providers: dict[str, CapabilityProvider] = {}

    def register(self, capability_id: str, provider: CapabilityProvider) -> None:
        """Register (or replace) the provider for a capability id."""
        if capability_id in self._providers:
            logger.info(f"Replacing provider for capability '{capability_id}'")
        self._providers[capability_id] = provider
        logger.debug(f"Registered capability '{capability_id}' -> {provider.name}")

    def __contains__(self, capability_id: object) -> bool:
        return capability_id in self._providers

    def __iter__(self) -> Iterator[str]:
        return iter(self._providers)

    def __len__(self) -> int:
        return len(self._providers)

    def get(self, capability_id: str) -> CapabilityProvider | None:
        return self._providers.get(capability_id)

    def require(self, *capability_ids: str) -> None:
        """
        Ensure every listed capability is registered.

        Raises:
            MissingCapabilityError: If any id is unregistered
        """
        missing = [c for c in capability_ids if c not in self._providers]
        if missing:
            raise MissingCapabilityError(missing, list(self._providers))

    async def invoke(
        self,
        capability_id: str,
        query: str,
        params: dict[str, Any] | None = None,
        metrics: "ResearchMetrics | None" = None,
    ) -> str | None:
        """
        Invoke a capability with a bounded timeout.

        Provider errors and timeouts are logged and reported as None.

        Raises:
            MissingCapabilityError: If the id was never registered
        """
        provider = self._providers.get(capability_id)
        if provider is None:
            raise MissingCapabilityError([capability_id], list(self._providers))

        if metrics is not None:
            metrics.record_call(capability_id)

        try:
            result = await asyncio.wait_for(
                provider.invoke(query, params or {}),
                timeout=self.call_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                f"Capability '{capability_id}' timed out after {self.call_timeout:.0f}s"
            )
            return None
        except Exception as e:
            logger.warning(f"Capability '{capability_id}' failed: {e}")
            return None

        return result or None
