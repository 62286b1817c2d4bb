"""
Per-mission service wiring.

Builds the capability registry, graph transport, reasoning service and
delivery backend for one mission on top of a provisioned execution context.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from dataclasses import dataclass, field

from ..capabilities.base import SOCIAL_SEARCH, WEB_SEARCH, CapabilityRegistry
from ..capabilities.gateway_tools import register_from_gateway
from ..capabilities.social import XaiSocialSearch
from ..capabilities.tavily import TavilyCapability
from ..config import AppConfig
from ..delivery.resend import ReportDelivery, ResendDelivery
from ..graph.transport import GraphMemoryTransport, McpGraphMemoryTransport
from ..orchestrator.recency import RecencyGate
from ..reasoning.openai_compat import OpenAICompatibleReasoning
from ..reasoning.protocol import ReasoningService
from ..runtime.context import ExecutionContext, StaticGatewayProvider
from ..runtime.gateway import McpGateway
from .models import MissionContext
from .runner import MissionExecutor

logger = logging.getLogger(__name__)


@dataclass
class MissionServices:
    """External dependencies a mission talks to."""

    registry: CapabilityRegistry
    graph_transport: GraphMemoryTransport
    reasoning: ReasoningService
    delivery: ReportDelivery | None = None
    gate: RecencyGate = field(default_factory=RecencyGate)


ServicesFactory = Callable[
    [ExecutionContext, MissionContext],
    AbstractAsyncContextManager[MissionServices],
]


def gateway_services(config: AppConfig) -> ServicesFactory:
    """
    Services factory backed by the MCP tool gateway of the execution context.

    Gateway tools serve web search, deep research, graph memory and
    sequential thinking; xAI (social search) and Tavily (optional web
    search) are called directly.

    Raises (when the factory is entered):
        ValueError: If a required API key is missing from the environment
    """

    @asynccontextmanager
    async def factory(
        execution: ExecutionContext,
        context: MissionContext,
    ) -> AsyncIterator[MissionServices]:
        gate = RecencyGate()
        registry = CapabilityRegistry(call_timeout=config.mission.call_timeout_seconds)

        reasoning = OpenAICompatibleReasoning(
            api_key=config.get_reasoning_api_key(),
            model=config.reasoning.model,
            base_url=config.reasoning.base_url,
            timeout=config.reasoning.timeout_seconds,
        )

        delivery = None
        if config.delivery.enabled:
            delivery = ResendDelivery(
                api_key=config.get_delivery_api_key(),
                sender=config.delivery.sender,
                reply_to=context.identity.email,
            )

        async with McpGateway(
            execution.gateway_url,
            token=execution.token,
            timeout=config.mission.call_timeout_seconds,
        ) as gateway:
            await register_from_gateway(registry, gateway)

            if config.search.tavily_enabled:
                registry.register(
                    WEB_SEARCH,
                    TavilyCapability(config.get_tavily_api_key(), config.search.max_results),
                )

            if config.social.enabled:
                registry.register(
                    SOCIAL_SEARCH,
                    XaiSocialSearch(
                        api_key=config.get_social_api_key(),
                        gate=gate,
                        model=config.social.model,
                        timeout=config.social.timeout_seconds,
                    ),
                )

            yield MissionServices(
                registry=registry,
                graph_transport=McpGraphMemoryTransport(gateway, config.gateway.memory_prefix),
                reasoning=reasoning,
                delivery=delivery,
                gate=gate,
            )

    return factory


def create_executor(config: AppConfig) -> MissionExecutor:
    """Mission executor on the configured, already-running tool gateway."""
    return MissionExecutor(
        provider=StaticGatewayProvider(config.gateway.url, config.gateway.get_token()),
        services_factory=gateway_services(config),
        research_capabilities=config.mission.research_capabilities,
        pause_seconds=config.mission.pause_seconds,
        max_dialogue_steps=config.reasoning.max_steps,
        subject_prefix=config.delivery.subject_prefix,
    )
