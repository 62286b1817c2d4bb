"""
End-to-end mission execution.

A mission provisions an execution context, researches every competitor,
analyzes the critical path, synthesizes recommendations, renders the
dossier and delivers it. Any uncaught error aborts the mission with no
report; the context is released regardless.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..capabilities.base import DEFAULT_RESEARCH_CAPABILITIES, THINKING
from ..graph.client import KnowledgeGraphClient
from ..orchestrator.core import DeepResearchOrchestrator
from ..orchestrator.critical_path import CriticalPathAnalysis, CriticalPathAnalyzer
from ..orchestrator.recommendations import MAX_DIALOGUE_STEPS, RecommendationSynthesizer
from ..orchestrator.report import ReportCompiler
from ..runtime.context import provisioned
from ..utils.logging import StructuredLogger
from .models import ResearchState

if TYPE_CHECKING:
    from ..delivery.resend import ReportDelivery
    from ..runtime.context import ExecutionContextProvider
    from .models import MissionContext
    from .services import ServicesFactory

logger = logging.getLogger(__name__)

DELIVERY_TEXT = "Your RivalScope report is ready."


@dataclass
class MissionResult:
    """Outcome of a completed mission."""

    mission_id: str
    report_html: str
    state: ResearchState
    analysis: CriticalPathAnalysis
    delivered: bool = False


class MissionExecutor:
    """Runs missions against provisioned execution contexts."""

    def __init__(
        self,
        provider: ExecutionContextProvider,
        services_factory: ServicesFactory,
        research_capabilities: Sequence[str] = DEFAULT_RESEARCH_CAPABILITIES,
        pause_seconds: float = 2.0,
        max_dialogue_steps: int = MAX_DIALOGUE_STEPS,
        subject_prefix: str = "[RivalScope]",
    ):
        """
        Initialize executor.

        Args:
            provider: Provisions one execution context per mission
            services_factory: Builds mission services on a context
            research_capabilities: Capability ids rotated through research cycles
            pause_seconds: Delay between research iterations
            max_dialogue_steps: Step budget for recommendation synthesis
            subject_prefix: Email subject prefix
        """
        self.provider = provider
        self.services_factory = services_factory
        self.research_capabilities = tuple(research_capabilities)
        self.pause_seconds = pause_seconds
        self.max_dialogue_steps = max_dialogue_steps
        self.subject_prefix = subject_prefix

    async def execute(
        self,
        mission_id: str,
        context: MissionContext,
        duration_minutes: float,
        send: bool = True,
    ) -> MissionResult:
        """
        Run one mission to completion.

        Args:
            mission_id: Identifier used in logs and results
            context: Mission context
            duration_minutes: Total research budget across competitors
            send: Deliver the report when a delivery backend is configured

        Returns:
            MissionResult with the rendered report

        Raises:
            Exception: Anything fatal (provisioning, missing capabilities,
                graph reads); no report is produced in that case
        """
        log = StructuredLogger(__name__, mission=mission_id)
        competitors = context.targets.competitor_names
        log.info(f"Starting mission ({duration_minutes:g} min, {len(competitors)} competitors)")

        state = ResearchState()

        async with provisioned(self.provider) as execution:
            async with self.services_factory(execution, context) as services:
                graph = KnowledgeGraphClient(services.graph_transport, state.metrics)

                orchestrator = DeepResearchOrchestrator(
                    services.registry,
                    graph,
                    state,
                    gate=services.gate,
                    tool_ids=self.research_capabilities,
                    pause_seconds=self.pause_seconds,
                )
                await orchestrator.run_all(competitors, duration_minutes * 60)

                analysis = await CriticalPathAnalyzer(graph).analyze(state.findings)

                thinking = services.registry.get(THINKING)
                synthesizer = RecommendationSynthesizer(
                    services.reasoning,
                    thinking_tool_name=thinking.name if thinking else None,
                    max_steps=self.max_dialogue_steps,
                    metrics=state.metrics,
                )
                analysis.recommendations = await synthesizer.synthesize(
                    analysis.critical_findings, context
                )

                report = ReportCompiler(services.gate).compile(state, analysis, context)

                delivered = False
                if send and services.delivery is not None:
                    delivered = await self._deliver(services.delivery, report, context, log)

        log.info(
            f"Mission complete: {len(state.findings)} findings, "
            f"{state.metrics.total_tool_calls} tool calls, "
            f"{len(analysis.recommendations)} recommendations"
        )
        return MissionResult(
            mission_id=mission_id,
            report_html=report,
            state=state,
            analysis=analysis,
            delivered=delivered,
        )

    async def _deliver(
        self,
        delivery: ReportDelivery,
        report: str,
        context: MissionContext,
        log: StructuredLogger,
    ) -> bool:
        """Send the report; failures are logged and reported as False."""
        names = context.targets.competitor_names
        subject = f"{self.subject_prefix} Strategic Dossier: {names[0] if names else 'Competitors'}"

        try:
            await delivery.send(context.identity.email, subject, report, DELIVERY_TEXT)
        except Exception as e:
            log.error(f"Report delivery failed: {e}")
            return False

        log.info(f"Report delivered to {context.identity.email}")
        return True
