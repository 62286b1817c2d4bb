"""
Strategic recommendation synthesis.

With a structured thinking tool available, the reasoning service is driven
through a bounded dialogue: every "thought" tool call is acknowledged and
the loop continues until the service answers in plain content. Without it,
a single request is made and the reply is split into lines.
"""

import json
import logging
import re
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..mission.models import Finding, MissionContext, ResearchMetrics
    from ..reasoning.protocol import ReasoningService

logger = logging.getLogger(__name__)

MAX_DIALOGUE_STEPS = 8
TOOL_ACK = json.dumps({"status": "ok"})

_JSON_ARRAY = re.compile(r"\[.*\]", re.DOTALL)


def thought_tool_schema(tool_name: str) -> dict[str, Any]:
    """OpenAI-style function schema for the sequential thinking tool."""
    return {
        "type": "function",
        "function": {
            "name": tool_name,
            "description": "Problem solving tool",
            "parameters": {
                "type": "object",
                "properties": {
                    "thought": {"type": "string"},
                    "nextThoughtNeeded": {"type": "boolean"},
                    "thoughtNumber": {"type": "integer"},
                    "totalThoughts": {"type": "integer"},
                },
                "required": ["thought", "thoughtNumber", "totalThoughts", "nextThoughtNeeded"],
            },
        },
    }


def split_lines(text: str, min_length: int) -> list[str]:
    """Lines strictly longer than min_length."""
    return [line for line in text.split("\n") if len(line) > min_length]


def parse_recommendations(text: str) -> list[str]:
    """
    Extract recommendations from a final answer.

    Prefers the bracketed JSON array in the text; otherwise keeps lines
    longer than 10 characters.
    """
    match = _JSON_ARRAY.search(text)
    if match:
        try:
            parsed = json.loads(match.group(0))
        except json.JSONDecodeError:
            logger.debug("Bracketed section is not valid JSON, splitting lines")
        else:
            if isinstance(parsed, list):
                return [str(item) for item in parsed]

    return split_lines(text, 10)


def _findings_json(findings: list["Finding"]) -> str:
    return json.dumps([f.model_dump(mode="json") for f in findings])


class RecommendationSynthesizer:
    """Turns critical findings into a list of strategic actions."""

    def __init__(
        self,
        reasoning: "ReasoningService",
        thinking_tool_name: str | None = None,
        max_steps: int = MAX_DIALOGUE_STEPS,
        metrics: "ResearchMetrics | None" = None,
    ):
        """
        Initialize synthesizer.

        Args:
            reasoning: Reasoning-dialogue service
            thinking_tool_name: Name of the thought tool; None selects the
                single-request path
            max_steps: Dialogue step budget
            metrics: Per-mission metrics (sequential thoughts are counted)
        """
        self.reasoning = reasoning
        self.thinking_tool_name = thinking_tool_name
        self.max_steps = max_steps
        self.metrics = metrics

    async def synthesize(
        self,
        findings: list["Finding"],
        context: "MissionContext",
    ) -> list[str]:
        """
        Produce recommendations.

        Reasoning-service failures are logged; whatever was parsed so far
        (possibly nothing) is returned.
        """
        company = context.company.name
        rival = context.targets.competitor_names[0] if context.targets.competitor_names else "competitors"
        logger.info(f"Generating strategy for {company} vs {rival}")

        try:
            if self.thinking_tool_name is None:
                return await self._single_request(findings, company, rival)
            return await self._dialogue(findings, company, rival)
        except Exception as e:
            logger.error(f"Recommendation synthesis failed: {e}")
            return []

    async def _single_request(self, findings: list["Finding"], company: str, rival: str) -> list[str]:
        prompt = (
            f"Generate 5 strategic recommendations for {company} vs {rival} "
            f"based on findings: {_findings_json(findings[:3])}"
        )
        reply = await self.reasoning.complete([{"role": "user", "content": prompt}])
        return split_lines(reply.content or "", 20)

    async def _dialogue(self, findings: list["Finding"], company: str, rival: str) -> list[str]:
        tools = [thought_tool_schema(self.thinking_tool_name)]
        messages: list[dict[str, Any]] = [{
            "role": "user",
            "content": (
                f"Generate 5 recommendations using {self.thinking_tool_name}. "
                f"Context: {company} vs {rival}. "
                f"Findings: {_findings_json(findings[:5])}"
            ),
        }]

        recommendations: list[str] = []
        for step in range(1, self.max_steps + 1):
            reply = await self.reasoning.complete(messages, tools)
            messages.append(reply.as_message())

            if not reply.wants_tools:
                recommendations = parse_recommendations(reply.content or "")
                logger.info(f"Strategy ready after {step} steps ({len(recommendations)} actions)")
                break

            for call in reply.tool_calls:
                thought = str(call.arguments.get("thought", ""))
                logger.info(f"Thought: {thought[:60]}...")
                if self.metrics is not None:
                    self.metrics.sequential_thoughts += 1
                messages.append({"role": "tool", "tool_call_id": call.id, "content": TOOL_ACK})
        else:
            logger.warning(f"No final answer within {self.max_steps} steps")

        return recommendations
