"""Reasoning-dialogue backends."""

from .openai_compat import OpenAICompatibleReasoning, normalize_tool_calls, parse_arguments
from .protocol import ReasoningReply, ReasoningService, ThoughtCall

__all__ = [
    "OpenAICompatibleReasoning",
    "ReasoningReply",
    "ReasoningService",
    "ThoughtCall",
    "normalize_tool_calls",
    "parse_arguments",
]
