"""
Reasoning-dialogue protocol.

A reasoning service takes a chat history plus optional tool schemas and
answers with either plain content or one or more structured tool calls.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass
class ThoughtCall:
    """A tool invocation requested by the reasoning service."""

    id: str
    name: str
    arguments: dict[str, Any]


@dataclass
class ReasoningReply:
    """One reasoning-service response."""

    content: str | None = None
    tool_calls: list[ThoughtCall] = field(default_factory=list)
    raw_message: dict[str, Any] = field(default_factory=dict)

    @property
    def wants_tools(self) -> bool:
        return bool(self.tool_calls)

    def as_message(self) -> dict[str, Any]:
        """Assistant message to append to the running history."""
        if self.raw_message:
            return self.raw_message

        message: dict[str, Any] = {"role": "assistant", "content": self.content}
        if self.tool_calls:
            message["tool_calls"] = [
                {
                    "id": tc.id,
                    "type": "function",
                    "function": {"name": tc.name, "arguments": json.dumps(tc.arguments)},
                }
                for tc in self.tool_calls
            ]
        return message


class ReasoningService(Protocol):
    """Chat-style reasoning backend."""

    @property
    def name(self) -> str:
        ...

    async def complete(
        self,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None = None,
    ) -> ReasoningReply:
        """
        Send a message history and return the next reply.

        Args:
            messages: OpenAI-style chat messages
            tools: OpenAI-style function tool schemas

        Returns:
            Either plain content or requested tool calls
        """
        ...
