"""
OpenAI-compatible chat-completions reasoning backend.

Works against any provider exposing /chat/completions (Groq by default).
Tool-call payloads differ between hosted models, so replies are normalized
into ThoughtCall objects before the dialogue loop sees them.
"""

import json
import logging
import uuid
from typing import Any

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .protocol import ReasoningReply, ThoughtCall

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_MODEL = "openai/gpt-oss-120b"


def _synthetic_call_id() -> str:
    return f"call_{uuid.uuid4().hex[:24]}"


def parse_arguments(raw: Any) -> dict[str, Any]:
    """
    Decode tool-call arguments.

    Accepts a JSON string (the standard shape), an already-decoded dict, or
    nothing. A single trailing comma is tolerated; anything else unparseable
    becomes an empty dict.
    """
    if isinstance(raw, dict):
        return raw
    if not isinstance(raw, str) or not raw.strip():
        return {}

    text = raw.strip()
    for candidate in (text, text.rstrip(",").rstrip()):
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        return parsed if isinstance(parsed, dict) else {}

    logger.warning(f"Unparseable tool arguments: {text[:200]}")
    return {}


def normalize_tool_calls(message: dict[str, Any]) -> list[ThoughtCall]:
    """Extract tool calls from an assistant message, filling in missing ids."""
    calls: list[ThoughtCall] = []

    for tc in message.get("tool_calls") or []:
        function = tc.get("function") or {}
        name = function.get("name") or tc.get("name")
        if not name:
            logger.warning(f"Skipping tool call without a name: {tc}")
            continue

        calls.append(
            ThoughtCall(
                id=tc.get("id") or _synthetic_call_id(),
                name=name,
                arguments=parse_arguments(function.get("arguments", tc.get("arguments"))),
            )
        )

    return calls


class OpenAICompatibleReasoning:
    """Reasoning service over an OpenAI-compatible chat-completions API."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 300.0,
        temperature: float = 0.7,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.temperature = temperature
        self._transport = transport

    @property
    def name(self) -> str:
        return f"chat:{self.model}"

    @retry(
        retry=retry_if_exception_type((httpx.ConnectError, httpx.TimeoutException)),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def complete(
        self,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None = None,
    ) -> ReasoningReply:
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
        }
        if tools:
            payload["tools"] = tools
            payload["tool_choice"] = "auto"

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(
                f"{self.base_url}/chat/completions",
                headers={"Authorization": f"Bearer {self.api_key}"},
                json=payload,
            )

        if response.status_code != 200:
            raise RuntimeError(
                f"Reasoning API error ({response.status_code}): {response.text[:500]}"
            )

        message = response.json()["choices"][0]["message"]
        calls = normalize_tool_calls(message)
        content = message.get("content")

        return ReasoningReply(
            content=content if isinstance(content, str) else None,
            tool_calls=calls,
            raw_message=message,
        )
