"""Social-signal search over X/Twitter via the xAI responses API."""

import logging
from typing import TYPE_CHECKING, Any

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

if TYPE_CHECKING:
    from ..orchestrator.recency import RecencyGate

logger = logging.getLogger(__name__)


class XaiSocialSearch:
    """Searches recent X posts with Grok's native x_search tool."""

    def __init__(
        self,
        api_key: str,
        gate: "RecencyGate",
        model: str = "grok-4-fast",
        timeout: float = 120.0,
        base_url: str = "https://api.x.ai/v1",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize social search.

        Args:
            api_key: xAI API key
            gate: Recency gate supplying the "since" cutoff
            model: Grok model with x_search support
            timeout: HTTP timeout in seconds
            base_url: xAI API base URL
            transport: Optional httpx transport (tests)
        """
        self.api_key = api_key
        self.gate = gate
        self.model = model
        self.timeout = timeout
        self.base_url = base_url
        self._transport = transport

    @property
    def name(self) -> str:
        return f"xai:{self.model}"

    @retry(
        retry=retry_if_exception_type((httpx.ConnectError, httpx.TimeoutException)),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def invoke(self, query: str, params: dict[str, Any]) -> str | None:
        prompt = (
            f"Search X/Twitter for: {query}. "
            f"Focus ONLY on posts since {self.gate.cutoff()}."
        )

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(
                f"{self.base_url}/responses",
                headers={"Authorization": f"Bearer {self.api_key}"},
                json={
                    "model": self.model,
                    "input": [{"role": "user", "content": prompt}],
                    "tools": [{"type": "x_search"}],
                },
            )
            response.raise_for_status()
            data = response.json()

        return _first_output_text(data)


def _first_output_text(data: dict[str, Any]) -> str | None:
    """Return the first text block from a responses-API payload."""
    for item in data.get("output") or []:
        for block in item.get("content") or []:
            text = block.get("text")
            if text:
                return text

    logger.debug("xAI response carried no text output")
    return None
