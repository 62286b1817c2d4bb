"""Tavily web search as a drop-in web-search capability."""

import logging
from typing import Any

from tavily import AsyncTavilyClient

logger = logging.getLogger(__name__)


class TavilyCapability:
    """Tavily search provider (best for research)."""

    def __init__(self, api_key: str, max_results: int = 10):
        """
        Initialize Tavily provider.

        Args:
            api_key: Tavily API key
            max_results: Results per query
        """
        self.client = AsyncTavilyClient(api_key=api_key)
        self.max_results = max_results

    @property
    def name(self) -> str:
        return "tavily"

    async def invoke(self, query: str, params: dict[str, Any]) -> str | None:
        response = await self.client.search(
            query=query,
            max_results=params.get("max_results", self.max_results),
            search_depth=params.get("search_depth", "advanced"),
            include_answer=True,
        )

        lines = []
        if response.get("answer"):
            lines.append(response["answer"])
        for r in response.get("results", []):
            title = r.get("title", "")
            content = r.get("content", "")
            lines.append(f"{title}: {content} ({r.get('url', '')})")

        logger.info(f"Tavily: {len(response.get('results', []))} results for '{query[:50]}...'")
        return "\n".join(lines) or None
