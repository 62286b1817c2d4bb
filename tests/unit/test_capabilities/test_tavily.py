"""Tests for the Tavily web-search capability."""

import pytest

from rivalscope.capabilities.tavily import TavilyCapability


class FakeTavilyClient:
    def __init__(self, response):
        self.response = response
        self.kwargs: dict = {}

    async def search(self, **kwargs):
        self.kwargs = kwargs
        return self.response


def capability_with(response) -> tuple[TavilyCapability, FakeTavilyClient]:
    capability = TavilyCapability(api_key="tvly-test", max_results=5)
    client = FakeTavilyClient(response)
    capability.client = client
    return capability, client


@pytest.mark.asyncio
async def test_formats_answer_and_results():
    capability, client = capability_with({
        "answer": "Globex raised prices.",
        "results": [
            {"title": "Pricing update", "content": "Pro tier now $49", "url": "https://globex.com/pricing"},
        ],
    })

    result = await capability.invoke("Globex pricing", {})

    assert result == (
        "Globex raised prices.\n"
        "Pricing update: Pro tier now $49 (https://globex.com/pricing)"
    )
    assert client.kwargs == {
        "query": "Globex pricing",
        "max_results": 5,
        "search_depth": "advanced",
        "include_answer": True,
    }


@pytest.mark.asyncio
async def test_params_override_defaults():
    capability, client = capability_with({"results": []})
    await capability.invoke("Globex", {"max_results": 2, "search_depth": "basic"})
    assert client.kwargs["max_results"] == 2
    assert client.kwargs["search_depth"] == "basic"


@pytest.mark.asyncio
async def test_nothing_found_is_none():
    capability, _ = capability_with({"answer": None, "results": []})
    assert await capability.invoke("Globex", {}) is None
