"""Tests for the capability registry."""

import asyncio

import pytest

from rivalscope.capabilities.base import CapabilityRegistry, MissingCapabilityError
from rivalscope.mission.models import ResearchMetrics


class SlowProvider:
    name = "slow"

    async def invoke(self, query, params):
        await asyncio.sleep(1)
        return "too late"


def test_require_reports_missing(registry_with, provider_factory):
    registry = registry_with({"exa": provider_factory("exa")})

    registry.require("exa")
    with pytest.raises(MissingCapabilityError) as exc_info:
        registry.require("exa", "perplexity", "xai")

    assert exc_info.value.missing == ["perplexity", "xai"]
    assert exc_info.value.available == ["exa"]
    assert "perplexity" in str(exc_info.value)


def test_register_replaces(provider_factory):
    registry = CapabilityRegistry()
    registry.register("exa", provider_factory("first"))
    registry.register("exa", provider_factory("second"))

    assert len(registry) == 1
    assert registry.get("exa").name == "second"
    assert "exa" in registry
    assert list(registry) == ["exa"]


@pytest.mark.asyncio
async def test_invoke_unregistered_raises():
    with pytest.raises(MissingCapabilityError):
        await CapabilityRegistry().invoke("exa", "query")


@pytest.mark.asyncio
async def test_invoke_counts_calls(registry_with, provider_factory):
    provider = provider_factory("exa", responses="result")
    registry = registry_with({"exa": provider})
    metrics = ResearchMetrics()

    assert await registry.invoke("exa", "Globex", metrics=metrics) == "result"
    assert await registry.invoke("exa", "Initech", metrics=metrics) == "result"

    assert provider.queries == ["Globex", "Initech"]
    assert metrics.calls_by_tool == {"exa": 2}


@pytest.mark.asyncio
async def test_provider_error_becomes_none(registry_with, provider_factory):
    registry = registry_with({"exa": provider_factory("exa", error=ConnectionError("down"))})
    metrics = ResearchMetrics()

    assert await registry.invoke("exa", "Globex", metrics=metrics) is None
    assert metrics.total_tool_calls == 1


@pytest.mark.asyncio
async def test_empty_result_becomes_none(registry_with, provider_factory):
    registry = registry_with({"exa": provider_factory("exa", responses="")})
    assert await registry.invoke("exa", "Globex") is None


@pytest.mark.asyncio
async def test_timeout_becomes_none():
    registry = CapabilityRegistry(call_timeout=0.01)
    registry.register("slow", SlowProvider())

    assert await registry.invoke("slow", "Globex") is None
