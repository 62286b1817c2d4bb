"""Tests for mission data models."""

import pytest
from pydantic import ValidationError

from rivalscope.mission.models import (
    Evidence,
    Finding,
    MissionContext,
    Pattern,
    ResearchMetrics,
    ResearchState,
)


def test_context_accepts_camel_case():
    context = MissionContext.model_validate({
        "identity": {"fullName": "Ada Founder", "email": "ada@example.com"},
        "company": {"name": "Acme", "websiteDomain": "acme.io", "foundingYear": 2021},
        "targets": {"competitorNames": ["Globex"], "specificRumorsToVerify": ["Layoffs"]},
        "outputPreferences": {"reportTone": "Blunt"},
    })

    assert context.identity.full_name == "Ada Founder"
    assert context.identity.role == "Founder"
    assert context.company.founding_year == 2021
    assert context.targets.specific_rumors_to_verify == ["Layoffs"]
    assert context.output_preferences.report_tone == "Blunt"
    assert context.product.deployment_method == "Cloud"


def test_context_is_immutable(mission_context):
    with pytest.raises(ValidationError):
        mission_context.company = None


def test_context_requires_identity_and_company():
    with pytest.raises(ValidationError):
        MissionContext.model_validate({"targets": {"competitorNames": ["Globex"]}})


def test_finding_bounds():
    with pytest.raises(ValidationError):
        Finding(category="PRICING", signal="x" * 121)
    with pytest.raises(ValidationError):
        Finding(category="GOSSIP", signal="x")
    with pytest.raises(ValidationError):
        Evidence(tool="exa", snippet="x", credibility=101)


def test_finding_links_are_unique():
    finding = Finding(category="PRODUCT", signal="Globex ships Atlas")

    finding.link("f-other")
    finding.link("f-other")
    finding.link(finding.id)

    assert finding.related_findings == ["f-other"]
    assert finding.id.startswith("f-")


def test_evidence_source_alias():
    assert Evidence(tool="perplexity", snippet="s", credibility=90).source == "perplexity"


def test_pattern_confidence_range():
    with pytest.raises(ValidationError):
        Pattern(description="x", confidence=120)


def test_metrics_record_call():
    metrics = ResearchMetrics()
    metrics.record_call("exa")
    metrics.record_call("exa")
    metrics.record_call("xai")

    assert metrics.total_tool_calls == 3
    assert metrics.calls_by_tool == {"exa": 2, "xai": 1}


def test_state_starts_in_research():
    state = ResearchState()
    assert state.phase == "RESEARCH"
    assert state.findings == []
    assert state.elapsed_minutes == 0


def test_identity_name_defaults_to_subscriber():
    context = MissionContext.model_validate({
        "identity": {"email": "ada@example.com"},
        "company": {"name": "Acme"},
    })
    assert context.identity.full_name == "Subscriber"
