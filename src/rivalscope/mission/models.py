"""
Data models for intelligence missions.

This module defines the core data structures used throughout rivalscope:
- MissionContext: Immutable description of who is asking and about whom
- Evidence: A single tool-sourced excerpt supporting a finding
- Finding: An evidenced strategic signal about a competitor
- Hypothesis: A strategic claim tracked in the knowledge graph
- Pattern: A recurring signal detected across findings
- ResearchState: Per-mission accumulator (findings + metrics)
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Category = Literal["PRICING", "PRODUCT", "PEOPLE", "SENTIMENT", "STRATEGY"]
ConfidenceLevel = Literal["HIGH", "MEDIUM", "LOW"]
Impact = Literal["CRITICAL", "HIGH", "MEDIUM", "LOW"]
ValidationStatus = Literal["CONFIRMED", "REFUTED", "PENDING"]

SIGNAL_MAX_CHARS = 120
SNIPPET_MAX_CHARS = 500


class _ContextModel(BaseModel):
    """Frozen base accepting both snake_case and camelCase keys."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class FounderIdentity(_ContextModel):
    full_name: str = "Subscriber"
    email: str
    role: str = "Founder"
    linkedin_profile: str | None = None
    twitter_handle: str | None = None


class CompanyProfile(_ContextModel):
    name: str
    website_domain: str = ""
    founding_year: int | None = None
    headquarters_location: str = ""
    employee_count_range: str = ""
    primary_industry: str = ""
    business_model: str = ""
    current_funding_stage: str = ""
    total_funding_raised: str | None = None


class StrategicNorthStar(_ContextModel):
    core_value_proposition: str = ""
    problem_being_solved: str = ""
    ideal_customer_profile: str = ""
    north_star_metric: str = ""
    pricing_strategy: str = ""
    primary_gtm_motion: str = ""
    target_geography: list[str] = Field(default_factory=list)
    positioning: str = ""
    unfair_advantage: str = ""
    key_partnerships: list[str] | None = None


class ProductDetails(_ContextModel):
    primary_feature_set: list[str] = Field(default_factory=list)
    technical_stack_core: list[str] | None = None
    compliance_requirements: list[str] = Field(default_factory=list)
    integrations_list: list[str] = Field(default_factory=list)
    deployment_method: str = "Cloud"
    mobile_app_available: bool = False
    api_first: bool = False


class RiskProfile(_ContextModel):
    """What the requester is worried about."""

    biggest_fear: str = ""
    what_keeps_you_up_at_night: str = ""
    known_weakness_internal: str = ""
    top_reason_for_churn: str = ""
    top_reason_for_loss_in_sales: str = ""


class CompetitorTargets(_ContextModel):
    competitor_names: list[str] = Field(default_factory=list)
    specific_rumors_to_verify: list[str] = Field(default_factory=list)
    perceived_threat_level: str = "Unknown / Dark Horse"
    specific_questions_for_agent: list[str] = Field(default_factory=list)
    blacklisted_domains: list[str] = Field(default_factory=list)


class OutputPreferences(_ContextModel):
    report_tone: str = "Strategic Advisor (Constructive)"
    include_raw_sources: bool = True
    focus_areas: list[str] = Field(default_factory=list)
    language: str = "English"


class MissionContext(_ContextModel):
    """
    Immutable input to a mission.

    Accepts camelCase payloads (``competitorNames``, ``outputPreferences``)
    as well as snake_case keyword arguments.
    """

    identity: FounderIdentity
    company: CompanyProfile
    strategy: StrategicNorthStar = Field(default_factory=StrategicNorthStar)
    product: ProductDetails = Field(default_factory=ProductDetails)
    anxiety: RiskProfile = Field(default_factory=RiskProfile)
    targets: CompetitorTargets = Field(default_factory=CompetitorTargets)
    output_preferences: OutputPreferences = Field(default_factory=OutputPreferences)


class Evidence(BaseModel):
    """One tool-sourced excerpt supporting a finding."""

    tool: str = Field(..., description="Capability id that produced the excerpt")
    snippet: str = Field(..., max_length=SNIPPET_MAX_CHARS)
    credibility: int = Field(..., ge=0, le=100, description="Source credibility 0-100")
    timestamp: datetime = Field(default_factory=datetime.now)
    url: str | None = None

    @property
    def source(self) -> str:
        return self.tool


class Finding(BaseModel):
    """
    A recorded, evidenced strategic signal about a competitor.

    Only ``related_findings`` may change after creation.
    """

    id: str = Field(default_factory=lambda: f"f-{uuid4().hex[:12]}")
    category: Category
    signal: str = Field(..., max_length=SIGNAL_MAX_CHARS)
    evidence: list[Evidence] = Field(default_factory=list)
    confidence: ConfidenceLevel = "HIGH"
    impact: Impact = "MEDIUM"
    timestamp: datetime = Field(default_factory=datetime.now)
    related_findings: list[str] = Field(default_factory=list)

    def link(self, finding_id: str) -> None:
        """Register a related finding."""
        if finding_id != self.id and finding_id not in self.related_findings:
            self.related_findings.append(finding_id)


class Hypothesis(BaseModel):
    """A strategic claim whose lifecycle is managed by the knowledge graph."""

    claim: str = Field(..., min_length=1)
    evidence_ids: list[str] = Field(default_factory=list)
    validation_status: ValidationStatus = "PENDING"
    implications: str = ""


class Pattern(BaseModel):
    """A recurring signal across knowledge-graph entities."""

    description: str
    entities: list[str] = Field(default_factory=list)
    confidence: int = Field(..., ge=0, le=100)


@dataclass
class ResearchMetrics:
    """Call and write counters for one mission."""

    total_tool_calls: int = 0
    calls_by_tool: dict[str, int] = field(default_factory=dict)
    graph_writes: int = 0
    graph_reads: int = 0
    recency_filtered: int = 0
    sequential_thoughts: int = 0

    def record_call(self, tool_id: str) -> None:
        self.total_tool_calls += 1
        self.calls_by_tool[tool_id] = self.calls_by_tool.get(tool_id, 0) + 1


@dataclass
class ResearchState:
    """Per-mission accumulator, discarded when the mission ends."""

    phase: str = "RESEARCH"
    findings: list[Finding] = field(default_factory=list)
    iteration_count: int = 0
    start_time: datetime = field(default_factory=datetime.now)
    metrics: ResearchMetrics = field(default_factory=ResearchMetrics)

    @property
    def elapsed_minutes(self) -> int:
        return int((datetime.now() - self.start_time).total_seconds() // 60)
