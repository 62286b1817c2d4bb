"""
Recurring mission templates.

A template turns a bare job (target name, requester email, optional custom
query) into a full MissionContext for a generic subscriber.
"""

from dataclasses import dataclass

from ..mission.models import (
    CompanyProfile,
    CompetitorTargets,
    FounderIdentity,
    MissionContext,
    OutputPreferences,
    ProductDetails,
    RiskProfile,
    StrategicNorthStar,
)
from .models import RecurringJob


@dataclass(frozen=True)
class MissionTemplate:
    id: str
    name: str
    description: str
    focus_areas: tuple[str, ...]


RECURRING_TEMPLATES: dict[str, MissionTemplate] = {
    t.id: t
    for t in (
        MissionTemplate(
            id="competitor_watch",
            name="Competitor Watch",
            description="Track strategic moves, launches and leadership changes",
            focus_areas=("Pricing", "Product", "Sentiment"),
        ),
        MissionTemplate(
            id="pricing_monitor",
            name="Pricing Monitor",
            description="Detect pricing and packaging changes",
            focus_areas=("Pricing",),
        ),
        MissionTemplate(
            id="launch_tracker",
            name="Launch Tracker",
            description="Catch product launches and feature releases early",
            focus_areas=("Product", "Traffic"),
        ),
    )
}


def get_template(template_id: str) -> MissionTemplate:
    """
    Raises:
        KeyError: If no template has this id
    """
    try:
        return RECURRING_TEMPLATES[template_id]
    except KeyError:
        known = ", ".join(sorted(RECURRING_TEMPLATES))
        raise KeyError(f"Unknown template '{template_id}' (known: {known})") from None


def build_mission_context(job: RecurringJob) -> MissionContext:
    """Subscriber mission context for a recurring job."""
    template = get_template(job.template_id)
    questions = [job.custom_query] if job.custom_query else []

    return MissionContext(
        identity=FounderIdentity(full_name="Subscriber", email=job.user_email, role="Founder"),
        company=CompanyProfile(
            name="Subscriber Company",
            website_domain="https://example.com",
            founding_year=2024,
            headquarters_location="Remote",
            employee_count_range="1-10",
            primary_industry="Tech",
            business_model="B2B SaaS",
            current_funding_stage="Seed",
        ),
        strategy=StrategicNorthStar(
            core_value_proposition=template.name,
            problem_being_solved=template.description,
            ideal_customer_profile="Founders",
            north_star_metric="Retention",
            pricing_strategy="Freemium (Product Led)",
            primary_gtm_motion="Product Led Growth (Self Serve)",
            target_geography=["Global"],
            positioning="Speed / Performance King",
            unfair_advantage="Deep Tech / R&D",
        ),
        product=ProductDetails(primary_feature_set=["Intelligence"], api_first=True),
        anxiety=RiskProfile(
            biggest_fear="Being blindsided",
            what_keeps_you_up_at_night="Competitors",
            known_weakness_internal="None",
            top_reason_for_churn="Cost",
            top_reason_for_loss_in_sales="Features",
        ),
        targets=CompetitorTargets(
            competitor_names=[job.target_name],
            specific_rumors_to_verify=questions,
            perceived_threat_level="Existential (Kill or be Killed)",
            specific_questions_for_agent=questions,
        ),
        output_preferences=OutputPreferences(
            report_tone="Ruthless VC (Critique)",
            focus_areas=list(template.focus_areas),
        ),
    )
