"""Mission data models and the end-to-end mission pipeline."""

from .models import (
    Evidence,
    Finding,
    Hypothesis,
    MissionContext,
    Pattern,
    ResearchMetrics,
    ResearchState,
)

__all__ = [
    "Evidence",
    "Finding",
    "Hypothesis",
    "MissionContext",
    "Pattern",
    "ResearchMetrics",
    "ResearchState",
]
