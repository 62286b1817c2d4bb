"""Research orchestrator for time-boxed competitor investigations."""

from .classify import assess_impact, categorize_focus, clean_text
from .core import FOCUS_AREAS, DeepResearchOrchestrator
from .critical_path import CriticalPathAnalysis, CriticalPathAnalyzer
from .cycle import ResearchCycle
from .diversity import NoCandidateToolError, ToolDiversityEnforcer
from .recency import RecencyGate
from .recommendations import RecommendationSynthesizer
from .report import ReportCompiler

__all__ = [
    "FOCUS_AREAS",
    "CriticalPathAnalysis",
    "CriticalPathAnalyzer",
    "DeepResearchOrchestrator",
    "NoCandidateToolError",
    "RecencyGate",
    "RecommendationSynthesizer",
    "ReportCompiler",
    "ResearchCycle",
    "ToolDiversityEnforcer",
    "assess_impact",
    "categorize_focus",
    "clean_text",
]
