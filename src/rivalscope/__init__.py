"""
RivalScope - Autonomous competitive-intelligence missions.

Researches competitors for a fixed time budget through rotating search and
reasoning backends, persists recent findings in a knowledge graph, and
compiles a strategic dossier with recommendations.

Example:
    import asyncio
    import json
    from pathlib import Path

    from rivalscope import MissionContext, load_config
    from rivalscope.mission.services import create_executor

    async def main():
        config = load_config(Path("rivalscope.toml"))
        context = MissionContext.model_validate(json.loads(Path("context.json").read_text()))

        result = await create_executor(config).execute("m-1", context, duration_minutes=30)
        print(result.report_html)

    asyncio.run(main())
"""

__version__ = "0.1.0"

# Core exports
from .capabilities import CapabilityRegistry, MissingCapabilityError
from .config import AppConfig, load_config
from .graph import KnowledgeGraphClient
from .mission.models import Evidence, Finding, MissionContext, ResearchState
from .mission.runner import MissionExecutor, MissionResult
from .orchestrator import DeepResearchOrchestrator

__all__ = [
    "__version__",
    "AppConfig",
    "CapabilityRegistry",
    "DeepResearchOrchestrator",
    "Evidence",
    "Finding",
    "KnowledgeGraphClient",
    "MissingCapabilityError",
    "MissionContext",
    "MissionExecutor",
    "MissionResult",
    "ResearchState",
    "load_config",
]
