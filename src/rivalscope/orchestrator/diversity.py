"""
Tool selection that keeps capability usage diverse.

Each pick avoids the previously selected tool and favours the least-used
one, so over a mission every backend gets a fair share of the calls.
"""

import logging
from collections.abc import Iterable, Sequence

logger = logging.getLogger(__name__)


class NoCandidateToolError(RuntimeError):
    """Raised when exclusions leave no tool to select."""


class ToolDiversityEnforcer:
    """Balanced, no-immediate-repeat selection among capability ids."""

    def __init__(self, tool_ids: Sequence[str]):
        if not tool_ids:
            raise ValueError("At least one tool id required")

        # Insertion order doubles as the tie-break order
        self._usage: dict[str, int] = {tool_id: 0 for tool_id in tool_ids}
        self.last_selected: str | None = None

    @property
    def usage(self) -> dict[str, int]:
        """Snapshot of selection counts per tool."""
        return dict(self._usage)

    def select_next(self, exclude: Iterable[str] = ()) -> str:
        """
        Select the least-used tool that is neither excluded nor the last pick.

        Args:
            exclude: Tool ids that must not be returned

        Returns:
            Selected tool id

        Raises:
            NoCandidateToolError: If every tool is excluded
        """
        excluded = set(exclude)
        candidates = [
            tool_id
            for tool_id in self._usage
            if tool_id not in excluded and tool_id != self.last_selected
        ]
        if not candidates:
            raise NoCandidateToolError(
                f"No tool left to select (excluded={sorted(excluded)}, "
                f"last={self.last_selected})"
            )

        selected = min(candidates, key=lambda tool_id: self._usage[tool_id])
        self._usage[selected] += 1
        self.last_selected = selected
        return selected

    def select_distinct(self, count: int) -> list[str]:
        """Select ``count`` mutually distinct tools in one go."""
        chosen: list[str] = []
        for _ in range(count):
            chosen.append(self.select_next(exclude=chosen))

        logger.debug(f"Selected tools {chosen} (usage={self._usage})")
        return chosen
