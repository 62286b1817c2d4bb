"""
Recency gate for queries and findings.

Dates are computed from the wall clock at call time, so two calls hours
apart inside one long mission may produce different windows.
"""

from collections.abc import Callable
from datetime import datetime

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def _month_label(year: int, month_index: int) -> str:
    """Label for a zero-based month index that may fall outside 0-11."""
    year += month_index // 12
    return f"{MONTH_NAMES[month_index % 12]} {year}"


class RecencyGate:
    """Qualifies queries with a recent-date window and filters stale text."""

    def __init__(
        self,
        now: Callable[[], datetime] = datetime.now,
        window_months: int = 3,
    ):
        """
        Initialize recency gate.

        Args:
            now: Clock returning the current local time
            window_months: How many recent months count as fresh
        """
        self._now = now
        self.window_months = window_months

    def recent_months(self) -> list[str]:
        """Month-year labels for the window, newest first."""
        now = self._now()
        return [
            _month_label(now.year, now.month - 1 - offset)
            for offset in range(self.window_months)
        ]

    def cutoff(self) -> str:
        """Month-year label of the oldest month excluded from the window."""
        now = self._now()
        return _month_label(now.year, now.month - 1 - self.window_months)

    def qualify(self, query: str) -> str:
        """Append a recency clause to a search query."""
        return f"{query} since {self.recent_months()[0]} (exclude before {self.cutoff()})"

    def is_recent(self, text: str) -> bool:
        """
        Judge whether text talks about recent events.

        True when it names one of the recent months, or names the current
        year alongside "new" or "launch".
        """
        lower = text.lower()
        if any(label.lower() in lower for label in self.recent_months()):
            return True

        current_year = str(self._now().year)
        return current_year in lower and ("new" in lower or "launch" in lower)
