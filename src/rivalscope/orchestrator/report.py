"""
HTML dossier rendering.

The dossier carries a header, executive summary, numbered strategic actions
and the first few critical findings with evidence excerpts. All
interpolated text is HTML-escaped.
"""

from datetime import date
from html import escape
from typing import TYPE_CHECKING

from .recency import RecencyGate

if TYPE_CHECKING:
    from ..mission.models import Evidence, Finding, MissionContext, ResearchState
    from .critical_path import CriticalPathAnalysis

REPORT_FINDINGS_LIMIT = 6
REPORT_EVIDENCE_LIMIT = 2
EVIDENCE_EXCERPT_CHARS = 180

_STYLE = """
    body { font-family: 'Georgia', serif; color: #111; max-width: 720px; margin: 0 auto; padding: 40px 20px; line-height: 1.6; background: #fff; }
    .header { border-bottom: 2px solid #000; padding-bottom: 20px; margin-bottom: 40px; }
    .brand { font-family: 'Helvetica Neue', sans-serif; font-weight: 900; font-size: 14px; color: #444; text-transform: uppercase; }
    .title { font-size: 32px; font-weight: 700; margin: 10px 0 5px 0; }
    .meta { font-family: 'Helvetica Neue', sans-serif; font-size: 12px; color: #666; text-transform: uppercase; }
    h2 { font-family: 'Helvetica Neue', sans-serif; font-size: 16px; font-weight: 800; margin-top: 50px; text-transform: uppercase; border-left: 4px solid #000; padding-left: 15px; }
    .finding { margin-bottom: 35px; }
    .finding-headline { font-weight: 700; font-size: 19px; margin-bottom: 8px; }
    .finding-meta { font-family: 'Helvetica Neue', sans-serif; font-size: 10px; color: #888; margin-bottom: 12px; font-weight: 700; }
    .finding-tag { display: inline-block; background: #eee; padding: 2px 6px; border-radius: 3px; margin-right: 8px; }
    .tag-critical { background: #000; color: #fff; }
    .evidence-box { background: #f9f9f9; border-left: 1px solid #ccc; padding: 15px; margin-top: 12px; font-size: 13px; color: #555; }
    .rec-item { background: #f4fbf7; border: 1px solid #dcfce7; padding: 20px; margin-bottom: 15px; border-radius: 4px; }
    .rec-title { font-family: 'Helvetica Neue', sans-serif; font-weight: 700; color: #166534; font-size: 14px; margin-bottom: 5px; text-transform: uppercase; }
    .footer { margin-top: 80px; border-top: 1px solid #eee; padding-top: 30px; font-size: 11px; color: #aaa; text-align: center; }
"""


def tool_label(tool_id: str) -> str:
    """Display label for a capability id: uppercased, hyphen suffix dropped."""
    return tool_id.upper().split("-")[0]


class ReportCompiler:
    """Renders a mission's analysis as a standalone HTML document."""

    def __init__(self, gate: RecencyGate | None = None, brand: str = "RivalScope Intelligence"):
        self.gate = gate or RecencyGate()
        self.brand = brand

    def compile(
        self,
        state: "ResearchState",
        analysis: "CriticalPathAnalysis",
        context: "MissionContext",
        today: date | None = None,
    ) -> str:
        """
        Render the dossier.

        Args:
            state: Mission accumulator (elapsed time, call metrics)
            analysis: Ranked findings and recommendations
            context: Mission context (competitor names)
            today: Date shown in the header (defaults to today)

        Returns:
            HTML document
        """
        competitors = context.targets.competitor_names
        today = today or date.today()
        recent = self.gate.recent_months()
        window = f"{recent[-1]} - {recent[0]}"
        lead = competitors[0] if competitors else "the competition"

        recommendations = "".join(
            self._recommendation(i, rec)
            for i, rec in enumerate(analysis.recommendations, start=1)
        )
        findings = "".join(
            self._finding(f) for f in analysis.critical_findings[:REPORT_FINDINGS_LIMIT]
        )

        return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <style>{_STYLE}</style>
</head>
<body>
  <div class="header">
    <div class="brand">{escape(self.brand)}</div>
    <div class="title">{escape(" vs ".join(competitors))}</div>
    <div class="meta">Strategic Dossier &bull; {today.isoformat()}</div>
  </div>
  <p style="font-size: 18px; line-height: 1.7;">
    <strong>Executive Summary:</strong> {state.elapsed_minutes} minutes of autonomous research
    on {escape(lead)}, drawing on {state.metrics.total_tool_calls} tool calls.
  </p>
  <h2>Strategic Counter-Measures</h2>
  <div>{recommendations}</div>
  <h2>Critical Intelligence ({escape(window)})</h2>
  {findings}
  <div class="footer">CONFIDENTIAL BRIEFING</div>
</body>
</html>"""

    @staticmethod
    def _recommendation(number: int, text: str) -> str:
        return (
            f'<div class="rec-item"><div class="rec-title">Action {number}</div>'
            f"{escape(text)}</div>"
        )

    def _finding(self, finding: "Finding") -> str:
        tag_class = "finding-tag tag-critical" if finding.impact == "CRITICAL" else "finding-tag"
        evidence = "".join(
            self._evidence(e) for e in finding.evidence[:REPORT_EVIDENCE_LIMIT]
        )
        return f"""
  <div class="finding">
    <div class="finding-headline">{escape(finding.signal)}</div>
    <div class="finding-meta"><span class="{tag_class}">{finding.impact}</span>{finding.category}</div>
    <div class="evidence-box">{evidence}</div>
  </div>"""

    @staticmethod
    def _evidence(evidence: "Evidence") -> str:
        excerpt = evidence.snippet[:EVIDENCE_EXCERPT_CHARS]
        return (
            f'<div style="margin-bottom: 8px;"><strong>{escape(tool_label(evidence.tool))}:</strong> '
            f"{escape(excerpt)}...</div>"
        )
