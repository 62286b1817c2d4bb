"""
Keyword classification of free-form research text.

Everything here is a lexical heuristic over text returned by upstream
search and reasoning services, so misclassification is expected.
"""

import json
import re
from typing import Any

from ..mission.models import SNIPPET_MAX_CHARS, Category, Impact

_THINK_BLOCK = re.compile(r"<think>.*?</think>", re.DOTALL)
_EMBEDDED_TEXT_ITEM = re.compile(r'\{"type":"text","text":".*?"\}')
_MARKDOWN_CHARS = re.compile(r"[*#]")


def categorize_focus(focus: str) -> Category:
    """
    Map a focus theme to a finding category.

    Matching is case-sensitive; focus themes are lowercase. Impact grading
    below is case-insensitive.
    """
    if "pric" in focus:
        return "PRICING"
    if "product" in focus:
        return "PRODUCT"
    if "hire" in focus:
        return "PEOPLE"
    if "sentiment" in focus:
        return "SENTIMENT"
    return "STRATEGY"


def assess_impact(analysis: str) -> Impact:
    """Grade the impact of an analysis by its own wording."""
    text = analysis.lower()
    if "critical" in text:
        return "CRITICAL"
    if "important" in text:
        return "HIGH"
    return "MEDIUM"


def _unwrap(raw: Any) -> str:
    """Pull the text payload out of a structured tool result."""
    text = raw if isinstance(raw, str) else json.dumps(raw)

    try:
        parsed = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return text

    if isinstance(parsed, dict):
        content = parsed.get("content")
        if isinstance(content, list):
            for item in content:
                if isinstance(item, dict) and item.get("type") == "text":
                    return str(item.get("text", ""))
        elif "text" in parsed:
            return str(parsed["text"])

    return text


def clean_text(raw: Any, max_chars: int = SNIPPET_MAX_CHARS) -> str:
    """
    Normalize a tool result into a short plain-text insight.

    Strips reasoning blocks, markdown emphasis and heading characters, and
    escaped newlines, then truncates.
    """
    if raw is None:
        return ""

    text = _unwrap(raw)
    text = _THINK_BLOCK.sub("", text)
    text = _EMBEDDED_TEXT_ITEM.sub("", text)
    text = text.replace("\\n", "\n")
    text = _MARKDOWN_CHARS.sub("", text)
    return text.strip()[:max_chars]
