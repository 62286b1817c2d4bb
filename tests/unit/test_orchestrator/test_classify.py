"""Tests for keyword classification and text cleaning."""

import json

import pytest

from rivalscope.orchestrator.classify import assess_impact, categorize_focus, clean_text


@pytest.mark.parametrize(
    ("focus", "category"),
    [
        ("pricing strategy", "PRICING"),
        ("price increases", "PRICING"),
        ("product launches", "PRODUCT"),
        ("leadership hires", "PEOPLE"),
        ("customer sentiment", "SENTIMENT"),
        ("market expansion", "STRATEGY"),
        ("funding", "STRATEGY"),
    ],
)
def test_categorize_focus(focus, category):
    assert categorize_focus(focus) == category


def test_focus_matching_is_case_sensitive():
    assert categorize_focus("Pricing Strategy") == "STRATEGY"
    assert categorize_focus("Product Launches") == "STRATEGY"


def test_assess_impact():
    assert assess_impact("This is a CRITICAL shift") == "CRITICAL"
    assert assess_impact("An important partnership") == "HIGH"
    assert assess_impact("Routine blog post") == "MEDIUM"


def test_critical_wins_over_important():
    assert assess_impact("important and critical") == "CRITICAL"


class TestCleanText:
    def test_none_is_empty(self):
        assert clean_text(None) == ""

    def test_strips_think_blocks(self):
        raw = "<think>internal\nreasoning</think>Globex cut prices by 20%"
        assert clean_text(raw) == "Globex cut prices by 20%"

    def test_strips_markdown_and_escaped_newlines(self):
        raw = "## Summary\\n**Globex** launched *Atlas*"
        assert clean_text(raw) == "Summary\nGlobex launched Atlas"

    def test_unwraps_content_list(self):
        raw = json.dumps({"content": [{"type": "image"}, {"type": "text", "text": "Hello"}]})
        assert clean_text(raw) == "Hello"

    def test_unwraps_text_field(self):
        assert clean_text({"text": "  Plain answer "}) == "Plain answer"

    def test_truncates(self):
        assert len(clean_text("x" * 2000)) == 500
        assert clean_text("abcdef", max_chars=3) == "abc"

    def test_non_json_text_untouched(self):
        assert clean_text("[not json") == "[not json"
