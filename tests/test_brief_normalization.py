"""Tests for brief normalization and minimum-content validation."""

import copy

from brief_engine.core.brief_normalization import normalize_brief, validate_brief
from tests.fixtures_briefs import RICH_BRIEF

GENERATOR_BRIEF = {
    "projectTitle": "Spring Launch 2025",
    "briefSummary": "Launch the spring collection to urban millennials.",
    "businessChallenge": "Sales dropped 12% last season.",
    "strategicObjectives": ["Grow sales 15% by June", "Reach 1M impressions"],
    "creativeStrategy": {"bigIdea": "Bloom anywhere", "messageHierarchy": ["Fresh", "Local"]},
    "channelStrategy": {"recommendedMix": [{"channel": "Instagram", "rationale": "Audience"}]},
    "appendix": {"assumptions": ["Budget approved in Q1"]},
    "nextSteps": ["Kick-off meeting"],
}


class TestNormalizeBrief:
    def test_aliases_move_to_canonical_keys(self):
        brief = normalize_brief(GENERATOR_BRIEF)

        assert brief["title"] == "Spring Launch 2025"
        assert brief["summary"].startswith("Launch the spring")
        assert brief["problemStatement"] == "Sales dropped 12% last season."
        assert brief["objectives"] == ["Grow sales 15% by June", "Reach 1M impressions"]
        assert brief["channelsAndTactics"]["recommendedMix"][0]["channel"] == "Instagram"
        assert "projectTitle" not in brief
        assert "strategicObjectives" not in brief

    def test_nested_sections_are_lifted(self):
        brief = normalize_brief(GENERATOR_BRIEF)

        assert brief["keyMessages"] == ["Fresh", "Local"]
        assert brief["assumptions"] == ["Budget approved in Q1"]
        # Source sections are kept
        assert brief["creativeStrategy"]["bigIdea"] == "Bloom anywhere"

    def test_unknown_fields_preserved(self):
        assert normalize_brief(GENERATOR_BRIEF)["nextSteps"] == ["Kick-off meeting"]

    def test_canonical_value_wins_over_alias(self):
        brief = normalize_brief({"title": "Canonical title", "projectTitle": "Legacy title"})

        assert brief["title"] == "Canonical title"
        assert brief["projectTitle"] == "Legacy title"

    def test_blank_canonical_value_is_replaced(self):
        brief = normalize_brief({"title": "   ", "projectTitle": "Legacy title"})
        assert brief["title"] == "Legacy title"

    def test_string_list_fields_are_split(self):
        brief = normalize_brief({"objectives": "Grow sales; Reach 1M people\nWin awards", "timeline": "Q2, Q3"})

        assert brief["objectives"] == ["Grow sales", "Reach 1M people", "Win awards"]
        assert brief["timeline"] == "Q2, Q3"

    def test_input_not_mutated(self):
        original = copy.deepcopy(GENERATOR_BRIEF)
        normalize_brief(GENERATOR_BRIEF)
        assert GENERATOR_BRIEF == original

    def test_non_dict(self):
        assert normalize_brief(None) == {}
        assert normalize_brief(["title"]) == {}

    def test_canonical_brief_unchanged(self):
        assert normalize_brief(RICH_BRIEF) == RICH_BRIEF


class TestValidateBrief:
    def test_rich_brief_is_valid(self):
        result = validate_brief(RICH_BRIEF)

        assert result.is_valid is True
        assert result.missing_fields == []
        assert result.warnings == []

    def test_missing_required_fields(self):
        result = validate_brief({"title": "Spring Launch"})

        assert result.is_valid is False
        assert result.missing_fields == ["Brief summary", "Objectives"]
        assert "Consider adding: Target audience" in result.warnings

    def test_aliases_count(self):
        result = validate_brief(GENERATOR_BRIEF)

        assert result.is_valid is True
        assert "Consider adding: Key messages" not in result.warnings
        assert "Consider adding: Target audience" in result.warnings

    def test_empty(self):
        result = validate_brief(None)
        assert result.is_valid is False
        assert len(result.missing_fields) == 3
        assert len(result.warnings) == 4
