"""Tests for the brief quality analysis chain and its local fallback."""

import json
from unittest.mock import AsyncMock, patch

import pytest

from brief_engine.chains.enrich_brief_analysis import (
    build_local_quality_report,
    enrich_brief_analysis,
    parse_quality_report,
)
from brief_engine.core.errors import NetworkError, ParseError, ValidationError
from tests.fixtures_briefs import RICH_BRIEF, rich_brief

AI_REPORT = {
    "overallScore": 72,
    "completenessScore": 80,
    "qualityScore": 70,
    "professionalismScore": 75,
    "readinessScore": 65,
    "strengths": ["Clear objectives"],
    "weaknesses": ["Vague audience"],
    "criticalIssues": [],
    "recommendations": ["Describe the audience's media habits"],
    "sectionAnalysis": {
        "targetAudience": {
            "score": 40,
            "status": "fair",
            "issues": ["No demographics"],
            "suggestions": ["Add an age range"],
        }
    },
    "isReadyForProduction": False,
    "estimatedImprovementTime": "30 minutes",
}

_COMPLETION = "brief_engine.chains.enrich_brief_analysis.request_json_completion"


class TestParseQualityReport:
    def test_valid(self):
        report = parse_quality_report(json.dumps(AI_REPORT))

        assert report.source == "ai"
        assert report.overall_score == 72
        assert report.section_analysis["targetAudience"].status == "fair"

    def test_wire_format_is_camel_case(self):
        wire = parse_quality_report(json.dumps(AI_REPORT)).to_wire()
        assert wire["overallScore"] == 72
        assert wire["criticalIssues"] == []
        assert wire["source"] == "ai"

    def test_missing_required_key(self):
        payload = {k: v for k, v in AI_REPORT.items() if k != "overallScore"}
        with pytest.raises(ValidationError):
            parse_quality_report(json.dumps(payload))

    def test_score_out_of_range(self):
        with pytest.raises(ValidationError):
            parse_quality_report(json.dumps({**AI_REPORT, "qualityScore": 140}))

    def test_not_json(self):
        with pytest.raises(ParseError):
            parse_quality_report("The brief looks great!")


class TestLocalQualityReport:
    def test_rich_brief(self):
        report = build_local_quality_report(RICH_BRIEF)

        assert report.source == "local"
        assert report.overall_score == 100
        assert report.completeness_score == 100
        assert report.is_ready_for_production is True
        assert report.critical_issues == []
        assert all(s.status == "excellent" for s in report.section_analysis.values())

    def test_missing_audience(self):
        report = build_local_quality_report(rich_brief(targetAudience=None))

        audience = report.section_analysis["targetAudience"]
        assert audience.status == "missing"
        assert audience.score == 0
        assert audience.suggestions
        assert report.critical_issues
        assert report.completeness_score < 100

    def test_empty_brief(self):
        report = build_local_quality_report({})

        assert report.overall_score == 0
        assert report.quality_score == 0
        assert report.is_ready_for_production is False


class TestEnrichBriefAnalysis:
    @pytest.mark.asyncio
    async def test_ai_report(self):
        with patch(_COMPLETION, new=AsyncMock(return_value=json.dumps(AI_REPORT))):
            report = await enrich_brief_analysis(RICH_BRIEF)

        assert report.source == "ai"
        assert report.overall_score == 72

    @pytest.mark.asyncio
    async def test_malformed_output_falls_back_to_local(self):
        with patch(_COMPLETION, new=AsyncMock(return_value='{"overallScore": "great"}')):
            report = await enrich_brief_analysis(RICH_BRIEF)

        assert report.source == "local"
        assert report.overall_score == 100

    @pytest.mark.asyncio
    async def test_network_failure_falls_back_to_local(self):
        with patch(_COMPLETION, new=AsyncMock(side_effect=NetworkError("down"))):
            report = await enrich_brief_analysis({})

        assert report.source == "local"
        assert report.overall_score == 0
