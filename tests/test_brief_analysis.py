"""Tests for the full educational analysis and its cache."""

from unittest.mock import MagicMock, patch

from brief_engine.core.analysis_cache import BriefAnalyzer
from brief_engine.core.assessment import analyze_brief
from brief_engine.core.rule_engine import CriteriaRuleEngine
from brief_engine.core.schemas_analysis import (
    OverallAssessment,
    ReadinessLevel,
    VerbalBand,
)
from tests.fixtures_briefs import RICH_BRIEF, rich_brief


# =============================================================================
# analyze_brief
# =============================================================================


class TestAnalyzeBrief:
    def test_rich_brief(self):
        analysis = analyze_brief(RICH_BRIEF)

        assert analysis.error is None
        assert analysis.percentage == 100.0
        assert analysis.overall_score is VerbalBand.EXCELLENT
        assert analysis.overall_assessment is OverallAssessment.VERY_COMPLETE
        assert analysis.readiness_level is ReadinessLevel.READY_TO_PRESENT
        assert analysis.progress_indicators.improvement_areas == []
        assert len(analysis.progress_indicators.completed_well) == len(analysis.health_checks)

    def test_missing_audience(self):
        analysis = analyze_brief(rich_brief(targetAudience=None))

        audience = next(c for c in analysis.health_checks if c.section == "targetAudience")
        assert audience.earned_points == 0
        assert audience.verbal_score is VerbalBand.INCOMPLETE

        fundamentals = analysis.action_plan.phases[0]
        assert fundamentals.id == "fundamentals"
        assert any(
            t.section == "targetAudience" and "audience" in t.title.lower()
            for t in fundamentals.tasks
        )
        assert "target audience" in analysis.progress_indicators.improvement_areas

    def test_empty_brief(self):
        analysis = analyze_brief({})

        assert analysis.error is None
        assert analysis.percentage == 0.0
        assert analysis.overall_assessment is OverallAssessment.INCOMPLETE
        assert analysis.readiness_level is ReadinessLevel.REQUIRES_DEVELOPMENT
        assert analysis.common_mistakes
        assert analysis.did_you_know
        assert analysis.best_practices

    def test_percentages_in_range(self):
        for document in ({}, RICH_BRIEF, rich_brief(summary="Short", objectives=["one"])):
            analysis = analyze_brief(document)
            assert 0 <= analysis.percentage <= 100
            assert all(0 <= c.percentage <= 100 for c in analysis.health_checks)

    def test_failing_engine_downgrades(self):
        engine = MagicMock(spec=CriteriaRuleEngine)
        engine.evaluate_document.side_effect = RuntimeError("scorer exploded")

        analysis = analyze_brief(RICH_BRIEF, engine)

        assert analysis.error is not None
        assert "scorer exploded" in analysis.error
        assert analysis.health_checks == []
        assert [p.id for p in analysis.action_plan.phases] == ["final_polish"]

    def test_non_dict_document_downgrades(self):
        analysis = analyze_brief(["not", "a", "brief"])  # type: ignore[arg-type]
        assert analysis.error is not None


# =============================================================================
# BriefAnalyzer
# =============================================================================


class TestBriefAnalyzer:
    def test_identical_documents_analyzed_once(self):
        analyzer = BriefAnalyzer()

        with patch.object(
            analyzer.engine, "evaluate_document", wraps=analyzer.engine.evaluate_document
        ) as evaluate:
            first = analyzer.analyze(rich_brief())
            second = analyzer.analyze(rich_brief())

        assert evaluate.call_count == 1
        assert analyzer.run_count == 1
        assert second is first

    def test_changed_document_recomputes(self):
        analyzer = BriefAnalyzer()
        analyzer.analyze(rich_brief())
        analyzer.analyze(rich_brief(title="Another campaign title"))

        assert analyzer.run_count == 2

    def test_mutating_caller_document_is_detected(self):
        analyzer = BriefAnalyzer()
        brief = rich_brief()
        analyzer.analyze(brief)

        brief["targetAudience"] = {}
        result = analyzer.analyze(brief)

        assert analyzer.run_count == 2
        audience = next(c for c in result.health_checks if c.section == "targetAudience")
        assert audience.status == "missing"

    def test_invalidate(self):
        analyzer = BriefAnalyzer()
        analyzer.analyze(RICH_BRIEF)
        analyzer.invalidate()

        assert analyzer.latest is None
        analyzer.analyze(RICH_BRIEF)
        assert analyzer.run_count == 2
