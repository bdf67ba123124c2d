"""Educational brief analysis.

Aggregates per-section health checks into the full educational result:
bands, readiness, priority actions, action plan and learning content.
"""

from __future__ import annotations

from typing import Any

from brief_engine.core.assessment.action_plan import generate_action_plan
from brief_engine.core.assessment.priority_actions import generate_priority_actions
from brief_engine.core.bands import (
    CRITICAL_BANDS,
    IMPROVABLE_BANDS,
    TOP_BANDS,
    map_score_to_band,
    next_milestone,
    overall_assessment,
    readiness_level,
)
from brief_engine.core.errors import InternalError
from brief_engine.core.logging import get_logger
from brief_engine.core.rule_engine import CriteriaRuleEngine
from brief_engine.core.schemas_analysis import (
    EducationalAnalysis,
    HealthCheck,
    OverallAssessment,
    ProgressIndicators,
    ReadinessLevel,
    VerbalBand,
)

logger = get_logger(__name__)

DID_YOU_KNOW: tuple[str, ...] = (
    "Briefs with quantified objectives are far easier to evaluate after the campaign ends",
    "Creative teams usually read the summary and the audience first",
    "A single well-described audience segment beats a long list of vague ones",
    "Most briefing problems come from missing information, not from wrong information",
)

BEST_PRACTICES: tuple[str, ...] = (
    "Write objectives with a number and a deadline",
    "Describe the audience as a person: age, motivations and media habits",
    "Keep key messages short and limited to one idea each",
    "Justify every channel with a reason tied to the audience",
    "Pair every objective with a success metric",
)

# Shown when the related section is weak
SECTION_MISTAKES: dict[str, str] = {
    "objectives": "Writing objectives without numbers, so success cannot be measured",
    "targetAudience": "Targeting 'everyone', which leaves messages without a clear receiver",
    "keyMessages": "Listing too many messages so none of them sticks",
    "channelsAndTactics": "Choosing channels out of habit instead of audience fit",
    "successMetrics": "Tracking vanity metrics unrelated to the objectives",
    "budgetConsiderations": "Leaving the budget open, which invites unrealistic proposals",
    "timeline": "Forgetting approval rounds in the timeline",
    "riskAnalysis": "Ignoring risks until they happen",
}
GENERIC_MISTAKES: tuple[str, ...] = (
    "Describing the solution instead of the problem",
    "Using internal jargon the creative team does not share",
)
MAX_MISTAKES = 4


def _common_mistakes(weak_sections: list[str]) -> list[str]:
    mistakes = [SECTION_MISTAKES[s] for s in weak_sections if s in SECTION_MISTAKES]
    for generic in GENERIC_MISTAKES:
        if len(mistakes) >= MAX_MISTAKES:
            break
        mistakes.append(generic)
    return mistakes[:MAX_MISTAKES]


def _progress(
    health_checks: list[HealthCheck], engine: CriteriaRuleEngine, percentage: float
) -> ProgressIndicators:
    def name(check: HealthCheck) -> str:
        section = engine.catalog.get(check.section)
        return section.display_name if section else check.section

    return ProgressIndicators(
        completed_well=[name(c) for c in health_checks if c.verbal_score in TOP_BANDS],
        improvement_areas=[
            name(c)
            for c in health_checks
            if c.verbal_score in CRITICAL_BANDS or c.verbal_score in IMPROVABLE_BANDS
        ],
        next_milestone=next_milestone(percentage),
    )


def _downgraded(error: str) -> EducationalAnalysis:
    return EducationalAnalysis(
        overall_assessment=OverallAssessment.INCOMPLETE,
        overall_score=VerbalBand.INCOMPLETE,
        readiness_level=ReadinessLevel.REQUIRES_DEVELOPMENT,
        did_you_know=list(DID_YOU_KNOW),
        best_practices=list(BEST_PRACTICES),
        common_mistakes=list(GENERIC_MISTAKES),
        progress_indicators=ProgressIndicators(next_milestone=next_milestone(0)),
        action_plan=generate_action_plan([], 0.0),
        error=error,
    )


def _analyze(document: Any, engine: CriteriaRuleEngine) -> EducationalAnalysis:
    if document is not None and not isinstance(document, dict):
        raise InternalError(f"Brief must be an object, got {type(document).__name__}")

    health_checks = engine.evaluate_document(document)
    earned = sum(c.earned_points for c in health_checks)
    max_points = sum(c.max_points for c in health_checks)
    percentage = earned / max_points * 100 if max_points else 0.0

    weak = [
        c.section
        for c in health_checks
        if c.verbal_score in CRITICAL_BANDS or c.verbal_score in IMPROVABLE_BANDS
    ]

    return EducationalAnalysis(
        overall_assessment=overall_assessment(percentage),
        overall_score=map_score_to_band(percentage),
        readiness_level=readiness_level(percentage),
        earned_points=earned,
        max_points=max_points,
        health_checks=health_checks,
        did_you_know=list(DID_YOU_KNOW),
        best_practices=list(BEST_PRACTICES),
        common_mistakes=_common_mistakes(weak),
        priority_actions=generate_priority_actions(
            health_checks, percentage, catalog=engine.catalog
        ),
        progress_indicators=_progress(health_checks, engine, percentage),
        action_plan=generate_action_plan(health_checks, percentage, catalog=engine.catalog),
    )


def analyze_brief(
    document: dict[str, Any] | None,
    engine: CriteriaRuleEngine | None = None,
) -> EducationalAnalysis:
    """
    Run the full educational analysis of a brief.

    Never raises: any failure is logged and downgraded to a minimal result
    with ``error`` set and a plan that only contains Final Polish.

    Args:
        document: Brief document (may be empty or None)
        engine: Rule engine to use (default catalog and points when omitted)

    Returns:
        EducationalAnalysis
    """
    engine = engine or CriteriaRuleEngine()
    try:
        analysis = _analyze(document, engine)
    except Exception as e:
        logger.error(f"Brief analysis failed, returning downgraded result: {e}", exc_info=True)
        return _downgraded(f"Analysis failed: {e}")

    logger.debug(
        f"Analyzed brief: {analysis.percentage}% ({analysis.overall_score.value})",
        extra={"earned_points": analysis.earned_points, "max_points": analysis.max_points},
    )
    return analysis
