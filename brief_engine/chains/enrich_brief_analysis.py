"""Brief Quality Analysis Agent.

Asks the model for a scored quality review of a brief (overall and dimension
scores, strengths, weaknesses, critical issues, recommendations and a
per-section breakdown). When the model is unavailable or returns something
unusable, a deterministic report is derived from the rule engine instead.
"""

import json
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from brief_engine.core.assessment import analyze_brief
from brief_engine.core.bands import CRITICAL_BANDS, IMPROVABLE_BANDS, TOP_BANDS, band_rank
from brief_engine.core.config import get_settings
from brief_engine.core.errors import CollaboratorError, ParseError, ValidationError
from brief_engine.core.field_quality import list_poor_fields
from brief_engine.core.llm import parse_llm_json_dict, request_json_completion
from brief_engine.core.logging import get_logger
from brief_engine.core.rule_engine import CriteriaRuleEngine
from brief_engine.core.schemas_analysis import (
    BriefQualityReport,
    ReadinessLevel,
    SectionQuality,
    VerbalBand,
)
from brief_engine.core.schemas_brief import INDISPENSABLE_FIELDS

logger = get_logger(__name__)

COLLABORATOR = "brief_analysis"

SYSTEM_PROMPT = """You are a senior marketing director reviewing a campaign brief before it goes to the creative team.

Evaluate the brief on:
- completeness: are all important sections present?
- quality: are sections specific, measurable and consistent?
- professionalism: is it clear, well written and free of jargon?
- readiness: could a creative team start working from it today?

Scores are numbers from 0 to 100. Be honest and specific; cite the brief when pointing out issues.

Output ONLY valid JSON:
{
  "overallScore": 0-100,
  "completenessScore": 0-100,
  "qualityScore": 0-100,
  "professionalismScore": 0-100,
  "readinessScore": 0-100,
  "strengths": ["..."],
  "weaknesses": ["..."],
  "criticalIssues": ["..."],
  "recommendations": ["..."],
  "sectionAnalysis": {
    "<section key>": {
      "score": 0-100,
      "status": "excellent|good|fair|poor|missing",
      "issues": ["..."],
      "suggestions": ["..."]
    }
  },
  "isReadyForProduction": true|false,
  "estimatedImprovementTime": "e.g. 30 minutes"
}
"""

_STATUS_MAP = {
    "excellent": "excellent",
    "good": "good",
    "fair": "fair",
    "deficient": "poor",
    "missing": "missing",
}


def build_local_quality_report(
    document: dict[str, Any] | None,
    engine: CriteriaRuleEngine | None = None,
) -> BriefQualityReport:
    """
    Derive a quality report from the deterministic rule engine.

    Args:
        document: Brief document
        engine: Rule engine override

    Returns:
        BriefQualityReport with source="local"
    """
    engine = engine or CriteriaRuleEngine()
    analysis = analyze_brief(document, engine)
    checks = analysis.health_checks

    def name(section_key: str) -> str:
        section = engine.catalog.get(section_key)
        return section.display_name if section else section_key

    poor_fields = list_poor_fields(document)
    completeness = (len(INDISPENSABLE_FIELDS) - len(poor_fields)) / len(INDISPENSABLE_FIELDS) * 100

    present = [c for c in checks if c.status != "missing"]
    quality = sum(c.percentage for c in present) / len(present) if present else 0.0

    good_rank = band_rank(VerbalBand.GOOD)
    professionalism = (
        sum(1 for c in checks if band_rank(c.verbal_score) >= good_rank) / len(checks) * 100
        if checks
        else 0.0
    )

    return BriefQualityReport(
        overall_score=analysis.percentage,
        completeness_score=round(completeness, 1),
        quality_score=round(quality, 1),
        professionalism_score=round(professionalism, 1),
        readiness_score=analysis.percentage,
        strengths=[
            f"{name(c.section).capitalize()} meets its key criteria"
            for c in checks
            if c.verbal_score in TOP_BANDS
        ],
        weaknesses=[
            f"{name(c.section).capitalize()}: {c.explanation}"
            for c in checks
            if c.verbal_score in IMPROVABLE_BANDS
        ],
        critical_issues=[c.explanation for c in checks if c.verbal_score in CRITICAL_BANDS],
        recommendations=[a.title for a in analysis.priority_actions],
        section_analysis={
            c.section: SectionQuality(
                score=c.percentage,
                status=_STATUS_MAP[c.status],
                issues=[i.explanation for i in c.failed_insights],
                suggestions=[i.title for i in c.failed_insights],
            )
            for c in checks
        },
        is_ready_for_production=analysis.readiness_level is ReadinessLevel.READY_TO_PRESENT,
        estimated_improvement_time=analysis.action_plan.estimated_time_total,
        source="local",
    )


def parse_quality_report(raw_output: str) -> BriefQualityReport:
    """
    Parse and validate a model quality report.

    Raises:
        ParseError: If the output is not a JSON object
        ValidationError: If required keys are missing or out of range
    """
    try:
        data = parse_llm_json_dict(raw_output)
    except json.JSONDecodeError as e:
        raise ParseError(f"Analysis response is not valid JSON: {e}", COLLABORATOR) from e

    try:
        report = BriefQualityReport.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(
            f"Analysis response has the wrong shape: {e.error_count()} error(s)", COLLABORATOR
        ) from e
    return report.model_copy(update={"source": "ai"})


async def enrich_brief_analysis(document: dict[str, Any] | None) -> BriefQualityReport:
    """
    Get an AI quality review of a brief, falling back to the local report.

    Args:
        document: Brief document

    Returns:
        BriefQualityReport (source "ai" or "local")
    """
    settings = get_settings()
    user_prompt = "Brief to review:\n" + json.dumps(document or {}, indent=2, ensure_ascii=False)

    try:
        raw_output = await request_json_completion(
            SYSTEM_PROMPT,
            user_prompt,
            model=settings.ANALYSIS_MODEL,
            temperature=0.2,
            max_tokens=settings.ANALYSIS_MAX_TOKENS,
            collaborator=COLLABORATOR,
        )
        report = parse_quality_report(raw_output)
    except CollaboratorError as e:
        logger.warning(
            f"AI brief analysis unavailable, using local report: {e}",
            extra={"error_type": type(e).__name__},
        )
        return build_local_quality_report(document)

    logger.info(
        f"AI brief analysis complete: {report.overall_score}",
        extra={"critical_issues": len(report.critical_issues)},
    )
    return report
