"""API endpoints for brief generation, analysis, merging and storage."""

from functools import lru_cache
from typing import Any
from uuid import UUID

from fastapi import APIRouter, HTTPException, Path, Query

from brief_engine.chains.enrich_brief_analysis import enrich_brief_analysis
from brief_engine.chains.generate_brief import generate_brief
from brief_engine.core.assessment import analyze_brief
from brief_engine.core.brief_merge import merge_briefs
from brief_engine.core.brief_normalization import validate_brief
from brief_engine.core.config import get_settings
from brief_engine.core.field_quality import is_brief_complete, list_poor_fields
from brief_engine.core.logging import get_logger
from brief_engine.core.rule_engine import CriteriaRuleEngine
from brief_engine.core.schemas_analysis import BriefQualityReport, EducationalAnalysis
from brief_engine.core.schemas_brief import (
    BriefCompletenessResponse,
    BriefGenerateRequest,
    BriefGenerateResponse,
    BriefMergeRequest,
    BriefMergeResponse,
    BriefPayload,
    BriefSaveRequest,
    BriefSaveResponse,
    BriefValidation,
    StoredBrief,
    generate_brief_title,
)
from brief_engine.db.briefs import list_briefs, load_brief, save_brief

logger = get_logger(__name__)

router = APIRouter()


@lru_cache(maxsize=1)
def get_rule_engine() -> CriteriaRuleEngine:
    """Rule engine over the default catalog, scored with configured points."""
    return CriteriaRuleEngine(points_per_check=get_settings().POINTS_PER_CHECK)


@router.post("/briefs/analysis", response_model=EducationalAnalysis)
async def analyze_brief_endpoint(request: BriefPayload) -> EducationalAnalysis:
    """
    Run the deterministic educational analysis of a brief.

    Analysis never fails: internal errors come back as a downgraded result
    with ``error`` set.
    """
    logger.info("Analyzing brief", extra={"fields": len(request.brief)})
    return analyze_brief(request.brief, get_rule_engine())


@router.post("/briefs/analysis/enriched", response_model=BriefQualityReport)
async def enrich_brief_analysis_endpoint(request: BriefPayload) -> BriefQualityReport:
    """
    Get an AI quality review of a brief.

    Falls back to a rule-engine report when the model is unavailable; the
    ``source`` field tells which one was used.

    Raises:
        HTTPException 500: If the review cannot be produced at all
    """
    try:
        report = await enrich_brief_analysis(request.brief)
        logger.info(
            f"Brief quality report ready ({report.source})",
            extra={"overall_score": report.overall_score},
        )
        return report

    except Exception as e:
        error_msg = f"Failed to analyze brief: {str(e)}"
        logger.error(error_msg)
        raise HTTPException(status_code=500, detail=error_msg) from e


@router.post("/briefs/completeness", response_model=BriefCompletenessResponse)
async def brief_completeness(request: BriefPayload) -> BriefCompletenessResponse:
    """Check the indispensable fields of a brief."""
    return BriefCompletenessResponse(
        is_complete=is_brief_complete(request.brief),
        poor_fields=list_poor_fields(request.brief),
    )


@router.post("/briefs/merge", response_model=BriefMergeResponse)
async def merge_brief_endpoint(request: BriefMergeRequest) -> BriefMergeResponse:
    """Merge a candidate update into a brief without losing existing content."""
    return BriefMergeResponse(merged=merge_briefs(request.original, request.improved))


@router.post("/briefs/validate", response_model=BriefValidation)
async def validate_brief_endpoint(request: BriefPayload) -> BriefValidation:
    """Check a brief for its required and recommended fields."""
    return validate_brief(request.brief)


@router.post("/briefs/generate", response_model=BriefGenerateResponse)
async def generate_brief_endpoint(request: BriefGenerateRequest) -> BriefGenerateResponse:
    """
    Generate a first brief from a meeting transcript.

    Raises:
        HTTPException 400: If the transcript is blank
        HTTPException 500: If generation fails
    """
    if not request.transcript.strip():
        raise HTTPException(status_code=400, detail="Transcript cannot be empty")

    try:
        brief = await generate_brief(request.transcript)
        poor_fields = list_poor_fields(brief)
        logger.info("Generated brief from transcript", extra={"poor_fields": len(poor_fields)})

        return BriefGenerateResponse(
            brief=brief,
            title=generate_brief_title(brief),
            validation=validate_brief(brief),
            completeness=BriefCompletenessResponse(
                is_complete=not poor_fields,
                poor_fields=poor_fields,
            ),
        )

    except Exception as e:
        error_msg = f"Failed to generate brief: {str(e)}"
        logger.error(error_msg)
        raise HTTPException(status_code=500, detail=error_msg) from e


@router.post("/briefs", response_model=BriefSaveResponse)
async def save_brief_endpoint(request: BriefSaveRequest) -> BriefSaveResponse:
    """
    Persist a brief.

    Raises:
        HTTPException 500: If database operation fails
    """
    try:
        brief_id = save_brief(request.brief, request.metadata)
        return BriefSaveResponse(id=brief_id)

    except Exception as e:
        error_msg = f"Failed to save brief: {str(e)}"
        logger.error(error_msg)
        raise HTTPException(status_code=500, detail=error_msg) from e


@router.get("/briefs", response_model=list[dict[str, Any]])
async def list_briefs_endpoint(
    limit: int = Query(20, ge=1, le=100, description="Maximum number of briefs"),
) -> list[dict[str, Any]]:
    """
    List recently stored briefs.

    Raises:
        HTTPException 500: If database operation fails
    """
    try:
        return list_briefs(limit)

    except Exception as e:
        error_msg = f"Failed to list briefs: {str(e)}"
        logger.error(error_msg)
        raise HTTPException(status_code=500, detail=error_msg) from e


@router.get("/briefs/{brief_id}", response_model=StoredBrief)
async def get_brief(
    brief_id: UUID = Path(..., description="Brief UUID"),
) -> StoredBrief:
    """
    Get a stored brief.

    Raises:
        HTTPException 404: If the brief does not exist
        HTTPException 500: If database operation fails
    """
    try:
        row = load_brief(brief_id)
        if not row:
            raise HTTPException(status_code=404, detail="Brief not found")
        return StoredBrief(**row)

    except HTTPException:
        raise
    except Exception as e:
        error_msg = f"Failed to get brief: {str(e)}"
        logger.error(error_msg, extra={"brief_id": str(brief_id)})
        raise HTTPException(status_code=500, detail=error_msg) from e
