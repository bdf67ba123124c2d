"""Brief document model: field names, aliases and value shapes."""

from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

# Fields a brief needs before it can be handed to a creative team
INDISPENSABLE_FIELDS: tuple[str, ...] = (
    "title",
    "summary",
    "brandPositioning",
    "objectives",
    "problemStatement",
    "targetAudience",
    "successMetrics",
    "requirements",
    "keyMessages",
    "timeline",
    "channelsAndTactics",
    "riskAnalysis",
    "dependencies",
    "assumptions",
    "outOfScope",
    "campaignPhases",
)

# Legacy / normalized names still produced by older generators
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "title": ("projectTitle",),
    "summary": ("briefSummary",),
    "objectives": ("strategicObjectives",),
    "problemStatement": ("businessChallenge",),
    "channelsAndTactics": ("channelStrategy",),
    "riskAnalysis": ("riskAssessment",),
    "campaignPhases": ("implementationRoadmap",),
}


class FieldShape(str, Enum):
    """Shape of a brief value, resolved once before any heuristic runs."""

    EMPTY = "empty"
    TEXT = "text"
    TEXT_LIST = "text_list"
    OBJECT_LIST = "object_list"
    RECORD = "record"
    OTHER = "other"


def detect_shape(value: Any) -> FieldShape:
    """
    Classify a value into a FieldShape.

    Falsy values are EMPTY except numeric zero, which is a real value.
    Lists are classified by their first element.
    """
    if value is None or value is False:
        return FieldShape.EMPTY
    if isinstance(value, str):
        return FieldShape.TEXT if value else FieldShape.EMPTY
    if isinstance(value, (list, tuple)):
        if not value:
            return FieldShape.EMPTY
        first = value[0]
        if isinstance(first, str):
            return FieldShape.TEXT_LIST
        if isinstance(first, dict):
            return FieldShape.OBJECT_LIST
        return FieldShape.OTHER
    if isinstance(value, dict):
        return FieldShape.RECORD if value else FieldShape.EMPTY
    return FieldShape.OTHER


def resolve_field(document: dict[str, Any] | None, key: str, aliases: tuple[str, ...] = ()) -> Any:
    """Read a field by its primary key, falling back to aliases in order."""
    if not isinstance(document, dict):
        return None
    value = document.get(key)
    if detect_shape(value) is not FieldShape.EMPTY:
        return value
    for alias in aliases:
        alias_value = document.get(alias)
        if detect_shape(alias_value) is not FieldShape.EMPTY:
            return alias_value
    return value


def generate_brief_title(document: dict[str, Any] | None, fallback: str = "Untitled brief") -> str:
    """
    Derive a display title for a brief.

    Uses the title when present, otherwise the first words of the summary,
    the first objective or the first key message.
    """
    title = resolve_field(document, "title", FIELD_ALIASES["title"])
    if isinstance(title, str) and title.strip():
        return title.strip()

    candidates = (
        resolve_field(document, "summary", FIELD_ALIASES["summary"]),
        resolve_field(document, "objectives", FIELD_ALIASES["objectives"]),
        resolve_field(document, "keyMessages"),
    )
    for candidate in candidates:
        if isinstance(candidate, list) and candidate:
            candidate = candidate[0]
        if isinstance(candidate, str) and candidate.strip():
            text = candidate.strip()
            words = " ".join(text.split()[:6])
            suffix = "..." if len(words) < len(text) else ""
            return f"Brief: {words}{suffix}"

    return fallback


# =============================================================================
# Request / response bodies
# =============================================================================


class BriefPayload(BaseModel):
    """Request body carrying a brief document."""

    brief: dict[str, Any] = Field(default_factory=dict, description="Brief document")


class BriefMergeRequest(BaseModel):
    """Request body for merging a candidate update into a brief."""

    original: dict[str, Any] | None = Field(None, description="Canonical brief")
    improved: dict[str, Any] | None = Field(None, description="Candidate update")


class BriefMergeResponse(BaseModel):
    merged: dict[str, Any] | None = Field(None, description="Merged brief")


class BriefCompletenessResponse(BaseModel):
    """Completeness of the indispensable fields."""

    is_complete: bool = Field(..., description="True when no indispensable field is poor")
    poor_fields: list[str] = Field(
        default_factory=list, description="Indispensable fields that are missing or thin"
    )


class BriefSaveRequest(BaseModel):
    brief: dict[str, Any] = Field(..., description="Brief document to persist")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Free-form metadata")


class BriefSaveResponse(BaseModel):
    id: UUID = Field(..., description="Stored brief UUID")


class StoredBrief(BaseModel):
    """A persisted brief as returned by storage."""

    id: UUID
    title: str
    brief: dict[str, Any]
    metadata: dict[str, Any] = Field(default_factory=dict)
    is_complete: bool = False
    created_at: str | None = None
    updated_at: str | None = None


class BriefValidation(BaseModel):
    """Minimum-content check of a brief."""

    is_valid: bool = Field(..., description="True when every required field has content")
    missing_fields: list[str] = Field(default_factory=list, description="Required fields without content")
    warnings: list[str] = Field(default_factory=list, description="Recommended fields without content")


class BriefGenerateRequest(BaseModel):
    """Request body for generating a brief from a transcript."""

    transcript: str = Field(..., min_length=1, description="Meeting transcript or strategic notes")


class BriefGenerateResponse(BaseModel):
    brief: dict[str, Any] = Field(..., description="Generated brief, canonical keys")
    title: str = Field(..., description="Display title")
    validation: BriefValidation
    completeness: BriefCompletenessResponse
