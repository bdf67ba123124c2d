"""Pydantic models for brief quality analysis."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field

Difficulty = Literal["easy", "moderate", "complex"]
Priority = Literal["high", "medium", "low"]


# =============================================================================
# Verbal scales
# =============================================================================


class VerbalBand(str, Enum):
    """Per-section verbal score, best first."""

    EXCELLENT = "excellent"
    VERY_GOOD = "very_good"
    GOOD = "good"
    FAIR = "fair"
    IMPROVABLE = "improvable"
    NEEDS_WORK = "needs_work"
    INCOMPLETE = "incomplete"


class OverallAssessment(str, Enum):
    VERY_COMPLETE = "very_complete"
    WELL_STRUCTURED = "well_structured"
    FUNCTIONAL = "functional"
    BASIC = "basic"
    INCOMPLETE = "incomplete"


class ReadinessLevel(str, Enum):
    READY_TO_PRESENT = "ready_to_present"
    ALMOST_READY = "almost_ready"
    NEEDS_POLISH = "needs_polish"
    REQUIRES_DEVELOPMENT = "requires_development"


class ImpactLevel(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


SectionStatus = Literal["excellent", "good", "fair", "deficient", "missing"]


# =============================================================================
# Health checks
# =============================================================================


class QuickWin(BaseModel):
    action: str = Field(..., description="What to do")
    time_estimate: str = Field(..., description="e.g. '5-10 minutes'")
    difficulty: Difficulty = Field(..., description="How hard the fix is")


class InsightExamples(BaseModel):
    good: str = Field(..., description="Canonical good example")
    current: str = Field(..., description="What the brief currently says")


class Insight(BaseModel):
    """Outcome of a single criteria check."""

    id: str = Field(..., description="<section>_<check index>")
    title: str
    explanation: str = Field(..., description="Rationale behind the check")
    impact: ImpactLevel
    passed: bool
    examples: InsightExamples
    why_it_matters: str
    quick_win: QuickWin | None = None


class HealthCheck(BaseModel):
    """Evaluation of one brief section."""

    section: str = Field(..., description="Catalog section key")
    category: str
    icon: str
    verbal_score: VerbalBand
    earned_points: int = Field(..., ge=0)
    max_points: int = Field(..., ge=0)
    status: SectionStatus
    headline: str
    explanation: str
    insights: list[Insight] = Field(default_factory=list)
    learning_tip: str | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def percentage(self) -> float:
        """Share of points earned, 0-100. Derived, never stored."""
        if self.max_points <= 0:
            return 0.0
        return round(min(100.0, max(0.0, self.earned_points / self.max_points * 100)), 1)

    @property
    def failed_insights(self) -> list[Insight]:
        return [i for i in self.insights if not i.passed]


# =============================================================================
# Action plan
# =============================================================================


class TaskResource(BaseModel):
    type: Literal["template", "example", "guide", "checklist"]
    title: str
    description: str


class DetailedTask(BaseModel):
    id: str
    title: str
    description: str
    section: str | None = None
    example: str | None = None
    checklist_items: list[str] = Field(default_factory=list)
    resources: list[TaskResource] = Field(default_factory=list)
    success_criteria: list[str] = Field(default_factory=list)


class ActionPhase(BaseModel):
    id: Literal["fundamentals", "optimization", "final_polish"]
    title: str
    description: str
    priority: Priority
    estimated_minutes: int = Field(..., ge=0)
    estimated_time: str
    difficulty: Difficulty
    expected_impact: str
    prerequisites: list[str] = Field(default_factory=list)
    tasks: list[DetailedTask] = Field(..., min_length=1)
    tips: list[str] = Field(default_factory=list)


class ActionPlan(BaseModel):
    summary: str
    estimated_minutes_total: int = Field(..., ge=0)
    estimated_time_total: str
    difficulty: Difficulty
    expected_improvement_points: float = Field(..., ge=0, le=100)
    expected_improvement: str
    phases: list[ActionPhase] = Field(..., min_length=1)


class PriorityAction(BaseModel):
    """An actionable recommendation to improve the brief."""

    id: str
    title: str
    why: str
    how: str
    impact: str
    time_to_complete: str
    priority: int = Field(..., ge=1, description="Priority (1 = highest)")
    section: str | None = None
    kind: Literal["general", "category", "advanced", "fundamental"] = "general"


class ProgressIndicators(BaseModel):
    completed_well: list[str] = Field(default_factory=list)
    improvement_areas: list[str] = Field(default_factory=list)
    next_milestone: str


class EducationalAnalysis(BaseModel):
    """Complete deterministic assessment of a brief."""

    overall_assessment: OverallAssessment
    overall_score: VerbalBand
    readiness_level: ReadinessLevel
    earned_points: int = Field(default=0, ge=0)
    max_points: int = Field(default=0, ge=0)

    health_checks: list[HealthCheck] = Field(default_factory=list)

    did_you_know: list[str] = Field(default_factory=list)
    best_practices: list[str] = Field(default_factory=list)
    common_mistakes: list[str] = Field(default_factory=list)

    priority_actions: list[PriorityAction] = Field(default_factory=list)
    progress_indicators: ProgressIndicators
    action_plan: ActionPlan

    error: str | None = Field(None, description="Set only when analysis was downgraded")
    computed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @computed_field  # type: ignore[prop-decorator]
    @property
    def percentage(self) -> float:
        if self.max_points <= 0:
            return 0.0
        return round(self.earned_points / self.max_points * 100, 1)


# =============================================================================
# AI-enriched quality report
# =============================================================================


class SectionQuality(BaseModel):
    score: float = Field(..., ge=0, le=100)
    status: Literal["excellent", "good", "fair", "poor", "missing"]
    issues: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)


class BriefQualityReport(BaseModel):
    """Quality report from the analysis-enrichment collaborator (or its local fallback)."""

    overall_score: float = Field(..., ge=0, le=100, alias="overallScore")
    completeness_score: float = Field(..., ge=0, le=100, alias="completenessScore")
    quality_score: float = Field(..., ge=0, le=100, alias="qualityScore")
    professionalism_score: float = Field(..., ge=0, le=100, alias="professionalismScore")
    readiness_score: float = Field(..., ge=0, le=100, alias="readinessScore")

    strengths: list[str]
    weaknesses: list[str]
    critical_issues: list[str] = Field(..., alias="criticalIssues")
    recommendations: list[str]

    section_analysis: dict[str, SectionQuality] = Field(..., alias="sectionAnalysis")

    is_ready_for_production: bool = Field(False, alias="isReadyForProduction")
    estimated_improvement_time: str = Field("", alias="estimatedImprovementTime")

    source: Literal["ai", "local"] = "ai"

    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)
