"""Verbal score bands.

All thresholds are fixed and monotonic: a higher percentage never maps to a
worse band.
"""

from __future__ import annotations

from brief_engine.core.schemas_analysis import OverallAssessment, ReadinessLevel, VerbalBand

# (minimum percentage, band), best first
BAND_THRESHOLDS: tuple[tuple[float, VerbalBand], ...] = (
    (90, VerbalBand.EXCELLENT),
    (80, VerbalBand.VERY_GOOD),
    (70, VerbalBand.GOOD),
    (60, VerbalBand.FAIR),
    (40, VerbalBand.IMPROVABLE),
    (20, VerbalBand.NEEDS_WORK),
)

OVERALL_THRESHOLDS: tuple[tuple[float, OverallAssessment], ...] = (
    (85, OverallAssessment.VERY_COMPLETE),
    (70, OverallAssessment.WELL_STRUCTURED),
    (55, OverallAssessment.FUNCTIONAL),
    (35, OverallAssessment.BASIC),
)

READINESS_THRESHOLDS: tuple[tuple[float, ReadinessLevel], ...] = (
    (85, ReadinessLevel.READY_TO_PRESENT),
    (70, ReadinessLevel.ALMOST_READY),
    (50, ReadinessLevel.NEEDS_POLISH),
)

MILESTONES: tuple[tuple[float, str], ...] = (
    (90, "Your brief is ready to present. Share it with the creative team"),
    (75, "Polish the remaining details to reach presentation level"),
    (60, "Strengthen the weaker sections to get a well-structured brief"),
    (40, "Complete the core sections to get a functional brief"),
)
FIRST_MILESTONE = "Define the fundamentals: audience, objectives and key messages"

# Worst first, so rank grows with quality
_BAND_ORDER: tuple[VerbalBand, ...] = (
    VerbalBand.INCOMPLETE,
    VerbalBand.NEEDS_WORK,
    VerbalBand.IMPROVABLE,
    VerbalBand.FAIR,
    VerbalBand.GOOD,
    VerbalBand.VERY_GOOD,
    VerbalBand.EXCELLENT,
)

CRITICAL_BANDS = frozenset({VerbalBand.INCOMPLETE, VerbalBand.NEEDS_WORK})
IMPROVABLE_BANDS = frozenset({VerbalBand.IMPROVABLE, VerbalBand.FAIR, VerbalBand.GOOD})
TOP_BANDS = frozenset({VerbalBand.EXCELLENT, VerbalBand.VERY_GOOD})

BAND_LABELS: dict[VerbalBand, str] = {
    VerbalBand.EXCELLENT: "Excellent",
    VerbalBand.VERY_GOOD: "Very good",
    VerbalBand.GOOD: "Good",
    VerbalBand.FAIR: "Fair",
    VerbalBand.IMPROVABLE: "Improvable",
    VerbalBand.NEEDS_WORK: "Needs work",
    VerbalBand.INCOMPLETE: "Incomplete",
}

BAND_ENCOURAGEMENT: dict[VerbalBand, str] = {
    VerbalBand.EXCELLENT: "Outstanding work! This section is ready for the creative team.",
    VerbalBand.VERY_GOOD: "Great job. A couple of details would make it perfect.",
    VerbalBand.GOOD: "Solid base. A few improvements will make it stand out.",
    VerbalBand.FAIR: "You are on the right track. Some key elements are still missing.",
    VerbalBand.IMPROVABLE: "There is a base to build on. Focus on the missing basics.",
    VerbalBand.NEEDS_WORK: "This section needs more work before it can guide anyone.",
    VerbalBand.INCOMPLETE: "This section is missing. Start here to unlock the brief.",
}


def _clamp(percentage: float) -> float:
    return max(0.0, min(100.0, float(percentage)))


def map_score_to_band(percentage: float) -> VerbalBand:
    """Map a 0-100 percentage to its verbal band. Out-of-range input is clamped."""
    value = _clamp(percentage)
    for threshold, band in BAND_THRESHOLDS:
        if value >= threshold:
            return band
    return VerbalBand.INCOMPLETE


def band_rank(band: VerbalBand) -> int:
    """Position of a band in the total order (0 = incomplete, 6 = excellent)."""
    return _BAND_ORDER.index(band)


def overall_assessment(percentage: float) -> OverallAssessment:
    value = _clamp(percentage)
    for threshold, assessment in OVERALL_THRESHOLDS:
        if value >= threshold:
            return assessment
    return OverallAssessment.INCOMPLETE


def readiness_level(percentage: float) -> ReadinessLevel:
    value = _clamp(percentage)
    for threshold, level in READINESS_THRESHOLDS:
        if value >= threshold:
            return level
    return ReadinessLevel.REQUIRES_DEVELOPMENT


def next_milestone(percentage: float) -> str:
    """Progress text describing the next thing to aim for."""
    value = _clamp(percentage)
    for threshold, text in MILESTONES:
        if value >= threshold:
            return text
    return FIRST_MILESTONE
