"""Criteria rule engine.

Evaluates brief sections against the criteria catalog. Pure, synchronous and
deterministic: reads a snapshot of the document and builds new HealthCheck
values, never touching the input.
"""

from __future__ import annotations

import json
from typing import Any, Mapping

from brief_engine.core.bands import (
    BAND_ENCOURAGEMENT,
    BAND_LABELS,
    IMPROVABLE_BANDS,
    TOP_BANDS,
    map_score_to_band,
)
from brief_engine.core.criteria import SectionCriteria, load_criteria_catalog
from brief_engine.core.logging import get_logger
from brief_engine.core.schemas_analysis import (
    HealthCheck,
    ImpactLevel,
    Insight,
    InsightExamples,
    QuickWin,
    SectionStatus,
    VerbalBand,
)
from brief_engine.core.schemas_brief import FieldShape, detect_shape, resolve_field

logger = get_logger(__name__)

NOT_DEFINED = "Not defined"
MAX_CURRENT_CHARS = 200

QUICK_WIN_TIME = "5-10 minutes"


def format_example(example: Any) -> str:
    if isinstance(example, list):
        return format_example(example[0]) if example else ""
    if isinstance(example, dict):
        return json.dumps(example, indent=2, ensure_ascii=False)
    return str(example)


def _format_current(value: Any) -> str:
    if detect_shape(value) is FieldShape.EMPTY:
        return NOT_DEFINED
    if isinstance(value, str):
        text = value
    else:
        try:
            text = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError):
            text = str(value)
    if len(text) > MAX_CURRENT_CHARS:
        return text[:MAX_CURRENT_CHARS] + "..."
    return text


def _status_for(band: VerbalBand, missing: bool) -> SectionStatus:
    if missing:
        return "missing"
    if band in TOP_BANDS:
        return "excellent"
    if band in (VerbalBand.GOOD, VerbalBand.FAIR):
        return "good"
    if band is VerbalBand.IMPROVABLE:
        return "fair"
    return "deficient"


class CriteriaRuleEngine:
    """Scores brief sections against an injected criteria catalog."""

    def __init__(
        self,
        catalog: Mapping[str, SectionCriteria] | None = None,
        points_per_check: int = 25,
    ):
        self.catalog = catalog if catalog is not None else load_criteria_catalog()
        self.points_per_check = points_per_check

    def _run_check(self, section: SectionCriteria, index: int, value: Any) -> bool:
        try:
            return bool(section.checks[index].test(value))
        except Exception as e:
            logger.debug(
                f"Check {section.key}_{index} raised, counting as failed: {e}",
                extra={"section": section.key, "check_index": index},
            )
            return False

    def evaluate_section(self, section_key: str, value: Any) -> HealthCheck:
        """
        Evaluate one section value.

        Args:
            section_key: Catalog key of the section
            value: Section value already read from the document

        Returns:
            HealthCheck with one insight per check

        Raises:
            KeyError: If the section is not in the catalog
        """
        section = self.catalog[section_key]
        missing = detect_shape(value) is FieldShape.EMPTY

        results = [self._run_check(section, i, value) for i in range(len(section.checks))]
        earned = sum(self.points_per_check for passed in results if passed)
        max_points = len(section.checks) * self.points_per_check
        percentage = earned / max_points * 100 if max_points else 0.0
        band = map_score_to_band(percentage)

        good_example = format_example(section.good_example)
        current = _format_current(value)

        insights = []
        for index, (check, passed) in enumerate(zip(section.checks, results)):
            if index == 0:
                impact = ImpactLevel.CRITICAL if missing else ImpactLevel.HIGH
            else:
                impact = ImpactLevel.MEDIUM
            insights.append(
                Insight(
                    id=f"{section.key}_{index}",
                    title=check.action,
                    explanation=check.rationale,
                    impact=impact,
                    passed=passed,
                    examples=InsightExamples(good=good_example, current=current),
                    why_it_matters=check.rationale,
                    quick_win=None
                    if passed
                    else QuickWin(
                        action=f"Review and improve your {section.display_name}: {check.action.lower()}",
                        time_estimate=QUICK_WIN_TIME,
                        difficulty="easy",
                    ),
                )
            )

        if missing:
            explanation = f"Your {section.display_name} is not defined yet."
        elif band in TOP_BANDS:
            explanation = f"Your {section.display_name} meets all key criteria."
        elif band in IMPROVABLE_BANDS:
            explanation = f"Your {section.display_name} covers the basics but misses some criteria."
        else:
            explanation = f"Your {section.display_name} is missing most key elements."

        return HealthCheck(
            section=section.key,
            category=section.category,
            icon=section.icon,
            verbal_score=band,
            earned_points=earned,
            max_points=max_points,
            status=_status_for(band, missing),
            headline=f"{BAND_LABELS[band]}: {BAND_ENCOURAGEMENT[band]}",
            explanation=explanation,
            insights=insights,
            learning_tip=None if band in TOP_BANDS else section.learning_tip,
        )

    def evaluate_document(self, document: dict[str, Any] | None) -> list[HealthCheck]:
        """Evaluate every catalog section, in catalog order."""
        checks = []
        for key, section in self.catalog.items():
            value = resolve_field(document, key, section.aliases)
            checks.append(self.evaluate_section(key, value))
        return checks
