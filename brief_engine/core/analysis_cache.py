"""Coalescing brief analyzer.

Refinement rounds trigger re-analysis after every merge. The analysis is only
recomputed when the document actually changed since the last run.
"""

from __future__ import annotations

import copy
from typing import Any

from brief_engine.core.assessment import analyze_brief
from brief_engine.core.rule_engine import CriteriaRuleEngine
from brief_engine.core.schemas_analysis import EducationalAnalysis

_UNSET = object()


class BriefAnalyzer:
    """Caches the last analysis, keyed by a structural snapshot of the document."""

    def __init__(self, engine: CriteriaRuleEngine | None = None):
        self.engine = engine or CriteriaRuleEngine()
        self._snapshot: Any = _UNSET
        self._result: EducationalAnalysis | None = None
        self.run_count = 0

    @property
    def latest(self) -> EducationalAnalysis | None:
        return self._result

    def analyze(self, document: dict[str, Any] | None) -> EducationalAnalysis:
        """Return the cached analysis if ``document`` equals the last snapshot."""
        if self._result is not None and self._snapshot is not _UNSET and document == self._snapshot:
            return self._result

        self._snapshot = copy.deepcopy(document)
        self._result = analyze_brief(self._snapshot, self.engine)
        self.run_count += 1
        return self._result

    def invalidate(self) -> None:
        self._snapshot = _UNSET
        self._result = None
