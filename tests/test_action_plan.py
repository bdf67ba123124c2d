"""Tests for action plan generation."""

from brief_engine.core.assessment.action_plan import (
    MAX_PHASE_MINUTES,
    MIN_PHASE_MINUTES,
    format_minutes,
    generate_action_plan,
)
from brief_engine.core.rule_engine import CriteriaRuleEngine
from tests.fixtures_briefs import RICH_BRIEF, rich_brief


def _plan_for(document):
    checks = CriteriaRuleEngine().evaluate_document(document)
    earned = sum(c.earned_points for c in checks)
    total = sum(c.max_points for c in checks)
    return checks, generate_action_plan(checks, earned / total * 100)


class TestGenerateActionPlan:
    def test_final_polish_always_last(self):
        for document in ({}, RICH_BRIEF, rich_brief(targetAudience=None)):
            _, plan = _plan_for(document)
            assert plan.phases[-1].id == "final_polish"

    def test_no_checks_gives_only_final_polish(self):
        plan = generate_action_plan([], 0.0)

        assert [p.id for p in plan.phases] == ["final_polish"]
        assert plan.expected_improvement_points == 0
        assert plan.difficulty == "easy"

    def test_rich_brief_only_needs_polish(self):
        _, plan = _plan_for(RICH_BRIEF)
        assert [p.id for p in plan.phases] == ["final_polish"]

    def test_missing_audience_gets_fundamentals_task(self):
        _, plan = _plan_for(rich_brief(targetAudience=None))

        fundamentals = plan.phases[0]
        assert fundamentals.id == "fundamentals"
        assert fundamentals.priority == "high"
        task = next(t for t in fundamentals.tasks if t.section == "targetAudience")
        assert "audience" in task.title.lower()
        assert task.checklist_items
        assert plan.difficulty == "moderate"

    def test_phases_in_fixed_order_and_never_empty(self):
        brief = rich_brief(
            targetAudience=None,
            summary="A short summary",
            timeline="Teaser and launch",
        )
        _, plan = _plan_for(brief)

        ids = [p.id for p in plan.phases]
        assert ids == ["fundamentals", "optimization", "final_polish"]
        assert all(p.tasks for p in plan.phases)

    def test_empty_brief_is_complex_and_capped(self):
        checks, plan = _plan_for({})

        fundamentals = plan.phases[0]
        assert plan.difficulty == "complex"
        assert fundamentals.estimated_minutes == MAX_PHASE_MINUTES
        assert len(fundamentals.tasks) == len(checks)
        # min(100 - 0, 14 * 8)
        assert plan.expected_improvement_points == 100
        assert plan.estimated_minutes_total == sum(p.estimated_minutes for p in plan.phases)

    def test_phase_minutes_bounds(self):
        _, plan = _plan_for(RICH_BRIEF)
        for phase in plan.phases:
            assert MIN_PHASE_MINUTES <= phase.estimated_minutes <= MAX_PHASE_MINUTES


def test_format_minutes():
    assert format_minutes(45) == "45 minutes"
    assert format_minutes(60) == "1 h"
    assert format_minutes(150) == "2 h 30 min"
