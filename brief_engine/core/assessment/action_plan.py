"""Action plan generation.

Turns below-threshold health checks into an ordered plan: Fundamentals for
critical sections, Optimization for improvable ones, and a Final Polish phase
that is always present.
"""

from __future__ import annotations

from typing import Mapping

from brief_engine.core.bands import CRITICAL_BANDS, IMPROVABLE_BANDS
from brief_engine.core.criteria import SectionCriteria, load_criteria_catalog
from brief_engine.core.rule_engine import format_example
from brief_engine.core.schemas_analysis import (
    ActionPhase,
    ActionPlan,
    DetailedTask,
    Difficulty,
    HealthCheck,
    TaskResource,
)

MIN_PHASE_MINUTES = 10
MAX_PHASE_MINUTES = 120
POINTS_PER_WEAK_SECTION = 8

# Minutes per task, per phase
FUNDAMENTALS_TASK_MINUTES = 20
OPTIMIZATION_TASK_MINUTES = 10
POLISH_TASK_MINUTES = 10


def format_minutes(minutes: int) -> str:
    if minutes < 60:
        return f"{minutes} minutes"
    hours, rest = divmod(minutes, 60)
    if rest == 0:
        return f"{hours} h"
    return f"{hours} h {rest} min"


def _phase_minutes(task_count: int, minutes_per_task: int) -> int:
    return max(MIN_PHASE_MINUTES, min(MAX_PHASE_MINUTES, task_count * minutes_per_task))


def _display_name(check: HealthCheck, catalog: Mapping[str, SectionCriteria]) -> str:
    section = catalog.get(check.section)
    return section.display_name if section else check.section


def _section_task(
    check: HealthCheck,
    catalog: Mapping[str, SectionCriteria],
    verb: str,
) -> DetailedTask:
    name = _display_name(check, catalog)
    section = catalog.get(check.section)
    example = format_example(section.good_example) if section else None
    checklist = [insight.title for insight in check.failed_insights]

    resources = []
    if example:
        resources.append(
            TaskResource(
                type="example",
                title=f"Good {name} example",
                description=example,
            )
        )
    if checklist:
        resources.append(
            TaskResource(
                type="checklist",
                title=f"{name.capitalize()} checklist",
                description="; ".join(checklist),
            )
        )

    return DetailedTask(
        id=f"{verb.lower()}_{check.section}",
        title=f"{verb} your {name}",
        description=check.explanation,
        section=check.section,
        example=example,
        checklist_items=checklist,
        resources=resources,
        success_criteria=[f"Every {name} check passes", "A colleague understands it without context"],
    )


def _polish_tasks() -> list[DetailedTask]:
    return [
        DetailedTask(
            id="polish_consistency",
            title="Check consistency across sections",
            description="Make sure objectives, messages, channels and metrics tell the same story.",
            checklist_items=[
                "Every objective has at least one success metric",
                "Key messages speak to the defined audience",
                "Channels match where the audience actually is",
                "Timeline and budget support the planned phases",
            ],
            resources=[
                TaskResource(
                    type="checklist",
                    title="Consistency review",
                    description="Read the brief top to bottom looking for contradictions",
                )
            ],
            success_criteria=["No section contradicts another"],
        ),
        DetailedTask(
            id="polish_presentation",
            title="Prepare the brief for presentation",
            description="Tighten wording and check that a newcomer can act on the brief alone.",
            checklist_items=[
                "Remove jargon and vague words",
                "Check spelling and formatting",
                "Confirm the title and summary reflect the final content",
            ],
            resources=[
                TaskResource(
                    type="guide",
                    title="Presentation guide",
                    description="Short sentences, concrete numbers and one idea per paragraph",
                )
            ],
            success_criteria=["The brief can be shared without further explanation"],
        ),
    ]


def generate_action_plan(
    health_checks: list[HealthCheck],
    aggregate_percentage: float,
    catalog: Mapping[str, SectionCriteria] | None = None,
) -> ActionPlan:
    """
    Build the ordered action plan for a brief.

    Args:
        health_checks: Evaluated sections
        aggregate_percentage: Aggregate score 0-100
        catalog: Criteria catalog used for names and examples

    Returns:
        ActionPlan whose last phase is always Final Polish
    """
    catalog = catalog if catalog is not None else load_criteria_catalog()

    critical = [c for c in health_checks if c.verbal_score in CRITICAL_BANDS]
    improvable = [c for c in health_checks if c.verbal_score in IMPROVABLE_BANDS]

    phases: list[ActionPhase] = []

    if critical:
        tasks = [_section_task(c, catalog, "Define") for c in critical]
        minutes = _phase_minutes(len(tasks), FUNDAMENTALS_TASK_MINUTES)
        phases.append(
            ActionPhase(
                id="fundamentals",
                title="Fundamentals",
                description="Build the sections the brief cannot work without.",
                priority="high",
                estimated_minutes=minutes,
                estimated_time=format_minutes(minutes),
                difficulty="moderate" if len(tasks) <= 2 else "complex",
                expected_impact="Turns the brief into a usable base for the team",
                tasks=tasks,
                tips=[
                    "Start with the audience: every other section depends on it",
                    "Write rough first and refine later",
                ],
            )
        )

    if improvable:
        tasks = [_section_task(c, catalog, "Strengthen") for c in improvable]
        minutes = _phase_minutes(len(tasks), OPTIMIZATION_TASK_MINUTES)
        phases.append(
            ActionPhase(
                id="optimization",
                title="Optimization",
                description="Sharpen sections that have a base but miss key criteria.",
                priority="medium",
                estimated_minutes=minutes,
                estimated_time=format_minutes(minutes),
                difficulty="easy" if len(tasks) <= 3 else "moderate",
                expected_impact="Makes the brief specific enough to brief creatives",
                prerequisites=["Fundamentals"] if critical else [],
                tasks=tasks,
                tips=["Add numbers, dates and names wherever you can"],
            )
        )

    polish = _polish_tasks()
    minutes = _phase_minutes(len(polish), POLISH_TASK_MINUTES)
    phases.append(
        ActionPhase(
            id="final_polish",
            title="Final Polish",
            description="Review the brief as a whole before sharing it.",
            priority="low",
            estimated_minutes=minutes,
            estimated_time=format_minutes(minutes),
            difficulty="easy",
            expected_impact="A coherent brief that is ready to present",
            prerequisites=[p.title for p in phases],
            tasks=polish,
            tips=["Read it aloud once: unclear sentences stand out"],
        )
    )

    total_minutes = sum(p.estimated_minutes for p in phases)
    weak_count = len(critical) + len(improvable)
    headroom = max(0.0, 100.0 - float(aggregate_percentage))
    improvement = float(min(headroom, weak_count * POINTS_PER_WEAK_SECTION))

    difficulty: Difficulty
    if not critical:
        difficulty = "easy"
    elif len(critical) <= 2:
        difficulty = "moderate"
    else:
        difficulty = "complex"

    if weak_count:
        summary = (
            f"{weak_count} section(s) need attention: "
            f"{len(critical)} critical and {len(improvable)} to improve."
        )
    else:
        summary = "All sections meet their criteria. A final review is all that is left."

    return ActionPlan(
        summary=summary,
        estimated_minutes_total=total_minutes,
        estimated_time_total=format_minutes(total_minutes),
        difficulty=difficulty,
        expected_improvement_points=round(improvement, 1),
        expected_improvement=f"+{improvement:.0f} points",
        phases=phases,
    )
