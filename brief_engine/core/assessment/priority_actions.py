"""Priority action selection.

Each problem section contributes a general action from the library and a
category action for its band group. Aggregate-level actions are added for
very strong or very weak briefs. The result is ranked, de-duplicated and
truncated, the same way readiness recommendations are selected.
"""

from __future__ import annotations

from typing import Mapping, NamedTuple

from brief_engine.core.bands import CRITICAL_BANDS, TOP_BANDS
from brief_engine.core.criteria import SectionCriteria, load_criteria_catalog
from brief_engine.core.schemas_analysis import HealthCheck, PriorityAction

ADVANCED_THRESHOLD = 75
FUNDAMENTAL_THRESHOLD = 40

KIND_ORDER = {"fundamental": 0, "general": 1, "category": 2, "advanced": 3}


class ActionTemplate(NamedTuple):
    title: str
    why: str
    how: str
    impact: str
    time_to_complete: str


ACTION_LIBRARY: dict[str, ActionTemplate] = {
    "title": ActionTemplate(
        "Make the title specific",
        "The title is the first thing anyone reads and sets expectations",
        "Combine activity type, brand and timeframe in one line",
        "Instant clarity on scope",
        "2 minutes",
    ),
    "summary": ActionTemplate(
        "Rewrite the executive summary",
        "Decision makers often read only the summary",
        "Answer what, for whom and with what goal in three sentences",
        "Faster approvals",
        "10 minutes",
    ),
    "brandPositioning": ActionTemplate(
        "State the brand positioning",
        "Creatives need to know what the brand stands for before writing a line",
        "Write: for <audience>, <brand> is the <category> that <differentiator>",
        "Consistent creative work",
        "10 minutes",
    ),
    "problemStatement": ActionTemplate(
        "Describe the business challenge",
        "Solving the wrong problem wastes the whole budget",
        "Name the obstacle, its cause and the market context",
        "Focused strategy",
        "10 minutes",
    ),
    "targetAudience": ActionTemplate(
        "Define your target audience",
        "You cannot persuade everyone; messages and channels depend on who you talk to",
        "Describe demographics, motivations and media habits of one primary segment",
        "Relevant messages and channels",
        "15 minutes",
    ),
    "objectives": ActionTemplate(
        "Set SMART objectives",
        "Without measurable objectives success cannot be proven",
        "Give each objective a number and a deadline",
        "Measurable ROI",
        "10 minutes",
    ),
    "keyMessages": ActionTemplate(
        "Sharpen the key messages",
        "Clear messages are the raw material of every creative piece",
        "Keep two to four short messages, one idea each",
        "Memorable communication",
        "10 minutes",
    ),
    "creativeStrategy": ActionTemplate(
        "Write the big idea",
        "The big idea ties all creative pieces together",
        "Summarize the concept in one line and describe the tone",
        "Coherent campaign",
        "15 minutes",
    ),
    "channelsAndTactics": ActionTemplate(
        "Justify the channel mix",
        "Every channel costs money and attention",
        "Pick channels where the audience is and give each a rationale",
        "Better media efficiency",
        "10 minutes",
    ),
    "budgetConsiderations": ActionTemplate(
        "Outline the budget",
        "A budget range prevents proposals that cannot be executed",
        "Give a range and split it by category",
        "Realistic proposals",
        "10 minutes",
    ),
    "successMetrics": ActionTemplate(
        "Define success metrics",
        "Metrics turn opinions about the campaign into facts",
        "Pair every objective with a KPI, a target and a measurement cadence",
        "Real-time optimization",
        "10 minutes",
    ),
    "timeline": ActionTemplate(
        "Draft the timeline",
        "Production, media and approvals need a shared schedule",
        "List the stages with durations or dates",
        "On-time delivery",
        "5 minutes",
    ),
    "riskAnalysis": ActionTemplate(
        "List risks and mitigations",
        "Anticipated risks rarely derail a launch",
        "Name the top risks and the first response to each",
        "Fewer surprises",
        "10 minutes",
    ),
    "campaignPhases": ActionTemplate(
        "Break the campaign into phases",
        "Phases make execution and budget pacing explicit",
        "Give each phase deliverables and a duration",
        "Executable roadmap",
        "15 minutes",
    ),
}

ADVANCED_ACTIONS: tuple[ActionTemplate, ...] = (
    ActionTemplate(
        "Add a competitive benchmark",
        "Knowing what competitors do helps the campaign stand out",
        "Summarize two or three competitor campaigns and how yours differs",
        "Stronger differentiation",
        "20 minutes",
    ),
    ActionTemplate(
        "Plan creative testing",
        "Testing variants early improves results during the flight",
        "Define which messages or formats will be A/B tested and how",
        "Continuous optimization",
        "15 minutes",
    ),
)

FUNDAMENTAL_ACTIONS: tuple[ActionTemplate, ...] = (
    ActionTemplate(
        "Answer the basic questions first",
        "A brief needs what, why, for whom and how much before anything else",
        "Write one line each for goal, audience, message and budget",
        "A usable starting point",
        "10 minutes",
    ),
    ActionTemplate(
        "Start from the audience",
        "Every other section depends on who the campaign is for",
        "Describe one real person in the audience before editing other sections",
        "Relevant decisions downstream",
        "10 minutes",
    ),
)


def _from_template(
    template: ActionTemplate,
    action_id: str,
    priority: int,
    kind: str,
    section: str | None = None,
) -> PriorityAction:
    return PriorityAction(
        id=action_id,
        title=template.title,
        why=template.why,
        how=template.how,
        impact=template.impact,
        time_to_complete=template.time_to_complete,
        priority=priority,
        section=section,
        kind=kind,
    )


def _category_action(check: HealthCheck, section: SectionCriteria | None) -> PriorityAction:
    category = section.category if section else check.section
    name = section.display_name if section else check.section
    if check.verbal_score in CRITICAL_BANDS:
        return PriorityAction(
            id=f"category_{check.section}",
            title=f"Build your {category.lower()} from scratch",
            why=f"{category} is one of the pillars of an actionable brief",
            how=f"Use the good example for the {name} as a template",
            impact="Removes a critical gap",
            time_to_complete="15 minutes",
            priority=2,
            section=check.section,
            kind="category",
        )
    return PriorityAction(
        id=f"category_{check.section}",
        title=f"Sharpen your {category.lower()}",
        why=f"Your {name} has a base but misses some criteria",
        how="Work through the failed checks one by one",
        impact="Moves the section up one band",
        time_to_complete="10 minutes",
        priority=3,
        section=check.section,
        kind="category",
    )


def generate_priority_actions(
    health_checks: list[HealthCheck],
    aggregate_percentage: float,
    limit: int = 6,
    catalog: Mapping[str, SectionCriteria] | None = None,
) -> list[PriorityAction]:
    """
    Select the most impactful actions to improve a brief.

    Selection criteria:
    1. Priority (lower is better)
    2. Kind (fundamental, general, category, advanced)

    Args:
        health_checks: Evaluated sections
        aggregate_percentage: Aggregate score 0-100
        limit: Maximum number to return
        catalog: Criteria catalog used for names and categories

    Returns:
        Ranked, de-duplicated actions
    """
    catalog = catalog if catalog is not None else load_criteria_catalog()
    candidates: list[PriorityAction] = []

    for check in health_checks:
        if check.verbal_score in TOP_BANDS:
            continue
        critical = check.verbal_score in CRITICAL_BANDS
        template = ACTION_LIBRARY.get(check.section)
        if template:
            candidates.append(
                _from_template(
                    template,
                    f"general_{check.section}",
                    priority=1 if critical else 2,
                    kind="general",
                    section=check.section,
                )
            )
        candidates.append(_category_action(check, catalog.get(check.section)))

    if aggregate_percentage >= ADVANCED_THRESHOLD:
        candidates.extend(
            _from_template(t, f"advanced_{i}", priority=4, kind="advanced")
            for i, t in enumerate(ADVANCED_ACTIONS)
        )
    if aggregate_percentage < FUNDAMENTAL_THRESHOLD:
        candidates.extend(
            _from_template(t, f"fundamental_{i}", priority=1, kind="fundamental")
            for i, t in enumerate(FUNDAMENTAL_ACTIONS)
        )

    ranked = sorted(candidates, key=lambda a: (a.priority, KIND_ORDER[a.kind]))

    # Deduplicate similar actions (keep first/highest priority)
    seen_titles: set[str] = set()
    unique: list[PriorityAction] = []
    for action in ranked:
        title_key = " ".join(action.title.lower().split())
        if title_key in seen_titles:
            continue
        seen_titles.add(title_key)
        unique.append(action)
        if len(unique) >= limit:
            break

    return unique
