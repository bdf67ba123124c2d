"""Brief assessment.

Turns rule-engine health checks into the educational analysis shown to users:
overall bands, priority actions and a phased action plan.

Usage:
    from brief_engine.core.assessment import analyze_brief

    analysis = analyze_brief(brief)
    print(f"{analysis.overall_score.value} ({analysis.percentage}%)")
"""

from brief_engine.core.assessment.action_plan import generate_action_plan
from brief_engine.core.assessment.analysis import analyze_brief
from brief_engine.core.assessment.priority_actions import generate_priority_actions

__all__ = [
    "analyze_brief",
    "generate_action_plan",
    "generate_priority_actions",
]
