"""Brief fixtures for deterministic scoring and refinement tests."""

import copy
from uuid import UUID

BRIEF_ID = UUID("97e0dc34-feb9-48ca-a3a3-ba104d9e8203")

# Passes every criteria check and has no poor indispensable field
RICH_BRIEF = {
    "title": "Brand X Awareness Campaign - Q1 2025",
    "summary": (
        "Launch a digital awareness campaign to increase brand recognition by 25% among "
        "urban millennials, using emotional social content during Q1 2025 on Instagram and TikTok."
    ),
    "brandPositioning": (
        "Brand X is the only premium healthy drink made for young urban professionals "
        "who value authenticity."
    ),
    "objectives": [
        "Increase brand awareness from 15% to 40% by the end of Q1 2025",
        "Generate 10,000 qualified leads in 3 months",
    ],
    "problemStatement": (
        "The healthy drinks market is saturated and consumers see little difference between "
        "brands, so our new brand has no place in their minds."
    ),
    "targetAudience": {
        "primary": "Urban millennials aged 25-35 with mid-high income",
        "psychographics": "They value sustainability and authenticity",
        "mediaHabits": "Instagram and TikTok every day",
    },
    "successMetrics": {
        "primary": ["Reach 500K unique people", "CTR above 2.5%"],
        "measurementFramework": "Weekly reports with a real-time dashboard",
    },
    "requirements": ["Brand guidelines approved", "Legal review of claims"],
    "keyMessages": ["Real taste, real health.", "Natural energy for your day."],
    "creativeStrategy": {
        "bigIdea": "Your style, your planet: every purchase is a vote for the future",
        "toneAndManner": "Inspiring but approachable",
    },
    "timeline": "Teaser: 2 weeks. Launch: 1 month. Sustain: 3 months.",
    "channelsAndTactics": {
        "recommendedMix": [
            {
                "channel": "Instagram",
                "rationale": "High engagement with urban millennials",
                "allocation": "40% of budget",
            },
            {
                "channel": "TikTok",
                "rationale": "Authentic short video content",
                "allocation": "30% of budget",
            },
        ]
    },
    "budgetConsiderations": {
        "estimatedRange": "$50,000 - $75,000",
        "keyInvestments": ["40% paid media", "30% content production"],
    },
    "riskAnalysis": {
        "risks": ["Low event turnout", "Price perceived as high"],
        "mitigations": ["Reminder campaigns", "Launch promotions"],
    },
    "dependencies": ["Product stock available", "Agency onboarding"],
    "assumptions": ["Budget approved in January", "Retail partners on board"],
    "outOfScope": ["Television advertising", "International markets"],
    "campaignPhases": [
        {"phase": "Teaser", "deliverables": ["Short social videos"], "duration": "2 weeks"},
        {"phase": "Launch", "deliverables": ["Launch event", "Paid ads"], "duration": "1 month"},
    ],
}


def rich_brief(**overrides):
    """Deep copy of RICH_BRIEF with fields replaced (None removes the field)."""
    brief = copy.deepcopy(RICH_BRIEF)
    for key, value in overrides.items():
        if value is None:
            brief.pop(key, None)
        else:
            brief[key] = value
    return brief


def proposal_payload(next_question="What is your budget?", **document):
    """Collaborator response dict as the model would return it."""
    return {"nextQuestion": next_question, "updatedDocument": document}
