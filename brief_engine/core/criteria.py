"""Criteria catalog for brief sections.

Declarative data: each trackable section has a category, an icon, a canonical
good example and an ordered list of checks. A check is a pure predicate over
the section value plus the rationale shown when it fails. Evaluation lives in
``rule_engine``; this module only describes what good looks like.

Keyword checks accept English and Spanish vocabulary because briefs are
dictated in either language.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Callable, Mapping

from brief_engine.core.schemas_brief import FIELD_ALIASES

Predicate = Callable[[Any], bool]


@dataclass(frozen=True)
class CriteriaCheck:
    """A single deterministic check over a section value."""

    test: Predicate
    rationale: str
    action: str


@dataclass(frozen=True)
class SectionCriteria:
    """Catalog entry for one brief section."""

    key: str
    display_name: str
    category: str
    icon: str
    good_example: Any
    learning_tip: str
    checks: tuple[CriteriaCheck, ...]
    aliases: tuple[str, ...] = field(default_factory=tuple)


# =============================================================================
# Predicate helpers
# =============================================================================


def _as_text(value: Any) -> str:
    """Flatten any section value into lowercase text for keyword checks."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value.lower()
    try:
        return json.dumps(value, ensure_ascii=False).lower()
    except (TypeError, ValueError):
        return str(value).lower()


def _mentions(pattern: str) -> Predicate:
    regex = re.compile(pattern, re.IGNORECASE)
    return lambda value: bool(value) and bool(regex.search(_as_text(value)))


def _min_length(chars: int) -> Predicate:
    return lambda value: isinstance(value, str) and len(value.strip()) > chars


def _min_items(count: int) -> Predicate:
    return lambda value: isinstance(value, list) and len(value) >= count


def _records(value: Any, *keys: str) -> list[dict]:
    """Records found directly in a list value or under any of ``keys`` of a dict."""
    if isinstance(value, list):
        return [item for item in value if isinstance(item, dict)]
    if isinstance(value, dict):
        for key in keys:
            nested = value.get(key)
            if isinstance(nested, list):
                return [item for item in nested if isinstance(item, dict)]
    return []


def _has_any_key(*keys: str) -> Predicate:
    return lambda value: isinstance(value, dict) and any(value.get(k) for k in keys)


TIMEFRAME = (
    r"\b(q[1-4]|20\d\d|h[12]|january|february|march|april|may|june|july|august|september|"
    r"october|november|december|spring|summer|autumn|fall|winter|holiday|christmas|"
    r"enero|febrero|marzo|abril|mayo|junio|julio|agosto|septiembre|octubre|noviembre|"
    r"diciembre|navidad|verano|invierno)\b"
)
DURATION = (
    r"\b\d+\s*(days?|weeks?|months?|quarters?|years?|d[ií]as?|semanas?|mes(es)?|años?)\b"
    r"|\bq[1-4]\b"
)
QUANTIFIED = (
    r"\d+\s*%|\d+\s*(k|m|leads|sales|conversions|registrations|users|ventas|"
    r"conversiones|registros|usuarios)\b|\b(increase|grow|reduce|generate|achieve|"
    r"aumentar|incrementar|reducir|generar|lograr)\b[^.]*\d"
)


# =============================================================================
# Section predicates that need more than a keyword
# =============================================================================


def _audience_defined(value: Any) -> bool:
    if isinstance(value, dict):
        return bool(value.get("primary") or value.get("segment") or value.get("segments"))
    if isinstance(value, list):
        return len(value) > 0
    return isinstance(value, str) and len(value.strip()) >= 5


def _channels_defined(value: Any) -> bool:
    if isinstance(value, list):
        return len(value) > 0
    if isinstance(value, dict):
        return bool(
            value.get("recommendedMix") or value.get("channels") or value.get("components")
        )
    return False


def _channels_justified(value: Any) -> bool:
    channels = _records(value, "recommendedMix", "channels", "components")
    return any(
        ch.get("rationale") or ch.get("strategy") or ch.get("justification") for ch in channels
    )


def _budget_defined(value: Any) -> bool:
    if isinstance(value, str):
        return len(value.strip()) > 0
    return isinstance(value, dict) and bool(
        value.get("estimatedRange") or value.get("total") or value.get("range")
    )


def _metrics_defined(value: Any) -> bool:
    if isinstance(value, list):
        return len(value) > 0
    return isinstance(value, dict) and bool(value.get("primary") or value.get("kpis"))


def _timeline_defined(value: Any) -> bool:
    if isinstance(value, str):
        return len(value.strip()) >= 10
    return bool(value) and isinstance(value, (list, dict))


def _risks_listed(value: Any) -> bool:
    if isinstance(value, list):
        return len(value) > 0
    return isinstance(value, dict) and bool(value.get("risks"))


def _risks_mitigated(value: Any) -> bool:
    if isinstance(value, dict) and value.get("mitigations"):
        return True
    if any(r.get("mitigation") for r in _records(value, "risks")):
        return True
    return bool(re.search(r"\b(mitigat\w*|contingenc\w*|mitigaci[oó]n|plan b)\b", _as_text(value)))


def _phases_have(key_pattern: str) -> Predicate:
    regex = re.compile(key_pattern, re.IGNORECASE)

    def check(value: Any) -> bool:
        phases = _records(value, "phases")
        return bool(phases) and all(
            any(regex.fullmatch(k) and phase[k] for k in phase) for phase in phases
        )

    return check


def _messages_concise(value: Any) -> bool:
    return (
        isinstance(value, list)
        and len(value) > 0
        and all(isinstance(m, str) and 0 < len(m.strip()) <= 120 for m in value)
    )


# =============================================================================
# Catalog
# =============================================================================


def _build_catalog() -> tuple[SectionCriteria, ...]:
    return (
        SectionCriteria(
            key="title",
            display_name="project title",
            category="Clarity & Focus",
            icon="🎯",
            good_example="Brand X Awareness Campaign - Q1 2025",
            learning_tip="Tip: combine activity type + audience + timeframe in the title",
            checks=(
                CriteriaCheck(
                    test=_min_length(5),
                    rationale="A specific title lets everyone involved understand at once what the project is about",
                    action="Write a title longer than a couple of words",
                ),
                CriteriaCheck(
                    test=_mentions(
                        r"\b(campaign|strategy|launch|awareness|activation|relaunch|"
                        r"campa[ñn]a|estrategia|lanzamiento|activaci[oó]n)\b"
                    ),
                    rationale="Naming the type of activity (campaign, launch...) clarifies the scope of the project",
                    action="Name the activity type (campaign, launch, activation)",
                ),
                CriteriaCheck(
                    test=_mentions(TIMEFRAME),
                    rationale="A timeframe in the title avoids confusing this effort with past or future ones",
                    action="Add the quarter, season or year",
                ),
            ),
            aliases=FIELD_ALIASES["title"],
        ),
        SectionCriteria(
            key="summary",
            display_name="executive summary",
            category="Executive Communication",
            icon="📄",
            good_example=(
                "Build a digital awareness campaign to lift brand recognition by 25% among urban "
                "millennials, using emotional social content during Q1 2025."
            ),
            learning_tip="Tip: a good summary answers what we will do, for whom, and what we will achieve",
            checks=(
                CriteriaCheck(
                    test=_min_length(100),
                    rationale="A summary of at least 100 characters can properly explain context and goals",
                    action="Expand the summary to two or three full sentences",
                ),
                CriteriaCheck(
                    test=_mentions(
                        r"\b(objective|goal|increase|generate|achieve|grow|drive|"
                        r"objetivo|meta|aumentar|generar|lograr)\b"
                    ),
                    rationale="Mentioning specific goals in the summary aligns expectations from the start",
                    action="State the main goal inside the summary",
                ),
                CriteriaCheck(
                    test=_mentions(r"\b(for|among|targeting|audience|para|entre|audiencia|p[uú]blico)\b"),
                    rationale="Saying who the work is for keeps every later decision anchored on the audience",
                    action="Mention who the campaign is for",
                ),
            ),
            aliases=FIELD_ALIASES["summary"],
        ),
        SectionCriteria(
            key="brandPositioning",
            display_name="brand positioning",
            category="Brand Positioning",
            icon="🏷️",
            good_example=(
                "Brand X is the premium choice for young people who want wellbeing, taste and "
                "authenticity, aligned with an active and conscious lifestyle."
            ),
            learning_tip="Tip: positioning = for whom + what category + why different",
            checks=(
                CriteriaCheck(
                    test=_min_length(40),
                    rationale="Positioning needs a full statement, not a slogan, to guide creative choices",
                    action="Write a one-sentence positioning statement",
                ),
                CriteriaCheck(
                    test=_mentions(
                        r"\b(unique|only|first|leader|leading|premium|different|unlike|"
                        r"[uú]nic[oa]|l[ií]der|diferente|diferencia\w*)\b"
                    ),
                    rationale="A clear differentiator explains why the audience should pick this brand over others",
                    action="Spell out what makes the brand different",
                ),
            ),
        ),
        SectionCriteria(
            key="problemStatement",
            display_name="business challenge",
            category="Business Challenge",
            icon="🧩",
            good_example=(
                "The healthy drinks market is saturated and consumers see little difference "
                "between options; the brand is new and has no place in the target's mind."
            ),
            learning_tip="Tip: describe the obstacle, not the solution",
            checks=(
                CriteriaCheck(
                    test=_min_length(60),
                    rationale="A well described problem keeps the team solving the right thing",
                    action="Describe the business problem in two sentences",
                ),
                CriteriaCheck(
                    test=_mentions(
                        r"\b(because|due|market|competition|competitors|perception|decline|"
                        r"porque|debido|mercado|competencia|percepci[oó]n)\b"
                    ),
                    rationale="Naming the cause or market context turns a complaint into a solvable challenge",
                    action="Explain the market context or root cause",
                ),
            ),
            aliases=FIELD_ALIASES["problemStatement"],
        ),
        SectionCriteria(
            key="targetAudience",
            display_name="target audience",
            category="Customer Knowledge",
            icon="👥",
            good_example=(
                "Urban millennials (25-35 years old) with mid-high income who value "
                "sustainability and look for authentic brands. They get informed mainly "
                "through Instagram and TikTok."
            ),
            learning_tip="Tip: picture one specific person in your audience and give them a name",
            checks=(
                CriteriaCheck(
                    test=_audience_defined,
                    rationale="Defining who your audience is comes first: you cannot convince everyone of everything",
                    action="Define the primary audience segment",
                ),
                CriteriaCheck(
                    test=_mentions(
                        r"\b(age|aged|years|year-old|young|adults?|seniors?|millennials|gen ?z|"
                        r"edad|a[ñn]os|j[oó]venes|adultos?|mayores)\b|\b\d{2}\s*-\s*\d{2}\b"
                    ),
                    rationale="Demographics such as age help pick the right channels and tone",
                    action="Add age range and other demographics",
                ),
                CriteriaCheck(
                    test=_mentions(
                        r"\b(values?|interests?|habits?|lifestyle|motivations?|psychographics|"
                        r"mediahabits|instagram|tiktok|youtube|valoran|intereses|h[aá]bitos|"
                        r"motivaciones)\b"
                    ),
                    rationale="Motivations and media habits explain how to reach and persuade the audience",
                    action="Describe motivations and media habits",
                ),
            ),
        ),
        SectionCriteria(
            key="objectives",
            display_name="strategic objectives",
            category="Strategic Vision",
            icon="🚀",
            good_example=[
                "Lift brand awareness from 15% to 40% in the target segment",
                "Generate 10,000 qualified leads in Q1",
                "Position the brand as the sustainability leader",
            ],
            learning_tip="Tip: use SMART objectives: specific, measurable, achievable, relevant, time-bound",
            checks=(
                CriteriaCheck(
                    test=_min_items(2),
                    rationale="Several objectives let you judge success from different angles",
                    action="List at least two objectives",
                ),
                CriteriaCheck(
                    test=_mentions(QUANTIFIED),
                    rationale="Quantified objectives (numbers, percentages) make the real ROI measurable",
                    action="Put a number on each objective",
                ),
                CriteriaCheck(
                    test=_mentions(TIMEFRAME + "|" + DURATION),
                    rationale="Time-bound objectives say when success will be judged",
                    action="Attach a deadline to the objectives",
                ),
            ),
            aliases=FIELD_ALIASES["objectives"],
        ),
        SectionCriteria(
            key="keyMessages",
            display_name="key messages",
            category="Messaging",
            icon="💬",
            good_example=["Real taste, real health.", "Natural energy for your day."],
            learning_tip="Tip: one idea per message, short enough to fit on a billboard",
            checks=(
                CriteriaCheck(
                    test=_min_items(2),
                    rationale="A small set of messages gives creatives room without diluting the story",
                    action="Write two to four key messages",
                ),
                CriteriaCheck(
                    test=_messages_concise,
                    rationale="Short messages are easier to remember and repeat across channels",
                    action="Trim every message below 120 characters",
                ),
            ),
        ),
        SectionCriteria(
            key="creativeStrategy",
            display_name="creative strategy",
            category="Creative Direction",
            icon="🎨",
            good_example={
                "bigIdea": "Your style, your planet: every purchase is a vote for the future",
                "toneAndManner": "Inspiring but approachable, authentic without preaching",
            },
            learning_tip="Tip: the big idea must be memorable and repeatable by the creative team",
            checks=(
                CriteriaCheck(
                    test=_has_any_key("bigIdea"),
                    rationale="The big idea connects every creative piece; without it the campaign feels disjointed",
                    action="Write the big idea in one line",
                ),
                CriteriaCheck(
                    test=_has_any_key("toneAndManner", "tone"),
                    rationale="Defining the tone avoids misunderstandings between teams and keeps touchpoints coherent",
                    action="Describe tone and manner",
                ),
            ),
        ),
        SectionCriteria(
            key="channelsAndTactics",
            display_name="channel strategy",
            category="Smart Distribution",
            icon="📢",
            good_example={
                "recommendedMix": [
                    {"channel": "Instagram", "rationale": "High engagement with urban millennials", "allocation": "40%"},
                    {"channel": "TikTok", "rationale": "Viral, authentic content", "allocation": "30%"},
                ]
            },
            learning_tip="Tip: every channel needs a specific reason to exist for your audience",
            checks=(
                CriteriaCheck(
                    test=_channels_defined,
                    rationale="Choosing specific channels makes the budget go further: being everywhere is being nowhere",
                    action="Pick the channels you will use",
                ),
                CriteriaCheck(
                    test=_channels_justified,
                    rationale="Justifying each channel shows strategic thinking, not just intuition",
                    action="Add a rationale for each channel",
                ),
            ),
            aliases=FIELD_ALIASES["channelsAndTactics"],
        ),
        SectionCriteria(
            key="budgetConsiderations",
            display_name="budget considerations",
            category="Financial Viability",
            icon="💰",
            good_example={
                "estimatedRange": "$50,000 - $75,000",
                "keyInvestments": ["40% paid media", "30% content production", "20% influencers", "10% tooling"],
            },
            learning_tip="Tip: split the budget into categories before arguing about the total",
            checks=(
                CriteriaCheck(
                    test=_budget_defined,
                    rationale="A realistic budget range avoids surprises and lets resources be planned",
                    action="State the budget range",
                ),
                CriteriaCheck(
                    test=_mentions(
                        r"\d+\s*%|\b(media|production|tools|tooling|staff|influencers?|"
                        r"pauta|producci[oó]n|herramientas|personal)\b"
                    ),
                    rationale="Breaking the investment into categories helps optimize ROI and justify each expense",
                    action="Break the budget down by category",
                ),
            ),
        ),
        SectionCriteria(
            key="successMetrics",
            display_name="success metrics",
            category="Impact Measurement",
            icon="📊",
            good_example={
                "primary": ["Reach 500K unique people", "CTR above 2.5%", "10,000 website visits"],
                "measurementFramework": "Weekly reports with a real-time dashboard",
            },
            learning_tip="Tip: pair each objective with the one number that proves it",
            checks=(
                CriteriaCheck(
                    test=_metrics_defined,
                    rationale="Without clear metrics it is impossible to know whether the campaign worked",
                    action="List the primary KPIs",
                ),
                CriteriaCheck(
                    test=_mentions(
                        r"\d|\b(ctr|reach|impressions|conversions?|sales|engagement|"
                        r"alcance|impresiones|conversiones|ventas)\b"
                    ),
                    rationale="Specific, numeric metrics let the campaign be optimized in real time",
                    action="Give each KPI a target value",
                ),
                CriteriaCheck(
                    test=_mentions(
                        r"\b(measurementframework|dashboard|weekly|monthly|report\w*|tracking|"
                        r"analytics|semanal\w*|mensual\w*|reporte\w*|medici[oó]n)\b"
                    ),
                    rationale="A measurement cadence says who checks the numbers and when",
                    action="Describe how and when results are measured",
                ),
            ),
        ),
        SectionCriteria(
            key="timeline",
            display_name="timeline",
            category="Timing",
            icon="🗓️",
            good_example="Teaser: 2 weeks. Launch: 1 month. Sustain: 3 months.",
            learning_tip="Tip: work back from the launch date and include approval rounds",
            checks=(
                CriteriaCheck(
                    test=_timeline_defined,
                    rationale="A timeline lets production, media and approvals be planned together",
                    action="Outline the timeline",
                ),
                CriteriaCheck(
                    test=_mentions(DURATION + "|" + TIMEFRAME),
                    rationale="Concrete durations or dates turn a wish into a schedule",
                    action="Add durations or dates to each stage",
                ),
            ),
        ),
        SectionCriteria(
            key="riskAnalysis",
            display_name="risk analysis",
            category="Risk Management",
            icon="⚠️",
            good_example={
                "risks": ["Low event turnout", "Price perceived as high"],
                "mitigations": ["Reminder campaigns", "Launch promotions"],
            },
            learning_tip="Tip: for every risk, name the first thing you would do if it happened",
            checks=(
                CriteriaCheck(
                    test=_risks_listed,
                    rationale="Listing risks early avoids surprises that derail the launch",
                    action="List the main risks",
                ),
                CriteriaCheck(
                    test=_risks_mitigated,
                    rationale="A risk without a mitigation is only a worry; mitigations make it manageable",
                    action="Add a mitigation for each risk",
                ),
            ),
            aliases=FIELD_ALIASES["riskAnalysis"],
        ),
        SectionCriteria(
            key="campaignPhases",
            display_name="campaign phases",
            category="Execution Roadmap",
            icon="🛣️",
            good_example=[
                {"phase": "Teaser", "deliverables": ["Short social videos", "Teaser landing"], "duration": "2 weeks"},
                {"phase": "Launch", "deliverables": ["Launch event", "Paid ads"], "duration": "1 month"},
            ],
            learning_tip="Tip: every phase needs an owner, deliverables and a duration",
            checks=(
                CriteriaCheck(
                    test=lambda value: len(_records(value, "phases")) >= 2,
                    rationale="Splitting the campaign into phases makes execution and budget pacing explicit",
                    action="Split the campaign into at least two phases",
                ),
                CriteriaCheck(
                    test=_phases_have(r"deliverables|entregables|outputs"),
                    rationale="Deliverables per phase tell the production team what to build and when",
                    action="List deliverables for every phase",
                ),
                CriteriaCheck(
                    test=_phases_have(r"duration|duraci[oó]n|dates|timing"),
                    rationale="Durations per phase make the roadmap plannable",
                    action="Give every phase a duration",
                ),
            ),
            aliases=FIELD_ALIASES["campaignPhases"],
        ),
    )


@lru_cache(maxsize=1)
def load_criteria_catalog() -> Mapping[str, SectionCriteria]:
    """
    Load the static criteria catalog (built once, read-only).

    Returns:
        Read-only mapping of section key to SectionCriteria, in evaluation order
    """
    return MappingProxyType({entry.key: entry for entry in _build_catalog()})
