"""Brief Generation Agent.

Turns a meeting transcript or strategic notes into a first structured brief.
The output is normalized onto canonical field names so it can go straight
into analysis, storage or a refinement session.
"""

import json
from typing import Any

from brief_engine.core.brief_normalization import normalize_brief
from brief_engine.core.config import get_settings
from brief_engine.core.errors import ParseError, ValidationError
from brief_engine.core.field_quality import list_poor_fields
from brief_engine.core.llm import parse_llm_json_dict, request_json_completion
from brief_engine.core.logging import get_logger
from brief_engine.core.schemas_brief import INDISPENSABLE_FIELDS, FieldShape, detect_shape

logger = get_logger(__name__)

COLLABORATOR = "brief_generation"
MAX_TRANSCRIPT_CHARS = 12000


SYSTEM_PROMPT = """You are a seasoned marketing director who writes award-winning campaign briefs.

Analyze the meeting transcription or strategic notes and write a complete, professional brief that a creative team could execute.

Work through:
1. Strategic foundation: business objectives, brand positioning, competitive context
2. Audience: target personas, motivations, media habits
3. Creative strategy: big idea, key messages, tone
4. Channels: recommended mix with rationale
5. Roadmap: phases, timing and dependencies
6. Success metrics: KPIs and how they are measured
7. Risks: challenges and mitigations

IMPORTANT RULES:
- Use what the transcription says; fill gaps with professional recommendations, never with placeholders
- Objectives and metrics must be specific, measurable and time-bound
- Write in the language of the transcription

Output ONLY valid JSON with these keys:
{
  "title": "Clear, compelling project name",
  "summary": "Executive summary (2-3 sentences)",
  "brandPositioning": "How the brand should be perceived relative to competition",
  "problemStatement": "Core business problem or opportunity",
  "objectives": ["Measurable, time-bound goals"],
  "targetAudience": {"primary": "string", "secondary": "string", "demographics": "string", "psychographics": "string", "mediaHabits": "string"},
  "successMetrics": {"primary": ["Main KPIs"], "measurementFramework": "How success will be tracked"},
  "requirements": ["Mandatory elements and constraints"],
  "keyMessages": ["Primary message", "Supporting messages"],
  "creativeStrategy": {"bigIdea": "string", "toneAndManner": "string"},
  "timeline": "Overall timing",
  "channelsAndTactics": {"recommendedMix": [{"channel": "string", "rationale": "string", "allocation": "string"}]},
  "budgetConsiderations": {"estimatedRange": "string", "keyInvestments": ["string"]},
  "riskAnalysis": {"risks": ["string"], "mitigations": ["string"]},
  "dependencies": ["Required inputs"],
  "assumptions": ["Key assumptions made"],
  "outOfScope": ["What this campaign will not cover"],
  "campaignPhases": [{"phase": "string", "duration": "string", "deliverables": ["string"]}]
}
"""


def _build_user_prompt(transcript: str) -> str:
    return f"""Meeting transcription / strategic notes:
---
{transcript[:MAX_TRANSCRIPT_CHARS]}
---

Extract the business objectives, audience, positioning, channels, budget, timing, success metrics and any mandatories, then write the brief."""


def parse_generated_brief(raw_output: str) -> dict[str, Any]:
    """
    Parse, normalize and sanity-check a generated brief.

    Raises:
        ParseError: If the output is not a JSON object
        ValidationError: If none of the brief fields has content
    """
    try:
        data = parse_llm_json_dict(raw_output)
    except json.JSONDecodeError as e:
        raise ParseError(f"Generated brief is not valid JSON: {e}", COLLABORATOR) from e

    brief = normalize_brief(data)
    if all(detect_shape(brief.get(field)) is FieldShape.EMPTY for field in INDISPENSABLE_FIELDS):
        raise ValidationError("Generated brief has none of the expected fields", COLLABORATOR)
    return brief


async def generate_brief(transcript: str) -> dict[str, Any]:
    """
    Generate a brief from a transcript.

    Args:
        transcript: Meeting transcript or strategic notes

    Returns:
        Normalized brief dict

    Raises:
        ValueError: If the transcript is blank
        NetworkError: If the model is unreachable after retries
        ParseError: If the response is not JSON
        ValidationError: If the response contains no brief fields
    """
    if not transcript or not transcript.strip():
        raise ValueError("Transcript cannot be empty")

    settings = get_settings()

    raw_output = await request_json_completion(
        SYSTEM_PROMPT,
        _build_user_prompt(transcript.strip()),
        model=settings.GENERATION_MODEL,
        temperature=settings.GENERATION_TEMPERATURE,
        max_tokens=settings.GENERATION_MAX_TOKENS,
        collaborator=COLLABORATOR,
    )
    brief = parse_generated_brief(raw_output)

    logger.info(
        "Brief generated from transcript",
        extra={
            "transcript_chars": len(transcript),
            "poor_fields": len(list_poor_fields(brief)),
        },
    )
    return brief
