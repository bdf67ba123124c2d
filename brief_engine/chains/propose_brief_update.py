"""Brief Refinement Agent.

Given the current brief, the conversation so far and the user's latest answer,
proposes a full updated brief plus the next question to ask. The proposal is
never applied directly: the refinement session merges it into the canonical
brief so nothing already written is lost.

Output contract (exactly these keys):
- nextQuestion: next question for the user, or null when the brief is done
- updatedDocument: the complete brief with the answer incorporated
"""

import json
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from brief_engine.core.config import get_settings
from brief_engine.core.errors import ParseError, ValidationError
from brief_engine.core.field_quality import list_poor_fields
from brief_engine.core.llm import parse_llm_json_dict, request_json_completion
from brief_engine.core.logging import get_logger
from brief_engine.core.schemas_refinement import (
    BriefUpdateProposal,
    BriefUpdateRequest,
    ConversationMessage,
)

logger = get_logger(__name__)

COLLABORATOR = "brief_refinement"
MAX_TRANSCRIPT_MESSAGES = 20
MAX_SOURCE_CHARS = 12000


SYSTEM_PROMPT = """You are a senior marketing strategist helping a user improve a campaign brief through a short interview.

Each turn you receive the current brief (JSON), the conversation so far and the user's latest answer.

Your job:
1. Incorporate the latest answer into the brief. Put information in the field where it belongs.
2. Return the COMPLETE brief, not only the fields you changed.
3. Never delete or shorten information that is already in the brief.
4. Ask ONE next question about the weakest or missing field. Make it specific and easy to answer.
5. When every field is substantive, set nextQuestion to null.

Brief fields (use these exact keys):
- title: string
- summary: string
- brandPositioning: string
- objectives: list of strings (measurable, time-bound)
- problemStatement: string
- targetAudience: object {"primary": string, "secondary": string, "demographics": string, "psychographics": string, "mediaHabits": string}
- successMetrics: object {"primary": list of strings, "measurementFramework": string}
- requirements: list of strings
- keyMessages: list of strings
- creativeStrategy: object {"bigIdea": string, "toneAndManner": string}
- timeline: string
- channelsAndTactics: object {"recommendedMix": list of {"channel": string, "rationale": string, "allocation": string}}
- budgetConsiderations: object {"estimatedRange": string, "keyInvestments": list of strings}
- riskAnalysis: object {"risks": list of strings, "mitigations": list of strings}
- dependencies: list of strings
- assumptions: list of strings
- outOfScope: list of strings
- campaignPhases: list of {"phase": string, "deliverables": list of strings, "duration": string}

Answer in the same language the user writes in.

Output ONLY valid JSON with exactly these two keys:
{
  "nextQuestion": "string or null",
  "updatedDocument": { ...complete brief... }
}
"""

OPENING_QUESTION_PROMPT = """You are a senior marketing strategist about to interview a user to improve their campaign brief.

Read the brief (and the original transcript, if provided) and write the single most useful first question: the one that fills the most important gap.
Keep it short, friendly and specific. Use the language of the brief.

Output ONLY valid JSON:
{
  "question": "string"
}
"""


def _format_transcript(transcript: list[ConversationMessage]) -> str:
    recent = transcript[-MAX_TRANSCRIPT_MESSAGES:]
    if not recent:
        return "(no messages yet)"
    return "\n".join(f"{m.role.upper()}: {m.content}" for m in recent)


def _build_user_prompt(request: BriefUpdateRequest) -> str:
    poor_fields = list_poor_fields(request.document)
    parts = [
        "Current brief:",
        json.dumps(request.document, indent=2, ensure_ascii=False),
        "",
        f"Fields still missing or too thin: {', '.join(poor_fields) if poor_fields else 'none'}",
        "",
        "Conversation so far:",
        _format_transcript(request.transcript),
        "",
        "Latest answer:",
        request.answer,
    ]
    if request.source_transcript:
        parts += [
            "",
            "Original transcript the brief was extracted from:",
            "---",
            request.source_transcript[:MAX_SOURCE_CHARS],
            "---",
        ]
    return "\n".join(parts)


def parse_proposal(raw_output: str) -> BriefUpdateProposal:
    """
    Parse and validate a collaborator response.

    Raises:
        ParseError: If the output is not a JSON object
        ValidationError: If keys are missing, extra or of the wrong type
    """
    try:
        data = parse_llm_json_dict(raw_output)
    except json.JSONDecodeError as e:
        raise ParseError(f"Refinement response is not valid JSON: {e}", COLLABORATOR) from e

    try:
        return BriefUpdateProposal.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(
            f"Refinement response has the wrong shape: {e.error_count()} error(s)", COLLABORATOR
        ) from e


async def propose_brief_update(request: BriefUpdateRequest) -> BriefUpdateProposal:
    """
    Ask the collaborator to fold the latest answer into the brief.

    Args:
        request: Current brief, transcript, answer and optional source transcript

    Returns:
        Validated BriefUpdateProposal

    Raises:
        NetworkError: If the model is unreachable after retries
        ParseError: If the response is not JSON
        ValidationError: If the response does not match the contract
    """
    settings = get_settings()

    raw_output = await request_json_completion(
        SYSTEM_PROMPT,
        _build_user_prompt(request),
        model=settings.REFINEMENT_MODEL,
        temperature=settings.REFINEMENT_TEMPERATURE,
        max_tokens=settings.REFINEMENT_MAX_TOKENS,
        collaborator=COLLABORATOR,
    )
    proposal = parse_proposal(raw_output)

    logger.info(
        "Brief update proposed",
        extra={
            "updated_fields": len(proposal.updated_document),
            "has_next_question": proposal.next_question is not None,
        },
    )
    return proposal


async def generate_opening_question(
    document: dict[str, Any], source_transcript: str | None = None
) -> str:
    """
    Generate a tailored first question for a refinement session.

    Raises:
        NetworkError: If the model is unreachable after retries
        ParseError: If the response is not JSON
        ValidationError: If the response has no usable question
    """
    settings = get_settings()

    user_prompt = "Brief:\n" + json.dumps(document or {}, indent=2, ensure_ascii=False)
    if source_transcript:
        user_prompt += f"\n\nOriginal transcript:\n---\n{source_transcript[:MAX_SOURCE_CHARS]}\n---"

    raw_output = await request_json_completion(
        OPENING_QUESTION_PROMPT,
        user_prompt,
        model=settings.REFINEMENT_MODEL,
        temperature=settings.REFINEMENT_TEMPERATURE,
        max_tokens=300,
        collaborator=COLLABORATOR,
    )

    try:
        data = parse_llm_json_dict(raw_output)
    except json.JSONDecodeError as e:
        raise ParseError(f"Opening question is not valid JSON: {e}", COLLABORATOR) from e

    question = data.get("question")
    if not isinstance(question, str) or not question.strip():
        raise ValidationError("Opening question response has no question", COLLABORATOR)
    return question.strip()
