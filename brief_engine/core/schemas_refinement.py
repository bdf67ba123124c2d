"""Pydantic models for conversational brief refinement."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from brief_engine.core.schemas_analysis import EducationalAnalysis


class RefinementState(str, Enum):
    IDLE = "idle"
    AWAITING_ANSWER = "awaiting_answer"
    REQUESTING_UPDATE = "requesting_update"
    MERGING = "merging"
    DECIDING_NEXT = "deciding_next"
    COMPLETE = "complete"
    ERROR = "error"


class RefinementEvent(str, Enum):
    START = "start"
    ANSWER = "answer"
    UPDATE_RECEIVED = "update_received"
    MERGED = "merged"
    QUESTION_READY = "question_ready"
    NO_MORE_QUESTIONS = "no_more_questions"
    FAILURE = "failure"
    RECOVERED = "recovered"
    CANCEL = "cancel"


MessageKind = Literal["question", "answer", "completion", "error", "info"]


class ConversationMessage(BaseModel):
    """One entry of the refinement transcript."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    role: Literal["user", "assistant"]
    content: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    question_id: str | None = None
    kind: MessageKind | None = None


class Progress(BaseModel):
    current: int = Field(0, ge=0, description="Merged answers so far")
    total: int = Field(..., ge=1, description="Maximum refinement rounds")


# =============================================================================
# Collaborator contract
# =============================================================================


class BriefUpdateRequest(BaseModel):
    """Everything the generation collaborator sees for one round."""

    document: dict[str, Any] = Field(default_factory=dict)
    transcript: list[ConversationMessage] = Field(default_factory=list)
    answer: str
    source_transcript: str | None = None


class BriefUpdateProposal(BaseModel):
    """Exactly what the collaborator must return: nothing more, nothing less."""

    next_question: str | None = Field(..., alias="nextQuestion")
    updated_document: dict[str, Any] = Field(..., alias="updatedDocument")

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    @field_validator("next_question")
    @classmethod
    def blank_question_ends_session(cls, v: str | None) -> str | None:
        """A whitespace-only question means there is nothing left to ask."""
        if v is None or not v.strip():
            return None
        return v.strip()


# =============================================================================
# Session snapshot and HTTP bodies
# =============================================================================


class SessionCompleteness(BaseModel):
    is_complete: bool
    poor_fields: list[str] = Field(default_factory=list)


class RefinementSnapshot(BaseModel):
    """Read-only view of a refinement session."""

    session_id: str
    state: RefinementState
    document: dict[str, Any]
    transcript: list[ConversationMessage]
    progress: Progress
    completeness: SessionCompleteness
    analysis: EducationalAnalysis | None = None
    closed: bool = False


class StartSessionRequest(BaseModel):
    brief: dict[str, Any] = Field(default_factory=dict, description="Initial brief (may be empty)")
    source_transcript: str | None = Field(
        None, description="Transcript the brief was originally extracted from"
    )
    request_opening_question: bool = Field(
        False, description="Ask the collaborator for a tailored opening question"
    )


class SendMessageRequest(BaseModel):
    answer: str = Field(..., description="User answer to the pending question")
