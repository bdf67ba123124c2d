"""Conversational brief refinement session.

A session owns the canonical brief and drives question/answer rounds with the
generation collaborator. Each round proposes a full updated brief, which is
merged into the canonical one (the only place the document changes) and then
re-analyzed.
"""

from __future__ import annotations

import asyncio
import copy
import logging
import time
from functools import lru_cache
from typing import Any, Awaitable, Callable
from uuid import uuid4

from brief_engine.chains.propose_brief_update import (
    generate_opening_question,
    propose_brief_update,
)
from brief_engine.core.analysis_cache import BriefAnalyzer
from brief_engine.core.brief_merge import merge_briefs
from brief_engine.core.config import get_settings
from brief_engine.core.errors import (
    CollaboratorError,
    IllegalTransitionError,
    InternalError,
    SessionBusyError,
)
from brief_engine.core.field_quality import is_brief_complete, list_poor_fields
from brief_engine.core.logging import get_logger, log_with_context
from brief_engine.core.refinement_state_machine import RefinementStateMachine
from brief_engine.core.schemas_refinement import (
    BriefUpdateProposal,
    BriefUpdateRequest,
    ConversationMessage,
    MessageKind,
    Progress,
    RefinementEvent,
    RefinementSnapshot,
    RefinementState,
    SessionCompleteness,
)

logger = get_logger(__name__)

Proposer = Callable[[BriefUpdateRequest], Awaitable[BriefUpdateProposal]]
QuestionGenerator = Callable[[dict[str, Any], str | None], Awaitable[str]]

WELCOME_MESSAGE = (
    "Hi! I'll ask you a few questions to improve your brief. "
    "Every answer is merged into the document, nothing you already have is lost."
)
DEFAULT_OPENING_QUESTION = (
    "Let's start with the basics: what is the main goal of this campaign, and who is it for?"
)
COMPLETION_MESSAGE = (
    "Your brief is ready! All your answers have been merged into the document."
)
ROUND_LIMIT_MESSAGE = (
    "We've reached the question limit for this session. "
    "Your brief keeps every improvement merged so far."
)
CANCEL_MESSAGE = "Session finished. Your brief keeps every improvement merged so far."
ERROR_MESSAGE = (
    "Sorry, I couldn't process that answer ({reason}). "
    "Your brief was not changed, please try again."
)


class RefinementSession:
    """One conversational refinement of a brief."""

    def __init__(
        self,
        document: dict[str, Any] | None = None,
        *,
        session_id: str | None = None,
        source_transcript: str | None = None,
        max_rounds: int | None = None,
        proposer: Proposer | None = None,
        question_generator: QuestionGenerator | None = None,
        analyzer: BriefAnalyzer | None = None,
    ):
        self.session_id = session_id or uuid4().hex
        self.document: dict[str, Any] = copy.deepcopy(document) if document else {}
        self.source_transcript = source_transcript
        self.max_rounds = max_rounds if max_rounds is not None else get_settings().REFINEMENT_MAX_ROUNDS
        self.transcript: list[ConversationMessage] = []
        self.rounds = 0
        self.closed = False

        self._proposer = proposer or propose_brief_update
        self._question_generator = question_generator or generate_opening_question
        self._analyzer = analyzer or BriefAnalyzer()
        self._machine = RefinementStateMachine()
        self._lock = asyncio.Lock()
        self._question_count = 0
        self.last_activity = time.time()

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def state(self) -> RefinementState:
        return self._machine.state

    @property
    def is_busy(self) -> bool:
        return self._lock.locked()

    @property
    def progress(self) -> Progress:
        return Progress(current=self.rounds, total=self.max_rounds)

    # =========================================================================
    # Transcript helpers
    # =========================================================================

    def _say(self, content: str, kind: MessageKind, question_id: str | None = None) -> ConversationMessage:
        message = ConversationMessage(
            role="assistant", content=content, kind=kind, question_id=question_id
        )
        self.transcript.append(message)
        return message

    def _ask(self, question: str) -> ConversationMessage:
        self._question_count += 1
        return self._say(question, "question", question_id=f"q{self._question_count}")

    def _pending_question_id(self) -> str | None:
        for message in reversed(self.transcript):
            if message.kind == "question":
                return message.question_id
        return None

    def _log(self, level: int, msg: str, **kwargs: Any) -> None:
        log_with_context(logger, level, msg, session_id=self.session_id, **kwargs)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def start(self, request_opening_question: bool = False) -> RefinementSnapshot:
        """
        Open the conversation with a welcome and the first question.

        Args:
            request_opening_question: Ask the collaborator for a tailored
                question instead of the default one

        Raises:
            IllegalTransitionError: If the session was already started
        """
        if self.state is not RefinementState.IDLE:
            raise IllegalTransitionError(self.state.value, RefinementEvent.START.value)

        self.last_activity = time.time()
        question = DEFAULT_OPENING_QUESTION
        if request_opening_question:
            try:
                question = await self._question_generator(
                    copy.deepcopy(self.document), self.source_transcript
                )
            except CollaboratorError as e:
                self._log(logging.WARNING, f"Opening question unavailable, using default: {e}")

        if self.state is not RefinementState.IDLE:
            # Cancelled while the opening question was being generated
            return self.snapshot()

        self._say(WELCOME_MESSAGE, "info")
        self._ask(question)
        self._machine.fire(RefinementEvent.START)
        self._analyzer.analyze(self.document)

        self._log(logging.INFO, "Refinement session started", max_rounds=self.max_rounds)
        return self.snapshot()

    async def send_message(self, answer: str) -> RefinementSnapshot:
        """
        Process one user answer: propose, merge, analyze, ask next.

        Collaborator failures are recovered: an error message is appended and
        the session goes back to waiting for an answer with the brief untouched.

        Raises:
            ValueError: If the answer is blank
            SessionBusyError: If another answer is still being processed
            IllegalTransitionError: If the session is not waiting for an answer
            InternalError: If the round failed unexpectedly (the session is
                recovered first and keeps accepting answers)
        """
        if not answer or not answer.strip():
            raise ValueError("Answer cannot be empty")
        if self._lock.locked():
            raise SessionBusyError(f"Session {self.session_id} is already processing an answer")

        async with self._lock:
            self.last_activity = time.time()
            self._machine.fire(RefinementEvent.ANSWER)
            self.transcript.append(
                ConversationMessage(
                    role="user",
                    content=answer.strip(),
                    kind="answer",
                    question_id=self._pending_question_id(),
                )
            )

            request = BriefUpdateRequest(
                document=copy.deepcopy(self.document),
                transcript=list(self.transcript),
                answer=answer.strip(),
                source_transcript=self.source_transcript,
            )

            try:
                proposal = await self._proposer(request)
            except CollaboratorError as e:
                if self.state is not RefinementState.REQUESTING_UPDATE:
                    return self.snapshot()
                self._recover(e, type(e).__name__)
                return self.snapshot()
            except asyncio.CancelledError as e:
                # The caller gave up on this round; the session must still accept answers
                if self.state is RefinementState.REQUESTING_UPDATE:
                    self._recover(e, "request cancelled")
                raise
            except Exception as e:
                if self.state is RefinementState.REQUESTING_UPDATE:
                    self._recover(e, "unexpected error")
                raise InternalError(f"Refinement round failed: {e}") from e

            if self.state is not RefinementState.REQUESTING_UPDATE:
                self._log(logging.INFO, "Discarding collaborator response for finished session")
                return self.snapshot()

            self._machine.fire(RefinementEvent.UPDATE_RECEIVED)
            try:
                merged = merge_briefs(self.document, proposal.updated_document)
                self._analyzer.analyze(merged)
            except Exception as e:
                self._recover(e, "merge failed")
                raise InternalError(f"Refinement round failed while merging: {e}") from e

            self.document = merged
            self.rounds += 1
            self._machine.fire(RefinementEvent.MERGED)

            if not proposal.next_question:
                self._say(COMPLETION_MESSAGE, "completion")
                self._machine.fire(RefinementEvent.NO_MORE_QUESTIONS)
            elif self.rounds >= self.max_rounds:
                self._say(ROUND_LIMIT_MESSAGE, "completion")
                self._machine.fire(RefinementEvent.NO_MORE_QUESTIONS)
            else:
                self._ask(proposal.next_question)
                self._machine.fire(RefinementEvent.QUESTION_READY)

            self._log(
                logging.INFO,
                f"Refinement round {self.rounds} merged",
                state=self.state.value,
                complete=is_brief_complete(self.document),
            )
            return self.snapshot()

    def _recover(self, error: BaseException, reason: str) -> None:
        self._log(logging.WARNING, f"Refinement round failed, brief unchanged: {error}", reason=reason)
        self._machine.fire(RefinementEvent.FAILURE)
        self._say(ERROR_MESSAGE.format(reason=reason), "error")
        self._machine.fire(RefinementEvent.RECOVERED)

    def cancel(self) -> RefinementSnapshot:
        """Finish the session now; the brief merged so far is the result."""
        if self.state is not RefinementState.COMPLETE:
            self._machine.fire(RefinementEvent.CANCEL)
            self._say(CANCEL_MESSAGE, "completion")
            self._log(logging.INFO, "Refinement session cancelled", rounds=self.rounds)
        return self.snapshot()

    def close(self) -> RefinementSnapshot:
        snapshot = self.cancel()
        self.closed = True
        return snapshot.model_copy(update={"closed": True})

    def snapshot(self) -> RefinementSnapshot:
        return RefinementSnapshot(
            session_id=self.session_id,
            state=self.state,
            document=copy.deepcopy(self.document),
            transcript=list(self.transcript),
            progress=self.progress,
            completeness=SessionCompleteness(
                is_complete=is_brief_complete(self.document),
                poor_fields=list_poor_fields(self.document),
            ),
            analysis=self._analyzer.latest,
            closed=self.closed,
        )


class SessionRegistry:
    """
    In-process registry of refinement sessions keyed by id.

    Sessions expire after a period without activity: finished sessions after
    ``completed_ttl_seconds``, live ones after ``ttl_seconds``. A session that
    is processing an answer never expires. When more than ``max_sessions``
    are held, the least recently active are evicted, finished ones first.
    """

    def __init__(
        self,
        ttl_seconds: float | None = None,
        completed_ttl_seconds: float | None = None,
        max_sessions: int | None = None,
    ):
        settings = get_settings()
        self.ttl_seconds = (
            ttl_seconds if ttl_seconds is not None else settings.REFINEMENT_SESSION_TTL_SECONDS
        )
        self.completed_ttl_seconds = (
            completed_ttl_seconds
            if completed_ttl_seconds is not None
            else settings.REFINEMENT_COMPLETED_SESSION_TTL_SECONDS
        )
        self.max_sessions = (
            max_sessions if max_sessions is not None else settings.REFINEMENT_MAX_SESSIONS
        )
        self._sessions: dict[str, RefinementSession] = {}

    def create(self, document: dict[str, Any] | None = None, **kwargs: Any) -> RefinementSession:
        self.prune()
        session = RefinementSession(document, **kwargs)
        self._sessions[session.session_id] = session
        self._enforce_capacity(keep=session.session_id)
        return session

    def get(self, session_id: str) -> RefinementSession | None:
        session = self._sessions.get(session_id)
        if session is not None and self._is_expired(session, time.time()):
            self._evict(session_id, "expired")
            return None
        return session

    def remove(self, session_id: str) -> RefinementSession | None:
        session = self._sessions.pop(session_id, None)
        if session is not None:
            session.close()
        return session

    def prune(self, now: float | None = None) -> list[str]:
        """Evict expired sessions. Returns the evicted ids."""
        now = now if now is not None else time.time()
        expired = [sid for sid, s in self._sessions.items() if self._is_expired(s, now)]
        for session_id in expired:
            self._evict(session_id, "expired")
        return expired

    def _is_expired(self, session: RefinementSession, now: float) -> bool:
        if session.is_busy:
            return False
        ttl = (
            self.completed_ttl_seconds
            if session.state is RefinementState.COMPLETE
            else self.ttl_seconds
        )
        return now - session.last_activity > ttl

    def _enforce_capacity(self, keep: str) -> None:
        overflow = len(self._sessions) - self.max_sessions
        if overflow <= 0:
            return
        candidates = sorted(
            (s for sid, s in self._sessions.items() if sid != keep and not s.is_busy),
            key=lambda s: (s.state is not RefinementState.COMPLETE, s.last_activity),
        )
        for session in candidates[:overflow]:
            self._evict(session.session_id, "capacity")

    def _evict(self, session_id: str, reason: str) -> None:
        session = self._sessions.pop(session_id)
        session.close()
        log_with_context(
            logger, logging.INFO, "Refinement session evicted", session_id=session_id, reason=reason
        )

    def __len__(self) -> int:
        return len(self._sessions)


@lru_cache(maxsize=1)
def get_session_registry() -> SessionRegistry:
    """Process-wide session registry."""
    return SessionRegistry()
