"""API endpoints for conversational brief refinement sessions."""

from fastapi import APIRouter, HTTPException, Path

from brief_engine.api.briefs import get_rule_engine
from brief_engine.core.analysis_cache import BriefAnalyzer
from brief_engine.core.brief_normalization import normalize_brief
from brief_engine.core.errors import IllegalTransitionError, SessionBusyError
from brief_engine.core.logging import get_logger
from brief_engine.core.refinement_session import RefinementSession, get_session_registry
from brief_engine.core.schemas_refinement import (
    RefinementSnapshot,
    SendMessageRequest,
    StartSessionRequest,
)

logger = get_logger(__name__)

router = APIRouter()


def _get_session(session_id: str) -> RefinementSession:
    session = get_session_registry().get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Refinement session not found")
    return session


@router.post("/refinement/sessions", response_model=RefinementSnapshot)
async def start_session(request: StartSessionRequest) -> RefinementSnapshot:
    """
    Start a refinement session for a brief.

    Returns:
        Snapshot with the welcome message and the first question

    Raises:
        HTTPException 500: If the session cannot be started
    """
    registry = get_session_registry()
    session = registry.create(
        normalize_brief(request.brief),
        source_transcript=request.source_transcript,
        analyzer=BriefAnalyzer(get_rule_engine()),
    )

    try:
        snapshot = await session.start(request_opening_question=request.request_opening_question)
        logger.info(
            f"Started refinement session {session.session_id}",
            extra={"session_id": session.session_id},
        )
        return snapshot

    except Exception as e:
        registry.remove(session.session_id)
        error_msg = f"Failed to start refinement session: {str(e)}"
        logger.error(error_msg)
        raise HTTPException(status_code=500, detail=error_msg) from e


@router.get("/refinement/sessions/{session_id}", response_model=RefinementSnapshot)
async def get_session(
    session_id: str = Path(..., description="Refinement session id"),
) -> RefinementSnapshot:
    """Get the current state of a refinement session."""
    return _get_session(session_id).snapshot()


@router.post("/refinement/sessions/{session_id}/messages", response_model=RefinementSnapshot)
async def send_message(
    request: SendMessageRequest,
    session_id: str = Path(..., description="Refinement session id"),
) -> RefinementSnapshot:
    """
    Answer the pending question.

    Raises:
        HTTPException 400: If the answer is blank
        HTTPException 404: If the session does not exist
        HTTPException 409: If the session is busy or not waiting for an answer
        HTTPException 500: If the round fails unexpectedly
    """
    session = _get_session(session_id)

    try:
        return await session.send_message(request.answer)

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except (SessionBusyError, IllegalTransitionError) as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except Exception as e:
        error_msg = f"Failed to process answer: {str(e)}"
        logger.error(error_msg, extra={"session_id": session_id})
        raise HTTPException(status_code=500, detail=error_msg) from e


@router.post("/refinement/sessions/{session_id}/cancel", response_model=RefinementSnapshot)
async def cancel_session(
    session_id: str = Path(..., description="Refinement session id"),
) -> RefinementSnapshot:
    """Finish a session early, keeping the brief merged so far."""
    return _get_session(session_id).cancel()


@router.delete("/refinement/sessions/{session_id}", response_model=RefinementSnapshot)
async def delete_session(
    session_id: str = Path(..., description="Refinement session id"),
) -> RefinementSnapshot:
    """Close a session and forget it. Returns its final snapshot."""
    session = get_session_registry().remove(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Refinement session not found")
    logger.info(f"Closed refinement session {session_id}", extra={"session_id": session_id})
    return session.snapshot()
