"""Refinement session state machine.

Rounds cycle through: awaiting_answer → requesting_update → merging →
deciding_next → awaiting_answer (or complete).

Transitions are declarative data. Anything not in the table is illegal.
"""

from dataclasses import dataclass

from brief_engine.core.errors import IllegalTransitionError
from brief_engine.core.schemas_refinement import RefinementEvent, RefinementState

S = RefinementState
E = RefinementEvent


# =============================================================================
# Transition table (declarative)
# =============================================================================


@dataclass(frozen=True)
class Transition:
    from_state: RefinementState
    event: RefinementEvent
    to_state: RefinementState


TRANSITIONS: list[Transition] = [
    Transition(S.IDLE, E.START, S.AWAITING_ANSWER),
    Transition(S.AWAITING_ANSWER, E.ANSWER, S.REQUESTING_UPDATE),
    Transition(S.REQUESTING_UPDATE, E.UPDATE_RECEIVED, S.MERGING),
    Transition(S.MERGING, E.MERGED, S.DECIDING_NEXT),
    Transition(S.DECIDING_NEXT, E.QUESTION_READY, S.AWAITING_ANSWER),
    Transition(S.DECIDING_NEXT, E.NO_MORE_QUESTIONS, S.COMPLETE),
    Transition(S.IDLE, E.FAILURE, S.ERROR),
    Transition(S.REQUESTING_UPDATE, E.FAILURE, S.ERROR),
    Transition(S.MERGING, E.FAILURE, S.ERROR),
    Transition(S.DECIDING_NEXT, E.FAILURE, S.ERROR),
    Transition(S.ERROR, E.RECOVERED, S.AWAITING_ANSWER),
]

# Cancel is legal from every non-terminal state
TRANSITIONS.extend(
    Transition(state, E.CANCEL, S.COMPLETE) for state in S if state is not S.COMPLETE
)

_TABLE: dict[tuple[RefinementState, RefinementEvent], RefinementState] = {
    (t.from_state, t.event): t.to_state for t in TRANSITIONS
}


def next_state(state: RefinementState, event: RefinementEvent) -> RefinementState:
    """
    Resolve a transition.

    Raises:
        IllegalTransitionError: If ``event`` is not allowed in ``state``
    """
    try:
        return _TABLE[(state, event)]
    except KeyError:
        raise IllegalTransitionError(state.value, event.value) from None


class RefinementStateMachine:
    """Current state plus the transition table."""

    def __init__(self, state: RefinementState = RefinementState.IDLE):
        self.state = state

    def can_fire(self, event: RefinementEvent) -> bool:
        return (self.state, event) in _TABLE

    def fire(self, event: RefinementEvent) -> RefinementState:
        self.state = next_state(self.state, event)
        return self.state

    @property
    def is_complete(self) -> bool:
        return self.state is RefinementState.COMPLETE
