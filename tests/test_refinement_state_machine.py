"""Tests for the refinement state machine."""

import pytest

from brief_engine.core.errors import IllegalTransitionError
from brief_engine.core.refinement_state_machine import (
    TRANSITIONS,
    RefinementStateMachine,
    next_state,
)
from brief_engine.core.schemas_refinement import RefinementEvent as E
from brief_engine.core.schemas_refinement import RefinementState as S


class TestTransitions:
    def test_happy_round(self):
        machine = RefinementStateMachine()
        for event, expected in [
            (E.START, S.AWAITING_ANSWER),
            (E.ANSWER, S.REQUESTING_UPDATE),
            (E.UPDATE_RECEIVED, S.MERGING),
            (E.MERGED, S.DECIDING_NEXT),
            (E.QUESTION_READY, S.AWAITING_ANSWER),
        ]:
            assert machine.fire(event) is expected

    def test_completion(self):
        machine = RefinementStateMachine(S.DECIDING_NEXT)
        machine.fire(E.NO_MORE_QUESTIONS)
        assert machine.is_complete

    def test_failure_and_recovery(self):
        machine = RefinementStateMachine(S.REQUESTING_UPDATE)
        assert machine.fire(E.FAILURE) is S.ERROR
        assert machine.fire(E.RECOVERED) is S.AWAITING_ANSWER

    @pytest.mark.parametrize("state", [s for s in S if s is not S.COMPLETE])
    def test_cancel_from_any_non_terminal_state(self, state):
        assert next_state(state, E.CANCEL) is S.COMPLETE

    def test_complete_is_terminal(self):
        for event in E:
            with pytest.raises(IllegalTransitionError):
                next_state(S.COMPLETE, event)

    def test_merging_while_awaiting_answer_is_illegal(self):
        machine = RefinementStateMachine(S.AWAITING_ANSWER)

        with pytest.raises(IllegalTransitionError) as exc_info:
            machine.fire(E.MERGED)

        assert exc_info.value.state == "awaiting_answer"
        assert exc_info.value.event == "merged"
        assert machine.state is S.AWAITING_ANSWER

    def test_failure_not_allowed_while_awaiting_answer(self):
        assert not RefinementStateMachine(S.AWAITING_ANSWER).can_fire(E.FAILURE)

    def test_table_has_no_duplicate_keys(self):
        keys = [(t.from_state, t.event) for t in TRANSITIONS]
        assert len(keys) == len(set(keys))
