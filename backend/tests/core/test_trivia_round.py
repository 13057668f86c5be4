"""Trivia Round Controller — answer scoring, unknown answers, timeouts."""

from uuid import uuid4

import pytest

from harbor_quest.core.domain_types import AnswerId, RoundId, RoundKind, TriviaPhase
from harbor_quest.core.errors import InvalidInputError, InvalidRoundStateError
from harbor_quest.core.trivia_round import (
    expire_trivia_round, is_timed_out, present_trivia_round, resolve_trivia_round,
    submit_answer,
)


@pytest.fixture
def presented(make_question):
    return present_trivia_round(RoundId(uuid4()), 0, make_question(), 15.0)


def test_instant_correct_answer_scores_max(presented):
    state = submit_answer(presented, AnswerId("1"), 0.0)
    assert state.phase == TriviaPhase.ANSWER_SUBMITTED
    state, result = resolve_trivia_round(state)
    assert state.phase == TriviaPhase.RESOLVED
    assert result.kind == RoundKind.TRIVIA
    assert result.score == 1000
    assert result.is_correct
    assert result.accuracy == 1.0
    assert result.selected_answer_id == "1"
    assert result.correct_answer_id == "1"


def test_wrong_answer_scores_zero_and_reveals_correct(presented):
    state = submit_answer(presented, AnswerId("2"), 3.0)
    _, result = resolve_trivia_round(state)
    assert result.score == 0
    assert not result.is_correct
    assert result.selected_answer_id == "2"
    assert result.correct_answer_id == "1"


def test_slower_correct_answer_scores_less(presented):
    _, fast = resolve_trivia_round(submit_answer(presented, AnswerId("1"), 2.0))
    _, slow = resolve_trivia_round(submit_answer(presented, AnswerId("1"), 10.0))
    assert fast.score > slow.score >= 500


def test_unknown_answer_rejected(presented):
    with pytest.raises(InvalidInputError) as exc:
        submit_answer(presented, AnswerId("7"), 1.0)
    assert exc.value.field == "answer_id"


def test_second_answer_rejected(presented):
    state = submit_answer(presented, AnswerId("0"), 1.0)
    with pytest.raises(InvalidRoundStateError):
        submit_answer(state, AnswerId("1"), 2.0)


def test_timeout_resolves_as_incorrect(presented):
    state, result = expire_trivia_round(presented)
    assert state.phase == TriviaPhase.RESOLVED
    assert result.timed_out
    assert result.score == 0
    assert not result.is_correct
    assert result.elapsed_s == 15.0
    assert result.selected_answer_id is None


def test_timeout_after_answer_rejected(presented):
    state = submit_answer(presented, AnswerId("1"), 1.0)
    with pytest.raises(InvalidRoundStateError):
        expire_trivia_round(state)


def test_answer_at_the_limit_is_not_a_timeout(presented):
    assert not is_timed_out(presented, 15.0)
    assert is_timed_out(presented, 15.01)


def test_non_positive_time_limit_rejected(make_question):
    with pytest.raises(InvalidInputError):
        present_trivia_round(RoundId(uuid4()), 0, make_question(), 0)
