"""Location Round Controller — phase transitions, hints, guess resolution."""

from uuid import uuid4

import pytest

from harbor_quest.core.domain_types import LocationPhase, RoundId, RoundKind, RoundStatus
from harbor_quest.core.errors import InvalidInputError, InvalidRoundStateError
from harbor_quest.core.geo import Coordinate
from harbor_quest.core.location_round import (
    present_location_round, request_hint, resolve_location_round, submit_guess,
)

SCHEDULE = [50, 100, 150]


@pytest.fixture
def presented(make_harbor):
    return present_location_round(RoundId(uuid4()), 0, make_harbor(), SCHEDULE)


def test_presented_round_has_no_hints(presented):
    assert presented.phase == LocationPhase.PRESENTED
    assert presented.status == RoundStatus.ACTIVE
    assert presented.hints_revealed == 0
    assert presented.hints_penalty == 0
    assert presented.hints_remaining == 3


def test_request_hint_returns_new_state(presented):
    state, step = request_hint(presented)
    assert step.order == 0
    assert step.penalty == 50
    assert state.phase == LocationPhase.HINT_REQUESTED
    assert state.hints_revealed == 1
    assert presented.hints_revealed == 0


def test_exhausted_ladder_is_a_no_op(presented):
    state = presented
    for _ in range(3):
        state, _ = request_hint(state)
    again, step = request_hint(state)
    assert step is None
    assert again is state
    assert again.hints_penalty == 300


def test_exact_guess_scores_max(presented):
    state = submit_guess(presented, Coordinate(60.1699, 24.9384))
    state, result = resolve_location_round(state, elapsed_s=12.0)
    assert state.phase == LocationPhase.RESOLVED
    assert state.status == RoundStatus.RESOLVED
    assert result.kind == RoundKind.LOCATION
    assert result.score == 1000
    assert result.is_correct
    assert result.distance_m == 0.0
    assert result.accuracy == 1.0
    assert result.item_id == "h-helsinki"
    assert result.elapsed_s == 12.0


def test_hints_reduce_score(presented):
    state, _ = request_hint(presented)
    state, _ = request_hint(state)
    state = submit_guess(state, Coordinate(60.1699, 24.9384))
    _, result = resolve_location_round(state, elapsed_s=3.0)
    assert result.hints_used == 2
    assert result.hints_penalty == 150
    assert result.score == 850


def test_distant_guess_is_not_correct(presented):
    state = submit_guess(presented, Coordinate(65.0121, 25.4651))
    _, result = resolve_location_round(state, elapsed_s=1.0)
    assert not result.is_correct
    assert 500_000 < result.distance_m < 560_000
    assert 0 <= result.score < 1000


def test_no_hint_after_guess(presented):
    state = submit_guess(presented, Coordinate(60.0, 25.0))
    with pytest.raises(InvalidRoundStateError):
        request_hint(state)


def test_second_guess_rejected(presented):
    state = submit_guess(presented, Coordinate(60.0, 25.0))
    with pytest.raises(InvalidRoundStateError) as exc:
        submit_guess(state, Coordinate(60.0, 25.0))
    assert exc.value.http_status == 409


def test_resolve_requires_guess(presented):
    with pytest.raises(InvalidRoundStateError):
        resolve_location_round(presented, elapsed_s=1.0)


def test_round_resolves_only_once(presented):
    state = submit_guess(presented, Coordinate(60.0, 25.0))
    state, _ = resolve_location_round(state, elapsed_s=1.0)
    with pytest.raises(InvalidRoundStateError):
        resolve_location_round(state, elapsed_s=1.0)
    with pytest.raises(InvalidRoundStateError):
        submit_guess(state, Coordinate(60.0, 25.0))


def test_negative_elapsed_rejected(presented):
    state = submit_guess(presented, Coordinate(60.0, 25.0))
    with pytest.raises(InvalidInputError):
        resolve_location_round(state, elapsed_s=-1.0)
