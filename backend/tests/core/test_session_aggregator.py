"""Session Aggregator — round planning, totals, streaks and completion."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from harbor_quest.core.domain_types import (
    GameType, RoundId, RoundKind, RoundTypeMix, SessionId, SessionStatus, UserId,
)
from harbor_quest.core.errors import InvalidInputError, InvalidRoundStateError
from harbor_quest.core.round_result import RoundResult
from harbor_quest.core.session_aggregator import (
    SessionConfig, SessionRules, end_game_session, plan_round_kinds,
    record_round_result, start_game_session,
)

L, T = RoundKind.LOCATION, RoundKind.TRIVIA
NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)
LATER = NOW + timedelta(minutes=5)


def _result(number: int, score: int, kind: RoundKind = L) -> RoundResult:
    return RoundResult(
        round_id=RoundId(uuid4()), round_number=number, kind=kind,
        item_id=f"item-{number}", score=score, is_correct=score > 0,
        accuracy=score / 1000, hints_used=0, hints_penalty=0, elapsed_s=5.0,
    )


def _session(round_count: int = 4, **kwargs):
    return start_game_session(
        SessionId(uuid4()), SessionConfig(round_count=round_count, **kwargs),
        UserId("sailor"), now=NOW,
    )


def test_plan_location_only():
    assert plan_round_kinds(SessionConfig(round_count=3)) == (L, L, L)


def test_plan_trivia_only():
    config = SessionConfig(round_count=2, round_type_mix=RoundTypeMix.TRIVIA)
    assert plan_round_kinds(config) == (T, T)


def test_plan_mixed_alternates_starting_with_location():
    config = SessionConfig(round_count=5, round_type_mix=RoundTypeMix.MIXED)
    assert plan_round_kinds(config) == (L, T, L, T, L)


def test_explicit_round_kinds_win():
    config = SessionConfig(round_count=3, round_kinds=(T, T, L))
    assert plan_round_kinds(config) == (T, T, L)


def test_game_type_follows_planned_kinds():
    assert _session(2).game_type == GameType.LOCATION
    assert _session(2, round_type_mix=RoundTypeMix.MIXED).game_type == GameType.MIXED
    assert _session(2, round_kinds=(T, T)).game_type == GameType.TRIVIA


def test_config_rejects_zero_rounds():
    with pytest.raises(InvalidInputError):
        SessionConfig(round_count=0)


def test_config_rejects_mismatched_round_kinds():
    with pytest.raises(InvalidInputError):
        SessionConfig(round_count=2, round_kinds=(L,))


def test_start_rejects_too_many_rounds():
    with pytest.raises(InvalidInputError):
        start_game_session(
            SessionId(uuid4()), SessionConfig(round_count=21), None, SessionRules(),
            now=NOW,
        )


def test_new_session_is_empty():
    session = _session()
    assert session.status == SessionStatus.IN_PROGRESS
    assert session.total_score == 0
    assert session.streak == 0
    assert session.rounds_remaining == 4
    assert session.next_round_kind == L


def test_record_accumulates_total():
    session = _session()
    session = record_round_result(session, _result(0, 700), now=NOW)
    session = record_round_result(session, _result(1, 120), now=NOW)
    assert session.total_score == 820
    assert session.rounds_resolved == 2
    assert session.rounds_remaining == 2


def test_streak_grows_then_resets():
    session = _session(5)
    for number, score in enumerate([300, 400, 500]):
        session = record_round_result(session, _result(number, score), now=NOW)
    assert session.streak == 3
    session = record_round_result(session, _result(3, 100), now=NOW)
    assert session.streak == 0
    assert session.best_streak == 3
    assert session.status == SessionStatus.IN_PROGRESS


def test_streak_threshold_is_strict():
    session = record_round_result(_session(), _result(0, 250), now=NOW)
    assert session.streak == 0
    session = record_round_result(session, _result(1, 251), now=NOW)
    assert session.streak == 1


def test_custom_streak_threshold():
    session = record_round_result(
        _session(), _result(0, 100), SessionRules(streak_threshold=50), now=NOW,
    )
    assert session.streak == 1


def test_last_round_completes_session():
    session = _session(2)
    session = record_round_result(session, _result(0, 500), now=NOW)
    session = record_round_result(session, _result(1, 500), now=LATER)
    assert session.status == SessionStatus.COMPLETED
    assert session.started_at == NOW
    assert session.completed_at == LATER
    assert not session.ended_early
    assert session.next_round_kind is None


def test_record_after_completion_rejected():
    session = record_round_result(_session(1), _result(0, 500), now=NOW)
    with pytest.raises(InvalidRoundStateError):
        record_round_result(session, _result(1, 500), now=NOW)


def test_duplicate_round_rejected():
    session = _session()
    result = _result(0, 500)
    session = record_round_result(session, result, now=NOW)
    with pytest.raises(InvalidRoundStateError):
        record_round_result(session, result, now=NOW)


def test_out_of_order_round_rejected():
    with pytest.raises(InvalidRoundStateError):
        record_round_result(_session(), _result(1, 500), now=NOW)


def test_kind_mismatch_rejected():
    with pytest.raises(InvalidRoundStateError):
        record_round_result(_session(), _result(0, 500, kind=T), now=NOW)


def test_record_does_not_mutate_input():
    session = _session()
    record_round_result(session, _result(0, 900), now=NOW)
    assert session.total_score == 0
    assert session.results == ()


def test_end_early_marks_session():
    session = record_round_result(_session(), _result(0, 500), now=NOW)
    ended = end_game_session(session, now=LATER)
    assert ended.status == SessionStatus.COMPLETED
    assert ended.ended_early
    assert ended.rounds_remaining == 0
    assert ended.total_score == 500
    assert ended.completed_at == LATER


def test_end_is_idempotent():
    ended = end_game_session(_session(), now=LATER)
    assert end_game_session(ended, now=LATER) is ended
