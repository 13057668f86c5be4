"""Game Service — session/round orchestration over fake catalogs, store and clock.

Invariants:
    - Every resolution flows round controller → RoundResult → session aggregator
    - Late trivia answers and unattended trivia rounds resolve as timeouts
    - Persistence failure is reported in the summary, never raised
"""

import asyncio
import random
from datetime import timedelta

import pytest

from harbor_quest.core.domain_types import (
    AnswerId, Difficulty, Language, RoundKind, RoundStatus, RoundTypeMix, SessionStatus,
    UserId,
)
from harbor_quest.core.errors import (
    CatalogEmptyError, InvalidInputError, InvalidRoundStateError, ResourceNotFoundError,
)
from harbor_quest.core.geo import Coordinate
from harbor_quest.core.location_round import LocationRoundState
from harbor_quest.core.session_aggregator import SessionConfig
from harbor_quest.core.trivia_round import TriviaRoundState
from harbor_quest.services.game_registry import GameRegistry
from harbor_quest.services.game_service import GameService
from tests.services.fakes import (
    EPOCH, FakeHarborCatalog, FakeResultStore, FakeTriviaCatalog, FixedIdentity,
)

HELSINKI = Coordinate(60.1699, 24.9384)
FAR_AWAY = Coordinate(0.0, 0.0)


@pytest.fixture
def registry():
    return GameRegistry()


@pytest.fixture
def store():
    return FakeResultStore()


@pytest.fixture
def harbor_catalog(make_harbor):
    return FakeHarborCatalog([make_harbor()])


@pytest.fixture
def service(registry, store, harbor_catalog, make_question, fake_clock):
    return GameService(
        registry=registry,
        harbor_catalog=harbor_catalog,
        trivia_catalog=FakeTriviaCatalog([make_question()]),
        result_store=store,
        hint_schedule=[50, 100, 150],
        clock=fake_clock,
        rng=random.Random(3),
        wall_clock=fake_clock.wall,
        idle_timeout_s=600.0,
    )


def _config(round_count=2, **kwargs):
    return SessionConfig(round_count=round_count, **kwargs)


USER = FixedIdentity(UserId("sailor-1"))


async def test_start_presents_first_round(service, registry):
    game = await service.start_session(_config(), USER)
    assert isinstance(game.round, LocationRoundState)
    assert game.round.round_number == 0
    assert game.session.user_id == "sailor-1"
    assert registry.get(game.session.id) is game


async def test_empty_catalog_aborts_start(service, registry):
    with pytest.raises(CatalogEmptyError):
        await service.start_session(_config(language=Language.EN), USER)
    assert len(registry) == 0


async def test_difficulty_passed_to_catalog(service, harbor_catalog):
    with pytest.raises(CatalogEmptyError):
        await service.start_session(_config(difficulty=Difficulty.HARD), USER)
    assert harbor_catalog.calls == [(Language.FI, Difficulty.HARD)]


async def test_round_count_above_max_rejected(service):
    with pytest.raises(InvalidInputError):
        await service.start_session(_config(round_count=21), USER)


async def test_full_location_game(service, store):
    game = await service.start_session(_config(), USER)
    result = service.submit_guess(game.round.round_id, HELSINKI)
    assert result.score == 1000
    assert result.is_correct

    service.present_next_round(game.session.id)
    assert game.round.round_number == 1
    service.submit_guess(game.round.round_id, HELSINKI)
    assert game.session.status == SessionStatus.COMPLETED
    assert game.session.total_score == 2000

    summary = await service.end_session(game.session.id)
    assert summary.score_saved
    assert not summary.session.ended_early
    assert summary.stats["rounds_played"] == 2
    assert len(store.saved) == 1


async def test_next_round_requires_resolved_round(service):
    game = await service.start_session(_config(), USER)
    with pytest.raises(InvalidRoundStateError):
        service.present_next_round(game.session.id)


async def test_next_round_after_completion_rejected(service):
    game = await service.start_session(_config(round_count=1), USER)
    service.submit_guess(game.round.round_id, HELSINKI)
    with pytest.raises(InvalidRoundStateError):
        service.present_next_round(game.session.id)


async def test_hints_until_exhausted(service):
    game = await service.start_session(_config(round_count=1), USER)
    round_id = game.round.round_id
    penalties = [service.request_hint(round_id).penalty for _ in range(3)]
    assert penalties == [50, 100, 150]
    assert service.request_hint(round_id) is None
    result = service.submit_guess(round_id, HELSINKI)
    assert result.hints_used == 3
    assert result.score == 700


async def test_guess_twice_rejected(service):
    game = await service.start_session(_config(), USER)
    round_id = game.round.round_id
    service.submit_guess(round_id, HELSINKI)
    with pytest.raises(InvalidRoundStateError):
        service.submit_guess(round_id, HELSINKI)
    with pytest.raises(InvalidRoundStateError):
        service.request_hint(round_id)


async def test_unknown_round_is_not_found(service):
    from uuid import uuid4
    with pytest.raises(ResourceNotFoundError):
        service.request_hint(uuid4())


async def test_answer_on_location_round_rejected(service):
    game = await service.start_session(_config(), USER)
    with pytest.raises(InvalidRoundStateError):
        service.submit_answer(game.round.round_id, AnswerId("1"))


async def test_mixed_game_alternates(service):
    game = await service.start_session(
        _config(round_count=3, round_type_mix=RoundTypeMix.MIXED), USER,
    )
    service.submit_guess(game.round.round_id, HELSINKI)
    service.present_next_round(game.session.id)
    assert isinstance(game.round, TriviaRoundState)
    assert game.session.next_round_kind == RoundKind.TRIVIA


async def test_trivia_answer_scores_with_time_bonus(service, fake_clock):
    game = await service.start_session(_config(round_kinds=(RoundKind.TRIVIA,) * 2), USER)
    fake_clock.advance(4.0)
    result = service.submit_answer(game.round.round_id, AnswerId("1"))
    assert result.is_correct
    assert result.elapsed_s == 4.0
    assert result.score == 867


async def test_late_answer_resolves_as_timeout(service, fake_clock):
    game = await service.start_session(_config(round_kinds=(RoundKind.TRIVIA,) * 2), USER)
    fake_clock.advance(16.0)
    result = service.submit_answer(game.round.round_id, AnswerId("1"))
    assert result.timed_out
    assert result.score == 0
    assert result.selected_answer_id is None


async def test_timeout_before_limit_rejected(service, fake_clock):
    game = await service.start_session(_config(round_kinds=(RoundKind.TRIVIA,) * 2), USER)
    fake_clock.advance(5.0)
    with pytest.raises(InvalidRoundStateError):
        service.expire_round(game.round.round_id)
    fake_clock.advance(10.0)
    result = service.expire_round(game.round.round_id)
    assert result.timed_out


async def test_unattended_trivia_round_settles_on_access(service, fake_clock):
    game = await service.start_session(_config(round_kinds=(RoundKind.TRIVIA,) * 2), USER)
    fake_clock.advance(30.0)
    game = service.get_game(game.session.id)
    assert game.round.status == RoundStatus.RESOLVED
    assert game.session.results[0].timed_out


async def test_streak_builds_then_resets(service):
    game = await service.start_session(_config(round_count=4), USER)
    for guess in (HELSINKI, HELSINKI, HELSINKI):
        service.submit_guess(game.round.round_id, guess)
        service.present_next_round(game.session.id)
    assert game.session.streak == 3
    service.submit_guess(game.round.round_id, FAR_AWAY)
    assert game.session.streak == 0
    assert game.session.best_streak == 3


async def test_end_mid_round_discards_active_round(service, store):
    game = await service.start_session(_config(round_count=3), USER)
    service.submit_guess(game.round.round_id, HELSINKI)
    service.present_next_round(game.session.id)
    summary = await service.end_session(game.session.id)
    assert summary.session.ended_early
    assert summary.session.rounds_resolved == 1
    assert summary.session.total_score == 1000
    assert game.round is None
    assert store.saved[0].ended_early


async def test_end_is_idempotent(service, store):
    game = await service.start_session(_config(), USER)
    first = await service.end_session(game.session.id)
    second = await service.end_session(game.session.id)
    assert second is first
    assert len(store.saved) == 1


async def test_persistence_failure_keeps_summary(service, store):
    store.fail = True
    game = await service.start_session(_config(round_count=1), USER)
    service.submit_guess(game.round.round_id, HELSINKI)
    summary = await service.end_session(game.session.id)
    assert not summary.score_saved
    assert "connection refused" in summary.save_error
    assert summary.session.total_score == 1000


async def test_anonymous_session_not_persisted(service, store):
    game = await service.start_session(_config(round_count=1), FixedIdentity())
    service.submit_guess(game.round.round_id, HELSINKI)
    summary = await service.end_session(game.session.id)
    assert not summary.score_saved
    assert summary.save_error is None
    assert store.saved == []


async def test_new_session_replaces_users_previous_one(service, registry):
    first = await service.start_session(_config(), USER)
    second = await service.start_session(_config(), USER)
    assert registry.get(second.session.id) is second
    with pytest.raises(ResourceNotFoundError):
        registry.get(first.session.id)
    with pytest.raises(ResourceNotFoundError):
        registry.by_round(first.round.round_id)


async def test_session_timestamps_come_from_wall_clock(service, fake_clock):
    game = await service.start_session(_config(round_count=1), USER)
    assert game.session.started_at == EPOCH
    fake_clock.advance(42.0)
    service.submit_guess(game.round.round_id, HELSINKI)
    assert game.session.completed_at == EPOCH + timedelta(seconds=42)


async def test_concurrent_end_persists_once(registry, harbor_catalog, make_question, fake_clock):
    store = FakeResultStore(delay_s=0.01)
    service = GameService(
        registry=registry, harbor_catalog=harbor_catalog,
        trivia_catalog=FakeTriviaCatalog([make_question()]), result_store=store,
        clock=fake_clock, wall_clock=fake_clock.wall, rng=random.Random(3),
    )
    game = await service.start_session(_config(round_count=1), USER)
    service.submit_guess(game.round.round_id, HELSINKI)

    first, second = await asyncio.gather(
        service.end_session(game.session.id), service.end_session(game.session.id),
    )
    assert store.calls == 1
    assert first is second
    assert first.score_saved


async def test_ended_game_leaves_registry(service, registry):
    game = await service.start_session(_config(), USER)
    round_id = game.round.round_id
    summary = await service.end_session(game.session.id)

    assert len(registry) == 0
    assert registry.round_count == 0
    assert registry.summary(game.session.id) is summary
    with pytest.raises(ResourceNotFoundError):
        service.get_game(game.session.id)
    with pytest.raises(ResourceNotFoundError):
        service.submit_guess(round_id, HELSINKI)


async def test_many_guest_games_do_not_accumulate(service, registry):
    for _ in range(50):
        game = await service.start_session(_config(round_count=1), FixedIdentity())
        service.submit_guess(game.round.round_id, HELSINKI)
        await service.end_session(game.session.id)
    assert len(registry) == 0
    assert registry.round_count == 0


async def test_end_after_eviction_returns_kept_summary(service, store):
    game = await service.start_session(_config(), USER)
    first = await service.end_session(game.session.id)
    assert await service.end_session(game.session.id) is first
    assert store.calls == 1


async def test_summary_store_is_bounded(harbor_catalog, make_question, fake_clock):
    registry = GameRegistry(summary_capacity=2)
    service = GameService(
        registry=registry, harbor_catalog=harbor_catalog,
        trivia_catalog=FakeTriviaCatalog([make_question()]),
        result_store=FakeResultStore(), clock=fake_clock, wall_clock=fake_clock.wall,
    )
    ids = []
    for _ in range(3):
        game = await service.start_session(_config(round_count=1), FixedIdentity())
        await service.end_session(game.session.id)
        ids.append(game.session.id)
    assert registry.summary(ids[0]) is None
    assert registry.summary(ids[2]) is not None


async def test_idle_games_swept_on_next_start(service, registry, fake_clock):
    idle = await service.start_session(_config(), FixedIdentity())
    active = await service.start_session(_config(), FixedIdentity(UserId("sailor-2")))
    fake_clock.advance(500.0)
    service.request_hint(active.round.round_id)
    fake_clock.advance(200.0)

    await service.start_session(_config(), USER)
    assert len(registry) == 2
    with pytest.raises(ResourceNotFoundError):
        registry.get(idle.session.id)
    assert registry.get(active.session.id) is active
