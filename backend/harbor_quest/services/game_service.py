"""Game Service — imperative shell that drives sessions and rounds end to end.

Invariants:
    - Catalogs are fetched once at session start; CatalogEmptyError aborts before any round exists
    - One round is active at a time; the next is presented only after the current one resolves
    - Every resolution goes core round controller → RoundResult → session aggregator, in that order
    - An unanswered trivia round past its time limit is resolved as a timeout on next access
    - Ending a session discards the active round; persistence failure never loses the summary
    - Ending persists at most once, even for concurrent end calls; the game then leaves the registry

Design Decisions:
    - Clocks and RNG injected: elapsed time, timestamps and catalog order are deterministic in tests
    - Round-scoped operations take only a RoundId (the registry maps it back to its session)
"""

import logging
import random
import time
from datetime import datetime, timezone
from typing import Callable, Sequence
from uuid import uuid4

from harbor_quest.core.catalog import Harbor, TriviaQuestion, select_catalog_items
from harbor_quest.core.domain_types import (
    AnswerId, RoundId, RoundKind, RoundStatus, SessionId, SessionStatus,
)
from harbor_quest.core.errors import (
    ErrorContext, InvalidRoundStateError, PersistenceFailureError,
)
from harbor_quest.core.geo import Coordinate
from harbor_quest.core.hint_ladder import HintStep
from harbor_quest.core.location_round import (
    LocationRoundState, present_location_round, request_hint, resolve_location_round,
    submit_guess,
)
from harbor_quest.core.repository_protocols import (
    HarborCatalog, IdentityProvider, SessionResultStore, TriviaCatalog,
)
from harbor_quest.core.round_result import RoundResult
from harbor_quest.core.scoring import DEFAULT_RULES, ScoringRules
from harbor_quest.core.session_aggregator import (
    GameSession, SessionConfig, SessionRules, end_game_session, plan_round_kinds,
    record_round_result, start_game_session,
)
from harbor_quest.core.session_stats import compute_session_stats
from harbor_quest.core.trivia_round import (
    TriviaRoundState, expire_trivia_round, is_timed_out, present_trivia_round,
    resolve_trivia_round, submit_answer,
)
from harbor_quest.services.game_registry import ActiveGame, GameRegistry, SessionSummary

logger = logging.getLogger(__name__)

DEFAULT_HINT_SCHEDULE: tuple[int, ...] = (50, 100, 150, 200, 250)
DEFAULT_IDLE_TIMEOUT_S = 3600.0


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class GameService:
    """Drives one process's games: start, hint, guess, answer, timeout, end."""

    def __init__(
        self,
        registry: GameRegistry,
        harbor_catalog: HarborCatalog,
        trivia_catalog: TriviaCatalog,
        result_store: SessionResultStore,
        scoring_rules: ScoringRules = DEFAULT_RULES,
        session_rules: SessionRules = SessionRules(),
        hint_schedule: Sequence[int] = DEFAULT_HINT_SCHEDULE,
        clock: Callable[[], float] = time.monotonic,
        rng: random.Random | None = None,
        wall_clock: Callable[[], datetime] = utc_now,
        idle_timeout_s: float = DEFAULT_IDLE_TIMEOUT_S,
    ):
        self._registry = registry
        self._harbors = harbor_catalog
        self._trivia = trivia_catalog
        self._store = result_store
        self._scoring = scoring_rules
        self._session_rules = session_rules
        self._hint_schedule = tuple(hint_schedule)
        self._clock = clock
        self._rng = rng or random.Random()
        self._wall_clock = wall_clock
        self._idle_timeout_s = idle_timeout_s

    # ─── Session lifecycle ───────────────────────────────────────

    async def start_session(
        self, config: SessionConfig, identity: IdentityProvider,
    ) -> ActiveGame:
        """Fetch catalogs, plan rounds and present the first one."""
        self._registry.sweep_idle(self._clock(), self._idle_timeout_s)
        session = start_game_session(
            SessionId(uuid4()), config, identity.current_user_id(),
            self._session_rules, now=self._wall_clock(),
        )
        items = await self._select_items(config, plan_round_kinds(config))
        game = ActiveGame(session=session, items=items, last_active=self._clock())
        self._registry.add(game)
        self._present(game)
        logger.info(
            f"Session started: {len(items)} rounds, {session.game_type.value}",
            extra={"session_id": session.id, "user_id": session.user_id},
        )
        return game

    def get_game(self, session_id: SessionId) -> ActiveGame:
        game = self._registry.get(session_id)
        game.last_active = self._clock()
        self._settle_timeout(game)
        return game

    def present_next_round(self, session_id: SessionId) -> ActiveGame:
        game = self.get_game(session_id)
        if game.session.status == SessionStatus.COMPLETED:
            raise InvalidRoundStateError(
                "present the next round", "session completed",
                ErrorContext(session_id=str(session_id)),
            )
        if game.round is not None and game.round.status == RoundStatus.ACTIVE:
            raise InvalidRoundStateError(
                "present the next round", game.round.phase.value,
                ErrorContext(session_id=str(session_id), round_id=str(game.round.round_id)),
            )
        self._present(game)
        return game

    async def end_session(self, session_id: SessionId) -> SessionSummary:
        """Finalize, persist once, and return the summary. Idempotent."""
        finished = self._registry.summary(session_id)
        if finished is not None:
            return finished
        game = self.get_game(session_id)
        async with game.end_lock:
            if game.summary is None:
                game.summary = await self._finalize(game)
                self._registry.finish(game, game.summary)
        return game.summary

    async def _finalize(self, game: ActiveGame) -> SessionSummary:
        session_id = game.session.id
        if game.round is not None and game.round.status == RoundStatus.ACTIVE:
            logger.info(
                "Discarding active round on session end",
                extra={"session_id": session_id, "round_id": game.round.round_id},
            )
            game.round = None
            game.round_started_at = None
        session = end_game_session(game.session, now=self._wall_clock())
        game.session = session

        saved, save_error = False, None
        if session.user_id is None:
            logger.info(
                "Anonymous session, result not persisted",
                extra={"session_id": session_id},
            )
        else:
            try:
                await self._store.persist_session_result(session)
                saved = True
            except PersistenceFailureError as e:
                save_error = e.message
                logger.warning(
                    f"Score not saved: {e.message}",
                    extra={"session_id": session_id, "error_code": e.code},
                )

        logger.info(
            "Session ended",
            extra={"session_id": session_id, "score": session.total_score},
        )
        return SessionSummary(
            session=session, stats=compute_session_stats(session),
            score_saved=saved, save_error=save_error,
        )

    # ─── Round operations ────────────────────────────────────────

    def session_for_round(self, round_id: RoundId) -> GameSession:
        return self._registry.by_round(round_id).session

    def round_state(self, round_id: RoundId) -> LocationRoundState | TriviaRoundState:
        """Current snapshot of a round that is still the session's live round."""
        game = self._registry.by_round(round_id)
        if game.round is None or game.round.round_id != round_id:
            raise InvalidRoundStateError(
                "inspect the round", "resolved",
                ErrorContext(session_id=str(game.session.id), round_id=str(round_id)),
            )
        return game.round

    def request_hint(self, round_id: RoundId) -> HintStep | None:
        game, state = self._active_round(round_id, RoundKind.LOCATION, "request a hint")
        state, step = request_hint(state)
        game.round = state
        return step

    def submit_guess(self, round_id: RoundId, guess: Coordinate) -> RoundResult:
        game, state = self._active_round(round_id, RoundKind.LOCATION, "submit a guess")
        state = submit_guess(state, guess)
        state, result = resolve_location_round(state, self._elapsed(game), self._scoring)
        return self._record(game, state, result)

    def submit_answer(self, round_id: RoundId, answer_id: AnswerId) -> RoundResult:
        game, state = self._active_round(round_id, RoundKind.TRIVIA, "submit an answer")
        elapsed = self._elapsed(game)
        if is_timed_out(state, elapsed):
            state, result = expire_trivia_round(state, self._scoring)
        else:
            state = submit_answer(state, answer_id, elapsed)
            state, result = resolve_trivia_round(state, self._scoring)
        return self._record(game, state, result)

    def expire_round(self, round_id: RoundId) -> RoundResult:
        """Resolve a trivia round whose time limit has been reached."""
        game, state = self._active_round(round_id, RoundKind.TRIVIA, "time out the round")
        if self._elapsed(game) < state.time_limit_s:
            raise InvalidRoundStateError(
                "time out the round", "time remaining",
                ErrorContext(round_id=str(round_id)),
            )
        state, result = expire_trivia_round(state, self._scoring)
        return self._record(game, state, result)

    # ─── Internals ───────────────────────────────────────────────

    async def _select_items(
        self, config: SessionConfig, kinds: tuple[RoundKind, ...],
    ) -> list[Harbor | TriviaQuestion]:
        harbors: list = []
        questions: list = []
        location_count = kinds.count(RoundKind.LOCATION)
        trivia_count = kinds.count(RoundKind.TRIVIA)
        if location_count:
            catalog = await self._harbors.fetch_harbors(config.language, config.difficulty)
            harbors = select_catalog_items(
                catalog, location_count, self._rng, "harbors", config.difficulty,
            )
        if trivia_count:
            catalog = await self._trivia.fetch_questions(config.language, config.difficulty)
            questions = select_catalog_items(
                catalog, trivia_count, self._rng, "trivia questions", config.difficulty,
            )
        harbor_iter, question_iter = iter(harbors), iter(questions)
        return [
            next(harbor_iter) if kind == RoundKind.LOCATION else next(question_iter)
            for kind in kinds
        ]

    def _present(self, game: ActiveGame) -> None:
        session = game.session
        number = session.rounds_resolved
        round_id = RoundId(uuid4())
        item = game.items[number]
        if session.planned_kinds[number] == RoundKind.LOCATION:
            game.round = present_location_round(round_id, number, item, self._hint_schedule)
        else:
            game.round = present_trivia_round(
                round_id, number, item, self._scoring.trivia_time_limit_s,
            )
        game.round_started_at = self._clock()
        game.round_ids.append(round_id)
        self._registry.index_round(round_id, session.id)

    def _active_round(self, round_id: RoundId, kind: RoundKind, operation: str):
        game = self._registry.by_round(round_id)
        game.last_active = self._clock()
        ctx = ErrorContext(session_id=str(game.session.id), round_id=str(round_id))
        state = game.round
        if state is None or state.round_id != round_id:
            raise InvalidRoundStateError(operation, "resolved", ctx)
        expected = LocationRoundState if kind == RoundKind.LOCATION else TriviaRoundState
        if not isinstance(state, expected):
            other = RoundKind.TRIVIA if kind == RoundKind.LOCATION else RoundKind.LOCATION
            raise InvalidRoundStateError(operation, f"a {other.value} round", ctx)
        if state.status == RoundStatus.RESOLVED:
            raise InvalidRoundStateError(operation, state.phase.value, ctx)
        return game, state

    def _elapsed(self, game: ActiveGame) -> float:
        if game.round_started_at is None:
            return 0.0
        return max(0.0, self._clock() - game.round_started_at)

    def _settle_timeout(self, game: ActiveGame) -> None:
        state = game.round
        if (
            isinstance(state, TriviaRoundState)
            and state.status == RoundStatus.ACTIVE
            and game.session.status == SessionStatus.IN_PROGRESS
            and is_timed_out(state, self._elapsed(game))
        ):
            state, result = expire_trivia_round(state, self._scoring)
            self._record(game, state, result)

    def _record(self, game: ActiveGame, state, result: RoundResult) -> RoundResult:
        game.round = state
        game.session = record_round_result(
            game.session, result, self._session_rules, now=self._wall_clock(),
        )
        logger.info(
            f"Round {result.round_number} resolved ({result.kind.value})"
            + (" by timeout" if result.timed_out else ""),
            extra={
                "session_id": game.session.id, "round_id": result.round_id,
                "score": result.score, "hints_used": result.hints_used,
            },
        )
        return result
