"""Session Aggregator — composes resolved rounds into one GameSession.

Invariants:
    - Only RoundResults are consumed; the aggregator never resolves a round itself
    - Results are appended in round order; a round id is recorded at most once
    - streak increments when score > streak_threshold (strict) and resets to 0 otherwise
    - total_score == sum of recorded scores; an active round contributes nothing
    - A Completed session is final: recording into it raises InvalidRoundStateError

Design Decisions:
    - GameSession is a frozen snapshot; each recorded result produces a new one
      (ADR: explicit handle passed around, no module-level "current session")
    - Ending early truncates at the last resolved round — no partial-round results
    - Timestamps come from the caller (now=...), the aggregator never reads a clock
"""

from dataclasses import dataclass, replace
from datetime import datetime

from harbor_quest.core.domain_types import (
    Difficulty, GameType, Language, RoundKind, RoundTypeMix, SessionId, SessionStatus,
    UserId,
)
from harbor_quest.core.errors import InvalidInputError, InvalidRoundStateError
from harbor_quest.core.round_result import RoundResult


@dataclass(frozen=True)
class SessionRules:
    streak_threshold: int = 250
    max_round_count: int = 20


@dataclass(frozen=True)
class SessionConfig:
    """Composition of a session: how many rounds, which kinds, which catalog slice."""
    round_count: int = 5
    difficulty: Difficulty | None = None
    round_type_mix: RoundTypeMix = RoundTypeMix.LOCATION
    round_kinds: tuple[RoundKind, ...] | None = None
    language: Language = Language.FI

    def __post_init__(self) -> None:
        if self.round_count < 1:
            raise InvalidInputError(
                f"round_count must be >= 1, got {self.round_count}", "round_count",
            )
        if self.round_kinds is not None and len(self.round_kinds) != self.round_count:
            raise InvalidInputError(
                f"round_kinds lists {len(self.round_kinds)} rounds "
                f"but round_count is {self.round_count}",
                "round_kinds",
            )


@dataclass(frozen=True)
class GameSession:
    id: SessionId
    config: SessionConfig
    planned_kinds: tuple[RoundKind, ...]
    started_at: datetime
    user_id: UserId | None = None
    results: tuple[RoundResult, ...] = ()
    total_score: int = 0
    streak: int = 0
    best_streak: int = 0
    status: SessionStatus = SessionStatus.IN_PROGRESS
    ended_early: bool = False
    completed_at: datetime | None = None

    @property
    def rounds_resolved(self) -> int:
        return len(self.results)

    @property
    def rounds_remaining(self) -> int:
        if self.status == SessionStatus.COMPLETED:
            return 0
        return len(self.planned_kinds) - len(self.results)

    @property
    def next_round_kind(self) -> RoundKind | None:
        if self.rounds_remaining == 0:
            return None
        return self.planned_kinds[len(self.results)]

    @property
    def game_type(self) -> GameType:
        return game_type_for(self.planned_kinds)


def plan_round_kinds(config: SessionConfig) -> tuple[RoundKind, ...]:
    """Expand the configured mix into one RoundKind per round."""
    if config.round_kinds is not None:
        return tuple(config.round_kinds)
    if config.round_type_mix == RoundTypeMix.LOCATION:
        return (RoundKind.LOCATION,) * config.round_count
    if config.round_type_mix == RoundTypeMix.TRIVIA:
        return (RoundKind.TRIVIA,) * config.round_count
    return tuple(
        RoundKind.LOCATION if i % 2 == 0 else RoundKind.TRIVIA
        for i in range(config.round_count)
    )


def game_type_for(kinds: tuple[RoundKind, ...]) -> GameType:
    distinct = set(kinds)
    if distinct == {RoundKind.LOCATION}:
        return GameType.LOCATION
    if distinct == {RoundKind.TRIVIA}:
        return GameType.TRIVIA
    return GameType.MIXED


def start_game_session(
    session_id: SessionId, config: SessionConfig, user_id: UserId | None = None,
    rules: SessionRules = SessionRules(), *, now: datetime,
) -> GameSession:
    if config.round_count > rules.max_round_count:
        raise InvalidInputError(
            f"round_count must be <= {rules.max_round_count}, got {config.round_count}",
            "round_count",
        )
    return GameSession(
        id=session_id, config=config, planned_kinds=plan_round_kinds(config),
        started_at=now, user_id=user_id,
    )


def record_round_result(
    session: GameSession, result: RoundResult, rules: SessionRules = SessionRules(),
    *, now: datetime,
) -> GameSession:
    """Append a resolved round, update totals and streak, complete when all rounds are in."""
    if session.status == SessionStatus.COMPLETED:
        raise InvalidRoundStateError("record a round result", "session completed")
    if any(r.round_id == result.round_id for r in session.results):
        raise InvalidRoundStateError("record a round result twice", "resolved")
    expected = len(session.results)
    if result.round_number != expected:
        raise InvalidRoundStateError(
            f"record round {result.round_number}", f"awaiting round {expected}",
        )
    if result.kind != session.planned_kinds[expected]:
        raise InvalidRoundStateError(
            f"record a {result.kind.value} result",
            f"awaiting a {session.planned_kinds[expected].value} round",
        )

    streak = session.streak + 1 if result.score > rules.streak_threshold else 0
    results = session.results + (result,)
    updated = replace(
        session,
        results=results,
        total_score=session.total_score + result.score,
        streak=streak,
        best_streak=max(session.best_streak, streak),
    )
    if len(results) == len(session.planned_kinds):
        updated = replace(updated, status=SessionStatus.COMPLETED, completed_at=now)
    return updated


def end_game_session(session: GameSession, *, now: datetime) -> GameSession:
    """Finalize the session. Idempotent on an already-completed session."""
    if session.status == SessionStatus.COMPLETED:
        return session
    return replace(
        session,
        status=SessionStatus.COMPLETED,
        ended_early=len(session.results) < len(session.planned_kinds),
        completed_at=now,
    )
