"""Game Registry — in-memory owner of every live game in this process.

Invariants:
    - Each ActiveGame is owned by exactly one registry entry (keyed by SessionId)
    - Every presented round id maps back to its session (for round-scoped operations)
    - At most one game per user: starting another discards the previous one
    - An ended game leaves the live maps; only its summary is kept, oldest dropped first
    - Games idle longer than the idle timeout are dropped by sweep_idle()

Design Decisions:
    - In-memory, not DB/Redis: single-process uvicorn, live rounds are cheap to lose
    - Held on app.state and injected via dependency, never a module-level global
"""

import asyncio
import logging
from collections import OrderedDict
from dataclasses import dataclass, field

from harbor_quest.core.catalog import Harbor, TriviaQuestion
from harbor_quest.core.domain_types import RoundId, SessionId, SessionStatus, UserId
from harbor_quest.core.errors import ResourceNotFoundError
from harbor_quest.core.location_round import LocationRoundState
from harbor_quest.core.session_aggregator import GameSession
from harbor_quest.core.trivia_round import TriviaRoundState

logger = logging.getLogger(__name__)

RoundState = LocationRoundState | TriviaRoundState

DEFAULT_SUMMARY_CAPACITY = 1000


@dataclass(frozen=True)
class SessionSummary:
    """Final view of a session plus the outcome of the save step."""
    session: GameSession
    stats: dict
    score_saved: bool
    save_error: str | None = None


@dataclass
class ActiveGame:
    """Mutable holder that swaps in new immutable core snapshots."""
    session: GameSession
    items: list[Harbor | TriviaQuestion]
    round: RoundState | None = None
    round_started_at: float | None = None
    summary: SessionSummary | None = None
    round_ids: list[RoundId] = field(default_factory=list)
    last_active: float = 0.0
    # held while the session is being finalized and saved
    end_lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)


class GameRegistry:
    def __init__(self, summary_capacity: int = DEFAULT_SUMMARY_CAPACITY) -> None:
        self._games: dict[SessionId, ActiveGame] = {}
        self._rounds: dict[RoundId, SessionId] = {}
        self._by_user: dict[UserId, SessionId] = {}
        self._summaries: OrderedDict[SessionId, SessionSummary] = OrderedDict()
        self._summary_capacity = summary_capacity

    def __len__(self) -> int:
        return len(self._games)

    @property
    def round_count(self) -> int:
        return len(self._rounds)

    def add(self, game: ActiveGame) -> None:
        user_id = game.session.user_id
        if user_id is not None:
            previous = self._by_user.get(user_id)
            if previous is not None and previous in self._games:
                old = self._games[previous]
                if old.session.status == SessionStatus.IN_PROGRESS:
                    logger.info(
                        "Discarding previous in-progress session",
                        extra={"session_id": previous, "user_id": user_id},
                    )
                self.discard(previous)
            self._by_user[user_id] = game.session.id
        self._games[game.session.id] = game

    def get(self, session_id: SessionId) -> ActiveGame:
        game = self._games.get(session_id)
        if game is None:
            raise ResourceNotFoundError("Session", str(session_id))
        return game

    def index_round(self, round_id: RoundId, session_id: SessionId) -> None:
        self._rounds[round_id] = session_id

    def by_round(self, round_id: RoundId) -> ActiveGame:
        session_id = self._rounds.get(round_id)
        if session_id is None or session_id not in self._games:
            raise ResourceNotFoundError("Round", str(round_id))
        return self._games[session_id]

    def discard(self, session_id: SessionId) -> None:
        """Forget a session and all its rounds. No-op for unknown ids."""
        game = self._games.pop(session_id, None)
        if game is None:
            return
        for round_id in game.round_ids:
            self._rounds.pop(round_id, None)
        user_id = game.session.user_id
        if user_id is not None and self._by_user.get(user_id) == session_id:
            del self._by_user[user_id]

    def finish(self, game: ActiveGame, summary: SessionSummary) -> None:
        """Drop an ended game from the live maps and keep its summary."""
        session_id = game.session.id
        self.discard(session_id)
        self._summaries[session_id] = summary
        self._summaries.move_to_end(session_id)
        while len(self._summaries) > self._summary_capacity:
            self._summaries.popitem(last=False)

    def summary(self, session_id: SessionId) -> SessionSummary | None:
        return self._summaries.get(session_id)

    def sweep_idle(self, now: float, idle_timeout_s: float) -> int:
        """Drop games untouched for longer than idle_timeout_s. Returns how many."""
        stale = [
            session_id for session_id, game in self._games.items()
            if now - game.last_active > idle_timeout_s and not game.end_lock.locked()
        ]
        for session_id in stale:
            self.discard(session_id)
        if stale:
            logger.info(f"Dropped {len(stale)} idle games")
        return len(stale)
