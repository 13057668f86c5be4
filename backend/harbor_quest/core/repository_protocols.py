"""Boundary Protocols — contracts between the game core and its collaborators.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Catalogs, identity, result persistence and score history are accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Async in Protocol: implementations do IO, but the pure round/session functions
      that consume their data are never async — the shell fetches before and saves after
"""

from typing import Protocol, Sequence

from harbor_quest.core.catalog import Harbor, TriviaQuestion
from harbor_quest.core.domain_types import Difficulty, Language, UserId
from harbor_quest.core.session_aggregator import GameSession


class HarborCatalog(Protocol):
    """Ordered harbors for a language, optionally limited to one difficulty tier."""
    async def fetch_harbors(
        self, language: Language, difficulty: Difficulty | None = None,
    ) -> Sequence[Harbor]: ...


class TriviaCatalog(Protocol):
    """Ordered trivia questions for a language, optionally limited to one tier."""
    async def fetch_questions(
        self, language: Language, difficulty: Difficulty | None = None,
    ) -> Sequence[TriviaQuestion]: ...


class IdentityProvider(Protocol):
    """Caller identity; None means an anonymous guest session."""
    def current_user_id(self) -> UserId | None: ...


class SessionResultStore(Protocol):
    """Saves a finished GameSession; raises PersistenceFailureError on failure."""
    async def persist_session_result(self, session: GameSession) -> None: ...


class ScoreHistory(Protocol):
    """A player's saved sessions, most recently completed first."""
    async def fetch_user_sessions(
        self, user_id: UserId, limit: int | None = None,
    ) -> Sequence[GameSession]: ...
