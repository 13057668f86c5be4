"""Session Result Store — persists finalized GameSessions into game_scores / round_results.

Invariants:
    - One GameScore row per session (session_id unique); rounds written in play order
    - Any SQLAlchemy or DatabaseError is re-raised as PersistenceFailureError
    - Anonymous sessions are rejected here; the service never passes them in

Design Decisions:
    - Writes through the caller's AsyncSession so a route owns one unit of work
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from harbor_quest.core.errors import (
    DatabaseError, ErrorContext, PersistenceFailureError,
)
from harbor_quest.core.session_aggregator import GameSession
from harbor_quest.core.session_snapshot import session_to_snapshot
from harbor_quest.core.session_stats import compute_session_stats
from harbor_quest.models.game_score import GameScore
from harbor_quest.models.round_record import RoundRecord

logger = logging.getLogger(__name__)


def build_game_score(session: GameSession) -> GameScore:
    """Map a GameSession onto ORM rows. Pure apart from object construction."""
    stats = compute_session_stats(session)
    score = GameScore(
        session_id=session.id,
        user_id=session.user_id,
        game_type=session.game_type.value,
        language=session.config.language.value,
        score=session.total_score,
        rounds_completed=stats["rounds_played"],
        correct_count=stats["correct_count"],
        best_streak=session.best_streak,
        ended_early=session.ended_early,
        details=session_to_snapshot(session),
    )
    if session.completed_at is not None:
        score.completed_at = session.completed_at
    score.rounds = [
        RoundRecord(
            round_id=r.round_id,
            round_number=r.round_number,
            kind=r.kind.value,
            item_id=r.item_id,
            score=r.score,
            is_correct=r.is_correct,
            accuracy=r.accuracy,
            hints_used=r.hints_used,
            elapsed_s=r.elapsed_s,
            distance_m=r.distance_m,
            selected_answer_id=r.selected_answer_id,
            timed_out=r.timed_out,
        )
        for r in session.results
    ]
    return score


class SqlSessionResultStore:
    def __init__(self, db: AsyncSession):
        self._db = db

    async def persist_session_result(self, session: GameSession) -> None:
        ctx = ErrorContext(session_id=str(session.id))
        if session.user_id is None:
            raise PersistenceFailureError("anonymous sessions are not persisted", ctx)
        try:
            self._db.add(build_game_score(session))
            await self._db.commit()
        except (SQLAlchemyError, DatabaseError) as e:
            await self._db.rollback()
            logger.error(
                f"Failed to persist session result: {e}",
                extra={"session_id": session.id, "error_code": "PERSISTENCE_FAILURE"},
            )
            raise PersistenceFailureError(str(e), ctx) from e
