"""SQL Score History — a player's saved sessions rebuilt from game_scores snapshots.

Invariants:
    - Sessions come back most recently completed first
    - Rows whose snapshot cannot be restored are skipped and logged, never served
"""

import logging
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import noload

from harbor_quest.core.domain_types import UserId
from harbor_quest.core.errors import HarborQuestError
from harbor_quest.core.session_aggregator import GameSession
from harbor_quest.core.session_snapshot import session_from_snapshot
from harbor_quest.models.game_score import GameScore

logger = logging.getLogger(__name__)


class SqlScoreHistory:
    def __init__(self, db: AsyncSession):
        self._db = db

    async def fetch_user_sessions(
        self, user_id: UserId, limit: int | None = None,
    ) -> Sequence[GameSession]:
        query = (
            select(GameScore)
            .options(noload(GameScore.rounds))
            .where(GameScore.user_id == user_id)
            .order_by(GameScore.completed_at.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        result = await self._db.execute(query)
        sessions = []
        for row in result.scalars().all():
            try:
                sessions.append(session_from_snapshot(row.details))
            except (HarborQuestError, KeyError, TypeError, ValueError) as e:
                logger.warning(
                    f"Skipping unreadable score snapshot: {e}",
                    extra={"session_id": row.session_id, "user_id": user_id},
                )
        return sessions
