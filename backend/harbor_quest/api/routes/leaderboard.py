"""Leaderboard — top persisted session scores.

Invariants:
    - Ordered by score descending; ties go to the earliest completion
    - Only persisted (identified) sessions appear; anonymous play never does
"""

from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from harbor_quest.infrastructure.database import get_db
from harbor_quest.models.game_score import GameScore
from harbor_quest.schemas.game import LeaderboardEntry

router = APIRouter(prefix="/api/v1/leaderboard", tags=["leaderboard"])


@router.get("", response_model=list[LeaderboardEntry])
async def get_leaderboard(
    game_type: Literal["location", "trivia", "mixed"] | None = Query(None),
    language: Literal["fi", "en", "sv"] | None = Query(None),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    query = select(GameScore).order_by(
        GameScore.score.desc(), GameScore.completed_at.asc(),
    )
    if game_type:
        query = query.where(GameScore.game_type == game_type)
    if language:
        query = query.where(GameScore.language == language)
    result = await db.execute(query.limit(limit))
    return [
        LeaderboardEntry(
            rank=i,
            user_id=row.user_id,
            score=row.score,
            game_type=row.game_type,
            language=row.language,
            rounds_completed=row.rounds_completed,
            correct_count=row.correct_count,
            completed_at=row.completed_at,
        )
        for i, row in enumerate(result.scalars().all(), start=1)
    ]
