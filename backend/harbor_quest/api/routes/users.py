"""Player History — a user's saved scores and achievement progress.

Invariants:
    - Only persisted sessions count; anonymous play leaves no history
    - Achievements are recomputed from the full history on every request
    - An unknown user gets an empty history and all achievements locked (200, not 404)
"""

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from harbor_quest.api.routes.game_views import achievement_view, history_entry_view
from harbor_quest.core.achievements import evaluate_achievements
from harbor_quest.core.domain_types import UserId
from harbor_quest.infrastructure.database import get_db
from harbor_quest.infrastructure.score_history import SqlScoreHistory
from harbor_quest.schemas.game import AchievementResponse, UserScoreEntry

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("/{user_id}/scores", response_model=list[UserScoreEntry])
async def get_user_scores(
    user_id: str = Path(..., min_length=1, max_length=100),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """Most recent saved sessions first."""
    sessions = await SqlScoreHistory(db).fetch_user_sessions(UserId(user_id), limit)
    return [history_entry_view(s) for s in sessions]


@router.get("/{user_id}/achievements", response_model=list[AchievementResponse])
async def get_user_achievements(
    user_id: str = Path(..., min_length=1, max_length=100),
    db: AsyncSession = Depends(get_db),
):
    sessions = await SqlScoreHistory(db).fetch_user_sessions(UserId(user_id))
    return [achievement_view(p) for p in evaluate_achievements(sessions)]
