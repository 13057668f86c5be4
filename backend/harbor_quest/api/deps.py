"""API Dependencies — per-request wiring of the game service and caller identity.

Invariants:
    - The GameRegistry lives on app.state; every request sees the same instance
    - A GameService is built per request around that request's AsyncSession
    - X-User-Id absent or blank means an anonymous (never persisted) session
"""

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from harbor_quest.config import get_settings
from harbor_quest.core.domain_types import UserId
from harbor_quest.infrastructure.database import get_db
from harbor_quest.infrastructure.result_store import SqlSessionResultStore
from harbor_quest.infrastructure.sql_catalog import SqlHarborCatalog, SqlTriviaCatalog
from harbor_quest.services.game_registry import GameRegistry
from harbor_quest.services.game_service import GameService


class HeaderIdentity:
    """IdentityProvider fed by the X-User-Id header of the external auth layer."""

    def __init__(self, user_id: str | None):
        self._user_id = user_id.strip() if user_id else None

    def current_user_id(self) -> UserId | None:
        return UserId(self._user_id) if self._user_id else None


def get_identity(
    x_user_id: str | None = Header(None, max_length=100),
) -> HeaderIdentity:
    return HeaderIdentity(x_user_id)


def get_game_registry(request: Request) -> GameRegistry:
    return request.app.state.game_registry


def get_game_service(
    registry: GameRegistry = Depends(get_game_registry),
    db: AsyncSession = Depends(get_db),
) -> GameService:
    settings = get_settings()
    return GameService(
        registry=registry,
        harbor_catalog=SqlHarborCatalog(db),
        trivia_catalog=SqlTriviaCatalog(db),
        result_store=SqlSessionResultStore(db),
        scoring_rules=settings.scoring_rules(),
        session_rules=settings.session_rules(),
        hint_schedule=settings.hint_penalty_schedule,
        idle_timeout_s=settings.game_idle_timeout_seconds,
    )
