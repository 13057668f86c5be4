"""Game Sessions — start, inspect, advance and end a play session.

Invariants:
    - round_count defaults to settings.default_round_count (or len(round_kinds))
    - next-round only after the current round resolved (409 otherwise)
    - end is idempotent; a failed save still returns 200 with score_saved=false
    - an ended session is no longer live: GET returns 404, end returns the kept summary
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status

from harbor_quest.api.deps import HeaderIdentity, get_game_service, get_identity
from harbor_quest.api.routes.game_views import session_view, summary_view
from harbor_quest.config import get_settings
from harbor_quest.core.domain_types import (
    Difficulty, Language, RoundKind, RoundTypeMix, SessionId,
)
from harbor_quest.core.session_aggregator import SessionConfig
from harbor_quest.schemas.game import (
    SessionCreate, SessionResponse, SessionSummaryResponse,
)
from harbor_quest.services.game_service import GameService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/sessions", tags=["sessions"])


def session_config_from(body: SessionCreate, default_round_count: int) -> SessionConfig:
    """Translate the request body into the core SessionConfig."""
    round_kinds = (
        tuple(RoundKind(k) for k in body.round_kinds) if body.round_kinds else None
    )
    if body.round_count is not None:
        round_count = body.round_count
    elif round_kinds is not None:
        round_count = len(round_kinds)
    else:
        round_count = default_round_count
    return SessionConfig(
        round_count=round_count,
        difficulty=Difficulty(body.difficulty) if body.difficulty else None,
        round_type_mix=RoundTypeMix(body.round_type_mix),
        round_kinds=round_kinds,
        language=Language(body.language),
    )


@router.post(
    "", response_model=SessionResponse, status_code=status.HTTP_201_CREATED,
)
async def create_session(
    body: SessionCreate,
    identity: HeaderIdentity = Depends(get_identity),
    service: GameService = Depends(get_game_service),
):
    """Start a session and present its first round."""
    config = session_config_from(body, get_settings().default_round_count)
    game = await service.start_session(config, identity)
    return session_view(game)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: UUID, service: GameService = Depends(get_game_service),
):
    return session_view(service.get_game(SessionId(session_id)))


@router.post("/{session_id}/next-round", response_model=SessionResponse)
async def next_round(
    session_id: UUID, service: GameService = Depends(get_game_service),
):
    """Present the next planned round once the current one has resolved."""
    return session_view(service.present_next_round(SessionId(session_id)))


@router.post("/{session_id}/end", response_model=SessionSummaryResponse)
async def end_session(
    session_id: UUID, service: GameService = Depends(get_game_service),
):
    """Finalize the session, persist it once, and return the summary."""
    summary = await service.end_session(SessionId(session_id))
    return summary_view(summary)
