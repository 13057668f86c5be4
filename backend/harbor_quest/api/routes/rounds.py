"""Rounds — hint, guess, answer and timeout operations on the active round.

Invariants:
    - Every operation addresses a round by id; unknown ids are 404
    - Operations on a resolved round, or of the wrong kind, are 409 INVALID_ROUND_STATE
    - Out-of-range guess coordinates are 400 INVALID_COORDINATE
"""

from uuid import UUID

from fastapi import APIRouter, Depends

from harbor_quest.api.deps import get_game_service
from harbor_quest.api.routes.game_views import hint_view, result_view
from harbor_quest.core.domain_types import AnswerId, RoundId
from harbor_quest.core.geo import Coordinate
from harbor_quest.schemas.game import (
    AnswerSubmit, GuessSubmit, HintRequestResponse, RoundResultResponse,
)
from harbor_quest.services.game_service import GameService

router = APIRouter(prefix="/api/v1/rounds", tags=["rounds"])


@router.post("/{round_id}/hints", response_model=HintRequestResponse)
async def request_hint(
    round_id: UUID, service: GameService = Depends(get_game_service),
):
    """Reveal the next hint; hint is null once the ladder is exhausted."""
    step = service.request_hint(RoundId(round_id))
    if step is None:
        return HintRequestResponse(hint=None, exhausted=True)
    state = service.round_state(RoundId(round_id))
    return HintRequestResponse(hint=hint_view(step, state), exhausted=False)


@router.post("/{round_id}/guess", response_model=RoundResultResponse)
async def submit_guess(
    round_id: UUID,
    body: GuessSubmit,
    service: GameService = Depends(get_game_service),
):
    result = service.submit_guess(
        RoundId(round_id), Coordinate(body.latitude, body.longitude),
    )
    return result_view(result, service.session_for_round(RoundId(round_id)))


@router.post("/{round_id}/answer", response_model=RoundResultResponse)
async def submit_answer(
    round_id: UUID,
    body: AnswerSubmit,
    service: GameService = Depends(get_game_service),
):
    """Answer a trivia round; answers after the time limit resolve as a timeout."""
    result = service.submit_answer(RoundId(round_id), AnswerId(body.answer_id))
    return result_view(result, service.session_for_round(RoundId(round_id)))


@router.post("/{round_id}/timeout", response_model=RoundResultResponse)
async def expire_round(
    round_id: UUID, service: GameService = Depends(get_game_service),
):
    result = service.expire_round(RoundId(round_id))
    return result_view(result, service.session_for_round(RoundId(round_id)))
