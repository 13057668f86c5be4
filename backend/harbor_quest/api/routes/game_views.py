"""Game Views — pure builders from core snapshots to response schemas.

Invariants:
    - Active location rounds never reveal harbor identity or coordinates
    - Active trivia rounds never reveal the correct answer or explanation
    - Builders never mutate their inputs
"""

from harbor_quest.core.achievements import AchievementProgress
from harbor_quest.core.domain_types import RoundKind, RoundStatus
from harbor_quest.core.hint_ladder import HintStep
from harbor_quest.core.location_round import LocationRoundState
from harbor_quest.core.round_result import RoundResult
from harbor_quest.core.session_aggregator import GameSession
from harbor_quest.core.trivia_round import TriviaRoundState
from harbor_quest.schemas.game import (
    AchievementResponse, AnswerOption, HintResponse, RoundResultResponse, RoundView,
    SessionResponse, SessionSummaryResponse, UserScoreEntry,
)
from harbor_quest.services.game_registry import ActiveGame, SessionSummary


def hint_view(step: HintStep, state: LocationRoundState) -> HintResponse:
    return HintResponse(
        order=step.order,
        kind=step.kind.value,
        payload=step.payload,
        penalty=step.penalty,
        cumulative_penalty=state.ladder.cumulative_penalty(step.order + 1),
        hints_remaining=len(state.ladder) - (step.order + 1),
    )


def round_view(state: LocationRoundState | TriviaRoundState) -> RoundView:
    resolved = state.status == RoundStatus.RESOLVED
    if isinstance(state, LocationRoundState):
        harbor = state.harbor
        return RoundView(
            round_id=state.round_id,
            round_number=state.round_number,
            kind=RoundKind.LOCATION.value,
            status=state.status.value,
            phase=state.phase.value,
            revealed_hints=[hint_view(s, state) for s in state.revealed_hints],
            hints_remaining=state.hints_remaining,
            hints_penalty=state.hints_penalty,
            harbor_name=harbor.name if resolved else None,
            harbor_latitude=harbor.coordinate.latitude if resolved else None,
            harbor_longitude=harbor.coordinate.longitude if resolved else None,
            harbor_description=harbor.description if resolved else None,
        )
    question = state.question
    return RoundView(
        round_id=state.round_id,
        round_number=state.round_number,
        kind=RoundKind.TRIVIA.value,
        status=state.status.value,
        phase=state.phase.value,
        prompt=question.prompt,
        answers=[AnswerOption(id=a.id, text=a.text) for a in question.answers],
        time_limit_s=state.time_limit_s,
        correct_answer_id=question.correct_answer_id if resolved else None,
        explanation=question.explanation if resolved else None,
    )


def result_view(result: RoundResult, session: GameSession) -> RoundResultResponse:
    return RoundResultResponse(
        round_id=result.round_id,
        round_number=result.round_number,
        kind=result.kind.value,
        score=result.score,
        is_correct=result.is_correct,
        accuracy=result.accuracy,
        hints_used=result.hints_used,
        hints_penalty=result.hints_penalty,
        elapsed_s=result.elapsed_s,
        distance_m=result.distance_m,
        distance_km=(
            round(result.distance_m / 1000.0, 1) if result.distance_m is not None else None
        ),
        selected_answer_id=result.selected_answer_id,
        correct_answer_id=result.correct_answer_id,
        timed_out=result.timed_out,
        session_total_score=session.total_score,
        streak=session.streak,
        session_status=session.status.value,
    )


def session_view(game: ActiveGame) -> SessionResponse:
    session = game.session
    return SessionResponse(
        id=session.id,
        status=session.status.value,
        game_type=session.game_type.value,
        language=session.config.language.value,
        difficulty=session.config.difficulty.value if session.config.difficulty else None,
        planned_kinds=[k.value for k in session.planned_kinds],
        rounds_resolved=session.rounds_resolved,
        rounds_remaining=session.rounds_remaining,
        total_score=session.total_score,
        streak=session.streak,
        best_streak=session.best_streak,
        anonymous=session.user_id is None,
        current_round=round_view(game.round) if game.round is not None else None,
    )


def summary_view(summary: SessionSummary) -> SessionSummaryResponse:
    session = summary.session
    if summary.score_saved:
        message = None
    elif session.user_id is None:
        message = "Playing as guest: score not saved"
    else:
        message = "Score not saved"
    return SessionSummaryResponse(
        id=session.id,
        status=session.status.value,
        game_type=session.game_type.value,
        total_score=session.total_score,
        best_streak=session.best_streak,
        ended_early=session.ended_early,
        completed_at=session.completed_at,
        results=[result_view(r, session) for r in session.results],
        stats=summary.stats,
        score_saved=summary.score_saved,
        message=message,
    )


def history_entry_view(session: GameSession) -> UserScoreEntry:
    return UserScoreEntry(
        session_id=session.id,
        game_type=session.game_type.value,
        language=session.config.language.value,
        score=session.total_score,
        rounds_completed=session.rounds_resolved,
        correct_count=sum(1 for r in session.results if r.is_correct),
        best_streak=session.best_streak,
        ended_early=session.ended_early,
        started_at=session.started_at,
        completed_at=session.completed_at,
    )


def achievement_view(progress: AchievementProgress) -> AchievementResponse:
    definition = progress.definition
    return AchievementResponse(
        id=definition.id.value,
        name=definition.name,
        description=definition.description,
        unlocked=progress.unlocked,
        unlocked_at=progress.unlocked_at,
        progress=progress.progress,
        target=definition.target,
    )
