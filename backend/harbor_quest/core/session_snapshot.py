"""Session Snapshot — serialization / deserialization for GameSession.

Invariants:
    - session_to_snapshot produces a JSON-safe dict (no Enums, no UUIDs, no datetimes)
    - session_from_snapshot reconstructs an equal GameSession from that dict
    - Missing optional keys fall back to GameSession defaults (forward-compatible)

Design Decisions:
    - Stored verbatim in game_scores.details so a finished game can be replayed
      round by round without extra tables
"""

from dataclasses import asdict
from datetime import datetime
from uuid import UUID

from harbor_quest.core.domain_types import (
    AnswerId, Difficulty, Language, RoundId, RoundKind, RoundTypeMix, SessionId,
    SessionStatus, UserId,
)
from harbor_quest.core.round_result import RoundResult
from harbor_quest.core.session_aggregator import GameSession, SessionConfig


def _result_to_dict(result: RoundResult) -> dict:
    data = asdict(result)
    data["round_id"] = str(result.round_id)
    data["kind"] = result.kind.value
    return data


def _result_from_dict(data: dict) -> RoundResult:
    return RoundResult(
        round_id=RoundId(UUID(data["round_id"])),
        round_number=data["round_number"],
        kind=RoundKind(data["kind"]),
        item_id=data["item_id"],
        score=data["score"],
        is_correct=data["is_correct"],
        accuracy=data["accuracy"],
        hints_used=data.get("hints_used", 0),
        hints_penalty=data.get("hints_penalty", 0),
        elapsed_s=data.get("elapsed_s", 0.0),
        distance_m=data.get("distance_m"),
        selected_answer_id=_optional_answer(data.get("selected_answer_id")),
        correct_answer_id=_optional_answer(data.get("correct_answer_id")),
        timed_out=data.get("timed_out", False),
    )


def _optional_answer(value: str | None) -> AnswerId | None:
    return AnswerId(value) if value is not None else None


def session_to_snapshot(session: GameSession) -> dict:
    """Serialize GameSession to a JSON-safe dict. Pure, no IO."""
    config = session.config
    return {
        "id": str(session.id),
        "user_id": session.user_id,
        "config": {
            "round_count": config.round_count,
            "difficulty": config.difficulty.value if config.difficulty else None,
            "round_type_mix": config.round_type_mix.value,
            "round_kinds": (
                [k.value for k in config.round_kinds]
                if config.round_kinds is not None else None
            ),
            "language": config.language.value,
        },
        "planned_kinds": [k.value for k in session.planned_kinds],
        "results": [_result_to_dict(r) for r in session.results],
        "total_score": session.total_score,
        "streak": session.streak,
        "best_streak": session.best_streak,
        "status": session.status.value,
        "ended_early": session.ended_early,
        "started_at": session.started_at.isoformat(),
        "completed_at": (
            session.completed_at.isoformat() if session.completed_at else None
        ),
    }


def session_from_snapshot(data: dict) -> GameSession:
    """Reconstruct a GameSession from a snapshot dict."""
    cfg = data.get("config", {})
    round_kinds = cfg.get("round_kinds")
    config = SessionConfig(
        round_count=cfg.get("round_count", len(data["planned_kinds"])),
        difficulty=Difficulty(cfg["difficulty"]) if cfg.get("difficulty") else None,
        round_type_mix=RoundTypeMix(cfg.get("round_type_mix", RoundTypeMix.LOCATION.value)),
        round_kinds=(
            tuple(RoundKind(k) for k in round_kinds) if round_kinds is not None else None
        ),
        language=Language(cfg.get("language", Language.FI.value)),
    )
    completed_at = data.get("completed_at")
    return GameSession(
        id=SessionId(UUID(data["id"])),
        config=config,
        planned_kinds=tuple(RoundKind(k) for k in data["planned_kinds"]),
        user_id=UserId(data["user_id"]) if data.get("user_id") else None,
        results=tuple(_result_from_dict(r) for r in data.get("results", [])),
        total_score=data.get("total_score", 0),
        streak=data.get("streak", 0),
        best_streak=data.get("best_streak", 0),
        status=SessionStatus(data.get("status", SessionStatus.IN_PROGRESS.value)),
        ended_early=data.get("ended_early", False),
        started_at=datetime.fromisoformat(data["started_at"]),
        completed_at=datetime.fromisoformat(completed_at) if completed_at else None,
    )
