"""Session Stats — pure computation of summary statistics from a GameSession.

Invariants:
    - All inputs come from GameSession fields (no IO, no DB)
    - Returns a flat, JSON-serializable dict
    - Never raises — an empty session yields zeros and None distances
"""

from harbor_quest.core.domain_types import RoundKind
from harbor_quest.core.session_aggregator import GameSession


def compute_session_stats(session: GameSession) -> dict:
    """Compute summary statistics from a GameSession. Pure, no IO."""
    results = session.results
    played = len(results)
    correct = sum(1 for r in results if r.is_correct)
    distances = [
        r.distance_m for r in results
        if r.kind == RoundKind.LOCATION and r.distance_m is not None
    ]

    return {
        "rounds_planned": len(session.planned_kinds),
        "rounds_played": played,
        "correct_count": correct,
        "accuracy": round(correct / played, 4) if played else 0.0,
        "total_score": session.total_score,
        "best_streak": session.best_streak,
        "hints_used": sum(r.hints_used for r in results),
        "timeouts": sum(1 for r in results if r.timed_out),
        "average_distance_m": (
            round(sum(distances) / len(distances), 1) if distances else None
        ),
        "best_distance_m": round(min(distances), 1) if distances else None,
    }
