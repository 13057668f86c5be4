"""Achievements — milestones evaluated over a player's finished sessions.

Invariants:
    - Evaluation is a pure fold over sessions in completion order; nothing is stored
    - Every AchievementId appears exactly once in the result, unlocked or not
    - unlocked_at is the completed_at of the session that first met the rule
    - progress never exceeds target

Rules:
    - first_steps: one finished session with at least one location round played
    - explorer: 10 distinct harbors located correctly
    - perfect_navigator: a harbor located correctly without any hint
    - trivia_master: a trivia game played to the end with every answer correct
    - polyglot: sessions played in every catalog language
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from harbor_quest.core.domain_types import (
    AchievementId, GameType, Language, RoundKind,
)
from harbor_quest.core.session_aggregator import GameSession

EXPLORER_HARBOR_COUNT = 10


@dataclass(frozen=True)
class AchievementDefinition:
    id: AchievementId
    name: str
    description: str
    target: int


ACHIEVEMENTS: tuple[AchievementDefinition, ...] = (
    AchievementDefinition(
        AchievementId.FIRST_STEPS, "First Steps", "Finish your first harbor hunt", 1,
    ),
    AchievementDefinition(
        AchievementId.TRIVIA_MASTER, "Trivia Master",
        "Answer every question of a trivia game correctly", 1,
    ),
    AchievementDefinition(
        AchievementId.EXPLORER, "Explorer",
        f"Locate {EXPLORER_HARBOR_COUNT} different harbors", EXPLORER_HARBOR_COUNT,
    ),
    AchievementDefinition(
        AchievementId.POLYGLOT, "Polyglot",
        "Play in Finnish, Swedish and English", len(Language),
    ),
    AchievementDefinition(
        AchievementId.PERFECT_NAVIGATOR, "Perfect Navigator",
        "Locate a harbor without using a hint", 1,
    ),
)


@dataclass(frozen=True)
class AchievementProgress:
    definition: AchievementDefinition
    progress: int
    unlocked_at: datetime | None = None

    @property
    def unlocked(self) -> bool:
        return self.unlocked_at is not None


def _is_perfect_trivia_game(session: GameSession) -> bool:
    trivia = [r for r in session.results if r.kind == RoundKind.TRIVIA]
    return (
        session.game_type == GameType.TRIVIA
        and not session.ended_early
        and bool(trivia)
        and all(r.is_correct for r in trivia)
    )


def evaluate_achievements(sessions: Iterable[GameSession]) -> list[AchievementProgress]:
    """Progress on every achievement, in ACHIEVEMENTS order."""
    ordered = sorted(
        (s for s in sessions if s.completed_at is not None),
        key=lambda s: s.completed_at,
    )
    counts = {a.id: 0 for a in ACHIEVEMENTS}
    unlocked: dict[AchievementId, datetime] = {}
    harbors: set[str] = set()
    languages: set[Language] = set()

    for session in ordered:
        location = [r for r in session.results if r.kind == RoundKind.LOCATION]
        if location:
            counts[AchievementId.FIRST_STEPS] = 1
        harbors.update(r.item_id for r in location if r.is_correct)
        counts[AchievementId.EXPLORER] = len(harbors)
        if any(r.is_correct and r.hints_used == 0 for r in location):
            counts[AchievementId.PERFECT_NAVIGATOR] = 1
        if _is_perfect_trivia_game(session):
            counts[AchievementId.TRIVIA_MASTER] = 1
        languages.add(session.config.language)
        counts[AchievementId.POLYGLOT] = len(languages)

        for a in ACHIEVEMENTS:
            if a.id not in unlocked and counts[a.id] >= a.target:
                unlocked[a.id] = session.completed_at

    return [
        AchievementProgress(a, min(counts[a.id], a.target), unlocked.get(a.id))
        for a in ACHIEVEMENTS
    ]
