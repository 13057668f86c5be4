"""Hint Ladder — ordered hint reveals with escalating point penalties for one harbor.

Invariants:
    - Penalties are non-decreasing in reveal order (later hints cost more)
    - next_hint(n) returns None exactly when n == len(ladder)
    - cumulative_penalty(n) is non-decreasing in n and capped at the full ladder
    - An exhausted ladder never blocks a guess

Design Decisions:
    - Harbor's own descriptive hints take precedence; a fallback ladder is derived
      from region → harbor types → notable feature → compass direction
    - Penalty schedule repeats its last value past its length, so any ladder length
      keeps the non-decreasing invariant
"""

from dataclasses import dataclass
from typing import Sequence

from harbor_quest.core.catalog import Harbor
from harbor_quest.core.domain_types import HintKind
from harbor_quest.core.errors import InvalidInputError
from harbor_quest.core.geo import Coordinate, compass_direction, initial_bearing


# Direction clues are given relative to the capital
REFERENCE_POINT = Coordinate(60.1699, 24.9384)
REFERENCE_NAME = "Helsinki"


@dataclass(frozen=True)
class HintStep:
    """One reveal on the ladder."""
    order: int
    kind: HintKind
    payload: str
    penalty: int


def validate_penalty_schedule(schedule: Sequence[int]) -> tuple[int, ...]:
    """Reject empty, negative, or decreasing schedules."""
    if not schedule:
        raise InvalidInputError("Hint penalty schedule is empty", "hint_penalty_schedule")
    if any(p < 0 for p in schedule):
        raise InvalidInputError(
            "Hint penalties must be non-negative", "hint_penalty_schedule",
        )
    if any(b < a for a, b in zip(schedule, schedule[1:])):
        raise InvalidInputError(
            f"Hint penalties must be non-decreasing, got {list(schedule)}",
            "hint_penalty_schedule",
        )
    return tuple(schedule)


def _harbor_reveals(harbor: Harbor) -> list[tuple[HintKind, str]]:
    if harbor.hints:
        return [
            (HintKind.IMAGE if _looks_like_image(h) else HintKind.TEXT, h)
            for h in harbor.hints
        ]

    reveals: list[tuple[HintKind, str]] = []
    if harbor.region:
        reveals.append((HintKind.REGION, harbor.region))
    if harbor.harbor_types:
        reveals.append((HintKind.HARBOR_TYPE, ", ".join(harbor.harbor_types)))
    if harbor.notable_feature:
        reveals.append((HintKind.NOTABLE_FEATURE, harbor.notable_feature))
    direction = compass_direction(initial_bearing(REFERENCE_POINT, harbor.coordinate))
    reveals.append((HintKind.DIRECTION, f"{direction} of {REFERENCE_NAME}"))
    return reveals


def _looks_like_image(hint: str) -> bool:
    return hint.lower().startswith(("http://", "https://")) and hint.lower().endswith(
        (".png", ".jpg", ".jpeg", ".webp", ".gif"),
    )


class HintLadder:
    """Ordered, immutable sequence of HintSteps for one harbor."""

    def __init__(self, steps: Sequence[HintStep]):
        penalties = [s.penalty for s in steps]
        if any(b < a for a, b in zip(penalties, penalties[1:])):
            raise InvalidInputError(
                "Hint ladder penalties must be non-decreasing", "steps",
            )
        self._steps = tuple(steps)

    @classmethod
    def for_harbor(cls, harbor: Harbor, schedule: Sequence[int]) -> "HintLadder":
        schedule = validate_penalty_schedule(schedule)
        steps = [
            HintStep(
                order=i, kind=kind, payload=payload,
                penalty=schedule[min(i, len(schedule) - 1)],
            )
            for i, (kind, payload) in enumerate(_harbor_reveals(harbor))
        ]
        return cls(steps)

    def __len__(self) -> int:
        return len(self._steps)

    @property
    def steps(self) -> tuple[HintStep, ...]:
        return self._steps

    def next_hint(self, revealed_count: int) -> HintStep | None:
        """Next unrevealed step, or None once the ladder is exhausted."""
        _check_count(revealed_count)
        if revealed_count >= len(self._steps):
            return None
        return self._steps[revealed_count]

    def cumulative_penalty(self, revealed_count: int) -> int:
        _check_count(revealed_count)
        return sum(s.penalty for s in self._steps[:revealed_count])

    def revealed(self, revealed_count: int) -> tuple[HintStep, ...]:
        _check_count(revealed_count)
        return self._steps[:revealed_count]


def _check_count(revealed_count: int) -> None:
    if revealed_count < 0:
        raise InvalidInputError(
            f"revealed_count must be >= 0, got {revealed_count}", "revealed_count",
        )
