"""Scoring Engine — converts a resolved guess or answer into round points.

Invariants:
    - score_location ∈ [0, max_score]; non-increasing in distance and in hints penalty
    - score_location(0, 0, max) == max; score → 0 as distance → ∞
    - score_trivia ∈ [0, base + bonus]; incorrect answers always score 0
    - Negative distance, time, or penalty raises InvalidInputError
    - Threshold comparisons use inclusive boundaries (<=) only

Design Decisions:
    - Exponential falloff past a small perfect radius: smooth, monotonic, no lookup tables
    - Integer points: location scores are floored, so only a guess inside the perfect radius earns max
    - floor() and round() are monotonic, so integer points never break the ordering guarantees
    - ScoringRules is a frozen value object built from Settings at the shell boundary
"""

import math
from dataclasses import dataclass

from harbor_quest.core.errors import InvalidInputError


@dataclass(frozen=True)
class ScoringRules:
    """Tunable constants for both round kinds."""
    location_max_score: int = 1000
    perfect_radius_m: float = 50.0
    falloff_m: float = 100_000.0
    correct_radius_m: float = 20_000.0
    trivia_base_points: int = 500
    trivia_time_bonus_points: int = 500
    trivia_time_limit_s: float = 15.0

    def __post_init__(self) -> None:
        if self.location_max_score < 0:
            raise InvalidInputError("location_max_score must be >= 0", "location_max_score")
        if self.falloff_m <= 0:
            raise InvalidInputError("falloff_m must be > 0", "falloff_m")
        if self.perfect_radius_m < 0 or self.correct_radius_m < 0:
            raise InvalidInputError("radii must be >= 0", "radius")
        if self.trivia_base_points < 0 or self.trivia_time_bonus_points < 0:
            raise InvalidInputError("trivia points must be >= 0", "trivia_points")
        if self.trivia_time_limit_s <= 0:
            raise InvalidInputError("trivia_time_limit_s must be > 0", "trivia_time_limit_s")

    @property
    def trivia_max_score(self) -> int:
        return self.trivia_base_points + self.trivia_time_bonus_points


DEFAULT_RULES = ScoringRules()


def distance_factor(distance_m: float, rules: ScoringRules = DEFAULT_RULES) -> float:
    """Fraction of max score earned by distance alone, in [0, 1]."""
    if distance_m < 0 or math.isnan(distance_m):
        raise InvalidInputError(f"distance must be >= 0, got {distance_m}", "distance")
    if distance_m <= rules.perfect_radius_m:
        return 1.0
    return math.exp(-(distance_m - rules.perfect_radius_m) / rules.falloff_m)


def score_location(
    distance_m: float, hints_penalty: float, max_score: int,
    rules: ScoringRules = DEFAULT_RULES,
) -> int:
    """Distance-decayed score minus hint penalty, floored at 0."""
    if hints_penalty < 0:
        raise InvalidInputError(
            f"hints penalty must be >= 0, got {hints_penalty}", "hints_penalty",
        )
    if max_score < 0:
        raise InvalidInputError(f"max_score must be >= 0, got {max_score}", "max_score")
    base = math.floor(max_score * distance_factor(distance_m, rules))
    return int(max(0, min(max_score, base - hints_penalty)))


def is_location_correct(distance_m: float, rules: ScoringRules = DEFAULT_RULES) -> bool:
    """A guess within the correct radius (inclusive) counts as found."""
    if distance_m < 0:
        raise InvalidInputError(f"distance must be >= 0, got {distance_m}", "distance")
    return distance_m <= rules.correct_radius_m


def score_trivia(
    is_correct: bool, elapsed_s: float, time_limit_s: float,
    rules: ScoringRules = DEFAULT_RULES,
) -> int:
    """Base points plus a linear time bonus for correct answers; 0 otherwise."""
    if elapsed_s < 0 or math.isnan(elapsed_s):
        raise InvalidInputError(f"elapsed time must be >= 0, got {elapsed_s}", "elapsed_time")
    if time_limit_s <= 0:
        raise InvalidInputError(f"time limit must be > 0, got {time_limit_s}", "time_limit")
    if not is_correct:
        return 0
    remaining = 1.0 - min(elapsed_s, time_limit_s) / time_limit_s
    score = rules.trivia_base_points + round(rules.trivia_time_bonus_points * remaining)
    return int(max(0, min(rules.trivia_max_score, score)))
