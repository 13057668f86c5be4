"""Location Round Controller — state machine for one harbor-guessing round.

Invariants:
    - presented → hint_requested* → guess_submitted → resolved; no other transitions
    - Every transition returns a NEW LocationRoundState; inputs are never mutated
    - Hints are only revealed before a guess; an exhausted ladder is a no-op, not an error
    - A round resolves exactly once; any operation after resolution raises InvalidRoundStateError

Design Decisions:
    - Frozen dataclass snapshots over a mutable controller: the shell swaps snapshots,
      so a failed transition can never leave a half-updated round behind
    - Elapsed time is passed in by the shell (which owns the clock), keeping this module pure
"""

from dataclasses import dataclass, replace
from typing import Sequence

from harbor_quest.core.catalog import Harbor
from harbor_quest.core.domain_types import LocationPhase, RoundId, RoundKind, RoundStatus
from harbor_quest.core.errors import InvalidInputError, InvalidRoundStateError
from harbor_quest.core.geo import Coordinate, haversine_distance
from harbor_quest.core.hint_ladder import HintLadder, HintStep
from harbor_quest.core.round_result import RoundResult
from harbor_quest.core.scoring import (
    DEFAULT_RULES, ScoringRules, distance_factor, is_location_correct, score_location,
)


@dataclass(frozen=True)
class LocationRoundState:
    round_id: RoundId
    round_number: int
    harbor: Harbor
    ladder: HintLadder
    hints_revealed: int = 0
    guess: Coordinate | None = None
    phase: LocationPhase = LocationPhase.PRESENTED
    result: RoundResult | None = None

    @property
    def status(self) -> RoundStatus:
        if self.phase == LocationPhase.RESOLVED:
            return RoundStatus.RESOLVED
        return RoundStatus.ACTIVE

    @property
    def revealed_hints(self) -> tuple[HintStep, ...]:
        return self.ladder.revealed(self.hints_revealed)

    @property
    def hints_penalty(self) -> int:
        return self.ladder.cumulative_penalty(self.hints_revealed)

    @property
    def hints_remaining(self) -> int:
        return len(self.ladder) - self.hints_revealed


def present_location_round(
    round_id: RoundId, round_number: int, harbor: Harbor, schedule: Sequence[int],
) -> LocationRoundState:
    """Start a round with zero hints revealed."""
    return LocationRoundState(
        round_id=round_id, round_number=round_number, harbor=harbor,
        ladder=HintLadder.for_harbor(harbor, schedule),
    )


def request_hint(
    state: LocationRoundState,
) -> tuple[LocationRoundState, HintStep | None]:
    """Reveal the next hint. Returns the same state and None once exhausted."""
    if state.phase not in (LocationPhase.PRESENTED, LocationPhase.HINT_REQUESTED):
        raise InvalidRoundStateError("request a hint", state.phase.value)
    step = state.ladder.next_hint(state.hints_revealed)
    if step is None:
        return state, None
    return replace(
        state, hints_revealed=state.hints_revealed + 1,
        phase=LocationPhase.HINT_REQUESTED,
    ), step


def submit_guess(state: LocationRoundState, guess: Coordinate) -> LocationRoundState:
    """Record the player's guess. No further hints after this."""
    if state.phase not in (LocationPhase.PRESENTED, LocationPhase.HINT_REQUESTED):
        raise InvalidRoundStateError("submit a guess", state.phase.value)
    return replace(state, guess=guess, phase=LocationPhase.GUESS_SUBMITTED)


def resolve_location_round(
    state: LocationRoundState, elapsed_s: float,
    rules: ScoringRules = DEFAULT_RULES,
) -> tuple[LocationRoundState, RoundResult]:
    """Score the submitted guess and emit the round's only RoundResult."""
    if state.phase != LocationPhase.GUESS_SUBMITTED or state.guess is None:
        raise InvalidRoundStateError("resolve the round", state.phase.value)
    if elapsed_s < 0:
        raise InvalidInputError(f"elapsed time must be >= 0, got {elapsed_s}", "elapsed_time")

    distance = haversine_distance(state.harbor.coordinate, state.guess)
    penalty = state.hints_penalty
    result = RoundResult(
        round_id=state.round_id,
        round_number=state.round_number,
        kind=RoundKind.LOCATION,
        item_id=state.harbor.id,
        score=score_location(distance, penalty, rules.location_max_score, rules),
        is_correct=is_location_correct(distance, rules),
        accuracy=distance_factor(distance, rules),
        hints_used=state.hints_revealed,
        hints_penalty=penalty,
        elapsed_s=elapsed_s,
        distance_m=distance,
    )
    return replace(state, phase=LocationPhase.RESOLVED, result=result), result
