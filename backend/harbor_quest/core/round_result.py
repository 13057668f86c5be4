"""Round Result — immutable record emitted exactly once when a round resolves.

Invariants:
    - score is a non-negative integer
    - accuracy ∈ [0.0, 1.0]
    - Location results carry distance_m; trivia results carry answer ids
"""

from dataclasses import dataclass

from harbor_quest.core.domain_types import AnswerId, RoundId, RoundKind


@dataclass(frozen=True)
class RoundResult:
    round_id: RoundId
    round_number: int
    kind: RoundKind
    item_id: str
    score: int
    is_correct: bool
    accuracy: float
    hints_used: int
    hints_penalty: int
    elapsed_s: float
    distance_m: float | None = None
    selected_answer_id: AnswerId | None = None
    correct_answer_id: AnswerId | None = None
    timed_out: bool = False
