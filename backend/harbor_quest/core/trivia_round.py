"""Trivia Round Controller — state machine for one multiple-choice question.

Invariants:
    - presented → answer_submitted → resolved, or presented → resolved on timeout
    - Correctness is an exact match of the selected answer id against the marked-correct one
    - A timeout resolves with is_correct=False and elapsed = time limit; it is an outcome, not an error
    - A round resolves exactly once; any operation after resolution raises InvalidRoundStateError

Design Decisions:
    - An answer arriving after the time limit is resolved as a timeout by the shell, so the
      late answer is recorded but never scored
"""

from dataclasses import dataclass, replace

from harbor_quest.core.catalog import TriviaQuestion
from harbor_quest.core.domain_types import (
    AnswerId, RoundId, RoundKind, RoundStatus, TriviaPhase,
)
from harbor_quest.core.errors import InvalidInputError, InvalidRoundStateError
from harbor_quest.core.round_result import RoundResult
from harbor_quest.core.scoring import DEFAULT_RULES, ScoringRules, score_trivia


@dataclass(frozen=True)
class TriviaRoundState:
    round_id: RoundId
    round_number: int
    question: TriviaQuestion
    time_limit_s: float
    selected_answer_id: AnswerId | None = None
    answered_after_s: float | None = None
    phase: TriviaPhase = TriviaPhase.PRESENTED
    result: RoundResult | None = None

    @property
    def status(self) -> RoundStatus:
        if self.phase == TriviaPhase.RESOLVED:
            return RoundStatus.RESOLVED
        return RoundStatus.ACTIVE


def present_trivia_round(
    round_id: RoundId, round_number: int, question: TriviaQuestion, time_limit_s: float,
) -> TriviaRoundState:
    if time_limit_s <= 0:
        raise InvalidInputError(f"time limit must be > 0, got {time_limit_s}", "time_limit")
    return TriviaRoundState(
        round_id=round_id, round_number=round_number,
        question=question, time_limit_s=time_limit_s,
    )


def is_timed_out(state: TriviaRoundState, elapsed_s: float) -> bool:
    """Past the limit (strictly): an answer exactly at the limit still counts."""
    return elapsed_s > state.time_limit_s


def submit_answer(
    state: TriviaRoundState, answer_id: AnswerId, elapsed_s: float,
) -> TriviaRoundState:
    """Record the selected answer and when it arrived."""
    if state.phase != TriviaPhase.PRESENTED:
        raise InvalidRoundStateError("submit an answer", state.phase.value)
    if elapsed_s < 0:
        raise InvalidInputError(f"elapsed time must be >= 0, got {elapsed_s}", "elapsed_time")
    if answer_id not in state.question.answer_ids:
        raise InvalidInputError(
            f"Answer '{answer_id}' is not a candidate for question {state.question.id}",
            "answer_id",
        )
    return replace(
        state, selected_answer_id=answer_id, answered_after_s=elapsed_s,
        phase=TriviaPhase.ANSWER_SUBMITTED,
    )


def resolve_trivia_round(
    state: TriviaRoundState, rules: ScoringRules = DEFAULT_RULES,
) -> tuple[TriviaRoundState, RoundResult]:
    """Score the submitted answer and emit the round's only RoundResult."""
    if state.phase != TriviaPhase.ANSWER_SUBMITTED or state.answered_after_s is None:
        raise InvalidRoundStateError("resolve the round", state.phase.value)
    correct = state.selected_answer_id == state.question.correct_answer_id
    score = score_trivia(correct, state.answered_after_s, state.time_limit_s, rules)
    return _resolved(state, score, correct, state.answered_after_s, timed_out=False)


def expire_trivia_round(
    state: TriviaRoundState, rules: ScoringRules = DEFAULT_RULES,
) -> tuple[TriviaRoundState, RoundResult]:
    """Resolve an unanswered round at its time limit."""
    if state.phase != TriviaPhase.PRESENTED:
        raise InvalidRoundStateError("time out the round", state.phase.value)
    score = score_trivia(False, state.time_limit_s, state.time_limit_s, rules)
    return _resolved(state, score, False, state.time_limit_s, timed_out=True)


def _resolved(
    state: TriviaRoundState, score: int, correct: bool, elapsed_s: float,
    timed_out: bool,
) -> tuple[TriviaRoundState, RoundResult]:
    result = RoundResult(
        round_id=state.round_id,
        round_number=state.round_number,
        kind=RoundKind.TRIVIA,
        item_id=state.question.id,
        score=score,
        is_correct=correct,
        accuracy=1.0 if correct else 0.0,
        hints_used=0,
        hints_penalty=0,
        elapsed_s=elapsed_s,
        selected_answer_id=None if timed_out else state.selected_answer_id,
        correct_answer_id=state.question.correct_answer_id,
        timed_out=timed_out,
    )
    return replace(state, phase=TriviaPhase.RESOLVED, result=result), result
