"""Game Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - SessionCreate.round_count: 1-100 here; the configured max is enforced by the core
    - round_kinds, when given, fixes both the order and the count of rounds
    - Guess coordinates are NOT range-checked here: Coordinate raises InvalidCoordinateError
    - Active location rounds never expose the harbor's name or coordinate

Design Decisions:
    - Literal types over str enums for request fields: Pydantic handles validation natively
    - Response models are plain data; builders live in api/routes/game_views.py
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class SessionCreate(BaseModel):
    """Session creation — round count, catalog slice and round composition."""
    round_count: int | None = Field(None, ge=1, le=100)
    difficulty: Literal["easy", "medium", "hard"] | None = None
    round_type_mix: Literal["location", "trivia", "mixed"] = "location"
    round_kinds: list[Literal["location", "trivia"]] | None = Field(
        None, min_length=1, max_length=100,
    )
    language: Literal["fi", "en", "sv"] = "fi"

    @model_validator(mode="after")
    def check_round_kinds(self):
        if (
            self.round_kinds is not None
            and self.round_count is not None
            and self.round_count != len(self.round_kinds)
        ):
            raise ValueError("round_count must match the length of round_kinds")
        return self


class GuessSubmit(BaseModel):
    latitude: float
    longitude: float


class AnswerSubmit(BaseModel):
    answer_id: str = Field(min_length=1, max_length=20)


class HintResponse(BaseModel):
    order: int
    kind: str
    payload: str
    penalty: int
    cumulative_penalty: int
    hints_remaining: int


class HintRequestResponse(BaseModel):
    """hint is null once the ladder is exhausted."""
    hint: HintResponse | None
    exhausted: bool


class AnswerOption(BaseModel):
    id: str
    text: str


class RoundView(BaseModel):
    """Public view of the current round; reveal fields are set once resolved."""
    round_id: UUID
    round_number: int
    kind: Literal["location", "trivia"]
    status: Literal["active", "resolved"]
    phase: str
    # location
    revealed_hints: list[HintResponse] = []
    hints_remaining: int | None = None
    hints_penalty: int | None = None
    harbor_name: str | None = None
    harbor_latitude: float | None = None
    harbor_longitude: float | None = None
    harbor_description: str | None = None
    # trivia
    prompt: str | None = None
    answers: list[AnswerOption] = []
    time_limit_s: float | None = None
    correct_answer_id: str | None = None
    explanation: str | None = None


class RoundResultResponse(BaseModel):
    round_id: UUID
    round_number: int
    kind: Literal["location", "trivia"]
    score: int
    is_correct: bool
    accuracy: float
    hints_used: int
    hints_penalty: int
    elapsed_s: float
    distance_m: float | None = None
    distance_km: float | None = None
    selected_answer_id: str | None = None
    correct_answer_id: str | None = None
    timed_out: bool = False
    session_total_score: int
    streak: int
    session_status: Literal["in_progress", "completed"]


class SessionResponse(BaseModel):
    id: UUID
    status: Literal["in_progress", "completed"]
    game_type: Literal["location", "trivia", "mixed"]
    language: str
    difficulty: str | None
    planned_kinds: list[Literal["location", "trivia"]]
    rounds_resolved: int
    rounds_remaining: int
    total_score: int
    streak: int
    best_streak: int
    anonymous: bool
    current_round: RoundView | None = None


class SessionSummaryResponse(BaseModel):
    id: UUID
    status: Literal["in_progress", "completed"]
    game_type: Literal["location", "trivia", "mixed"]
    total_score: int
    best_streak: int
    ended_early: bool
    completed_at: datetime | None
    results: list[RoundResultResponse]
    stats: dict
    score_saved: bool
    message: str | None = None


class LeaderboardEntry(BaseModel):
    rank: int
    user_id: str
    score: int
    game_type: str
    language: str
    rounds_completed: int
    correct_count: int
    completed_at: datetime


class UserScoreEntry(BaseModel):
    session_id: UUID
    game_type: Literal["location", "trivia", "mixed"]
    language: Literal["fi", "en", "sv"]
    score: int
    rounds_completed: int
    correct_count: int
    best_streak: int
    ended_early: bool
    started_at: datetime
    completed_at: datetime | None


class AchievementResponse(BaseModel):
    id: str
    name: str
    description: str
    unlocked: bool
    unlocked_at: datetime | None
    progress: int
    target: int
