"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - SessionId, RoundId wrap UUIDs — never use bare UUID in domain logic
    - HarborId, QuestionId, AnswerId, UserId wrap catalog/auth strings
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders (ADR: API responses are JSON)
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

SessionId = NewType("SessionId", UUID)
RoundId = NewType("RoundId", UUID)
HarborId = NewType("HarborId", str)
QuestionId = NewType("QuestionId", str)
AnswerId = NewType("AnswerId", str)
UserId = NewType("UserId", str)


# ─── Value Types ─────────────────────────────────────────────────

Meters = NewType("Meters", float)
Seconds = NewType("Seconds", float)


# ─── Enums ───────────────────────────────────────────────────────

class RoundKind(str, Enum):
    """The two round flavours a session can sequence."""
    LOCATION = "location"
    TRIVIA = "trivia"


class RoundStatus(str, Enum):
    """Coarse round lifecycle shared by both round kinds."""
    ACTIVE = "active"
    RESOLVED = "resolved"


class LocationPhase(str, Enum):
    """Location round state machine: presented → hint_requested* → guess_submitted → resolved."""
    PRESENTED = "presented"
    HINT_REQUESTED = "hint_requested"
    GUESS_SUBMITTED = "guess_submitted"
    RESOLVED = "resolved"


class TriviaPhase(str, Enum):
    """Trivia round state machine: presented → answer_submitted → resolved."""
    PRESENTED = "presented"
    ANSWER_SUBMITTED = "answer_submitted"
    RESOLVED = "resolved"


class SessionStatus(str, Enum):
    """GameSession lifecycle."""
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Difficulty(str, Enum):
    """Catalog difficulty tiers."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Language(str, Enum):
    """Catalog languages — harbors and questions are authored per language."""
    FI = "fi"
    EN = "en"
    SV = "sv"


class RoundTypeMix(str, Enum):
    """How a session composes its rounds when no explicit order is given."""
    LOCATION = "location"
    TRIVIA = "trivia"
    MIXED = "mixed"


class GameType(str, Enum):
    """Leaderboard bucket for a persisted session."""
    LOCATION = "location"
    TRIVIA = "trivia"
    MIXED = "mixed"


class HintKind(str, Enum):
    """What a hint step reveals."""
    TEXT = "text"
    IMAGE = "image"
    REGION = "region"
    HARBOR_TYPE = "harbor_type"
    NOTABLE_FEATURE = "notable_feature"
    DIRECTION = "direction"


class AchievementId(str, Enum):
    """Milestones a player unlocks across their saved sessions."""
    FIRST_STEPS = "first_steps"
    TRIVIA_MASTER = "trivia_master"
    EXPLORER = "explorer"
    POLYGLOT = "polyglot"
    PERFECT_NAVIGATOR = "perfect_navigator"
