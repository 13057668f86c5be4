"""GameScore ORM — one persisted, finalized GameSession.

Invariants:
    - session_id is unique: a session is persisted at most once
    - user_id is always set (anonymous sessions are never persisted)
    - details holds the full GameSession snapshot (core/session_snapshot.py)

Design Decisions:
    - Summary columns (score, game_type, language) denormalized for leaderboard queries
    - cascade delete for round records: a score owns its rounds
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Integer, Boolean, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from harbor_quest.db.base import Base


class GameScore(Base):
    __tablename__ = "game_scores"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    session_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False, unique=True,
    )
    user_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    game_type: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    language: Mapped[str] = mapped_column(String(5), nullable=False, default="fi")
    score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rounds_completed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    correct_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    best_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    ended_early: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    details: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    completed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    rounds: Mapped[list["RoundRecord"]] = relationship(
        "RoundRecord", back_populates="game_score",
        cascade="all, delete-orphan", lazy="selectin",
        order_by="RoundRecord.round_number",
    )
