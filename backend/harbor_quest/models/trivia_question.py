"""Trivia Question ORM — catalog row for one multiple-choice question.

Invariants:
    - answers is an ordered JSON list of answer texts; an answer's id is its index as a string
    - correct_answer indexes into answers
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from harbor_quest.db.base import Base


class TriviaQuestionRecord(Base):
    __tablename__ = "trivia_questions"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    question: Mapped[str] = mapped_column(Text, nullable=False)
    answers: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    correct_answer: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    explanation: Mapped[str | None] = mapped_column(Text, nullable=True)
    language: Mapped[str] = mapped_column(
        String(5), nullable=False, default="fi", index=True,
    )
    difficulty: Mapped[str] = mapped_column(
        String(10), nullable=False, default="medium",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
