"""Harbor ORM — catalog row for one guest harbor in one language.

Invariants:
    - latitude/longitude are decimal degrees (validated again when mapped to core Coordinate)
    - hints is an ordered JSON list of strings (text clues or image URLs)
    - difficulty is one of Difficulty values; language one of Language values
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Float, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from harbor_quest.db.base import Base


class HarborRecord(Base):
    __tablename__ = "harbors"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    language: Mapped[str] = mapped_column(
        String(5), nullable=False, default="fi", index=True,
    )
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    difficulty: Mapped[str] = mapped_column(
        String(10), nullable=False, default="medium",
    )
    region: Mapped[str | None] = mapped_column(String(200), nullable=True)
    harbor_types: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    notable_feature: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    hints: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
