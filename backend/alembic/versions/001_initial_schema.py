"""Initial schema — harbors, trivia_questions, game_scores, round_results.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "harbors",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("language", sa.String(5), nullable=False, server_default="fi"),
        sa.Column("latitude", sa.Float, nullable=False),
        sa.Column("longitude", sa.Float, nullable=False),
        sa.Column("difficulty", sa.String(10), nullable=False, server_default="medium"),
        sa.Column("region", sa.String(200), nullable=True),
        sa.Column("harbor_types", sa.JSON, nullable=False),
        sa.Column("notable_feature", sa.Text, nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("hints", sa.JSON, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_harbors_language", "harbors", ["language"])

    op.create_table(
        "trivia_questions",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("question", sa.Text, nullable=False),
        sa.Column("answers", sa.JSON, nullable=False),
        sa.Column("correct_answer", sa.Integer, nullable=False, server_default="0"),
        sa.Column("explanation", sa.Text, nullable=True),
        sa.Column("language", sa.String(5), nullable=False, server_default="fi"),
        sa.Column("difficulty", sa.String(10), nullable=False, server_default="medium"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_trivia_questions_language", "trivia_questions", ["language"])

    op.create_table(
        "game_scores",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("session_id", UUID(as_uuid=True), nullable=False, unique=True),
        sa.Column("user_id", sa.String(100), nullable=False),
        sa.Column("game_type", sa.String(10), nullable=False),
        sa.Column("language", sa.String(5), nullable=False, server_default="fi"),
        sa.Column("score", sa.Integer, nullable=False, server_default="0"),
        sa.Column("rounds_completed", sa.Integer, nullable=False, server_default="0"),
        sa.Column("correct_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("best_streak", sa.Integer, nullable=False, server_default="0"),
        sa.Column("ended_early", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("details", sa.JSON, nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_game_scores_user_id", "game_scores", ["user_id"])
    op.create_index("ix_game_scores_game_type", "game_scores", ["game_type"])

    op.create_table(
        "round_results",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "game_score_id", UUID(as_uuid=True),
            sa.ForeignKey("game_scores.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("round_id", UUID(as_uuid=True), nullable=False),
        sa.Column("round_number", sa.Integer, nullable=False),
        sa.Column("kind", sa.String(10), nullable=False),
        sa.Column("item_id", sa.String(100), nullable=False),
        sa.Column("score", sa.Integer, nullable=False),
        sa.Column("is_correct", sa.Boolean, nullable=False),
        sa.Column("accuracy", sa.Float, nullable=False),
        sa.Column("hints_used", sa.Integer, nullable=False, server_default="0"),
        sa.Column("elapsed_s", sa.Float, nullable=False),
        sa.Column("distance_m", sa.Float, nullable=True),
        sa.Column("selected_answer_id", sa.String(20), nullable=True),
        sa.Column("timed_out", sa.Boolean, nullable=False, server_default="false"),
    )


def downgrade() -> None:
    op.drop_table("round_results")
    op.drop_index("ix_game_scores_game_type", table_name="game_scores")
    op.drop_index("ix_game_scores_user_id", table_name="game_scores")
    op.drop_table("game_scores")
    op.drop_index("ix_trivia_questions_language", table_name="trivia_questions")
    op.drop_table("trivia_questions")
    op.drop_index("ix_harbors_language", table_name="harbors")
    op.drop_table("harbors")
