"""Add spaced-repetition columns to flashcards and the podcast_quizzes table.

Revision ID: 002
Revises: 001
"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "002"
down_revision: str | Sequence[str] | None = "001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Existing cards start at step 0 and are due immediately."""
    op.add_column(
        "flashcards",
        sa.Column("current_step", sa.Integer(), server_default="0", nullable=False),
    )
    op.add_column(
        "flashcards",
        sa.Column(
            "next_review_date",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.add_column(
        "flashcards",
        sa.Column("first_learning_date", sa.DateTime(timezone=True), nullable=True),
    )
    op.add_column(
        "flashcards",
        sa.Column("review_dates", sa.JSON(), server_default="[]", nullable=False),
    )
    op.add_column(
        "flashcards",
        sa.Column("is_completed", sa.Boolean(), server_default=sa.false(), nullable=False),
    )
    op.create_index("ix_flashcards_next_review_date", "flashcards", ["next_review_date"])

    op.create_table(
        "podcast_quizzes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "episode_id",
            sa.Integer(),
            sa.ForeignKey("podcast_episodes.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("answers", sa.JSON(), nullable=False),
        sa.Column("correct_answer_index", sa.Integer(), server_default="0", nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
    )
    op.create_index("ix_podcast_quizzes_id", "podcast_quizzes", ["id"])
    op.create_index("ix_podcast_quizzes_episode_id", "podcast_quizzes", ["episode_id"])


def downgrade() -> None:
    op.drop_index("ix_podcast_quizzes_episode_id", table_name="podcast_quizzes")
    op.drop_index("ix_podcast_quizzes_id", table_name="podcast_quizzes")
    op.drop_table("podcast_quizzes")

    op.drop_index("ix_flashcards_next_review_date", table_name="flashcards")
    for column in (
        "is_completed",
        "review_dates",
        "first_learning_date",
        "next_review_date",
        "current_step",
    ):
        op.drop_column("flashcards", column)
