"""Create identity, podcast and flashcard tables.

Revision ID: 001
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
    ]


def upgrade() -> None:
    """Create all tables."""
    op.create_table(
        "anonymous_users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("device_id", sa.String(255), nullable=False),
        sa.Column("device_type", sa.String(50), nullable=True),
        sa.Column("app_version", sa.String(50), nullable=True),
        sa.Column("sync_data", sa.JSON(), nullable=False),
        sa.Column("is_upgraded", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("upgraded_user_id", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column("last_active_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_sync_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_anonymous_users_id", "anonymous_users", ["id"])
    op.create_index("ix_anonymous_users_device_id", "anonymous_users", ["device_id"], unique=True)

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("first_name", sa.String(100), nullable=False, server_default=""),
        sa.Column("last_name", sa.String(100), nullable=False, server_default=""),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=True),
        sa.Column("profile_picture_url", sa.String(500), nullable=True),
        sa.Column("email_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("role", sa.String(20), nullable=False, server_default="User"),
        sa.Column("device_ids", sa.JSON(), nullable=False),
        sa.Column(
            "anonymous_user_id",
            sa.Integer(),
            sa.ForeignKey("anonymous_users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "current_subscription_plan", sa.String(50), nullable=False, server_default="Free"
        ),
        sa.Column("subscription_provider", sa.String(50), nullable=True),
        sa.Column("subscription_expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "user_providers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("provider_name", sa.String(50), nullable=False),
        sa.Column("provider_id", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("display_name", sa.String(255), nullable=True),
        sa.Column("profile_picture_url", sa.String(500), nullable=True),
        sa.Column("access_token", sa.Text(), nullable=True),
        sa.Column("refresh_token", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column("last_used_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("provider_name", "provider_id", name="uq_user_provider_identity"),
    )
    op.create_index("ix_user_providers_id", "user_providers", ["id"])
    op.create_index("ix_user_providers_user_id", "user_providers", ["user_id"])

    op.create_table(
        "refresh_tokens",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("token", sa.String(128), nullable=False),
        sa.Column("jwt_id", sa.String(64), nullable=False),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("device_id", sa.String(255), nullable=True),
        sa.Column("is_used", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("used_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_revoked", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("revoked_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("revoked_by_ip", sa.String(64), nullable=True),
        sa.Column("replaced_by_token", sa.String(128), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_refresh_tokens_id", "refresh_tokens", ["id"])
    op.create_index("ix_refresh_tokens_token", "refresh_tokens", ["token"], unique=True)
    op.create_index("ix_refresh_tokens_user_id", "refresh_tokens", ["user_id"])
    op.create_index("ix_refresh_tokens_device_id", "refresh_tokens", ["device_id"])
    op.create_index("ix_refresh_tokens_expires_at", "refresh_tokens", ["expires_at"])

    op.create_table(
        "podcast_series",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("source_language", sa.String(10), nullable=False, server_default="EN"),
        sa.Column("target_language", sa.String(10), nullable=False, server_default="TR"),
        sa.Column("level", sa.String(20), nullable=True),
        sa.Column("thumbnail_url", sa.String(500), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_podcast_series_id", "podcast_series", ["id"])

    op.create_table(
        "podcast_seasons",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "series_id",
            sa.Integer(),
            sa.ForeignKey("podcast_series.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("season_number", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.UniqueConstraint("series_id", "season_number", name="uq_podcast_season_number"),
    )
    op.create_index("ix_podcast_seasons_id", "podcast_seasons", ["id"])
    op.create_index("ix_podcast_seasons_series_id", "podcast_seasons", ["series_id"])

    op.create_table(
        "podcast_episodes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "series_id",
            sa.Integer(),
            sa.ForeignKey("podcast_series.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "season_id",
            sa.Integer(),
            sa.ForeignKey("podcast_seasons.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("episode_number", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("duration_seconds", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("original_audio_url", sa.String(500), nullable=True),
        sa.Column("original_file_name", sa.String(255), nullable=True),
        sa.Column("audio_qualities", sa.JSON(), nullable=False),
        sa.Column("thumbnail_url", sa.String(500), nullable=True),
        sa.Column("release_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("processing_status", sa.String(20), nullable=False, server_default="Uploaded"),
        sa.Column("processing_started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("processing_completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("processing_error", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_podcast_episodes_id", "podcast_episodes", ["id"])
    op.create_index("ix_podcast_episodes_series_id", "podcast_episodes", ["series_id"])
    op.create_index("ix_podcast_episodes_season_id", "podcast_episodes", ["season_id"])
    op.create_index(
        "ix_podcast_episodes_processing_status", "podcast_episodes", ["processing_status"]
    )

    op.create_table(
        "flashcard_groups",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("owner_key", sa.String(255), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("source_language", sa.String(10), nullable=False, server_default="EN"),
        sa.Column("target_language", sa.String(10), nullable=False, server_default="TR"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.UniqueConstraint("owner_key", "name", name="uq_flashcard_group_owner_name"),
    )
    op.create_index("ix_flashcard_groups_id", "flashcard_groups", ["id"])
    op.create_index("ix_flashcard_groups_owner_key", "flashcard_groups", ["owner_key"])

    op.create_table(
        "flashcards",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "group_id",
            sa.Integer(),
            sa.ForeignKey("flashcard_groups.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("owner_key", sa.String(255), nullable=False),
        sa.Column("source_word", sa.String(255), nullable=False),
        sa.Column("target_word", sa.String(255), nullable=False),
        sa.Column("example_sentence", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_flashcards_id", "flashcards", ["id"])
    op.create_index("ix_flashcards_group_id", "flashcards", ["group_id"])
    op.create_index("ix_flashcards_owner_key", "flashcards", ["owner_key"])


def downgrade() -> None:
    """Drop all tables."""
    for table in (
        "flashcards",
        "flashcard_groups",
        "podcast_episodes",
        "podcast_seasons",
        "podcast_series",
        "refresh_tokens",
        "user_providers",
        "users",
        "anonymous_users",
    ):
        op.drop_table(table)
