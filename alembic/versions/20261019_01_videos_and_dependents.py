"""
Videos + dependent tables.

- Create the `video_status` enum and `videos` table (denormalized stats with
  non-negative checks).
- Create dependents referencing `videos.id`: favorites, watch_history,
  comments, marks, annotations, notes. No ON DELETE cascades; the
  application removes dependents before the video row.
"""

from alembic import op
import sqlalchemy as sa

# Revision identifiers, used by Alembic.
revision = "20261019_01_videos_and_dependents"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    video_status = sa.Enum("draft", "private", "public", name="video_status")

    # --- videos ---
    op.create_table(
        "videos",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("owner_id", sa.String(length=64), nullable=False),
        sa.Column("title", sa.String(length=120), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("status", video_status, nullable=False),
        sa.Column("file_name", sa.String(length=255), nullable=False),
        sa.Column("file_size", sa.BigInteger(), nullable=False),
        sa.Column("duration", sa.Float(), nullable=False),
        sa.Column("format", sa.String(length=16), nullable=False),
        sa.Column("cover_url", sa.String(length=512), nullable=True),
        sa.Column("thumbnail_url", sa.String(length=512), nullable=True),
        sa.Column("views", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("likes", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("comments", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("shares", sa.Integer(), server_default=sa.text("0"), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("views >= 0", name="ck_videos_views_nonneg"),
        sa.CheckConstraint("likes >= 0", name="ck_videos_likes_nonneg"),
        sa.CheckConstraint("comments >= 0", name="ck_videos_comments_nonneg"),
        sa.CheckConstraint("shares >= 0", name="ck_videos_shares_nonneg"),
        sa.CheckConstraint("file_size >= 0", name="ck_videos_file_size_nonneg"),
        sa.PrimaryKeyConstraint("id", name="pk_videos"),
    )
    op.create_index("ix_videos_owner_id", "videos", ["owner_id"])
    op.create_index("ix_videos_status", "videos", ["status"])
    op.create_index("ix_videos_owner_created", "videos", ["owner_id", "created_at"])
    op.create_index("ix_videos_status_created", "videos", ["status", "created_at"])

    # --- favorites ---
    op.create_table(
        "favorites",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("video_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(length=120), nullable=False),
        sa.Column("cover_url", sa.String(length=512), nullable=True),
        sa.Column("duration", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["video_id"], ["videos.id"], name="fk_favorites_video_id_videos"),
        sa.PrimaryKeyConstraint("id", name="pk_favorites"),
        sa.UniqueConstraint("user_id", "video_id", name="uq_favorites_user_video"),
    )
    op.create_index("ix_favorites_user_id", "favorites", ["user_id"])
    op.create_index("ix_favorites_video_id", "favorites", ["video_id"])
    op.create_index("ix_favorites_user_created", "favorites", ["user_id", "created_at"])

    # --- watch_history ---
    op.create_table(
        "watch_history",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("video_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(length=120), nullable=False),
        sa.Column("cover_url", sa.String(length=512), nullable=True),
        sa.Column("duration", sa.Float(), nullable=False),
        sa.Column("progress", sa.Float(), nullable=False),
        sa.Column("watched_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["video_id"], ["videos.id"], name="fk_watch_history_video_id_videos"),
        sa.PrimaryKeyConstraint("id", name="pk_watch_history"),
        sa.UniqueConstraint("user_id", "video_id", name="uq_watch_history_user_video"),
    )
    op.create_index("ix_watch_history_user_id", "watch_history", ["user_id"])
    op.create_index("ix_watch_history_video_id", "watch_history", ["video_id"])
    op.create_index("ix_watch_history_user_watched", "watch_history", ["user_id", "watched_at"])

    # --- comments ---
    op.create_table(
        "comments",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("video_id", sa.Uuid(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["video_id"], ["videos.id"], name="fk_comments_video_id_videos"),
        sa.PrimaryKeyConstraint("id", name="pk_comments"),
    )
    op.create_index("ix_comments_user_id", "comments", ["user_id"])
    op.create_index("ix_comments_video_id", "comments", ["video_id"])

    # --- marks ---
    op.create_table(
        "marks",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("video_id", sa.Uuid(), nullable=False),
        sa.Column("timestamp", sa.Float(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["video_id"], ["videos.id"], name="fk_marks_video_id_videos"),
        sa.PrimaryKeyConstraint("id", name="pk_marks"),
    )
    op.create_index("ix_marks_user_id", "marks", ["user_id"])
    op.create_index("ix_marks_video_id", "marks", ["video_id"])
    op.create_index("ix_marks_video_user", "marks", ["video_id", "user_id"])

    # --- annotations ---
    op.create_table(
        "annotations",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("mark_id", sa.Uuid(), nullable=False),
        sa.Column("video_id", sa.Uuid(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["mark_id"], ["marks.id"], name="fk_annotations_mark_id_marks"),
        sa.ForeignKeyConstraint(["video_id"], ["videos.id"], name="fk_annotations_video_id_videos"),
        sa.PrimaryKeyConstraint("id", name="pk_annotations"),
    )
    op.create_index("ix_annotations_user_id", "annotations", ["user_id"])
    op.create_index("ix_annotations_mark_id", "annotations", ["mark_id"])
    op.create_index("ix_annotations_video_id", "annotations", ["video_id"])

    # --- notes ---
    op.create_table(
        "notes",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("video_id", sa.Uuid(), nullable=False),
        sa.Column("timestamp", sa.Float(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("title", sa.String(length=120), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["video_id"], ["videos.id"], name="fk_notes_video_id_videos"),
        sa.PrimaryKeyConstraint("id", name="pk_notes"),
    )
    op.create_index("ix_notes_user_id", "notes", ["user_id"])
    op.create_index("ix_notes_video_id", "notes", ["video_id"])


def downgrade() -> None:
    for table in ("notes", "annotations", "marks", "comments", "watch_history", "favorites"):
        op.drop_table(table)
    op.drop_index("ix_videos_status_created", table_name="videos")
    op.drop_index("ix_videos_owner_created", table_name="videos")
    op.drop_index("ix_videos_status", table_name="videos")
    op.drop_index("ix_videos_owner_id", table_name="videos")
    op.drop_table("videos")
    sa.Enum(name="video_status").drop(op.get_bind(), checkfirst=True)
