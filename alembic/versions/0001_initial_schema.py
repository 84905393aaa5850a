"""Initial schema for Discussion Sync Server.

Revision ID: 0001
Revises:
Create Date: 2024-12-01 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _team_owned_columns() -> list[sa.Column]:
    """Identity, ownership and timestamp columns shared by every collection."""
    return [
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("team_id", sa.String(64), nullable=False),
        sa.Column("owner", sa.String(64), nullable=False),
        sa.Column("created_by", sa.String(64), nullable=False),
        sa.Column("updated_by", sa.String(64), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    # Users and team membership
    op.create_table(
        "users",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("avatar_url", sa.String(1000), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "team_members",
        sa.Column("team_id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("role", sa.String(50), server_default="member", nullable=False),
        sa.PrimaryKeyConstraint("team_id", "user_id"),
    )

    # Sources
    op.create_table(
        "discussion_sync_sources",
        *_team_owned_columns(),
        sa.Column("source_type", sa.String(50), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("adapter_class", sa.String(255), nullable=False),
        sa.Column("icon", sa.String(16), nullable=True),
        sa.Column("config_schema", postgresql.JSONB(), server_default="{}", nullable=True),
        sa.Column("webhook_path", sa.String(500), nullable=True),
        sa.Column("requires_email", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("requires_webhook", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("requires_api_token", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("active", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("metadata", postgresql.JSONB(), server_default="{}", nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_discussion_sync_sources_team_id", "discussion_sync_sources", ["team_id"])

    # Discussions
    op.create_table(
        "discussion_sync_discussions",
        *_team_owned_columns(),
        sa.Column("source_type", sa.String(50), nullable=False),
        sa.Column("source_thread_id", sa.String(255), nullable=False),
        sa.Column("source_url", sa.String(1000), nullable=False),
        sa.Column("source_config_id", sa.String(64), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("author_handle", sa.String(255), nullable=False),
        sa.Column("participants", postgresql.JSONB(), nullable=True),
        sa.Column("status", sa.String(50), nullable=False),
        sa.Column("thread_id", sa.String(64), nullable=True),
        sa.Column("sync_job_id", sa.String(64), nullable=True),
        sa.Column("raw_payload", postgresql.JSONB(), server_default="{}", nullable=True),
        sa.Column("metadata", postgresql.JSONB(), server_default="{}", nullable=True),
        sa.Column("processed_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_discussion_sync_discussions_team_id", "discussion_sync_discussions", ["team_id"])
    op.create_index("idx_discussions_team_status", "discussion_sync_discussions", ["team_id", "status"])
    op.create_index(
        "idx_discussions_source_thread",
        "discussion_sync_discussions",
        ["source_type", "source_thread_id"],
    )
    op.create_index("idx_discussions_source_config", "discussion_sync_discussions", ["source_config_id"])
    op.create_index("idx_discussions_created_at", "discussion_sync_discussions", ["created_at"])

    # Threads
    op.create_table(
        "discussion_sync_threads",
        *_team_owned_columns(),
        sa.Column("discussion_id", sa.String(64), nullable=True),
        sa.Column("source_type", sa.String(50), nullable=False),
        sa.Column("root_message", postgresql.JSONB(), server_default="{}", nullable=False),
        sa.Column("replies", postgresql.JSONB(), server_default="{}", nullable=True),
        sa.Column("total_messages", sa.Integer(), nullable=True),
        sa.Column("participants", postgresql.JSONB(), nullable=True),
        sa.Column("ai_summary", sa.Text(), nullable=True),
        sa.Column("ai_key_points", postgresql.JSONB(), nullable=True),
        sa.Column("ai_context", sa.Text(), nullable=True),
        sa.Column("is_multi_task", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("detected_tasks", postgresql.JSONB(), server_default="{}", nullable=True),
        sa.Column("status", sa.String(50), nullable=False),
        sa.Column("metadata", postgresql.JSONB(), server_default="{}", nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_discussion_sync_threads_team_id", "discussion_sync_threads", ["team_id"])
    op.create_index("ix_discussion_sync_threads_discussion_id", "discussion_sync_threads", ["discussion_id"])

    # Sync jobs
    op.create_table(
        "discussion_sync_sync_jobs",
        *_team_owned_columns(),
        sa.Column("discussion_id", sa.String(64), nullable=True),
        sa.Column("source_config_id", sa.String(64), nullable=False),
        sa.Column("status", sa.String(50), nullable=False),
        sa.Column("stage", sa.String(50), nullable=True),
        sa.Column("attempts", sa.Integer(), server_default="0", nullable=False),
        sa.Column("max_attempts", sa.Integer(), server_default="3", nullable=False),
        sa.Column("error", sa.Text(), nullable=True),
        sa.Column("error_stack", sa.Text(), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("processing_time", sa.Integer(), nullable=True),
        sa.Column("task_ids", postgresql.JSONB(), nullable=True),
        sa.Column("metadata", postgresql.JSONB(), server_default="{}", nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_discussion_sync_sync_jobs_team_id", "discussion_sync_sync_jobs", ["team_id"])
    op.create_index("idx_jobs_status_stage", "discussion_sync_sync_jobs", ["status", "stage"])
    op.create_index("idx_jobs_discussion", "discussion_sync_sync_jobs", ["discussion_id"])
    op.create_index("idx_jobs_created_at", "discussion_sync_sync_jobs", ["created_at"])

    # Tasks
    op.create_table(
        "discussion_sync_tasks",
        *_team_owned_columns(),
        sa.Column("discussion_id", sa.String(64), nullable=True),
        sa.Column("thread_id", sa.String(64), nullable=True),
        sa.Column("sync_job_id", sa.String(64), nullable=True),
        sa.Column("notion_page_id", sa.String(255), nullable=True),
        sa.Column("notion_page_url", sa.String(1000), nullable=True),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(50), server_default="pending", nullable=False),
        sa.Column("priority", sa.String(50), nullable=True),
        sa.Column("assignee", sa.String(255), nullable=True),
        sa.Column("summary", sa.Text(), nullable=True),
        sa.Column("source_url", sa.String(1000), nullable=True),
        sa.Column("is_multi_task_child", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("task_index", sa.Integer(), nullable=True),
        sa.Column("metadata", postgresql.JSONB(), server_default="{}", nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["discussion_id"], ["discussion_sync_discussions.id"], ondelete="SET NULL"
        ),
        sa.ForeignKeyConstraint(["thread_id"], ["discussion_sync_threads.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["sync_job_id"], ["discussion_sync_sync_jobs.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_discussion_sync_tasks_team_id", "discussion_sync_tasks", ["team_id"])


def downgrade() -> None:
    op.drop_table("discussion_sync_tasks")
    op.drop_table("discussion_sync_sync_jobs")
    op.drop_table("discussion_sync_threads")
    op.drop_table("discussion_sync_discussions")
    op.drop_table("discussion_sync_sources")
    op.drop_table("team_members")
    op.drop_table("users")
