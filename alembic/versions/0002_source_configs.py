"""Source configs and their references from discussions and sync jobs.

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "0002"
down_revision: Union[str, None] = "0001"
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
    op.create_table(
        "discussion_sync_sourceconfigs",
        *_team_owned_columns(),
        sa.Column("source_id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email_address", sa.String(255), nullable=True),
        sa.Column("email_slug", sa.String(255), nullable=True),
        sa.Column("webhook_url", sa.String(1000), nullable=True),
        sa.Column("webhook_secret", sa.Text(), nullable=True),
        sa.Column("api_token", sa.Text(), nullable=True),
        sa.Column("notion_token", sa.Text(), nullable=True),
        sa.Column("anthropic_api_key", sa.Text(), nullable=True),
        sa.Column("notion_database_id", sa.String(255), nullable=False),
        sa.Column("notion_field_mapping", postgresql.JSONB(), server_default="{}", nullable=True),
        sa.Column("ai_enabled", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("ai_summary_prompt", sa.Text(), nullable=True),
        sa.Column("ai_task_prompt", sa.Text(), nullable=True),
        sa.Column("auto_sync", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("post_confirmation", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("active", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("onboarding_complete", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("source_metadata", postgresql.JSONB(), server_default="{}", nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_discussion_sync_sourceconfigs_team_id", "discussion_sync_sourceconfigs", ["team_id"])
    op.create_index("ix_discussion_sync_sourceconfigs_source_id", "discussion_sync_sourceconfigs", ["source_id"])

    with op.batch_alter_table("discussion_sync_discussions") as batch_op:
        batch_op.create_foreign_key(
            "fk_discussions_source_config",
            "discussion_sync_sourceconfigs",
            ["source_config_id"],
            ["id"],
        )

    with op.batch_alter_table("discussion_sync_sync_jobs") as batch_op:
        batch_op.create_foreign_key(
            "fk_jobs_source_config",
            "discussion_sync_sourceconfigs",
            ["source_config_id"],
            ["id"],
        )
    op.create_index("idx_jobs_source_config", "discussion_sync_sync_jobs", ["source_config_id"])


def downgrade() -> None:
    op.drop_index("idx_jobs_source_config", table_name="discussion_sync_sync_jobs")
    with op.batch_alter_table("discussion_sync_sync_jobs") as batch_op:
        batch_op.drop_constraint("fk_jobs_source_config", type_="foreignkey")
    with op.batch_alter_table("discussion_sync_discussions") as batch_op:
        batch_op.drop_constraint("fk_discussions_source_config", type_="foreignkey")
    op.drop_table("discussion_sync_sourceconfigs")
