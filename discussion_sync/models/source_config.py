"""Per-team configuration of a discussion source."""

from typing import Any, Optional

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from discussion_sync.models.base import DiscussionSyncBase, JSONType


class SourceConfig(DiscussionSyncBase):
    """A team's connection to one source, with its Notion and AI settings.

    ``api_token``, ``notion_token`` and ``anthropic_api_key`` hold Fernet
    ciphertext. The repository encrypts them on every write.
    """

    __tablename__ = "discussion_sync_sourceconfigs"

    source_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Inbound delivery
    email_address: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    email_slug: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    webhook_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    webhook_secret: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Credentials (encrypted at rest)
    api_token: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    notion_token: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    anthropic_api_key: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Notion target
    notion_database_id: Mapped[str] = mapped_column(String(255), nullable=False)
    notion_field_mapping: Mapped[Optional[dict[str, Any]]] = mapped_column(
        JSONType(), default=dict, nullable=True
    )

    # AI
    ai_enabled: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    ai_summary_prompt: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    ai_task_prompt: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Behaviour flags
    auto_sync: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    post_confirmation: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    onboarding_complete: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Source-specific settings, e.g. {"workspace_id": "T123"} for Slack
    source_metadata: Mapped[Optional[dict[str, Any]]] = mapped_column(
        JSONType(), default=dict, nullable=True
    )
