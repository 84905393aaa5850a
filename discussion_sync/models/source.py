"""Source model for integration adapter definitions."""

from typing import Any, Optional

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from discussion_sync.models.base import DiscussionSyncBase, JSONType


class Source(DiscussionSyncBase):
    """Integration adapter definition (Figma, Slack, ...)."""

    __tablename__ = "discussion_sync_sources"

    source_type: Mapped[str] = mapped_column(String(50), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    adapter_class: Mapped[str] = mapped_column(String(255), nullable=False)
    icon: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    config_schema: Mapped[Optional[dict[str, Any]]] = mapped_column(
        JSONType(), default=dict, nullable=True
    )
    webhook_path: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Capability flags
    requires_email: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    requires_webhook: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    requires_api_token: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    meta: Mapped[Optional[dict[str, Any]]] = mapped_column(
        "metadata", JSONType(), default=dict, nullable=True
    )
