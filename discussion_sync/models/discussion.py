"""Discussion, thread and sync job models."""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from discussion_sync.models.base import DiscussionSyncBase, JSONType, utcnow


class Discussion(DiscussionSyncBase):
    """A discussion captured from a source (a Figma comment, a Slack thread)."""

    __tablename__ = "discussion_sync_discussions"
    __table_args__ = (
        Index("idx_discussions_team_status", "team_id", "status"),
        Index("idx_discussions_source_thread", "source_type", "source_thread_id"),
        Index("idx_discussions_source_config", "source_config_id"),
        Index("idx_discussions_created_at", "created_at"),
    )

    source_type: Mapped[str] = mapped_column(String(50), nullable=False)
    source_thread_id: Mapped[str] = mapped_column(String(255), nullable=False)
    source_url: Mapped[str] = mapped_column(String(1000), nullable=False)
    source_config_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("discussion_sync_sourceconfigs.id"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author_handle: Mapped[str] = mapped_column(String(255), nullable=False)
    participants: Mapped[Optional[list[str]]] = mapped_column(JSONType(), nullable=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False)
    thread_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    sync_job_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    raw_payload: Mapped[Optional[dict[str, Any]]] = mapped_column(
        JSONType(), default=dict, nullable=True
    )
    meta: Mapped[Optional[dict[str, Any]]] = mapped_column(
        "metadata", JSONType(), default=dict, nullable=True
    )
    processed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=True
    )


class Thread(DiscussionSyncBase):
    """A discussion thread with its replies and AI analysis."""

    __tablename__ = "discussion_sync_threads"

    discussion_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)
    source_type: Mapped[str] = mapped_column(String(50), nullable=False)
    root_message: Mapped[dict[str, Any]] = mapped_column(JSONType(), default=dict, nullable=False)
    replies: Mapped[Optional[Any]] = mapped_column(JSONType(), default=dict, nullable=True)
    total_messages: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    participants: Mapped[Optional[list[str]]] = mapped_column(JSONType(), nullable=True)
    ai_summary: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    ai_key_points: Mapped[Optional[list[str]]] = mapped_column(JSONType(), nullable=True)
    ai_context: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_multi_task: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    detected_tasks: Mapped[Optional[Any]] = mapped_column(JSONType(), default=dict, nullable=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False)
    meta: Mapped[Optional[dict[str, Any]]] = mapped_column(
        "metadata", JSONType(), default=dict, nullable=True
    )


class SyncJob(DiscussionSyncBase):
    """One attempt at pushing a discussion through the sync pipeline."""

    __tablename__ = "discussion_sync_sync_jobs"
    __table_args__ = (
        Index("idx_jobs_status_stage", "status", "stage"),
        Index("idx_jobs_discussion", "discussion_id"),
        Index("idx_jobs_source_config", "source_config_id"),
        Index("idx_jobs_created_at", "created_at"),
    )

    discussion_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    source_config_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("discussion_sync_sourceconfigs.id"), nullable=False
    )
    status: Mapped[str] = mapped_column(String(50), nullable=False)
    stage: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    attempts: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    max_attempts: Mapped[int] = mapped_column(Integer, default=3, nullable=False)
    error: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    error_stack: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    started_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    processing_time: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    task_ids: Mapped[Optional[list[str]]] = mapped_column(JSONType(), nullable=True)
    meta: Mapped[Optional[dict[str, Any]]] = mapped_column(
        "metadata", JSONType(), default=dict, nullable=True
    )
