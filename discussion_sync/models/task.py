"""Sync task model."""

from typing import Any, Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from discussion_sync.models.base import DiscussionSyncBase, JSONType


class Task(DiscussionSyncBase):
    """A unit of synchronization work: one task pushed to a Notion page."""

    __tablename__ = "discussion_sync_tasks"

    # Related rows may be deleted independently of the task
    discussion_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("discussion_sync_discussions.id", ondelete="SET NULL"), nullable=True
    )
    thread_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("discussion_sync_threads.id", ondelete="SET NULL"), nullable=True
    )
    sync_job_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("discussion_sync_sync_jobs.id", ondelete="SET NULL"), nullable=True
    )

    notion_page_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    notion_page_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="pending")
    priority: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    assignee: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    summary: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    source_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    is_multi_task_child: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    task_index: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    meta: Mapped[Optional[dict[str, Any]]] = mapped_column(
        "metadata", JSONType(), default=dict, nullable=True
    )
