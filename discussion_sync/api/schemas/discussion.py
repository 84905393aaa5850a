"""Pydantic schemas for discussions, threads and sync jobs."""

from datetime import datetime
from typing import Any, ClassVar, Optional

from pydantic import BaseModel, Field, field_validator

from discussion_sync.api.schemas.common import EnrichedResponse, RecordBase, not_null
from discussion_sync.api.schemas.source_config import SourceConfigRecord


class DiscussionRecord(RecordBase):
    """A discussion row."""

    source_type: str
    source_thread_id: str
    source_url: str
    source_config_id: str
    title: str
    content: str
    author_handle: str
    participants: Optional[list[str]] = None
    status: str
    thread_id: Optional[str] = None
    sync_job_id: Optional[str] = None
    raw_payload: Optional[dict[str, Any]] = None
    meta: Optional[dict[str, Any]] = None
    processed_at: Optional[datetime] = None


class DiscussionUpdate(BaseModel):
    """Schema for updating a discussion."""

    source_type: Optional[str] = None
    source_thread_id: Optional[str] = None
    source_url: Optional[str] = None
    source_config_id: Optional[str] = None
    title: Optional[str] = None
    content: Optional[str] = None
    author_handle: Optional[str] = None
    participants: Optional[list[str]] = None
    status: Optional[str] = None
    thread_id: Optional[str] = None
    sync_job_id: Optional[str] = None
    raw_payload: Optional[dict[str, Any]] = None
    meta: Optional[dict[str, Any]] = None
    processed_at: Optional[datetime] = None

    @field_validator(
        "source_type",
        "source_thread_id",
        "source_url",
        "source_config_id",
        "title",
        "content",
        "author_handle",
        "status",
    )
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        """Required columns can be changed but not cleared."""
        return not_null(v)


class ThreadRecord(RecordBase):
    """A thread row."""

    discussion_id: Optional[str] = None
    source_type: str
    root_message: dict[str, Any] = Field(default_factory=dict)
    replies: Optional[Any] = None
    total_messages: Optional[int] = None
    participants: Optional[list[str]] = None
    ai_summary: Optional[str] = None
    ai_key_points: Optional[list[str]] = None
    ai_context: Optional[str] = None
    is_multi_task: bool = False
    detected_tasks: Optional[Any] = None
    status: str
    meta: Optional[dict[str, Any]] = None


class ThreadUpdate(BaseModel):
    """Schema for updating a thread."""

    discussion_id: Optional[str] = None
    source_type: Optional[str] = None
    root_message: Optional[dict[str, Any]] = None
    replies: Optional[Any] = None
    total_messages: Optional[int] = None
    participants: Optional[list[str]] = None
    ai_summary: Optional[str] = None
    ai_key_points: Optional[list[str]] = None
    ai_context: Optional[str] = None
    is_multi_task: Optional[bool] = None
    detected_tasks: Optional[Any] = None
    status: Optional[str] = None
    meta: Optional[dict[str, Any]] = None

    @field_validator("source_type", "root_message", "is_multi_task", "status")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        return not_null(v)


class SyncJobRecord(RecordBase):
    """A sync job row."""

    discussion_id: Optional[str] = None
    source_config_id: str
    status: str
    stage: Optional[str] = None
    attempts: int
    max_attempts: int
    error: Optional[str] = None
    error_stack: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    processing_time: Optional[int] = None
    task_ids: Optional[list[str]] = None
    meta: Optional[dict[str, Any]] = None


class SyncJobCreate(BaseModel):
    """Schema for creating a sync job. Dates are accepted as ISO strings."""

    discussion_id: Optional[str] = None
    source_config_id: str = Field(..., min_length=1)
    status: str = Field(..., min_length=1)
    stage: Optional[str] = None
    attempts: int = Field(0, ge=0)
    max_attempts: int = Field(3, ge=1)
    error: Optional[str] = None
    error_stack: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    processing_time: Optional[int] = None
    task_ids: Optional[list[str]] = None
    meta: Optional[dict[str, Any]] = None


class DiscussionResponse(DiscussionRecord, EnrichedResponse):
    """A discussion with its thread, sync job, source config and user attribution."""

    related_schemas: ClassVar[dict[str, type[BaseModel]]] = {
        "thread": ThreadRecord,
        "sync_job": SyncJobRecord,
        "source_config": SourceConfigRecord,
    }

    thread: Optional[ThreadRecord] = None
    sync_job: Optional[SyncJobRecord] = None
    source_config: Optional[SourceConfigRecord] = None


class ThreadResponse(ThreadRecord, EnrichedResponse):
    """A thread with its discussion and user attribution."""

    related_schemas: ClassVar[dict[str, type[BaseModel]]] = {"discussion": DiscussionRecord}

    discussion: Optional[DiscussionRecord] = None


class SyncJobResponse(SyncJobRecord, EnrichedResponse):
    """A sync job with its discussion, source config and user attribution."""

    related_schemas: ClassVar[dict[str, type[BaseModel]]] = {
        "discussion": DiscussionRecord,
        "source_config": SourceConfigRecord,
    }

    discussion: Optional[DiscussionRecord] = None
    source_config: Optional[SourceConfigRecord] = None
