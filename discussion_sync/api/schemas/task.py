"""Pydantic schemas for sync tasks."""

from typing import Any, ClassVar, Optional

from pydantic import BaseModel, Field, field_validator

from discussion_sync.api.schemas.common import EnrichedResponse, RecordBase, not_null
from discussion_sync.api.schemas.discussion import DiscussionRecord, SyncJobRecord, ThreadRecord


class TaskFields(BaseModel):
    """Fields a client may set on a task."""

    discussion_id: Optional[str] = Field(None, description="Discussion the task was extracted from")
    thread_id: Optional[str] = Field(None, description="Thread the task was extracted from")
    sync_job_id: Optional[str] = Field(None, description="Sync job that produced the task")
    notion_page_id: Optional[str] = None
    notion_page_url: Optional[str] = None
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None
    status: str = Field("pending", min_length=1)
    priority: Optional[str] = None
    assignee: Optional[str] = None
    summary: Optional[str] = None
    source_url: Optional[str] = None
    is_multi_task_child: bool = False
    task_index: Optional[int] = Field(None, ge=0)
    meta: Optional[dict[str, Any]] = Field(default_factory=dict, description="Additional metadata")


class TaskCreate(TaskFields):
    """Schema for creating a task."""


class TaskUpdate(BaseModel):
    """Schema for updating a task. Only fields that are sent are applied."""

    discussion_id: Optional[str] = None
    thread_id: Optional[str] = None
    sync_job_id: Optional[str] = None
    notion_page_id: Optional[str] = None
    notion_page_url: Optional[str] = None
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    assignee: Optional[str] = None
    summary: Optional[str] = None
    source_url: Optional[str] = None
    is_multi_task_child: Optional[bool] = None
    task_index: Optional[int] = Field(None, ge=0)
    meta: Optional[dict[str, Any]] = None

    @field_validator("title", "status", "is_multi_task_child")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        return not_null(v)


class TaskRecord(RecordBase, TaskFields):
    """A task row."""


class TaskResponse(TaskRecord, EnrichedResponse):
    """A task with its discussion, thread, sync job and user attribution."""

    related_schemas: ClassVar[dict[str, type[BaseModel]]] = {
        "discussion": DiscussionRecord,
        "thread": ThreadRecord,
        "sync_job": SyncJobRecord,
    }

    discussion: Optional[DiscussionRecord] = None
    thread: Optional[ThreadRecord] = None
    sync_job: Optional[SyncJobRecord] = None
