"""Pydantic schemas for API requests and responses."""

from discussion_sync.api.schemas.common import (
    DeleteResponse,
    EnrichedResponse,
    RecordBase,
    UserSummaryResponse,
)
from discussion_sync.api.schemas.discussion import (
    DiscussionRecord,
    DiscussionResponse,
    DiscussionUpdate,
    SyncJobCreate,
    SyncJobRecord,
    SyncJobResponse,
    ThreadRecord,
    ThreadResponse,
    ThreadUpdate,
)
from discussion_sync.api.schemas.source import (
    SourceCreate,
    SourceRecord,
    SourceResponse,
    SourceUpdate,
)
from discussion_sync.api.schemas.source_config import (
    ConfigValidationResponse,
    SourceConfigCreate,
    SourceConfigRecord,
    SourceConfigResponse,
    SourceConfigUpdate,
)
from discussion_sync.api.schemas.task import TaskCreate, TaskRecord, TaskResponse, TaskUpdate
from discussion_sync.api.schemas.webhook import SlackChallengeResponse, WebhookAck

__all__ = [
    # Common
    "DeleteResponse",
    "EnrichedResponse",
    "RecordBase",
    "UserSummaryResponse",
    # Discussions
    "DiscussionRecord",
    "DiscussionResponse",
    "DiscussionUpdate",
    # Threads
    "ThreadRecord",
    "ThreadResponse",
    "ThreadUpdate",
    # Sync jobs
    "SyncJobCreate",
    "SyncJobRecord",
    "SyncJobResponse",
    # Sources
    "SourceCreate",
    "SourceRecord",
    "SourceResponse",
    "SourceUpdate",
    # Source configs
    "ConfigValidationResponse",
    "SourceConfigCreate",
    "SourceConfigRecord",
    "SourceConfigResponse",
    "SourceConfigUpdate",
    # Tasks
    "TaskCreate",
    "TaskRecord",
    "TaskResponse",
    "TaskUpdate",
    # Webhooks
    "SlackChallengeResponse",
    "WebhookAck",
]
