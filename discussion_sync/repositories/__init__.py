"""Repository layer for data access."""

from discussion_sync.repositories.base import EnrichedRecord, TeamScopedRepository, UserSummary
from discussion_sync.repositories.discussion import (
    DiscussionRepository,
    SyncJobRepository,
    ThreadRepository,
)
from discussion_sync.repositories.source import SourceRepository
from discussion_sync.repositories.source_config import SourceConfigRepository
from discussion_sync.repositories.task import TaskRepository

__all__ = [
    "TeamScopedRepository",
    "EnrichedRecord",
    "UserSummary",
    "DiscussionRepository",
    "SourceConfigRepository",
    "SourceRepository",
    "SyncJobRepository",
    "TaskRepository",
    "ThreadRepository",
]
