"""SQLAlchemy models for Discussion Sync."""

from discussion_sync.models.base import Base, DiscussionSyncBase, JSONType
from discussion_sync.models.discussion import Discussion, SyncJob, Thread
from discussion_sync.models.source import Source
from discussion_sync.models.source_config import SourceConfig
from discussion_sync.models.task import Task
from discussion_sync.models.user import TeamMember, User

__all__ = [
    # Base
    "Base",
    "DiscussionSyncBase",
    "JSONType",
    # Users
    "User",
    "TeamMember",
    # Collections
    "Source",
    "SourceConfig",
    "Discussion",
    "Thread",
    "SyncJob",
    "Task",
]
