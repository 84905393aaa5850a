"""Repository for sync task data access."""

from discussion_sync.models import Discussion, SyncJob, Task, Thread
from discussion_sync.repositories.base import TeamScopedRepository


class TaskRepository(TeamScopedRepository[Task]):
    """Sync tasks joined with their discussion, thread and sync job."""

    model_class = Task
    resource_name = "DiscussionSyncTask"
    related_joins = {
        "discussion": (Discussion, "discussion_id"),
        "thread": (Thread, "thread_id"),
        "sync_job": (SyncJob, "sync_job_id"),
    }
