"""Repositories for discussions, threads and sync jobs."""

from typing import Optional

from sqlalchemy import and_, select

from discussion_sync.models import Discussion, SourceConfig, SyncJob, Thread
from discussion_sync.repositories.base import TeamScopedRepository


class DiscussionRepository(TeamScopedRepository[Discussion]):
    """Discussions joined with their thread, latest sync job and source config."""

    model_class = Discussion
    resource_name = "DiscussionSyncDiscussion"
    related_joins = {
        "thread": (Thread, "thread_id"),
        "sync_job": (SyncJob, "sync_job_id"),
        "source_config": (SourceConfig, "source_config_id"),
    }

    async def find_by_source_thread(
        self,
        team_id: str,
        source_type: str,
        source_thread_id: str,
    ) -> list[Discussion]:
        """Discussions of a team already captured from one source thread."""
        stmt = (
            select(Discussion)
            .where(
                and_(
                    Discussion.team_id == team_id,
                    Discussion.source_type == source_type,
                    Discussion.source_thread_id == source_thread_id,
                )
            )
            .order_by(Discussion.created_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find_by_event_id(
        self,
        team_id: str,
        source_thread_id: str,
        event_id: str,
    ) -> Optional[Discussion]:
        """The Slack discussion created for a given Events API ``event_id``."""
        for discussion in await self.find_by_source_thread(team_id, "slack", source_thread_id):
            if (discussion.meta or {}).get("event_id") == event_id:
                return discussion
        return None


class ThreadRepository(TeamScopedRepository[Thread]):
    """Threads joined with the discussion they belong to."""

    model_class = Thread
    resource_name = "DiscussionSyncThread"
    related_joins = {
        "discussion": (Discussion, "discussion_id"),
    }


class SyncJobRepository(TeamScopedRepository[SyncJob]):
    """Sync jobs joined with the discussion being synced."""

    model_class = SyncJob
    resource_name = "DiscussionSyncSyncJob"
    related_joins = {
        "discussion": (Discussion, "discussion_id"),
        "source_config": (SourceConfig, "source_config_id"),
    }
