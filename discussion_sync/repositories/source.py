"""Repository for source definitions."""

from sqlalchemy import delete, select

from discussion_sync.models import Source
from discussion_sync.repositories.base import TeamScopedRepository


class SourceRepository(TeamScopedRepository[Source]):
    """Repository for source definition operations."""

    model_class = Source
    resource_name = "DiscussionSyncSource"

    async def has_any(self) -> bool:
        """Check whether the sources table holds any row, in any team."""
        result = await self.session.execute(select(Source.id).limit(1))
        return result.first() is not None

    async def delete_all(self) -> int:
        """Delete every source row. Returns the number of rows deleted."""
        result = await self.session.execute(delete(Source))
        return result.rowcount
