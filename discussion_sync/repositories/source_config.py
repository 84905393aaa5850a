"""Repository for per-team source configurations."""

from typing import Any, Mapping, Optional

from sqlalchemy import and_, select

from discussion_sync.config import get_settings
from discussion_sync.models import Source, SourceConfig
from discussion_sync.repositories.base import TeamScopedRepository
from discussion_sync.services.crypto import decrypt_secrets, encrypt_secrets


class SourceConfigRepository(TeamScopedRepository[SourceConfig]):
    """Source configs joined with their source definition.

    Credential fields are encrypted before every insert and update, so
    callers always pass plaintext and never see a partially encrypted row.
    """

    model_class = SourceConfig
    resource_name = "DiscussionSyncSourceConfig"
    related_joins = {
        "source": (Source, "source_id"),
    }

    def __init__(self, session, encryption_key: Optional[str] = None):
        super().__init__(session)
        self.encryption_key = encryption_key or get_settings().encryption_key

    async def create(self, data: Mapping[str, Any]) -> SourceConfig:
        return await super().create(encrypt_secrets(data, self.encryption_key))

    async def update(
        self,
        record_id: str,
        team_id: str,
        owner_id: str,
        updates: Mapping[str, Any],
    ) -> SourceConfig:
        return await super().update(
            record_id,
            team_id,
            owner_id,
            encrypt_secrets(updates, self.encryption_key),
        )

    def credentials(self, config: SourceConfig) -> dict[str, Optional[str]]:
        """Decrypted credential fields of a config."""
        return decrypt_secrets(config, self.encryption_key)

    async def find_for_slack_workspace(self, workspace_id: str) -> Optional[SourceConfig]:
        """Find the Slack config whose ``source_metadata`` names a workspace.

        The metadata is matched in Python so the lookup works the same on
        PostgreSQL and SQLite.
        """
        stmt = (
            select(SourceConfig)
            .where(SourceConfig.source_id == "slack")
            .order_by(SourceConfig.created_at)
        )
        result = await self.session.execute(stmt)
        for config in result.scalars():
            if (config.source_metadata or {}).get("workspace_id") == workspace_id:
                return config
        return None

    async def find_active(self, team_id: str, source_id: str) -> Optional[SourceConfig]:
        """Oldest active config of a team for one source."""
        stmt = (
            select(SourceConfig)
            .where(
                and_(
                    SourceConfig.team_id == team_id,
                    SourceConfig.source_id == source_id,
                    SourceConfig.active.is_(True),
                )
            )
            .order_by(SourceConfig.created_at)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()
