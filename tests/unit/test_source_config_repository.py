"""Tests for SourceConfigRepository."""

import pytest
from sqlalchemy import text

from discussion_sync.api.exceptions import NotFoundOrUnauthorized
from discussion_sync.repositories import SourceConfigRepository
from discussion_sync.seed import seed_sources
from discussion_sync.services.crypto import is_encrypted
from tests.helpers import ENCRYPTION_KEY, OTHER_TEAM_ID, SLACK_WORKSPACE_ID, TEAM_ID, at, owned_by


async def _stored(session, config_id: str, column: str):
    result = await session.execute(
        text(f"SELECT {column} FROM discussion_sync_sourceconfigs WHERE id = :id"),
        {"id": config_id},
    )
    return result.scalar()


@pytest.mark.asyncio
class TestSourceConfigRepository:
    """Tests for credential handling and lookups."""

    async def test_credentials_encrypted_at_rest(self, test_session, source_config):
        """Test tokens are stored as ciphertext and read back decrypted."""
        stored = await _stored(test_session, source_config.id, "api_token")

        assert is_encrypted(stored)
        assert "figd_secret" not in stored
        assert await _stored(test_session, source_config.id, "anthropic_api_key") is None

        repo = SourceConfigRepository(test_session, ENCRYPTION_KEY)
        assert repo.credentials(source_config) == {
            "api_token": "figd_secret",
            "notion_token": "secret_notion",
            "anthropic_api_key": None,
        }

    async def test_update_encrypts_new_token(self, test_session, source_config):
        """Test a replaced token is encrypted and other credentials are untouched."""
        repo = SourceConfigRepository(test_session, ENCRYPTION_KEY)

        updated = await repo.update(
            source_config.id,
            TEAM_ID,
            "user-alice",
            {"anthropic_api_key": "sk-ant-123", "ai_enabled": True},
        )

        assert updated.ai_enabled is True
        assert is_encrypted(updated.anthropic_api_key)
        assert repo.credentials(updated)["anthropic_api_key"] == "sk-ant-123"
        assert repo.credentials(updated)["api_token"] == "figd_secret"

    async def test_wrong_key_leaves_ciphertext(self, test_session, source_config):
        """Test a repository with another key cannot read the tokens."""
        repo = SourceConfigRepository(test_session, "a-different-key")

        assert repo.credentials(source_config)["api_token"] == source_config.api_token

    async def test_update_not_owner(self, test_session, source_config):
        """Test teammates cannot change a config they do not own."""
        repo = SourceConfigRepository(test_session, ENCRYPTION_KEY)

        with pytest.raises(NotFoundOrUnauthorized) as exc_info:
            await repo.update(source_config.id, TEAM_ID, "user-bob", {"name": "Mine"})

        assert exc_info.value.message == "DiscussionSyncSourceConfig not found or unauthorized"

    async def test_source_joined(self, test_session, source_config):
        """Test listed configs carry their source definition."""
        await seed_sources(test_session)
        repo = SourceConfigRepository(test_session, ENCRYPTION_KEY)

        [item] = await repo.list_all(TEAM_ID)

        assert item.record.id == source_config.id
        assert item.related["source"].name == "Figma"
        assert item.owner_user.name == "Alice"

    async def test_find_for_slack_workspace(self, test_session, source_config, slack_config):
        """Test Slack configs are matched by workspace id only."""
        repo = SourceConfigRepository(test_session, ENCRYPTION_KEY)

        found = await repo.find_for_slack_workspace(SLACK_WORKSPACE_ID)

        assert found.id == slack_config.id
        assert await repo.find_for_slack_workspace("T-unknown") is None

    async def test_find_active(self, test_session, users, source_config):
        """Test the oldest active config of the team is chosen."""
        repo = SourceConfigRepository(test_session, ENCRYPTION_KEY)
        await repo.create({
            "id": "config-inactive",
            "source_id": "figma",
            "name": "Paused",
            "notion_database_id": "db-9",
            "active": False,
            **owned_by("user-alice"),
            **at(-60),
        })
        await repo.create({
            "id": "config-other-team",
            "source_id": "figma",
            "name": "Elsewhere",
            "notion_database_id": "db-8",
            "active": True,
            **owned_by("user-carol", team_id=OTHER_TEAM_ID),
            **at(-120),
        })

        found = await repo.find_active(TEAM_ID, "figma")

        assert found.id == source_config.id
        assert await repo.find_active(TEAM_ID, "slack") is None
