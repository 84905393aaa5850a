"""Tests for source seeding."""

from unittest.mock import patch

import pytest
from sqlalchemy import select

from discussion_sync.models import Source
from discussion_sync.repositories import SourceRepository
from discussion_sync.seed import (
    SOURCE_SEED_DATA,
    clear_all,
    clear_sources,
    reseed_all,
    reseed_sources,
    seed_all,
    seed_sources,
)
from tests.helpers import TEAM_ID, owned_by


async def _source_ids(session) -> list[str]:
    result = await session.execute(select(Source.id).order_by(Source.id))
    return list(result.scalars().all())


@pytest.mark.asyncio
class TestSeedSources:
    """Tests for seed_sources."""

    async def test_seed_inserts_catalog(self, test_session):
        """Test an empty table receives Figma and Slack."""
        inserted = await seed_sources(test_session)

        assert inserted == 2
        assert await _source_ids(test_session) == ["figma", "slack"]

    async def test_seeded_figma_row(self, test_session):
        """Test the Figma definition is stored as declared."""
        await seed_sources(test_session)

        figma = await test_session.get(Source, "figma")
        assert figma.name == "Figma"
        assert figma.adapter_class == "FigmaAdapter"
        assert figma.icon == "🎨"
        assert figma.webhook_path == "/api/webhook/mailgun/figma"
        assert figma.requires_email is True
        assert figma.requires_webhook is True
        assert figma.requires_api_token is True
        assert figma.active is True
        assert figma.meta["emailProvider"] == "mailgun"
        assert figma.team_id == "system"
        assert figma.owner == "system"

    async def test_seeded_slack_row(self, test_session):
        """Test the Slack definition is stored as declared."""
        await seed_sources(test_session)

        slack = await test_session.get(Source, "slack")
        assert slack.adapter_class == "SlackAdapter"
        assert slack.webhook_path == "/api/webhook/slack/events"
        assert slack.requires_email is False
        assert slack.requires_webhook is True
        assert slack.meta["requiresOAuth"] is True
        assert "app_mentions:read" in slack.meta["scopes"]
        assert len(slack.meta["scopes"]) == 6

    async def test_seed_skips_when_any_row_exists(self, test_session):
        """Test a single unrelated row prevents seeding."""
        await SourceRepository(test_session).create({
            "id": "custom",
            "source_type": "linear",
            "name": "Linear",
            "adapter_class": "LinearAdapter",
            **owned_by("user-alice"),
        })
        await test_session.commit()

        inserted = await seed_sources(test_session)

        assert inserted == 0
        assert await _source_ids(test_session) == ["custom"]

    async def test_seed_twice_is_noop(self, test_session):
        """Test a second run inserts nothing."""
        assert await seed_sources(test_session) == 2
        assert await seed_sources(test_session) == 0
        assert await SourceRepository(test_session).count() == len(SOURCE_SEED_DATA)

    async def test_clear_removes_every_row(self, test_session):
        """Test clear deletes seeded and team rows alike."""
        await seed_sources(test_session)
        await SourceRepository(test_session).create({
            "id": "custom",
            "source_type": "linear",
            "name": "Linear",
            "adapter_class": "LinearAdapter",
            **owned_by("user-alice", team_id=TEAM_ID),
        })
        await test_session.commit()

        deleted = await clear_sources(test_session)

        assert deleted == 3
        assert await _source_ids(test_session) == []

    async def test_reseed_replaces_rows(self, test_session):
        """Test reseeding restores the catalog after edits."""
        await seed_sources(test_session)
        await SourceRepository(test_session).update("figma", "system", "system", {"active": False})
        await test_session.commit()

        inserted = await reseed_sources(test_session)

        assert inserted == 2
        figma = await test_session.get(Source, "figma")
        assert figma.active is True


@pytest.mark.asyncio
class TestSeedEntryPoints:
    """Tests for the package level seed operations."""

    async def test_seed_all(self, test_session):
        """Test seed_all seeds sources."""
        await seed_all(test_session)
        assert await _source_ids(test_session) == ["figma", "slack"]

    async def test_clear_all(self, test_session):
        """Test clear_all empties the sources table."""
        await seed_all(test_session)
        await clear_all(test_session)
        assert await _source_ids(test_session) == []

    async def test_reseed_all(self, test_session):
        """Test reseed_all leaves exactly the catalog."""
        await SourceRepository(test_session).create({
            "id": "custom",
            "source_type": "linear",
            "name": "Linear",
            "adapter_class": "LinearAdapter",
            **owned_by("user-alice"),
        })
        await test_session.commit()

        await reseed_all(test_session)

        assert await _source_ids(test_session) == ["figma", "slack"]


@pytest.mark.asyncio
class TestSeedLogging:
    """Tests for seed log events."""

    async def test_seeded_source_logged_with_fields(self, test_session):
        """Test each seeded source is logged as key-value fields."""
        with patch("discussion_sync.seed.sources.logger") as logger:
            await seed_sources(test_session)

        logger.info.assert_any_call("Seeded source", icon="🎨", name="Figma", source_type="figma")
        logger.info.assert_any_call("Seeded source", icon="💬", name="Slack", source_type="slack")
        for call in logger.info.call_args_list:
            assert "{" not in call.args[0]

