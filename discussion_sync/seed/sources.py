"""Seed data for discussion sync sources.

Populates the sources table with the base adapter definitions (Figma and
Slack). Seeding is skipped whenever the table already holds any row.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from discussion_sync.logging_config import get_logger
from discussion_sync.repositories.source import SourceRepository

logger = get_logger(__name__)

SYSTEM = "system"

SOURCE_SEED_DATA: list[dict[str, Any]] = [
    {
        "id": "figma",
        "team_id": SYSTEM,
        "owner": SYSTEM,
        "source_type": "figma",
        "name": "Figma",
        "description": "Sync Figma comments to Notion via email forwarding",
        "adapter_class": "FigmaAdapter",
        "icon": "🎨",
        "webhook_path": "/api/webhook/mailgun/figma",
        "requires_email": True,
        "requires_webhook": True,
        "requires_api_token": True,
        "active": True,
        "meta": {
            "supportsThreads": True,
            "supportsReactions": True,
            "requiresEmail": True,
            "emailProvider": "mailgun",
            "version": "1.0.0",
        },
        "created_by": SYSTEM,
        "updated_by": SYSTEM,
    },
    {
        "id": "slack",
        "team_id": SYSTEM,
        "owner": SYSTEM,
        "source_type": "slack",
        "name": "Slack",
        "description": "Sync Slack threads to Notion using bot mentions",
        "adapter_class": "SlackAdapter",
        "icon": "💬",
        "webhook_path": "/api/webhook/slack/events",
        "requires_email": False,
        "requires_webhook": True,
        "requires_api_token": True,
        "active": True,
        "meta": {
            "supportsThreads": True,
            "supportsReactions": True,
            "requiresOAuth": True,
            "scopes": [
                "channels:history",
                "channels:read",
                "chat:write",
                "reactions:write",
                "users:read",
                "app_mentions:read",
            ],
            "version": "1.0.0",
        },
        "created_by": SYSTEM,
        "updated_by": SYSTEM,
    },
]


async def seed_sources(session: AsyncSession) -> int:
    """Insert the source catalog unless the table already has rows.

    Returns the number of sources inserted (0 when skipped).
    """
    logger.info("Starting discussion sync sources seeding")
    repo = SourceRepository(session)

    try:
        if await repo.has_any():
            logger.info("Sources already seeded, skipping")
            return 0

        await repo.create_many(SOURCE_SEED_DATA)
        await session.commit()
    except Exception:
        await session.rollback()
        logger.exception("Failed to seed sources")
        raise

    logger.info("Successfully seeded sources", count=len(SOURCE_SEED_DATA))
    for source in SOURCE_SEED_DATA:
        logger.info(
            "Seeded source",
            icon=source["icon"],
            name=source["name"],
            source_type=source["source_type"],
        )
    return len(SOURCE_SEED_DATA)


async def clear_sources(session: AsyncSession) -> int:
    """Delete every source row. Returns the number of rows deleted."""
    logger.info("Clearing discussion sync sources")
    repo = SourceRepository(session)

    try:
        deleted = await repo.delete_all()
        await session.commit()
    except Exception:
        await session.rollback()
        logger.exception("Failed to clear sources")
        raise

    logger.info("Successfully cleared sources", deleted=deleted)
    return deleted


async def reseed_sources(session: AsyncSession) -> int:
    """Clear and seed sources. The two steps are separate commits."""
    await clear_sources(session)
    return await seed_sources(session)
