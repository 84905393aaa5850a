"""Turn verified webhook deliveries into discussion records."""

from typing import Any, Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from discussion_sync.adapters import PayloadParseError, get_adapter
from discussion_sync.api.exceptions import InvalidPayloadError, SourceConfigNotFound
from discussion_sync.api.schemas import SlackChallengeResponse, WebhookAck
from discussion_sync.logging_config import get_logger
from discussion_sync.repositories import DiscussionRepository, SourceConfigRepository

logger = get_logger(__name__)

# created_by / updated_by of discussions written by webhooks
SLACK_WEBHOOK_ACTOR = "slack-webhook"
MAILGUN_WEBHOOK_ACTOR = "mailgun-webhook"

PENDING = "pending"


async def ingest_slack_event(
    session: AsyncSession,
    payload: Mapping[str, Any],
    encryption_key: str,
) -> SlackChallengeResponse | WebhookAck:
    """Handle one verified Slack Events API delivery.

    ``url_verification`` echoes the challenge. An ``app_mention`` callback
    becomes a pending discussion owned by the matching Slack config's
    owner. Other events and redeliveries of a seen ``event_id`` are
    acknowledged without writing anything.

    Raises:
        InvalidPayloadError: the mention could not be parsed
        SourceConfigNotFound: no Slack config names the sending workspace
    """
    payload_type = payload.get("type")

    if payload_type == "url_verification":
        logger.info("Responding to Slack URL verification challenge")
        return SlackChallengeResponse(challenge=str(payload.get("challenge", "")))

    if payload_type != "event_callback":
        logger.warning("Unknown Slack payload type", payload_type=payload_type)
        return WebhookAck()

    event_type = (payload.get("event") or {}).get("type")
    if event_type != "app_mention":
        logger.info("Ignoring Slack event", event_type=event_type)
        return WebhookAck()

    try:
        parsed = get_adapter("slack").parse_incoming(payload)
    except PayloadParseError as exc:
        raise InvalidPayloadError(str(exc)) from exc

    configs = SourceConfigRepository(session, encryption_key)
    config = await configs.find_for_slack_workspace(parsed.team_id)
    if config is None:
        logger.warning("No Slack source config for workspace", workspace_id=parsed.team_id)
        raise SourceConfigNotFound("No source configuration found for this workspace")

    discussions = DiscussionRepository(session)
    event_id = payload.get("event_id")
    if event_id:
        existing = await discussions.find_by_event_id(config.team_id, parsed.source_thread_id, event_id)
        if existing is not None:
            logger.info("Duplicate Slack event skipped", event_id=event_id, discussion_id=existing.id)
            return WebhookAck(discussion_id=existing.id, duplicate=True)

    discussion = await discussions.create({
        "team_id": config.team_id,
        "owner": config.owner,
        "created_by": SLACK_WEBHOOK_ACTOR,
        "updated_by": SLACK_WEBHOOK_ACTOR,
        "source_type": parsed.source_type,
        "source_thread_id": parsed.source_thread_id,
        "source_url": parsed.source_url,
        "source_config_id": config.id,
        "title": parsed.title,
        "content": parsed.content,
        "author_handle": parsed.author_handle,
        "participants": parsed.participants,
        "status": PENDING,
        "raw_payload": dict(payload),
        "meta": parsed.metadata,
    })
    logger.info(
        "Discussion created from Slack mention",
        discussion_id=discussion.id,
        team_id=config.team_id,
        source_config_id=config.id,
    )
    return WebhookAck(discussion_id=discussion.id)


async def ingest_figma_email(
    session: AsyncSession,
    payload: Mapping[str, Any],
    encryption_key: str,
) -> WebhookAck:
    """Handle one verified Mailgun delivery of a Figma comment email.

    The team is named by the local part of the recipient address. A
    comment already captured for that team is acknowledged as a duplicate.

    Raises:
        InvalidPayloadError: the email could not be parsed
        SourceConfigNotFound: the team has no active Figma config
    """
    try:
        parsed = get_adapter("figma").parse_incoming(payload)
    except PayloadParseError as exc:
        raise InvalidPayloadError(str(exc)) from exc

    team_id = parsed.team_id
    configs = SourceConfigRepository(session, encryption_key)
    config = await configs.find_active(team_id, "figma")
    if config is None:
        logger.warning("No active Figma config for team", team_id=team_id)
        raise SourceConfigNotFound(f"No active Figma config found for team: {team_id}")

    discussions = DiscussionRepository(session)
    existing = await discussions.find_by_source_thread(team_id, parsed.source_type, parsed.source_thread_id)
    if existing:
        logger.info("Figma discussion already exists", discussion_id=existing[0].id)
        return WebhookAck(
            discussion_id=existing[0].id,
            duplicate=True,
            message="Discussion already exists",
        )

    discussion = await discussions.create({
        "team_id": team_id,
        "owner": config.owner,
        "created_by": MAILGUN_WEBHOOK_ACTOR,
        "updated_by": MAILGUN_WEBHOOK_ACTOR,
        "source_type": parsed.source_type,
        "source_thread_id": parsed.source_thread_id,
        "source_url": parsed.source_url,
        "source_config_id": config.id,
        "title": parsed.title,
        "content": parsed.content,
        "author_handle": parsed.author_handle,
        "participants": parsed.participants,
        "status": PENDING,
        "raw_payload": dict(payload),
        "meta": parsed.metadata,
    })
    logger.info("Discussion created from Figma email", discussion_id=discussion.id, team_id=team_id)
    return WebhookAck(discussion_id=discussion.id, message="Discussion created")
