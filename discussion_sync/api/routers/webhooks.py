"""Inbound webhooks from Slack and Mailgun.

These routes carry no ``X-User-Id``. Each request is authenticated by its
provider signature and attributed to the team of the matching source config.
"""

import json
from typing import Union

from fastapi import APIRouter, Request

from discussion_sync.api.auth import AppSettings
from discussion_sync.api.exceptions import (
    InvalidPayloadError,
    WebhookAuthenticationError,
    WebhookNotConfiguredError,
)
from discussion_sync.api.schemas import SlackChallengeResponse, WebhookAck
from discussion_sync.database import DbSession
from discussion_sync.logging_config import get_logger
from discussion_sync.services.ingestion import ingest_figma_email, ingest_slack_event
from discussion_sync.services.signatures import verify_mailgun_signature, verify_slack_signature

logger = get_logger(__name__)

router = APIRouter(prefix="/webhook")


@router.post(
    "/slack/events",
    response_model=Union[SlackChallengeResponse, WebhookAck],
    response_model_exclude_none=True,
)
async def slack_events(
    request: Request,
    db: DbSession,
    settings: AppSettings,
) -> Union[SlackChallengeResponse, WebhookAck]:
    """Receive Slack Events API deliveries.

    The signature is checked against the raw body before anything is parsed.
    """
    if not settings.slack_signing_secret:
        logger.error("Slack webhook called but SLACK_SIGNING_SECRET is not set")
        raise WebhookNotConfiguredError("Slack signing secret is not configured")

    timestamp = request.headers.get("X-Slack-Request-Timestamp")
    signature = request.headers.get("X-Slack-Signature")
    if not timestamp or not signature:
        raise WebhookAuthenticationError("Missing signature headers")

    body = await request.body()
    if not body:
        raise InvalidPayloadError("Empty request body")

    if not verify_slack_signature(body, timestamp, signature, settings.slack_signing_secret):
        logger.warning("Rejected Slack request with invalid signature")
        raise WebhookAuthenticationError()

    try:
        payload = json.loads(body)
    except ValueError as exc:
        raise InvalidPayloadError("Request body is not valid JSON") from exc
    if not isinstance(payload, dict):
        raise InvalidPayloadError("Request body must be a JSON object")

    return await ingest_slack_event(db, payload, settings.encryption_key)


@router.post("/mailgun/figma", response_model=WebhookAck, response_model_exclude_none=True)
async def mailgun_figma(
    request: Request,
    db: DbSession,
    settings: AppSettings,
) -> WebhookAck:
    """Receive Figma comment emails forwarded by a Mailgun route.

    Without ``MAILGUN_WEBHOOK_SECRET`` signatures are not checked.
    """
    form = await request.form()
    payload = {key: value for key, value in form.items() if isinstance(value, str)}

    if settings.mailgun_webhook_secret:
        verified = verify_mailgun_signature(
            payload.get("timestamp"),
            payload.get("token"),
            payload.get("signature"),
            settings.mailgun_webhook_secret,
        )
        if not verified:
            logger.warning("Rejected Mailgun request with invalid signature")
            raise WebhookAuthenticationError()
    else:
        logger.warning("MAILGUN_WEBHOOK_SECRET not set, skipping signature verification")

    return await ingest_figma_email(db, payload, settings.encryption_key)
