"""Webhook request signature verification for Slack and Mailgun."""

import hashlib
import hmac
import time
from typing import Optional, Union

from discussion_sync.logging_config import get_logger

logger = get_logger(__name__)

# Slack rejects requests older than five minutes to prevent replays
SLACK_MAX_AGE_SECONDS = 60 * 5
MAILGUN_MAX_AGE_SECONDS = 60 * 15


def _parse_timestamp(timestamp: Optional[str]) -> Optional[int]:
    try:
        return int(timestamp)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


def compute_slack_signature(body: Union[bytes, str], timestamp: str, secret: str) -> str:
    """Compute the ``v0=`` signature Slack sends in ``X-Slack-Signature``."""
    if isinstance(body, str):
        body = body.encode("utf-8")
    base = b"v0:" + timestamp.encode() + b":" + body
    digest = hmac.new(secret.encode(), base, hashlib.sha256).hexdigest()
    return f"v0={digest}"


def verify_slack_signature(
    body: Union[bytes, str],
    timestamp: Optional[str],
    signature: Optional[str],
    secret: str,
    now: Optional[float] = None,
) -> bool:
    """Verify a Slack request signature.

    Args:
        body: Raw request body exactly as received
        timestamp: ``X-Slack-Request-Timestamp`` header
        signature: ``X-Slack-Signature`` header
        secret: Slack app signing secret
        now: Current unix time, defaults to the system clock

    Returns:
        True only when the timestamp is recent and the signature matches.
    """
    if not timestamp or not signature:
        return False

    request_time = _parse_timestamp(timestamp)
    if request_time is None:
        logger.warning("Invalid Slack timestamp", timestamp=timestamp)
        return False

    current_time = int(time.time() if now is None else now)
    if abs(current_time - request_time) > SLACK_MAX_AGE_SECONDS:
        logger.warning("Slack request timestamp too old", age=current_time - request_time)
        return False

    expected = compute_slack_signature(body, timestamp, secret)
    return hmac.compare_digest(expected.encode(), signature.encode())


def compute_mailgun_signature(timestamp: str, token: str, secret: str) -> str:
    """Compute the hex signature Mailgun posts alongside ``timestamp`` and ``token``."""
    return hmac.new(secret.encode(), f"{timestamp}{token}".encode(), hashlib.sha256).hexdigest()


def verify_mailgun_signature(
    timestamp: Optional[str],
    token: Optional[str],
    signature: Optional[str],
    secret: str,
    now: Optional[float] = None,
) -> bool:
    """Verify a Mailgun webhook signature.

    Requests older than fifteen minutes are rejected. Only age is checked,
    so a timestamp slightly in the future is accepted.
    """
    if not timestamp or not token or not signature:
        logger.warning(
            "Missing Mailgun signature fields",
            has_timestamp=bool(timestamp),
            has_token=bool(token),
            has_signature=bool(signature),
        )
        return False

    request_time = _parse_timestamp(timestamp)
    if request_time is None:
        return False

    current_time = int(time.time() if now is None else now)
    if current_time - request_time > MAILGUN_MAX_AGE_SECONDS:
        logger.warning("Mailgun timestamp too old", age=current_time - request_time)
        return False

    expected = compute_mailgun_signature(timestamp, token, secret)
    return hmac.compare_digest(expected.encode(), signature.encode())
