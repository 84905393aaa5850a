"""Pydantic schemas for inbound webhook responses."""

from typing import Optional

from pydantic import BaseModel


class SlackChallengeResponse(BaseModel):
    """Echo of a Slack ``url_verification`` challenge."""

    challenge: str


class WebhookAck(BaseModel):
    """Acknowledgement of a webhook delivery."""

    ok: bool = True
    discussion_id: Optional[str] = None
    duplicate: bool = False
    message: Optional[str] = None
