"""Figma adapter: turns forwarded comment notification emails into discussions."""

import re
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from discussion_sync.adapters.base import ParsedDiscussion, PayloadParseError, SourceAdapter
from discussion_sync.adapters.email_parser import EmailParser
from discussion_sync.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_TEAM_SLUG = "default"
TEAM_SLUG_PATTERN = re.compile(r"^([^@]+)@")


def _first(payload: Mapping[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        value = payload.get(key)
        if value:
            return value
    return None


def extract_team_slug(recipient: Optional[str]) -> str:
    """``team-slug@comments.example.com`` -> ``team-slug``."""
    match = TEAM_SLUG_PATTERN.match(recipient or "")
    if not match:
        logger.warning("Could not extract team slug from recipient", recipient=recipient)
        return DEFAULT_TEAM_SLUG
    return match.group(1)


class FigmaAdapter(SourceAdapter):
    """Adapter for Figma comments delivered by email through Mailgun."""

    def __init__(self, email_parser: Optional[EmailParser] = None):
        self.email_parser = email_parser or EmailParser()

    @property
    def source_type(self) -> str:
        return "figma"

    def parse_incoming(self, payload: Mapping[str, Any]) -> ParsedDiscussion:
        """Parse a Mailgun inbound route payload."""
        html = _first(payload, "body-html", "html")
        from_email = _first(payload, "From", "from", "sender")
        subject = _first(payload, "Subject", "subject")
        recipient = _first(payload, "To", "to", "recipient")

        if not html:
            raise PayloadParseError("No HTML body found in email payload")
        if not from_email:
            raise PayloadParseError("No sender email found in payload")

        result = self.email_parser.parse(html, from_email)
        if not result.success or result.data is None:
            raise PayloadParseError(f"Failed to parse email: {result.error or 'Unknown error'}")
        data = result.data

        return ParsedDiscussion(
            source_type=self.source_type,
            source_thread_id=data.comment_id or data.file_key,
            source_url=data.figma_url,
            team_id=extract_team_slug(recipient),
            author_handle=data.author_email,
            title=subject or f"Comment on {data.file_name}",
            content=data.comment_text,
            participants=[data.author_email],
            timestamp=datetime.now(timezone.utc),
            metadata={
                **data.metadata,
                "file_key": data.file_key,
                "file_name": data.file_name,
                "author_name": data.author_name,
                "author_email": data.author_email,
                "comment_id": data.comment_id,
            },
        )

    def validate_config(self, config: Mapping[str, Any]) -> list[str]:
        errors = []
        if not config.get("api_token"):
            errors.append("Figma API token is required")
        errors.extend(self._require_notion(config))
        return errors
