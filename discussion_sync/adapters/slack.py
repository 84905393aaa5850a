"""Slack adapter: turns Events API ``app_mention`` callbacks into discussions."""

import re
from datetime import datetime, timezone
from typing import Any, Mapping

from discussion_sync.adapters.base import ParsedDiscussion, PayloadParseError, SourceAdapter
from discussion_sync.logging_config import get_logger

logger = get_logger(__name__)

USER_MENTION_PATTERN = re.compile(r"<@[A-Z0-9]+>", re.IGNORECASE)


def build_slack_url(team_id: str, channel_id: str, message_ts: str) -> str:
    """Link to a message through Slack's app redirect."""
    url_ts = message_ts.replace(".", "", 1)
    return f"https://slack.com/app_redirect?team={team_id}&channel={channel_id}&message={url_ts}"


def clean_mention_text(text: str) -> str:
    """Strip ``<@U123>`` user mentions from message text."""
    return USER_MENTION_PATTERN.sub("", text).strip()


class SlackAdapter(SourceAdapter):
    """Adapter for Slack workspaces."""

    @property
    def source_type(self) -> str:
        return "slack"

    def parse_incoming(self, payload: Mapping[str, Any]) -> ParsedDiscussion:
        """Parse an ``event_callback`` payload carrying an ``app_mention`` event.

        Threaded replies are keyed by their ``thread_ts`` so every mention in
        one Slack thread maps to the same source thread.
        """
        event = payload.get("event") or {}
        if event.get("type") != "app_mention":
            raise PayloadParseError("Invalid event type, expected app_mention")

        channel = event.get("channel")
        message_ts = event.get("ts")
        if not channel or not message_ts:
            raise PayloadParseError("Missing required event fields (channel, ts)")

        team_id = payload.get("team_id")
        if not team_id:
            raise PayloadParseError("No team_id found in payload")

        user = event.get("user", "")
        thread_ts = event.get("thread_ts")
        source_thread_id = thread_ts or message_ts

        timestamp = None
        if event.get("event_ts"):
            try:
                timestamp = datetime.fromtimestamp(float(event["event_ts"]), tz=timezone.utc)
            except (TypeError, ValueError) as exc:
                raise PayloadParseError(f"Invalid event_ts: {event['event_ts']}") from exc

        parsed = ParsedDiscussion(
            source_type=self.source_type,
            source_thread_id=source_thread_id,
            source_url=build_slack_url(team_id, channel, source_thread_id),
            team_id=team_id,
            author_handle=user,
            title=f"Slack message from <@{user}>",
            content=clean_mention_text(event.get("text", "")),
            participants=[user] if user else [],
            timestamp=timestamp,
            metadata={
                "channel_id": channel,
                "message_ts": message_ts,
                "thread_ts": thread_ts,
                "workspace_id": team_id,
                "event_id": payload.get("event_id"),
                "raw_event": dict(event),
            },
        )
        logger.debug(
            "Parsed Slack mention",
            source_thread_id=source_thread_id,
            workspace_id=team_id,
        )
        return parsed

    def validate_config(self, config: Mapping[str, Any]) -> list[str]:
        errors = []
        if not config.get("api_token"):
            errors.append("Slack bot token is required")
        errors.extend(self._require_notion(config))
        return errors
