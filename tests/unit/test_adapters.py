"""Tests for the source adapters and their registry."""

import pytest

from discussion_sync.adapters import (
    AdapterRegistry,
    FigmaAdapter,
    PayloadParseError,
    SlackAdapter,
    available_adapters,
    get_adapter,
)
from discussion_sync.adapters.figma import extract_team_slug
from discussion_sync.adapters.slack import build_slack_url, clean_mention_text


def slack_event(**event_overrides) -> dict:
    event = {
        "type": "app_mention",
        "user": "U123",
        "text": "<@UBOT> please fix the header spacing",
        "channel": "C456",
        "ts": "1700000000.123456",
        "event_ts": "1700000000.123456",
    }
    event.update(event_overrides)
    return {"type": "event_callback", "team_id": "T789", "event_id": "Ev001", "event": event}


FIGMA_EMAIL = {
    "body-html": (
        "<table><tr><td>@Figbot tighten the card padding</td></tr></table>"
        '<a href="https://www.figma.com/file/key42/Cards#comment-555">View</a>'
    ),
    "From": "Dana Designer <comments-key42@email.figma.com>",
    "To": "team-1@comments.example.com",
}


class TestRegistry:
    """Tests for adapter lookup."""

    def test_default_adapters(self):
        """Test Figma and Slack are registered."""
        assert available_adapters() == ["figma", "slack"]
        assert isinstance(get_adapter("figma"), FigmaAdapter)
        assert isinstance(get_adapter("slack"), SlackAdapter)

    def test_unknown_source(self):
        """Test an unregistered source names the available ones."""
        with pytest.raises(ValueError, match="No adapter registered for source type: linear"):
            get_adapter("linear")

    def test_empty_registry(self):
        """Test a fresh registry has nothing registered."""
        registry = AdapterRegistry()

        assert not registry.has("slack")
        with pytest.raises(ValueError, match="Available: none"):
            registry.get("slack")


class TestSlackAdapter:
    """Tests for parsing Slack mentions."""

    def test_parse_mention(self):
        """Test a top-level mention becomes its own source thread."""
        parsed = SlackAdapter().parse_incoming(slack_event())

        assert parsed.source_type == "slack"
        assert parsed.source_thread_id == "1700000000.123456"
        assert parsed.team_id == "T789"
        assert parsed.content == "please fix the header spacing"
        assert parsed.title == "Slack message from <@U123>"
        assert parsed.author_handle == "U123"
        assert parsed.participants == ["U123"]
        assert parsed.source_url == (
            "https://slack.com/app_redirect?team=T789&channel=C456&message=1700000000123456"
        )
        assert parsed.metadata["event_id"] == "Ev001"
        assert parsed.metadata["workspace_id"] == "T789"
        assert parsed.timestamp.year == 2023

    def test_threaded_reply_uses_thread_ts(self):
        """Test mentions inside a thread share the thread's id."""
        parsed = SlackAdapter().parse_incoming(slack_event(thread_ts="1699999999.000100"))

        assert parsed.source_thread_id == "1699999999.000100"
        assert parsed.metadata["message_ts"] == "1700000000.123456"

    @pytest.mark.parametrize(
        "payload,message",
        [
            (slack_event(type="message"), "expected app_mention"),
            (slack_event(channel=None), "Missing required event fields"),
            (slack_event(event_ts="not-a-number"), "Invalid event_ts"),
            ({**slack_event(), "team_id": None}, "No team_id"),
        ],
    )
    def test_invalid_payloads(self, payload, message):
        """Test malformed events raise a parse error."""
        with pytest.raises(PayloadParseError, match=message):
            SlackAdapter().parse_incoming(payload)

    def test_validate_config(self):
        """Test missing credentials are each reported."""
        assert SlackAdapter().validate_config({}) == [
            "Slack bot token is required",
            "Notion API token is required",
            "Notion database ID is required",
        ]
        assert SlackAdapter().validate_config({
            "api_token": "xoxb",
            "notion_token": "secret",
            "notion_database_id": "db",
        }) == []

    def test_helpers(self):
        """Test URL building and mention stripping."""
        assert build_slack_url("T1", "C1", "1.2") == "https://slack.com/app_redirect?team=T1&channel=C1&message=12"
        assert clean_mention_text("<@U1> hi <@U2>") == "hi"


class TestFigmaAdapter:
    """Tests for parsing forwarded Figma emails."""

    def test_parse_email(self):
        """Test the comment, file and team are read from a Mailgun payload."""
        parsed = FigmaAdapter().parse_incoming(FIGMA_EMAIL)

        assert parsed.source_type == "figma"
        assert parsed.team_id == "team-1"
        assert parsed.source_thread_id == "555"
        assert parsed.content == "@Figbot tighten the card padding"
        assert parsed.author_handle == "comments-key42@email.figma.com"
        assert parsed.title == "Comment on Untitled"
        assert parsed.metadata["file_key"] == "key42"
        assert parsed.metadata["author_name"] == "Dana Designer"

    def test_subject_used_as_title(self):
        """Test the email subject becomes the title when present."""
        parsed = FigmaAdapter().parse_incoming({**FIGMA_EMAIL, "subject": "New comment on Cards"})

        assert parsed.title == "New comment on Cards"

    def test_missing_html(self):
        """Test a payload without a body is rejected."""
        with pytest.raises(PayloadParseError, match="No HTML body"):
            FigmaAdapter().parse_incoming({"From": "a@b.com"})

    def test_unparseable_email(self):
        """Test the parser error is carried in the exception."""
        payload = {**FIGMA_EMAIL, "body-html": "<p>Unsubscribe</p>"}

        with pytest.raises(PayloadParseError, match="All strategies failed"):
            FigmaAdapter().parse_incoming(payload)

    @pytest.mark.parametrize(
        "recipient,slug",
        [("design-team@in.example.com", "design-team"), ("", "default"), (None, "default")],
    )
    def test_team_slug(self, recipient, slug):
        """Test the team comes from the local part of the recipient."""
        assert extract_team_slug(recipient) == slug

    def test_validate_config(self):
        """Test a Figma config needs its API token."""
        errors = FigmaAdapter().validate_config({"notion_token": "n", "notion_database_id": "db"})

        assert errors == ["Figma API token is required"]
