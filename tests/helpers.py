"""Shared test data helpers."""

from datetime import datetime, timedelta, timezone

TEAM_ID = "team-1"
OTHER_TEAM_ID = "team-2"

ENCRYPTION_KEY = "test-encryption-key-with-32-chars!"
SLACK_SIGNING_SECRET = "slack-signing-secret"
MAILGUN_SIGNING_KEY = "mailgun-signing-key"
SLACK_WORKSPACE_ID = "T0WORKSPACE"


def owned_by(user_id: str, team_id: str = TEAM_ID) -> dict[str, str]:
    """Ownership columns for a record created by ``user_id``."""
    return {
        "team_id": team_id,
        "owner": user_id,
        "created_by": user_id,
        "updated_by": user_id,
    }


def at(seconds: int) -> dict[str, datetime]:
    """Timestamps ``seconds`` after a fixed instant, for ordering tests."""
    moment = datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=seconds)
    return {"created_at": moment, "updated_at": moment}
