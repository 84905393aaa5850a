"""API authentication middleware and team membership dependencies."""

import fnmatch
import secrets
from dataclasses import dataclass
from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, Path, status
from sqlalchemy import select

from discussion_sync.api.exceptions import ForbiddenError
from discussion_sync.config import Settings, get_settings
from discussion_sync.database import DbSession
from discussion_sync.logging_config import get_logger
from discussion_sync.models import TeamMember

logger = get_logger(__name__)


class AuthenticationError(HTTPException):
    """Authentication failed exception."""

    def __init__(self, detail: str = "Invalid or missing API key"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "ApiKey"},
        )


def is_path_exempt(path: str, exempt_paths: list[str]) -> bool:
    """Check if a path is exempt from authentication.

    Args:
        path: The request path to check
        exempt_paths: List of exempt path patterns (supports * wildcards)
    """
    for pattern in exempt_paths:
        if fnmatch.fnmatch(path, pattern):
            return True
        if fnmatch.fnmatch(path.rstrip("/"), pattern.rstrip("/")):
            return True
    return False


def verify_api_key(api_key: str, valid_keys: list[str]) -> bool:
    """Verify an API key using constant-time comparison."""
    for valid_key in valid_keys:
        if secrets.compare_digest(api_key, valid_key):
            return True
    return False


class APIKeyAuthMiddleware:
    """ASGI middleware rejecting requests without a valid API key.

    Paths in ``auth_exempt_paths`` pass through untouched.
    """

    def __init__(self, app, settings: Optional[Settings] = None):
        self.app = app
        self._settings = settings

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http" or not self.settings.auth_required:
            await self.app(scope, receive, send)
            return

        path = scope.get("path", "")
        if is_path_exempt(path, self.settings.auth_exempt_paths):
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers", []))
        api_key_bytes = headers.get(self.settings.api_key_header.lower().encode())
        api_key = api_key_bytes.decode() if api_key_bytes else None

        if not api_key or not verify_api_key(api_key, self.settings.api_keys):
            logger.warning("Authentication failed", path=path)
            response_body = b'{"error":{"code":"UNAUTHORIZED","message":"Invalid or missing API key","status":401}}'
            await send({
                "type": "http.response.start",
                "status": 401,
                "headers": [
                    (b"content-type", b"application/json"),
                    (b"www-authenticate", b"ApiKey"),
                ],
            })
            await send({"type": "http.response.body", "body": response_body})
            return

        await self.app(scope, receive, send)


async def get_current_user_id(
    x_user_id: Annotated[Optional[str], Header()] = None,
) -> str:
    """Identity of the caller, as asserted by the upstream gateway."""
    if not x_user_id:
        raise AuthenticationError("User identity required. Provide via X-User-Id header.")
    return x_user_id


@dataclass
class TeamContext:
    """The team addressed by a request and the member making it."""

    team_id: str
    user_id: str


async def resolve_team_membership(
    db: DbSession,
    team_id: Annotated[str, Path()],
    user_id: Annotated[str, Depends(get_current_user_id)],
) -> TeamContext:
    """Resolve the team from the path and check the caller belongs to it."""
    stmt = select(TeamMember).where(
        TeamMember.team_id == team_id,
        TeamMember.user_id == user_id,
    )
    result = await db.execute(stmt)
    if result.scalar_one_or_none() is None:
        logger.warning("Team membership check failed", team_id=team_id, user_id=user_id)
        raise ForbiddenError()
    return TeamContext(team_id=team_id, user_id=user_id)


CurrentTeam = Annotated[TeamContext, Depends(resolve_team_membership)]

AppSettings = Annotated[Settings, Depends(get_settings)]
