"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import discussion_sync.models  # noqa: F401
from discussion_sync.api.main import app
from discussion_sync.config import Settings, get_settings
from discussion_sync.database import Base, get_db
from discussion_sync.models import Discussion, SourceConfig, TeamMember, User
from discussion_sync.repositories import SourceConfigRepository
from tests.helpers import (
    ENCRYPTION_KEY,
    MAILGUN_SIGNING_KEY,
    OTHER_TEAM_ID,
    SLACK_SIGNING_SECRET,
    SLACK_WORKSPACE_ID,
    TEAM_ID,
    owned_by,
)

# Test database URL (use in-memory SQLite for unit tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def get_test_settings() -> Settings:
    """Override settings for testing."""
    return Settings(
        database_url=TEST_DATABASE_URL,
        auth_enabled=False,
        environment="test",
        log_level="WARNING",
        encryption_key=ENCRYPTION_KEY,
        slack_signing_secret=SLACK_SIGNING_SECRET,
        mailgun_webhook_secret=MAILGUN_SIGNING_KEY,
    )


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create test database engine."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async_session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(test_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield test_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = get_test_settings

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def users(test_session: AsyncSession) -> dict[str, User]:
    """Three users: alice and bob in team-1, carol in team-2."""
    alice = User(id="user-alice", name="Alice", email="alice@example.com", avatar_url="https://example.com/a.png")
    bob = User(id="user-bob", name="Bob", email="bob@example.com")
    carol = User(id="user-carol", name="Carol", email="carol@example.com")
    test_session.add_all([
        alice,
        bob,
        carol,
        TeamMember(team_id=TEAM_ID, user_id=alice.id, role="admin"),
        TeamMember(team_id=TEAM_ID, user_id=bob.id),
        TeamMember(team_id=OTHER_TEAM_ID, user_id=carol.id),
    ])
    await test_session.commit()
    return {"alice": alice, "bob": bob, "carol": carol}


@pytest_asyncio.fixture
async def source_config(test_session: AsyncSession, users) -> SourceConfig:
    """An active Figma config owned by alice, with encrypted credentials."""
    record = await SourceConfigRepository(test_session, ENCRYPTION_KEY).create({
        "id": "config-1",
        "source_id": "figma",
        "name": "Design reviews",
        "api_token": "figd_secret",
        "notion_token": "secret_notion",
        "notion_database_id": "db-1",
        "active": True,
        **owned_by(users["alice"].id),
    })
    await test_session.commit()
    return record


@pytest_asyncio.fixture
async def slack_config(test_session: AsyncSession, users) -> SourceConfig:
    """An active Slack config owned by alice for one workspace."""
    record = await SourceConfigRepository(test_session, ENCRYPTION_KEY).create({
        "id": "config-slack",
        "source_id": "slack",
        "name": "Product channel",
        "api_token": "xoxb-secret",
        "notion_token": "secret_notion",
        "notion_database_id": "db-2",
        "active": True,
        "source_metadata": {"workspace_id": SLACK_WORKSPACE_ID},
        **owned_by(users["alice"].id),
    })
    await test_session.commit()
    return record


@pytest_asyncio.fixture
async def discussion(test_session: AsyncSession, source_config) -> Discussion:
    """A Figma discussion owned by alice."""
    record = Discussion(
        id="disc-1",
        source_type="figma",
        source_thread_id="figma-thread-1",
        source_url="https://figma.com/file/abc",
        source_config_id=source_config.id,
        title="Button padding",
        content="Can we tighten the padding on the primary button?",
        author_handle="@designer",
        status="pending",
        **owned_by(source_config.owner),
    )
    test_session.add(record)
    await test_session.commit()
    return record


@pytest.fixture
def sample_task_data() -> dict[str, Any]:
    """Sample task payload."""
    return {
        "title": "Tighten primary button padding",
        "description": "Reduce horizontal padding to 12px",
        "priority": "high",
        "assignee": "@frontend",
        "source_url": "https://figma.com/file/abc",
        "meta": {"labels": ["design"]},
    }
