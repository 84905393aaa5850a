"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from discussion_sync.api.auth import APIKeyAuthMiddleware
from discussion_sync.api.exceptions import register_exception_handlers
from discussion_sync.api.middleware import RequestLoggingMiddleware
from discussion_sync.api.routers import (
    discussions,
    health,
    sourceconfigs,
    sources,
    syncjobs,
    tasks,
    webhooks,
)
from discussion_sync.config import get_settings, validate_config
from discussion_sync.database import close_db, init_db
from discussion_sync.logging_config import configure_logging, get_logger

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    configure_logging()
    logger.info("Starting Discussion Sync Server", environment=settings.environment)

    validate_config(settings, strict=settings.is_production)
    logger.info("Configuration validated")

    await init_db()
    logger.info("Database initialized")

    yield

    logger.info("Shutting down Discussion Sync Server")
    await close_db()
    logger.info("Database connections closed")


API_DESCRIPTION = """
# Discussion Sync Server API

Team-scoped storage for discussions pulled from collaboration tools (Figma,
Slack) and the tasks extracted from them.

## Identity

Every team endpoint requires an `X-User-Id` header naming the caller, who must
be a member of the team in the path. Updates and deletes only touch records
the caller owns.

## Authentication

When enabled, include your API key in the `X-API-Key` header. Health checks and
documentation are exempt, as are the webhook routes, which
verify provider signatures instead.
"""

OPENAPI_TAGS = [
    {"name": "health", "description": "Health check endpoints for monitoring"},
    {"name": "tasks", "description": "Tasks extracted from discussions"},
    {"name": "sources", "description": "Supported discussion sources"},
    {"name": "source-configs", "description": "Per-team source settings and encrypted credentials"},
    {"name": "sync-jobs", "description": "Records of sync pipeline runs"},
    {"name": "discussions", "description": "Ingested discussions"},
    {"name": "threads", "description": "Discussion threads and their AI analysis"},
    {"name": "webhooks", "description": "Signed inbound deliveries from Slack and Mailgun"},
]


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description=API_DESCRIPTION,
        docs_url=f"{settings.api_prefix}/docs",
        redoc_url=f"{settings.api_prefix}/redoc",
        openapi_url=f"{settings.api_prefix}/openapi.json",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
    )

    # First added = last executed
    if settings.auth_required:
        app.add_middleware(APIKeyAuthMiddleware, settings=settings)
        logger.info("API key authentication enabled")

    app.add_middleware(RequestLoggingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router, prefix=settings.api_prefix, tags=["health"])
    app.include_router(tasks.router, prefix=settings.api_prefix, tags=["tasks"])
    app.include_router(sources.router, prefix=settings.api_prefix, tags=["sources"])
    app.include_router(sourceconfigs.router, prefix=settings.api_prefix, tags=["source-configs"])
    app.include_router(syncjobs.router, prefix=settings.api_prefix, tags=["sync-jobs"])
    app.include_router(discussions.discussions_router, prefix=settings.api_prefix, tags=["discussions"])
    app.include_router(discussions.threads_router, prefix=settings.api_prefix, tags=["threads"])
    app.include_router(webhooks.router, prefix=settings.api_prefix, tags=["webhooks"])

    register_exception_handlers(app)

    return app


app = create_app()
