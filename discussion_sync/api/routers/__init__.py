"""API routers for Discussion Sync Server."""

from discussion_sync.api.routers import (
    discussions,
    health,
    sourceconfigs,
    sources,
    syncjobs,
    tasks,
    webhooks,
)

__all__ = [
    "discussions",
    "health",
    "sourceconfigs",
    "sources",
    "syncjobs",
    "tasks",
    "webhooks",
]
