"""Discussion Sync Server - team-scoped storage for synced discussions and tasks."""

__version__ = "0.1.0"
