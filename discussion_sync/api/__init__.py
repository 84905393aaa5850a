"""HTTP API for Discussion Sync."""
