"""Discussion source adapters."""

from discussion_sync.adapters.base import (
    AdapterRegistry,
    ParsedDiscussion,
    PayloadParseError,
    SourceAdapter,
)
from discussion_sync.adapters.email_parser import EmailParser, EmailParseResult, FigmaEmailData
from discussion_sync.adapters.figma import FigmaAdapter
from discussion_sync.adapters.slack import SlackAdapter

# Create and populate the default adapter registry
default_registry = AdapterRegistry()
default_registry.register("figma", FigmaAdapter)
default_registry.register("slack", SlackAdapter)


def get_adapter(source_type: str) -> SourceAdapter:
    """Get an adapter instance for the given source type."""
    return default_registry.get(source_type)


def available_adapters() -> list[str]:
    """List available adapter source types."""
    return default_registry.available_sources()


__all__ = [
    # Base classes
    "AdapterRegistry",
    "ParsedDiscussion",
    "PayloadParseError",
    "SourceAdapter",
    # Figma
    "EmailParser",
    "EmailParseResult",
    "FigmaAdapter",
    "FigmaEmailData",
    # Slack
    "SlackAdapter",
    # Registry functions
    "available_adapters",
    "default_registry",
    "get_adapter",
]
