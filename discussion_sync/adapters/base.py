"""Base classes and interfaces for discussion source adapters."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional


class PayloadParseError(ValueError):
    """An incoming webhook payload could not be turned into a discussion."""


@dataclass
class ParsedDiscussion:
    """Discussion data extracted from an incoming webhook payload.

    ``team_id`` is whatever the source uses to identify the sender's
    workspace (a Slack team id, the local part of a Figma forwarding
    address). The webhook handler resolves it to a source config.
    """

    source_type: str
    source_thread_id: str
    source_url: str
    team_id: str
    author_handle: str
    title: str
    content: str
    participants: list[str] = field(default_factory=list)
    timestamp: Optional[datetime] = None
    metadata: dict[str, Any] = field(default_factory=dict)


class SourceAdapter(ABC):
    """Abstract base class for all discussion source adapters."""

    @property
    @abstractmethod
    def source_type(self) -> str:
        """Return the source type identifier (e.g., 'figma', 'slack')."""
        pass

    @abstractmethod
    def parse_incoming(self, payload: Mapping[str, Any]) -> ParsedDiscussion:
        """
        Parse a webhook payload into a discussion.

        Args:
            payload: Decoded webhook body

        Returns:
            ParsedDiscussion for the message that triggered the webhook

        Raises:
            PayloadParseError: the payload is not a usable discussion
        """
        pass

    @abstractmethod
    def validate_config(self, config: Mapping[str, Any]) -> list[str]:
        """
        Validate a source config for this adapter.

        Args:
            config: Source config fields with credentials decrypted

        Returns:
            List of validation error messages (empty if valid)
        """
        pass

    @staticmethod
    def _require_notion(config: Mapping[str, Any]) -> list[str]:
        errors = []
        if not config.get("notion_token"):
            errors.append("Notion API token is required")
        if not config.get("notion_database_id"):
            errors.append("Notion database ID is required")
        return errors


class AdapterRegistry:
    """Registry of source adapters by source type."""

    def __init__(self) -> None:
        self._adapters: dict[str, type[SourceAdapter]] = {}

    def register(self, source_type: str, adapter_class: type[SourceAdapter]) -> None:
        """Register an adapter class for a source type."""
        self._adapters[source_type] = adapter_class

    def get(self, source_type: str) -> SourceAdapter:
        """Get an adapter instance for the given source type."""
        if source_type not in self._adapters:
            available = ", ".join(self._adapters.keys()) or "none"
            raise ValueError(
                f"No adapter registered for source type: {source_type}. "
                f"Available: {available}"
            )
        return self._adapters[source_type]()

    def has(self, source_type: str) -> bool:
        """Check whether an adapter is registered for a source type."""
        return source_type in self._adapters

    def available_sources(self) -> list[str]:
        """List registered source types."""
        return list(self._adapters.keys())
