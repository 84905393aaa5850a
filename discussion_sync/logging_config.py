"""Structured logging for Discussion Sync.

Every event carries the service name and environment. Values of credential
keys (source config tokens, webhook secrets, the encryption key) are masked
before rendering, whether they are logged by name or inside a nested dict.
"""

import logging
import sys
from typing import Any, Optional

import structlog

from discussion_sync.config import Settings, get_settings

SERVICE_NAME = "discussion-sync"
REDACTED = "[redacted]"

SECRET_KEYS = frozenset({
    "api_token",
    "notion_token",
    "anthropic_api_key",
    "webhook_secret",
    "encryption_key",
    "slack_signing_secret",
    "mailgun_webhook_secret",
    "api_keys",
    "x-api-key",
    "x-slack-signature",
    "signature",
})

# Libraries whose INFO output floods request logs
NOISY_LOGGERS = ("uvicorn.access", "multipart")


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            key: REDACTED if str(key).lower() in SECRET_KEYS and item else _redact(item)
            for key, item in value.items()
        }
    return value


def redact_secrets(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Mask credential values in an event, including one level of nested dicts."""
    for key, value in list(event_dict.items()):
        if key.lower() in SECRET_KEYS and value:
            event_dict[key] = REDACTED
        elif isinstance(value, dict):
            event_dict[key] = _redact(value)
    return event_dict


def add_service_context(environment: str) -> structlog.types.Processor:
    """Processor stamping ``service`` and ``environment`` on every event."""

    def processor(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", SERVICE_NAME)
        event_dict.setdefault("environment", environment)
        return event_dict

    return processor


def build_processors(settings: Settings) -> list[structlog.types.Processor]:
    """Processor chain for the given settings, renderer last.

    Production renders one JSON object per line. Everything else gets the
    coloured console renderer.
    """
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        add_service_context(settings.environment),
        redact_secrets,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.is_production:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    return processors


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Configure structlog and the standard library root logger."""
    settings = settings or get_settings()
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    structlog.configure(
        processors=build_processors(settings),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.database_echo else logging.WARNING
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a logger instance."""
    return structlog.get_logger(name)
