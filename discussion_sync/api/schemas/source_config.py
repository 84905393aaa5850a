"""Pydantic schemas for source configurations."""

from typing import Any, ClassVar, Optional

from pydantic import BaseModel, Field, field_validator

from discussion_sync.api.schemas.common import EnrichedResponse, RecordBase, not_null
from discussion_sync.api.schemas.source import SourceRecord


class SourceConfigFields(BaseModel):
    """Fields a client may set on a source config.

    Credentials are sent in plaintext and stored encrypted.
    """

    source_id: str = Field(..., min_length=1, description="Source definition id (figma, slack)")
    name: str = Field(..., min_length=1, max_length=255)
    email_address: Optional[str] = None
    email_slug: Optional[str] = None
    webhook_url: Optional[str] = None
    webhook_secret: Optional[str] = None
    api_token: Optional[str] = None
    notion_token: Optional[str] = None
    notion_database_id: str = Field(..., min_length=1)
    notion_field_mapping: Optional[dict[str, Any]] = Field(default_factory=dict)
    anthropic_api_key: Optional[str] = None
    ai_enabled: bool = False
    ai_summary_prompt: Optional[str] = None
    ai_task_prompt: Optional[str] = None
    auto_sync: bool = False
    post_confirmation: bool = False
    active: bool = False
    onboarding_complete: bool = False
    source_metadata: Optional[dict[str, Any]] = Field(
        default_factory=dict,
        description="Source-specific settings, e.g. the Slack workspace_id",
    )


class SourceConfigCreate(SourceConfigFields):
    """Schema for creating a source config."""


class SourceConfigUpdate(BaseModel):
    """Schema for updating a source config."""

    source_id: Optional[str] = Field(None, min_length=1)
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email_address: Optional[str] = None
    email_slug: Optional[str] = None
    webhook_url: Optional[str] = None
    webhook_secret: Optional[str] = None
    api_token: Optional[str] = None
    notion_token: Optional[str] = None
    notion_database_id: Optional[str] = Field(None, min_length=1)
    notion_field_mapping: Optional[dict[str, Any]] = None
    anthropic_api_key: Optional[str] = None
    ai_enabled: Optional[bool] = None
    ai_summary_prompt: Optional[str] = None
    ai_task_prompt: Optional[str] = None
    auto_sync: Optional[bool] = None
    post_confirmation: Optional[bool] = None
    active: Optional[bool] = None
    onboarding_complete: Optional[bool] = None
    source_metadata: Optional[dict[str, Any]] = None

    @field_validator(
        "source_id",
        "name",
        "notion_database_id",
        "ai_enabled",
        "auto_sync",
        "post_confirmation",
        "active",
        "onboarding_complete",
    )
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        return not_null(v)


class SourceConfigRecord(RecordBase, SourceConfigFields):
    """A source config row. Credential fields carry the stored ciphertext."""


class SourceConfigResponse(SourceConfigRecord, EnrichedResponse):
    """A source config with its source definition and user attribution."""

    related_schemas: ClassVar[dict[str, type[BaseModel]]] = {"source": SourceRecord}

    source: Optional[SourceRecord] = None


class ConfigValidationResponse(BaseModel):
    """Result of checking a source config against its adapter."""

    valid: bool
    errors: list[str] = Field(default_factory=list)
