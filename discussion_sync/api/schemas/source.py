"""Pydantic schemas for source definitions."""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from discussion_sync.api.schemas.common import EnrichedResponse, RecordBase, not_null


class SourceFields(BaseModel):
    """Fields a client may set on a source."""

    source_type: str = Field(..., min_length=1, max_length=50, description="Adapter type tag (figma, slack)")
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    adapter_class: str = Field(..., min_length=1, description="Adapter class name")
    icon: Optional[str] = None
    config_schema: Optional[dict[str, Any]] = Field(default_factory=dict)
    webhook_path: Optional[str] = None
    requires_email: bool = False
    requires_webhook: bool = False
    requires_api_token: bool = False
    active: bool = False
    meta: Optional[dict[str, Any]] = Field(default_factory=dict)


class SourceCreate(SourceFields):
    """Schema for creating a source."""


class SourceUpdate(BaseModel):
    """Schema for updating a source."""

    source_type: Optional[str] = Field(None, min_length=1, max_length=50)
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    adapter_class: Optional[str] = None
    icon: Optional[str] = None
    config_schema: Optional[dict[str, Any]] = None
    webhook_path: Optional[str] = None
    requires_email: Optional[bool] = None
    requires_webhook: Optional[bool] = None
    requires_api_token: Optional[bool] = None
    active: Optional[bool] = None
    meta: Optional[dict[str, Any]] = None

    @field_validator(
        "source_type",
        "name",
        "adapter_class",
        "requires_email",
        "requires_webhook",
        "requires_api_token",
        "active",
    )
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        return not_null(v)


class SourceRecord(RecordBase, SourceFields):
    """A source row."""


class SourceResponse(SourceRecord, EnrichedResponse):
    """A source with user attribution."""
