"""Shared Pydantic schemas."""

from datetime import datetime
from typing import Any, ClassVar, Optional

from pydantic import BaseModel, ConfigDict

from discussion_sync.repositories.base import EnrichedRecord


def not_null(value: Any) -> Any:
    """Reject an explicit null for a column stored NOT NULL."""
    if value is None:
        raise ValueError("Field may be omitted but not set to null")
    return value


class RecordBase(BaseModel):
    """Columns every team-owned record carries."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    team_id: str
    owner: str
    created_at: datetime
    updated_at: datetime
    created_by: str
    updated_by: str


class UserSummaryResponse(BaseModel):
    """Public projection of a user."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    avatar_url: Optional[str] = None


class EnrichedResponse(BaseModel):
    """User attribution attached to list results.

    Subclasses list their joined related records in ``related_schemas``.
    """

    model_config = ConfigDict(from_attributes=True)

    related_schemas: ClassVar[dict[str, type[BaseModel]]] = {}

    owner_user: Optional[UserSummaryResponse] = None
    created_by_user: Optional[UserSummaryResponse] = None
    updated_by_user: Optional[UserSummaryResponse] = None

    @classmethod
    def from_enriched(cls, item: EnrichedRecord) -> "EnrichedResponse":
        """Build a response from a repository result."""
        response = cls.model_validate(item.record)

        updates: dict[str, Any] = {}
        for key, schema in cls.related_schemas.items():
            related = item.related.get(key)
            updates[key] = schema.model_validate(related) if related is not None else None
        for key in ("owner_user", "created_by_user", "updated_by_user"):
            user = getattr(item, key)
            updates[key] = UserSummaryResponse.model_validate(user) if user is not None else None

        return response.model_copy(update=updates)


class DeleteResponse(BaseModel):
    """Acknowledgement of a deletion."""

    success: bool
