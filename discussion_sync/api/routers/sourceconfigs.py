"""Source configuration endpoints."""

from typing import Optional

from fastapi import APIRouter, Query, status

from discussion_sync.adapters import get_adapter
from discussion_sync.api.auth import AppSettings, CurrentTeam
from discussion_sync.api.exceptions import NotFoundOrUnauthorized, UnsupportedSourceError
from discussion_sync.api.routers.tasks import parse_ids
from discussion_sync.api.schemas import (
    ConfigValidationResponse,
    DeleteResponse,
    SourceConfigCreate,
    SourceConfigRecord,
    SourceConfigResponse,
    SourceConfigUpdate,
)
from discussion_sync.database import DbSession
from discussion_sync.repositories import SourceConfigRepository

router = APIRouter(prefix="/teams/{team_id}/discussion-sync-sourceconfigs")


@router.get("", response_model=list[SourceConfigResponse])
async def list_source_configs(
    db: DbSession,
    team: CurrentTeam,
    settings: AppSettings,
    ids: Optional[str] = Query(None, description="Comma-separated source config ids"),
) -> list[SourceConfigResponse]:
    """List the team's source configs, most recent first."""
    repo = SourceConfigRepository(db, settings.encryption_key)
    if ids:
        items = await repo.list_by_ids(team.team_id, parse_ids(ids))
    else:
        items = await repo.list_all(team.team_id)
    return [SourceConfigResponse.from_enriched(item) for item in items]


@router.post("", response_model=SourceConfigRecord, status_code=status.HTTP_201_CREATED)
async def create_source_config(
    payload: SourceConfigCreate,
    db: DbSession,
    team: CurrentTeam,
    settings: AppSettings,
) -> SourceConfigRecord:
    """Create a source config owned by the caller. Credentials are encrypted."""
    repo = SourceConfigRepository(db, settings.encryption_key)
    config = await repo.create({
        **payload.model_dump(),
        "team_id": team.team_id,
        "owner": team.user_id,
        "created_by": team.user_id,
        "updated_by": team.user_id,
    })
    return SourceConfigRecord.model_validate(config)


@router.patch("/{sourceconfig_id}", response_model=SourceConfigRecord)
async def update_source_config(
    sourceconfig_id: str,
    payload: SourceConfigUpdate,
    db: DbSession,
    team: CurrentTeam,
    settings: AppSettings,
) -> SourceConfigRecord:
    """Update a source config the caller owns."""
    repo = SourceConfigRepository(db, settings.encryption_key)
    config = await repo.update(
        sourceconfig_id,
        team.team_id,
        team.user_id,
        payload.model_dump(exclude_unset=True),
    )
    return SourceConfigRecord.model_validate(config)


@router.delete("/{sourceconfig_id}", response_model=DeleteResponse)
async def delete_source_config(
    sourceconfig_id: str,
    db: DbSession,
    team: CurrentTeam,
    settings: AppSettings,
) -> DeleteResponse:
    """Delete a source config the caller owns."""
    repo = SourceConfigRepository(db, settings.encryption_key)
    return DeleteResponse(**await repo.delete(sourceconfig_id, team.team_id, team.user_id))


@router.post("/{sourceconfig_id}/validate", response_model=ConfigValidationResponse)
async def validate_source_config(
    sourceconfig_id: str,
    db: DbSession,
    team: CurrentTeam,
    settings: AppSettings,
) -> ConfigValidationResponse:
    """Check a team's source config has what its adapter needs.

    Only the presence of credentials is checked. No third-party API is
    called.
    """
    repo = SourceConfigRepository(db, settings.encryption_key)
    items = await repo.list_by_ids(team.team_id, [sourceconfig_id])
    if not items:
        raise NotFoundOrUnauthorized(repo.resource_name)

    item = items[0]
    config = item.record
    source = item.related.get("source")
    source_type = source.source_type if source is not None else config.source_id
    try:
        adapter = get_adapter(source_type)
    except ValueError as exc:
        raise UnsupportedSourceError(str(exc)) from exc

    errors = adapter.validate_config({
        "notion_database_id": config.notion_database_id,
        **repo.credentials(config),
    })
    return ConfigValidationResponse(valid=not errors, errors=errors)
