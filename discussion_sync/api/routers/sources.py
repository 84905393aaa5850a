"""Source definition endpoints."""

from typing import Optional

from fastapi import APIRouter, Query, status

from discussion_sync.api.auth import CurrentTeam
from discussion_sync.api.routers.tasks import parse_ids
from discussion_sync.api.schemas import (
    DeleteResponse,
    SourceCreate,
    SourceRecord,
    SourceResponse,
    SourceUpdate,
)
from discussion_sync.database import DbSession
from discussion_sync.repositories import SourceRepository

router = APIRouter(prefix="/teams/{team_id}/discussion-sync-sources")


@router.get("", response_model=list[SourceResponse])
async def list_sources(
    db: DbSession,
    team: CurrentTeam,
    ids: Optional[str] = Query(None, description="Comma-separated source ids"),
) -> list[SourceResponse]:
    """List the team's sources."""
    repo = SourceRepository(db)
    if ids:
        items = await repo.list_by_ids(team.team_id, parse_ids(ids))
    else:
        items = await repo.list_all(team.team_id)
    return [SourceResponse.from_enriched(item) for item in items]


@router.post("", response_model=SourceRecord, status_code=status.HTTP_201_CREATED)
async def create_source(
    payload: SourceCreate,
    db: DbSession,
    team: CurrentTeam,
) -> SourceRecord:
    """Create a source owned by the caller."""
    repo = SourceRepository(db)
    source = await repo.create({
        **payload.model_dump(),
        "team_id": team.team_id,
        "owner": team.user_id,
        "created_by": team.user_id,
        "updated_by": team.user_id,
    })
    return SourceRecord.model_validate(source)


@router.patch("/{source_id}", response_model=SourceRecord)
async def update_source(
    source_id: str,
    payload: SourceUpdate,
    db: DbSession,
    team: CurrentTeam,
) -> SourceRecord:
    """Update a source the caller owns."""
    repo = SourceRepository(db)
    source = await repo.update(
        source_id,
        team.team_id,
        team.user_id,
        payload.model_dump(exclude_unset=True),
    )
    return SourceRecord.model_validate(source)


@router.delete("/{source_id}", response_model=DeleteResponse)
async def delete_source(
    source_id: str,
    db: DbSession,
    team: CurrentTeam,
) -> DeleteResponse:
    """Delete a source the caller owns."""
    repo = SourceRepository(db)
    return DeleteResponse(**await repo.delete(source_id, team.team_id, team.user_id))
