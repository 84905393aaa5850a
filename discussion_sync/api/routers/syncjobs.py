"""Sync job endpoints."""

from typing import Optional

from fastapi import APIRouter, Query, status

from discussion_sync.api.auth import CurrentTeam
from discussion_sync.api.routers.tasks import parse_ids
from discussion_sync.api.schemas import (
    DeleteResponse,
    SyncJobCreate,
    SyncJobRecord,
    SyncJobResponse,
)
from discussion_sync.database import DbSession
from discussion_sync.repositories import SyncJobRepository

router = APIRouter(prefix="/teams/{team_id}/discussion-sync-syncjobs")


@router.get("", response_model=list[SyncJobResponse])
async def list_sync_jobs(
    db: DbSession,
    team: CurrentTeam,
    ids: Optional[str] = Query(None, description="Comma-separated sync job ids"),
) -> list[SyncJobResponse]:
    """List the team's sync jobs, most recent first."""
    repo = SyncJobRepository(db)
    if ids:
        items = await repo.list_by_ids(team.team_id, parse_ids(ids))
    else:
        items = await repo.list_all(team.team_id)
    return [SyncJobResponse.from_enriched(item) for item in items]


@router.post("", response_model=SyncJobRecord, status_code=status.HTTP_201_CREATED)
async def create_sync_job(
    payload: SyncJobCreate,
    db: DbSession,
    team: CurrentTeam,
) -> SyncJobRecord:
    """Record a sync job owned by the caller."""
    repo = SyncJobRepository(db)
    job = await repo.create({
        **payload.model_dump(),
        "team_id": team.team_id,
        "owner": team.user_id,
        "created_by": team.user_id,
        "updated_by": team.user_id,
    })
    return SyncJobRecord.model_validate(job)


@router.delete("/{syncjob_id}", response_model=DeleteResponse)
async def delete_sync_job(
    syncjob_id: str,
    db: DbSession,
    team: CurrentTeam,
) -> DeleteResponse:
    """Delete a sync job the caller owns."""
    repo = SyncJobRepository(db)
    return DeleteResponse(**await repo.delete(syncjob_id, team.team_id, team.user_id))
