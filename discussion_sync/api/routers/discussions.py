"""Discussion and thread endpoints."""

from typing import Optional

from fastapi import APIRouter, Query

from discussion_sync.api.auth import CurrentTeam
from discussion_sync.api.routers.tasks import parse_ids
from discussion_sync.api.schemas import (
    DeleteResponse,
    DiscussionRecord,
    DiscussionResponse,
    DiscussionUpdate,
    ThreadRecord,
    ThreadResponse,
    ThreadUpdate,
)
from discussion_sync.database import DbSession
from discussion_sync.repositories import DiscussionRepository, ThreadRepository

discussions_router = APIRouter(prefix="/teams/{team_id}/discussion-sync-discussions")
threads_router = APIRouter(prefix="/teams/{team_id}/discussion-sync-threads")


@discussions_router.get("", response_model=list[DiscussionResponse])
async def list_discussions(
    db: DbSession,
    team: CurrentTeam,
    ids: Optional[str] = Query(None, description="Comma-separated discussion ids"),
) -> list[DiscussionResponse]:
    """List the team's discussions, most recent first."""
    repo = DiscussionRepository(db)
    if ids:
        items = await repo.list_by_ids(team.team_id, parse_ids(ids))
    else:
        items = await repo.list_all(team.team_id)
    return [DiscussionResponse.from_enriched(item) for item in items]


@discussions_router.patch("/{discussion_id}", response_model=DiscussionRecord)
async def update_discussion(
    discussion_id: str,
    payload: DiscussionUpdate,
    db: DbSession,
    team: CurrentTeam,
) -> DiscussionRecord:
    """Update a discussion the caller owns."""
    repo = DiscussionRepository(db)
    discussion = await repo.update(
        discussion_id,
        team.team_id,
        team.user_id,
        payload.model_dump(exclude_unset=True),
    )
    return DiscussionRecord.model_validate(discussion)


@discussions_router.delete("/{discussion_id}", response_model=DeleteResponse)
async def delete_discussion(
    discussion_id: str,
    db: DbSession,
    team: CurrentTeam,
) -> DeleteResponse:
    """Delete a discussion the caller owns."""
    repo = DiscussionRepository(db)
    return DeleteResponse(**await repo.delete(discussion_id, team.team_id, team.user_id))


@threads_router.get("", response_model=list[ThreadResponse])
async def list_threads(
    db: DbSession,
    team: CurrentTeam,
    ids: Optional[str] = Query(None, description="Comma-separated thread ids"),
) -> list[ThreadResponse]:
    """List the team's threads, most recent first."""
    repo = ThreadRepository(db)
    if ids:
        items = await repo.list_by_ids(team.team_id, parse_ids(ids))
    else:
        items = await repo.list_all(team.team_id)
    return [ThreadResponse.from_enriched(item) for item in items]


@threads_router.patch("/{thread_id}", response_model=ThreadRecord)
async def update_thread(
    thread_id: str,
    payload: ThreadUpdate,
    db: DbSession,
    team: CurrentTeam,
) -> ThreadRecord:
    """Update a thread the caller owns."""
    repo = ThreadRepository(db)
    thread = await repo.update(
        thread_id,
        team.team_id,
        team.user_id,
        payload.model_dump(exclude_unset=True),
    )
    return ThreadRecord.model_validate(thread)


@threads_router.delete("/{thread_id}", response_model=DeleteResponse)
async def delete_thread(
    thread_id: str,
    db: DbSession,
    team: CurrentTeam,
) -> DeleteResponse:
    """Delete a thread the caller owns."""
    repo = ThreadRepository(db)
    return DeleteResponse(**await repo.delete(thread_id, team.team_id, team.user_id))
