"""Sync task endpoints."""

from typing import Optional

from fastapi import APIRouter, Query, status

from discussion_sync.api.auth import CurrentTeam
from discussion_sync.api.schemas import (
    DeleteResponse,
    TaskCreate,
    TaskRecord,
    TaskResponse,
    TaskUpdate,
)
from discussion_sync.database import DbSession
from discussion_sync.repositories import TaskRepository

router = APIRouter(prefix="/teams/{team_id}/discussion-sync-tasks")


def parse_ids(ids: Optional[str]) -> list[str]:
    """Split a comma-separated id list, dropping blanks."""
    if not ids:
        return []
    return [i.strip() for i in ids.split(",") if i.strip()]


@router.get("", response_model=list[TaskResponse])
async def list_tasks(
    db: DbSession,
    team: CurrentTeam,
    ids: Optional[str] = Query(None, description="Comma-separated task ids"),
) -> list[TaskResponse]:
    """List the team's tasks, most recent first."""
    repo = TaskRepository(db)
    if ids:
        items = await repo.list_by_ids(team.team_id, parse_ids(ids))
    else:
        items = await repo.list_all(team.team_id)
    return [TaskResponse.from_enriched(item) for item in items]


@router.post("", response_model=TaskRecord, status_code=status.HTTP_201_CREATED)
async def create_task(
    payload: TaskCreate,
    db: DbSession,
    team: CurrentTeam,
) -> TaskRecord:
    """Create a task owned by the caller."""
    repo = TaskRepository(db)
    task = await repo.create({
        **payload.model_dump(),
        "team_id": team.team_id,
        "owner": team.user_id,
        "created_by": team.user_id,
        "updated_by": team.user_id,
    })
    return TaskRecord.model_validate(task)


@router.patch("/{task_id}", response_model=TaskRecord)
async def update_task(
    task_id: str,
    payload: TaskUpdate,
    db: DbSession,
    team: CurrentTeam,
) -> TaskRecord:
    """Update a task the caller owns."""
    repo = TaskRepository(db)
    task = await repo.update(
        task_id,
        team.team_id,
        team.user_id,
        payload.model_dump(exclude_unset=True),
    )
    return TaskRecord.model_validate(task)


@router.delete("/{task_id}", response_model=DeleteResponse)
async def delete_task(
    task_id: str,
    db: DbSession,
    team: CurrentTeam,
) -> DeleteResponse:
    """Delete a task the caller owns."""
    repo = TaskRepository(db)
    return DeleteResponse(**await repo.delete(task_id, team.team_id, team.user_id))
