"""Tests for the task endpoints."""

import pytest

from discussion_sync.repositories import TaskRepository
from tests.helpers import OTHER_TEAM_ID, TEAM_ID, at, owned_by

BASE = f"/api/teams/{TEAM_ID}/discussion-sync-tasks"
ALICE = {"X-User-Id": "user-alice"}
BOB = {"X-User-Id": "user-bob"}


@pytest.mark.asyncio
class TestTaskAccess:
    """Tests for identity and membership checks."""

    async def test_missing_user_header(self, client, users):
        """Test requests without X-User-Id are rejected."""
        response = await client.get(BASE)
        assert response.status_code == 401

    async def test_non_member_forbidden(self, client, users):
        """Test a user outside the team gets 403."""
        response = await client.get(BASE, headers={"X-User-Id": "user-carol"})
        assert response.status_code == 403
        data = response.json()
        assert data["error"]["code"] == "FORBIDDEN"

    async def test_other_team_path_forbidden(self, client, users):
        """Test a member of one team cannot read another."""
        response = await client.get(
            f"/api/teams/{OTHER_TEAM_ID}/discussion-sync-tasks",
            headers=ALICE,
        )
        assert response.status_code == 403


@pytest.mark.asyncio
class TestTaskEndpoints:
    """Tests for task CRUD over HTTP."""

    async def test_create_task(self, client, users, sample_task_data):
        """Test creating a task stamps ownership from the caller."""
        response = await client.post(BASE, json=sample_task_data, headers=ALICE)

        assert response.status_code == 201
        data = response.json()
        assert data["title"] == sample_task_data["title"]
        assert data["status"] == "pending"
        assert data["team_id"] == TEAM_ID
        assert data["owner"] == "user-alice"
        assert data["created_by"] == "user-alice"
        assert data["updated_by"] == "user-alice"
        assert data["meta"] == {"labels": ["design"]}

    async def test_create_task_requires_title(self, client, users):
        """Test validation errors use the standard error body."""
        response = await client.post(BASE, json={"description": "No title"}, headers=ALICE)

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_list_tasks_enriched(self, client, users, discussion, test_session):
        """Test listed tasks carry the discussion and user summaries."""
        await TaskRepository(test_session).create({
            "id": "t-1",
            "title": "Linked",
            "discussion_id": discussion.id,
            **owned_by("user-alice"),
        })

        response = await client.get(BASE, headers=BOB)

        assert response.status_code == 200
        [task] = response.json()
        assert task["id"] == "t-1"
        assert task["discussion"]["title"] == "Button padding"
        assert task["thread"] is None
        assert task["sync_job"] is None
        assert task["owner_user"] == {
            "id": "user-alice",
            "name": "Alice",
            "email": "alice@example.com",
            "avatar_url": "https://example.com/a.png",
        }

    async def test_list_tasks_by_ids(self, client, users, test_session):
        """Test the ids filter narrows the result."""
        repo = TaskRepository(test_session)
        for index in range(3):
            await repo.create({
                "id": f"t-{index}",
                "title": f"Task {index}",
                **owned_by("user-alice"),
                **at(index),
            })

        response = await client.get(BASE, params={"ids": "t-0,t-2"}, headers=ALICE)

        assert response.status_code == 200
        assert [task["id"] for task in response.json()] == ["t-2", "t-0"]

    async def test_update_task(self, client, users, test_session):
        """Test the owner can patch a task."""
        await TaskRepository(test_session).create({"id": "t-1", "title": "Draft", **owned_by("user-alice")})

        response = await client.patch(
            f"{BASE}/t-1",
            json={"status": "completed", "notion_page_id": "page-123"},
            headers=ALICE,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "completed"
        assert data["notion_page_id"] == "page-123"
        assert data["title"] == "Draft"

    async def test_update_task_not_owner(self, client, users, test_session):
        """Test a teammate who does not own the task gets 404."""
        await TaskRepository(test_session).create({"id": "t-1", "title": "Draft", **owned_by("user-alice")})

        response = await client.patch(f"{BASE}/t-1", json={"title": "Mine now"}, headers=BOB)

        assert response.status_code == 404
        error = response.json()["error"]
        assert error["code"] == "NOT_FOUND"
        assert error["message"] == "DiscussionSyncTask not found or unauthorized"

    async def test_update_task_null_title_rejected(self, client, users, test_session):
        """Test an explicit null for a required column is a validation error."""
        await TaskRepository(test_session).create({"id": "t-1", "title": "Draft", **owned_by("user-alice")})

        response = await client.patch(f"{BASE}/t-1", json={"title": None}, headers=ALICE)

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

        response = await client.patch(f"{BASE}/t-1", json={"status": None}, headers=ALICE)
        assert response.status_code == 422

    async def test_update_task_null_optional_field(self, client, users, test_session):
        """Test nullable columns can still be cleared."""
        await TaskRepository(test_session).create({
            "id": "t-1",
            "title": "Draft",
            "assignee": "@frontend",
            **owned_by("user-alice"),
        })

        response = await client.patch(f"{BASE}/t-1", json={"assignee": None}, headers=ALICE)

        assert response.status_code == 200
        assert response.json()["assignee"] is None

    async def test_delete_task(self, client, users, test_session):
        """Test the owner can delete a task."""
        await TaskRepository(test_session).create({"id": "t-1", "title": "Draft", **owned_by("user-alice")})

        response = await client.delete(f"{BASE}/t-1", headers=ALICE)

        assert response.status_code == 200
        assert response.json() == {"success": True}

        response = await client.get(BASE, headers=ALICE)
        assert response.json() == []

    async def test_delete_missing_task(self, client, users):
        """Test deleting an unknown id gets 404."""
        response = await client.delete(f"{BASE}/missing", headers=ALICE)
        assert response.status_code == 404
