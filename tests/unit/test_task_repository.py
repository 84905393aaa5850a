"""Tests for the task repository."""

import pytest

from discussion_sync.api.exceptions import NotFoundOrUnauthorized
from discussion_sync.models import SyncJob, Thread
from discussion_sync.repositories import TaskRepository
from tests.helpers import OTHER_TEAM_ID, TEAM_ID, at, owned_by


@pytest.mark.asyncio
class TestTaskRepositoryList:
    """Tests for listing tasks with their joined rows."""

    async def test_list_all_newest_first(self, test_session, users):
        """Test tasks come back ordered by creation time, newest first."""
        repo = TaskRepository(test_session)
        alice = users["alice"].id
        await repo.create({"id": "t-old", "title": "Old", **owned_by(alice), **at(0)})
        await repo.create({"id": "t-new", "title": "New", **owned_by(alice), **at(20)})
        await repo.create({"id": "t-mid", "title": "Mid", **owned_by(alice), **at(10)})

        items = await repo.list_all(TEAM_ID)

        assert [item.record.id for item in items] == ["t-new", "t-mid", "t-old"]

    async def test_list_all_scoped_to_team(self, test_session, users):
        """Test tasks of other teams are never returned."""
        repo = TaskRepository(test_session)
        await repo.create({"id": "t-1", "title": "Ours", **owned_by(users["alice"].id)})
        await repo.create({
            "id": "t-2",
            "title": "Theirs",
            **owned_by(users["carol"].id, team_id=OTHER_TEAM_ID),
        })

        items = await repo.list_all(TEAM_ID)

        assert [item.record.id for item in items] == ["t-1"]

    async def test_list_all_empty_team(self, test_session, users):
        """Test an unknown team yields an empty list."""
        repo = TaskRepository(test_session)
        assert await repo.list_all("no-such-team") == []

    async def test_list_by_ids(self, test_session, users):
        """Test only requested ids of the team are returned."""
        repo = TaskRepository(test_session)
        alice = users["alice"].id
        await repo.create({"id": "t-1", "title": "One", **owned_by(alice), **at(1)})
        await repo.create({"id": "t-2", "title": "Two", **owned_by(alice), **at(2)})
        await repo.create({"id": "t-3", "title": "Three", **owned_by(alice), **at(3)})
        await repo.create({
            "id": "t-4",
            "title": "Other team",
            **owned_by(users["carol"].id, team_id=OTHER_TEAM_ID),
        })

        items = await repo.list_by_ids(TEAM_ID, ["t-1", "t-3", "t-4", "missing"])

        assert [item.record.id for item in items] == ["t-3", "t-1"]

    async def test_list_by_ids_empty(self, test_session, users):
        """Test an empty id list returns an empty result."""
        repo = TaskRepository(test_session)
        await repo.create({"id": "t-1", "title": "One", **owned_by(users["alice"].id)})

        assert await repo.list_by_ids(TEAM_ID, []) == []

    async def test_related_rows_joined(self, test_session, users, discussion):
        """Test the discussion, thread and sync job are attached."""
        alice = users["alice"].id
        thread = Thread(id="thr-1", source_type="figma", status="active", **owned_by(alice))
        job = SyncJob(
            id="job-1",
            source_config_id=discussion.source_config_id,
            status="completed",
            **owned_by(alice),
        )
        test_session.add_all([thread, job])
        await test_session.flush()

        repo = TaskRepository(test_session)
        await repo.create({
            "id": "t-1",
            "title": "Linked",
            "discussion_id": discussion.id,
            "thread_id": thread.id,
            "sync_job_id": job.id,
            **owned_by(alice),
        })

        [item] = await repo.list_all(TEAM_ID)

        assert item.related["discussion"].title == "Button padding"
        assert item.related["thread"].id == "thr-1"
        assert item.related["sync_job"].status == "completed"

    async def test_missing_related_rows_are_none(self, test_session, users):
        """Test a task with no or dangling references is still returned."""
        repo = TaskRepository(test_session)
        alice = users["alice"].id
        await repo.create({"id": "t-1", "title": "Unlinked", **owned_by(alice), **at(1)})
        await repo.create({
            "id": "t-2",
            "title": "Dangling",
            "discussion_id": "deleted-discussion",
            **owned_by(alice),
            **at(2),
        })

        items = await repo.list_all(TEAM_ID)

        assert [item.record.id for item in items] == ["t-2", "t-1"]
        for item in items:
            assert item.related == {"discussion": None, "thread": None, "sync_job": None}

    async def test_user_summaries_projected_independently(self, test_session, users):
        """Test owner, creator and updater each resolve to their own user."""
        repo = TaskRepository(test_session)
        await repo.create({
            "id": "t-1",
            "title": "Shared",
            "team_id": TEAM_ID,
            "owner": users["alice"].id,
            "created_by": users["bob"].id,
            "updated_by": "user-gone",
        })

        [item] = await repo.list_all(TEAM_ID)

        assert item.owner_user.name == "Alice"
        assert item.owner_user.email == "alice@example.com"
        assert item.owner_user.avatar_url == "https://example.com/a.png"
        assert item.created_by_user.id == "user-bob"
        assert item.created_by_user.avatar_url is None
        assert item.updated_by_user is None


@pytest.mark.asyncio
class TestTaskRepositoryWrite:
    """Tests for create, update and delete."""

    async def test_create_applies_defaults(self, test_session, users):
        """Test generated id, status and timestamps."""
        repo = TaskRepository(test_session)

        task = await repo.create({"title": "Fresh", **owned_by(users["alice"].id)})

        assert task.id
        assert task.status == "pending"
        assert task.is_multi_task_child is False
        assert task.meta == {}
        assert task.created_at is not None
        assert task.updated_at is not None

    async def test_update_merges_and_stamps_updated_by(self, test_session, users):
        """Test only given fields change and updated_by is the caller."""
        repo = TaskRepository(test_session)
        alice = users["alice"].id
        await repo.create({
            "id": "t-1",
            "title": "Original",
            "priority": "low",
            "team_id": TEAM_ID,
            "owner": alice,
            "created_by": alice,
            "updated_by": users["bob"].id,
        })

        task = await repo.update("t-1", TEAM_ID, alice, {"status": "completed"})

        assert task.status == "completed"
        assert task.title == "Original"
        assert task.priority == "low"
        assert task.updated_by == alice

    async def test_update_cannot_override_updated_by(self, test_session, users):
        """Test a caller supplied updated_by is replaced."""
        repo = TaskRepository(test_session)
        alice = users["alice"].id
        await repo.create({"id": "t-1", "title": "Original", **owned_by(alice)})

        task = await repo.update("t-1", TEAM_ID, alice, {"updated_by": "someone-else"})

        assert task.updated_by == alice

    async def test_update_json_field(self, test_session, users):
        """Test metadata is written through the attribute name."""
        repo = TaskRepository(test_session)
        alice = users["alice"].id
        await repo.create({"id": "t-1", "title": "Original", **owned_by(alice)})

        task = await repo.update("t-1", TEAM_ID, alice, {"meta": {"notion": "synced"}})

        assert task.meta == {"notion": "synced"}

    @pytest.mark.parametrize(
        "record_id,team_id,owner_id",
        [
            ("t-1", TEAM_ID, "user-bob"),
            ("t-1", OTHER_TEAM_ID, "user-alice"),
            ("missing", TEAM_ID, "user-alice"),
        ],
    )
    async def test_update_rejected_uniformly(self, test_session, users, record_id, team_id, owner_id):
        """Test wrong owner, wrong team and missing id are indistinguishable."""
        repo = TaskRepository(test_session)
        await repo.create({"id": "t-1", "title": "Original", **owned_by(users["alice"].id)})

        with pytest.raises(NotFoundOrUnauthorized) as exc_info:
            await repo.update(record_id, team_id, owner_id, {"title": "Hijacked"})

        assert str(exc_info.value) == "DiscussionSyncTask not found or unauthorized"
        assert exc_info.value.status_code == 404

        [item] = await repo.list_by_ids(TEAM_ID, ["t-1"])
        assert item.record.title == "Original"

    async def test_delete(self, test_session, users):
        """Test deleting an owned task removes it."""
        repo = TaskRepository(test_session)
        alice = users["alice"].id
        await repo.create({"id": "t-1", "title": "Doomed", **owned_by(alice)})

        result = await repo.delete("t-1", TEAM_ID, alice)

        assert result == {"success": True}
        assert await repo.list_by_ids(TEAM_ID, ["t-1"]) == []

    @pytest.mark.parametrize(
        "record_id,team_id,owner_id",
        [
            ("t-1", TEAM_ID, "user-bob"),
            ("t-1", OTHER_TEAM_ID, "user-alice"),
            ("missing", TEAM_ID, "user-alice"),
        ],
    )
    async def test_delete_rejected_uniformly(self, test_session, users, record_id, team_id, owner_id):
        """Test a failed delete raises and leaves the task in place."""
        repo = TaskRepository(test_session)
        await repo.create({"id": "t-1", "title": "Kept", **owned_by(users["alice"].id)})

        with pytest.raises(NotFoundOrUnauthorized, match="DiscussionSyncTask not found or unauthorized"):
            await repo.delete(record_id, team_id, owner_id)

        assert await repo.count(TEAM_ID) == 1
