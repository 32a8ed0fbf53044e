"""Tests for the expired draft cleanup job."""

from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy import select

from recipeupload.drafts.cleanup import cleanup_expired_drafts
from recipeupload.drafts.results import CleanupReport
from recipeupload.models import RecipeDraft
from recipeupload.storage.repository import DraftRepository
from recipeupload.tasks.cleanup import cleanup_expired_drafts_task


async def _remaining_ids(session) -> set[str]:
    result = await session.execute(select(RecipeDraft.draft_id))
    return set(result.scalars().all())


class TestCleanupExpiredDrafts:
    """Tests for cleanup_expired_drafts."""

    @pytest.mark.asyncio
    async def test_deletes_only_expired(self, db_session, image_storage, make_draft, mock_s3_client):
        now = datetime(2024, 6, 1, 12, 0, 0)
        db_session.add_all(
            [
                make_draft("old", expires_at=now - timedelta(hours=1)),
                make_draft("edge", expires_at=now),
                make_draft("fresh", expires_at=now + timedelta(hours=1)),
            ]
        )
        await db_session.commit()

        report = await cleanup_expired_drafts(DraftRepository(db_session), image_storage, now=now)

        assert await _remaining_ids(db_session) == {"fresh"}
        assert report.expired_drafts == 2
        assert report.deleted_drafts == 2
        assert report.deleted_images == 2
        assert report.failures == []
        deleted_keys = {c.kwargs["Key"] for c in mock_s3_client.delete_object.call_args_list}
        assert deleted_keys == {
            "recipeDrafts/user-123/old-soup.jpg",
            "recipeDrafts/user-123/edge-soup.jpg",
        }

    @pytest.mark.asyncio
    async def test_nothing_expired(self, db_session, image_storage, make_draft, mock_s3_client):
        db_session.add(make_draft("fresh"))
        await db_session.commit()

        report = await cleanup_expired_drafts(DraftRepository(db_session), image_storage)

        assert report.expired_drafts == 0
        assert await _remaining_ids(db_session) == {"fresh"}
        mock_s3_client.delete_object.assert_not_called()

    @pytest.mark.asyncio
    async def test_failures_are_reported_and_do_not_abort(self, make_draft):
        now = datetime(2024, 6, 1)
        drafts = MagicMock()
        drafts.list_expired = AsyncMock(
            return_value=[
                make_draft("a", expires_at=now - timedelta(days=1)),
                make_draft("b", expires_at=now - timedelta(days=1)),
            ]
        )
        drafts.delete = AsyncMock(side_effect=[RuntimeError("db locked"), True])
        images = MagicMock()
        images.delete = AsyncMock(side_effect=[None, RuntimeError("no such key")])

        report = await cleanup_expired_drafts(drafts, images, now=now)

        assert drafts.delete.await_count == 2
        assert images.delete.await_count == 2
        assert report.deleted_drafts == 1
        assert report.deleted_images == 1
        assert [(f.kind, f.target, f.reason) for f in report.failures] == [
            ("draft", "a", "db locked"),
            ("image", "recipeDrafts/user-123/b-soup.jpg", "no such key"),
        ]
        assert report.to_dict()["failures"][0]["target"] == "a"


class TestCleanupTask:
    """Tests for the Celery task wrapper."""

    def test_task_returns_report(self):
        report = CleanupReport(expired_drafts=0).to_dict()
        with patch(
            "recipeupload.tasks.cleanup._cleanup_expired_drafts", AsyncMock(return_value=report)
        ):
            result = cleanup_expired_drafts_task.apply().get()

        assert result == {
            "expired_drafts": 0,
            "deleted_drafts": 0,
            "deleted_images": 0,
            "failures": [],
        }

    def test_beat_schedule_runs_daily(self):
        from recipeupload.celery_app import celery_app

        entry = celery_app.conf.beat_schedule["cleanup-expired-drafts"]
        assert entry["task"] == "recipeupload.tasks.cleanup.cleanup_expired_drafts_task"
        assert entry["schedule"] == timedelta(hours=24)

    def test_cleanup_runs_on_default_queue(self):
        from recipeupload.celery_app import celery_app

        entry = celery_app.conf.beat_schedule["cleanup-expired-drafts"]
        assert "queue" not in entry.get("options", {})
        assert not celery_app.conf.task_routes
