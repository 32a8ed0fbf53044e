"""Celery tasks for background job processing."""

from recipeupload.tasks.cleanup import cleanup_expired_drafts_task

__all__ = [
    "cleanup_expired_drafts_task",
]
