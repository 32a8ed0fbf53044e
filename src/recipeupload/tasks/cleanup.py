"""Celery task removing expired recipe drafts."""

import asyncio
from datetime import datetime
from typing import Any

from recipeupload.celery_app import celery_app
from recipeupload.logging_config import LoggingContext, configure_logging, get_logger

# Configure logging for Celery workers
configure_logging()
logger = get_logger(__name__)


def run_async(coro: Any) -> Any:
    """Run an async coroutine in a synchronous context."""
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    import concurrent.futures

    with concurrent.futures.ThreadPoolExecutor() as executor:
        return executor.submit(asyncio.run, coro).result()


async def _cleanup_expired_drafts(now: datetime | None = None) -> dict[str, Any]:
    from recipeupload.database import worker_session
    from recipeupload.drafts.cleanup import cleanup_expired_drafts
    from recipeupload.storage.images import ImageStorage
    from recipeupload.storage.repository import DraftRepository

    async with worker_session() as session:
        report = await cleanup_expired_drafts(DraftRepository(session), ImageStorage(), now=now)
    return report.to_dict()


@celery_app.task(
    bind=True,
    name="recipeupload.tasks.cleanup.cleanup_expired_drafts_task",
    acks_late=True,
)
def cleanup_expired_drafts_task(self) -> dict[str, Any]:
    """
    Delete drafts past their expiry time together with their temporary images.

    Scheduled every 24 hours by Celery Beat; can also be called directly.

    Returns:
        dict with the cleanup report.
    """
    task_id = self.request.id
    trigger_type = "manual" if self.request.called_directly else "scheduled"

    with LoggingContext(task_id=task_id):
        logger.info(f"Starting expired draft cleanup (trigger={trigger_type})")
        try:
            result = run_async(_cleanup_expired_drafts())
        except Exception as e:
            logger.exception(f"Expired draft cleanup failed: {e}")
            raise

        if result["failures"]:
            logger.warning(f"Cleanup finished with {len(result['failures'])} failed deletions")
        return result
