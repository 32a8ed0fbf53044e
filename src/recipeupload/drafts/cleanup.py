"""Removal of expired drafts and their temporary images."""

from datetime import datetime

from recipeupload.drafts.results import CleanupReport, attempt_deletion
from recipeupload.logging_config import get_logger
from recipeupload.storage.images import ImageStorage
from recipeupload.storage.repository import DraftRepository

logger = get_logger(__name__)


async def cleanup_expired_drafts(
    drafts: DraftRepository,
    images: ImageStorage,
    now: datetime | None = None,
) -> CleanupReport:
    """
    Delete every draft whose expiry time is at or before ``now``.

    For each expired draft the image and the document are deleted
    independently; a failure on one item is recorded and the sweep continues.

    Args:
        drafts: Draft repository.
        images: Image storage holding the temporary draft images.
        now: Reference time, defaults to the current UTC time.

    Returns:
        CleanupReport with per-item outcomes.
    """
    now = now or datetime.utcnow()
    expired = await drafts.list_expired(now)
    report = CleanupReport(expired_drafts=len(expired))
    logger.info(f"Found {len(expired)} expired drafts to clean up")

    for draft in expired:
        # read before the document goes away
        draft_id, image_path = draft.draft_id, draft.image_path
        if image_path:
            report.results.append(
                await attempt_deletion("image", image_path, images.delete(image_path))
            )
        report.results.append(await attempt_deletion("draft", draft_id, drafts.delete(draft_id)))

    logger.info(
        f"Cleanup complete: {report.deleted_drafts} drafts and "
        f"{report.deleted_images} images deleted, {len(report.failures)} failures"
    )
    return report
