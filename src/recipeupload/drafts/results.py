"""Outcome records for best-effort deletions."""

from collections.abc import Awaitable
from dataclasses import asdict, dataclass, field
from typing import Any

from recipeupload.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class DeletionResult:
    """Outcome of deleting one draft document or image."""

    kind: str  # "draft" or "image"
    target: str
    succeeded: bool
    reason: str | None = None


async def attempt_deletion(kind: str, target: str, operation: Awaitable[Any]) -> DeletionResult:
    """Await a delete operation and record its outcome instead of raising."""
    try:
        await operation
    except Exception as e:
        logger.warning(f"Failed to delete {kind} {target}: {e}")
        return DeletionResult(kind=kind, target=target, succeeded=False, reason=str(e))
    return DeletionResult(kind=kind, target=target, succeeded=True)


@dataclass
class CleanupReport:
    """Aggregate of one expired-draft sweep."""

    expired_drafts: int = 0
    results: list[DeletionResult] = field(default_factory=list)

    def count(self, kind: str, succeeded: bool) -> int:
        return sum(1 for r in self.results if r.kind == kind and r.succeeded is succeeded)

    @property
    def deleted_drafts(self) -> int:
        return self.count("draft", True)

    @property
    def deleted_images(self) -> int:
        return self.count("image", True)

    @property
    def failures(self) -> list[DeletionResult]:
        return [r for r in self.results if not r.succeeded]

    def to_dict(self) -> dict[str, Any]:
        return {
            "expired_drafts": self.expired_drafts,
            "deleted_drafts": self.deleted_drafts,
            "deleted_images": self.deleted_images,
            "failures": [asdict(r) for r in self.failures],
        }
