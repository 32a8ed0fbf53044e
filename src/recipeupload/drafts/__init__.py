"""Draft generation, submission and expiry."""

from recipeupload.drafts.cleanup import cleanup_expired_drafts
from recipeupload.drafts.results import CleanupReport, DeletionResult, attempt_deletion
from recipeupload.drafts.service import (
    DraftService,
    GeneratedDraft,
    SubmittedRecipe,
    UploadedImage,
    parse_submitted_ingredients,
)

__all__ = [
    "CleanupReport",
    "DeletionResult",
    "DraftService",
    "GeneratedDraft",
    "SubmittedRecipe",
    "UploadedImage",
    "attempt_deletion",
    "cleanup_expired_drafts",
    "parse_submitted_ingredients",
]
