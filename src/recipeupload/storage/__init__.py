"""Persistence for drafts, recipes and recipe images."""

from recipeupload.storage.images import ImageStorage, draft_image_path, final_image_path
from recipeupload.storage.repository import DraftRepository, RecipeRepository

__all__ = [
    "DraftRepository",
    "ImageStorage",
    "RecipeRepository",
    "draft_image_path",
    "final_image_path",
]
