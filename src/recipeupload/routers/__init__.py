"""API routers for the recipe upload service."""

from recipeupload.routers.ingredients import router as ingredients_router
from recipeupload.routers.recipes import router as recipes_router

__all__ = [
    "ingredients_router",
    "recipes_router",
]
