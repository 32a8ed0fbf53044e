"""FastAPI dependency providers."""

from collections.abc import AsyncIterator
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from recipeupload.analysis.llm import RecipeAnalysisClient
from recipeupload.analysis.service import IngredientEnricher, RecipeAnalyzer
from recipeupload.connectors.ingredient_images import IngredientImageClient
from recipeupload.connectors.spoonacular import SpoonacularConnector
from recipeupload.database import get_db
from recipeupload.drafts.service import DraftService
from recipeupload.storage.images import ImageStorage
from recipeupload.storage.repository import DraftRepository, RecipeRepository


async def get_llm_client() -> AsyncIterator[RecipeAnalysisClient]:
    client = RecipeAnalysisClient()
    try:
        yield client
    finally:
        await client.close()


async def get_image_client() -> AsyncIterator[IngredientImageClient]:
    async with IngredientImageClient() as client:
        yield client


async def get_spoonacular() -> AsyncIterator[SpoonacularConnector]:
    async with SpoonacularConnector() as connector:
        yield connector


def get_analyzer(
    llm_client: RecipeAnalysisClient = Depends(get_llm_client),
    image_client: IngredientImageClient = Depends(get_image_client),
) -> RecipeAnalyzer:
    """Analyzer with ingredient image enrichment."""
    return RecipeAnalyzer(llm_client, enricher=IngredientEnricher(image_client))


@lru_cache
def get_image_storage() -> ImageStorage:
    """Process-wide image storage (boto3 clients are thread safe)."""
    return ImageStorage()


def get_draft_service(
    db: AsyncSession = Depends(get_db),
    analyzer: RecipeAnalyzer = Depends(get_analyzer),
    images: ImageStorage = Depends(get_image_storage),
) -> DraftService:
    """Draft service bound to the request's database session."""
    return DraftService(DraftRepository(db), RecipeRepository(db), images, analyzer)
