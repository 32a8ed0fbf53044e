"""Ingredient search proxy.

Keeps the Spoonacular credential on the server; browser code and the
ingredient image client call these routes instead of the upstream API.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query

from recipeupload.connectors.base import ConnectorError
from recipeupload.connectors.spoonacular import SpoonacularConnector
from recipeupload.dependencies import get_spoonacular
from recipeupload.errors import UpstreamError, ValidationError
from recipeupload.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/ingredients", tags=["ingredients"])


def _require_configured(connector: SpoonacularConnector) -> None:
    if not connector.is_configured:
        raise UpstreamError("Spoonacular API key is not configured", code="SERVER_ERROR")


@router.get("/search")
async def search_ingredients(
    query: Annotated[str | None, Query(description="Ingredient name to search for")] = None,
    number: Annotated[int, Query(description="Max results, passed upstream as-is")] = 5,
    connector: SpoonacularConnector = Depends(get_spoonacular),
) -> dict[str, Any]:
    """Search ingredients; the upstream JSON is returned unmodified."""
    if not query or not query.strip():
        raise ValidationError("Query parameter is required")
    _require_configured(connector)

    try:
        return await connector.search_ingredients(query, number=number)
    except ConnectorError as e:
        logger.error(f"Error fetching from Spoonacular: {e}")
        raise UpstreamError("Failed to fetch ingredient data") from e


@router.get("/{ingredient_id}/information")
async def get_ingredient_information(
    ingredient_id: int,
    connector: SpoonacularConnector = Depends(get_spoonacular),
) -> dict[str, Any]:
    """Get upstream ingredient details by id."""
    _require_configured(connector)

    try:
        return await connector.get_ingredient_info(ingredient_id)
    except ConnectorError as e:
        logger.error(f"Error fetching ingredient {ingredient_id}: {e}")
        raise UpstreamError("Failed to fetch ingredient data") from e
