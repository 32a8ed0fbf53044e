"""Spoonacular ingredient search connector (server side, holds the API key)."""

from typing import Any

from recipeupload.config import get_settings
from recipeupload.connectors.base import ConnectorError, HTTPConnector
from recipeupload.logging_config import get_logger

logger = get_logger(__name__)


class SpoonacularConnector(HTTPConnector):
    """Connector for the Spoonacular food API."""

    DEFAULT_RESULTS = 5

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ):
        settings = get_settings()
        super().__init__(base_url or settings.spoonacular_base_url, timeout)
        self.api_key = api_key if api_key is not None else settings.spoonacular_api_key

    @property
    def name(self) -> str:
        """Return connector name."""
        return "spoonacular"

    @property
    def is_configured(self) -> bool:
        """Check whether an API key is available."""
        return bool(self.api_key)

    async def search_ingredients(
        self, query: str, number: int = DEFAULT_RESULTS
    ) -> dict[str, Any]:
        """
        Search ingredients by name.

        Args:
            query: Ingredient name to search for.
            number: Maximum number of results.

        Returns:
            The upstream JSON response, unmodified.
        """
        logger.info(f"Searching ingredients: query='{query}', number={number}")
        response = await self._request(
            "ingredients/search",
            params={
                "apiKey": self.api_key,
                "query": query,
                "number": number,
                "addChildren": "true",
                "fillIngredients": "true",
            },
        )
        return response.data

    async def get_ingredient_info(self, ingredient_id: int) -> dict[str, Any]:
        """
        Get ingredient information by Spoonacular id.

        Args:
            ingredient_id: Spoonacular ingredient id.

        Returns:
            Ingredient information dictionary.
        """
        logger.debug(f"Fetching ingredient info: {ingredient_id}")
        response = await self._request(
            f"ingredients/{ingredient_id}/information",
            params={"apiKey": self.api_key, "amount": 1, "unit": "piece"},
        )
        return response.data

    async def health_check(self) -> bool:
        """
        Check if the Spoonacular API is reachable with the configured key.

        Returns:
            True if healthy, False otherwise.
        """
        if not self.is_configured:
            return False
        try:
            await self.search_ingredients("salt", number=1)
            return True
        except ConnectorError as e:
            logger.warning(f"Health check failed: {e}")
            return False

    async def __aenter__(self) -> "SpoonacularConnector":
        """Async context manager entry."""
        await self._get_client()
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.close()
