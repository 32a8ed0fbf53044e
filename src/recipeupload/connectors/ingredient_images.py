"""Ingredient image lookup through the first-party ingredient search proxy."""

import asyncio
from dataclasses import dataclass
from typing import Any

from recipeupload.config import get_settings
from recipeupload.connectors.base import ConnectorError, HTTPConnector
from recipeupload.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class IngredientImageInfo:
    """Best-match ingredient details with a resolved image URL."""

    name: str
    image: str | None = None
    aisle: str | None = None
    original_name: str | None = None


class IngredientImageClient(HTTPConnector):
    """
    Looks up ingredient images via the proxy endpoint.

    The proxy keeps the upstream credential server side; this client never
    sees it.
    """

    def __init__(
        self,
        proxy_url: str | None = None,
        cdn_base_url: str | None = None,
        batch_size: int | None = None,
        batch_delay: float | None = None,
        timeout: float | None = None,
    ):
        settings = get_settings()
        super().__init__(proxy_url or settings.ingredient_proxy_url, timeout)
        self.cdn_base_url = (cdn_base_url or settings.ingredient_image_cdn).rstrip("/")
        self.batch_size = batch_size or settings.image_batch_size
        self.batch_delay = settings.image_batch_delay if batch_delay is None else batch_delay

    def image_url(self, image: str) -> str:
        """Resolve an upstream image file name against the CDN path."""
        return f"{self.cdn_base_url}/{image}"

    async def search_ingredients(self, query: str, number: int = 5) -> list[dict[str, Any]]:
        """
        Search ingredients through the proxy.

        Args:
            query: Ingredient name.
            number: Maximum number of results.

        Returns:
            List of upstream result dictionaries.

        Raises:
            ConnectorError: If the proxy call fails.
        """
        response = await self._request("", params={"query": query, "number": number})
        if not isinstance(response.data, dict):
            return []
        return response.data.get("results") or []

    async def get_ingredient_image(self, ingredient_name: str) -> str | None:
        """
        Get the best-match image URL for an ingredient.

        Args:
            ingredient_name: Ingredient name.

        Returns:
            CDN image URL, or None when there is no result, no image, or the lookup fails.
        """
        try:
            results = await self.search_ingredients(ingredient_name, number=1)
        except ConnectorError as e:
            logger.warning(f"Image lookup failed for '{ingredient_name}': {e}")
            return None

        if results and results[0].get("image"):
            return self.image_url(results[0]["image"])
        return None

    async def get_ingredient_images(self, ingredient_names: list[str]) -> dict[str, str]:
        """
        Look up images for many ingredients, throttled to respect the rate limit.

        Names are processed in groups of ``batch_size``; lookups inside a group
        run concurrently and the next group starts ``batch_delay`` seconds
        after the previous one completes.

        Args:
            ingredient_names: Ingredient names in order.

        Returns:
            Mapping of lower-cased name to image URL, only for names with an image.
        """
        image_map: dict[str, str] = {}

        for start in range(0, len(ingredient_names), self.batch_size):
            group = ingredient_names[start : start + self.batch_size]
            images = await asyncio.gather(*(self.get_ingredient_image(name) for name in group))

            for name, image in zip(group, images):
                if image:
                    image_map[name.lower()] = image

            if start + self.batch_size < len(ingredient_names):
                await asyncio.sleep(self.batch_delay)

        logger.info(f"Found images for {len(image_map)}/{len(ingredient_names)} ingredients")
        return image_map

    async def get_ingredient_with_image(self, ingredient_name: str) -> IngredientImageInfo:
        """
        Get the best-match ingredient with its image, aisle and original name.

        Args:
            ingredient_name: Ingredient name.

        Returns:
            IngredientImageInfo; fields are None when nothing matched.
        """
        try:
            results = await self.search_ingredients(ingredient_name, number=1)
        except ConnectorError as e:
            logger.warning(f"Ingredient lookup failed for '{ingredient_name}': {e}")
            return IngredientImageInfo(name=ingredient_name)

        if not results:
            return IngredientImageInfo(name=ingredient_name)

        best = results[0]
        return IngredientImageInfo(
            name=best.get("name") or ingredient_name,
            image=self.image_url(best["image"]) if best.get("image") else None,
            aisle=best.get("aisle") or None,
            original_name=best.get("originalName") or None,
        )

    async def __aenter__(self) -> "IngredientImageClient":
        """Async context manager entry."""
        await self._get_client()
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.close()
