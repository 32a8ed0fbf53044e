"""Connectors for external HTTP APIs."""

from recipeupload.connectors.base import ConnectorError, ConnectorResponse, HTTPConnector
from recipeupload.connectors.ingredient_images import IngredientImageClient, IngredientImageInfo
from recipeupload.connectors.spoonacular import SpoonacularConnector

__all__ = [
    "ConnectorError",
    "ConnectorResponse",
    "HTTPConnector",
    "IngredientImageClient",
    "IngredientImageInfo",
    "SpoonacularConnector",
]
