"""Recipe analysis data models shared by the LLM client and the fallback generator."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class IngredientCategory(str, Enum):
    """Fixed ingredient categories."""

    PROTEIN = "protein"
    VEGETABLE = "vegetable"
    DAIRY = "dairy"
    GRAIN = "grain"
    SPICE = "spice"
    FRUIT = "fruit"
    OIL = "oil"
    OTHER = "other"


class Difficulty(str, Enum):
    """Recipe difficulty levels."""

    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_api(self) -> dict[str, Any]:
        """Dump with camelCase keys, omitting unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def _coerce_category(value: Any, name: str | None) -> IngredientCategory:
    if isinstance(value, IngredientCategory):
        return value
    if isinstance(value, str):
        try:
            return IngredientCategory(value.strip().lower())
        except ValueError:
            pass
    # Unknown labels (e.g. "sauce") are re-derived from the ingredient name
    from recipeupload.analysis.classifier import classify_ingredient

    return classify_ingredient(name or "")


class Ingredient(CamelModel):
    """A single structured ingredient."""

    name: str = Field(min_length=1)
    quantity: str
    unit: str
    category: IngredientCategory
    description: str = ""
    image_url: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            name = data.get("name")
            data["category"] = _coerce_category(data.get("category"), name)
            for key in ("quantity", "unit"):
                if isinstance(data.get(key), (int, float)):
                    data[key] = str(data[key])
        return data

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("ingredient name must not be empty")
        return value


class ProductMatch(CamelModel):
    """A store product suggested for an ingredient (best-effort)."""

    id: str
    name: str
    price: str
    image_url: str = ""
    confidence: float = Field(ge=0.0, le=1.0)
    category: IngredientCategory

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            data["category"] = _coerce_category(data.get("category"), data.get("name"))
            for key in ("id", "price"):
                if isinstance(data.get(key), (int, float)):
                    data[key] = str(data[key])
        return data


class RecipeAnalysis(CamelModel):
    """Structured analysis of a recipe: ingredients, product matches and metadata."""

    ingredients: list[Ingredient]
    product_matches: list[ProductMatch] = Field(default_factory=list)
    cooking_time: str
    difficulty: Difficulty
    cuisine: str
    dietary_info: list[str] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)

    @field_validator("difficulty", mode="before")
    @classmethod
    def _capitalize_difficulty(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().capitalize()
        return value

    @field_validator("dietary_info")
    @classmethod
    def _dedupe_tags(cls, value: list[str]) -> list[str]:
        seen: list[str] = []
        for tag in value:
            if tag not in seen:
                seen.append(tag)
        return seen

    def ingredient_names(self) -> list[str]:
        """Get ingredient names in order."""
        return [ing.name for ing in self.ingredients]
