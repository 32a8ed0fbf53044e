"""Heuristic recipe analysis used when the LLM is unavailable."""

import random
import time
from collections.abc import Callable

from recipeupload.analysis.classifier import (
    GLUTEN_FREE_GRAINS,
    PLANT_PROTEINS,
    classify_ingredient,
)
from recipeupload.analysis.parser import parse_ingredient_line
from recipeupload.analysis.schemas import (
    Difficulty,
    Ingredient,
    IngredientCategory,
    ProductMatch,
    RecipeAnalysis,
)
from recipeupload.logging_config import get_logger

logger = get_logger(__name__)


CATEGORY_DESCRIPTIONS: dict[IngredientCategory, str] = {
    IngredientCategory.PROTEIN: "High-quality protein source",
    IngredientCategory.VEGETABLE: "Fresh and nutritious vegetable",
    IngredientCategory.DAIRY: "Rich dairy product",
    IngredientCategory.GRAIN: "Wholesome grain product",
    IngredientCategory.SPICE: "Aromatic spice for flavoring",
    IngredientCategory.FRUIT: "Sweet and fresh fruit",
    IngredientCategory.OIL: "Healthy cooking oil",
    IngredientCategory.OTHER: "Essential cooking ingredient",
}

PRODUCT_PREFIXES: dict[IngredientCategory, str] = {
    IngredientCategory.PROTEIN: "NoName Premium",
    IngredientCategory.VEGETABLE: "NoName Fresh",
    IngredientCategory.DAIRY: "NoName Dairy",
    IngredientCategory.GRAIN: "NoName Whole Grain",
    IngredientCategory.SPICE: "NoName Spice",
    IngredientCategory.FRUIT: "NoName Fresh",
    IngredientCategory.OIL: "NoName Pure",
    IngredientCategory.OTHER: "NoName",
}

# (min, max) shelf price in dollars
PRICE_RANGES: dict[IngredientCategory, tuple[float, float]] = {
    IngredientCategory.PROTEIN: (3, 8),
    IngredientCategory.VEGETABLE: (1, 4),
    IngredientCategory.DAIRY: (2, 6),
    IngredientCategory.GRAIN: (1, 5),
    IngredientCategory.SPICE: (1, 3),
    IngredientCategory.FRUIT: (2, 5),
    IngredientCategory.OIL: (3, 7),
    IngredientCategory.OTHER: (1, 4),
}

MATCH_RATE = 0.8
MIN_CONFIDENCE = 0.7

# Ordered: the first rule that matches decides the cuisine
CUISINE_RULES: list[tuple[str, tuple[str, ...], tuple[str, ...]]] = [
    ("Italian", ("pasta",), ("pasta",)),
    ("Indian", ("curry",), ("curry",)),
    ("Mexican", ("taco", "burrito"), ("tortilla",)),
    ("Japanese", ("sushi",), ()),
    ("Asian", ("stir fry", "stir-fry"), ("soy sauce",)),
]
DEFAULT_CUISINE = "International"


def estimate_cooking_time(ingredients: list[Ingredient]) -> str:
    """Estimate cooking time from ingredient count and categories."""
    categories = {ing.category for ing in ingredients}
    has_protein = IngredientCategory.PROTEIN in categories
    has_grain = IngredientCategory.GRAIN in categories
    count = len(ingredients)

    if has_protein and has_grain and count > 5:
        return "45-60 minutes"
    if has_protein and count > 3:
        return "30-45 minutes"
    if count > 4:
        return "20-30 minutes"
    return "15-20 minutes"


def assess_difficulty(ingredients: list[Ingredient]) -> Difficulty:
    """Assess difficulty from ingredient count and category diversity."""
    count = len(ingredients)
    many_categories = len({ing.category for ing in ingredients}) > 3

    if count > 8 or many_categories:
        return Difficulty.HARD
    if count > 5:
        return Difficulty.MEDIUM
    return Difficulty.EASY


def detect_cuisine(recipe_name: str, ingredients: list[Ingredient]) -> str:
    """Detect cuisine by keyword match on the recipe and ingredient names."""
    name = recipe_name.lower()
    ingredient_names = [ing.name.lower() for ing in ingredients]

    for cuisine, name_keywords, ingredient_keywords in CUISINE_RULES:
        if any(keyword in name for keyword in name_keywords):
            return cuisine
        if any(keyword in ing for ing in ingredient_names for keyword in ingredient_keywords):
            return cuisine
        if cuisine == "Japanese" and any("rice" in ing and "fish" in ing for ing in ingredient_names):
            return cuisine
    return DEFAULT_CUISINE


def analyze_dietary_info(ingredients: list[Ingredient]) -> list[str]:
    """Derive vegetarian/vegan/gluten-free tags."""
    tags: list[str] = []

    has_meat = any(
        ing.category == IngredientCategory.PROTEIN
        and not any(plant in ing.name.lower() for plant in PLANT_PROTEINS)
        for ing in ingredients
    )
    has_dairy = any(ing.category == IngredientCategory.DAIRY for ing in ingredients)
    has_gluten = any(
        ing.category == IngredientCategory.GRAIN
        and not any(grain in ing.name.lower() for grain in GLUTEN_FREE_GRAINS)
        for ing in ingredients
    )

    if not has_meat:
        tags.append("vegetarian")
        if not has_dairy:
            tags.append("vegan")
    if not has_gluten:
        tags.append("gluten-free")
    return tags


class MockAnalysisGenerator:
    """
    Builds a complete RecipeAnalysis from local heuristics.

    Randomness (product match rate, price, confidence) comes from an
    injectable ``random.Random`` so results can be pinned with a seed.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        clock: Callable[[], float] | None = None,
    ):
        self.rng = rng or random.Random()
        self.clock = clock or time.time

    def generate(self, brief_ingredients: str, recipe_name: str) -> RecipeAnalysis:
        """
        Generate an analysis for comma-separated ingredients.

        Never raises: malformed lines fall back to parser defaults.

        Args:
            brief_ingredients: Free text such as "2 cups tomato, 1 onion, salt".
            recipe_name: Recipe title used for cuisine detection.

        Returns:
            A complete RecipeAnalysis.
        """
        lines = [line.strip() for line in (brief_ingredients or "").split(",")]
        ingredients = [self._build_ingredient(line) for line in lines if line]

        product_matches: list[ProductMatch] = []
        timestamp = int(self.clock() * 1000)
        for index, ingredient in enumerate(ingredients):
            match = self._maybe_match_product(index, ingredient, timestamp)
            if match is not None:
                product_matches.append(match)

        analysis = RecipeAnalysis(
            ingredients=ingredients,
            product_matches=product_matches,
            cooking_time=estimate_cooking_time(ingredients),
            difficulty=assess_difficulty(ingredients),
            cuisine=detect_cuisine(recipe_name or "", ingredients),
            dietary_info=analyze_dietary_info(ingredients),
            instructions=self._instructions(recipe_name or "this recipe", ingredients),
        )
        logger.info(
            f"Generated fallback analysis for '{recipe_name}': "
            f"{len(ingredients)} ingredients, {len(product_matches)} product matches"
        )
        return analysis

    def _build_ingredient(self, line: str) -> Ingredient:
        parsed = parse_ingredient_line(line)
        category = classify_ingredient(parsed.name)
        return Ingredient(
            name=parsed.name,
            quantity=parsed.quantity,
            unit=parsed.unit,
            category=category,
            description=CATEGORY_DESCRIPTIONS[category],
        )

    def _maybe_match_product(
        self, index: int, ingredient: Ingredient, timestamp: int
    ) -> ProductMatch | None:
        if self.rng.random() >= MATCH_RATE:
            return None

        low, high = PRICE_RANGES[ingredient.category]
        price = low + self.rng.random() * (high - low)
        confidence = MIN_CONFIDENCE + self.rng.random() * (1 - MIN_CONFIDENCE)
        prefix = PRODUCT_PREFIXES[ingredient.category]

        return ProductMatch(
            id=f"prod-{index}-{timestamp}",
            name=f"{prefix} {ingredient.name[:1].upper()}{ingredient.name[1:]}",
            price=f"${price:.2f}",
            image_url=placeholder_image(ingredient.name),
            confidence=round(confidence, 3),
            category=ingredient.category,
        )

    @staticmethod
    def _instructions(recipe_name: str, ingredients: list[Ingredient]) -> list[str]:
        steps = ["Preheat your oven to 180°C (350°F)."]
        if ingredients:
            names = ", ".join(ing.name for ing in ingredients)
            steps.append(f"Measure out and prepare the ingredients: {names}.")
        steps.extend(
            [
                f"Combine the ingredients following the usual method for {recipe_name}.",
                "Cook for the recommended time, tasting and adjusting seasoning.",
                "Serve hot and enjoy!",
            ]
        )
        return steps


def placeholder_image(name: str) -> str:
    """Placeholder product thumbnail labelled with the ingredient initial."""
    initial = name[:1].upper()
    return f"/placeholder.svg?width=50&height=50&text={initial}"
