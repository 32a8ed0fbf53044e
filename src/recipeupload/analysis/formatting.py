"""Render a RecipeAnalysis into the draft's recipe text and editable ingredient list."""

import time

from recipeupload.analysis.schemas import CamelModel, Ingredient, ProductMatch, RecipeAnalysis


class StoreProduct(CamelModel):
    """Product attached to an extracted ingredient."""

    id: str
    name: str
    price: str
    image_url: str = ""


class ExtractedIngredient(CamelModel):
    """Editable ingredient row shown to the user before submission."""

    id: str
    name: str
    quantity: str
    store_product: StoreProduct | None = None
    image_url: str | None = None


def match_product(ingredient: Ingredient, matches: list[ProductMatch]) -> ProductMatch | None:
    """
    Find a product for an ingredient.

    Prefers a product whose name contains the ingredient name (or vice versa),
    then any product of the same category. Several ingredients may share a
    product.
    """
    ingredient_name = ingredient.name.lower()
    for match in matches:
        product_name = match.name.lower()
        if ingredient_name in product_name or product_name in ingredient_name:
            return match
    for match in matches:
        if match.category == ingredient.category:
            return match
    return None


def extract_ingredients(
    analysis: RecipeAnalysis, timestamp: int | None = None
) -> list[ExtractedIngredient]:
    """Build the editable ingredient list from an analysis."""
    timestamp = timestamp if timestamp is not None else int(time.time() * 1000)
    extracted = []
    for index, ingredient in enumerate(analysis.ingredients):
        match = match_product(ingredient, analysis.product_matches)
        extracted.append(
            ExtractedIngredient(
                id=f"ing-{index}-{timestamp}",
                name=ingredient.name,
                quantity=f"{ingredient.quantity} {ingredient.unit}",
                store_product=(
                    StoreProduct(
                        id=match.id,
                        name=match.name,
                        price=match.price,
                        image_url=match.image_url,
                    )
                    if match
                    else None
                ),
                image_url=ingredient.image_url,
            )
        )
    return extracted


def render_recipe(analysis: RecipeAnalysis, recipe_name: str) -> str:
    """Render the analysis as a Markdown recipe."""
    lines = [f"# {recipe_name}", "", "## Ingredients:"]
    lines.extend(
        f"- {ing.quantity} {ing.unit} {ing.name} ({ing.category.value})"
        for ing in analysis.ingredients
    )
    lines.extend(["", "## Instructions:"])
    if analysis.instructions:
        lines.extend(f"{idx}. {step}" for idx, step in enumerate(analysis.instructions, start=1))
    else:
        lines.append("No instructions provided.")
    lines.extend(
        [
            "",
            "## Recipe Info:",
            f"- **Cuisine:** {analysis.cuisine}",
            f"- **Difficulty:** {analysis.difficulty.value}",
            f"- **Cooking Time:** {analysis.cooking_time}",
            f"- **Dietary:** {', '.join(analysis.dietary_info) or 'Standard'}",
        ]
    )
    return "\n".join(lines)
