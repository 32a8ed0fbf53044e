"""Keyword-based ingredient categorization."""

from recipeupload.analysis.schemas import IngredientCategory

# Checked in this order; the first list with a keyword contained in the name wins
CATEGORY_KEYWORDS: dict[IngredientCategory, list[str]] = {
    IngredientCategory.PROTEIN: [
        "chicken",
        "beef",
        "pork",
        "fish",
        "salmon",
        "tuna",
        "shrimp",
        "eggs",
        "tofu",
        "tempeh",
        "lentils",
        "beans",
    ],
    IngredientCategory.VEGETABLE: [
        "tomato",
        "onion",
        "garlic",
        "carrot",
        "celery",
        "bell pepper",
        "mushroom",
        "spinach",
        "kale",
        "lettuce",
        "cucumber",
        "zucchini",
    ],
    IngredientCategory.DAIRY: [
        "milk",
        "cheese",
        "butter",
        "cream",
        "yogurt",
        "sour cream",
        "cream cheese",
    ],
    IngredientCategory.GRAIN: ["rice", "pasta", "bread", "flour", "quinoa", "oats", "barley"],
    IngredientCategory.SPICE: [
        "salt",
        "pepper",
        "oregano",
        "basil",
        "thyme",
        "rosemary",
        "cumin",
        "paprika",
        "cinnamon",
    ],
    IngredientCategory.FRUIT: [
        "apple",
        "banana",
        "orange",
        "lemon",
        "lime",
        "strawberry",
        "blueberry",
    ],
    IngredientCategory.OIL: ["olive oil", "vegetable oil", "coconut oil", "sesame oil"],
}

# Protein keywords that are plant based
PLANT_PROTEINS = ("tofu", "tempeh", "lentils", "beans")

# Grain keywords that contain no gluten
GLUTEN_FREE_GRAINS = ("quinoa", "rice")


def classify_ingredient(name: str) -> IngredientCategory:
    """
    Map an ingredient name to its category.

    Args:
        name: Ingredient name, any case.

    Returns:
        The first category whose keyword list matches, else OTHER.
    """
    lower_name = name.lower().strip()
    for category, keywords in CATEGORY_KEYWORDS.items():
        if any(keyword in lower_name for keyword in keywords):
            return category
    return IngredientCategory.OTHER
