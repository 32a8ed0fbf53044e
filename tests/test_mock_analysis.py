"""Tests for the heuristic fallback analysis."""

import random
from unittest.mock import MagicMock

from recipeupload.analysis.mock import (
    MockAnalysisGenerator,
    analyze_dietary_info,
    assess_difficulty,
    detect_cuisine,
    estimate_cooking_time,
)
from recipeupload.analysis.schemas import Difficulty, Ingredient, IngredientCategory


def _ingredient(name: str, category: IngredientCategory) -> Ingredient:
    return Ingredient(name=name, quantity="1", unit="unit", category=category)


class TestMockAnalysisGenerator:
    """Tests for MockAnalysisGenerator.generate."""

    def test_tomato_soup_scenario(self, mock_generator):
        """LLM unavailable: the fallback produces the expected analysis."""
        analysis = mock_generator.generate("2 cups tomato, 1 onion, salt", "Tomato Soup")

        assert [
            (ing.name, ing.quantity, ing.unit, ing.category.value) for ing in analysis.ingredients
        ] == [
            ("tomato", "2", "cup", "vegetable"),
            ("onion", "1", "unit", "vegetable"),
            ("salt", "1", "unit", "spice"),
        ]
        assert analysis.difficulty == Difficulty.EASY
        assert analysis.cuisine == "International"
        assert "vegetarian" in analysis.dietary_info
        assert "vegan" in analysis.dietary_info
        assert analysis.cooking_time == "15-20 minutes"
        assert analysis.instructions

    def test_same_seed_same_output(self, fixed_clock):
        first = MockAnalysisGenerator(rng=random.Random(7), clock=fixed_clock)
        second = MockAnalysisGenerator(rng=random.Random(7), clock=fixed_clock)
        text = "1 lb chicken, 2 cups rice, 1 onion, garlic, 1 tbsp olive oil"

        assert first.generate(text, "Chicken Rice") == second.generate(text, "Chicken Rice")

    def test_every_ingredient_matched_when_draw_is_low(self, fixed_clock):
        """Draws below the match rate always produce a product."""
        rng = MagicMock()
        rng.random.return_value = 0.0
        generator = MockAnalysisGenerator(rng=rng, clock=fixed_clock)

        analysis = generator.generate("2 cups tomato, 1 onion", "Salad")

        assert len(analysis.product_matches) == 2
        first = analysis.product_matches[0]
        assert first.id == "prod-0-1704067200000"
        assert first.name == "NoName Fresh Tomato"
        assert first.price == "$1.00"
        assert first.confidence == 0.7
        assert first.category == IngredientCategory.VEGETABLE

    def test_no_match_when_draw_is_high(self, fixed_clock):
        rng = MagicMock()
        rng.random.return_value = 0.9
        generator = MockAnalysisGenerator(rng=rng, clock=fixed_clock)

        assert generator.generate("tomato, onion", "Salad").product_matches == []

    def test_confidence_in_range(self):
        generator = MockAnalysisGenerator(rng=random.Random(3))
        analysis = generator.generate(", ".join(["tomato"] * 30), "Many Tomatoes")

        assert analysis.product_matches
        for match in analysis.product_matches:
            assert 0.7 <= match.confidence <= 1.0

    def test_malformed_input_never_raises(self, mock_generator):
        analysis = mock_generator.generate(" , ,, 12 ,", "")

        assert len(analysis.ingredients) == 1
        assert analysis.ingredients[0].name == "ingredient"
        assert analysis.ingredients[0].category == IngredientCategory.OTHER

    def test_empty_input(self, mock_generator):
        analysis = mock_generator.generate("", "Nothing")

        assert analysis.ingredients == []
        assert analysis.difficulty == Difficulty.EASY


class TestHeuristics:
    """Tests for the individual heuristics."""

    def test_cooking_time_buckets(self):
        protein = _ingredient("chicken", IngredientCategory.PROTEIN)
        grain = _ingredient("rice", IngredientCategory.GRAIN)
        veg = _ingredient("onion", IngredientCategory.VEGETABLE)

        assert estimate_cooking_time([protein, grain] + [veg] * 4) == "45-60 minutes"
        assert estimate_cooking_time([protein] + [veg] * 3) == "30-45 minutes"
        assert estimate_cooking_time([veg] * 5) == "20-30 minutes"
        assert estimate_cooking_time([veg] * 2) == "15-20 minutes"

    def test_difficulty(self):
        veg = _ingredient("onion", IngredientCategory.VEGETABLE)
        assert assess_difficulty([veg] * 9) == Difficulty.HARD
        assert assess_difficulty([veg] * 6) == Difficulty.MEDIUM
        assert assess_difficulty([veg] * 2) == Difficulty.EASY

        diverse = [
            _ingredient("chicken", IngredientCategory.PROTEIN),
            _ingredient("rice", IngredientCategory.GRAIN),
            _ingredient("milk", IngredientCategory.DAIRY),
            _ingredient("salt", IngredientCategory.SPICE),
        ]
        assert assess_difficulty(diverse) == Difficulty.HARD

    def test_cuisine_rules(self):
        assert detect_cuisine("Creamy Pasta Bake", []) == "Italian"
        assert detect_cuisine("Weeknight Dinner", [_ingredient("pasta", IngredientCategory.GRAIN)]) == "Italian"
        assert detect_cuisine("Chickpea Curry", []) == "Indian"
        assert detect_cuisine("Fish Tacos", []) == "Mexican"
        assert detect_cuisine("Wraps", [_ingredient("corn tortilla", IngredientCategory.OTHER)]) == "Mexican"
        assert detect_cuisine("Sushi Bowl", []) == "Japanese"
        assert detect_cuisine("Veggie Stir-Fry", []) == "Asian"
        assert detect_cuisine("Glazed Tofu", [_ingredient("soy sauce", IngredientCategory.OTHER)]) == "Asian"
        assert detect_cuisine("Tomato Soup", []) == "International"

    def test_dietary_info(self):
        tofu = _ingredient("tofu", IngredientCategory.PROTEIN)
        beef = _ingredient("beef", IngredientCategory.PROTEIN)
        cheese = _ingredient("cheese", IngredientCategory.DAIRY)
        bread = _ingredient("bread", IngredientCategory.GRAIN)
        rice = _ingredient("rice", IngredientCategory.GRAIN)

        assert analyze_dietary_info([tofu, rice]) == ["vegetarian", "vegan", "gluten-free"]
        assert analyze_dietary_info([tofu, cheese]) == ["vegetarian", "gluten-free"]
        assert analyze_dietary_info([beef, bread]) == []
        assert analyze_dietary_info([beef, rice]) == ["gluten-free"]
