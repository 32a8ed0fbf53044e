"""Recipe analysis: ingredient parsing, classification, LLM and fallback analysis."""

from recipeupload.analysis.classifier import CATEGORY_KEYWORDS, classify_ingredient
from recipeupload.analysis.formatting import (
    ExtractedIngredient,
    StoreProduct,
    extract_ingredients,
    render_recipe,
)
from recipeupload.analysis.llm import RecipeAnalysisClient, parse_analysis_content
from recipeupload.analysis.mock import MockAnalysisGenerator
from recipeupload.analysis.parser import ParsedIngredientLine, parse_ingredient_line
from recipeupload.analysis.schemas import (
    Difficulty,
    Ingredient,
    IngredientCategory,
    ProductMatch,
    RecipeAnalysis,
)
from recipeupload.analysis.service import (
    AnalysisResult,
    AnalysisSource,
    FallbackPolicy,
    IngredientEnricher,
    RecipeAnalyzer,
)

__all__ = [
    "AnalysisResult",
    "AnalysisSource",
    "CATEGORY_KEYWORDS",
    "Difficulty",
    "ExtractedIngredient",
    "FallbackPolicy",
    "Ingredient",
    "IngredientCategory",
    "IngredientEnricher",
    "MockAnalysisGenerator",
    "ParsedIngredientLine",
    "ProductMatch",
    "RecipeAnalysis",
    "RecipeAnalysisClient",
    "RecipeAnalyzer",
    "StoreProduct",
    "classify_ingredient",
    "extract_ingredients",
    "parse_analysis_content",
    "parse_ingredient_line",
    "render_recipe",
]
