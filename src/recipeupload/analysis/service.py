"""Recipe analysis orchestration: LLM analysis, fallback policy and image enrichment."""

from dataclasses import dataclass
from enum import Enum

from recipeupload.analysis.llm import RecipeAnalysisClient
from recipeupload.analysis.mock import MockAnalysisGenerator
from recipeupload.analysis.schemas import RecipeAnalysis
from recipeupload.connectors.ingredient_images import IngredientImageClient
from recipeupload.errors import UpstreamError
from recipeupload.logging_config import get_logger

logger = get_logger(__name__)


class FallbackPolicy(str, Enum):
    """What to do when the language model call fails."""

    PROPAGATE = "propagate"  # raise the UpstreamError to the caller
    MOCK = "mock"  # substitute the heuristic analysis


class AnalysisSource(str, Enum):
    """Where an analysis came from."""

    LLM = "llm"
    MOCK = "mock"


@dataclass
class AnalysisResult:
    """An enriched analysis and its origin."""

    analysis: RecipeAnalysis
    source: AnalysisSource


class IngredientEnricher:
    """Attaches ingredient image URLs to an analysis."""

    def __init__(self, image_client: IngredientImageClient):
        self.image_client = image_client

    async def enrich(self, analysis: RecipeAnalysis) -> RecipeAnalysis:
        """
        Add ``image_url`` to ingredients by case-insensitive exact name match.

        Ingredients without a match keep ``image_url`` unset. If the batch
        lookup fails, the analysis is returned unchanged.

        Args:
            analysis: Analysis from the LLM client or the fallback generator.

        Returns:
            A copy of the analysis with enriched ingredients.
        """
        names = analysis.ingredient_names()
        if not names:
            return analysis

        try:
            image_map = await self.image_client.get_ingredient_images(names)
        except Exception as e:
            logger.warning(f"Ingredient image enrichment failed, keeping analysis as is: {e}")
            return analysis

        ingredients = [
            ing.model_copy(update={"image_url": image_map[ing.name.lower()]})
            if ing.name.lower() in image_map
            else ing
            for ing in analysis.ingredients
        ]
        return analysis.model_copy(update={"ingredients": ingredients})


class RecipeAnalyzer:
    """
    Runs the LLM analysis and enriches the result with ingredient images.

    Every call names its FallbackPolicy; the draft generation endpoint
    propagates LLM failures while the analysis preview substitutes mock data.
    """

    def __init__(
        self,
        llm_client: RecipeAnalysisClient,
        enricher: IngredientEnricher | None = None,
        mock_generator: MockAnalysisGenerator | None = None,
    ):
        self.llm_client = llm_client
        self.enricher = enricher
        self.mock_generator = mock_generator or MockAnalysisGenerator()

    async def analyze(
        self,
        brief_ingredients: str,
        recipe_name: str,
        policy: FallbackPolicy,
    ) -> AnalysisResult:
        """
        Analyze a recipe.

        Args:
            brief_ingredients: Free-text ingredient list.
            recipe_name: Recipe title.
            policy: Behaviour when the LLM call fails.

        Returns:
            AnalysisResult with the (enriched) analysis.

        Raises:
            UpstreamError: On LLM failure when policy is PROPAGATE.
        """
        try:
            analysis = await self.llm_client.analyze(brief_ingredients, recipe_name)
            source = AnalysisSource.LLM
        except UpstreamError as e:
            if policy is FallbackPolicy.PROPAGATE:
                logger.error(f"Recipe analysis failed for '{recipe_name}': {e.message}")
                raise
            logger.warning(
                f"Recipe analysis failed for '{recipe_name}' ({e.code}), using fallback analysis"
            )
            analysis = self.mock_generator.generate(brief_ingredients, recipe_name)
            source = AnalysisSource.MOCK

        if self.enricher is not None:
            analysis = await self.enricher.enrich(analysis)

        return AnalysisResult(analysis=analysis, source=source)
