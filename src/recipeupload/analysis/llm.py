"""LLM recipe-analysis client backed by the OpenAI chat completions API."""

import json
import re
from typing import Any

import openai
from openai import AsyncOpenAI
from pydantic import ValidationError as PydanticValidationError

from recipeupload.analysis.schemas import RecipeAnalysis
from recipeupload.config import get_settings
from recipeupload.errors import ParseError, UpstreamError
from recipeupload.logging_config import get_logger

logger = get_logger(__name__)


ANALYSIS_SYSTEM_PROMPT = """You are an expert culinary AI assistant. Analyze the given ingredients and recipe name to:
1. For each ingredient, strictly extract:
   - name (e.g. 'mushroom spaghetti sauce')
   - quantity (e.g. '3')
   - unit (e.g. '12 ounce jars')
   - category (one of: protein, vegetable, dairy, grain, spice, fruit, oil, other)
   - description (e.g. 'A tomato-based sauce that includes mushrooms.')
2. For productMatches, ensure each ingredient matches to a unique, relevant product (no duplicates, no generic matches). If no match, leave it out. Use a placeholder image URL (e.g. '/placeholder.svg') if no real image is available.
3. Provide cooking time, difficulty (Easy, Medium or Hard), cuisine type, and dietary information.
4. Generate detailed, step-by-step cooking instructions for the recipe. Each step should be specific, actionable, and tailored to the ingredients and cuisine. Do not use generic phrases like 'prepare all ingredients' or 'follow standard procedures'.
5. Return the response as valid JSON with the following structure:
{
  "ingredients": [
    {
      "name": "...",
      "quantity": "...",
      "unit": "...",
      "category": "...",
      "description": "..."
    }
  ],
  "productMatches": [
    {
      "id": "...",
      "name": "...",
      "price": "...",
      "imageUrl": "...",
      "confidence": 0.95,
      "category": "..."
    }
  ],
  "cookingTime": "...",
  "difficulty": "...",
  "cuisine": "...",
  "dietaryInfo": ["..."],
  "instructions": ["Step 1...", "Step 2...", ...]
}"""

USER_PROMPT_TEMPLATE = (
    "Recipe: {recipe_name}\nIngredients: {brief_ingredients}\n\n"
    "Please analyze and provide structured data with detailed, concrete, step-by-step "
    "instructions for this specific recipe. Strictly parse ingredient fields and ensure "
    "unique, relevant product matches."
)

_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def parse_analysis_content(content: str | None) -> RecipeAnalysis:
    """
    Parse the model's text output into a RecipeAnalysis.

    Args:
        content: Raw message content, optionally wrapped in a ```json fence.

    Returns:
        Validated RecipeAnalysis.

    Raises:
        ParseError: If the content is empty, not JSON, or does not match the schema.
    """
    if not content or not content.strip():
        raise ParseError("No content received from the language model")

    text = _CODE_FENCE.sub("", content.strip())
    try:
        data: Any = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"Language model returned invalid JSON: {e.msg}") from e

    if not isinstance(data, dict):
        raise ParseError("Language model returned JSON that is not an object")

    try:
        return RecipeAnalysis.model_validate(data)
    except PydanticValidationError as e:
        raise ParseError(
            f"Language model response does not match the analysis schema "
            f"({e.error_count()} errors)"
        ) from e


class RecipeAnalysisClient:
    """Client that asks the completion API to structure a recipe."""

    DEFAULT_TIMEOUT = 60.0
    TEMPERATURE = 0.3
    MAX_TOKENS = 1200

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        client: AsyncOpenAI | None = None,
    ):
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.openai_api_key
        self.model = model or settings.openai_model
        self.base_url = base_url or settings.openai_base_url
        self.timeout = timeout or self.DEFAULT_TIMEOUT
        self._client = client

    @property
    def is_configured(self) -> bool:
        """Check whether a credential is available."""
        return bool(self.api_key) or self._client is not None

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
            )
        return self._client

    async def analyze(self, brief_ingredients: str, recipe_name: str) -> RecipeAnalysis:
        """
        Analyze free-text ingredients with the language model.

        Args:
            brief_ingredients: Free-text ingredient list.
            recipe_name: Recipe title.

        Returns:
            Parsed RecipeAnalysis.

        Raises:
            UpstreamError: If the credential is missing or the completion call fails.
            ParseError: If the response cannot be parsed into the schema.
        """
        if not self.is_configured:
            raise UpstreamError("OpenAI API key is not configured")

        logger.info(f"Requesting recipe analysis for '{recipe_name}' from {self.model}")
        try:
            response = await self._get_client().chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": ANALYSIS_SYSTEM_PROMPT},
                    {
                        "role": "user",
                        "content": USER_PROMPT_TEMPLATE.format(
                            recipe_name=recipe_name,
                            brief_ingredients=brief_ingredients,
                        ),
                    },
                ],
                temperature=self.TEMPERATURE,
                max_tokens=self.MAX_TOKENS,
            )
        except openai.APIStatusError as e:
            logger.error(f"OpenAI API error {e.status_code} for '{recipe_name}'")
            raise UpstreamError(f"OpenAI API error: {e.status_code}") from e
        except openai.APIError as e:
            logger.error(f"OpenAI request failed for '{recipe_name}': {e}")
            raise UpstreamError("OpenAI request failed") from e

        content = response.choices[0].message.content if response.choices else None
        analysis = parse_analysis_content(content)
        logger.info(
            f"Analysis for '{recipe_name}': {len(analysis.ingredients)} ingredients, "
            f"{len(analysis.product_matches)} product matches"
        )
        return analysis

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.close()
            self._client = None
