"""Two-phase recipe upload: AI-generated draft, then user-approved final recipe."""

import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from recipeupload.analysis.formatting import (
    ExtractedIngredient,
    extract_ingredients,
    render_recipe,
)
from recipeupload.analysis.schemas import RecipeAnalysis
from recipeupload.analysis.service import FallbackPolicy, RecipeAnalyzer
from recipeupload.auth import AuthenticatedUser
from recipeupload.config import get_settings
from recipeupload.drafts.results import DeletionResult, attempt_deletion
from recipeupload.errors import ForbiddenError, NotFoundError, ValidationError
from recipeupload.logging_config import LoggingContext, get_logger
from recipeupload.models import Recipe, RecipeDraft
from recipeupload.storage.images import ImageStorage, draft_image_path, final_image_path
from recipeupload.storage.repository import DraftRepository, RecipeRepository

logger = get_logger(__name__)


@dataclass
class UploadedImage:
    """Image file received with a generation request."""

    data: bytes
    content_type: str | None
    filename: str | None

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class GeneratedDraft:
    """Result of the generation step."""

    draft_id: str
    generated_recipe: str
    extracted_ingredients: list[ExtractedIngredient]
    image_url: str
    analysis: RecipeAnalysis

    def to_api(self) -> dict[str, Any]:
        return {
            "draftId": self.draft_id,
            "generatedRecipe": self.generated_recipe,
            "extractedIngredients": [ing.to_api() for ing in self.extracted_ingredients],
            "imageUrl": self.image_url,
        }


@dataclass
class SubmittedRecipe:
    """Result of the submission step."""

    recipe_id: str
    image_url: str
    cleanup: list[DeletionResult] = field(default_factory=list)


class SubmittedIngredient(BaseModel):
    """Ingredient row as edited by the user."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(min_length=1)
    quantity: str = Field(min_length=1)

    @field_validator("name", "quantity", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        if isinstance(value, str):
            return value.strip()
        return value


def parse_submitted_ingredients(raw: str) -> list[dict[str, Any]]:
    """
    Validate a JSON-encoded ingredient list.

    Raises:
        ValidationError: Unless ``raw`` is a non-empty JSON array of objects
            that each carry a non-empty name and quantity.
    """
    error = ValidationError(
        "Ingredients must be a valid JSON array with name and quantity for each item.",
        code="INVALID_INGREDIENTS_FORMAT",
    )
    try:
        data = json.loads(raw)
    except (TypeError, json.JSONDecodeError) as e:
        raise error from e
    if not isinstance(data, list) or not data:
        raise error
    try:
        items = [SubmittedIngredient.model_validate(item) for item in data]
    except PydanticValidationError as e:
        raise error from e
    return [item.model_dump() for item in items]


def _require(**fields: str | None) -> dict[str, str]:
    values = {key: (value or "").strip() for key, value in fields.items()}
    missing = [key for key, value in values.items() if not value]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}.")
    return values


class DraftService:
    """
    Orchestrates the draft lifecycle.

    A draft ends exactly one way: submitted into a Recipe (and removed), or
    removed by the expiry cleanup.
    """

    def __init__(
        self,
        drafts: DraftRepository,
        recipes: RecipeRepository,
        images: ImageStorage,
        analyzer: RecipeAnalyzer,
        draft_ttl: timedelta | None = None,
        max_image_bytes: int | None = None,
        allowed_image_types: list[str] | None = None,
    ):
        settings = get_settings()
        self.drafts = drafts
        self.recipes = recipes
        self.images = images
        self.analyzer = analyzer
        self.draft_ttl = draft_ttl or timedelta(hours=settings.draft_ttl_hours)
        self.max_image_bytes = max_image_bytes or settings.max_image_bytes
        self.allowed_image_types = allowed_image_types or settings.allowed_image_type_list

    def validate_image(self, image: UploadedImage | None) -> UploadedImage:
        """Check the upload is present, of an allowed type and not too large."""
        if image is None or not image.data or not image.content_type:
            raise ValidationError("Image file is required", code="INVALID_IMAGE")
        if image.content_type not in self.allowed_image_types:
            raise ValidationError(
                "Please upload a valid image file (JPG, PNG, GIF, WebP)", code="INVALID_IMAGE"
            )
        if image.size > self.max_image_bytes:
            limit_mb = self.max_image_bytes // (1024 * 1024)
            raise ValidationError(
                f"Image file must be smaller than {limit_mb}MB", code="INVALID_IMAGE"
            )
        return image

    async def generate_draft(
        self,
        user: AuthenticatedUser,
        name: str | None,
        brief_description: str | None,
        image: UploadedImage | None,
    ) -> GeneratedDraft:
        """
        Generate a recipe draft from a name, a brief ingredient description and a photo.

        Args:
            user: Authenticated caller.
            name: Recipe name.
            brief_description: Free-text ingredient list.
            image: Uploaded photo.

        Returns:
            GeneratedDraft with the stored draft id and temporary image URL.

        Raises:
            ValidationError: Missing fields or invalid image.
            UpstreamError: The language model call failed.
        """
        if not (name or "").strip() or not (brief_description or "").strip():
            raise ValidationError("Recipe name and brief description are required.")
        name = name.strip()
        brief_description = brief_description.strip()
        image = self.validate_image(image)

        draft_id = str(uuid.uuid4())
        image_path = draft_image_path(user.uid, draft_id, image.filename or "image")

        with LoggingContext(draft_id=draft_id):
            await self.images.upload(image_path, image.data, image.content_type)
            try:
                image_url = await self.images.temporary_url(
                    image_path, int(self.draft_ttl.total_seconds())
                )
                result = await self.analyzer.analyze(
                    brief_description, name, policy=FallbackPolicy.PROPAGATE
                )
                generated_recipe = render_recipe(result.analysis, name)
                extracted = extract_ingredients(result.analysis)

                now = datetime.utcnow()
                draft = RecipeDraft(
                    draft_id=draft_id,
                    user_id=user.uid,
                    user_name=user.name,
                    recipe_name=name,
                    brief_description=brief_description,
                    generated_recipe=generated_recipe,
                    extracted_ingredients=[ing.to_api() for ing in extracted],
                    image_url=image_url,
                    image_path=image_path,
                    status="draft",
                    created_at=now,
                    expires_at=now + self.draft_ttl,
                )
                await self.drafts.add(draft)
            except Exception:
                # an upload without a draft row is invisible to the cleanup job
                await attempt_deletion("image", image_path, self.images.delete(image_path))
                raise

            logger.info(
                f"Stored draft for '{name}' with {len(extracted)} ingredients "
                f"(analysis source: {result.source.value})"
            )

        return GeneratedDraft(
            draft_id=draft_id,
            generated_recipe=generated_recipe,
            extracted_ingredients=extracted,
            image_url=image_url,
            analysis=result.analysis,
        )

    async def submit_draft(
        self,
        user: AuthenticatedUser,
        draft_id: str | None,
        recipe_name: str | None,
        brief_ingredients: str | None,
        full_recipe: str | None,
        ingredients: str | None,
    ) -> SubmittedRecipe:
        """
        Turn a caller-owned, unexpired draft into a final recipe.

        The image copy, the recipe write and the draft removal run in sequence
        without a rollback; removing the draft and its temporary image is
        best-effort and reported in ``SubmittedRecipe.cleanup``. The draft is
        claimed first, so a concurrent second submission finds nothing to
        publish; a failed publish reopens it.

        Raises:
            ValidationError: Missing fields or malformed ingredient list.
            NotFoundError: The draft does not exist or has expired.
            ForbiddenError: The draft belongs to another user.
        """
        values = _require(
            draftId=draft_id,
            recipeName=recipe_name,
            briefIngredients=brief_ingredients,
            fullRecipe=full_recipe,
            ingredients=ingredients,
        )
        draft_id = values["draftId"]

        with LoggingContext(draft_id=draft_id):
            draft = await self.drafts.get(draft_id)
            if draft is None or draft.is_expired():
                raise NotFoundError("Recipe draft not found or has expired.")
            if draft.user_id != user.uid:
                logger.warning(f"User {user.uid} tried to submit a draft owned by {draft.user_id}")
                raise ForbiddenError("You are not authorized to submit this draft.")

            submitted = parse_submitted_ingredients(values["ingredients"])

            if not await self.drafts.claim(draft_id):
                logger.warning("Draft is already being submitted")
                raise NotFoundError("Recipe draft not found or has expired.")

            try:
                final_path = final_image_path(user.uid, str(uuid.uuid4()), values["recipeName"])
                await self.images.copy(draft.image_path, final_path)
                final_url = await self.images.permanent_url(final_path)

                recipe = Recipe(
                    id=str(uuid.uuid4()),
                    user_id=user.uid,
                    user_name=draft.user_name,
                    recipe_name=values["recipeName"],
                    brief_ingredients=values["briefIngredients"],
                    full_recipe=values["fullRecipe"],
                    ingredients=submitted,
                    image_url=final_url,
                    image_path=final_path,
                    created_at=datetime.utcnow(),
                    likes=0,
                    tags=[],
                    difficulty="medium",
                    original_draft_id=draft_id,
                )
                await self.recipes.add(recipe)
            except Exception:
                await self.drafts.release(draft_id)
                raise

            logger.info(f"Recipe {recipe.id} created from draft")

            draft_image = draft.image_path
            cleanup = [
                await attempt_deletion("draft", draft_id, self.drafts.delete(draft_id)),
                await attempt_deletion("image", draft_image, self.images.delete(draft_image)),
            ]

        return SubmittedRecipe(recipe_id=recipe.id, image_url=final_url, cleanup=cleanup)
