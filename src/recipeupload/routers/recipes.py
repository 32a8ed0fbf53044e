"""API routes for recipe generation, submission and analysis preview."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from recipeupload.analysis.formatting import extract_ingredients, render_recipe
from recipeupload.analysis.service import FallbackPolicy, RecipeAnalyzer
from recipeupload.auth import AuthenticatedUser, get_current_user
from recipeupload.dependencies import get_analyzer, get_draft_service
from recipeupload.drafts.service import DraftService, UploadedImage
from recipeupload.errors import RecipeUploadError
from recipeupload.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/recipes", tags=["recipes"])


# Request/Response schemas
class AnalyzeRequest(BaseModel):
    """Request to preview the analysis of a recipe."""

    recipe_name: str = Field(alias="recipeName", min_length=1)
    brief_ingredients: str = Field(alias="briefIngredients", min_length=1)


def _server_error(action: str, error: Exception) -> RecipeUploadError:
    logger.exception(f"Unexpected error while {action}: {error}")
    return RecipeUploadError("An unexpected error occurred. Please try again later.")


async def _read_image(upload: UploadFile | None) -> UploadedImage | None:
    if upload is None:
        return None
    return UploadedImage(
        data=await upload.read(),
        content_type=upload.content_type,
        filename=upload.filename,
    )


@router.post("/generate")
async def generate_recipe(
    name: Annotated[str | None, Form()] = None,
    brief_description: Annotated[str | None, Form(alias="briefDescription")] = None,
    recipe_image: Annotated[UploadFile | None, File(alias="recipeImage")] = None,
    user: AuthenticatedUser = Depends(get_current_user),
    service: DraftService = Depends(get_draft_service),
) -> dict[str, Any]:
    """
    Generate a recipe draft from a name, brief description and photo.

    Fails with 500 if the language model is unavailable; no draft is stored.
    """
    logger.info(f"Generating recipe draft for user {user.uid}: name={name!r}")

    try:
        image = await _read_image(recipe_image)
        draft = await service.generate_draft(user, name, brief_description, image)
    except RecipeUploadError:
        raise
    except Exception as e:
        raise _server_error("generating recipe", e) from e

    return {
        "success": True,
        "data": draft.to_api(),
        "message": "Recipe generated successfully! Please review and edit before submitting.",
    }


@router.post("/submit", status_code=status.HTTP_201_CREATED)
async def submit_recipe(
    draft_id: Annotated[str | None, Form(alias="draftId")] = None,
    recipe_name: Annotated[str | None, Form(alias="recipeName")] = None,
    brief_ingredients: Annotated[str | None, Form(alias="briefIngredients")] = None,
    full_recipe: Annotated[str | None, Form(alias="fullRecipe")] = None,
    ingredients: Annotated[str | None, Form()] = None,
    user: AuthenticatedUser = Depends(get_current_user),
    service: DraftService = Depends(get_draft_service),
) -> JSONResponse:
    """Submit a reviewed draft as a final recipe."""
    logger.info(f"Submitting draft {draft_id} for user {user.uid}")

    try:
        submitted = await service.submit_draft(
            user, draft_id, recipe_name, brief_ingredients, full_recipe, ingredients
        )
    except RecipeUploadError:
        raise
    except Exception as e:
        raise _server_error("submitting recipe", e) from e

    failed = [r for r in submitted.cleanup if not r.succeeded]
    if failed:
        logger.warning(f"Recipe {submitted.recipe_id} created with {len(failed)} cleanup failures")

    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content={
            "success": True,
            "message": "Recipe submitted successfully!",
            "recipeId": submitted.recipe_id,
            "imageUrl": submitted.image_url,
        },
    )


@router.post("/analyze")
async def analyze_recipe(
    request: AnalyzeRequest,
    analyzer: RecipeAnalyzer = Depends(get_analyzer),
) -> dict[str, Any]:
    """
    Preview the analysis of a recipe without storing anything.

    Language model failures are replaced with heuristic analysis.
    """
    logger.info(f"Analysis preview for '{request.recipe_name}'")

    try:
        result = await analyzer.analyze(
            request.brief_ingredients, request.recipe_name, policy=FallbackPolicy.MOCK
        )
    except RecipeUploadError:
        raise
    except Exception as e:
        raise _server_error("analyzing recipe", e) from e

    return {
        "success": True,
        "source": result.source.value,
        "analysis": result.analysis.to_api(),
        "generatedRecipe": render_recipe(result.analysis, request.recipe_name),
        "extractedIngredients": [ing.to_api() for ing in extract_ingredients(result.analysis)],
    }
