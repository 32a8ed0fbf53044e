"""Repositories for draft and final recipe documents."""

from datetime import datetime

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from recipeupload.logging_config import get_logger
from recipeupload.models import Recipe, RecipeDraft

logger = get_logger(__name__)

DRAFT_OPEN = "draft"
DRAFT_SUBMITTING = "submitting"


class DraftRepository:
    """Read/write access to ``recipe_drafts``."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, draft: RecipeDraft) -> RecipeDraft:
        """Insert a draft and commit."""
        self.session.add(draft)
        await self.session.commit()
        return draft

    async def get(self, draft_id: str) -> RecipeDraft | None:
        """Get a draft by id."""
        return await self.session.get(RecipeDraft, draft_id)

    async def claim(self, draft_id: str) -> bool:
        """
        Mark a draft as being submitted.

        The status check runs inside the UPDATE, so of two concurrent
        submissions only one sees a row change.

        Returns:
            False if the draft is gone or another submission holds it.
        """
        result = await self.session.execute(
            update(RecipeDraft)
            .where(RecipeDraft.draft_id == draft_id, RecipeDraft.status == DRAFT_OPEN)
            .values(status=DRAFT_SUBMITTING)
        )
        await self.session.commit()
        return result.rowcount > 0

    async def release(self, draft_id: str) -> None:
        """Reopen a claimed draft after a failed submission."""
        await self.session.rollback()
        await self.session.execute(
            update(RecipeDraft)
            .where(RecipeDraft.draft_id == draft_id)
            .values(status=DRAFT_OPEN)
        )
        await self.session.commit()

    async def delete(self, draft_id: str) -> bool:
        """Delete a draft by id; returns whether a row was removed."""
        try:
            result = await self.session.execute(
                delete(RecipeDraft).where(RecipeDraft.draft_id == draft_id)
            )
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            raise
        return result.rowcount > 0

    async def list_expired(self, now: datetime | None = None) -> list[RecipeDraft]:
        """Get drafts whose expiry time is at or before ``now``."""
        now = now or datetime.utcnow()
        result = await self.session.execute(
            select(RecipeDraft).where(RecipeDraft.expires_at <= now).order_by(RecipeDraft.expires_at)
        )
        return list(result.scalars().all())


class RecipeRepository:
    """Read/write access to ``recipes``."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, recipe: Recipe) -> Recipe:
        """Insert a recipe and commit."""
        self.session.add(recipe)
        await self.session.commit()
        return recipe

    async def get(self, recipe_id: str) -> Recipe | None:
        """Get a recipe by id."""
        return await self.session.get(Recipe, recipe_id)

    async def list_by_draft(self, draft_id: str) -> list[Recipe]:
        """Get recipes created from a given draft."""
        result = await self.session.execute(
            select(Recipe).where(Recipe.original_draft_id == draft_id)
        )
        return list(result.scalars().all())
