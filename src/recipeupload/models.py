"""SQLAlchemy database models."""

from datetime import datetime

from sqlalchemy import JSON, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from recipeupload.database import Base


class RecipeDraft(Base):
    """AI-generated recipe awaiting user review, expires after the draft TTL."""

    __tablename__ = "recipe_drafts"

    draft_id: Mapped[str] = mapped_column(String, primary_key=True)
    user_id: Mapped[str] = mapped_column(String, nullable=False)
    user_name: Mapped[str] = mapped_column(String, nullable=False)
    recipe_name: Mapped[str] = mapped_column(String, nullable=False)
    brief_description: Mapped[str] = mapped_column(Text, nullable=False)
    generated_recipe: Mapped[str] = mapped_column(Text, nullable=False)
    extracted_ingredients: Mapped[list] = mapped_column(JSON, default=list)
    image_url: Mapped[str] = mapped_column(Text, nullable=False)  # temporary, presigned
    image_path: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="draft", nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    __table_args__ = (
        Index("idx_recipe_drafts_user_id", "user_id"),
        Index("idx_recipe_drafts_expires_at", "expires_at"),
    )

    def is_expired(self, now: datetime | None = None) -> bool:
        """Check whether the draft is past its expiry time."""
        return self.expires_at <= (now or datetime.utcnow())


class Recipe(Base):
    """Final, user-approved recipe."""

    __tablename__ = "recipes"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    user_id: Mapped[str] = mapped_column(String, nullable=False)
    user_name: Mapped[str] = mapped_column(String, nullable=False)
    recipe_name: Mapped[str] = mapped_column(String, nullable=False)
    brief_ingredients: Mapped[str] = mapped_column(Text, nullable=False)
    full_recipe: Mapped[str] = mapped_column(Text, nullable=False)
    ingredients: Mapped[list] = mapped_column(JSON, default=list)
    image_url: Mapped[str] = mapped_column(Text, nullable=False)  # permanent
    image_path: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    likes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    tags: Mapped[list] = mapped_column(JSON, default=list)
    difficulty: Mapped[str] = mapped_column(String(20), default="medium", nullable=False)
    original_draft_id: Mapped[str] = mapped_column(String, nullable=False)

    __table_args__ = (
        Index("idx_recipes_user_id", "user_id"),
        Index("idx_recipes_original_draft_id", "original_draft_id"),
    )
