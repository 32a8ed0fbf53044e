"""Pytest configuration and shared fixtures."""

import random
from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from recipeupload.analysis.mock import MockAnalysisGenerator
from recipeupload.auth import AuthenticatedUser
from recipeupload.database import Base
from recipeupload.models import RecipeDraft
from recipeupload.storage.images import ImageStorage

# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (require external services)"
    )
    config.addinivalue_line("markers", "slow: marks tests as slow running")


# =============================================================================
# Analysis Fixtures
# =============================================================================


@pytest.fixture
def fixed_clock():
    """Clock pinned to 2024-01-01T00:00:00Z."""
    return lambda: 1704067200.0


@pytest.fixture
def mock_generator(fixed_clock):
    """Fallback generator with seeded randomness."""
    return MockAnalysisGenerator(rng=random.Random(42), clock=fixed_clock)


@pytest.fixture
def llm_analysis_payload():
    """Well-formed analysis as returned by the language model."""
    return {
        "ingredients": [
            {
                "name": "chicken breast",
                "quantity": "500",
                "unit": "g",
                "category": "protein",
                "description": "Boneless chicken breast.",
            },
            {
                "name": "Basmati Rice",
                "quantity": 2,
                "unit": "cup",
                "category": "grain",
                "description": "Long grain rice.",
            },
            {
                "name": "curry paste",
                "quantity": "2",
                "unit": "tbsp",
                "category": "sauce",
                "description": "Spicy paste.",
            },
        ],
        "productMatches": [
            {
                "id": "p-1",
                "name": "Organic Chicken Breast",
                "price": "$7.99",
                "imageUrl": "/placeholder.svg",
                "confidence": 0.92,
                "category": "protein",
            },
            {
                "id": "p-2",
                "name": "Jasmine Rice 1kg",
                "price": "$3.49",
                "imageUrl": "/placeholder.svg",
                "confidence": 0.81,
                "category": "grain",
            },
        ],
        "cookingTime": "30-45 minutes",
        "difficulty": "medium",
        "cuisine": "Indian",
        "dietaryInfo": ["gluten-free", "gluten-free"],
        "instructions": ["Brown the chicken.", "Stir in the curry paste.", "Serve over rice."],
    }


# =============================================================================
# Identity Fixtures
# =============================================================================


@pytest.fixture
def chef():
    """Authenticated owner of drafts in tests."""
    return AuthenticatedUser(uid="user-123", name="Test Chef")


@pytest.fixture
def other_chef():
    """A second, unrelated user."""
    return AuthenticatedUser(uid="user-999", name="Someone Else")


# =============================================================================
# Storage Fixtures
# =============================================================================


@pytest.fixture
def mock_s3_client():
    """Mock boto3 S3 client."""
    client = MagicMock()
    client.generate_presigned_url.return_value = "https://bucket.example.com/signed?sig=abc"
    return client


@pytest.fixture
def image_storage(mock_s3_client):
    """Image storage backed by the mock S3 client."""
    return ImageStorage(
        bucket="test-bucket",
        public_base_url="https://cdn.example.com",
        client=mock_s3_client,
    )


@pytest_asyncio.fixture
async def db_engine():
    """In-memory SQLite engine with all tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    """Database session on the in-memory engine."""
    session_factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_draft(chef):
    """Factory for draft rows with sensible defaults."""

    def _make_draft(
        draft_id: str = "draft-1",
        user_id: str | None = None,
        expires_at: datetime | None = None,
        image_path: str | None = None,
    ) -> RecipeDraft:
        now = datetime.utcnow()
        owner = user_id or chef.uid
        return RecipeDraft(
            draft_id=draft_id,
            user_id=owner,
            user_name=chef.name,
            recipe_name="Tomato Soup",
            brief_description="2 cups tomato, 1 onion, salt",
            generated_recipe="# Tomato Soup",
            extracted_ingredients=[],
            image_url="https://bucket.example.com/signed",
            image_path=image_path or f"recipeDrafts/{owner}/{draft_id}-soup.jpg",
            status="draft",
            created_at=now,
            expires_at=expires_at or now + timedelta(hours=24),
        )

    return _make_draft


@pytest.fixture
def mock_image_client():
    """Ingredient image client whose batch lookup returns nothing."""
    client = AsyncMock()
    client.get_ingredient_images = AsyncMock(return_value={})
    return client
