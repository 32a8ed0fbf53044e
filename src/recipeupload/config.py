"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    database_url: str = "postgresql+asyncpg://localhost/recipeupload"

    # Redis (Celery broker)
    redis_url: str = "redis://localhost:6379/0"

    # LLM completion API
    openai_api_key: str = ""
    openai_model: str = "gpt-4"
    openai_base_url: str = "https://api.openai.com/v1"

    # Ingredient search API (Spoonacular)
    spoonacular_api_key: str = ""
    spoonacular_base_url: str = "https://api.spoonacular.com/food"
    ingredient_image_cdn: str = "https://spoonacular.com/cdn/ingredients_100x100"
    # First-party proxy the image client talks to (never the upstream directly)
    ingredient_proxy_url: str = "http://localhost:8000/api/v1/ingredients/search"
    image_batch_size: int = 3
    image_batch_delay: float = 0.2  # seconds between lookup groups

    # Object storage (S3 compatible)
    s3_bucket: str = "recipe-upload"
    s3_endpoint_url: str = ""
    s3_access_key_id: str = ""
    s3_secret_access_key: str = ""
    s3_region: str = "auto"
    s3_public_base_url: str = ""

    # Firebase authentication
    firebase_project_id: str = ""
    firebase_credentials_path: str = ""

    # Drafts and uploads
    draft_ttl_hours: int = 24
    max_image_bytes: int = 5 * 1024 * 1024
    allowed_image_types: str = "image/jpeg,image/jpg,image/png,image/gif,image/webp"

    # Application
    environment: str = "development"
    log_level: str = "INFO"
    allowed_origins: str = "http://localhost:3000,http://localhost:8000"

    @property
    def allowed_image_type_list(self) -> list[str]:
        """Get the allowed upload content types as a list."""
        return [t.strip() for t in self.allowed_image_types.split(",") if t.strip()]

    @property
    def allowed_origin_list(self) -> list[str]:
        """Get the CORS origins as a list."""
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
