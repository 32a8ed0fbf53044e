"""Recipe image object storage on an S3-compatible bucket."""

import asyncio
from typing import Any

import boto3

from recipeupload.config import get_settings
from recipeupload.logging_config import get_logger

logger = get_logger(__name__)

DRAFT_PREFIX = "recipeDrafts"
FINAL_PREFIX = "recipeImages"

# SigV4 presigned URLs cannot outlive seven days
MAX_PRESIGN_SECONDS = 7 * 24 * 60 * 60


class ImageStorage:
    """Stores, copies and deletes recipe images; boto3 calls run in a worker thread."""

    def __init__(
        self,
        bucket: str | None = None,
        public_base_url: str | None = None,
        client: Any = None,
    ):
        settings = get_settings()
        self.bucket = bucket or settings.s3_bucket
        base_url = settings.s3_public_base_url if public_base_url is None else public_base_url
        self.public_base_url = base_url.rstrip("/")
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            settings = get_settings()
            self._client = boto3.client(
                "s3",
                endpoint_url=settings.s3_endpoint_url or None,
                aws_access_key_id=settings.s3_access_key_id or None,
                aws_secret_access_key=settings.s3_secret_access_key or None,
                region_name=settings.s3_region or None,
            )
        return self._client

    async def upload(self, path: str, data: bytes, content_type: str) -> None:
        """Upload image bytes to ``path``."""
        await asyncio.to_thread(
            self._get_client().put_object,
            Bucket=self.bucket,
            Key=path,
            Body=data,
            ContentType=content_type,
        )
        logger.info(f"Uploaded image {path} ({len(data)} bytes)")

    async def temporary_url(self, path: str, expires_in: int) -> str:
        """Get a time-limited read URL for ``path``."""
        return await asyncio.to_thread(
            self._get_client().generate_presigned_url,
            "get_object",
            Params={"Bucket": self.bucket, "Key": path},
            ExpiresIn=min(expires_in, MAX_PRESIGN_SECONDS),
        )

    async def permanent_url(self, path: str) -> str:
        """Get a long-lived read URL for ``path``."""
        if self.public_base_url:
            return f"{self.public_base_url}/{path}"
        logger.warning("No public base URL configured, using longest presigned URL")
        return await self.temporary_url(path, MAX_PRESIGN_SECONDS)

    async def copy(self, source_path: str, destination_path: str) -> None:
        """Copy an object within the bucket."""
        await asyncio.to_thread(
            self._get_client().copy_object,
            Bucket=self.bucket,
            Key=destination_path,
            CopySource={"Bucket": self.bucket, "Key": source_path},
        )
        logger.info(f"Copied image {source_path} -> {destination_path}")

    async def delete(self, path: str) -> None:
        """Delete an object."""
        await asyncio.to_thread(self._get_client().delete_object, Bucket=self.bucket, Key=path)
        logger.info(f"Deleted image {path}")


def draft_image_path(user_id: str, draft_id: str, file_name: str) -> str:
    """Temporary per-user, per-draft image location."""
    return f"{DRAFT_PREFIX}/{user_id}/{draft_id}-{file_name}"


def final_image_path(user_id: str, image_id: str, recipe_name: str) -> str:
    """Permanent image location; the recipe name is reduced to [A-Za-z0-9_]."""
    safe_name = "".join(c if c.isascii() and c.isalnum() else "_" for c in recipe_name)
    return f"{FINAL_PREFIX}/{user_id}/{image_id}-{safe_name}"
