"""Shared HTTP plumbing for the ingredient search connectors."""

from dataclasses import dataclass
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from recipeupload.logging_config import get_logger

logger = get_logger(__name__)

# Failures worth another attempt; HTTP error statuses are returned as-is
RETRYABLE_ERRORS = (httpx.TimeoutException, httpx.NetworkError)


@dataclass
class ConnectorResponse:
    """Decoded JSON body of a successful call."""

    data: Any
    status_code: int
    headers: dict[str, str]


class ConnectorError(Exception):
    """A connector call failed: transport error, error status or undecodable body."""

    def __init__(self, message: str, status_code: int | None = None, response: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class HTTPConnector:
    """
    Base for JSON-over-HTTP connectors.

    Owns one lazily created ``httpx.AsyncClient`` and retries GETs on
    timeouts and network errors with exponential backoff.
    """

    DEFAULT_TIMEOUT = 30.0
    MAX_ATTEMPTS = 3
    BACKOFF_MAX = 10
    USER_AGENT = "RecipeUpload/1.0"

    def __init__(self, base_url: str, timeout: float | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout or self.DEFAULT_TIMEOUT
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers={"Accept": "application/json", "User-Agent": self.USER_AGENT},
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if one was opened."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint.lstrip('/')}" if endpoint else self.base_url

    async def _request(self, endpoint: str, params: dict[str, Any] | None = None) -> ConnectorResponse:
        """
        GET ``endpoint`` relative to the base URL and decode the JSON body.

        Raises:
            ConnectorError: If every attempt failed, the status is >= 400,
                or the body is not JSON.
        """
        url = self._url(endpoint)
        client = await self._get_client()

        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception_type(RETRYABLE_ERRORS),
                stop=stop_after_attempt(self.MAX_ATTEMPTS),
                wait=wait_exponential(multiplier=0.5, max=self.BACKOFF_MAX),
                reraise=True,
            ):
                with attempt:
                    response = await client.get(url, params=params)
        except (RetryError, httpx.HTTPError) as e:
            logger.error(f"GET {url} failed after {self.MAX_ATTEMPTS} attempts: {e!r}")
            raise ConnectorError(f"Request to {self.base_url} failed", response=str(e)) from e

        body = response.text
        if response.status_code >= 400:
            detail = body[:500] or "No details"
            logger.error(f"GET {url} returned {response.status_code}: {detail}")
            raise ConnectorError(
                f"API request failed with status {response.status_code}",
                status_code=response.status_code,
                response=detail,
            )

        try:
            data = response.json() if body else {}
        except ValueError as e:
            raise ConnectorError(
                "API returned a non-JSON body",
                status_code=response.status_code,
                response=body[:500],
            ) from e

        return ConnectorResponse(data=data, status_code=response.status_code, headers=dict(response.headers))
