"""Bearer-token authentication with Firebase ID tokens."""

import asyncio
from dataclasses import dataclass
from functools import lru_cache
from typing import Annotated, Any

import firebase_admin
from fastapi import Depends, Header
from firebase_admin import auth as firebase_auth
from firebase_admin import credentials
from firebase_admin import exceptions as firebase_exceptions

from recipeupload.config import get_settings
from recipeupload.errors import AuthError
from recipeupload.logging_config import get_logger, user_id_ctx

logger = get_logger(__name__)

ANONYMOUS_NAME = "Anonymous Chef"


@dataclass(frozen=True)
class AuthenticatedUser:
    """Caller identity taken from a verified token."""

    uid: str
    name: str

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> "AuthenticatedUser":
        """Build from decoded token claims."""
        return cls(
            uid=claims["uid"],
            name=claims.get("name") or claims.get("email") or ANONYMOUS_NAME,
        )


def bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class FirebaseTokenVerifier:
    """Verifies Firebase ID tokens."""

    APP_NAME = "recipeupload"

    def __init__(self, project_id: str | None = None, credentials_path: str | None = None):
        settings = get_settings()
        self.project_id = project_id or settings.firebase_project_id
        self.credentials_path = credentials_path or settings.firebase_credentials_path
        self._app: firebase_admin.App | None = None

    def _get_app(self) -> firebase_admin.App:
        if self._app is None:
            try:
                self._app = firebase_admin.get_app(self.APP_NAME)
            except ValueError:
                cred = (
                    credentials.Certificate(self.credentials_path)
                    if self.credentials_path
                    else credentials.ApplicationDefault()
                )
                options = {"projectId": self.project_id} if self.project_id else None
                self._app = firebase_admin.initialize_app(cred, options, name=self.APP_NAME)
        return self._app

    async def verify(self, token: str) -> AuthenticatedUser:
        """
        Verify an ID token.

        Raises:
            AuthError: If the token is invalid, expired or cannot be checked.
        """
        try:
            claims = await asyncio.to_thread(
                firebase_auth.verify_id_token, token, app=self._get_app()
            )
        except (ValueError, firebase_exceptions.FirebaseError) as e:
            logger.warning(f"Error verifying ID token: {e}")
            raise AuthError("Authentication token missing or invalid.") from e
        return AuthenticatedUser.from_claims(claims)


@lru_cache
def get_token_verifier() -> FirebaseTokenVerifier:
    """Get the process-wide token verifier."""
    return FirebaseTokenVerifier()


async def get_current_user(
    authorization: Annotated[str | None, Header()] = None,
    verifier: FirebaseTokenVerifier = Depends(get_token_verifier),
) -> AuthenticatedUser:
    """FastAPI dependency resolving the authenticated caller."""
    token = bearer_token(authorization)
    if token is None:
        raise AuthError("Authentication required.")
    user = await verifier.verify(token)
    user_id_ctx.set(user.uid)
    return user
