"""Exception hierarchy for user-visible failures.

Every error carries a machine-readable ``code`` and a human-readable
``message``; the API layer renders them as
``{"success": false, "error": code, "message": message}``.
"""


class RecipeUploadError(Exception):
    """Base exception for all recipe upload failures."""

    status_code = 500
    default_code = "SERVER_ERROR"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code

    def to_dict(self) -> dict[str, object]:
        """Render the error as a structured response body."""
        return {"success": False, "error": self.code, "message": self.message}


class ValidationError(RecipeUploadError):
    """Missing or malformed input fields."""

    status_code = 400
    default_code = "MISSING_FIELDS"


class AuthError(RecipeUploadError):
    """Missing or invalid credential."""

    status_code = 401
    default_code = "UNAUTHORIZED"


class ForbiddenError(RecipeUploadError):
    """Valid credential that does not own the requested resource."""

    status_code = 403
    default_code = "UNAUTHORIZED_DRAFT"


class NotFoundError(RecipeUploadError):
    """Draft missing or expired."""

    status_code = 404
    default_code = "DRAFT_NOT_FOUND"


class UpstreamError(RecipeUploadError):
    """External API returned a non-success status or is not configured."""

    status_code = 500
    default_code = "UPSTREAM_ERROR"


class ParseError(UpstreamError):
    """LLM response could not be parsed into a recipe analysis."""

    default_code = "LLM_PARSE_ERROR"
