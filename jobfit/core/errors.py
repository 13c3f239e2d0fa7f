"""
Typed errors for the resume generation workflow.

Each error knows its HTTP status and renders as ``{error, message, details}``
through the handler registered in ``jobfit.main``.
"""
from typing import Any, Dict, Optional


class JobFitError(Exception):
    """Base class for errors surfaced to API callers as structured JSON."""

    status_code: int = 500
    error: str = "Internal error"

    def __init__(
        self,
        error: Optional[str] = None,
        message: Optional[str] = None,
        details: Optional[str] = None,
    ):
        self.error = error or self.error
        self.message = message
        self.details = details
        super().__init__(message or self.error)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.error}
        if self.message:
            payload["message"] = self.message
        if self.details:
            payload["details"] = self.details
        return payload


class MissingInputError(JobFitError):
    status_code = 400
    error = "Missing job description or resume file"


class AuthRequiredError(JobFitError):
    status_code = 401
    error = "Not authenticated"


class AccessDeniedError(JobFitError):
    """Generation refused by the access gate. ``reason`` is a stable code."""

    status_code = 403
    error = "Access Restricted"

    def __init__(self, reason: str, error: Optional[str] = None, message: Optional[str] = None):
        super().__init__(error=error, message=message)
        self.reason = reason

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload["reason"] = self.reason
        return payload


class AIGenerationError(JobFitError):
    """Every model in the fallback chain failed."""

    status_code = 500

    def __init__(self, last_error: str, attempts: Optional[list] = None):
        last_error = last_error or "Failed to connect"
        super().__init__(
            error=f"AI Error: {last_error}",
            message="Please check the AI provider quota or region availability.",
            details=f"Failed to generate content. {last_error}",
        )
        self.last_error = last_error
        self.attempts = attempts or []
