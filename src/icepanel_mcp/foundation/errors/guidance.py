"""Actionable, per-status messages for failed IcePanel calls.

The tool layer calls ``handle_api_error`` (or ``ErrorReport.from_exception``
when it wants structured output) instead of surfacing raw exceptions.
"""

from __future__ import annotations

from typing import Annotated, Any, Self

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .errors import (
    ConfigurationError,
    ErrorKind,
    IcePanelApiError,
    IcePanelError,
    RequestCancelled,
    TransportError,
)


def _body_message(body: Any) -> str | None:
    """Pull the ``message`` field out of an API error document."""
    if isinstance(body, dict):
        message = body.get("message")
        return str(message) if message else None
    return None


def _http_guidance(error: IcePanelApiError) -> str:
    details = _body_message(error.body)
    match error.status:
        case 400:
            return (
                "Error: Invalid request. Check that all required fields are provided and IDs are 20 characters. "
                + (f"Details: {details}" if details else "")
            ).rstrip()
        case 401:
            return "Error: Authentication failed. Verify your API_KEY is correct and has not expired."
        case 403:
            return (
                "Error: Permission denied. Your API key may only have read access. "
                "Generate a new key with write permissions."
            )
        case 404:
            return (
                "Error: Resource not found. Verify the landscapeId and object IDs are correct. "
                "Use icepanel_list_model_objects to find valid IDs."
            )
        case 409:
            return (
                "Error: Conflict. The resource may have been modified by another user. "
                "Fetch the latest version and try again."
            )
        case 422:
            return "Error: Validation failed. " + (f"Details: {details}" if details else "Check input parameters.")
        case 429:
            return "Error: Rate limit exceeded. Wait a moment before retrying."
        case _:
            return f"Error: API request failed ({error.status}). {details or error.status_text}".rstrip()


class ErrorReport(BaseModel):
    """Structured view of a failure for tool output.

    Attributes:
        kind: Failure class, ``None`` for errors outside the taxonomy
        message: User-facing guidance
        status: HTTP status when the API responded
        recoverable: Whether trying again later may succeed
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        json_schema_extra={
            "title": "IcePanel Error",
            "examples": [{
                "kind": "HTTP",
                "message": "Error: Rate limit exceeded. Wait a moment before retrying.",
                "status": 429,
                "recoverable": True,
            }],
        },
    )

    kind: ErrorKind | None = None
    message: Annotated[str, Field(min_length=1)]
    status: int | None = None
    recoverable: bool = False

    @computed_field
    @property
    def is_auth_error(self) -> bool:
        return self.status in (401, 403)

    @classmethod
    def from_exception(cls, exc: BaseException) -> Self:
        if isinstance(exc, IcePanelApiError):
            return cls(kind=exc.kind, message=_http_guidance(exc), status=exc.status, recoverable=exc.retryable)
        if isinstance(exc, TransportError):
            if exc.timed_out:
                message = "Error: Request to IcePanel timed out. Try again, or raise ICEPANEL_API_TIMEOUT_MS."
            else:
                message = f"Error: Could not reach the IcePanel API. {exc.message}"
            return cls(kind=exc.kind, message=message, recoverable=True)
        if isinstance(exc, RequestCancelled):
            return cls(kind=exc.kind, message="Error: Request was cancelled.")
        if isinstance(exc, ConfigurationError):
            return cls(kind=exc.kind, message=f"Error: Configuration problem. {exc.message}")
        if isinstance(exc, IcePanelError):
            return cls(kind=exc.kind, message=f"Error: {exc.message}")
        return cls(message=f"Error: {exc}" if str(exc) else f"Error: {type(exc).__name__}")


def handle_api_error(error: BaseException) -> str:
    """Translate any failure from the client into a user-facing guidance string."""
    return ErrorReport.from_exception(error).message
