"""Error taxonomy for IcePanel API calls.

Every failure that crosses the client boundary is an ``IcePanelError``
carrying ``kind``, ``status`` and ``body``. Callers branch on the subclass
(or on ``kind``) and on ``status`` to produce user guidance; the client only
classifies.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, ClassVar


class ErrorKind(StrEnum):
    """Machine-readable failure classes.

    Used for retry decisions and for picking user guidance.
    """
    CONFIGURATION = "CONFIGURATION"
    TRANSPORT = "TRANSPORT"
    TIMEOUT = "TIMEOUT"
    HTTP = "HTTP"
    CANCELLED = "CANCELLED"


def is_retryable_status(status: int) -> bool:
    """429 and every 5xx are transient; the other non-2xx statuses are final."""
    return status == 429 or status >= 500


class IcePanelError(Exception):
    """Base for every error raised by the client.

    Attributes are set once in ``__init__`` and never reassigned; each failed
    attempt builds a new instance.
    """

    kind: ClassVar[ErrorKind]

    def __init__(self, message: str, *, status: int | None = None, body: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.body = body

    @property
    def retryable(self) -> bool:
        return False

    def __repr__(self) -> str:
        status = f", status={self.status}" if self.status is not None else ""
        return f"{type(self).__name__}({self.message!r}{status})"


class ConfigurationError(IcePanelError):
    """Invalid base URL, missing credential or organization. Never retried."""

    kind = ErrorKind.CONFIGURATION


class TransportError(IcePanelError):
    """No HTTP response: connection failure, DNS failure or per-attempt timeout."""

    def __init__(self, message: str, *, timed_out: bool = False) -> None:
        super().__init__(message)
        self.timed_out = timed_out

    @property
    def kind(self) -> ErrorKind:  # type: ignore[override]
        return ErrorKind.TIMEOUT if self.timed_out else ErrorKind.TRANSPORT

    @property
    def retryable(self) -> bool:
        return True


class RequestCancelled(IcePanelError):
    """The caller's cancellation signal fired. Never retried."""

    kind = ErrorKind.CANCELLED

    def __init__(self, message: str = "Request cancelled by caller") -> None:
        super().__init__(message)


class IcePanelApiError(IcePanelError):
    """The API answered with a non-2xx status.

    ``body`` is the parsed JSON error document when the response was JSON,
    otherwise the raw text (``None`` when empty).
    """

    kind = ErrorKind.HTTP

    def __init__(self, status: int, status_text: str, body: Any = None) -> None:
        super().__init__(f"IcePanel API error: {status} {status_text}".rstrip(), status=status, body=body)
        self.status_text = status_text

    @property
    def retryable(self) -> bool:
        return is_retryable_status(self.status)  # type: ignore[arg-type]


HttpError = IcePanelApiError
