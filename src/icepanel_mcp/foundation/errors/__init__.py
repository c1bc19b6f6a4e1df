"""Error taxonomy and user guidance for IcePanel API failures."""

from .errors import (
    ConfigurationError,
    ErrorKind,
    HttpError,
    IcePanelApiError,
    IcePanelError,
    RequestCancelled,
    TransportError,
    is_retryable_status,
)
from .guidance import ErrorReport, handle_api_error

__all__ = [
    "ConfigurationError",
    "ErrorKind",
    "ErrorReport",
    "HttpError",
    "IcePanelApiError",
    "IcePanelError",
    "RequestCancelled",
    "TransportError",
    "handle_api_error",
    "is_retryable_status",
]
