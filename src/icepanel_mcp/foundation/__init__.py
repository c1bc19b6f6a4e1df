"""Foundation: configuration and error taxonomy shared by the client layers."""

from .errors import (
    ConfigurationError,
    ErrorKind,
    ErrorReport,
    HttpError,
    IcePanelApiError,
    IcePanelError,
    RequestCancelled,
    TransportError,
    handle_api_error,
)
from .config import IcePanelSettings, LoggingSettings, clear_settings_cache, get_settings

__all__ = [
    "ConfigurationError",
    "ErrorKind",
    "ErrorReport",
    "HttpError",
    "IcePanelApiError",
    "IcePanelError",
    "IcePanelSettings",
    "LoggingSettings",
    "RequestCancelled",
    "TransportError",
    "clear_settings_cache",
    "get_settings",
    "handle_api_error",
]
