"""icepanel_mcp - resilient async client for the IcePanel REST API.

Built to back an MCP tool layer: every call goes through one request
pipeline with per-attempt timeouts, retries for idempotent requests, caller
cancellation and a classified error taxonomy the tool layer turns into user
guidance.

Quick Start:
    >>> from icepanel_mcp import (
    ...     IcePanelApi, IcePanelClient, IcePanelError, ModelObjectFilter, handle_api_error,
    ... )
    >>>
    >>> async with IcePanelClient() as client:          # settings from the environment
    ...     api = IcePanelApi(client)
    ...     try:
    ...         objects = await api.get_model_objects(
    ...             "abcdefghij0123456789",
    ...             filter=ModelObjectFilter(type=["app", "store"]),
    ...         )
    ...     except IcePanelError as e:
    ...         print(handle_api_error(e))

Configuration (environment or .env):
    API_KEY, ORGANIZATION_ID, ICEPANEL_API_BASE_URL, ICEPANEL_API_ALLOW_INSECURE,
    ICEPANEL_API_TIMEOUT_MS, ICEPANEL_API_MAX_RETRIES, ICEPANEL_API_RETRY_BASE_DELAY_MS,
    ICEPANEL_LOG_LEVEL, ICEPANEL_LOG_FORMAT
"""

from __future__ import annotations

__version__ = "0.1.0"

# Foundation
from .foundation import (
    ConfigurationError,
    ErrorKind,
    ErrorReport,
    HttpError,
    IcePanelApiError,
    IcePanelError,
    IcePanelSettings,
    LoggingSettings,
    RequestCancelled,
    TransportError,
    clear_settings_cache,
    get_settings,
    handle_api_error,
)

# Runtime
from .runtime import ExponentialBackoff, RetryPolicy, configure_logging, get_logger

# Client
from .client import (
    ConnectionCreate,
    ConnectionFilter,
    ConnectionUpdate,
    DomainCreate,
    DomainUpdate,
    IcePanelApi,
    IcePanelClient,
    ModelObjectCreate,
    ModelObjectFilter,
    ModelObjectUpdate,
    RequestDescriptor,
    TagCreate,
    TagUpdate,
    TechnologyFilter,
    build_filter_params,
)

__all__ = [
    "__version__",
    # Foundation
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
    # Runtime
    "ExponentialBackoff",
    "RetryPolicy",
    "configure_logging",
    "get_logger",
    # Client
    "ConnectionCreate",
    "ConnectionFilter",
    "ConnectionUpdate",
    "DomainCreate",
    "DomainUpdate",
    "IcePanelApi",
    "IcePanelClient",
    "ModelObjectCreate",
    "ModelObjectFilter",
    "ModelObjectUpdate",
    "RequestDescriptor",
    "TagCreate",
    "TagUpdate",
    "TechnologyFilter",
    "build_filter_params",
]
