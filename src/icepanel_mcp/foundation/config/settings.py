"""Environment-based configuration using pydantic-settings.

Resolved once at process start and treated as read-only afterwards. The
client receives a settings instance explicitly, so tests can build any
configuration without touching the process environment.

Example:
    >>> from icepanel_mcp.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.api_timeout_ms
    30000

    # Or with environment variables:
    # API_KEY=...
    # ICEPANEL_API_TIMEOUT_MS=10000
    # ICEPANEL_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Literal
from urllib.parse import urlsplit

from pydantic import AliasChoices, Field, SecretStr, ValidationInfo, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from icepanel_mcp.foundation.errors import ConfigurationError

DEFAULT_API_BASE_URL = "https://api.icepanel.io/v1"

DEFAULT_API_TIMEOUT_MS = 30_000
DEFAULT_API_MAX_RETRIES = 2
DEFAULT_API_RETRY_BASE_DELAY_MS = 300
MAX_API_RETRIES = 5
MAX_API_RETRY_BASE_DELAY_MS = 5_000

# field -> (default, min, max)
_INT_BOUNDS: dict[str, tuple[int, int, int]] = {
    "api_timeout_ms": (DEFAULT_API_TIMEOUT_MS, 1_000, 120_000),
    "api_max_retries": (DEFAULT_API_MAX_RETRIES, 0, MAX_API_RETRIES),
    "api_retry_base_delay_ms": (DEFAULT_API_RETRY_BASE_DELAY_MS, 50, MAX_API_RETRY_BASE_DELAY_MS),
}

_TRUTHY = frozenset({"1", "true", "yes"})
_LEADING_INT = re.compile(r"[+-]?\d+")


def bounded_int(raw: object, fallback: int, lo: int, hi: int) -> int:
    """Parse an integer tunable.

    The leading integer is used (``"1500ms"`` is 1500, ``"1.5"`` is 1); input
    without one gives the fallback. The result is clamped to ``[lo, hi]``.
    """
    if raw is None or isinstance(raw, bool):
        return fallback
    if isinstance(raw, int):
        value = raw
    else:
        text = str(raw).strip()
        if not text:
            return fallback
        match = _LEADING_INT.match(text)
        if match is None:
            return fallback
        value = int(match.group())
    return min(max(value, lo), hi)


def is_truthy(raw: object) -> bool:
    if isinstance(raw, bool):
        return raw
    return raw is not None and str(raw).strip().lower() in _TRUTHY


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="ICEPANEL_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "text"] = "text"

    @field_validator("level", "format", mode="before")
    @classmethod
    def _normalize_case(cls, v: object, info: ValidationInfo) -> object:
        if not isinstance(v, str):
            return v
        return v.strip().upper() if info.field_name == "level" else v.strip().lower()


class IcePanelSettings(BaseSettings):
    """Root settings for the IcePanel client.

    Numeric tunables never fail startup: non-numeric values fall back to the
    default and out-of-range values are clamped to the allowed range.

    Example environment variables:
        API_KEY=xxxxx
        ORGANIZATION_ID=abcdefghij0123456789
        ICEPANEL_API_BASE_URL=https://api.icepanel.io/v1
        ICEPANEL_API_ALLOW_INSECURE=false
        ICEPANEL_API_TIMEOUT_MS=30000
        ICEPANEL_API_MAX_RETRIES=2
        ICEPANEL_API_RETRY_BASE_DELAY_MS=300
    """

    model_config = SettingsConfigDict(
        env_prefix="ICEPANEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
        validate_default=True,
    )

    api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("API_KEY", "ICEPANEL_API_KEY", "api_key"),
        description="IcePanel API key, sent as 'Authorization: ApiKey <key>'",
    )
    organization_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("ORGANIZATION_ID", "ICEPANEL_ORGANIZATION_ID", "organization_id"),
    )
    api_base_url: str = DEFAULT_API_BASE_URL
    api_allow_insecure: bool = Field(default=False, description="Permit an http:// base URL")
    api_timeout_ms: int = DEFAULT_API_TIMEOUT_MS
    api_max_retries: int = DEFAULT_API_MAX_RETRIES
    api_retry_base_delay_ms: int = DEFAULT_API_RETRY_BASE_DELAY_MS

    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @field_validator("api_timeout_ms", "api_max_retries", "api_retry_base_delay_ms", mode="before")
    @classmethod
    def _bound_tunables(cls, v: object, info: ValidationInfo) -> int:
        default, lo, hi = _INT_BOUNDS[info.field_name]
        return bounded_int(v, default, lo, hi)

    @field_validator("api_allow_insecure", mode="before")
    @classmethod
    def _parse_flag(cls, v: object) -> bool:
        return is_truthy(v)

    @field_validator("api_base_url", mode="before")
    @classmethod
    def _default_blank_url(cls, v: object) -> object:
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_API_BASE_URL
        return v.strip() if isinstance(v, str) else v

    @field_validator("api_key", "organization_id", mode="before")
    @classmethod
    def _blank_is_missing(cls, v: object) -> object:
        return None if isinstance(v, str) and not v.strip() else v

    @computed_field
    @property
    def timeout_seconds(self) -> float:
        return self.api_timeout_ms / 1000

    def resolved_base_url(self) -> str:
        """Validated base URL without its trailing slash.

        Raises:
            ConfigurationError: malformed URL, non-http(s) scheme, or plain
                http without ``ICEPANEL_API_ALLOW_INSECURE``.
        """
        raw = self.api_base_url
        try:
            parsed = urlsplit(raw)
        except ValueError as e:
            raise ConfigurationError("ICEPANEL_API_BASE_URL must be a valid URL") from e
        if not parsed.scheme or not parsed.netloc:
            raise ConfigurationError("ICEPANEL_API_BASE_URL must be a valid URL")

        scheme = parsed.scheme.lower()
        if scheme == "http" and not self.api_allow_insecure:
            raise ConfigurationError(
                "ICEPANEL_API_BASE_URL must use https unless ICEPANEL_API_ALLOW_INSECURE is true"
            )
        if scheme not in ("http", "https"):
            raise ConfigurationError("ICEPANEL_API_BASE_URL must use http or https")

        return raw[:-1] if raw.endswith("/") else raw

    def require_api_key(self) -> str:
        if self.api_key is None:
            raise ConfigurationError("API_KEY environment variable is not set")
        return self.api_key.get_secret_value()

    def require_organization_id(self) -> str:
        if not self.organization_id:
            raise ConfigurationError("ORGANIZATION_ID environment variable is not set")
        return self.organization_id


@lru_cache(maxsize=1)
def get_settings() -> IcePanelSettings:
    """Get the process-wide settings instance (cached)."""
    return IcePanelSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).

    The next get_settings() call reloads configuration from the environment.
    """
    get_settings.cache_clear()
