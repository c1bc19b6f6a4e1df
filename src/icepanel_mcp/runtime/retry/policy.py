"""Retry policy for IcePanel API requests.

Only idempotent methods are retried: the API gives no idempotency guarantee
for writes, so POST/PATCH/DELETE run at most once. Whether a failure is
transient is decided by the error itself (``IcePanelError.retryable``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_serializer, field_validator

from icepanel_mcp.foundation.config.settings import MAX_API_RETRIES, MAX_API_RETRY_BASE_DELAY_MS
from icepanel_mcp.foundation.errors import IcePanelError

from .backoff import Backoff, ExponentialBackoff

if TYPE_CHECKING:
    from icepanel_mcp.foundation.config import IcePanelSettings

IDEMPOTENT_METHODS: frozenset[str] = frozenset({"GET", "HEAD"})


class RetryPolicy(BaseModel):
    """Bounded, method-aware retry policy.

    Attributes:
        max_retries: Retries after the first attempt (0 = single attempt)
        backoff: Delay schedule between attempts
        retry_methods: HTTP methods eligible for retry

    Example:
        >>> policy = RetryPolicy(max_retries=3, backoff=ExponentialBackoff(base=0.1, max_delay=5.0))
        >>> policy.get_delay(2)
        0.4
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,  # For Backoff protocol
        validate_default=True,
        extra="forbid",
        revalidate_instances="never",
    )

    max_retries: Annotated[int, Field(ge=0, le=MAX_API_RETRIES)] = 2
    backoff: Backoff = Field(default_factory=ExponentialBackoff, repr=False)
    retry_methods: frozenset[str] = IDEMPOTENT_METHODS

    @field_validator("retry_methods", mode="before")
    @classmethod
    def _normalize_methods(cls, v: frozenset[str] | set[str] | list[str] | tuple[str, ...]) -> frozenset[str]:
        return frozenset(m.upper() for m in v) if v else frozenset()

    @field_serializer("retry_methods")
    def _serialize_methods(self, v: frozenset[str]) -> list[str]:
        return sorted(v)

    @computed_field
    @property
    def is_disabled(self) -> bool:
        """Whether retries are effectively disabled."""
        return self.max_retries == 0 or not self.retry_methods

    @classmethod
    def from_settings(cls, settings: IcePanelSettings) -> RetryPolicy:
        """Build the process policy from resolved settings (milliseconds -> seconds)."""
        return cls(
            max_retries=settings.api_max_retries,
            backoff=ExponentialBackoff(
                base=settings.api_retry_base_delay_ms / 1000,
                max_delay=MAX_API_RETRY_BASE_DELAY_MS / 1000,
            ),
        )

    def allows(self, method: str) -> bool:
        return method.upper() in self.retry_methods

    def should_retry(self, error: BaseException, method: str, attempt: int) -> bool:
        """Decide whether a failed attempt gets another try.

        Args:
            error: Failure from the attempt
            method: HTTP method of the request
            attempt: 0-indexed number of the attempt that just failed
        """
        if attempt >= self.max_retries or not self.allows(method):
            return False
        return isinstance(error, IcePanelError) and error.retryable

    def get_delay(self, attempt: int) -> float:
        """Get delay before next retry attempt."""
        return self.backoff.delay(attempt)

    def __hash__(self) -> int:
        return hash((self.max_retries, tuple(sorted(self.retry_methods))))
