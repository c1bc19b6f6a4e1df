"""Runtime: retry policy, backoff and logging."""

from .observability import configure_logging, get_logger
from .retry import IDEMPOTENT_METHODS, Backoff, ExponentialBackoff, RetryPolicy

__all__ = [
    "Backoff",
    "ExponentialBackoff",
    "IDEMPOTENT_METHODS",
    "RetryPolicy",
    "configure_logging",
    "get_logger",
]
