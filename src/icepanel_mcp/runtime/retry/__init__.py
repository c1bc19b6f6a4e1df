"""Retry policy and backoff for idempotent IcePanel requests.

Example:
    >>> from icepanel_mcp.runtime.retry import RetryPolicy, ExponentialBackoff
    >>> policy = RetryPolicy(max_retries=3, backoff=ExponentialBackoff(base=0.3, max_delay=5.0))
    >>> [policy.get_delay(n) for n in range(3)]
    [0.3, 0.6, 1.2]
"""

from .backoff import Backoff, ExponentialBackoff
from .policy import IDEMPOTENT_METHODS, RetryPolicy

__all__ = [
    "Backoff",
    "ExponentialBackoff",
    "IDEMPOTENT_METHODS",
    "RetryPolicy",
]
