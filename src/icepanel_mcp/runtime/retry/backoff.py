"""Backoff strategies for retry policies.

Attempt numbers are 0-indexed (first retry = attempt 0). Delays are in
seconds.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class Backoff(Protocol):
    """Protocol for backoff delay calculation."""

    def delay(self, attempt: int) -> float:
        """Calculate delay in seconds for given attempt number.

        Args:
            attempt: 0-indexed retry attempt number

        Returns:
            Delay in seconds before next retry
        """
        ...


@dataclass(frozen=True, slots=True)
class ExponentialBackoff:
    """Capped exponential backoff without jitter.

    Delay = min(base * (multiplier ^ attempt), max_delay)

    Deterministic, so the schedule for a given configuration is always the
    same: 0.3s, 0.6s, 1.2s, ... up to max_delay with the defaults.

    Attributes:
        base: Initial delay in seconds (default: 0.3)
        max_delay: Maximum delay cap in seconds (default: 5.0)
        multiplier: Exponential growth factor (default: 2.0)
    """

    base: float = 0.3
    max_delay: float = 5.0
    multiplier: float = 2.0

    def delay(self, attempt: int) -> float:
        return min(self.base * (self.multiplier ** attempt), self.max_delay)
