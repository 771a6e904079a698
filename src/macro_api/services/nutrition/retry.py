"""Retry policy for upstream calls: fixed attempt budget, doubling delay."""

from collections.abc import Iterator
from dataclasses import dataclass

TOO_MANY_REQUESTS = 429


def is_retryable_status(status_code: int) -> bool:
    """429 and every 5xx are transient; any other non-2xx is terminal."""
    return status_code == TOO_MANY_REQUESTS or status_code >= 500


@dataclass(frozen=True)
class RetryPolicy:
    """
    Attempt budget and exponential backoff schedule.

    Attributes:
        max_attempts: Total number of calls allowed, including the first
        initial_delay_ms: Wait after the first failed attempt
        multiplier: Factor applied to the delay after each further failure
    """

    max_attempts: int
    initial_delay_ms: int = 1000
    multiplier: float = 2.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.initial_delay_ms < 0:
            raise ValueError("initial_delay_ms must not be negative")

    def delays(self) -> Iterator[float]:
        """
        Yield the wait (in seconds) before each retry.

        There is one fewer delay than attempts: nothing is awaited after the
        final failure.
        """
        delay_ms = float(self.initial_delay_ms)
        for _ in range(self.max_attempts - 1):
            yield delay_ms / 1000
            delay_ms *= self.multiplier
