"""Retry policy for the request executor.

Fixed-delay retries on transport failures and on an allowlist of HTTP
statuses. The delay does not grow between attempts.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional

DEFAULT_RETRIES = 2
DEFAULT_RETRY_DELAY = 0.4
DEFAULT_RETRY_ON = frozenset({429, 500, 502, 503, 504})


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded fixed-delay retry policy.

    Attributes:
        retries: Number of retries after the first attempt.
        retry_delay: Seconds to wait before every retried attempt.
        retry_on: HTTP statuses eligible for retry.
    """
    retries: int = DEFAULT_RETRIES
    retry_delay: float = DEFAULT_RETRY_DELAY
    retry_on: frozenset[int] = field(default_factory=lambda: DEFAULT_RETRY_ON)

    def __post_init__(self):
        if self.retries < 0:
            raise ValueError(f"retries must be >= 0, got {self.retries}")
        if self.retry_delay < 0:
            raise ValueError(f"retry_delay must be >= 0, got {self.retry_delay}")
        object.__setattr__(self, "retry_on", frozenset(self.retry_on))

    @property
    def max_attempts(self) -> int:
        return self.retries + 1

    def should_retry(self, status: int, attempt: int) -> bool:
        """Decide whether a failed attempt is retried.

        Args:
            status: HTTP status of the failure, 0 for transport failures.
            attempt: Retries already performed (0 after the first attempt).

        Returns:
            True if another attempt should be made.
        """
        if attempt >= self.retries:
            return False
        if status == 0:
            return True
        return status in self.retry_on

    def replace(
        self,
        retries: int,
        retry_delay: Optional[float] = None,
        retry_on: Optional[Iterable[int]] = None,
    ) -> "RetryPolicy":
        """Return a copy with new retries, keeping unset fields."""
        return RetryPolicy(
            retries=retries,
            retry_delay=self.retry_delay if retry_delay is None else retry_delay,
            retry_on=self.retry_on if retry_on is None else frozenset(retry_on),
        )


def default_retry_policy() -> RetryPolicy:
    """Create default retry policy.

    2 retries, 0.4s delay, retry on 429/500/502/503/504.
    """
    return RetryPolicy()


def no_retry_policy() -> RetryPolicy:
    """Create a no-retry policy (fail immediately)."""
    return RetryPolicy(retries=0)
