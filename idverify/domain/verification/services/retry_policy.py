"""
Domain Service: Retry Policy

Bounded exponential backoff for transient vendor failures.
"""

from dataclasses import dataclass
from typing import Any, Dict

from ..errors import is_retryable


@dataclass(frozen=True)
class RetryPolicy:
    """
    Retry schedule for provider calls.

    Attributes:
        max_retries: Extra attempts after the first call (0 disables retries)
        base_delay: Delay before the first retry (seconds)
        multiplier: Growth factor between consecutive retries
        max_delay: Upper bound on any single delay (seconds)
    """

    max_retries: int = 2
    base_delay: float = 0.5
    multiplier: float = 2.0
    max_delay: float = 8.0

    def __post_init__(self):
        if self.max_retries < 0:
            raise ValueError(f"max_retries cannot be negative, got {self.max_retries}")
        if self.base_delay < 0 or self.max_delay < 0:
            raise ValueError("Retry delays cannot be negative")
        if self.multiplier < 1.0:
            raise ValueError(f"multiplier must be >= 1.0, got {self.multiplier}")

    @classmethod
    def from_config(cls, retry_config: Dict[str, Any]) -> "RetryPolicy":
        return cls(
            max_retries=int(retry_config.get("max_retries", cls.max_retries)),
            base_delay=float(retry_config.get("base_delay", cls.base_delay)),
            multiplier=float(retry_config.get("multiplier", cls.multiplier)),
            max_delay=float(retry_config.get("max_delay", cls.max_delay)),
        )

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def delay_for(self, retry_number: int) -> float:
        """Delay before retry number `retry_number` (1-based): 0.5s, 1s, 2s, ..."""
        delay = self.base_delay * (self.multiplier ** (retry_number - 1))
        return min(self.max_delay, delay)

    def should_retry(self, error: BaseException, attempt: int) -> bool:
        """Whether a failure on 1-based `attempt` warrants another call."""
        return attempt < self.max_attempts and is_retryable(error)
