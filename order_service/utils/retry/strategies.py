"""Backoff policy shared by the query and startup retries."""

from __future__ import annotations

import random
from collections.abc import Callable
from dataclasses import dataclass

JITTER_RANGE = (0.5, 1.5)


@dataclass(frozen=True, slots=True)
class RetryStrategy:
    """Doubling backoff capped at ``max_delay``, with optional jitter."""

    max_attempts: int = 3
    initial_delay: float = 1.0
    max_delay: float = 60.0
    jitter: bool = True
    exceptions: tuple[type[Exception], ...] = (Exception,)
    retry_if: Callable[[Exception], bool] | None = None

    def should_retry(self, exception: Exception) -> bool:
        if not isinstance(exception, self.exceptions):
            return False
        return self.retry_if is None or self.retry_if(exception)

    def calculate_delay(self, attempt: int) -> float:
        """Sleep before retry ``attempt + 1``; ``attempt`` counts from 0."""
        delay = self.initial_delay * 2**attempt
        if self.jitter:
            delay *= random.uniform(*JITTER_RANGE)
        return min(delay, self.max_delay)
