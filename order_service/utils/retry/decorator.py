from __future__ import annotations

import asyncio
import logging
import time
from functools import wraps
from typing import TYPE_CHECKING, ParamSpec, TypeVar

from order_service.infra.metrics.tracking import (
    track_retry_attempt,
    track_retry_exhausted,
    track_retry_success,
)

from .exceptions import RetryError
from .strategies import RetryStrategy

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


def retry(
    max_attempts: int = 3,
    initial_delay: float = 1.0,
    max_delay: float = 60.0,
    jitter: bool = True,
    exceptions: tuple[type[Exception], ...] = (Exception,),
    retry_if: Callable[[Exception], bool] | None = None,
    stop_after_delay: float | None = None,
    on_retry: Callable[[Exception, int], Awaitable[None] | None] | None = None,
    operation: str | None = None,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Retry an async callable, doubling the delay after each failure.

    Args:
        max_attempts: Total attempts, including the first call.
        initial_delay: Delay before the first retry, in seconds.
        max_delay: Upper bound for any single delay.
        jitter: Scale each delay by a random factor between 0.5 and 1.5.
        exceptions: Exception types eligible for retry.
        retry_if: Extra predicate an eligible exception must satisfy.
        stop_after_delay: Give up once this many seconds have elapsed.
        on_retry: Called (and awaited if it returns an awaitable) with the
            exception and failed attempt number before sleeping.
        operation: Name used in logs and metrics. Defaults to the function name.

    Raises:
        RetryError: All attempts failed with retryable errors.
        Exception: The first non-retryable error, unchanged.
    """
    strategy = RetryStrategy(
        max_attempts=max_attempts,
        initial_delay=initial_delay,
        max_delay=max_delay,
        jitter=jitter,
        exceptions=exceptions,
        retry_if=retry_if,
    )

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        name = operation or func.__name__

        @wraps(func)
        async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            started = time.monotonic()
            attempt = 0
            while True:
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    if not strategy.should_retry(e):
                        raise
                    attempt += 1

                    elapsed = time.monotonic() - started
                    out_of_time = stop_after_delay is not None and elapsed >= stop_after_delay
                    if out_of_time or attempt >= max_attempts:
                        track_retry_exhausted(name)
                        logger.error(
                            f"All retry attempts exhausted for {name}",
                            extra={
                                "operation": name,
                                "attempts": attempt,
                                "last_exception": str(e),
                                "elapsed": round(elapsed, 3),
                            },
                        )
                        raise RetryError(e, attempt) from e

                    delay = strategy.calculate_delay(attempt - 1)
                    track_retry_attempt(name, attempt)
                    logger.warning(
                        f"Retrying {name} after {delay:.2f}s (attempt {attempt}/{max_attempts})",
                        extra={
                            "operation": name,
                            "attempt": attempt,
                            "max_attempts": max_attempts,
                            "delay": delay,
                            "exception": str(e),
                        },
                    )

                    if on_retry is not None:
                        outcome = on_retry(e, attempt)
                        if asyncio.iscoroutine(outcome):
                            await outcome

                    await asyncio.sleep(delay)
                else:
                    if attempt:
                        track_retry_success(name, attempt + 1)
                    return result

        return async_wrapper

    return decorator
