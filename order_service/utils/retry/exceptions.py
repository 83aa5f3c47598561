from __future__ import annotations


class RetryError(Exception):
    """Every attempt failed with a retryable error.

    ``last_exception`` is also chained as ``__cause__``; the exception
    handlers report it as an internal error without its message.
    """

    def __init__(self, last_exception: Exception, attempts: int) -> None:
        self.last_exception = last_exception
        self.attempts = attempts
        super().__init__(f"Gave up after {attempts} attempts: {type(last_exception).__name__}")
