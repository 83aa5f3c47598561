"""Async retry with capped exponential backoff."""

from __future__ import annotations

from order_service.utils.retry.decorator import retry
from order_service.utils.retry.exceptions import RetryError
from order_service.utils.retry.strategies import RetryStrategy

__all__ = ["RetryError", "RetryStrategy", "retry"]
