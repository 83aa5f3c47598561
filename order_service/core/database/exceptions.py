"""Errors raised by repositories."""

from __future__ import annotations

from typing import Any


class NotFoundError(LookupError):
    """No row matched a lookup.

    The HTTP layer turns this into a 404 problem whose ``resource`` member
    is ``model_name``.
    """

    def __init__(self, model_name: str, identifier: dict[str, Any]) -> None:
        self.model_name = model_name
        self.identifier = identifier
        keys = " ".join(f"{key}={value!r}" for key, value in identifier.items())
        super().__init__(f"{model_name} not found ({keys})")


__all__ = ["NotFoundError"]
