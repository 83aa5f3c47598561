"""Service-layer building blocks."""

from order_service.core.services.base import BaseService

__all__ = ["BaseService"]
