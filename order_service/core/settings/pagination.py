"""Pagination settings for list endpoints.

Environment variables use PAGINATION_ prefix.
Example: PAGINATION_DEFAULT_LIMIT=25
"""

from __future__ import annotations

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

HARD_MAX_LIMIT = 100


class PaginationSettings(BaseSettings):
    """Pagination configuration settings.

    Attributes:
        default_limit: Page size used when the client sends no ``limit``.
        max_limit: Upper bound requested limits are clamped to. Never above 100.
    """

    default_limit: int = Field(
        default=10,
        ge=1,
        le=HARD_MAX_LIMIT,
        description="Default page size when limit not specified",
    )
    max_limit: int = Field(
        default=HARD_MAX_LIMIT,
        ge=1,
        le=HARD_MAX_LIMIT,
        description="Maximum allowed page size (requests above it are clamped)",
    )

    model_config = SettingsConfigDict(
        env_prefix="PAGINATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    @model_validator(mode="after")
    def validate_default_within_max(self) -> PaginationSettings:
        """Ensure the default page size does not exceed the maximum."""
        if self.default_limit > self.max_limit:
            msg = "default_limit cannot be greater than max_limit"
            raise ValueError(msg)
        return self
