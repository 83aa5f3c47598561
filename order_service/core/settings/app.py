"""HTTP application settings (``APP_`` environment prefix)."""

from __future__ import annotations

from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """FastAPI metadata, route prefix and uvicorn bind options."""

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    service_name: str = Field(default="order-service", pattern=r"^[a-z0-9]+(-[a-z0-9]+)*$")
    title: str = "Order Service API"
    description: str = "Orders, items and their catalog relations with keyset pagination"
    version: str = "1.0.0"
    environment: Literal["development", "staging", "production", "test"] = "development"
    api_prefix: str = Field(default="/api/v1", pattern=r"^/.*$")
    debug: bool = False

    # Interactive docs are served unless APP_DISABLE_DOCS is set
    disable_docs: bool = False
    docs_url: str = "/docs"
    redoc_url: str = "/redoc"
    openapi_url: str = "/openapi.json"

    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)
    reload: bool = False

    @model_validator(mode="after")
    def _no_debug_in_production(self) -> AppSettings:
        if self.environment == "production" and self.debug:
            msg = "Debug mode cannot be enabled in production environment"
            raise ValueError(msg)
        return self

    def get_docs_url(self) -> str | None:
        return None if self.disable_docs else self.docs_url

    def get_redoc_url(self) -> str | None:
        return None if self.disable_docs else self.redoc_url

    def get_openapi_url(self) -> str | None:
        return None if self.disable_docs else self.openapi_url
