"""Logging settings (``LOG_`` environment prefix)."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """Handlers and format for the process-wide logging setup.

    ``LOG_JSON_LOGS=false`` switches to plain text for local runs;
    ``LOG_FILE_ENABLED=true`` adds a rotating JSONL file next to stderr.
    """

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    service_name: str = "order-service"
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    json_logs: bool = True
    console_enabled: bool = True
    include_context: bool = Field(
        default=True, description="Add request_id and path from the request context"
    )
    capture_warnings: bool = True
    include_uvicorn: bool = True

    file_enabled: bool = False
    file_path: Path = Path("logs/order-service.log.jsonl")
    file_max_bytes: int = Field(default=10 * 1024 * 1024, ge=1024)
    file_backup_count: int = Field(default=5, ge=0, le=100)

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    def to_logging_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``configure_logging``."""
        return {
            "service_name": self.service_name,
            "log_level": self.level,
            "json_logs": self.json_logs,
            "file_path": str(self.file_path) if self.file_enabled else None,
            "file_max_bytes": self.file_max_bytes,
            "file_backup_count": self.file_backup_count,
            "console_enabled": self.console_enabled,
            "include_context": self.include_context,
            "capture_warnings": self.capture_warnings,
            "include_uvicorn": self.include_uvicorn,
        }
