"""Relay configuration management using Pydantic settings."""

from __future__ import annotations

from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MAX_UPLOAD_BYTES = 10 * 1024 * 1024


class Settings(BaseSettings):
    """Immutable configuration built once at process start.

    Environment variables use the upper-case field names. List fields are read
    as JSON arrays, e.g. ``CAPTION_KEYS='["Title (caption)"]'``.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    environment: str = "production"
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

    # Cloudinary (required)
    cloudinary_cloud_name: str
    cloudinary_api_key: str
    cloudinary_api_secret: str

    # Upload path
    auth_token: Optional[str] = None
    upload_folder: str = "figma-exports"
    upload_group_subfolders: bool = False
    upload_tags: List[str] = ["figma", "metadata-export"]
    upload_max_bytes: int = MAX_UPLOAD_BYTES

    # Metadata mapping
    caption_keys: List[str] = ["context.custom.title", "Title (caption)"]
    alt_keys: List[str] = ["context.custom.alt", "Description (alt)"]
    grouping_keys: List[str] = ["MPVID", "baseName"]
    context_denylist: List[str] = ["timestamp", "baseName"]

    # Completion provider
    anthropic_base_url: str = "https://api.anthropic.com"
    anthropic_model: str = "claude-3-5-sonnet-20241022"
    anthropic_max_tokens: int = 1024
    anthropic_version: str = "2023-06-01"

    upstream_timeout_seconds: float = 60.0

    @field_validator("cloudinary_cloud_name", "cloudinary_api_key", "cloudinary_api_secret")
    @classmethod
    def _require_value(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be empty")
        return value.strip()

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"


def load_settings(**overrides) -> Settings:
    """Build settings from the environment, raising ``ValidationError`` when incomplete."""

    return Settings(**overrides)  # type: ignore[arg-type]


__all__ = ["MAX_UPLOAD_BYTES", "Settings", "load_settings"]
