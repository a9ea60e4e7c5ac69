"""
Configuration and settings for the time capsule backend.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_prefix: str = Field(default="/api")

    # Object storage (S3) and label detection (Rekognition)
    aws_region: Optional[str] = Field(default=None)
    aws_s3_bucket: Optional[str] = Field(default=None)
    aws_access_key_id: Optional[str] = Field(default=None)
    aws_secret_access_key: Optional[str] = Field(default=None)

    # Result cache (Redis)
    redis_url: Optional[str] = Field(default=None)

    # Capsule store (any SQLAlchemy URL)
    database_url: Optional[str] = Field(default=None)

    # Token signing secret shared with the auth service
    jwt_secret: Optional[str] = Field(default=None)

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5000)
    log_level: str = Field(default="INFO")

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False, validation_alias="TIMECAPSULE_USE_IN_MEMORY_BACKENDS"
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
