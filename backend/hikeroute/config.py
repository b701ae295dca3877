"""
Application Configuration

Uses Pydantic Settings for type-safe configuration.
"""

from pathlib import Path
from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator, ConfigDict

# Project root: hikeroute repo/
PROJECT_ROOT = Path(__file__).parent.parent.parent


class Settings(BaseSettings):
    """Application settings with validation."""

    # === Core ===
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # === Database ===
    database_url: str = Field(
        default="sqlite:///./hikeroute.db",
        description="Database connection URL"
    )

    # === CORS ===
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:3000"],
        description="Allowed CORS origins"
    )

    # === Elevation API ===
    elevation_api_url: str = Field(
        default="https://api.open-elevation.com/api/v1/lookup",
        description="Elevation API endpoint"
    )
    elevation_batch_size: int = Field(
        default=100,
        ge=1,
        description="Max locations per elevation lookup request"
    )
    elevation_timeout_seconds: float = Field(default=30.0)
    elevation_partial_merge: bool = Field(
        default=False,
        description="Merge successful batches even if some batches failed"
    )

    # === Upload Limits ===
    upload_rate_limit: int = Field(default=10, ge=1)
    upload_rate_window_minutes: int = Field(default=60, ge=1)
    max_upload_bytes: int = Field(default=20 * 1024 * 1024)  # 20MB

    # === Storage ===
    storage_directory: str = Field(
        default="./storage",
        description="Root directory of the local object store"
    )

    # === Route Simplification ===
    simplify_tolerance: float = Field(
        default=0.0001,
        gt=0,
        description="Douglas-Peucker tolerance in degrees"
    )

    @field_validator('database_url')
    @classmethod
    def fix_postgres_url(cls, v: str) -> str:
        """Fix Render/Railway postgres:// URL to postgresql://"""
        if v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql://", 1)
        return v

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',')]
        return v

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
settings = Settings()
