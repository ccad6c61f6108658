"""People Center settings, read from the environment or a ``.env`` file.

List-valued options (CORS origins, proxy headers) are plain comma-separated
strings in the environment and exposed as lists through properties.
"""

import re

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_SCHEMA_PATTERN = re.compile(r"^[a-z_][a-z0-9_]{0,62}$")


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Runtime configuration for the API, the CLI and Alembic."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = Field(
        description="Async SQLAlchemy connection string (postgresql+asyncpg:// or sqlite+aiosqlite://)",
    )
    database_schema: str | None = Field(
        default=None,
        description="PostgreSQL schema for isolated environments (e.g., pr_42)",
    )

    @field_validator("database_schema")
    @classmethod
    def validate_database_schema(cls, v: str | None) -> str | None:
        if v is None:
            return None
        if not _SCHEMA_PATTERN.match(v):
            msg = f"Invalid database_schema: must match {_SCHEMA_PATTERN.pattern}"
            raise ValueError(msg)
        return v

    # JWT
    jwt_secret_key: str = Field(min_length=32, description="Secret key for signing JWTs (minimum 32 characters)")
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    jwt_access_token_expire_minutes: int = Field(
        default=60 * 24,
        description="Access token expiration in minutes",
        gt=0,
    )

    # Password hashing
    bcrypt_rounds: int = Field(
        default=12,
        description="bcrypt cost factor; every +1 doubles hashing time",
        ge=4,
        le=31,
    )

    # Governance
    consensus_threshold: int = Field(
        default=70,
        description="Consensus rate (percent) at which a decision is approved",
        ge=1,
        le=100,
    )

    # Uploads
    upload_dir: str = Field(
        default="./uploads",
        description="Directory for uploaded issue images",
    )
    max_upload_size_mb: int = Field(
        default=5,
        description="Maximum size for uploaded images in megabytes",
        gt=0,
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_dir: str | None = Field(
        default=None,
        description="Directory for log files (enables file logging with 24h rotation when set)",
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:5173",
        description="Comma-separated list of allowed CORS origins",
    )
    cors_origin_regex: str = Field(
        default="",
        description="Regex pattern for allowed CORS origins",
    )

    # Environment
    environment: str = Field(
        default="production",
        description="Deployment environment name (e.g. production, development, staging)",
    )

    @property
    def is_development(self) -> bool:
        """Whether error responses may include debugging details."""
        return self.environment.strip().lower() in ("development", "dev")

    # API
    api_prefix: str = Field(
        default="/api",
        description="API route prefix",
    )
    rate_limit_per_minute: int = Field(
        default=200,
        description="Maximum API requests per minute per IP address",
        gt=0,
    )
    trusted_proxy_headers: str = Field(
        default="CF-Connecting-IP,X-Forwarded-For,X-Real-IP",
        description="Comma-separated list of HTTP headers to check for real client IP, in priority order",
    )

    @property
    def trusted_proxy_header_list(self) -> list[str]:
        return _split_csv(self.trusted_proxy_headers)

    @property
    def cors_origin_list(self) -> list[str]:
        return _split_csv(self.cors_origins)

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024


def get_settings() -> Settings:
    """Build settings from the current environment (not cached)."""
    return Settings()  # type: ignore[call-arg]
