"""Configuration management with Pydantic Settings.

Environment variables are loaded from:
1. Environment variables (highest priority)
2. .env file (development)
3. Defaults (lowest priority)
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Deployment environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Logging level."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Logging format."""

    JSON = "json"
    TEXT = "text"


class RoleKindSetting(str, Enum):
    """How the role header of incoming requests is parsed."""

    TEXT = "text"  # case-sensitive token, e.g. ADMIN
    NUMERIC = "numeric"  # 64-bit flag, decimal or 0x-prefixed hex


class AuthzSettings(BaseSettings):
    """Authorization gate configuration."""

    model_config = SettingsConfigDict(env_prefix="AUTHZ_")

    role_header: str = Field(
        default="X-Role",
        description="Request header carrying the caller role",
    )
    role_kind: RoleKindSetting = Field(
        default=RoleKindSetting.TEXT,
        description="Role representation used by this deployment",
    )
    log_decisions: bool = Field(
        default=True,
        description="Emit a debug event for every gate decision",
    )

    @field_validator("role_header")
    @classmethod
    def validate_role_header(cls, v: str) -> str:
        """Header names are compared case-insensitively; reject blanks."""
        v = v.strip()
        if not v:
            raise ValueError("role_header must not be empty")
        return v


class Settings(BaseSettings):
    """Main application settings.

    All settings can be overridden via environment variables.
    For nested settings, use the appropriate prefix (e.g., AUTHZ_ROLE_HEADER).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="rolegate", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        alias="ENV",
        description="Deployment environment",
    )

    # Logging configuration
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    log_format: LogFormat = Field(default=LogFormat.JSON, description="Logging format")

    # Server configuration
    host: str = Field(default="0.0.0.0", description="Server bind host")
    port: int = Field(default=8080, description="Server bind port")

    # Nested settings
    authz: AuthzSettings = Field(default_factory=AuthzSettings)

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Ensure port is in the TCP range."""
        if not 0 < v < 65536:
            raise ValueError(f"port out of range: {v}")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == Environment.PRODUCTION


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses LRU cache to avoid re-parsing environment variables.
    """
    return Settings()
