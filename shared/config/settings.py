"""
Settings Module
===============

Pydantic-based configuration with environment variable loading.

Version: 0.1.0
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
    TESTING = "testing"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LayoutSettings(BaseSettings):
    """Force layout solver constants."""

    model_config = SettingsConfigDict(env_prefix="LAYOUT_")

    initial_radius: float = Field(default=8.0, gt=0.0)
    height_factor: float = 0.2
    iterations: int = Field(default=50, ge=0)
    spring_constant: float = Field(default=0.05, ge=0.0)
    repulsion_cutoff_factor: float = Field(default=2.0, ge=0.0)
    attraction_epsilon: float = Field(default=0.1, ge=0.0)


class CORSSettings(BaseSettings):
    """CORS configuration."""

    model_config = SettingsConfigDict(env_prefix="CORS_")

    origins: str = "http://localhost:3000,http://localhost:5173"
    allow_credentials: bool = True

    @property
    def origins_list(self) -> list[str]:
        """Parse origins string into list."""
        return [o.strip() for o in self.origins.split(",") if o.strip()]


class ServicePorts(BaseSettings):
    """Service port configuration."""

    requirement_map: int = Field(default=8010, alias="REQUIREMENT_MAP_PORT")


class Settings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables with sensible defaults.
    Use the global `settings` singleton or call `get_settings()`.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # General
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = True
    log_level: LogLevel = LogLevel.INFO

    # Service ports
    ports: ServicePorts = Field(default_factory=ServicePorts)

    # Layout engine
    layout: LayoutSettings = Field(default_factory=LayoutSettings)

    # Security
    cors: CORSSettings = Field(default_factory=CORSSettings)

    @field_validator("log_level", mode="before")
    @classmethod
    def uppercase_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Ensure log level is uppercase."""
        if isinstance(v, str):
            return LogLevel(v.upper())
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        """Check if running in test mode."""
        return self.environment == Environment.TESTING


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Application settings singleton.
    """
    return Settings()
