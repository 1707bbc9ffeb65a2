"""Target service settings with Pydantic validation and environment loading."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Target service settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = "Compose Conformance Target"
    app_version: str = "1.0.0"
    debug: bool = Field(default=False, description="Enable debug mode")

    # Listeners - env vars are HTTP_PORT and UDP_PORT
    http_host: str = Field(default="0.0.0.0", description="HTTP bind address")
    http_port: int = Field(default=8080, ge=1, le=65535, alias="HTTP_PORT")
    udp_host: str = Field(default="0.0.0.0", description="UDP bind address")
    udp_port: int = Field(default=10001, ge=1, le=65535, alias="UDP_PORT")

    # Mounted files (volumes, secrets and configs land here)
    volumes_root: str = Field(
        default="/volumes", description="Directory served by /volumefile"
    )

    # Reachability probe
    ping_timeout: float = Field(
        default=5.0, gt=0, description="Outbound probe timeout in seconds"
    )

    # Replica report
    scale_service: str = Field(
        default="target", description="Service name resolved by /scalechecker"
    )

    # Logging
    log_level: str = Field(
        default="INFO", description="Log level: DEBUG, INFO, WARNING, ERROR"
    )
    log_format: str = Field(default="json", description="Log format: json or text")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid:
            raise ValueError(f"log_level must be one of {valid}")
        return upper

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        lower = v.lower()
        if lower not in {"json", "text"}:
            raise ValueError("log_format must be 'json' or 'text'")
        return lower


@lru_cache
def get_settings() -> Settings:
    """Cached settings factory."""
    return Settings()


settings = get_settings()
