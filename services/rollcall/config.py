"""
Configuration management for Rollcall.

Non-secret configuration loaded from YAML file, secrets from environment variables.
"""

import os
from enum import StrEnum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CONFIG_FILE = "/etc/rollcall/config.yaml"


def yaml_config_settings_source() -> dict[str, Any]:
    """Load configuration from YAML file."""
    config_path = Path(os.environ.get("ROLLCALL_CONFIG_FILE", DEFAULT_CONFIG_FILE))
    if config_path.exists():
        with open(config_path) as f:
            return yaml.safe_load(f) or {}
    return {}


# --- Catalog Configuration ---


class CatalogConfig(BaseModel):
    """Connection settings for the entity catalog."""

    base_url: str = Field(
        default="http://localhost:7007/api/catalog",
        description="Catalog API base URL; entity queries go to {base_url}/entities",
    )
    timeout_seconds: float = Field(
        default=30.0,
        description="Per-request timeout for catalog queries",
    )


# --- Service Auth Configuration ---


class ServiceAuthMode(StrEnum):
    """How catalog calls are authenticated."""

    NONE = "none"
    STATIC = "static"
    JWT = "jwt"


class ServiceAuthConfig(BaseModel):
    """Service-to-service credentials used for catalog calls."""

    mode: ServiceAuthMode = Field(
        default=ServiceAuthMode.NONE,
        description="none (unauthenticated), static (fixed bearer token) or jwt (signed per call)",
    )
    static_token: str = Field(default="", description="Bearer token for static mode (from env)")
    secret: str = Field(
        default="",
        description="Base64-encoded shared secret for jwt mode (from env)",
    )
    subject: str = Field(default="backstage-server", description="JWT subject claim")
    token_ttl_seconds: int = Field(default=3600, description="Lifetime of signed server tokens")


# --- Main Settings ---


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="ROLLCALL_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    app_name: str = Field(default="rollcall")
    log_level: str = Field(default="INFO")
    json_logs: bool = Field(default=True, description="JSON logging in production")

    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    service_auth: ServiceAuthConfig = Field(default_factory=ServiceAuthConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: Any,
        env_settings: Any,
        dotenv_settings: Any,
        file_secret_settings: Any,
    ) -> tuple[Any, ...]:
        """Customize settings sources: env vars override YAML config."""
        return (
            init_settings,
            env_settings,
            yaml_config_settings_source,
            dotenv_settings,
            file_secret_settings,
        )


# Global settings instance
settings = Settings()
