"""
Configuration management for Arkitek Builder.

This module provides configuration classes for all service settings with
environment variable support, validation, and deployment environment handling.
"""

from typing import List
from enum import Enum
from pydantic import BaseModel, Field, field_validator
from pydantic import model_validator
from pydantic_settings import BaseSettings


class Environment(str, Enum):
    """Supported deployment environments."""
    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Supported logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class APIConfig(BaseModel):
    """FastAPI application configuration settings."""

    # Server settings
    host: str = Field(
        default="0.0.0.0",
        description="API server host"
    )
    port: int = Field(
        default=3000,
        ge=1024,
        le=65535,
        description="API server port"
    )
    reload: bool = Field(
        default=False,
        description="Enable auto-reload in development"
    )

    # API metadata
    title: str = Field(
        default="Arkitek Builder",
        description="API title"
    )
    description: str = Field(
        default="Cluster link registry and iPXE boot script generator",
        description="API description"
    )
    version: str = Field(
        default="1.0.0",
        description="API version"
    )

    # Documentation settings
    docs_url: str = Field(
        default="/docs",
        description="Swagger UI documentation URL"
    )
    redoc_url: str = Field(
        default="/redoc",
        description="ReDoc documentation URL"
    )
    openapi_url: str = Field(
        default="/openapi.json",
        description="OpenAPI schema URL"
    )

    # CORS settings
    cors_origins: List[str] = Field(
        default_factory=lambda: ["*"],
        description="Allowed CORS origins"
    )
    cors_methods: List[str] = Field(
        default_factory=lambda: ["*"],
        description="Allowed CORS methods"
    )
    cors_headers: List[str] = Field(
        default_factory=lambda: ["*"],
        description="Allowed CORS headers"
    )


class StorageConfig(BaseModel):
    """Cluster link persistence settings."""

    links_file: str = Field(
        default="cluster-links.json",
        description="JSON file holding the cluster link collection"
    )

    @field_validator('links_file')
    @classmethod
    def validate_links_file(cls, v):
        """Reject an empty storage path."""
        if not v or not v.strip():
            raise ValueError("Links file path cannot be empty")
        return v


class BootScriptConfig(BaseModel):
    """Defaults used when rendering iPXE boot scripts."""

    boot_image: str = Field(
        default="http://boot.example.com/vmlinuz",
        description="Kernel image URL used when a request does not name one"
    )
    initrd_image: str = Field(
        default="http://boot.example.com/initrd.img",
        description="Initrd image URL"
    )
    kernel_params: str = Field(
        default="quiet splash",
        description="Kernel command line used when a request does not supply one"
    )
    banner_title: str = Field(
        default="Arkitek Builder - Mass Server Deployment",
        description="Title echoed in the script banner"
    )
    menu_timeout_ms: int = Field(
        default=10000,
        ge=0,
        description="Boot menu timeout in milliseconds"
    )
    reboot_delay_seconds: int = Field(
        default=3,
        ge=0,
        description="Delay before rebooting from the reboot menu entry"
    )
    max_server_count: int = Field(
        default=1024,
        ge=1,
        description="Largest server count accepted for a single script"
    )
    file_extension: str = Field(
        default="ipxe",
        description="Extension of the suggested download filename"
    )


class MonitoringConfig(BaseModel):
    """Logging configuration."""

    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Application log level"
    )
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format"
    )
    structured_logging: bool = Field(
        default=True,
        description="Emit JSON structured log lines"
    )


class Settings(BaseSettings):
    """Main application settings with environment variable support."""

    # Environment settings
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Deployment environment"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Component configurations
    api: APIConfig = Field(
        default_factory=APIConfig,
        description="FastAPI configuration"
    )
    storage: StorageConfig = Field(
        default_factory=StorageConfig,
        description="Cluster link storage configuration"
    )
    boot_script: BootScriptConfig = Field(
        default_factory=BootScriptConfig,
        description="Boot script generator defaults"
    )
    monitoring: MonitoringConfig = Field(
        default_factory=MonitoringConfig,
        description="Logging configuration"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_prefix": "ARK_",
        "extra": "ignore"
    }

    @model_validator(mode='after')
    def validate_environment_specific_settings(self):
        """Apply environment-specific configuration overrides."""
        if self.environment == Environment.DEVELOPMENT:
            self.api.reload = True
            self.monitoring.log_level = LogLevel.DEBUG
            self.debug = True

        elif self.environment == Environment.TESTING:
            self.monitoring.log_level = LogLevel.WARNING
            self.debug = False

        elif self.environment == Environment.PRODUCTION:
            self.api.reload = False
            self.monitoring.log_level = LogLevel.INFO
            self.debug = False

        return self

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == Environment.DEVELOPMENT


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get the global settings instance."""
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment variables and files."""
    global settings
    settings = Settings()
    return settings
