"""
Configuration package for Arkitek Builder.

This package provides configuration management with environment variable support,
validation, and deployment environment handling.
"""

from .settings import (
    Settings,
    APIConfig,
    StorageConfig,
    BootScriptConfig,
    MonitoringConfig,
    Environment,
    LogLevel,
    settings,
    get_settings,
    reload_settings
)

__all__ = [
    # Settings classes
    "Settings",
    "APIConfig",
    "StorageConfig",
    "BootScriptConfig",
    "MonitoringConfig",

    # Enums
    "Environment",
    "LogLevel",

    # Settings instances and functions
    "settings",
    "get_settings",
    "reload_settings"
]
