"""Configuration management module.

This module provides:
- Environment-based configuration with validation
- Authorization settings for the role gate
- Cached settings access via get_settings()
"""

from .settings import (
    AuthzSettings,
    Environment,
    LogFormat,
    LogLevel,
    RoleKindSetting,
    Settings,
    get_settings,
)

__all__ = [
    # Main settings
    "Settings",
    "get_settings",
    # Enums
    "Environment",
    "LogLevel",
    "LogFormat",
    "RoleKindSetting",
    # Component settings
    "AuthzSettings",
]
