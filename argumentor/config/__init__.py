"""Application configuration."""

from .settings import (
    AppConfig,
    DatabaseConfig,
    MatchmakingConfig,
    NotificationConfig,
    SystemConfig,
    get_default_config,
    get_template_config,
)

__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "MatchmakingConfig",
    "NotificationConfig",
    "SystemConfig",
    "get_default_config",
    "get_template_config",
]
