"""Application configuration."""

from .settings import (
    AppConfig,
    StorageConfig,
    SystemConfig,
    TournamentSettings,
    get_default_config,
)

__all__ = [
    "AppConfig",
    "StorageConfig",
    "SystemConfig",
    "TournamentSettings",
    "get_default_config",
]
