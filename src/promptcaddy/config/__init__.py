"""Configuration models and loading."""

from .app import (
    LoggingSettings,
    PromptCaddyConfig,
    ServerSettings,
    WatchSettings,
    load_config,
)

__all__ = [
    "LoggingSettings",
    "PromptCaddyConfig",
    "ServerSettings",
    "WatchSettings",
    "load_config",
]
