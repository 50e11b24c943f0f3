"""toolenv settings."""

from settings.config import (
    ActivationConfig,
    Config,
    DownloadConfig,
    LoggingConfig,
    ToolchainSettings,
    get_config,
    load_config,
    reload_config,
)

__all__ = [
    "ActivationConfig",
    "Config",
    "DownloadConfig",
    "LoggingConfig",
    "ToolchainSettings",
    "get_config",
    "load_config",
    "reload_config",
]
