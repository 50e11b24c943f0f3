"""Configuration management for toolenv.

Loads configuration from:
1. toolenv.toml (defaults)
2. Environment variables (overrides)

Example toolenv.toml:

    [logging]
    level = "DEBUG"

    [download]
    timeout = 120

    [activation]
    parallel = true
    fail_fast = false

    [toolchains.go]
    base_url = "https://golang.google.cn/dl"
"""

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()

CONFIG_FILENAME = "toolenv.toml"


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "WARNING"
    format: str = "%(asctime)s - %(levelname)s - %(message)s"


@dataclass
class DownloadConfig:
    """Release download configuration."""

    timeout: float = 60.0


@dataclass
class ActivationConfig:
    """Workspace activation configuration."""

    workspace_file: str = ".workspace.yaml"
    parallel: bool = False  # Run install pipelines on worker threads
    max_workers: int = 4
    fail_fast: bool = False  # Abort activation on the first failing extension
    dedupe_paths: bool = False  # Drop repeated search-path entries
    lock: bool = True  # Advisory lock around check-then-install
    enabled_toolchains: list[str] = field(default_factory=list)  # Whitelist (empty = all)


@dataclass
class ToolchainSettings:
    """Per-toolchain overrides."""

    base_url: str = ""


@dataclass
class Config:
    """Main configuration container."""

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    download: DownloadConfig = field(default_factory=DownloadConfig)
    activation: ActivationConfig = field(default_factory=ActivationConfig)
    toolchains: dict[str, ToolchainSettings] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        """Create config from dictionary.

        Args:
            data: Configuration dictionary (from TOML).

        Returns:
            Config instance.
        """
        logging_data = data.get("logging", {})
        download_data = data.get("download", {})
        activation_data = data.get("activation", {})
        toolchains_data = data.get("toolchains", {})

        return cls(
            logging=LoggingConfig(**logging_data),
            download=DownloadConfig(**download_data),
            activation=ActivationConfig(**activation_data),
            toolchains={
                name: ToolchainSettings(**values)
                for name, values in toolchains_data.items()
            },
        )

    def base_urls(self) -> dict[str, str]:
        """Download host overrides keyed by toolchain."""
        return {
            name: settings.base_url
            for name, settings in self.toolchains.items()
            if settings.base_url
        }


def find_config_file() -> Path | None:
    """Find toolenv.toml in current or parent directories.

    Returns:
        Path to toolenv.toml or None if not found.
    """
    current = Path.cwd()

    for directory in [current, *current.parents]:
        config_path = directory / CONFIG_FILENAME
        if config_path.exists():
            return config_path

    return None


def load_config(config_path: Path | str | None = None) -> Config:
    """Load configuration from file and environment.

    Args:
        config_path: Optional explicit path to toolenv.toml

    Returns:
        Config object with merged settings.
    """
    # Start with defaults
    config_data: dict[str, Any] = {}

    # Load from file if available
    if config_path is None:
        config_path = find_config_file()

    if config_path is not None:
        path = Path(config_path)
        if path.exists():
            with open(path, "rb") as f:
                config_data = tomllib.load(f)

    # Apply environment variable overrides
    env_overrides = {
        "logging": {
            "level": os.getenv("TOOLENV_LOG_LEVEL"),
        },
        "download": {
            "timeout": _float_or_none(os.getenv("TOOLENV_DOWNLOAD_TIMEOUT")),
        },
        "activation": {
            "workspace_file": os.getenv("TOOLENV_WORKSPACE_FILE"),
            "parallel": _bool_or_none(os.getenv("TOOLENV_PARALLEL")),
            "fail_fast": _bool_or_none(os.getenv("TOOLENV_FAIL_FAST")),
        },
    }

    # Merge env overrides (only non-None values)
    for section, values in env_overrides.items():
        if section not in config_data:
            config_data[section] = {}
        for key, value in values.items():
            if value is not None:
                config_data[section][key] = value

    return Config.from_dict(config_data)


def _float_or_none(value: str | None) -> float | None:
    """Convert string to float, or return None."""
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _bool_or_none(value: str | None) -> bool | None:
    """Convert a truthy/falsy string to bool, or return None."""
    if value is None:
        return None
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    return None


# Global config instance (lazy loaded)
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance.

    Returns:
        Config object (loaded once, cached).
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config() -> Config:
    """Force reload of configuration.

    Returns:
        Fresh Config object.
    """
    global _config
    _config = load_config()
    return _config
