"""
Configuration management for PromptCaddy.

Provides YAML-based configuration with CLI overrides,
configuration hierarchy (CLI > YAML > Defaults), and validation.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator

from promptcaddy import __version__

__all__ = [
    "LoggingSettings",
    "PromptCaddyConfig",
    "ServerSettings",
    "WatchSettings",
    "apply_cli_overrides",
    "generate_default_config",
    "get_default_config_path",
    "get_promptcaddy_home",
    "load_config",
    "load_yaml",
]


def get_promptcaddy_home() -> Path:
    """Get the PromptCaddy home directory, respecting PROMPTCADDY_HOME.

    Returns:
        Path to ~/.promptcaddy by default, or PROMPTCADDY_HOME if set
    """
    home = os.environ.get("PROMPTCADDY_HOME")
    if home:
        return Path(home)
    return Path.home() / ".promptcaddy"


def get_default_config_path() -> Path:
    return get_promptcaddy_home() / "config.yaml"


class WatchSettings(BaseModel):
    """Prompt directory watching configuration."""

    enabled: bool = Field(
        default=True,
        description="Reload prompts automatically when files in the prompt directory change",
    )
    recursive: bool = Field(
        default=True,
        description="Watch subdirectories of the prompt directory as well",
    )


class ServerSettings(BaseModel):
    """MCP server identity advertised to clients."""

    name: str = Field(
        default="promptcaddy",
        description="Server name reported in serverInfo",
    )
    version: str = Field(
        default=__version__,
        description="Server version reported in serverInfo",
    )
    protocol_version: str = Field(
        default="2024-11-05",
        description="MCP protocol version announced on initialize",
    )


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: Literal["debug", "info", "warning", "error"] = Field(
        default="info",
        description="Log level",
    )
    file: str | None = Field(
        default=None,
        description="Optional log file path (logs always go to stderr as well)",
    )
    max_size_mb: int = Field(
        default=10,
        description="Maximum log file size in MB",
    )
    backup_count: int = Field(
        default=5,
        description="Number of backup log files to keep",
    )

    @field_validator("max_size_mb", "backup_count")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate value is positive."""
        if v <= 0:
            raise ValueError("Value must be positive")
        return v


class PromptCaddyConfig(BaseModel):
    """
    Main configuration for PromptCaddy.

    Configuration is loaded with the following priority:
    1. CLI arguments (highest)
    2. YAML file (~/.promptcaddy/config.yaml)
    3. Defaults (lowest)
    """

    prompts_dir: str = Field(
        default="./prompts",
        description="Directory containing prompt files",
    )
    extension: str = Field(
        default=".md",
        description="File extension recognized as a prompt source",
    )

    watch: WatchSettings = Field(
        default_factory=WatchSettings,
        description="Prompt directory watching configuration",
    )
    server: ServerSettings = Field(
        default_factory=ServerSettings,
        description="MCP server identity",
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration",
    )

    @field_validator("extension")
    @classmethod
    def validate_extension(cls, v: str) -> str:
        """Validate the extension looks like a file suffix."""
        if not v.startswith(".") or len(v) < 2 or "/" in v:
            raise ValueError("Extension must start with '.', e.g. '.md'")
        return v

    @field_validator("prompts_dir")
    @classmethod
    def validate_prompts_dir(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("prompts_dir must not be empty")
        return v

    def get_prompts_path(self) -> Path:
        """Prompt directory with ~ expanded."""
        return Path(self.prompts_dir).expanduser()


def load_yaml(config_file: str) -> dict[str, Any]:
    """
    Load YAML or JSON configuration file.

    Args:
        config_file: Path to YAML or JSON configuration file

    Returns:
        Dictionary with parsed YAML/JSON content ({} if the file is missing)

    Raises:
        ValueError: If YAML/JSON is invalid or file format is wrong
    """
    config_path = Path(config_file).expanduser()

    if not config_path.exists():
        return {}

    file_ext = config_path.suffix.lower()
    if file_ext not in [".yaml", ".yml", ".json"]:
        raise ValueError(
            f"Config file must have .yaml, .yml, or .json extension, got: {file_ext}\n"
            f"File: {config_path}"
        )

    try:
        with open(config_path, encoding="utf-8") as f:
            content = f.read()

        if file_ext == ".json":
            data = json.loads(content) if content.strip() else {}
        else:
            data = yaml.safe_load(content)
            if data is None:
                data = {}

    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file: {e}") from e
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping at the top level: {config_path}")
    return data


def apply_cli_overrides(
    config_dict: dict[str, Any],
    cli_overrides: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Apply CLI argument overrides to config dictionary.

    Keys may be dotted ("logging.level") to reach nested sections.
    ``None`` values are ignored so unset CLI options keep file values.

    Args:
        config_dict: Configuration dictionary
        cli_overrides: Dictionary of CLI overrides

    Returns:
        Configuration dictionary with CLI overrides applied
    """
    if cli_overrides is None:
        return config_dict

    for key, value in cli_overrides.items():
        if value is None:
            continue
        if "." in key:
            parts = key.split(".")
            current = config_dict
            for part in parts[:-1]:
                if not isinstance(current.get(part), dict):
                    current[part] = {}
                current = current[part]
            current[parts[-1]] = value
        else:
            config_dict[key] = value

    return config_dict


def generate_default_config(config_file: str) -> None:
    """
    Generate default configuration file from Pydantic model defaults.

    Args:
        config_file: Path where to create the config file
    """
    config_path = Path(config_file).expanduser()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    default_config = PromptCaddyConfig().model_dump(mode="python", exclude_none=True)

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.safe_dump(default_config, f, default_flow_style=False, sort_keys=False)


def load_config(
    config_file: str | None = None,
    cli_overrides: dict[str, Any] | None = None,
    create_default: bool = False,
) -> PromptCaddyConfig:
    """
    Load configuration with hierarchy: CLI > YAML > Defaults.

    Args:
        config_file: Path to YAML config file (default: ~/.promptcaddy/config.yaml)
        cli_overrides: Dictionary of CLI argument overrides
        create_default: Create default config file if it doesn't exist

    Returns:
        Validated PromptCaddyConfig instance

    Raises:
        ValueError: If configuration is invalid
    """
    if config_file is None:
        config_file = str(get_default_config_path())

    config_path = Path(config_file).expanduser()

    if create_default and not config_path.exists():
        generate_default_config(config_file)

    config_dict = load_yaml(config_file)
    config_dict = apply_cli_overrides(config_dict, cli_overrides)

    try:
        return PromptCaddyConfig(**config_dict)
    except Exception as e:
        raise ValueError(
            f"Configuration validation failed: {e}\n"
            f"Please check your configuration file at {config_file}"
        ) from e
