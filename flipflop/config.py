"""YAML configuration loader utility."""

from pathlib import Path
from typing import Any, Callable

import yaml


class ConfigError(Exception):
    """Raised when configuration is invalid or missing."""

    pass


def load_config(
    config_path: Path,
    validator: Callable[[dict[str, Any]], None] | None = None,
) -> dict[str, Any]:
    """Load configuration from YAML file.

    Args:
        config_path: Path to the YAML configuration file.
        validator: Optional validation function. If None, uses default
            validation for summary configs. Pass a custom function
            for different config formats.

    Returns:
        Dictionary containing the parsed configuration.

    Raises:
        ConfigError: If the file is not found or validation fails.
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    with open(config_path, "r") as f:
        config = yaml.safe_load(f)

    if not isinstance(config, dict):
        raise ConfigError(f"Configuration must be a mapping: {config_path}")

    if validator is None:
        validate_summary_config(config)
    else:
        validator(config)

    return config


def _validate_token(config: dict[str, Any]) -> None:
    token = config.get("session_token")
    if token is not None and not isinstance(token, str):
        raise ConfigError("'session_token' must be a string")


def validate_summary_config(config: dict[str, Any]) -> None:
    """Validate summary update configuration.

    Args:
        config: The parsed configuration dictionary.

    Raises:
        ConfigError: If required fields are missing or invalid.
    """
    if "root" not in config:
        raise ConfigError("Missing required field: 'root'")

    _validate_token(config)

    command = config.get("bench_command")
    if command is not None:
        if not isinstance(command, list) or not command:
            raise ConfigError("'bench_command' must be a non-empty list")
        if not all(isinstance(arg, str) for arg in command):
            raise ConfigError("'bench_command' entries must be strings")

    title = config.get("title")
    if title is not None and not isinstance(title, str):
        raise ConfigError("'title' must be a string")


def validate_fetch_config(config: dict[str, Any]) -> None:
    """Validate puzzle text fetch configuration.

    Args:
        config: The parsed configuration dictionary.

    Raises:
        ConfigError: If required fields are missing or invalid.
    """
    if "year" not in config:
        raise ConfigError("Missing required field: 'year'")

    if "puzzle" not in config:
        raise ConfigError("Missing required field: 'puzzle'")

    if not isinstance(config["year"], int) or config["year"] < 1000:
        raise ConfigError("'year' must be an integer >= 1000")

    if not isinstance(config["puzzle"], int) or config["puzzle"] < 1:
        raise ConfigError("'puzzle' must be a positive integer")

    part = config.get("part", 1)
    if not isinstance(part, int) or not 1 <= part <= 3:
        raise ConfigError("'part' must be an integer between 1 and 3")

    _validate_token(config)
