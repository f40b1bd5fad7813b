"""Configuration loader for Nagios Notify."""

import os
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import ValidationError

from .environment import apply_environment_overrides
from .exceptions import ConfigInvalid
from .models import AppConfig

CONFIG_ENV_VAR = "NAGIOS_NOTIFY_CONFIG"
DEFAULT_CONFIG_PATHS = [
    Path("config.yml"),
    Path("/etc/nagios-notify/config.yml"),
]


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """
    Load and validate configuration from a YAML file and environment variables.

    Implements fallback logic for config file location:
    1. Use provided config_path if given
    2. Use $NAGIOS_NOTIFY_CONFIG if set
    3. Try config.yml in current directory
    4. Try /etc/nagios-notify/config.yml
    5. Fail with helpful error message

    Args:
        config_path: Optional path to configuration file

    Returns:
        Validated AppConfig

    Raises:
        ConfigInvalid: If configuration is invalid or file not found
    """
    config_file = _find_config_file(config_path)

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config_dict = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigInvalid(
            f"Configuration file not found: {config_file}",
            suggestions=[
                "Copy config.example.yml to config.yml",
                f"Ensure {config_file} exists and is readable",
            ],
        )
    except yaml.YAMLError as e:
        raise ConfigInvalid(
            f"Failed to parse YAML configuration: {e}",
            suggestions=[
                "Check YAML syntax in your config file",
                "Ensure proper indentation (use spaces, not tabs)",
            ],
        )
    except OSError as e:
        raise ConfigInvalid(
            f"Failed to read configuration file: {e}",
            suggestions=[
                f"Ensure {config_file} is readable",
                "Check file permissions",
            ],
        )

    if not config_dict:
        raise ConfigInvalid(
            "Configuration file is empty",
            suggestions=[
                "Copy config.example.yml to config.yml",
                "Add an smtp section with at least host and from",
            ],
        )

    if not isinstance(config_dict, dict):
        raise ConfigInvalid(
            "Configuration file must contain a mapping at the top level",
            suggestions=["Review config.example.yml for the expected layout"],
        )

    config_dict = apply_environment_overrides(config_dict)

    try:
        return AppConfig.model_validate(config_dict)
    except ValidationError as e:
        raise ConfigInvalid(
            "Configuration validation failed",
            errors=_format_validation_errors(e),
            suggestions=[
                "Review config.example.yml for correct format",
                "Check that all required fields are present",
                "Verify field types match the expected schema",
            ],
        )


def _format_validation_errors(exc: ValidationError) -> List[str]:
    """Convert Pydantic validation errors to user-friendly messages."""
    errors = []
    for error in exc.errors():
        field_path = " -> ".join(str(loc) for loc in error["loc"])
        error_msg = error["msg"]
        error_type = error["type"]

        if error_type == "missing":
            errors.append(f"Missing required field: {field_path}")
        elif error_type in ["string_type", "int_type", "bool_type", "float_type"]:
            expected_type = error_type.replace("_type", "")
            errors.append(
                f"Invalid type for '{field_path}': expected {expected_type}, got {error.get('input')}"
            )
        elif "enum" in error_type:
            errors.append(f"Invalid value for '{field_path}': {error_msg}")
        else:
            errors.append(f"{field_path}: {error_msg}" if field_path else error_msg)
    return errors


def _find_config_file(config_path: Optional[Path] = None) -> Path:
    """
    Find configuration file using fallback logic.

    Args:
        config_path: Optional explicit path to config file

    Returns:
        Path to configuration file

    Raises:
        ConfigInvalid: If no config file is found
    """
    if config_path is None and os.getenv(CONFIG_ENV_VAR):
        config_path = Path(os.environ[CONFIG_ENV_VAR])

    if config_path:
        if not config_path.exists():
            raise ConfigInvalid(
                f"Specified configuration file not found: {config_path}",
                suggestions=[
                    f"Ensure {config_path} exists",
                    "Check the path and try again",
                ],
            )
        return config_path

    for candidate in DEFAULT_CONFIG_PATHS:
        if candidate.exists():
            return candidate

    raise ConfigInvalid(
        "Configuration file not found",
        errors=[f"Tried: {candidate}" for candidate in DEFAULT_CONFIG_PATHS],
        suggestions=[
            "Copy config.example.yml to config.yml",
            f"Set {CONFIG_ENV_VAR} or use --config to specify a custom location",
        ],
    )
