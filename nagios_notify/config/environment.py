"""Environment variable overrides for the configuration file."""

import os
from typing import Any, Dict

from .exceptions import ConfigInvalid

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def apply_environment_overrides(config_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Overlay environment variables onto a raw configuration dictionary.

    Lets secrets stay out of the config file. Variables that are unset or
    empty leave the file value untouched.

    Supported environment variables:
    - SMTP_HOST: SMTP relay hostname
    - SMTP_PORT: SMTP relay port (1-65535)
    - SMTP_USER: SMTP authentication username
    - SMTP_PASS: SMTP authentication password
    - LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Args:
        config_dict: Raw configuration as parsed from YAML

    Returns:
        New dictionary with overrides applied

    Raises:
        ConfigInvalid: If an override value is malformed
    """
    errors = []
    result = dict(config_dict)
    smtp = _section(result, "smtp")
    logging_section = _section(result, "logging")

    smtp_host = os.getenv("SMTP_HOST")
    smtp_port_str = os.getenv("SMTP_PORT")
    smtp_user = os.getenv("SMTP_USER")
    smtp_pass = os.getenv("SMTP_PASS")
    log_level = os.getenv("LOG_LEVEL")

    if smtp_host:
        smtp["host"] = smtp_host

    if smtp_port_str:
        try:
            smtp_port = int(smtp_port_str)
            if smtp_port < 1 or smtp_port > 65535:
                errors.append(
                    f"Invalid SMTP_PORT: {smtp_port}. Must be between 1 and 65535."
                )
            else:
                smtp["port"] = smtp_port
        except ValueError:
            errors.append(
                f"Invalid SMTP_PORT: '{smtp_port_str}'. Must be a valid integer."
            )

    if smtp_user:
        smtp["user_name"] = smtp_user
    if smtp_pass:
        smtp["password"] = smtp_pass

    if log_level:
        if log_level.upper() not in VALID_LOG_LEVELS:
            errors.append(
                f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
            )
        else:
            logging_section["level"] = log_level.upper()

    if errors:
        raise ConfigInvalid(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Check the SMTP_* and LOG_LEVEL variables in your environment or .env file",
                "Verify SMTP_PORT is a number between 1 and 65535",
            ],
        )

    if smtp:
        result["smtp"] = smtp
    if logging_section:
        result["logging"] = logging_section

    return result


def _section(config_dict: Dict[str, Any], name: str) -> Dict[str, Any]:
    """Copy a config section for overlaying; a missing section is empty.

    Raises:
        ConfigInvalid: If the section is present but not a mapping
    """
    value = config_dict.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigInvalid(
            f"Configuration section '{name}' must be a mapping",
            errors=[f"{name}: expected a mapping of settings, got {type(value).__name__}"],
            suggestions=[f"Write '{name}:' on its own line with indented key: value settings"],
        )
    return dict(value)
