"""Configuration management module for Nagios Notify."""

from .environment import apply_environment_overrides
from .exceptions import ConfigInvalid
from .loader import load_config
from .models import (
    AppConfig,
    LogFormat,
    LogLevel,
    LoggingConfig,
    SMTPConfig,
    TemplateConfig,
)

__all__ = [
    # Loader functions
    "load_config",
    "apply_environment_overrides",
    # Configuration models
    "AppConfig",
    "SMTPConfig",
    "TemplateConfig",
    "LoggingConfig",
    # Enums
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigInvalid",
]
