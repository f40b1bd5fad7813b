"""Configuration schema models using Pydantic."""

from email.utils import parseaddr
from enum import Enum
from pathlib import Path
from typing import Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, Field, field_validator, model_validator


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class SMTPConfig(BaseModel):
    """Mail transport settings."""

    host: str = Field(..., min_length=1, description="SMTP relay hostname")
    port: int = Field(465, ge=1, le=65535, description="SMTP relay port")
    user_name: Optional[str] = Field(None, description="SMTP authentication user")
    password: Optional[str] = Field(None, description="SMTP authentication password")
    sender: str = Field(
        ..., alias="from", min_length=1, description="From and Reply-To address"
    )
    use_tls: bool = Field(True, description="Use STARTTLS on non-implicit-TLS ports")
    timeout: float = Field(30.0, gt=0, le=600, description="Socket timeout in seconds")

    model_config = {"populate_by_name": True}

    @field_validator("host")
    @classmethod
    def strip_host(cls, v: str) -> str:
        """Strip whitespace from the relay host."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("Field cannot be empty or whitespace-only")
        return stripped

    @field_validator("sender")
    @classmethod
    def validate_sender(cls, v: str) -> str:
        """Accept 'addr@example.com' or 'Display Name <addr@example.com>'."""
        _, address = parseaddr(v)
        try:
            validate_email(address, check_deliverability=False)
        except EmailNotValidError as e:
            raise ValueError(f"Invalid sender address '{v}': {e}") from e
        return v.strip()

    @model_validator(mode="after")
    def validate_credentials(self):
        """Require user name and password together."""
        if self.user_name and not self.password:
            raise ValueError(
                "user_name is set but password is not. Both must be set for authentication."
            )
        if self.password and not self.user_name:
            raise ValueError(
                "password is set but user_name is not. Both must be set for authentication."
            )
        return self

    @property
    def has_credentials(self) -> bool:
        return bool(self.user_name and self.password)


class TemplateConfig(BaseModel):
    """Location of the host and service body templates."""

    directory: Optional[Path] = Field(
        None, description="Template directory (defaults to the bundled templates)"
    )
    host: str = Field("host.txt.j2", min_length=1)
    service: str = Field("service.txt.j2", min_length=1)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(LogFormat.KEY_VALUE, description="Log output format")
    file: Optional[Path] = Field(
        None, description="Log file path (logs go to stderr when unset)"
    )

    model_config = {"use_enum_values": True, "validate_default": True}


class AppConfig(BaseModel):
    """Root configuration model."""

    smtp: SMTPConfig
    templates: TemplateConfig = Field(default_factory=TemplateConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
