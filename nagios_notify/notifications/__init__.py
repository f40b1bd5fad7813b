"""Notification pipeline for monitoring alerts.

This package turns a NotificationEvent into a delivered email:
- NotificationService: Render-then-send orchestration for one event
- TemplateRenderer: Jinja2-based host/service body rendering
- MailDispatcher: Recipient validation and message construction
- SMTPClient: SMTP wrapper with implicit TLS/STARTTLS support
- Payload utilities: Template context and subject builders
"""

from .dispatcher import MailDispatcher, Mailer
from .models import (
    DeliveryFailed,
    DeliveryResult,
    NotificationResult,
    PipelineState,
    TemplateNotFound,
    TemplateReadError,
)
from .payloads import build_subject, build_template_context
from .service import NotificationService
from .smtp_client import SMTPClient, parse_recipients
from .templates import TemplateRenderer

__all__ = [
    # Main service
    "NotificationService",
    # Models and results
    "NotificationResult",
    "DeliveryResult",
    "PipelineState",
    # Exceptions
    "TemplateNotFound",
    "TemplateReadError",
    "DeliveryFailed",
    # Components
    "TemplateRenderer",
    "MailDispatcher",
    "Mailer",
    "SMTPClient",
    # Utilities
    "build_template_context",
    "build_subject",
    "parse_recipients",
]
