"""Data models and exceptions for the notification pipeline.

This module defines result types, pipeline states and the template and
delivery exceptions raised while turning an alert into an email.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from nagios_notify.domain.exceptions import NotifyError


class TemplateNotFound(NotifyError):
    """Raised when the selected template file does not exist."""

    exit_code = 4


class TemplateReadError(NotifyError):
    """Raised when a template file cannot be read, decoded or parsed."""

    exit_code = 5


class DeliveryFailed(NotifyError):
    """Raised when the mail transport rejects the message or cannot be reached."""

    exit_code = 6


class PipelineState(str, Enum):
    """Stages of a single notification attempt."""

    START = "start"
    RENDERED = "rendered"
    SENT = "sent"
    FAILED = "failed"


@dataclass
class DeliveryResult:
    """Confirmation of one delivered email.

    Attributes:
        recipients: Validated recipient addresses the message went to
        subject: Subject line that was sent
        message_id: Message-ID header of the sent message
        sent_at: UTC time the transport accepted the message
    """

    recipients: List[str]
    subject: str
    message_id: Optional[str] = None
    sent_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class NotificationResult:
    """Outcome of running the notification pipeline for one event.

    Attributes:
        state: Terminal pipeline state (sent or failed)
        subject: Rendered subject, when rendering got that far
        body: Rendered body, when rendering got that far
        delivery: Delivery confirmation on success
        error: The error that moved the pipeline to failed
    """

    state: PipelineState
    subject: Optional[str] = None
    body: Optional[str] = None
    delivery: Optional[DeliveryResult] = None
    error: Optional[NotifyError] = None

    @property
    def exit_code(self) -> int:
        """Process exit code: 0 unless the pipeline failed, then the error's code."""
        if self.state is not PipelineState.FAILED:
            return 0
        if self.error is not None:
            return self.error.exit_code
        return NotifyError.exit_code
