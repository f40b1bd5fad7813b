"""Domain models and base exceptions for alert notifications."""

from .exceptions import InvalidArgument, NotifyError
from .models import AlertType, NotificationEvent, NotificationType, State

__all__ = [
    "AlertType",
    "NotificationEvent",
    "NotificationType",
    "State",
    "NotifyError",
    "InvalidArgument",
]
