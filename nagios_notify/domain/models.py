"""Domain models describing a single monitoring alert event."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .exceptions import InvalidArgument


class AlertType(str, Enum):
    """Category of the monitored entity."""

    HOST = "host"
    SERVICE = "service"

    @classmethod
    def parse(cls, value: str) -> "AlertType":
        """Parse an alert type name, case-insensitively.

        Raises:
            InvalidArgument: If the value is not host or service
        """
        normalized = (value or "").strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        raise InvalidArgument(
            f"Invalid alert type: '{value}'. Must be one of: host, service"
        )


class NotificationType(str, Enum):
    """Notification types emitted by the monitoring system."""

    PROBLEM = "PROBLEM"
    RECOVERY = "RECOVERY"
    ACKNOWLEDGEMENT = "ACKNOWLEDGEMENT"
    FLAPPINGSTART = "FLAPPINGSTART"
    FLAPPINGSTOP = "FLAPPINGSTOP"
    DOWNTIMESTART = "DOWNTIMESTART"
    DOWNTIMEEND = "DOWNTIMEEND"

    @classmethod
    def lookup(cls, value: str) -> Optional["NotificationType"]:
        """Return the matching member, or None for unrecognized types."""
        try:
            return cls((value or "").strip().upper())
        except ValueError:
            return None


class State(str, Enum):
    """Host and service state labels."""

    OK = "OK"
    UP = "UP"
    DOWN = "DOWN"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"
    UNKNOWN = "UNKNOWN"
    UNREACHABLE = "UNREACHABLE"

    @classmethod
    def lookup(cls, value: str) -> Optional["State"]:
        """Return the matching member, or None for unrecognized states."""
        try:
            return cls((value or "").strip().upper())
        except ValueError:
            return None


@dataclass(frozen=True)
class NotificationEvent:
    """One alert state change, as handed over by the monitoring system.

    Created once per invocation and discarded after the send attempt.
    ``service_name`` is always empty for host alerts. ``date`` is kept
    exactly as received; it is only reformatted for display.

    Attributes:
        contact: Recipient address (comma-separated list allowed)
        alert_type: Host or service alert
        notification_type: Raw notification type (PROBLEM, RECOVERY, ...)
        host_name: Monitored host name
        host_address: IP address or hostname of the monitored host
        state: Raw state label (OK, CRITICAL, ...)
        date: Pre-formatted timestamp string
        output: Free-text plugin output, may contain non-ASCII text
        service_name: Service description for service alerts
    """

    contact: str
    alert_type: AlertType
    notification_type: str
    host_name: str
    host_address: str = ""
    state: str = ""
    date: str = ""
    output: str = ""
    service_name: str = ""

    @classmethod
    def from_values(
        cls,
        contact: Optional[str],
        alert_type: str,
        notification_type: Optional[str],
        host_name: Optional[str],
        host_address: Optional[str] = None,
        state: Optional[str] = None,
        date: Optional[str] = None,
        output: Optional[str] = None,
        service_name: Optional[str] = None,
    ) -> "NotificationEvent":
        """Build a validated event from loosely typed input values.

        ``None`` values become empty strings. The service name is dropped
        for host alerts.

        Raises:
            InvalidArgument: If a required value is missing or malformed
        """
        errors = []

        if not contact or not contact.strip():
            errors.append("contact address must not be empty")
        if not host_name or not host_name.strip():
            errors.append("host name must not be empty")
        if not notification_type or not notification_type.strip():
            errors.append("notification type must not be empty")

        try:
            parsed_type = AlertType.parse(alert_type)
        except InvalidArgument as e:
            errors.append(str(e))
            parsed_type = None

        if errors:
            raise InvalidArgument("Invalid notification event: " + "; ".join(errors))

        if parsed_type is AlertType.HOST:
            service_name = ""

        return cls(
            contact=contact.strip(),
            alert_type=parsed_type,
            notification_type=notification_type.strip(),
            host_name=host_name.strip(),
            host_address=host_address or "",
            state=state or "",
            date=date or "",
            output=output or "",
            service_name=service_name or "",
        )

    @property
    def is_host(self) -> bool:
        return self.alert_type is AlertType.HOST
