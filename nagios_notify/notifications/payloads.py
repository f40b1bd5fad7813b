"""Payload resolution for notification templates.

This module builds the template context from a NotificationEvent: the
event fields themselves plus the derived display values (title, local
date, status description, subject) the templates show.
"""

import socket
from datetime import datetime
from typing import Dict, Optional

from nagios_notify.domain.models import NotificationEvent, NotificationType, State

UNKNOWN_DATETIME = "不明"
UNKNOWN_TITLE = "何らかの問題が発生（詳細不明）"
DISPLAY_DATETIME_FORMAT = "%m月%d日 %H時%M分"

# Nagios $LONGDATETIME$ without the zone name, e.g. "Wed Sep 20 10:43:55 2023"
EVENT_DATETIME_FORMAT = "%a %b %d %H:%M:%S %Y"

HOST_STATUS_DESCRIPTIONS = {
    State.OK: "回復",
    State.UP: "回復",
    State.WARNING: "警告",
    State.CRITICAL: "ダウン",
    State.DOWN: "ダウン",
    State.UNKNOWN: "不明",
    State.UNREACHABLE: "到達不能（経路障害の可能性）",
}

SERVICE_STATUS_DESCRIPTIONS = {
    **HOST_STATUS_DESCRIPTIONS,
    State.CRITICAL: "致命的",
}


def get_monitor_name() -> str:
    """Return the host name of the machine sending the notification."""
    try:
        return socket.gethostname() or "localhost"
    except OSError:
        return "localhost"


def format_event_datetime(date: str) -> str:
    """Reformat a Nagios date string for display.

    The zone name (JST, UTC, ...) is dropped before parsing because
    strptime only understands a handful of zone abbreviations.

    Args:
        date: Date as passed on the command line, e.g. "Wed Sep 20 10:43:55 JST 2023"

    Returns:
        Date formatted as "09月20日 10時43分", or "不明" when unparsable
    """
    parts = (date or "").split()
    if len(parts) == 6:
        del parts[4]

    try:
        parsed = datetime.strptime(" ".join(parts), EVENT_DATETIME_FORMAT)
    except ValueError:
        return UNKNOWN_DATETIME

    return parsed.strftime(DISPLAY_DATETIME_FORMAT)


def build_title(event: NotificationEvent) -> str:
    """Build the one-line headline shown at the top of the body."""
    notification_type = NotificationType.lookup(event.notification_type)
    if notification_type not in (NotificationType.PROBLEM, NotificationType.RECOVERY):
        return UNKNOWN_TITLE

    type_name = "ホスト" if event.is_host else "サービス"
    if notification_type is NotificationType.RECOVERY:
        return f"{type_name}が正常状態に復帰"
    return f"{type_name}に問題が発生"


def build_status_description(event: NotificationEvent) -> str:
    """Describe the event state in words; empty for unrecognized states."""
    state = State.lookup(event.state)
    if state is None:
        return ""

    descriptions = HOST_STATUS_DESCRIPTIONS if event.is_host else SERVICE_STATUS_DESCRIPTIONS
    return descriptions[state]


def host_status(event: NotificationEvent) -> str:
    """Map a host notification to the UP/DOWN label used in subjects."""
    notification_type = NotificationType.lookup(event.notification_type)
    if notification_type is NotificationType.PROBLEM:
        return "DOWN"
    if notification_type is NotificationType.RECOVERY:
        return "UP"
    return event.state or "UNKNOWN"


def build_subject(event: NotificationEvent, monitor: str) -> str:
    """Build the email subject line.

    Examples:
        [PROBLEM] DOWN: example.com    by nagios01
        [PROBLEM] CRITICAL: example.com/HTTP    by nagios01
    """
    if event.is_host:
        return (
            f"[{event.notification_type}] {host_status(event)}: "
            f"{event.host_name}    by {monitor}"
        )

    return (
        f"[{event.notification_type}] {event.state or 'UNKNOWN'}: "
        f"{event.host_name}/{event.service_name or '?'}    by {monitor}"
    )


def build_template_context(
    event: NotificationEvent, monitor: Optional[str] = None
) -> Dict[str, str]:
    """Build the template context for a notification event.

    Args:
        event: Event being notified
        monitor: Name of the monitoring host (looked up when None)

    Returns:
        Dictionary with all template variables:
        - contact, alert_type, notification_type, service_name, host_name,
          state, date, output: Event fields as received
        - host_address: Host address, "?" when empty
        - title: Headline describing the event
        - datetime: Display date, "不明" when the date is unparsable
        - status_description: State in words
        - monitor: Monitoring host name
        - subject: Email subject line
    """
    monitor = monitor or get_monitor_name()

    return {
        "contact": event.contact,
        "alert_type": event.alert_type.value,
        "notification_type": event.notification_type,
        "service_name": event.service_name,
        "host_name": event.host_name,
        "host_address": event.host_address or "?",
        "state": event.state,
        "date": event.date,
        "output": event.output,
        "title": build_title(event),
        "datetime": format_event_datetime(event.date),
        "status_description": build_status_description(event),
        "monitor": monitor,
        "subject": build_subject(event, monitor),
    }
