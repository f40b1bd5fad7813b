"""Base exception hierarchy shared by every notification component.

Each error kind carries the process exit code reported to the monitoring
system, so a failed invocation can be told apart from the outside.
"""


class NotifyError(Exception):
    """Base exception for all notification failures."""

    exit_code = 1


class InvalidArgument(NotifyError):
    """Raised when an event field or recipient address is missing or malformed."""

    exit_code = 2
