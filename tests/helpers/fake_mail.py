"""In-memory mail transports for testing.

RecordingMailer stands in for MailDispatcher behind the Mailer protocol;
FakeSMTPFactory stands in for smtplib.SMTP / smtplib.SMTP_SSL so the real
dispatcher and SMTP client run without network access.
"""

from email.message import EmailMessage
from typing import List, Optional

from nagios_notify.notifications.models import DeliveryResult


class RecordingMailer:
    """Mailer that records every send instead of delivering it."""

    def __init__(self, error: Optional[Exception] = None):
        self.error = error
        self.sent = []

    def send(self, to: str, subject: str, body: str) -> DeliveryResult:
        self.sent.append({"to": to, "subject": subject, "body": body})
        if self.error is not None:
            raise self.error
        return DeliveryResult(recipients=[to], subject=subject, message_id="<test@local>")


class FakeSMTP:
    """Minimal stand-in for an smtplib connection."""

    def __init__(self, host, port, **kwargs):
        self.host = host
        self.port = port
        self.kwargs = kwargs
        self.started_tls = False
        self.logged_in_as = None
        self.messages: List[EmailMessage] = []
        self.closed = False
        self.send_error: Optional[Exception] = None

    def starttls(self, context=None):
        self.started_tls = True

    def login(self, user, password):
        self.logged_in_as = user

    def send_message(self, message):
        if self.send_error is not None:
            raise self.send_error
        self.messages.append(message)

    def quit(self):
        self.closed = True


class FakeSMTPFactory:
    """Callable factory recording the connections it creates."""

    def __init__(self, send_error: Optional[Exception] = None):
        self.send_error = send_error
        self.connections: List[FakeSMTP] = []

    def __call__(self, host, port, **kwargs):
        connection = FakeSMTP(host, port, **kwargs)
        connection.send_error = self.send_error
        self.connections.append(connection)
        return connection

    @property
    def messages(self) -> List[EmailMessage]:
        return [m for c in self.connections for m in c.messages]
