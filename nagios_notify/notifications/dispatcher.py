"""Mail dispatch for rendered notifications.

The pipeline only depends on the ``Mailer`` protocol, so the SMTP relay
can be swapped for another transport without touching rendering.
"""

from email.message import EmailMessage
from email.utils import formatdate, make_msgid
from typing import Optional, Protocol

from nagios_notify import __version__
from nagios_notify.config.models import SMTPConfig
from nagios_notify.logging import get_logger

from .models import DeliveryFailed, DeliveryResult
from .smtp_client import SMTPClient, parse_recipients

logger = get_logger(__name__, component="mail")

USER_AGENT = f"Nagios Notify/{__version__}"


class Mailer(Protocol):
    """Anything that can deliver one plain-text email."""

    def send(self, to: str, subject: str, body: str) -> DeliveryResult:
        ...


class MailDispatcher:
    """Delivers a rendered notification through the configured SMTP relay.

    Recipients are validated before any connection is opened, so an empty
    or malformed contact address never reaches the network. There is no
    retry: a failed send is reported once and left to the caller.
    """

    def __init__(self, smtp_config: SMTPConfig, smtp_client: Optional[SMTPClient] = None):
        self.smtp_config = smtp_config
        self.smtp_client = smtp_client or SMTPClient()

    def build_message(self, recipients, subject: str, body: str) -> EmailMessage:
        """Build a plain-text UTF-8 message from the configured sender.

        The body text is kept as-is apart from line endings: CRLF becomes
        LF and a final newline is added when missing, as for any text part
        serialized by the email package.
        """
        message = EmailMessage()
        message["From"] = self.smtp_config.sender
        message["Reply-To"] = self.smtp_config.sender
        message["To"] = ", ".join(recipients)
        message["Subject"] = subject
        message["Date"] = formatdate(localtime=True)
        message["Message-ID"] = make_msgid()
        message["User-Agent"] = USER_AGENT
        message.set_content(body, charset="utf-8")
        return message

    def send(self, to: str, subject: str, body: str) -> DeliveryResult:
        """Send one email.

        Args:
            to: Recipient address (comma-separated list allowed)
            subject: Subject line
            body: Plain-text body

        Returns:
            DeliveryResult describing the accepted message

        Raises:
            InvalidArgument: If the recipient address is empty or invalid
            DeliveryFailed: If the relay rejects the message or is unreachable
        """
        recipients = parse_recipients(to)
        message = self.build_message(recipients, subject, body)

        try:
            self.smtp_client.send(message, self.smtp_config)
        except DeliveryFailed as e:
            logger.error(
                f"Could not send email to {', '.join(recipients)}: {e}",
                extra={
                    "event": "mail.send.failure",
                    "recipients": recipients,
                    "relay_host": self.smtp_config.host,
                    "error_type": type(e.__cause__ or e).__name__,
                },
            )
            raise

        delivery = DeliveryResult(
            recipients=recipients,
            subject=subject,
            message_id=message["Message-ID"],
        )

        logger.info(
            f"Email sent successfully to {', '.join(recipients)}",
            extra={
                "event": "mail.send.success",
                "recipients": recipients,
                "relay_host": self.smtp_config.host,
                "subject": subject,
                "message_id": delivery.message_id,
                "sent_at": delivery.sent_at,
            },
        )

        return delivery
