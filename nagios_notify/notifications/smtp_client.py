"""SMTP client wrapper for email delivery.

This module provides a thin wrapper around Python's smtplib with support
for implicit TLS, STARTTLS, authentication, and proper connection
lifecycle management.
"""

import logging
import smtplib
import ssl
from email.message import EmailMessage
from typing import Callable, List, Optional

from email_validator import EmailNotValidError, validate_email

from nagios_notify.config.models import SMTPConfig
from nagios_notify.domain.exceptions import InvalidArgument

from .models import DeliveryFailed

logger = logging.getLogger(__name__)

IMPLICIT_TLS_PORT = 465


class SMTPClient:
    """Wrapper around smtplib for sending email messages.

    Handles connection lifecycle, TLS negotiation and authentication.
    The smtplib classes are injectable so tests never touch the network.
    """

    def __init__(
        self,
        smtp_factory: Optional[Callable] = None,
        smtp_ssl_factory: Optional[Callable] = None,
    ):
        """Initialize SMTP client with optional factory injection.

        Args:
            smtp_factory: Factory function for creating SMTP instances (for mocking)
            smtp_ssl_factory: Factory function for creating SMTP_SSL instances (for mocking)
        """
        self.smtp_factory = smtp_factory or smtplib.SMTP
        self.smtp_ssl_factory = smtp_ssl_factory or smtplib.SMTP_SSL

    def send(self, message: EmailMessage, smtp_config: SMTPConfig) -> None:
        """Send an email message via SMTP.

        Port 465 connects with implicit TLS; any other port connects in the
        clear and upgrades with STARTTLS when ``use_tls`` is set.

        Args:
            message: Fully constructed EmailMessage to send
            smtp_config: SMTP relay settings

        Raises:
            DeliveryFailed: If message delivery fails
        """
        smtp = None
        try:
            if smtp_config.port == IMPLICIT_TLS_PORT:
                logger.debug(
                    f"Connecting to {smtp_config.host}:{smtp_config.port} with implicit TLS"
                )
                context = ssl.create_default_context()
                smtp = self.smtp_ssl_factory(
                    smtp_config.host,
                    smtp_config.port,
                    timeout=smtp_config.timeout,
                    context=context,
                )
            else:
                logger.debug(f"Connecting to {smtp_config.host}:{smtp_config.port}")
                smtp = self.smtp_factory(
                    smtp_config.host, smtp_config.port, timeout=smtp_config.timeout
                )

                if smtp_config.use_tls:
                    logger.debug("Upgrading connection with STARTTLS")
                    context = ssl.create_default_context()
                    smtp.starttls(context=context)

            if smtp_config.has_credentials:
                logger.debug(f"Authenticating as {smtp_config.user_name}")
                smtp.login(smtp_config.user_name, smtp_config.password)
            else:
                logger.debug("No authentication credentials provided, proceeding without auth")

            smtp.send_message(message)
            logger.debug(f"Message accepted by {smtp_config.host} for {message['To']}")

        except smtplib.SMTPException as e:
            error_msg = f"SMTP error during message delivery: {e}"
            logger.error(error_msg)
            raise DeliveryFailed(error_msg) from e
        except OSError as e:
            error_msg = f"Network error during SMTP connection: {e}"
            logger.error(error_msg)
            raise DeliveryFailed(error_msg) from e
        finally:
            if smtp is not None:
                try:
                    smtp.quit()
                except (smtplib.SMTPException, OSError) as e:
                    logger.warning(f"Error closing SMTP connection: {e}")


def parse_recipients(recipient_string: Optional[str]) -> List[str]:
    """Parse and validate comma-separated email addresses.

    Args:
        recipient_string: Comma-separated email addresses

    Returns:
        List of validated email addresses

    Raises:
        InvalidArgument: If the string is empty or any address is invalid
    """
    recipients = []
    raw_emails = [email.strip() for email in (recipient_string or "").split(",")]

    for email in raw_emails:
        if not email:
            continue

        try:
            validated = validate_email(email, check_deliverability=False)
            recipients.append(validated.normalized)
        except EmailNotValidError as e:
            raise InvalidArgument(f"Invalid email address: '{email}' - {e}") from e

    if not recipients:
        raise InvalidArgument("No valid email addresses found in contact address")

    return recipients
