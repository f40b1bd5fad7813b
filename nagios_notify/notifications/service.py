"""Notification service: render an alert, then mail it.

This module provides the NotificationService class that sequences the
pipeline for one event: build the template context, render the body for
the alert type, and hand the result to the mailer. The pipeline moves
START -> RENDERED -> SENT, or ends in FAILED at the first error. Nothing
is retried; the caller decides what to do with a failed result.
"""

import logging
from typing import Callable, Optional

from nagios_notify.domain.exceptions import NotifyError
from nagios_notify.domain.models import NotificationEvent
from nagios_notify.logging import get_logger
from nagios_notify.logging.context import log_context

from .dispatcher import Mailer
from .models import NotificationResult, PipelineState
from .payloads import build_template_context
from .templates import TemplateRenderer

logger = get_logger(__name__, component="notification")


class NotificationService:
    """Runs the render-then-send pipeline for a single notification event.

    Rendering always completes before the mailer is called, so a template
    failure never produces a partial email.
    """

    def __init__(
        self,
        mailer: Mailer,
        template_renderer: Optional[TemplateRenderer] = None,
        monitor: Optional[str] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize notification service.

        Args:
            mailer: Transport used to deliver the rendered email
            template_renderer: Template renderer instance (creates default if None)
            monitor: Monitoring host name shown in mails (looked up if None)
            logger_instance: Logger instance (uses module logger if None)
        """
        self.mailer = mailer
        self.template_renderer = template_renderer or TemplateRenderer()
        self.monitor = monitor
        self.logger = logger_instance or logger

    def send(
        self,
        event: NotificationEvent,
        echo: Optional[Callable[[str], None]] = None,
        dry_run: bool = False,
    ) -> NotificationResult:
        """Render and deliver the notification for an event.

        Args:
            event: Event to notify about
            echo: Optional callback receiving the rendered body (verbose mode)
            dry_run: Render only; stop in the RENDERED state without sending

        Returns:
            NotificationResult with the terminal state, rendered text and
            the error that failed the pipeline, if any
        """
        with log_context(
            alert_type=event.alert_type.value,
            host=event.host_name,
            service_name=event.service_name,
            notification_type=event.notification_type,
        ):
            state = PipelineState.START
            subject = None
            body = None

            try:
                context = build_template_context(event, self.monitor)
                subject = self.template_renderer.render_subject(context)
                body = self.template_renderer.render(event, context)
                state = PipelineState.RENDERED

                self.logger.debug(
                    f"Rendered {event.alert_type.value} notification: {subject}",
                    extra={"event": "template.rendered", "subject": subject},
                )

                if echo is not None:
                    echo(body)

                if dry_run:
                    self.logger.info(
                        f"Dry run, not sending: {subject}",
                        extra={"event": "notify.dry_run"},
                    )
                    return NotificationResult(state=state, subject=subject, body=body)

                delivery = self.mailer.send(event.contact, subject, body)
                state = PipelineState.SENT

            except NotifyError as e:
                self.logger.error(
                    f"Notification failed in state {state.value}: {e}",
                    extra={
                        "event": "notify.failed",
                        "failed_state": state.value,
                        "error_type": type(e).__name__,
                        "exit_code": e.exit_code,
                    },
                )
                return NotificationResult(
                    state=PipelineState.FAILED,
                    subject=subject,
                    body=body,
                    error=e,
                )

            self.logger.info(
                f"Notification sent: {subject}",
                extra={"event": "notify.completed"},
            )
            return NotificationResult(
                state=state,
                subject=subject,
                body=body,
                delivery=delivery,
            )
