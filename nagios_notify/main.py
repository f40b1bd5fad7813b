"""Command-line entry point for Nagios Notify.

Invoked by the monitoring system once per alert, for example::

    nagios-notify -a "$CONTACTEMAIL$" -t host -n "$NOTIFICATIONTYPE$" \\
        -H "$HOSTNAME$" -A "$HOSTADDRESS$" -S "$HOSTSTATE$" \\
        -d "$LONGDATETIME$" -o "$HOSTOUTPUT$"
"""

from dotenv import load_dotenv
load_dotenv()

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

from nagios_notify import __version__
from nagios_notify.config.exceptions import ConfigInvalid
from nagios_notify.config.loader import load_config
from nagios_notify.config.models import AppConfig, LogLevel
from nagios_notify.domain.exceptions import InvalidArgument, NotifyError
from nagios_notify.domain.models import NotificationEvent
from nagios_notify.logging import get_logger
from nagios_notify.logging.config import configure_logging
from nagios_notify.notifications.dispatcher import MailDispatcher
from nagios_notify.notifications.service import NotificationService
from nagios_notify.notifications.templates import TemplateRenderer

logger = get_logger(__name__, component="cli")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the notification flags."""
    parser = argparse.ArgumentParser(
        prog="nagios-notify",
        description="Nagios Notify - format and send email notifications for host and service alerts",
    )
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Verbose output: debug logging and print the rendered body")
    parser.add_argument("-a", dest="contact", required=True,
                        help="Contact email address (comma-separated list allowed)")
    parser.add_argument("-t", dest="alert_type", required=True,
                        type=str.lower, choices=["host", "service"],
                        help="Alert type")
    parser.add_argument("-n", dest="notification_type", required=True,
                        help="Notification type (PROBLEM, RECOVERY, ...)")
    parser.add_argument("-s", dest="service_name", default="",
                        help="Service name (empty for host alerts)")
    parser.add_argument("-H", dest="host_name", required=True, help="Host name")
    parser.add_argument("-A", dest="host_address", default="", help="Host address")
    parser.add_argument("-S", dest="state", default="",
                        help="State (OK, WARNING, CRITICAL, ...)")
    parser.add_argument("-d", dest="date", default="", help="Date of the event")
    parser.add_argument("-o", dest="output", default="", help="Plugin output text")
    parser.add_argument("-c", "--config", type=Path, default=None,
                        help="Path to configuration file (default: config.yml, then /etc/nagios-notify/config.yml)")
    parser.add_argument("--log-level", default=None,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="Log level (overrides config and environment)")
    parser.add_argument("--dry-run", action="store_true",
                        help="Render the notification and print it without sending")
    parser.add_argument("--version", action="version",
                        version=f"%(prog)s {__version__}")
    return parser


def resolve_log_level(app_config: AppConfig, args: argparse.Namespace) -> str:
    """Apply log level priority: CLI flag > verbose > config (environment already merged)."""
    if args.log_level:
        return args.log_level
    if args.verbose:
        return "DEBUG"
    return LogLevel(app_config.logging.level).value


def build_service(app_config: AppConfig) -> NotificationService:
    """Wire renderer and mailer from configuration."""
    templates = app_config.templates
    renderer = TemplateRenderer(
        template_dir=templates.directory,
        host_template=templates.host,
        service_template=templates.service,
    )
    mailer = MailDispatcher(app_config.smtp)
    return NotificationService(mailer=mailer, template_renderer=renderer)


def build_event(args: argparse.Namespace) -> NotificationEvent:
    return NotificationEvent.from_values(
        contact=args.contact,
        alert_type=args.alert_type,
        notification_type=args.notification_type,
        host_name=args.host_name,
        host_address=args.host_address,
        state=args.state,
        date=args.date,
        output=args.output,
        service_name=args.service_name,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for Nagios Notify.

    Returns:
        Exit code: 0 on delivery, otherwise the code of the failing error kind
        (2 invalid argument, 3 invalid config, 4 template not found,
        5 template read error, 6 delivery failed, 1 unexpected).
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        app_config = load_config(args.config)

        configure_logging(
            level=resolve_log_level(app_config, args),
            format_type=app_config.logging.format,
            log_file=app_config.logging.file,
            environment=os.environ.get("ENVIRONMENT", "local"),
        )

        logger.debug(
            "Nagios Notify starting",
            extra={
                "event": "notify.starting",
                "version": __version__,
                "config_path": str(args.config) if args.config else None,
                "dry_run": args.dry_run,
            },
        )

        event = build_event(args)
        service = build_service(app_config)

        echo = print if (args.verbose or args.dry_run) else None
        result = service.send(event, echo=echo, dry_run=args.dry_run)

        if result.error is not None:
            print(f"{type(result.error).__name__}: {result.error}", file=sys.stderr)

        return result.exit_code

    except ConfigInvalid as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return e.exit_code
    except InvalidArgument as e:
        print(f"Invalid Argument: {e}", file=sys.stderr)
        logger.error(
            f"Invalid argument: {e}",
            extra={"event": "notify.failed", "error_type": "InvalidArgument"},
        )
        return e.exit_code
    except NotifyError as e:
        print(f"{type(e).__name__}: {e}", file=sys.stderr)
        logger.error(
            f"Notification failed: {e}",
            extra={"event": "notify.failed", "error_type": type(e).__name__},
        )
        return e.exit_code
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error during notification",
            extra={
                "event": "notify.crashed",
                "error_type": type(e).__name__,
                "error": str(e),
            },
            exc_info=True,
        )
        return 1


if __name__ == "__main__":
    sys.exit(main())
