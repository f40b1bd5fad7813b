"""Template rendering for notification bodies using Jinja2.

Templates are plain text files with ``{{ name }}`` placeholders, one per
alert type. They are read from disk on every render; there is no cache
to go stale between invocations.
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Union

from jinja2 import Environment, TemplateError, Undefined

from nagios_notify.domain.models import AlertType, NotificationEvent

from .models import TemplateNotFound, TemplateReadError
from .payloads import build_template_context

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "email_templates"


class TemplateRenderer:
    """Renders the host or service body template for an event.

    Placeholders without a value (the service name of a host alert, an
    empty plugin output) render as empty strings. Output is plain text, so
    nothing is HTML-escaped.
    """

    def __init__(
        self,
        template_dir: Optional[Union[str, Path]] = None,
        host_template: str = "host.txt.j2",
        service_template: str = "service.txt.j2",
    ):
        """Initialize template renderer.

        Args:
            template_dir: Directory holding the templates (bundled templates when None)
            host_template: Filename of the host alert template
            service_template: Filename of the service alert template
        """
        self.template_dir = Path(template_dir) if template_dir else DEFAULT_TEMPLATE_DIR
        self.template_names = {
            AlertType.HOST: host_template,
            AlertType.SERVICE: service_template,
        }

        self.env = Environment(
            autoescape=False,
            undefined=Undefined,
            keep_trailing_newline=True,
        )

        logger.debug(f"Initialized TemplateRenderer with templates from {self.template_dir}")

    def template_path(self, alert_type: AlertType) -> Path:
        """Return the template file used for the given alert type."""
        return self.template_dir / self.template_names[alert_type]

    def load(self, alert_type: AlertType) -> str:
        """Read the template text for an alert type.

        Raises:
            TemplateNotFound: If the template file does not exist
            TemplateReadError: If the file cannot be read or is not valid UTF-8
        """
        path = self.template_path(alert_type)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            error_msg = f"Template not found: {path}"
            logger.error(error_msg)
            raise TemplateNotFound(error_msg) from e
        except (OSError, UnicodeDecodeError) as e:
            error_msg = f"Failed to read template {path}: {e}"
            logger.error(error_msg)
            raise TemplateReadError(error_msg) from e

    def render(
        self, event: NotificationEvent, context: Optional[Dict[str, str]] = None
    ) -> str:
        """Render the body for an event.

        Args:
            event: Event selecting the template variant
            context: Template variables (built from the event when None)

        Returns:
            Rendered body text

        Raises:
            TemplateNotFound: If the template file does not exist
            TemplateReadError: If the template cannot be read or parsed
        """
        source = self.load(event.alert_type)
        if context is None:
            context = build_template_context(event)

        try:
            body = self.env.from_string(source).render(context)
        except TemplateError as e:
            error_msg = f"Template rendering failed for {self.template_path(event.alert_type)}: {e}"
            logger.error(error_msg, exc_info=True)
            raise TemplateReadError(error_msg) from e

        logger.debug(f"Rendered {event.alert_type.value} template ({len(body)} chars)")
        return body

    @staticmethod
    def render_subject(context: Dict[str, str]) -> str:
        """Return the subject from a context as a single line."""
        return " ".join(context.get("subject", "").splitlines()).strip()
