"""Template rendering for transactional emails using Jinja2.

Each mail kind owns three templates in ``app/notifications/email_templates``:
``<prefix>_subject.j2``, ``<prefix>_body.html.j2`` and ``<prefix>_body.txt.j2``.
Only the HTML body is auto-escaped.
"""

from dataclasses import dataclass
from typing import Any, Dict

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateError, select_autoescape

from app.logging import get_logger

from .models import MailTemplateError

logger = get_logger(__name__, component="mail")


@dataclass(frozen=True)
class RenderedMail:
    """Subject and both body variants of one message."""

    subject: str
    html_body: str
    text_body: str


class TemplateRenderer:
    """Renders subject, HTML and plain-text templates for a mail kind.

    Compiled templates are cached by the Jinja2 environment and shared
    across requests; rendering itself has no shared mutable state.
    """

    def __init__(self, template_dir: str = "email_templates"):
        """Initialize the Jinja2 environment.

        Args:
            template_dir: Directory name within the app.notifications package
        """
        self.env = Environment(
            loader=PackageLoader("app.notifications", template_dir),
            autoescape=select_autoescape(
                enabled_extensions=("html.j2",),
                default_for_string=False,
                default=False,
            ),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )

    @staticmethod
    def template_names(prefix: str) -> Dict[str, str]:
        return {
            "subject": f"{prefix}_subject.j2",
            "html_body": f"{prefix}_body.html.j2",
            "text_body": f"{prefix}_body.txt.j2",
        }

    def render(self, prefix: str, context: Dict[str, Any]) -> RenderedMail:
        """Render all templates of one mail kind.

        Args:
            prefix: Template file prefix of the mail kind
            context: Template variables

        Returns:
            RenderedMail with a single-line subject

        Raises:
            MailTemplateError: If a template is missing or references an undefined variable
        """
        names = self.template_names(prefix)
        try:
            subject = self.env.get_template(names["subject"]).render(context)
            html_body = self.env.get_template(names["html_body"]).render(context)
            text_body = self.env.get_template(names["text_body"]).render(context)
        except TemplateError as e:
            error_msg = f"Template rendering failed for '{prefix}': {e}"
            logger.error(error_msg, exc_info=True, extra={"event": "mail.template.error"})
            raise MailTemplateError(error_msg) from e

        return RenderedMail(
            subject=" ".join(subject.split()),
            html_body=html_body,
            text_body=text_body,
        )
