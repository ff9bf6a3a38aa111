"""Transactional email dispatch for candidate lifecycle events.

- MailDispatcher: the single templated sender behind every mail endpoint
- MailResult: ``{success, error?}`` outcome with its HTTP status
- MAIL_KINDS: per-kind templates, checks and context builders
- TemplateRenderer: Jinja2 rendering of subject, HTML and text bodies
- SMTPClient: smtplib wrapper, one connection per send
"""

from .kinds import MAIL_KINDS, MailKindSpec, get_kind_spec
from .models import (
    MailError,
    MailResult,
    MailTemplateError,
    MailValidationError,
    SMTPDeliveryError,
)
from .payloads import first_name, parse_mail_request
from .service import MailDispatcher
from .smtp_client import SMTPClient, build_sender_address, normalize_recipient
from .templates import RenderedMail, TemplateRenderer

__all__ = [
    # Main service
    "MailDispatcher",
    # Results and exceptions
    "MailResult",
    "MailError",
    "MailValidationError",
    "MailTemplateError",
    "SMTPDeliveryError",
    # Kinds
    "MAIL_KINDS",
    "MailKindSpec",
    "get_kind_spec",
    # Components
    "TemplateRenderer",
    "RenderedMail",
    "SMTPClient",
    # Utilities
    "first_name",
    "parse_mail_request",
    "build_sender_address",
    "normalize_recipient",
]
