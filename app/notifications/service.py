"""Mail dispatch service for candidate lifecycle emails.

MailDispatcher is the one templated sender behind every mail endpoint:
validate the request for its kind, render the kind's templates, build the
message, hand it to SMTP. Nothing is persisted; deduplication is the
caller's concern.
"""

import logging
import time
from email.message import EmailMessage
from typing import Callable, Optional

from app.config.environment import EnvironmentConfig
from app.config.models import EmailConfig, OrganizationConfig
from app.domain.models import MailRequest
from app.logging import get_logger
from app.logging.context import log_context
from app.utils.masking import mask_email

from .kinds import get_kind_spec
from .models import MailError, MailResult, MailValidationError, SMTPDeliveryError
from .smtp_client import SMTPClient, build_sender_address, normalize_recipient
from .templates import TemplateRenderer

logger = get_logger(__name__, component="mail")

MAX_RETRY_DELAY_SECONDS = 60.0


class MailDispatcher:
    """Sends one transactional email per call.

    The dispatcher holds only immutable configuration and stateless
    collaborators, so a single instance is shared by all request threads.
    Each call builds and owns its own EmailMessage.
    """

    def __init__(
        self,
        env_config: EnvironmentConfig,
        email_config: Optional[EmailConfig] = None,
        organization: Optional[OrganizationConfig] = None,
        template_renderer: Optional[TemplateRenderer] = None,
        smtp_client: Optional[SMTPClient] = None,
        sleep: Callable[[float], None] = time.sleep,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize the dispatcher.

        Args:
            env_config: SMTP connection settings and credentials
            email_config: Retry and TLS settings (defaults: single attempt)
            organization: Branding used by the templates
            template_renderer: Template renderer (creates default if None)
            smtp_client: SMTP client (creates default if None)
            sleep: Delay function used between retries
            logger_instance: Logger (uses module logger if None)
        """
        self.env_config = env_config
        self.email_config = email_config or EmailConfig()
        self.organization = organization or OrganizationConfig()
        self.template_renderer = template_renderer or TemplateRenderer()
        self.smtp_client = smtp_client or SMTPClient()
        self.sleep = sleep
        self.logger = logger_instance or logger

    def send(self, request: MailRequest) -> MailResult:
        """Validate, render and deliver one email.

        Returns:
            MailResult: success, a 400 validation failure, or a 500
            template/transport failure. Never raises for these cases.
        """
        spec = get_kind_spec(request.kind)

        with log_context(
            mail_kind=spec.kind.value,
            recipient=mask_email(request.candidate.email),
        ):
            try:
                spec.validate(request)
            except MailValidationError as e:
                self.logger.warning(
                    f"Mail request rejected: {e}",
                    extra={"event": "mail.rejected", "error_type": "validation"},
                )
                return MailResult.failed(e)

            try:
                rendered = self.template_renderer.render(
                    spec.template_prefix, spec.build_context(request, self.organization)
                )
                message = self._build_message(
                    request.candidate.email,
                    rendered.subject,
                    rendered.text_body,
                    rendered.html_body,
                )
            except MailError as e:
                return MailResult.failed(e)
            except Exception as e:
                self.logger.error(
                    f"Failed to build message: {e}",
                    exc_info=True,
                    extra={"event": "mail.build.failure", "error_type": type(e).__name__},
                )
                return MailResult.failed(MailError(str(e)))

            return self._deliver(message)

    def _build_message(
        self, recipient: str, subject: str, text_body: str, html_body: str
    ) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = build_sender_address(
            self.env_config, self.organization.display_sender
        )
        message["To"] = normalize_recipient(recipient)
        message.set_content(text_body)
        message.add_alternative(html_body, subtype="html")
        return message

    def _deliver(self, message: EmailMessage) -> MailResult:
        """Send with bounded exponential backoff (max_retries=0 means one attempt)."""
        max_attempts = self.email_config.max_retries + 1
        last_error: Optional[MailError] = None

        for attempt in range(1, max_attempts + 1):
            if attempt > 1:
                delay = self.email_config.retry_initial_delay * (
                    self.email_config.retry_backoff_multiplier ** (attempt - 2)
                )
                delay = min(delay, MAX_RETRY_DELAY_SECONDS)
                self.logger.warning(
                    f"Retrying delivery (attempt {attempt}/{max_attempts}) after {delay:.1f}s",
                    extra={"event": "mail.send.retry", "attempt": attempt},
                )
                self.sleep(delay)

            try:
                self.smtp_client.send(message, self.env_config, self.email_config.use_tls)
            except SMTPDeliveryError as e:
                last_error = e
                self.logger.error(
                    f"SMTP delivery failed (attempt {attempt}/{max_attempts}): {e}",
                    extra={
                        "event": "mail.send.failure",
                        "error_type": "transport",
                        "attempt": attempt,
                        "retry_remaining": attempt < max_attempts,
                    },
                )
                continue
            except Exception as e:
                # Anything else is not a transport hiccup; retrying will not help
                self.logger.error(
                    f"Unexpected error during delivery: {e}",
                    exc_info=True,
                    extra={
                        "event": "mail.send.failure",
                        "error_type": type(e).__name__,
                        "attempt": attempt,
                        "retry_remaining": False,
                    },
                )
                return MailResult.failed(MailError(str(e)), attempts=attempt)

            self.logger.info(
                f"Mail sent (attempts: {attempt})",
                extra={"event": "mail.send.success", "attempt": attempt},
            )
            return MailResult.sent(attempts=attempt)

        return MailResult.failed(last_error, attempts=max_attempts)
