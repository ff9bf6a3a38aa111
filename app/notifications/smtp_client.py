"""SMTP client wrapper for email delivery.

A thin wrapper around smtplib. Every send opens its own connection and
closes it afterwards, so concurrent sends from request threads never share
a session or a message.
"""

import smtplib
import ssl
from email.message import EmailMessage
from typing import Callable, Optional

from email_validator import EmailNotValidError, validate_email

from app.config.environment import EnvironmentConfig
from app.logging import get_logger

from .models import SMTPDeliveryError

logger = get_logger(__name__, component="smtp")

IMPLICIT_TLS_PORT = 465


class SMTPClient:
    """Wrapper around smtplib for sending email messages.

    Handles connection lifecycle, TLS negotiation and authentication.
    Factories are injectable so tests never open sockets.
    """

    def __init__(
        self,
        smtp_factory: Optional[Callable] = None,
        smtp_ssl_factory: Optional[Callable] = None,
    ):
        """Initialize SMTP client with optional factory injection.

        Args:
            smtp_factory: Factory for plain/STARTTLS SMTP instances
            smtp_ssl_factory: Factory for implicit-TLS SMTP_SSL instances
        """
        self.smtp_factory = smtp_factory or smtplib.SMTP
        self.smtp_ssl_factory = smtp_ssl_factory or smtplib.SMTP_SSL

    def send(
        self,
        message: EmailMessage,
        env_config: EnvironmentConfig,
        use_tls: Optional[bool] = None,
    ) -> None:
        """Send one message over a fresh SMTP connection.

        Args:
            message: Fully constructed EmailMessage to send
            env_config: Environment configuration with SMTP settings
            use_tls: Override for env_config.smtp_secure

        Raises:
            SMTPDeliveryError: If the connection, authentication or send fails
        """
        if use_tls is None:
            use_tls = env_config.smtp_secure

        host = env_config.smtp_host
        port = env_config.smtp_port
        timeout = env_config.smtp_timeout

        smtp = None
        try:
            if use_tls and port == IMPLICIT_TLS_PORT:
                logger.debug(f"Connecting to {host}:{port} with implicit TLS")
                smtp = self.smtp_ssl_factory(
                    host, port, timeout=timeout, context=ssl.create_default_context()
                )
            else:
                logger.debug(f"Connecting to {host}:{port}")
                smtp = self.smtp_factory(host, port, timeout=timeout)
                if use_tls:
                    logger.debug("Upgrading connection with STARTTLS")
                    smtp.starttls(context=ssl.create_default_context())

            if env_config.smtp_user and env_config.smtp_pass:
                smtp.login(env_config.smtp_user, env_config.smtp_pass)

            smtp.send_message(message)

        except smtplib.SMTPException as e:
            raise SMTPDeliveryError(f"SMTP error during message delivery: {e}") from e
        except OSError as e:
            raise SMTPDeliveryError(f"Network error during SMTP connection: {e}") from e
        finally:
            if smtp is not None:
                try:
                    smtp.quit()
                except (smtplib.SMTPException, OSError) as e:
                    logger.warning(f"Error closing SMTP connection: {e}")


def normalize_recipient(address: str) -> str:
    """Normalize a recipient address with email-validator.

    Addresses that fail validation are passed through unchanged; the SMTP
    server has the final word on deliverability.
    """
    address = address.strip()
    try:
        return validate_email(address, check_deliverability=False).normalized
    except EmailNotValidError as e:
        logger.warning(
            f"Recipient address did not validate, sending as given: {e}",
            extra={"event": "mail.recipient.unvalidated"},
        )
        return address


def build_sender_address(env_config: EnvironmentConfig, sender_name: str) -> str:
    """Build the 'From' header for outgoing mail.

    MAIL_FROM wins when set; otherwise the display name is paired with the
    authenticated SMTP user.

    Returns:
        Formatted sender address (e.g., "Indian Infra <hr@example.com>")
    """
    if env_config.mail_from:
        return env_config.mail_from

    return f"{sender_name} <{env_config.smtp_user}>"
