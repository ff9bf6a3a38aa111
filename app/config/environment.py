"""Environment variable loading and validation.

SMTP credentials are secrets and have no fallback values: a process that
cannot find them refuses to start.
"""

import os
from typing import Optional

from email_validator import EmailNotValidError, validate_email

from .exceptions import ConfigurationError

TRUTHY = {"1", "true", "yes", "on"}
FALSY = {"0", "false", "no", "off"}

DEFAULT_DATABASE_URL = "sqlite:///./data/notifications.db"


class EnvironmentConfig:
    """Environment variable configuration holder."""

    def __init__(
        self,
        smtp_host: str,
        smtp_port: int,
        smtp_user: str,
        smtp_pass: str,
        smtp_secure: bool = True,
        mail_from: Optional[str] = None,
        smtp_timeout: float = 30.0,
        log_level: Optional[str] = None,
    ):
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_user = smtp_user
        self.smtp_pass = smtp_pass
        self.smtp_secure = smtp_secure
        self.mail_from = mail_from
        self.smtp_timeout = smtp_timeout
        self.log_level = log_level

    def __repr__(self) -> str:
        return (
            f"EnvironmentConfig(smtp_host={self.smtp_host!r}, smtp_port={self.smtp_port}, "
            f"smtp_user={self.smtp_user!r}, smtp_pass='***', smtp_secure={self.smtp_secure})"
        )


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    Required environment variables:
    - SMTP_HOST: SMTP server hostname
    - SMTP_PORT: SMTP server port (1-65535)
    - SMTP_USER: SMTP authentication username
    - SMTP_PASS: SMTP authentication password

    Optional environment variables:
    - SMTP_SECURE: "true"/"false", use TLS (default true)
    - MAIL_FROM: Full From header override (e.g. "Talent Team <hr@example.com>")
    - SMTP_TIMEOUT: Socket timeout in seconds (default 30)
    - LOG_LEVEL: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    DATABASE_URL is read separately by load_database_url(); the notification
    commands need it without any SMTP secrets.

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If required variables are missing or invalid
    """
    errors = []

    smtp_host = os.getenv("SMTP_HOST")
    smtp_port_str = os.getenv("SMTP_PORT")
    smtp_user = os.getenv("SMTP_USER")
    smtp_pass = os.getenv("SMTP_PASS")

    smtp_secure_str = os.getenv("SMTP_SECURE")
    mail_from = os.getenv("MAIL_FROM")
    smtp_timeout_str = os.getenv("SMTP_TIMEOUT")
    log_level = os.getenv("LOG_LEVEL")

    for name, value in (
        ("SMTP_HOST", smtp_host),
        ("SMTP_PORT", smtp_port_str),
        ("SMTP_USER", smtp_user),
        ("SMTP_PASS", smtp_pass),
    ):
        if not value:
            errors.append(f"Missing required environment variable: {name}")

    smtp_port = None
    if smtp_port_str:
        try:
            smtp_port = int(smtp_port_str)
            if smtp_port < 1 or smtp_port > 65535:
                errors.append(
                    f"Invalid SMTP_PORT: {smtp_port}. Must be between 1 and 65535."
                )
        except ValueError:
            errors.append(
                f"Invalid SMTP_PORT: '{smtp_port_str}'. Must be a valid integer."
            )

    smtp_secure = True
    if smtp_secure_str:
        lowered = smtp_secure_str.strip().lower()
        if lowered in TRUTHY:
            smtp_secure = True
        elif lowered in FALSY:
            smtp_secure = False
        else:
            errors.append(
                f"Invalid SMTP_SECURE: '{smtp_secure_str}'. Use true or false."
            )

    smtp_timeout = 30.0
    if smtp_timeout_str:
        try:
            smtp_timeout = float(smtp_timeout_str)
            if smtp_timeout <= 0:
                errors.append(f"Invalid SMTP_TIMEOUT: {smtp_timeout_str}. Must be positive.")
        except ValueError:
            errors.append(f"Invalid SMTP_TIMEOUT: '{smtp_timeout_str}'. Must be a number.")

    if mail_from and not _has_valid_address(mail_from):
        errors.append(f"Invalid MAIL_FROM: '{mail_from}'")

    if log_level:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if log_level.upper() not in valid_levels:
            errors.append(
                f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(valid_levels)}"
            )

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and fill in your SMTP credentials",
                "SMTP credentials have no defaults and must be supplied",
                "Verify SMTP_PORT is a number between 1 and 65535",
            ],
        )

    return EnvironmentConfig(
        smtp_host=smtp_host,
        smtp_port=smtp_port,
        smtp_user=smtp_user,
        smtp_pass=smtp_pass,
        smtp_secure=smtp_secure,
        mail_from=mail_from,
        smtp_timeout=smtp_timeout,
        log_level=log_level,
    )


def load_database_url() -> str:
    """Notification store URL from DATABASE_URL, or the local SQLite file."""
    return (os.getenv("DATABASE_URL") or "").strip() or DEFAULT_DATABASE_URL


def _has_valid_address(value: str) -> bool:
    """Check a bare address or a "Name <address>" header value."""
    address = value
    if "<" in value and value.rstrip().endswith(">"):
        address = value[value.rindex("<") + 1 : -1]

    try:
        validate_email(address.strip(), check_deliverability=False)
        return True
    except EmailNotValidError:
        return False
