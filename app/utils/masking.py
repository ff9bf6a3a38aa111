"""Helpers that keep personal data out of log output."""

from typing import Optional


def mask_email(address: Optional[str]) -> str:
    """Mask the local part of an email address for logging.

    Example:
        >>> mask_email("jane.doe@example.com")
        'j***@example.com'
    """
    if not address:
        return "<none>"

    local, sep, domain = address.partition("@")
    if not sep:
        return "***"

    return f"{local[:1]}***@{domain}"
