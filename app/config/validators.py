"""Additional validation utilities for configuration."""

import warnings
from typing import Any, Dict, List


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for settings that are legal but probably unintended.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    email = config_dict.get("email", {})
    if isinstance(email, dict):
        if email.get("use_tls") is False:
            warning_messages.append(
                "email.use_tls is false: credentials will be sent over an unencrypted connection"
            )
        max_retries = email.get("max_retries", 0)
        if isinstance(max_retries, int) and max_retries > 0:
            warning_messages.append(
                f"email.max_retries is {max_retries}: a slow SMTP server may receive "
                "the same message more than once"
            )

    organization = config_dict.get("organization", {})
    if isinstance(organization, dict):
        form_url = organization.get("onboarding_form_url")
        if isinstance(form_url, str) and form_url.startswith("http://"):
            warning_messages.append(
                "organization.onboarding_form_url uses plain http"
            )

    notifications = config_dict.get("notifications", {})
    if isinstance(notifications, dict):
        interval = notifications.get("poll_interval_seconds")
        if isinstance(interval, int) and 0 < interval < 5:
            warning_messages.append(
                f"Short notifications.poll_interval_seconds ({interval}) adds database load"
            )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """
    Emit warning messages using Python's warnings module.

    Args:
        warning_messages: List of warning messages to emit
    """
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
