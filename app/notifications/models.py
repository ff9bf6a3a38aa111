"""Result type and exceptions for transactional mail dispatch.

The exception classes double as the error taxonomy of the HTTP layer:
validation problems are the caller's to fix (400), transport problems
are surfaced with the underlying message (500).
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


class MailError(Exception):
    """Base exception for mail dispatch errors."""

    status_code = 500


class MailValidationError(MailError):
    """Raised when a request is missing data the chosen mail kind needs."""

    status_code = 400


class MailTemplateError(MailError):
    """Raised when template rendering fails (developer misconfiguration)."""

    pass


class SMTPDeliveryError(MailError):
    """Raised when the SMTP transport rejects or fails to take a message."""

    pass


@dataclass
class MailResult:
    """Outcome of one dispatch: the message was handed to SMTP, or it was not.

    Attributes:
        success: True only when the transport accepted the message
        error: Human-readable failure reason (None on success)
        status_code: HTTP status the outcome maps to (200, 400 or 500)
        attempts: Number of transport attempts made (0 when rejected early)
    """

    success: bool
    error: Optional[str] = None
    status_code: int = 200
    attempts: int = 0

    @classmethod
    def sent(cls, attempts: int = 1) -> "MailResult":
        return cls(success=True, status_code=200, attempts=attempts)

    @classmethod
    def failed(cls, error: MailError, attempts: int = 0) -> "MailResult":
        return cls(
            success=False,
            error=str(error),
            status_code=error.status_code,
            attempts=attempts,
        )

    def to_payload(self) -> Dict[str, Any]:
        """JSON envelope returned to callers: ``{success, error?}``."""
        if self.success:
            return {"success": True}
        return {"success": False, "error": self.error}
