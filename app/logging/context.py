"""Context propagation for structured logging.

Fields pushed here (request_id, mail_kind, user_id, ...) are attached to
every log record emitted inside the scope. Backed by contextvars, so each
request thread or task sees only its own fields.
"""

import uuid
from contextvars import ContextVar, Token
from typing import Any, Dict, Optional


LogContextVar: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the current logging context."""
    return LogContextVar.get().copy()


def push_log_context(**kwargs) -> Token:
    """Merge fields into the logging context.

    Returns:
        Token for pop_log_context()

    Example:
        >>> token = push_log_context(request_id="abc123", mail_kind="verify-details")
        >>> pop_log_context(token)
    """
    current = LogContextVar.get()
    return LogContextVar.set({**current, **kwargs})


def pop_log_context(token: Token) -> None:
    """Restore the logging context to the state captured by token."""
    LogContextVar.reset(token)


def clear_log_context() -> None:
    """Clear all logging context fields (mainly for tests)."""
    LogContextVar.set({})


def new_request_id() -> str:
    """Short random identifier used to correlate the logs of one request."""
    return uuid.uuid4().hex[:12]


class log_context:
    """Context manager for scoped logging context.

    Example:
        >>> with log_context(request_id="abc123"):
        ...     logger.info("Dispatching mail")  # includes request_id
    """

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.token: Optional[Token] = None

    def __enter__(self):
        self.token = push_log_context(**self.kwargs)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.token is not None:
            pop_log_context(self.token)
        return False
