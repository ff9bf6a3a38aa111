"""HTTP surface: one endpoint per mail kind plus a combined /send_email."""

from .app import build_app, build_dispatcher, create_app
from .responses import CORS_HEADERS
from .routes import FUNCTION_ROUTES, SEND_EMAIL_TYPES

__all__ = [
    "create_app",
    "build_app",
    "build_dispatcher",
    "CORS_HEADERS",
    "FUNCTION_ROUTES",
    "SEND_EMAIL_TYPES",
]
