"""FastAPI application assembly for the mail functions."""

import os
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config.environment import EnvironmentConfig
from app.config.loader import load_config
from app.config.models import AppConfig
from app.logging import get_logger
from app.logging.config import configure_logging
from app.logging.context import log_context, new_request_id
from app.notifications.service import MailDispatcher

from .responses import method_not_allowed
from .routes import FUNCTION_PATHS, router

logger = get_logger(__name__, component="http")

REQUEST_ID_HEADER = "X-Request-ID"


def create_app(dispatcher: MailDispatcher) -> FastAPI:
    """Build the application around an explicitly constructed dispatcher.

    Args:
        dispatcher: MailDispatcher shared by all requests

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Recruit Notify",
        description="Transactional candidate emails for the recruitment portal",
        version="1.0.0",
    )
    app.state.dispatcher = dispatcher

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or new_request_id()
        with log_context(request_id=request_id, path=request.url.path):
            response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    @app.exception_handler(StarletteHTTPException)
    async def function_method_gate(request: Request, exc: StarletteHTTPException):
        # Routing rejects unregistered methods before any endpoint runs
        if exc.status_code == 405 and request.url.path in FUNCTION_PATHS:
            logger.info(
                f"Rejected {request.method} on {request.url.path}",
                extra={"event": "http.method_not_allowed", "method": request.method},
            )
            return method_not_allowed()
        return await http_exception_handler(request, exc)

    app.include_router(router)
    return app


def build_dispatcher(app_config: AppConfig, env_config: EnvironmentConfig) -> MailDispatcher:
    return MailDispatcher(
        env_config=env_config,
        email_config=app_config.email,
        organization=app_config.organization,
    )


def build_app(config_path: Optional[Path] = None) -> FastAPI:
    """Application factory for ``uvicorn --factory app.web.app:build_app``.

    Loads configuration (failing fast when SMTP secrets are missing),
    configures logging and wires the dispatcher.
    """
    if config_path is None and os.getenv("APP_CONFIG"):
        config_path = Path(os.environ["APP_CONFIG"])

    app_config, env_config = load_config(config_path)
    configure_logging(
        level=env_config.log_level or app_config.logging.level,
        format_type=app_config.logging.format,
        environment=os.getenv("ENVIRONMENT", "local"),
    )

    logger.info(
        "Mail functions ready",
        extra={
            "event": "http.app.ready",
            "smtp_host": env_config.smtp_host,
            "smtp_port": env_config.smtp_port,
            "max_retries": app_config.email.max_retries,
        },
    )
    return create_app(build_dispatcher(app_config, env_config))
