"""HTTP routes exposing each mail kind as a single-shot function endpoint.

Every function path is registered for the common methods so the 405 answer
carries the CORS headers; any other method is mapped to the same answer by
the application's exception handler. Only POST ever reaches the dispatcher.
"""

import json
from typing import Any, Dict, Optional

from fastapi import APIRouter, Request
from starlette.concurrency import run_in_threadpool
from starlette.responses import Response

from app.domain.models import MailKind
from app.logging import get_logger
from app.notifications.models import MailValidationError
from app.notifications.payloads import parse_mail_request
from app.notifications.service import MailDispatcher

from .responses import (
    error_response,
    json_response,
    method_not_allowed,
    preflight_response,
)

logger = get_logger(__name__, component="http")

ANY_METHOD = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

FUNCTION_ROUTES: Dict[str, MailKind] = {
    "/send_congratulations_mail": MailKind.CONGRATULATIONS,
    "/send_verify_details": MailKind.VERIFY_DETAILS,
    "/send_interview_invite": MailKind.INTERVIEW_INVITE,
    "/manager_invite": MailKind.MANAGER_WELCOME,
}

# Body "type" values accepted by the combined /send_email function
SEND_EMAIL_TYPES: Dict[str, MailKind] = {
    "interview_invite": MailKind.INTERVIEW_INVITE,
    "member_welcome": MailKind.MANAGER_WELCOME,
    "congratulations": MailKind.CONGRATULATIONS,
    "verify_details": MailKind.VERIFY_DETAILS,
}
DEFAULT_SEND_EMAIL_TYPE = "interview_invite"
SEND_EMAIL_PATH = "/send_email"

router = APIRouter()


async def _read_json(request: Request) -> Any:
    raw = await request.body()
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MailValidationError("Invalid JSON body") from e


async def _dispatch(request: Request, kind: Optional[MailKind]) -> Response:
    """Shared handler: method gate, body parse, one dispatch."""
    if request.method == "OPTIONS":
        return preflight_response()

    if request.method != "POST":
        logger.info(
            f"Rejected {request.method} on {request.url.path}",
            extra={"event": "http.method_not_allowed", "method": request.method},
        )
        return method_not_allowed()

    dispatcher: MailDispatcher = request.app.state.dispatcher

    try:
        body = await _read_json(request)
        if kind is None:
            kind = _kind_from_type(body)
        mail_request = parse_mail_request(kind, body)
    except MailValidationError as e:
        logger.warning(
            f"Mail request rejected: {e}",
            extra={"event": "mail.rejected", "error_type": "validation", "path": request.url.path},
        )
        return error_response(str(e), e.status_code)

    try:
        result = await run_in_threadpool(dispatcher.send, mail_request)
    except Exception as e:
        logger.error(
            f"Unhandled error while dispatching mail: {e}",
            exc_info=True,
            extra={"event": "mail.dispatch.error", "error_type": type(e).__name__},
        )
        return error_response(str(e), 500)

    return json_response(result.to_payload(), status_code=result.status_code)


def _kind_from_type(body: Any) -> MailKind:
    if not isinstance(body, dict):
        raise MailValidationError("Invalid JSON body")

    mail_type = body.get("type") or DEFAULT_SEND_EMAIL_TYPE
    try:
        return SEND_EMAIL_TYPES[mail_type]
    except (KeyError, TypeError):
        raise MailValidationError(f"Unknown mail type: {mail_type}")


def _register_function(path: str, kind: Optional[MailKind]) -> None:
    async def endpoint(request: Request) -> Response:
        return await _dispatch(request, kind)

    endpoint.__name__ = f"function_{path.strip('/')}"
    router.add_api_route(path, endpoint, methods=ANY_METHOD, include_in_schema=True)


for _path, _kind in FUNCTION_ROUTES.items():
    _register_function(_path, _kind)

_register_function(SEND_EMAIL_PATH, None)

FUNCTION_PATHS = frozenset([*FUNCTION_ROUTES, SEND_EMAIL_PATH])


@router.get("/health")
async def health() -> Dict[str, str]:
    return {"status": "ok"}
