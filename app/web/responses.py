"""Response helpers carrying the cross-origin contract of the mail functions.

Browsers call the mail functions directly from the portal, so every
response (success, rejection, 405, preflight) carries the same CORS
headers.
"""

from typing import Any, Dict

from starlette.responses import JSONResponse, Response

CORS_HEADERS: Dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Credentials": "true",
    "Content-Type": "application/json",
}


def json_response(payload: Dict[str, Any], status_code: int = 200) -> JSONResponse:
    return JSONResponse(payload, status_code=status_code, headers=dict(CORS_HEADERS))


def error_response(error: str, status_code: int) -> JSONResponse:
    return json_response({"success": False, "error": error}, status_code=status_code)


def preflight_response() -> Response:
    """Empty 200 answer to an OPTIONS preflight."""
    return Response(content=b"", status_code=200, headers=dict(CORS_HEADERS))


def method_not_allowed() -> JSONResponse:
    return error_response("Method not allowed", 405)
