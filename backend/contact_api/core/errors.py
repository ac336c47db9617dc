"""
Error taxonomy for the messages API and its mapping to HTTP responses.

Every error body is a JSON object with an `error` key; handlers are
registered on the app in `contact_api/main.py`.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from contact_api.core.settings import settings

log = logging.getLogger("uvicorn.error")

ROUTE_NOT_IMPLEMENTED = "route not implemented"


class PayloadInvalid(Exception):
    """The request body is missing fields the operation requires (400)."""

    def __init__(self, body: Dict[str, Any]):
        super().__init__(body.get("error", "invalid payload"))
        self.body = body


class MessageNotFound(Exception):
    """The targeted message id does not exist (404)."""

    def __init__(self, message_id: Optional[int] = None):
        super().__init__(f"message {message_id} not found")
        self.message_id = message_id


class StorageError(Exception):
    """The database rejected the statement or could not be reached (500)."""


def error_response(status_code: int, body: Dict[str, Any]) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body)


async def _payload_invalid(request: Request, exc: PayloadInvalid):
    return error_response(400, exc.body)


async def _message_not_found(request: Request, exc: MessageNotFound):
    return error_response(404, {"error": "Message not found"})


async def _storage_error(request: Request, exc: StorageError):
    log.error(f"[db] {request.method} {request.url.path} failed: {exc}")
    body: Dict[str, Any] = {"error": "Database error"}
    if settings.expose_storage_errors:
        body["sql_error"] = str(exc)
    return error_response(500, body)


async def _http_error(request: Request, exc: StarletteHTTPException):
    # unknown paths and unsupported methods on known paths look the same
    if exc.status_code in (404, 405):
        return error_response(404, {"error": ROUTE_NOT_IMPLEMENTED})
    return error_response(exc.status_code, {"error": str(exc.detail)})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PayloadInvalid, _payload_invalid)
    app.add_exception_handler(MessageNotFound, _message_not_found)
    app.add_exception_handler(StorageError, _storage_error)
    app.add_exception_handler(StarletteHTTPException, _http_error)
