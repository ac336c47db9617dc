# contact_api/main.py
from contextlib import asynccontextmanager
import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from contact_api.core.db import Database
from contact_api.core.errors import register_error_handlers
from contact_api.core.migrations import ensure_messages_schema
from contact_api.core.settings import settings
from contact_api.routers.health import router as health_router
from contact_api.routers.messages import router as messages_router

log = logging.getLogger("uvicorn.error")

CORS_METHODS = "GET, POST, PUT, PATCH, DELETE, OPTIONS"
CORS_HEADERS = "Content-Type, Authorization"

ENDPOINTS = [
    ("POST", "/", "create message"),
    ("GET", "/mensajes", "list all"),
    ("GET", "/mensajes/:id", "get one"),
    ("PUT", "/mensajes/:id", "full update"),
    ("PATCH", "/mensajes/:id", "partial update"),
    ("DELETE", "/mensajes/:id", "delete"),
]


def _log_endpoints() -> None:
    log.info(f"[main] {settings.api_title} on http://{settings.host}:{settings.port}")
    log.info("[main] available endpoints:")
    for method, path, what in ENDPOINTS:
        log.info(f"[main]   {method:<6} {path:<14} - {what}")
    if settings.enable_test_errors:
        log.info("[main] HTTP error checks:")
        log.info("[main]   POST /?test_error=validation  - force 400 Bad Request")
        log.info("[main]   POST /?test_error=database    - force 500 Internal Server Error")
        log.info("[main]   GET  /missing-route           - 404 Not Found")


@asynccontextmanager
async def lifespan(app: FastAPI):
    db: Database = app.state.db
    # a failed connection is logged, not fatal
    if await db.open():
        await ensure_messages_schema(db)
    _log_endpoints()
    try:
        yield
    finally:
        await db.close()


app = FastAPI(title=settings.api_title, lifespan=lifespan, redirect_slashes=False)
app.state.db = Database(settings)
register_error_handlers(app)


@app.middleware("http")
async def cors_and_catch_all(request: Request, call_next):
    if request.method == "OPTIONS":
        response = Response(status_code=204)
    else:
        try:
            response = await call_next(request)
        except Exception:
            log.exception(f"[main] unhandled error on {request.method} {request.url.path}")
            response = JSONResponse(status_code=500, content={"error": "Internal server error"})

    response.headers["Access-Control-Allow-Origin"] = settings.cors_allow_origin
    response.headers["Access-Control-Allow-Methods"] = CORS_METHODS
    response.headers["Access-Control-Allow-Headers"] = CORS_HEADERS
    return response


# Routers
app.include_router(messages_router)
app.include_router(health_router)


def run() -> None:
    uvicorn.run("contact_api.main:app", host=settings.host, port=settings.port)
