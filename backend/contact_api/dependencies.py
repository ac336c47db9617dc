# contact_api/dependencies.py
import json
import logging

from fastapi import Request

from contact_api.core.db import Database
from contact_api.lib.messages import MessageRepository
from contact_api.schemas import MessagePayload

log = logging.getLogger("uvicorn.error")


def get_database(request: Request) -> Database:
    return request.app.state.db


def get_repository(request: Request) -> MessageRepository:
    return MessageRepository(get_database(request))


async def read_payload(request: Request) -> MessagePayload:
    """
    Decode the whole request body as a message payload.

    Bodies that are not a JSON object are read as `{}`, so they fail the
    operation's field checks instead of erroring out here.
    """
    raw = await request.body()
    try:
        data = json.loads(raw) if raw else {}
    except (ValueError, RecursionError):
        log.info(f"[messages] {request.method} {request.url.path}: body is not valid JSON, using {{}}")
        data = {}
    if not isinstance(data, dict):
        data = {}
    return MessagePayload.model_validate(data)
