# contact_api/routers/messages.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from contact_api.core.errors import MessageNotFound, PayloadInvalid
from contact_api.core.settings import settings
from contact_api.dependencies import get_repository, read_payload
from contact_api.lib.messages import MessageRepository
from contact_api.schemas import (
    REQUIRED_FIELDS,
    MessageCreated,
    MessageOut,
    MessagePayload,
    StatusMessage,
)

router = APIRouter(tags=["messages"])
log = logging.getLogger("uvicorn.error")

# fixed bodies for POST /?test_error=...
TEST_ERRORS = {
    "validation": (
        400,
        {
            "error": "Missing fields for testing",
            "details": "Fields were omitted on purpose to test 400 Bad Request",
        },
    ),
    "database": (
        500,
        {
            "error": "Simulated database error",
            "details": "This error was forced to test 500 Internal Server Error",
        },
    ),
}


@router.post("/", response_model=MessageCreated, status_code=201)
async def create_message(
    test_error: Optional[str] = Query(default=None),
    payload: MessagePayload = Depends(read_payload),
    repo: MessageRepository = Depends(get_repository),
):
    if test_error and settings.enable_test_errors and test_error in TEST_ERRORS:
        status_code, body = TEST_ERRORS[test_error]
        log.info(f"[messages] TEST: simulating {status_code} ({test_error})")
        return JSONResponse(status_code=status_code, content=body)

    if payload.missing():
        raise PayloadInvalid({"error": "Missing required fields", "required": REQUIRED_FIELDS})

    fields = payload.provided()
    message_id = await repo.create(fields)
    log.info(f"[messages] created id={message_id}")
    log.info(
        f"[messages] received name={fields['name']!r} email={fields['email']!r} "
        f"message={fields['message']!r}"
    )
    return {
        "id": message_id,
        "message": "Message saved successfully",
        "datos_recibidos": fields,
    }


@router.get("/mensajes", response_model=List[MessageOut])
async def list_messages(repo: MessageRepository = Depends(get_repository)):
    return await repo.list_all()


@router.get("/mensajes/{message_id:int}", response_model=MessageOut)
async def get_message(message_id: int, repo: MessageRepository = Depends(get_repository)):
    row = await repo.get(message_id)
    if row is None:
        raise MessageNotFound(message_id)
    return row


@router.put("/mensajes/{message_id:int}", response_model=StatusMessage)
async def replace_message(
    message_id: int,
    payload: MessagePayload = Depends(read_payload),
    repo: MessageRepository = Depends(get_repository),
):
    if payload.missing():
        raise PayloadInvalid({"error": "All fields are required"})

    if await repo.replace(message_id, payload.provided()) == 0:
        raise MessageNotFound(message_id)
    log.info(f"[messages] replaced id={message_id}")
    return {"message": "Full update successful"}


@router.patch("/mensajes/{message_id:int}", response_model=StatusMessage)
async def patch_message(
    message_id: int,
    payload: MessagePayload = Depends(read_payload),
    repo: MessageRepository = Depends(get_repository),
):
    fields = payload.provided()
    if not fields:
        raise PayloadInvalid({"error": "At least one field must be provided"})

    if await repo.patch(message_id, fields) == 0:
        raise MessageNotFound(message_id)
    log.info(f"[messages] patched id={message_id} fields={sorted(fields)}")
    return {"message": "Partial update successful"}


@router.delete("/mensajes/{message_id:int}", response_model=StatusMessage)
async def delete_message(message_id: int, repo: MessageRepository = Depends(get_repository)):
    if await repo.delete(message_id) == 0:
        raise MessageNotFound(message_id)
    log.info(f"[messages] deleted id={message_id}")
    return {"message": "Message deleted successfully"}
