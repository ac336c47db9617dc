# contact_api/schemas.py
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

REQUIRED_FIELDS: List[str] = ["name", "email", "message"]


class MessagePayload(BaseModel):
    """
    Body of POST / PUT / PATCH requests.

    Every field is optional here; each operation decides which subset it
    requires. `nombre` and `mensaje` are accepted for older form clients.
    """
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = Field(default=None, validation_alias=AliasChoices("name", "nombre"))
    email: Optional[str] = None
    message: Optional[str] = Field(default=None, validation_alias=AliasChoices("message", "mensaje"))

    @field_validator("name", "email", "message", mode="before")
    @classmethod
    def _as_text(cls, value):
        # numbers are stored as their text; objects, lists and booleans count as absent
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return str(value)
        if isinstance(value, str):
            return value
        return None

    def provided(self) -> Dict[str, str]:
        return {f: getattr(self, f) for f in REQUIRED_FIELDS if getattr(self, f)}

    def missing(self) -> List[str]:
        return [f for f in REQUIRED_FIELDS if not getattr(self, f)]


class MessageOut(BaseModel):
    id: int
    name: str
    email: str
    message: str
    created_at: Optional[datetime] = None


class ReceivedFields(BaseModel):
    name: str
    email: str
    message: str


class MessageCreated(BaseModel):
    id: int
    message: str
    datos_recibidos: ReceivedFields


class StatusMessage(BaseModel):
    message: str
