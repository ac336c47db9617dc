import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

import psycopg

from contact_api.core.db import Database
from contact_api.core.errors import StorageError

log = logging.getLogger("uvicorn.error")

# columns a client may write, in statement order
WRITABLE_COLUMNS: Tuple[str, ...] = ("name", "email", "message")
MESSAGE_COLUMNS: Tuple[str, ...] = ("id", "name", "email", "message", "created_at")
_SELECT = "SELECT id, name, email, message, created_at FROM mensajes"


def update_assignments(fields: Mapping[str, Any]) -> List[Tuple[str, Any]]:
    """
    (column, value) pairs for the writable columns that carry a value.

    Keys outside WRITABLE_COLUMNS are ignored, so the generated SET clause
    only ever names known columns.
    """
    return [(col, fields[col]) for col in WRITABLE_COLUMNS if fields.get(col)]


def _row_to_dict(row: Tuple) -> Dict[str, Any]:
    return dict(zip(MESSAGE_COLUMNS, row))


class MessageRepository:
    """One parameterized statement per call against the `mensajes` table."""

    def __init__(self, db: Database):
        self.db = db

    async def create(self, fields: Mapping[str, Any]) -> int:
        try:
            async with self.db.connection() as (conn, cur):
                await cur.execute(
                    "INSERT INTO mensajes (name, email, message) VALUES (%s, %s, %s) RETURNING id",
                    tuple(fields[col] for col in WRITABLE_COLUMNS),
                )
                row = await cur.fetchone()
                await conn.commit()
        except psycopg.Error as exc:
            raise StorageError(str(exc)) from exc
        if not row:
            raise StorageError("INSERT returned no id")
        return row[0]

    async def list_all(self) -> List[Dict[str, Any]]:
        try:
            async with self.db.connection() as (conn, cur):
                await cur.execute(f"{_SELECT} ORDER BY id")
                rows = await cur.fetchall()
        except psycopg.Error as exc:
            raise StorageError(str(exc)) from exc
        return [_row_to_dict(r) for r in rows]

    async def get(self, message_id: int) -> Optional[Dict[str, Any]]:
        try:
            async with self.db.connection() as (conn, cur):
                await cur.execute(f"{_SELECT} WHERE id = %s", (message_id,))
                row = await cur.fetchone()
        except psycopg.Error as exc:
            raise StorageError(str(exc)) from exc
        return _row_to_dict(row) if row else None

    async def replace(self, message_id: int, fields: Mapping[str, Any]) -> int:
        """Overwrite all writable columns; returns the affected row count."""
        return await self._update(message_id, [(col, fields[col]) for col in WRITABLE_COLUMNS])

    async def patch(self, message_id: int, fields: Mapping[str, Any]) -> int:
        """Touch only the supplied columns; returns the affected row count."""
        assignments = update_assignments(fields)
        if not assignments:
            raise ValueError("patch needs at least one field")
        return await self._update(message_id, assignments)

    async def delete(self, message_id: int) -> int:
        try:
            async with self.db.connection() as (conn, cur):
                await cur.execute("DELETE FROM mensajes WHERE id = %s", (message_id,))
                affected = cur.rowcount
                await conn.commit()
        except psycopg.Error as exc:
            raise StorageError(str(exc)) from exc
        return affected

    async def _update(self, message_id: int, assignments: List[Tuple[str, Any]]) -> int:
        set_clause = ", ".join(f"{col} = %s" for col, _ in assignments)
        params = tuple(value for _, value in assignments) + (message_id,)
        try:
            async with self.db.connection() as (conn, cur):
                await cur.execute(f"UPDATE mensajes SET {set_clause} WHERE id = %s", params)
                affected = cur.rowcount
                await conn.commit()
        except psycopg.Error as exc:
            raise StorageError(str(exc)) from exc
        return affected
