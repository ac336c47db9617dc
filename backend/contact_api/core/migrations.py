import logging

from contact_api.core.db import Database

log = logging.getLogger("uvicorn.error")

MESSAGES_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS mensajes (
  id SERIAL PRIMARY KEY,
  name VARCHAR(100) NOT NULL,
  email VARCHAR(100) NOT NULL,
  message TEXT NOT NULL,
  created_at TIMESTAMPTZ NOT NULL DEFAULT now()
)
"""


async def ensure_messages_schema(db: Database) -> bool:
    if not db.is_open:
        log.warning("[migrations] database unavailable, skipping mensajes schema check")
        return False

    try:
        async with db.connection() as (conn, cur):
            await cur.execute(MESSAGES_TABLE_SQL)
            await conn.commit()
    except Exception as exc:
        log.error(f"[migrations] creating table mensajes failed: {exc}")
        return False

    log.info('[migrations] table "mensajes" ready')
    return True
