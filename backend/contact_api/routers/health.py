# contact_api/routers/health.py
import psycopg
from fastapi import APIRouter, Depends

from contact_api.core.db import Database
from contact_api.core.errors import StorageError
from contact_api.dependencies import get_database

router = APIRouter(prefix="/health", tags=["health"])

@router.get("")
async def health_root():
    return {"status": "ok"}

@router.get("/db")
async def health_db(db: Database = Depends(get_database)):
    try:
        async with db.connection() as (conn, cur):
            await cur.execute("""
                SELECT current_database(), current_user, version(),
                       EXISTS (SELECT 1 FROM information_schema.tables
                               WHERE table_schema='public' AND table_name='mensajes')
            """)
            db_name, db_user, pg_version, has_messages = await cur.fetchone()
    except psycopg.Error as exc:
        raise StorageError(str(exc)) from exc

    return {
        "ok": True,
        "database": db_name,
        "user": db_user,
        "server_version": pg_version,
        "tables": {"mensajes": bool(has_messages)},
    }
