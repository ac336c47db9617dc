import logging
from contextlib import asynccontextmanager
from typing import Optional

from psycopg_pool import AsyncConnectionPool, PoolClosed

from contact_api.core.settings import Settings

log = logging.getLogger("uvicorn.error")


def _normalize_conninfo(url: str) -> str:
    """Normalize the database connection string for psycopg_pool."""
    if url.startswith("postgresql+psycopg2://") or url.startswith("postgresql+psycopg://"):
        return "postgresql://" + url.split("://", 1)[1]
    return url


class Database:
    """
    Owns the connection pool for one process.

    Opened by the app lifespan, closed on shutdown, and handed to request
    handlers through a dependency (see `contact_api/dependencies.py`).
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._pool: Optional[AsyncConnectionPool] = None

    @property
    def is_open(self) -> bool:
        return self._pool is not None and not self._pool.closed

    async def open(self) -> bool:
        """
        Open the pool and wait for the first connection.

        Returns False instead of raising when the server cannot be reached;
        the app keeps serving and storage calls fail per request.
        """
        if self.is_open:
            return True
        timeout = self.settings.db_connect_timeout
        self._pool = AsyncConnectionPool(
            _normalize_conninfo(self.settings.database_url),
            min_size=self.settings.db_pool_min_size,
            max_size=self.settings.db_pool_max_size,
            timeout=timeout,
            kwargs={"connect_timeout": max(1, int(timeout))},
            open=False,
        )
        try:
            await self._pool.open(wait=True, timeout=timeout)
        except Exception as exc:
            log.error(f"[db] could not connect to PostgreSQL: {exc}")
            log.error("[db] recommendations:")
            log.error("[db]   1. check that the PostgreSQL server is running")
            log.error("[db]   2. make sure the database named in DATABASE_URL exists")
            log.error('[db]   3. try: psql "$DATABASE_URL" -c "SELECT 1"')
            await self._pool.close()
            return False
        log.info("[db] connected to PostgreSQL")
        return True

    async def close(self) -> None:
        """Cleanly close the connection pool."""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None

    @asynccontextmanager
    async def connection(self):
        """Borrow one connection and cursor for the duration of the block."""
        if self._pool is None:
            raise PoolClosed("database pool is not open")
        async with self._pool.connection() as conn:
            async with conn.cursor() as cur:
                yield conn, cur
