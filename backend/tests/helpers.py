from contextlib import asynccontextmanager
from datetime import datetime, timezone

from contact_api.core.errors import StorageError
from contact_api.lib.messages import update_assignments


class FakeCursor:
    def __init__(self):
        self.executed = []
        self.fetchall_results = []
        self.fetchone_results = []
        self.rowcount = -1
        self.error = None

    async def execute(self, sql: str, params=None):
        if self.error is not None:
            raise self.error
        self.executed.append((sql.strip(), params))

    async def fetchall(self):
        if not self.fetchall_results:
            return []
        return self.fetchall_results.pop(0)

    async def fetchone(self):
        if not self.fetchone_results:
            return None
        return self.fetchone_results.pop(0)


class FakeConn:
    def __init__(self):
        self.committed = False

    async def commit(self):
        self.committed = True


class FakeDatabase:
    def __init__(self, cursor=None, is_open=True):
        self.cursor = cursor or FakeCursor()
        self.conn = FakeConn()
        self.is_open = is_open

    @asynccontextmanager
    async def connection(self):
        yield self.conn, self.cursor


class InMemoryRepository:
    """Behaves like MessageRepository over a dict instead of PostgreSQL."""

    def __init__(self):
        self.rows = {}
        self.next_id = 1
        self.statements = 0

    async def create(self, fields):
        self.statements += 1
        message_id = self.next_id
        self.next_id += 1
        self.rows[message_id] = {
            "id": message_id,
            "name": fields["name"],
            "email": fields["email"],
            "message": fields["message"],
            "created_at": datetime.now(timezone.utc),
        }
        return message_id

    async def list_all(self):
        self.statements += 1
        return [dict(self.rows[k]) for k in sorted(self.rows)]

    async def get(self, message_id):
        self.statements += 1
        row = self.rows.get(message_id)
        return dict(row) if row else None

    async def replace(self, message_id, fields):
        return await self.patch(message_id, fields)

    async def patch(self, message_id, fields):
        self.statements += 1
        if message_id not in self.rows:
            return 0
        self.rows[message_id].update(update_assignments(fields))
        return 1

    async def delete(self, message_id):
        self.statements += 1
        return 1 if self.rows.pop(message_id, None) else 0


class BrokenRepository:
    async def _fail(self, *args, **kwargs):
        raise StorageError('relation "mensajes" does not exist')

    create = list_all = get = replace = patch = delete = _fail


