"""
Tests for the asyncpg repositories against a recording fake connection.
"""
from contextlib import asynccontextmanager

import pytest

from posts_service.domain.models import Role
from posts_service.infrastructure.database.repositories import PostRepository, UserRepository

from conftest import BASE_DATE


POST_ROW = {
    "id": 1,
    "title": "Zebra crossing",
    "content": None,
    "deleted": False,
    "author_id": 2,
    "author_name": "Alice",
    "date": BASE_DATE,
}
LIKE_ROWS = [
    {"id": 101, "user_id": 2, "post_id": 1, "created_at": BASE_DATE},
    {"id": 102, "user_id": 3, "post_id": 1, "created_at": BASE_DATE},
]


class RecordingConnection:
    """Stands in for an asyncpg connection, recording every statement"""

    def __init__(self, row=None, rows=None, fail_on=None):
        self.row = row
        self.rows = rows or []
        self.fail_on = fail_on
        self.statements = []

    def _record(self, query, args):
        statement = " ".join(query.split())
        self.statements.append((statement, args))
        if self.fail_on and statement.startswith(self.fail_on):
            raise ConnectionError("connection lost")

    async def fetch(self, query, *args):
        self._record(query, args)
        return self.rows

    async def fetchrow(self, query, *args):
        self._record(query, args)
        return self.row

    async def execute(self, query, *args):
        self._record(query, args)
        return f"DELETE {len(self.rows)}"


class FakeDatabase:
    """DatabaseConnection double tracking transactions and pool-level calls"""

    def __init__(self, conn):
        self.conn = conn
        self.committed = 0
        self.rolled_back = 0
        self.outside = []

    @asynccontextmanager
    async def transaction(self):
        try:
            yield self.conn
        except Exception:
            self.rolled_back += 1
            raise
        self.committed += 1

    async def fetch_one(self, query, *args):
        self.outside.append(" ".join(query.split()))
        return self.conn.row

    async def fetch_all(self, query, *args):
        self.outside.append(" ".join(query.split()))
        return self.conn.rows

    async def execute(self, query, *args):
        self.outside.append(" ".join(query.split()))


def statements_of(conn):
    return [statement for statement, _ in conn.statements]


@pytest.mark.asyncio
async def test_delete_runs_in_one_transaction():
    conn = RecordingConnection(row=POST_ROW, rows=LIKE_ROWS)
    db = FakeDatabase(conn)

    post = await PostRepository(db).delete(1)

    assert post.id == 1
    assert post.like_count == 2
    assert db.committed == 1
    assert db.outside == []
    statements = statements_of(conn)
    assert statements[0].startswith("SELECT id, user_id, post_id, created_at FROM likes")
    assert statements[1] == "DELETE FROM likes WHERE post_id = $1"
    assert statements[2].startswith("DELETE FROM posts WHERE id = $1")


@pytest.mark.asyncio
async def test_failed_post_delete_rolls_back_like_removal():
    conn = RecordingConnection(row=POST_ROW, rows=LIKE_ROWS, fail_on="DELETE FROM posts")
    db = FakeDatabase(conn)

    with pytest.raises(ConnectionError):
        await PostRepository(db).delete(1)

    assert "DELETE FROM likes WHERE post_id = $1" in statements_of(conn)
    assert db.rolled_back == 1
    assert db.committed == 0
    assert db.outside == []


@pytest.mark.asyncio
async def test_update_reads_likes_in_the_same_transaction():
    conn = RecordingConnection(row={**POST_ROW, "title": "Zebras"}, rows=LIKE_ROWS)
    db = FakeDatabase(conn)

    post = await PostRepository(db).update(1, {"title": "Zebras", "deleted": True})

    assert post.title == "Zebras"
    assert post.like_count == 2
    assert db.committed == 1
    assert db.outside == []
    (update, update_args), (likes, likes_args) = conn.statements
    assert "SET title = $1, deleted = $2 WHERE id = $3" in update
    assert update_args == ("Zebras", True, 1)
    assert likes.startswith("SELECT id, user_id, post_id, created_at FROM likes")
    assert likes_args == (1,)


@pytest.mark.asyncio
async def test_update_rejects_unknown_fields_before_touching_the_database():
    db = FakeDatabase(RecordingConnection(row=POST_ROW))

    with pytest.raises(ValueError):
        await PostRepository(db).update(1, {"author_id": 3})

    assert db.committed == 0
    assert db.conn.statements == []


@pytest.mark.asyncio
async def test_read_by_id_missing_post_skips_likes():
    conn = RecordingConnection(row=None, rows=LIKE_ROWS)

    assert await PostRepository(FakeDatabase(conn)).read_by_id(7) is None
    assert len(conn.statements) == 1


@pytest.mark.asyncio
async def test_user_update_maps_role_and_fields():
    row = {"id": 2, "name": "Alicia", "email": "alice@example.com", "role": "ADMIN", "banned": False}
    db = FakeDatabase(RecordingConnection(row=row))

    user = await UserRepository(db).update(2, {"name": "Alicia"})

    assert user.name == "Alicia"
    assert user.role is Role.ADMIN
    assert "SET name = $1 WHERE id = $2" in db.outside[0]

    with pytest.raises(ValueError):
        await UserRepository(db).update(2, {"role": "admin"})
