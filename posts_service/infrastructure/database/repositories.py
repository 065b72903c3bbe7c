"""
Repository implementations - Data access layer
"""
from collections import defaultdict
from typing import Optional, Dict, Any, List

import asyncpg

from ...domain.models import Post, Like, User, Role
from ...domain.repositories import IPostRepository, IUserRepository
from .connection import DatabaseConnection


POST_COLUMNS = "id, title, content, deleted, author_id, author_name, date"
LIKE_COLUMNS = "id, user_id, post_id, created_at"
USER_COLUMNS = "id, name, email, role, banned"


class PostRepository(IPostRepository):
    """Post repository implementation using PostgreSQL"""

    UPDATABLE_FIELDS = ("title", "content", "deleted")

    def __init__(self, db: DatabaseConnection):
        self.db = db

    def _row_to_like(self, row: asyncpg.Record) -> Like:
        """Convert database row to Like model"""
        return Like(**dict(row))

    def _row_to_post(self, row: Optional[asyncpg.Record], likes: Optional[List[Like]] = None) -> Optional[Post]:
        """Convert database row to Post model"""
        if not row:
            return None
        return Post(**dict(row), likes=likes)

    async def _likes_for(self, conn: asyncpg.Connection, post_id: int) -> List[Like]:
        rows = await conn.fetch(
            f"SELECT {LIKE_COLUMNS} FROM likes WHERE post_id = $1 ORDER BY created_at ASC",
            post_id
        )
        return [self._row_to_like(row) for row in rows]

    async def create(self, title: str, content: Optional[str], author_name: str, author_id: int) -> Post:
        """Create a new post"""
        row = await self.db.fetch_one(
            f"""
            INSERT INTO posts (title, content, author_name, author_id)
            VALUES ($1, $2, $3, $4)
            RETURNING {POST_COLUMNS}
            """,
            title,
            content,
            author_name,
            author_id
        )
        return self._row_to_post(row, likes=[])

    async def read_all(self) -> List[Post]:
        """Read every post with its likes attached"""
        post_rows = await self.db.fetch_all(f"SELECT {POST_COLUMNS} FROM posts ORDER BY id ASC")
        like_rows = await self.db.fetch_all(f"SELECT {LIKE_COLUMNS} FROM likes ORDER BY created_at ASC")

        likes_by_post: Dict[int, List[Like]] = defaultdict(list)
        for row in like_rows:
            like = self._row_to_like(row)
            likes_by_post[like.post_id].append(like)

        return [self._row_to_post(row, likes=likes_by_post.get(row["id"], [])) for row in post_rows]

    async def read_by_id(self, post_id: int) -> Optional[Post]:
        """Find post by ID"""
        async with self.db.transaction() as conn:
            row = await conn.fetchrow(
                f"SELECT {POST_COLUMNS} FROM posts WHERE id = $1",
                post_id
            )
            if not row:
                return None
            return self._row_to_post(row, likes=await self._likes_for(conn, post_id))

    async def update(self, post_id: int, updates: Dict[str, Any]) -> Post:
        """Update post fields"""
        update_fields = []
        values = []
        param_count = 1

        for field, value in updates.items():
            if field not in self.UPDATABLE_FIELDS:
                raise ValueError(f"Field {field!r} cannot be updated")
            update_fields.append(f"{field} = ${param_count}")
            values.append(value)
            param_count += 1

        values.append(post_id)

        query = f"""
            UPDATE posts
            SET {", ".join(update_fields)}
            WHERE id = ${param_count}
            RETURNING {POST_COLUMNS}
        """

        async with self.db.transaction() as conn:
            row = await conn.fetchrow(query, *values)
            return self._row_to_post(row, likes=await self._likes_for(conn, post_id))

    async def delete(self, post_id: int) -> Post:
        """Remove a post and its likes"""
        async with self.db.transaction() as conn:
            likes = await self._likes_for(conn, post_id)
            await conn.execute("DELETE FROM likes WHERE post_id = $1", post_id)
            row = await conn.fetchrow(
                f"DELETE FROM posts WHERE id = $1 RETURNING {POST_COLUMNS}",
                post_id
            )
        return self._row_to_post(row, likes=likes)

    async def add_like(self, post_id: int, user_id: int) -> Like:
        """Record a like of a post by a user"""
        row = await self.db.fetch_one(
            f"""
            INSERT INTO likes (user_id, post_id)
            VALUES ($1, $2)
            RETURNING {LIKE_COLUMNS}
            """,
            user_id,
            post_id
        )
        return self._row_to_like(row)


class UserRepository(IUserRepository):
    """User repository implementation using PostgreSQL"""

    UPDATABLE_FIELDS = ("name", "email")

    def __init__(self, db: DatabaseConnection):
        self.db = db

    def _row_to_user(self, row: Optional[asyncpg.Record]) -> Optional[User]:
        """Convert database row to User model"""
        if not row:
            return None
        data = dict(row)
        data["role"] = Role(data["role"].lower())
        return User(**data)

    async def read_all(self) -> List[User]:
        """Read every user"""
        rows = await self.db.fetch_all(f"SELECT {USER_COLUMNS} FROM users ORDER BY id ASC")
        return [self._row_to_user(row) for row in rows]

    async def find_by_id(self, user_id: int) -> Optional[User]:
        """Find user by ID"""
        row = await self.db.fetch_one(
            f"SELECT {USER_COLUMNS} FROM users WHERE id = $1",
            user_id
        )
        return self._row_to_user(row)

    async def count(self) -> int:
        """Count users"""
        return await self.db.fetch_value("SELECT COUNT(*) FROM users")

    async def update_banned(self, user_id: int, banned: bool) -> User:
        """Set user's banned flag"""
        row = await self.db.fetch_one(
            f"UPDATE users SET banned = $1 WHERE id = $2 RETURNING {USER_COLUMNS}",
            banned,
            user_id
        )
        return self._row_to_user(row)

    async def update(self, user_id: int, updates: Dict[str, Any]) -> Optional[User]:
        """Update profile fields"""
        update_fields = []
        values = []
        param_count = 1

        for field, value in updates.items():
            if field not in self.UPDATABLE_FIELDS:
                raise ValueError(f"Field {field!r} cannot be updated")
            update_fields.append(f"{field} = ${param_count}")
            values.append(value)
            param_count += 1

        values.append(user_id)

        query = f"""
            UPDATE users
            SET {", ".join(update_fields)}
            WHERE id = ${param_count}
            RETURNING {USER_COLUMNS}
        """

        row = await self.db.fetch_one(query, *values)
        return self._row_to_user(row)
