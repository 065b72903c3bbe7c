"""
Database connection and utilities
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import asyncpg

from ...config import settings

logger = logging.getLogger(__name__)


class DatabaseConnection:
    """Database connection manager"""

    def __init__(self):
        self.pool: Optional[asyncpg.Pool] = None

    async def connect(self):
        """Create database connection pool"""
        self.pool = await asyncpg.create_pool(
            settings.DATABASE_URL,
            min_size=1,
            max_size=settings.DB_POOL_SIZE,
            command_timeout=settings.DB_COMMAND_TIMEOUT,
        )
        logger.info(f"Database pool created with size {settings.DB_POOL_SIZE}")

    async def disconnect(self):
        """Close database connection pool"""
        if self.pool:
            await self.pool.close()
            logger.info("Database pool closed")

    async def fetch_one(self, query: str, *args):
        """Fetch a single row"""
        async with self.pool.acquire() as conn:
            return await conn.fetchrow(query, *args)

    async def fetch_all(self, query: str, *args):
        """Fetch all rows"""
        async with self.pool.acquire() as conn:
            return await conn.fetch(query, *args)

    async def fetch_value(self, query: str, *args):
        """Fetch the first column of the first row"""
        async with self.pool.acquire() as conn:
            return await conn.fetchval(query, *args)

    async def execute(self, query: str, *args):
        """Execute a query without returning results"""
        async with self.pool.acquire() as conn:
            return await conn.execute(query, *args)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[asyncpg.Connection]:
        """Run several statements on one connection inside a transaction"""
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                yield conn


# Global database instance
db_connection = DatabaseConnection()
