"""
Database connection and pool management
"""

import asyncpg
import logging
from typing import Optional

from config.settings import DATABASE_URL, DB_POOL_MIN_SIZE, DB_POOL_MAX_SIZE, DB_COMMAND_TIMEOUT

logger = logging.getLogger(__name__)


async def init_database(dsn: Optional[str] = None) -> asyncpg.Pool:
    """Create the connection pool and verify it can reach the database.

    The pool is returned to the caller instead of being kept in module
    state; the application lifespan owns it and hands it to the store.
    """
    dsn = dsn or DATABASE_URL
    if not dsn:
        raise ValueError("DATABASE_URL environment variable is required for the postgres user store")

    db_pool = await asyncpg.create_pool(
        dsn,
        min_size=DB_POOL_MIN_SIZE,
        max_size=DB_POOL_MAX_SIZE,
        command_timeout=DB_COMMAND_TIMEOUT,
        statement_cache_size=0  # Fix for pgbouncer compatibility
    )

    # Test connection
    async with db_pool.acquire() as conn:
        await conn.fetchval("SELECT 1")

    logger.info("Database initialized successfully")
    return db_pool


async def close_database(db_pool: Optional[asyncpg.Pool]) -> None:
    """Close database connection pool"""
    if db_pool:
        await db_pool.close()
    logger.info("Database connections closed")
