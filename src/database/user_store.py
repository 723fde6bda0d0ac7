"""
User record stores

``PostgresUserStore`` runs single parameterized statements against the
``users`` table through an asyncpg pool. ``InMemoryUserStore`` keeps the same
contract in a dict and backs local runs and tests.
"""

import asyncio
import itertools
import logging
from typing import Any, Dict, List, Optional

import asyncpg

logger = logging.getLogger(__name__)

USERS_TABLE = "users"
USER_COLUMNS = ("first_name", "last_name", "phone", "email", "address")


class StoreError(RuntimeError):
    """Any failure surfaced by the persistence layer"""


def _serialize_row(row) -> Dict[str, Any]:
    """Convert a record to a plain dict with ISO formatted timestamps"""
    data = dict(row)
    for key, value in data.items():
        if hasattr(value, 'isoformat'):
            data[key] = value.isoformat()
    return data


class UserStore:
    """Contract every user store implements.

    Lookups by id return ``None`` when no row matches. Every method raises
    ``StoreError`` when the backend fails.
    """

    backend_name = "abstract"

    async def insert(self, values: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    async def fetch_all(self) -> List[Dict[str, Any]]:
        raise NotImplementedError

    async def fetch_by_id(self, user_id: int) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    async def replace(self, user_id: int, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    async def delete(self, user_id: int) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    async def ping(self) -> None:
        raise NotImplementedError


class PostgresUserStore(UserStore):
    """User store backed by an asyncpg connection pool"""

    backend_name = "postgres"

    INSERT_QUERY = f"""
        INSERT INTO {USERS_TABLE} ({', '.join(USER_COLUMNS)})
        VALUES ($1, $2, $3, $4, $5)
        RETURNING *
    """
    SELECT_ALL_QUERY = f"SELECT * FROM {USERS_TABLE}"
    SELECT_ONE_QUERY = f"SELECT * FROM {USERS_TABLE} WHERE id = $1"
    UPDATE_QUERY = f"""
        UPDATE {USERS_TABLE}
        SET first_name = $1, last_name = $2, phone = $3, email = $4, address = $5
        WHERE id = $6
        RETURNING *
    """
    DELETE_QUERY = f"DELETE FROM {USERS_TABLE} WHERE id = $1 RETURNING *"

    def __init__(self, pool):
        self.pool = pool

    async def _fetch(self, query: str, *params) -> List[Dict[str, Any]]:
        logger.info(f"Executing query: {query.strip()}")
        logger.debug(f"Parameters: {list(params)}")

        try:
            async with self.pool.acquire() as conn:
                rows = await conn.fetch(query, *params)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError) as e:
            logger.error(f"Database error: {e}")
            raise StoreError(f"Database query failed: {e}") from e

        return [_serialize_row(row) for row in rows]

    async def _fetch_one(self, query: str, *params) -> Optional[Dict[str, Any]]:
        rows = await self._fetch(query, *params)
        return rows[0] if rows else None

    async def insert(self, values: Dict[str, Any]) -> Dict[str, Any]:
        row = await self._fetch_one(self.INSERT_QUERY, *(values.get(column) for column in USER_COLUMNS))
        if row is None:
            raise StoreError("Insert operation failed - no data returned")
        return row

    async def fetch_all(self) -> List[Dict[str, Any]]:
        return await self._fetch(self.SELECT_ALL_QUERY)

    async def fetch_by_id(self, user_id: int) -> Optional[Dict[str, Any]]:
        return await self._fetch_one(self.SELECT_ONE_QUERY, user_id)

    async def replace(self, user_id: int, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        params = [values.get(column) for column in USER_COLUMNS]
        return await self._fetch_one(self.UPDATE_QUERY, *params, user_id)

    async def delete(self, user_id: int) -> Optional[Dict[str, Any]]:
        return await self._fetch_one(self.DELETE_QUERY, user_id)

    async def ping(self) -> None:
        try:
            async with self.pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError) as e:
            raise StoreError(f"Database ping failed: {e}") from e


class InMemoryUserStore(UserStore):
    """Process-local user store with insertion ordered retrieval"""

    backend_name = "memory"

    def __init__(self):
        self._rows: Dict[int, Dict[str, Any]] = {}
        self._ids = itertools.count(1)

    def _build_row(self, user_id: int, values: Dict[str, Any]) -> Dict[str, Any]:
        row = {"id": user_id}
        row.update({column: values.get(column) for column in USER_COLUMNS})
        return row

    async def insert(self, values: Dict[str, Any]) -> Dict[str, Any]:
        user_id = next(self._ids)
        self._rows[user_id] = self._build_row(user_id, values)
        return dict(self._rows[user_id])

    async def fetch_all(self) -> List[Dict[str, Any]]:
        return [dict(row) for row in self._rows.values()]

    async def fetch_by_id(self, user_id: int) -> Optional[Dict[str, Any]]:
        row = self._rows.get(user_id)
        return dict(row) if row else None

    async def replace(self, user_id: int, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        if user_id not in self._rows:
            return None
        self._rows[user_id] = self._build_row(user_id, values)
        return dict(self._rows[user_id])

    async def delete(self, user_id: int) -> Optional[Dict[str, Any]]:
        row = self._rows.pop(user_id, None)
        return dict(row) if row else None

    async def ping(self) -> None:
        return None
