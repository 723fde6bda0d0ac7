"""
pytest configuration and fixtures for the user records API
Each test gets a fresh in-memory store; the failing store simulates an
unreachable database.
"""

import pytest
from fastapi.testclient import TestClient

from app import create_app
from database.user_store import InMemoryUserStore, StoreError, UserStore


VALID_USER = {
    "firstName": "Ann",
    "lastName": "Lee",
    "phone": "5551234567",
    "email": "ann@example.com",
    "address": "1 Main St"
}


class FailingUserStore(UserStore):
    """Store whose every call fails like a lost database connection"""

    backend_name = "failing"

    def __init__(self):
        self.calls = []

    async def _fail(self, operation: str):
        self.calls.append(operation)
        raise StoreError("connection refused")

    async def insert(self, values):
        await self._fail("insert")

    async def fetch_all(self):
        await self._fail("fetch_all")

    async def fetch_by_id(self, user_id):
        await self._fail("fetch_by_id")

    async def replace(self, user_id, values):
        await self._fail("replace")

    async def delete(self, user_id):
        await self._fail("delete")

    async def ping(self):
        await self._fail("ping")


@pytest.fixture
def valid_user():
    return dict(VALID_USER)


@pytest.fixture
def memory_store():
    return InMemoryUserStore()


@pytest.fixture
def failing_store():
    return FailingUserStore()


@pytest.fixture
def client(memory_store):
    with TestClient(create_app(memory_store)) as test_client:
        yield test_client


@pytest.fixture
def failing_client(failing_store):
    with TestClient(create_app(failing_store)) as test_client:
        yield test_client
