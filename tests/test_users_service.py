"""
Users service: validation short-circuits the store and store failures
become DATABASE_ERROR results
"""

import pytest

from models.user import UserPayload
from services.base_service import VALIDATION_ERROR, RESOURCE_NOT_FOUND, DATABASE_ERROR
from services.users_service import UsersService, parse_user_id


def payload(**fields):
    return UserPayload.model_validate(fields)


@pytest.mark.parametrize("raw,expected", [
    ("1", 1),
    ("42", 42),
    ("2147483647", 2147483647),
    ("abc", None),
    ("1.5", None),
    ("", None),
    ("1_0", None),
    (" 7", None),
    ("7 ", None),
    ("+7", None),
    ("-7", None),
    ("\u0667", None),
    ("2147483648", None),
    ("9" * 5000, None),
])
def test_parse_user_id(raw, expected):
    assert parse_user_id(raw) == expected


@pytest.mark.asyncio
async def test_create_returns_stored_record(memory_store, valid_user):
    service = UsersService(memory_store)

    result = await service.create_user(payload(**valid_user))

    assert result.success
    assert result.count == 1
    assert result.data[0]["first_name"] == "Ann"
    assert result.data[0]["id"] is not None


@pytest.mark.asyncio
async def test_invalid_create_never_reaches_store(failing_store):
    service = UsersService(failing_store)

    result = await service.create_user(payload(email="bad", phone="1"))

    assert not result.success
    assert result.error_type == VALIDATION_ERROR
    assert len(result.errors) == 2
    assert failing_store.calls == []


@pytest.mark.asyncio
async def test_store_failure_is_reported_without_detail(failing_store, valid_user):
    service = UsersService(failing_store)

    result = await service.create_user(payload(**valid_user))

    assert result.error_type == DATABASE_ERROR
    assert result.error == "Database error"
    assert failing_store.calls == ["insert"]


@pytest.mark.asyncio
async def test_get_missing_user_is_not_found(memory_store):
    service = UsersService(memory_store)

    result = await service.get_user_by_id("99")

    assert result.error_type == RESOURCE_NOT_FOUND
    assert result.error == "User not found"


@pytest.mark.asyncio
async def test_non_numeric_id_is_not_found_without_store_call(failing_store):
    service = UsersService(failing_store)

    for result in (
        await service.get_user_by_id("abc"),
        await service.update_user("abc", payload(firstName="Ann")),
        await service.delete_user("abc"),
    ):
        assert result.error_type == RESOURCE_NOT_FOUND
    assert failing_store.calls == []


@pytest.mark.asyncio
async def test_update_validates_before_looking_up_id(memory_store):
    service = UsersService(memory_store)

    result = await service.update_user("99", payload(email="nope"))

    assert result.error_type == VALIDATION_ERROR


@pytest.mark.asyncio
async def test_update_is_full_replace(memory_store, valid_user):
    service = UsersService(memory_store)
    created = (await service.create_user(payload(**valid_user))).data[0]

    result = await service.update_user(str(created["id"]), payload(firstName="Anna"))

    assert result.data[0] == {
        "id": created["id"],
        "first_name": "Anna",
        "last_name": None,
        "phone": None,
        "email": None,
        "address": None
    }


@pytest.mark.asyncio
async def test_delete_then_delete_again(memory_store, valid_user):
    service = UsersService(memory_store)
    created = (await service.create_user(payload(**valid_user))).data[0]

    first = await service.delete_user(str(created["id"]))
    second = await service.delete_user(str(created["id"]))

    assert first.success and first.data[0] == created
    assert second.error_type == RESOURCE_NOT_FOUND


@pytest.mark.asyncio
async def test_list_failure(failing_store):
    result = await UsersService(failing_store).list_users()

    assert result.error_type == DATABASE_ERROR
