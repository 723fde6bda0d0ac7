"""
Users service - validation and persistence for user records
"""

import re
import logging
from typing import Optional

from fastapi import Request

from models.user import UserPayload
from services.base_service import BaseService, ServiceResult
from services.validation import validate_user_payload

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "User not found"

# users.id is a SERIAL (int4) column
USER_ID_PATTERN = re.compile(r"[0-9]+")
MAX_USER_ID = 2**31 - 1


def parse_user_id(user_id: str) -> Optional[int]:
    """Return the integer id, or None when no record could carry it

    Only plain ASCII digits within the id column's range are accepted.
    """
    if not isinstance(user_id, str) or not USER_ID_PATTERN.fullmatch(user_id):
        return None
    if len(user_id) > len(str(MAX_USER_ID)):
        return None
    record_id = int(user_id)
    if record_id > MAX_USER_ID:
        return None
    return record_id


class UsersService(BaseService):
    """Service for user record operations"""

    def __init__(self, store):
        super().__init__("users", store)

    async def create_user(self, payload: UserPayload) -> ServiceResult:
        """
        Create a new user

        Args:
            payload: Request body; email and phone must both be valid

        Returns:
            ServiceResult with the stored record including its generated id
        """
        errors = validate_user_payload(payload)
        if errors:
            return ServiceResult.invalid(errors)

        logger.info(f"Creating new user: {payload.email}")
        return await self._run("Create", self.store.insert(payload.to_store_values()))

    async def list_users(self) -> ServiceResult:
        """Get every stored user in the store's natural order"""
        return await self._run("List", self.store.fetch_all())

    async def get_user_by_id(self, user_id: str) -> ServiceResult:
        """
        Get a user by its ID

        Returns:
            ServiceResult with one record, or a RESOURCE_NOT_FOUND result
        """
        record_id = parse_user_id(user_id)
        if record_id is None:
            return ServiceResult.not_found(USER_NOT_FOUND)

        result = await self._run("Get", self.store.fetch_by_id(record_id))
        if result.success and not result.data:
            return ServiceResult.not_found(USER_NOT_FOUND)
        return result

    async def update_user(self, user_id: str, payload: UserPayload) -> ServiceResult:
        """
        Replace all five fields of a user

        Fields missing from the payload are written as NULL; the update is a
        full replace, not a merge. Email and phone are validated only when
        present.
        """
        errors = validate_user_payload(payload, partial=True)
        if errors:
            return ServiceResult.invalid(errors)

        record_id = parse_user_id(user_id)
        if record_id is None:
            return ServiceResult.not_found(USER_NOT_FOUND)

        logger.info(f"Updating user {record_id}, fields provided: {payload.provided_fields()}")
        result = await self._run("Update", self.store.replace(record_id, payload.to_store_values()))
        if result.success and not result.data:
            return ServiceResult.not_found(USER_NOT_FOUND)
        return result

    async def delete_user(self, user_id: str) -> ServiceResult:
        """
        Permanently delete a user

        Returns:
            ServiceResult with the deleted record's snapshot
        """
        record_id = parse_user_id(user_id)
        if record_id is None:
            return ServiceResult.not_found(USER_NOT_FOUND)

        logger.info(f"Deleting user {record_id}")
        result = await self._run("Delete", self.store.delete(record_id))
        if result.success and not result.data:
            return ServiceResult.not_found(USER_NOT_FOUND)
        return result


def get_users_service(request: Request) -> UsersService:
    """Get the users service built for this application at startup"""
    return request.app.state.users_service
