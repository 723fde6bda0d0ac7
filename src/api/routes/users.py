"""
User record API routes
Handlers validate through the users service and map its results to responses.
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, HTTPException, Depends

from models.user import (
    UserPayload, UserRecord, UserDeletedResponse, ErrorResponse, ValidationErrorResponse
)
from services.base_service import ServiceResult, VALIDATION_ERROR, RESOURCE_NOT_FOUND
from services.users_service import UsersService, get_users_service
from utils.error_handling import FieldValidationError

router = APIRouter()
logger = logging.getLogger(__name__)

VALIDATION_RESPONSE = {400: {"model": ValidationErrorResponse}}
NOT_FOUND_RESPONSE = {404: {"model": ErrorResponse}}
STORE_ERROR_RESPONSE = {500: {"model": ErrorResponse}}


def raise_for_result(result: ServiceResult) -> None:
    """Turn a failed service result into the matching error response"""
    if result.success:
        return
    if result.error_type == VALIDATION_ERROR:
        raise FieldValidationError(result.errors or [])
    elif result.error_type == RESOURCE_NOT_FOUND:
        raise HTTPException(status_code=404, detail=result.error)
    else:
        raise HTTPException(status_code=500, detail="Database error")


@router.post(
    "",
    response_model=UserRecord,
    responses={**VALIDATION_RESPONSE, **STORE_ERROR_RESPONSE}
)
async def create_user(
    payload: Optional[UserPayload] = None,
    users_service: UsersService = Depends(get_users_service)
):
    """Create a new user"""
    result = await users_service.create_user(payload or UserPayload())
    raise_for_result(result)
    return result.data[0]


@router.get("", response_model=List[UserRecord], responses=STORE_ERROR_RESPONSE)
async def list_users(users_service: UsersService = Depends(get_users_service)):
    """Get all users"""
    result = await users_service.list_users()
    raise_for_result(result)
    return result.data


@router.get(
    "/{user_id}",
    response_model=UserRecord,
    responses={**NOT_FOUND_RESPONSE, **STORE_ERROR_RESPONSE}
)
async def get_user(user_id: str, users_service: UsersService = Depends(get_users_service)):
    """Get a specific user by ID"""
    result = await users_service.get_user_by_id(user_id)
    raise_for_result(result)
    return result.data[0]


@router.put(
    "/{user_id}",
    response_model=UserRecord,
    responses={**VALIDATION_RESPONSE, **NOT_FOUND_RESPONSE, **STORE_ERROR_RESPONSE}
)
async def update_user(
    user_id: str,
    payload: Optional[UserPayload] = None,
    users_service: UsersService = Depends(get_users_service)
):
    """Replace a user's fields; fields left out of the body are cleared"""
    result = await users_service.update_user(user_id, payload or UserPayload())
    raise_for_result(result)
    return result.data[0]


@router.delete(
    "/{user_id}",
    response_model=UserDeletedResponse,
    responses={**NOT_FOUND_RESPONSE, **STORE_ERROR_RESPONSE}
)
async def delete_user(user_id: str, users_service: UsersService = Depends(get_users_service)):
    """Delete a user"""
    result = await users_service.delete_user(user_id)
    raise_for_result(result)
    return {"message": "User deleted successfully", "user": result.data[0]}
