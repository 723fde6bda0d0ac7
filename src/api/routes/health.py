"""
Health check API route
"""

from datetime import datetime, timezone
from fastapi import APIRouter, HTTPException, Depends

from database.user_store import StoreError
from services.users_service import UsersService, get_users_service

router = APIRouter()


@router.get("")
async def health_check(users_service: UsersService = Depends(get_users_service)):
    """Health check - reports unhealthy only when the store cannot be reached"""
    try:
        await users_service.store.ping()
    except StoreError as e:
        raise HTTPException(status_code=503, detail=f"Health check failed: {str(e)}")

    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "store": users_service.store.backend_name
    }
