"""
Base service layer for store-backed resources
"""

import logging
from typing import Any, Awaitable, Dict, List, Optional
from dataclasses import dataclass

from database.user_store import StoreError

logger = logging.getLogger(__name__)

# Error types carried by ServiceResult
VALIDATION_ERROR = "VALIDATION_ERROR"
RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
DATABASE_ERROR = "DATABASE_ERROR"


@dataclass
class ServiceResult:
    """Result from service operation"""
    success: bool
    data: Optional[List[Dict[str, Any]]] = None
    count: int = 0
    error: Optional[str] = None
    error_type: Optional[str] = None
    errors: Optional[List[Dict[str, Any]]] = None

    @classmethod
    def ok(cls, data: List[Dict[str, Any]]) -> "ServiceResult":
        return cls(success=True, data=data, count=len(data))

    @classmethod
    def invalid(cls, errors: List[Dict[str, Any]]) -> "ServiceResult":
        return cls(
            success=False,
            error="Request validation failed",
            error_type=VALIDATION_ERROR,
            errors=errors
        )

    @classmethod
    def not_found(cls, message: str) -> "ServiceResult":
        return cls(success=False, error=message, error_type=RESOURCE_NOT_FOUND)


class BaseService:
    """Base service that runs store operations and converts failures to results"""

    def __init__(self, resource_name: str, store):
        self.resource_name = resource_name
        self.store = store
        logger.info(f"BaseService initialized for resource: {resource_name} ({store.backend_name} store)")

    async def _run(self, operation: str, pending: Awaitable[Any]) -> ServiceResult:
        """
        Await a store call and wrap its outcome

        Args:
            operation: Name used in log messages
            pending: Awaitable store call returning a row, a list of rows or None

        Returns:
            ServiceResult with the rows, an empty result when nothing matched,
            or a DATABASE_ERROR result when the store failed
        """
        try:
            outcome = await pending
        except StoreError as e:
            logger.error(f"{operation} operation failed for {self.resource_name}: {e}", exc_info=True)
            return ServiceResult(
                success=False,
                error="Database error",
                error_type=DATABASE_ERROR
            )

        if outcome is None:
            return ServiceResult(success=True, data=[], count=0)
        if isinstance(outcome, list):
            return ServiceResult.ok(outcome)
        return ServiceResult.ok([outcome])
