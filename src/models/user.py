"""
User-related Pydantic models

Request bodies arrive with camelCase keys (``firstName``) while records are
returned with the table's snake_case columns (``first_name``). That rename is
part of the public contract and happens only here, in ``to_store_values``.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

# camelCase request key -> snake_case store column
FIELD_COLUMNS = {
    "firstName": "first_name",
    "lastName": "last_name",
    "phone": "phone",
    "email": "email",
    "address": "address",
}


class UserPayload(BaseModel):
    """Body of POST /users and PUT /users/{id}"""
    model_config = ConfigDict(populate_by_name=True)

    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None

    def provided_fields(self) -> List[str]:
        """camelCase names of the fields present in the request body"""
        return [
            field.alias or name
            for name, field in type(self).model_fields.items()
            if name in self.model_fields_set
        ]

    def get_by_request_name(self, request_name: str) -> Optional[str]:
        return getattr(self, FIELD_COLUMNS[request_name])

    def to_store_values(self) -> Dict[str, Any]:
        """All five columns; fields missing from the body are written as NULL"""
        return {column: getattr(self, column) for column in FIELD_COLUMNS.values()}


class UserRecord(BaseModel):
    """A stored user row. Extra columns of the table are passed through."""
    model_config = ConfigDict(extra="allow")

    id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None


class UserDeletedResponse(BaseModel):
    message: str
    user: UserRecord


class FieldError(BaseModel):
    """One itemized validation failure"""
    type: str = "field"
    value: Any = None
    msg: str = "Invalid value"
    path: str
    location: str = "body"


class ValidationErrorResponse(BaseModel):
    errors: List[FieldError]


class ErrorResponse(BaseModel):
    error: str
