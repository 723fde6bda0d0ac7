"""
Request validation for user payloads

Only ``email`` and ``phone`` are checked. On create both are mandatory; on
update a field is checked only when it is present in the body.
"""

import re
import logging
from typing import Any, Dict, List, Optional

from email_validator import validate_email, EmailNotValidError

from models.user import UserPayload

logger = logging.getLogger(__name__)

INVALID_VALUE = "Invalid value"

# Optional leading +, then 8-15 digits once separators are removed
MOBILE_PHONE_PATTERN = re.compile(r"\+?[0-9]{8,15}")
PHONE_SEPARATORS = re.compile(r"[\s\-.()]")


def is_valid_email(value: Optional[str]) -> bool:
    if not value:
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def is_valid_mobile_phone(value: Optional[str]) -> bool:
    if not value:
        return False
    digits = PHONE_SEPARATORS.sub("", value)
    return MOBILE_PHONE_PATTERN.fullmatch(digits) is not None


FIELD_CHECKS = (
    ("email", is_valid_email),
    ("phone", is_valid_mobile_phone),
)


def field_error(path: str, value: Any, msg: str = INVALID_VALUE, location: str = "body") -> Dict[str, Any]:
    """Build one itemized error entry"""
    return {
        "type": "field",
        "value": value,
        "msg": msg,
        "path": path,
        "location": location,
    }


def validate_user_payload(payload: UserPayload, partial: bool = False) -> List[Dict[str, Any]]:
    """Return every failing field of ``payload``; an empty list means valid.

    With ``partial`` set (update), fields absent from the body are skipped.
    """
    provided = set(payload.provided_fields())
    errors = []

    for field_name, check in FIELD_CHECKS:
        if partial and field_name not in provided:
            continue
        value = payload.get_by_request_name(field_name)
        if not check(value):
            errors.append(field_error(field_name, value))

    if errors:
        logger.info(f"User payload rejected: {[error['path'] for error in errors]}")
    return errors
