"""
Validation rules for user payloads
"""

import pytest

from models.user import UserPayload
from services.validation import is_valid_email, is_valid_mobile_phone, validate_user_payload


@pytest.mark.parametrize("value", ["ann@example.com", "first.last+tag@mail.example.org"])
def test_valid_emails(value):
    assert is_valid_email(value)


@pytest.mark.parametrize("value", [None, "", "not-an-email", "ann@", "@example.com", "ann example@example.com"])
def test_invalid_emails(value):
    assert not is_valid_email(value)


@pytest.mark.parametrize("value", ["5551234567", "+15551234567", "555-123-4567", "(555) 123 4567", "+44 7911 123456"])
def test_valid_mobile_phones(value):
    assert is_valid_mobile_phone(value)


@pytest.mark.parametrize("value", [None, "", "123", "phone-number", "1234567", "+1234567890123456", "555-CALL-NOW"])
def test_invalid_mobile_phones(value):
    assert not is_valid_mobile_phone(value)


def test_create_reports_every_failing_field():
    payload = UserPayload.model_validate({"email": "not-an-email", "phone": "123"})

    errors = validate_user_payload(payload)

    assert [error["path"] for error in errors] == ["email", "phone"]
    assert errors[0] == {
        "type": "field",
        "value": "not-an-email",
        "msg": "Invalid value",
        "path": "email",
        "location": "body"
    }


def test_create_requires_email_and_phone():
    errors = validate_user_payload(UserPayload())

    assert {error["path"] for error in errors} == {"email", "phone"}


def test_create_does_not_check_names_or_address():
    payload = UserPayload.model_validate({
        "firstName": "", "lastName": "", "address": "",
        "email": "ann@example.com", "phone": "5551234567"
    })

    assert validate_user_payload(payload) == []


def test_update_skips_absent_fields():
    payload = UserPayload.model_validate({"firstName": "Ann"})

    assert validate_user_payload(payload, partial=True) == []


def test_update_checks_present_fields():
    payload = UserPayload.model_validate({"email": "ann@example.com", "phone": "12"})

    errors = validate_user_payload(payload, partial=True)

    assert [error["path"] for error in errors] == ["phone"]


def test_update_checks_fields_sent_as_null():
    payload = UserPayload.model_validate({"email": None})

    errors = validate_user_payload(payload, partial=True)

    assert [error["path"] for error in errors] == ["email"]


def test_payload_maps_camel_case_to_columns():
    payload = UserPayload.model_validate({"firstName": "Ann", "email": "ann@example.com"})

    assert payload.provided_fields() == ["firstName", "email"]
    assert payload.to_store_values() == {
        "first_name": "Ann",
        "last_name": None,
        "phone": None,
        "email": "ann@example.com",
        "address": None
    }
