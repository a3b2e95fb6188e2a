# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Guest registration field rules, shared by the API and the form controller."""

from __future__ import annotations

import re
from datetime import date

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from hotelhub.shared.errors.validation_types import ValidationErrorType

PHONE_PATTERN = re.compile(r"^\+?[\d\s\-().]{7,20}$")
ROOM_PATTERN = re.compile(r"^[A-Za-z0-9\-]{1,16}$")
PASSWORD_MIN_LENGTH = 8
_SPECIAL = re.compile(r"[!@#$%^&*(),.?\":{}|<>_\-+=\[\]\\\/;'`~]")


def check_password_policy(value: str) -> str:
    if len(value) < PASSWORD_MIN_LENGTH:
        raise PydanticCustomError(
            ValidationErrorType.PASSWORD_TOO_SHORT,
            "Password must be at least {min_length} characters long",
            {"min_length": PASSWORD_MIN_LENGTH},
        )
    if not re.search(r"[A-Z]", value):
        raise PydanticCustomError(
            ValidationErrorType.PASSWORD_NO_UPPERCASE,
            "Password must contain at least one uppercase letter",
            {},
        )
    if not re.search(r"[a-z]", value):
        raise PydanticCustomError(
            ValidationErrorType.PASSWORD_NO_LOWERCASE,
            "Password must contain at least one lowercase letter",
            {},
        )
    if not re.search(r"\d", value):
        raise PydanticCustomError(
            ValidationErrorType.PASSWORD_NO_DIGIT,
            "Password must contain at least one digit",
            {},
        )
    if not _SPECIAL.search(value):
        raise PydanticCustomError(
            ValidationErrorType.PASSWORD_NO_SPECIAL,
            "Password must contain at least one special character",
            {},
        )
    return value


class GuestRegistrationSchema(BaseModel):
    model_config = ConfigDict(validate_by_name=True, validate_by_alias=True)

    first_name: str = Field(alias="firstName", max_length=50)
    email: EmailStr
    phone: str
    password: str = Field(max_length=128)
    check_in_date: date = Field(alias="checkInDate")
    check_out_date: date = Field(alias="checkOutDate")
    room_number: str | None = Field(None, alias="roomNumber")
    qr_based: bool = Field(False, alias="qrBased")
    qr_token: str | None = Field(None, alias="qrToken", max_length=4096)
    # Declared last so the hotel rule can see the token.
    selected_hotel_id: int | None = Field(
        None, alias="selectedHotelId", validate_default=True
    )

    @field_validator("first_name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise PydanticCustomError(ValidationErrorType.MISSING, "First name is required", {})
        if any(ch.isdigit() for ch in value):
            raise PydanticCustomError(
                ValidationErrorType.NAME_INVALID, "First name must not contain digits", {}
            )
        return value

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("phone")
    @classmethod
    def _check_phone(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise PydanticCustomError(ValidationErrorType.MISSING, "Phone number is required", {})
        if not PHONE_PATTERN.match(value):
            raise PydanticCustomError(
                ValidationErrorType.PHONE_INVALID,
                "Please enter a valid phone number",
                {"pattern": PHONE_PATTERN.pattern},
            )
        return value

    @field_validator("password")
    @classmethod
    def _check_password(cls, value: str) -> str:
        return check_password_policy(value)

    @field_validator("check_out_date")
    @classmethod
    def _check_dates(cls, value: date, info: ValidationInfo) -> date:
        check_in = info.data.get("check_in_date")
        if check_in is not None and value < check_in:
            raise PydanticCustomError(
                ValidationErrorType.DATE_ORDER,
                "Check-out date must be after check-in date",
                {"check_in_date": check_in.isoformat()},
            )
        return value

    @field_validator("room_number")
    @classmethod
    def _check_room(cls, value: str | None) -> str | None:
        value = (value or "").strip()
        if not value:
            return None
        if not ROOM_PATTERN.match(value):
            raise PydanticCustomError(
                ValidationErrorType.ROOM_INVALID, "Room number may only contain letters, digits and dashes", {}
            )
        return value

    @field_validator("qr_token")
    @classmethod
    def _blank_token(cls, value: str | None) -> str | None:
        return (value or "").strip() or None

    @field_validator("selected_hotel_id")
    @classmethod
    def _check_hotel(cls, value: int | None, info: ValidationInfo) -> int | None:
        if value is None and not info.data.get("qr_token"):
            raise PydanticCustomError(
                ValidationErrorType.HOTEL_REQUIRED, "Please select a hotel or scan its QR code", {}
            )
        return value


__all__ = ["GuestRegistrationSchema", "PHONE_PATTERN", "check_password_policy"]
