# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from enum import StrEnum


class ValidationErrorType(StrEnum):
    MISSING = "missing"
    NAME_INVALID = "name_invalid"
    PHONE_INVALID = "phone_invalid"
    ROOM_INVALID = "room_invalid"
    DATE_ORDER = "date_order"
    PASSWORD_TOO_SHORT = "password_too_short"
    PASSWORD_NO_UPPERCASE = "password_no_uppercase"
    PASSWORD_NO_LOWERCASE = "password_no_lowercase"
    PASSWORD_NO_DIGIT = "password_no_digit"
    PASSWORD_NO_SPECIAL = "password_no_special"
    ROLE_INVALID = "role_invalid"
    HOTEL_REQUIRED = "hotel_required"


__all__ = ["ValidationErrorType"]
