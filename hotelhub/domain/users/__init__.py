# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import RegistrationRequest, Session, SessionToken, User
from .exceptions import (
    AccountInactiveError,
    HotelSelectionMismatchError,
    InvalidCredentialsError,
    RoleMismatchError,
    UnauthenticatedError,
    UserAlreadyExistsError,
)

__all__ = [
    "AccountInactiveError",
    "HotelSelectionMismatchError",
    "InvalidCredentialsError",
    "RegistrationRequest",
    "RoleMismatchError",
    "Session",
    "SessionToken",
    "UnauthenticatedError",
    "User",
    "UserAlreadyExistsError",
]
