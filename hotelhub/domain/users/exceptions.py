# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from hotelhub.shared.errors.base import DomainError


class UserAlreadyExistsError(DomainError):
    code = "user_already_exists"
    status = HTTPStatus.CONFLICT
    message = "User with this email already exists"


class InvalidCredentialsError(DomainError):
    code = "invalid_credentials"
    status = HTTPStatus.UNAUTHORIZED
    message = "Incorrect email or password"


class RoleMismatchError(DomainError):
    code = "role_mismatch"
    status = HTTPStatus.FORBIDDEN
    message = "Invalid login credentials for this portal"


class AccountInactiveError(DomainError):
    code = "account_inactive"
    status = HTTPStatus.UNAUTHORIZED
    message = "Your account has been deactivated. Please contact hotel reception."


class UnauthenticatedError(DomainError):
    code = "unauthenticated"
    status = HTTPStatus.UNAUTHORIZED
    message = "You are not logged in"


class HotelSelectionMismatchError(DomainError):
    code = "hotel_selection_mismatch"
    message = "Selected hotel does not match the scanned QR code"
