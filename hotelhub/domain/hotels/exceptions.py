# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from hotelhub.shared.errors.base import DomainError


class InvalidTokenError(DomainError):
    code = "qr_token_invalid"
    message = "Invalid QR code. Please scan the code displayed at the hotel."


class TokenSupersededError(InvalidTokenError):
    code = "qr_token_superseded"
    message = "This QR code has been replaced. Please scan the current code at the hotel."


class ExpiredTokenError(DomainError):
    code = "qr_token_expired"
    message = "QR code has expired. Please request a new QR code from the hotel."


class HotelNotFoundError(DomainError):
    code = "hotel_not_found"
    status = HTTPStatus.NOT_FOUND
    message = "Hotel not found. This QR code may be outdated."


class HotelInactiveError(DomainError):
    code = "hotel_inactive"
    message = "Hotel is currently inactive. Please contact hotel reception."
