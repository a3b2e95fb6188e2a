# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import QR_TOKEN_TYPE, Hotel, HotelToken, ResolvedHotel, TokenClaims
from .exceptions import (
    ExpiredTokenError,
    HotelInactiveError,
    HotelNotFoundError,
    InvalidTokenError,
    TokenSupersededError,
)
from .repositories import HotelRepository, QRImageRenderer, TokenSigner

__all__ = [
    "QR_TOKEN_TYPE",
    "ExpiredTokenError",
    "Hotel",
    "HotelInactiveError",
    "HotelNotFoundError",
    "HotelRepository",
    "HotelToken",
    "InvalidTokenError",
    "QRImageRenderer",
    "ResolvedHotel",
    "TokenClaims",
    "TokenSigner",
    "TokenSupersededError",
]
