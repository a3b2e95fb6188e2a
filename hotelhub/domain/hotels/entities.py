# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Hotels and the signed registration tokens printed on their QR codes."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from hotelhub.domain.exceptions import InvariantViolation

QR_TOKEN_TYPE = "hotel_registration_qr"


@dataclass(slots=True, frozen=True)
class Hotel:
    id: int
    name: str
    address: str | None
    is_active: bool


@dataclass(slots=True, frozen=True)
class TokenClaims:
    """Decoded content of a hotel token, before or after signature checks."""

    hotel_id: int
    token_id: str
    hotel_name: str
    hotel_address: str | None
    issued_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now


@dataclass(slots=True, frozen=True)
class HotelToken:
    hotel_id: int
    token_id: str
    issued_at: datetime
    expires_at: datetime
    value: str

    def __post_init__(self) -> None:
        if self.expires_at <= self.issued_at:
            raise InvariantViolation("expiry must follow issue time", field="expires_at")
        if not self.value:
            raise InvariantViolation("token value must not be empty", field="value")

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now


@dataclass(slots=True, frozen=True)
class ResolvedHotel:
    hotel_id: int
    hotel_name: str
    address: str | None
    expires_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "hotelId": self.hotel_id,
            "hotelName": self.hotel_name,
            "address": self.address,
            "expiresAt": self.expires_at.isoformat(),
        }
