# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from hotelhub.domain.exceptions import InvariantViolation
from hotelhub.domain.roles import Role, landing_path


@dataclass(slots=True, frozen=True)
class User:

    id: int
    first_name: str
    email: str
    phone: str | None
    password_hash: str
    role: Role
    created_at: datetime
    hotel_id: int | None = None
    room_number: str | None = None
    check_in_date: date | None = None
    check_out_date: date | None = None
    is_active: bool = True

    def public_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "firstName": self.first_name,
            "email": self.email,
            "role": self.role.value,
            "hotelId": self.hotel_id,
            "roomNumber": self.room_number,
            "checkInDate": self.check_in_date.isoformat() if self.check_in_date else None,
            "checkOutDate": self.check_out_date.isoformat() if self.check_out_date else None,
        }


@dataclass(slots=True, frozen=True)
class SessionToken:

    user_id: int
    token: str
    expires_at: datetime


@dataclass(slots=True, frozen=True)
class Session:
    """Authenticated identity as seen by every authorization check."""

    user_id: int
    role: Role
    expires_at: datetime
    hotel_id: int | None = None
    token: str | None = None

    @property
    def landing_path(self) -> str:
        return landing_path(self.role, self.hotel_id)

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now


@dataclass(slots=True, frozen=True)
class RegistrationRequest:
    first_name: str
    email: str
    phone: str
    password: str
    check_in_date: date
    check_out_date: date
    selected_hotel_id: int | None = None
    room_number: str | None = None
    qr_based: bool = False
    qr_token: str | None = None

    def __post_init__(self) -> None:
        if self.check_out_date < self.check_in_date:
            raise InvariantViolation(
                "check-out date must not be earlier than check-in date",
                field="check_out_date",
            )
        if self.qr_based and not self.qr_token and self.selected_hotel_id is None:
            raise InvariantViolation("QR registration needs a token", field="qr_token")
        if not self.qr_token and self.selected_hotel_id is None:
            raise InvariantViolation("a hotel must be selected", field="selected_hotel_id")
