# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Sequence

from sqlalchemy.orm import Session

from hotelhub.domain.hotels import Hotel as DomainHotel
from hotelhub.domain.hotels import HotelRepository, HotelToken
from hotelhub.infrastructure.db.models import Hotel, as_utc
from hotelhub.infrastructure.unit_of_work import unit_of_work_scope


def _to_domain(row: Hotel) -> DomainHotel:
    return DomainHotel(
        id=row.id,
        name=row.name,
        address=row.address,
        is_active=bool(row.is_active),
    )


class SqlAlchemyHotelRepository(HotelRepository):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def get(self, hotel_id: int) -> DomainHotel | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(Hotel, hotel_id)
            return _to_domain(row) if row else None

    def list_active(self) -> Sequence[DomainHotel]:
        with unit_of_work_scope(self._session_factory) as session:
            rows = (
                session.query(Hotel)
                .filter(Hotel.is_active.is_(True))
                .order_by(Hotel.name.asc(), Hotel.id.asc())
                .all()
            )
            return [_to_domain(row) for row in rows]

    def add(self, hotel: DomainHotel) -> DomainHotel:
        with unit_of_work_scope(self._session_factory) as session:
            row = Hotel(name=hotel.name, address=hotel.address, is_active=hotel.is_active)
            session.add(row)
            session.flush()
            return _to_domain(row)

    def get_current_token(self, hotel_id: int) -> HotelToken | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(Hotel, hotel_id)
            if not row or not row.qr_token or not row.qr_token_id:
                return None
            if row.qr_issued_at is None or row.qr_expires_at is None:
                return None
            return HotelToken(
                hotel_id=row.id,
                token_id=row.qr_token_id,
                issued_at=as_utc(row.qr_issued_at),
                expires_at=as_utc(row.qr_expires_at),
                value=row.qr_token,
            )

    def set_current_token(self, token: HotelToken) -> None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(Hotel, token.hotel_id)
            if row is None:
                msg = f"hotel {token.hotel_id} vanished while storing its QR token"
                raise LookupError(msg)
            row.qr_token_id = token.token_id
            row.qr_token = token.value
            row.qr_issued_at = token.issued_at
            row.qr_expires_at = token.expires_at
