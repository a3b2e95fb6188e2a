# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Issuing the signed token a hotel prints on its registration QR code."""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any
from urllib.parse import urlencode

from hotelhub.application.interfaces import Clock, utcnow
from hotelhub.domain.hotels import (
    Hotel,
    HotelInactiveError,
    HotelNotFoundError,
    HotelRepository,
    HotelToken,
    QRImageRenderer,
    TokenClaims,
    TokenSigner,
)
from hotelhub.shared.config import QRConfig
from hotelhub.shared.logging import logger

POSTER_SIZE = 1200


@dataclass(slots=True, frozen=True)
class QRMetadata:
    hotel: Hotel
    token: HotelToken
    registration_url: str
    registration_url_base: str
    display_size: int
    print_size: int
    min_size: int
    max_size: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "hotelId": self.hotel.id,
            "hotelName": self.hotel.name,
            "address": self.hotel.address,
            "issuedAt": self.token.issued_at.isoformat(),
            "expiresAt": self.token.expires_at.isoformat(),
            "registrationUrl": self.registration_url,
            "registrationUrlBase": self.registration_url_base,
            "recommendedSizes": {
                "display": self.display_size,
                "print": self.print_size,
                "poster": POSTER_SIZE,
            },
            "sizeLimits": {"min": self.min_size, "max": self.max_size},
        }


class IssueHotelTokenUseCase:
    def __init__(
        self,
        *,
        hotels: HotelRepository,
        signer: TokenSigner,
        renderer: QRImageRenderer,
        config: QRConfig,
        clock: Clock = utcnow,
    ) -> None:
        self._hotels = hotels
        self._signer = signer
        self._renderer = renderer
        self._config = config
        self._clock = clock

    def generate(self, hotel_id: int) -> HotelToken:
        """Return the hotel's current token, issuing one if none is usable."""
        hotel = self._require_hotel(hotel_id)
        current = self._hotels.get_current_token(hotel.id)
        if current is not None and not current.is_expired(self._clock()):
            return current
        return self._issue(hotel)

    def regenerate(self, hotel_id: int) -> HotelToken:
        """Issue a new token; the previous one stops validating."""
        hotel = self._require_hotel(hotel_id)
        token = self._issue(hotel)
        logger.info(f"qr.regenerate: hotel_id={hotel.id} superseded previous token")
        return token

    @property
    def download_size(self) -> int:
        return self._config.download_size

    def registration_url(self, token: HotelToken | str) -> str:
        value = token.value if isinstance(token, HotelToken) else token
        return f"{self._registration_base()}?{urlencode({'qr': value})}"

    def clamp_size(self, size: int | None, default: int | None = None) -> int:
        if size is None:
            size = default if default is not None else self._config.display_size
        return max(self._config.min_size, min(self._config.max_size, int(size)))

    def render(self, hotel_id: int, size: int | None = None) -> bytes:
        token = self.generate(hotel_id)
        return self._renderer.render_png(self.registration_url(token), self.clamp_size(size))

    def metadata(self, hotel_id: int) -> QRMetadata:
        hotel = self._require_hotel(hotel_id)
        token = self.generate(hotel.id)
        return QRMetadata(
            hotel=hotel,
            token=token,
            registration_url=self.registration_url(token),
            registration_url_base=self._registration_base(),
            display_size=self._config.display_size,
            print_size=self._config.download_size,
            min_size=self._config.min_size,
            max_size=self._config.max_size,
        )

    def _registration_base(self) -> str:
        return f"{self._config.frontend_url}/register"

    def _require_hotel(self, hotel_id: int) -> Hotel:
        hotel = self._hotels.get(hotel_id)
        if hotel is None:
            raise HotelNotFoundError(context={"hotel_id": hotel_id})
        if not hotel.is_active:
            raise HotelInactiveError(context={"hotel_id": hotel_id})
        return hotel

    def _issue(self, hotel: Hotel) -> HotelToken:
        # JWT timestamps have whole-second precision.
        issued_at: datetime = self._clock().replace(microsecond=0)
        expires_at = issued_at + timedelta(days=self._config.token_ttl_days)
        claims = TokenClaims(
            hotel_id=hotel.id,
            token_id=secrets.token_hex(16),
            hotel_name=hotel.name,
            hotel_address=hotel.address,
            issued_at=issued_at,
            expires_at=expires_at,
        )
        token = HotelToken(
            hotel_id=hotel.id,
            token_id=claims.token_id,
            issued_at=issued_at,
            expires_at=expires_at,
            value=self._signer.sign(claims),
        )
        self._hotels.set_current_token(token)
        logger.info(
            f"qr.issue: hotel_id={hotel.id} expires_at={expires_at.isoformat()}"
        )
        return token


__all__ = ["IssueHotelTokenUseCase", "QRMetadata"]
