# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Resolving a scanned registration token to its hotel.

The input is attacker controlled. Any failure ends in one of the hotel
domain errors; nothing else escapes :meth:`ValidateHotelTokenUseCase.execute`.
"""

from __future__ import annotations

from hotelhub.application.interfaces import AuditSink, Clock, utcnow
from hotelhub.domain.hotels import (
    ExpiredTokenError,
    HotelInactiveError,
    HotelNotFoundError,
    HotelRepository,
    InvalidTokenError,
    ResolvedHotel,
    TokenSigner,
    TokenSupersededError,
)
from hotelhub.infrastructure.audit import AuditAction, audit_log
from hotelhub.shared.logging import logger

MAX_TOKEN_LENGTH = 4096

_TOKEN_ERRORS = (ExpiredTokenError, InvalidTokenError, HotelNotFoundError, HotelInactiveError)


class ValidateHotelTokenUseCase:
    def __init__(
        self,
        *,
        hotels: HotelRepository,
        signer: TokenSigner,
        clock: Clock = utcnow,
        audit: AuditSink = audit_log,
    ) -> None:
        self._hotels = hotels
        self._signer = signer
        self._clock = clock
        self._audit = audit

    def execute(self, token: object, ip_address: str | None = None) -> ResolvedHotel:
        try:
            resolved = self._resolve(token)
        except _TOKEN_ERRORS as exc:
            self._record_failure(exc.code, exc.context, ip_address)
            raise
        except Exception as exc:
            logger.exception("qr.validate: unexpected failure, rejecting token")
            self._record_failure(InvalidTokenError.code, {"reason": "unexpected"}, ip_address)
            raise InvalidTokenError(context={"reason": "unexpected"}) from exc

        logger.info(f"qr.validate: ok hotel_id={resolved.hotel_id}")
        return resolved

    def _resolve(self, token: object) -> ResolvedHotel:
        if not isinstance(token, str) or not token.strip():
            raise InvalidTokenError(context={"reason": "empty"})
        value = token.strip()
        if len(value) > MAX_TOKEN_LENGTH:
            raise InvalidTokenError(context={"reason": "too_long"})

        claims = self._signer.peek(value)
        # Expiry is reported even when the signature would not verify.
        if claims.is_expired(self._clock()):
            raise ExpiredTokenError(context={"hotel_id": claims.hotel_id})

        verified = self._signer.verify(value)

        hotel = self._hotels.get(verified.hotel_id)
        if hotel is None:
            raise HotelNotFoundError(context={"hotel_id": verified.hotel_id})
        if not hotel.is_active:
            raise HotelInactiveError(context={"hotel_id": hotel.id})

        current = self._hotels.get_current_token(hotel.id)
        if current is None or current.token_id != verified.token_id:
            raise TokenSupersededError(context={"hotel_id": hotel.id})

        return ResolvedHotel(
            hotel_id=hotel.id,
            hotel_name=hotel.name,
            address=hotel.address,
            expires_at=verified.expires_at,
        )

    def _record_failure(self, code: str, context, ip_address: str | None) -> None:
        details = {"reason": code}
        if context:
            details.update({k: v for k, v in dict(context).items() if k != "reason"})
            if "reason" in context:
                details["detail"] = context["reason"]
        logger.warning(f"qr.validate: rejected reason={code}")
        try:
            self._audit(
                AuditAction.QR_VALIDATION_FAILED,
                ip_address=ip_address,
                details=details,
                success=False,
            )
        except Exception:
            logger.exception("qr.validate: audit sink failed")


__all__ = ["MAX_TOKEN_LENGTH", "ValidateHotelTokenUseCase"]
