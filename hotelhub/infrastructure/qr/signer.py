# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""HS256 signing of hotel registration tokens.

Each hotel signs with its own key (the application secret suffixed with the
hotel id), so a token minted for one hotel never verifies for another.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import jwt

from hotelhub.domain.hotels import (
    QR_TOKEN_TYPE,
    ExpiredTokenError,
    InvalidTokenError,
    TokenClaims,
    TokenSigner,
)


class JWTHotelTokenSigner(TokenSigner):
    def __init__(
        self,
        secret_key: str,
        *,
        issuer: str,
        audience: str,
        algorithm: str = "HS256",
    ) -> None:
        self._secret_key = secret_key
        self._issuer = issuer
        self._audience = audience
        self._algorithm = algorithm

    def _key_for(self, hotel_id: int) -> str:
        return f"{self._secret_key}{hotel_id}"

    def sign(self, claims: TokenClaims) -> str:
        payload: dict[str, Any] = {
            "type": QR_TOKEN_TYPE,
            "hotelId": claims.hotel_id,
            "hotelName": claims.hotel_name,
            "hotelAddress": claims.hotel_address,
            "generatedAt": claims.issued_at.isoformat(),
            "jti": claims.token_id,
            "iat": int(claims.issued_at.timestamp()),
            "exp": int(claims.expires_at.timestamp()),
            "iss": self._issuer,
            "aud": self._audience,
        }
        return jwt.encode(payload, self._key_for(claims.hotel_id), algorithm=self._algorithm)

    def peek(self, value: str) -> TokenClaims:
        try:
            payload = jwt.decode(value, options={"verify_signature": False})
        except jwt.PyJWTError as exc:
            raise InvalidTokenError(context={"reason": "malformed"}) from exc
        return _claims_from_payload(payload)

    def verify(self, value: str) -> TokenClaims:
        claims = self.peek(value)
        try:
            payload = jwt.decode(
                value,
                self._key_for(claims.hotel_id),
                algorithms=[self._algorithm],
                audience=self._audience,
                issuer=self._issuer,
                options={"require": ["exp", "iat", "iss", "aud", "jti"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise ExpiredTokenError() from exc
        except jwt.PyJWTError as exc:
            raise InvalidTokenError(context={"reason": type(exc).__name__}) from exc
        return _claims_from_payload(payload)


def _claims_from_payload(payload: Any) -> TokenClaims:
    if not isinstance(payload, dict) or payload.get("type") != QR_TOKEN_TYPE:
        raise InvalidTokenError(context={"reason": "wrong_type"})

    hotel_id = payload.get("hotelId")
    # bool is an int subclass
    if isinstance(hotel_id, bool) or not isinstance(hotel_id, int | str):
        raise InvalidTokenError(context={"reason": "missing_hotel"})
    try:
        hotel_id = int(hotel_id)
        issued_at = datetime.fromtimestamp(int(payload["iat"]), UTC)
        expires_at = datetime.fromtimestamp(int(payload["exp"]), UTC)
    except (KeyError, TypeError, ValueError, OverflowError, OSError) as exc:
        raise InvalidTokenError(context={"reason": "bad_claims"}) from exc

    token_id = payload.get("jti")
    if not isinstance(token_id, str) or not token_id:
        raise InvalidTokenError(context={"reason": "missing_jti"})

    address = payload.get("hotelAddress")
    return TokenClaims(
        hotel_id=hotel_id,
        token_id=token_id,
        hotel_name=str(payload.get("hotelName") or ""),
        hotel_address=address if isinstance(address, str) else None,
        issued_at=issued_at,
        expires_at=expires_at,
    )
