# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from .entities import Hotel, HotelToken, TokenClaims


class HotelRepository(Protocol):
    def get(self, hotel_id: int) -> Hotel | None: ...
    def list_active(self) -> Sequence[Hotel]: ...
    def add(self, hotel: Hotel) -> Hotel: ...
    def get_current_token(self, hotel_id: int) -> HotelToken | None: ...
    def set_current_token(self, token: HotelToken) -> None: ...


class TokenSigner(Protocol):
    def sign(self, claims: TokenClaims) -> str: ...

    def peek(self, value: str) -> TokenClaims:
        """Decode structure without checking the signature."""
        ...

    def verify(self, value: str) -> TokenClaims: ...


class QRImageRenderer(Protocol):
    def render_png(self, data: str, size: int) -> bytes: ...
