from __future__ import annotations

import os
import tempfile
from dataclasses import replace
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

_TMP = Path(tempfile.mkdtemp(prefix="hotelhub-tests-"))

# Settings are read once at import time, so the environment comes first.
os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP / 'hotelhub.db'}"
os.environ["LOG_FILE"] = str(_TMP / "hotelhub.log")
os.environ["SECRET_KEY"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["FRONTEND_URL"] = "https://guests.example.com"
os.environ["ENABLE_RATE_LIMIT"] = "false"
os.environ["ENABLE_CSRF"] = "false"
os.environ.pop("SUPER_ADMIN_EMAIL", None)

import pytest  # noqa: E402

from hotelhub.domain.hotels import Hotel, HotelToken  # noqa: E402
from hotelhub.domain.users.entities import SessionToken, User  # noqa: E402
from hotelhub.infrastructure.qr import JWTHotelTokenSigner  # noqa: E402
from hotelhub.shared.config import QRConfig  # noqa: E402

SECRET = os.environ["SECRET_KEY"]


class InMemoryHotelRepository:
    def __init__(self) -> None:
        self.hotels: dict[int, Hotel] = {}
        self.tokens: dict[int, HotelToken] = {}
        self._seq = 1

    def get(self, hotel_id: int) -> Hotel | None:
        return self.hotels.get(hotel_id)

    def list_active(self) -> Sequence[Hotel]:
        return [hotel for hotel in self.hotels.values() if hotel.is_active]

    def add(self, hotel: Hotel) -> Hotel:
        stored = Hotel(id=self._seq, name=hotel.name, address=hotel.address, is_active=hotel.is_active)
        self._seq += 1
        self.hotels[stored.id] = stored
        return stored

    def deactivate(self, hotel_id: int) -> None:
        hotel = self.hotels[hotel_id]
        self.hotels[hotel_id] = Hotel(id=hotel.id, name=hotel.name, address=hotel.address, is_active=False)

    def get_current_token(self, hotel_id: int) -> HotelToken | None:
        return self.tokens.get(hotel_id)

    def set_current_token(self, token: HotelToken) -> None:
        self.tokens[token.hotel_id] = token


class InMemoryUserRepository:
    def __init__(self) -> None:
        self.users: dict[int, User] = {}
        self.logins: list[int] = []
        self._seq = 1

    def find_by_email(self, email: str) -> User | None:
        key = email.strip().lower()
        return next((user for user in self.users.values() if user.email == key), None)

    def find_by_id(self, user_id: int) -> User | None:
        return self.users.get(user_id)

    def add(self, user: User) -> User:
        stored = replace(user, id=self._seq)
        self._seq += 1
        self.users[stored.id] = stored
        return stored

    def touch_login(self, user_id: int) -> None:
        self.logins.append(user_id)


class InMemoryTokenRepository:
    def __init__(self, lifetime: timedelta = timedelta(days=7)) -> None:
        self.tokens: dict[str, SessionToken] = {}
        self._lifetime = lifetime
        self._seq = 1

    def replace_for_user(self, user_id: int) -> SessionToken:
        for key, value in list(self.tokens.items()):
            if value.user_id == user_id:
                del self.tokens[key]
        token = SessionToken(
            user_id=user_id,
            token=f"session-{user_id}-{self._seq}",
            expires_at=datetime.now(UTC) + self._lifetime,
        )
        self._seq += 1
        self.tokens[token.token] = token
        return token

    def find(self, token: str) -> SessionToken | None:
        return self.tokens.get(token)

    def revoke(self, token: str) -> None:
        self.tokens.pop(token, None)

    def expire(self, token: str) -> None:
        stored = self.tokens[token]
        self.tokens[token] = SessionToken(
            user_id=stored.user_id,
            token=stored.token,
            expires_at=datetime.now(UTC) - timedelta(seconds=1),
        )


class DeterministicHasher:
    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        return hashed == f"hashed:{password}"


class FakeRenderer:
    def __init__(self) -> None:
        self.calls: list[tuple[str, int]] = []

    def render_png(self, data: str, size: int) -> bytes:
        self.calls.append((data, size))
        return b"\x89PNG\r\n\x1a\n" + data.encode()


class RecordingAudit:
    def __init__(self) -> None:
        self.events: list[dict[str, Any]] = []

    def __call__(self, action, user_id=None, ip_address=None, details=None, success=True) -> None:
        self.events.append(
            {"action": action, "details": details or {}, "success": success, "ip": ip_address}
        )


@pytest.fixture()
def hotels() -> InMemoryHotelRepository:
    return InMemoryHotelRepository()


@pytest.fixture()
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def session_tokens() -> InMemoryTokenRepository:
    return InMemoryTokenRepository()


@pytest.fixture()
def hasher() -> DeterministicHasher:
    return DeterministicHasher()


@pytest.fixture()
def renderer() -> FakeRenderer:
    return FakeRenderer()


@pytest.fixture()
def audit() -> RecordingAudit:
    return RecordingAudit()


@pytest.fixture()
def signer() -> JWTHotelTokenSigner:
    return JWTHotelTokenSigner(SECRET, issuer="hotel-platform-qr", audience="guest-registration")


@pytest.fixture()
def qr_config() -> QRConfig:
    return QRConfig(frontend_url="https://guests.example.com/")
