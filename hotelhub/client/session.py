# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Client view of the authenticated session.

:func:`normalize_session` is the only place that reads session payloads;
everything after it works with :class:`ClientSession` and :class:`Role`.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from http import HTTPStatus
from typing import Any

from hotelhub.client.api import ApiError, HotelHubClient
from hotelhub.client.config import load_client_config
from hotelhub.domain.roles import FORBIDDEN_PATH, Role, UnknownRoleError, landing_path, normalize_role
from hotelhub.shared.logging import logger


class SessionPayloadError(ValueError):
    pass


class LoginTimeoutError(Exception):
    code = "login_timeout"
    message = "Login is taking too long. Please check your connection and try again."

    def __init__(self) -> None:
        super().__init__(self.message)


class ForbiddenError(Exception):
    code = "forbidden"

    def __init__(self, message: str, redirect: str = FORBIDDEN_PATH) -> None:
        super().__init__(message)
        self.message = message
        self.redirect = redirect


@dataclass(slots=True, frozen=True)
class ClientSession:
    user_id: int
    role: Role
    first_name: str | None = None
    email: str | None = None
    hotel_id: int | None = None
    expires_at: datetime | None = None

    @property
    def landing_path(self) -> str:
        return landing_path(self.role, self.hotel_id)


def _as_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def normalize_session(payload: Any) -> ClientSession:
    if not isinstance(payload, Mapping):
        raise SessionPayloadError("session payload must be an object")

    body = payload.get("data") if isinstance(payload.get("data"), Mapping) else payload
    user = body.get("user")
    if not isinstance(user, Mapping):
        raise SessionPayloadError("session payload has no user")

    user_id = _as_int(user.get("id", user.get("_id")))
    if user_id is None:
        raise SessionPayloadError("session user has no id")

    raw_role = body.get("role") or user.get("role") or payload.get("role")
    try:
        role = normalize_role(raw_role)
    except UnknownRoleError as exc:
        raise SessionPayloadError(f"unknown role {raw_role!r}") from exc

    expires_raw = body.get("expiresAt") or payload.get("expiresAt")
    expires_at = None
    if isinstance(expires_raw, str):
        try:
            expires_at = datetime.fromisoformat(expires_raw)
        except ValueError:
            expires_at = None

    hotel = user.get("hotelId", user.get("hotel"))
    if isinstance(hotel, Mapping):
        hotel = hotel.get("id", hotel.get("_id"))

    return ClientSession(
        user_id=user_id,
        role=role,
        first_name=user.get("firstName"),
        email=user.get("email"),
        hotel_id=_as_int(hotel),
        expires_at=expires_at,
    )


def _log_late_login(task: asyncio.Future) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.warning(f"session.login: abandoned request failed: {exc!r}")


class SessionService:
    def __init__(self, client: HotelHubClient, *, login_timeout: float | None = None) -> None:
        self._client = client
        self._login_timeout = (
            load_client_config().login_timeout if login_timeout is None else login_timeout
        )
        self.session: ClientSession | None = None
        self.loading = False

    @property
    def landing_path(self) -> str | None:
        return self.session.landing_path if self.session else None

    async def login(self, email: str, password: str, role: Role | str) -> ClientSession:
        asserted = normalize_role(role)
        self.loading = True
        # The request keeps running after a timeout; only the wait is abandoned.
        task = asyncio.ensure_future(self._client.login(email, password, asserted.value))
        try:
            payload = await asyncio.wait_for(asyncio.shield(task), self._login_timeout)
        except TimeoutError:
            logger.warning(f"session.login: no answer after {self._login_timeout}s")
            task.add_done_callback(_log_late_login)
            raise LoginTimeoutError() from None
        except ApiError as exc:
            if exc.status == HTTPStatus.FORBIDDEN:
                raise ForbiddenError(exc.message) from exc
            raise
        finally:
            self.loading = False

        return self.establish(payload)

    def establish(self, payload: Any) -> ClientSession:
        self.session = normalize_session(payload)
        logger.info(
            f"session: established user_id={self.session.user_id} role={self.session.role.value}"
        )
        return self.session

    async def check_auth(self) -> ClientSession | None:
        """Re-validate the cookie session; a logged-out caller is not an error."""
        try:
            payload = await self._client.check_auth()
        except ApiError as exc:
            if exc.status != HTTPStatus.UNAUTHORIZED:
                raise
            logger.debug("session.check_auth: not authenticated")
            self.session = None
            return None
        return self.establish(payload)

    async def logout(self) -> None:
        try:
            await self._client.logout()
        finally:
            self.session = None


__all__ = [
    "ClientSession",
    "ForbiddenError",
    "LoginTimeoutError",
    "SessionPayloadError",
    "SessionService",
    "normalize_session",
]
