# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Re-validating the session cookie presented by a caller."""

from __future__ import annotations

from hotelhub.application.interfaces import Clock, utcnow
from hotelhub.domain.users.entities import Session, User
from hotelhub.domain.users.exceptions import UnauthenticatedError
from hotelhub.domain.users.repositories import SessionTokenRepository, UserRepository
from hotelhub.shared.logging import logger


class CheckAuthUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: SessionTokenRepository,
        clock: Clock = utcnow,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._clock = clock

    def execute(self, token: str | None) -> tuple[User, Session]:
        if not token:
            raise UnauthenticatedError()

        stored = self._tokens.find(token)
        if stored is None:
            raise UnauthenticatedError()

        if stored.expires_at <= self._clock():
            logger.debug(f"check_auth: session expired user_id={stored.user_id}")
            self._tokens.revoke(token)
            raise UnauthenticatedError()

        user = self._users.find_by_id(stored.user_id)
        if user is None or not user.is_active:
            raise UnauthenticatedError()

        session = Session(
            user_id=user.id,
            role=user.role,
            expires_at=stored.expires_at,
            hotel_id=user.hotel_id,
            token=stored.token,
        )
        return user, session
