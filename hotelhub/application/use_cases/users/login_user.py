# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from hotelhub.domain.roles import Role, normalize_role
from hotelhub.domain.users.entities import Session, User
from hotelhub.domain.users.exceptions import (
    AccountInactiveError,
    InvalidCredentialsError,
    RoleMismatchError,
)
from hotelhub.domain.users.repositories import PasswordHasher, SessionTokenRepository, UserRepository
from hotelhub.infrastructure.auth.login_attempts import (
    get_lockout_remaining,
    is_account_locked,
    record_login_attempt,
)
from hotelhub.shared.errors.base import AppError


class AccountLockedError(AppError):
    def __init__(self, lockout_remaining: float = 0) -> None:
        super().__init__(
            code="account_locked",
            status=HTTPStatus.TOO_MANY_REQUESTS,
            context={"lockout_remaining_seconds": round(lockout_remaining, 1)},
            message="Too many failed attempts, try again later",
        )


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: SessionTokenRepository,
        password_hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._password_hasher = password_hasher

    def execute(
        self,
        email: str,
        password: str,
        role: Role | str,
        ip_address: str | None = None,
    ) -> tuple[User, Session]:
        key = email.strip().lower()
        if is_account_locked(key):
            raise AccountLockedError(lockout_remaining=get_lockout_remaining(key))

        asserted = normalize_role(role)
        user = self._users.find_by_email(key)
        password_valid = user is not None and self._password_hasher.verify(
            password, user.password_hash
        )

        if not password_valid:
            record_login_attempt(key, success=False, ip_address=ip_address)
            raise InvalidCredentialsError()

        if not user.is_active:
            raise AccountInactiveError()

        # The portal a user signs in through must match the stored role.
        if user.role is not asserted:
            raise RoleMismatchError(context={"portal": asserted.value})

        record_login_attempt(key, success=True, ip_address=ip_address)

        self._users.touch_login(user.id)

        token = self._tokens.replace_for_user(user.id)
        session = Session(
            user_id=user.id,
            role=user.role,
            expires_at=token.expires_at,
            hotel_id=user.hotel_id,
            token=token.token,
        )
        return user, session
