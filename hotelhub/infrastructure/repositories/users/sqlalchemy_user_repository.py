# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hotelhub.domain.roles import Role, normalize_role
from hotelhub.domain.users.entities import SessionToken as DomainSessionToken
from hotelhub.domain.users.entities import User as DomainUser
from hotelhub.domain.users.exceptions import UserAlreadyExistsError
from hotelhub.domain.users.repositories import SessionTokenRepository, UserRepository
from hotelhub.infrastructure.db.models import SessionToken, User, as_utc
from hotelhub.infrastructure.unit_of_work import unit_of_work_scope


def _to_domain(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        first_name=row.first_name,
        email=row.email,
        phone=row.phone,
        password_hash=row.password_hash,
        role=normalize_role(row.role),
        created_at=as_utc(row.created_at),
        hotel_id=row.hotel_id,
        room_number=row.room_number,
        check_in_date=row.check_in_date,
        check_out_date=row.check_out_date,
        is_active=bool(row.is_active),
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def find_by_email(self, email: str) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.query(User).filter(User.email == email.strip().lower()).first()
            return _to_domain(row) if row else None

    def find_by_id(self, user_id: int) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(User, user_id)
            return _to_domain(row) if row else None

    def add(self, user: DomainUser) -> DomainUser:
        try:
            with unit_of_work_scope(self._session_factory) as session:
                row = User(
                    first_name=user.first_name,
                    email=user.email.strip().lower(),
                    phone=user.phone,
                    password_hash=user.password_hash,
                    role=user.role.value,
                    hotel_id=user.hotel_id,
                    room_number=user.room_number,
                    check_in_date=user.check_in_date,
                    check_out_date=user.check_out_date,
                    is_active=user.is_active,
                    created_at=user.created_at,
                )
                session.add(row)
                session.flush()
                return _to_domain(row)
        except IntegrityError as exc:
            # Lost a race with a concurrent registration for the same email.
            raise UserAlreadyExistsError() from exc

    def set_role(self, user_id: int, role: Role) -> None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(User, user_id)
            if row:
                row.role = role.value

    def touch_login(self, user_id: int) -> None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(User, user_id)
            if row:
                row.last_login_at = datetime.now(UTC)


class SqlAlchemySessionTokenRepository(SessionTokenRepository):
    def __init__(
        self,
        session_factory: Callable[[], Session],
        *,
        lifetime_seconds: int = 60 * 60 * 24 * 7,
    ) -> None:
        self._session_factory = session_factory
        self._lifetime = timedelta(seconds=lifetime_seconds)

    def replace_for_user(self, user_id: int) -> DomainSessionToken:
        with unit_of_work_scope(self._session_factory) as session:
            session.query(SessionToken).filter(SessionToken.user_id == user_id).delete()
            token_value = secrets.token_urlsafe(48)
            expires_at = datetime.now(UTC) + self._lifetime
            row = SessionToken(user_id=user_id, token=token_value, expires_at=expires_at)
            session.add(row)
            return DomainSessionToken(user_id=user_id, token=token_value, expires_at=expires_at)

    def find(self, token: str) -> DomainSessionToken | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.query(SessionToken).filter(SessionToken.token == token).first()
            if not row:
                return None
            return DomainSessionToken(
                user_id=row.user_id, token=row.token, expires_at=as_utc(row.expires_at)
            )

    def revoke(self, token: str) -> None:
        with unit_of_work_scope(self._session_factory) as session:
            session.query(SessionToken).filter(SessionToken.token == token).delete()
