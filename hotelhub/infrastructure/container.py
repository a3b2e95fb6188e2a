# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from functools import cached_property

from hotelhub.application.services.password_hashing import WerkzeugPasswordHasher
from hotelhub.application.use_cases.qr.issue_token import IssueHotelTokenUseCase
from hotelhub.application.use_cases.qr.validate_token import ValidateHotelTokenUseCase
from hotelhub.application.use_cases.users.check_auth import CheckAuthUseCase
from hotelhub.application.use_cases.users.login_user import LoginUserUseCase
from hotelhub.application.use_cases.users.logout_user import LogoutUserUseCase
from hotelhub.application.use_cases.users.register_guest import RegisterGuestUseCase
from hotelhub.infrastructure.db import SessionLocal
from hotelhub.infrastructure.qr import JWTHotelTokenSigner, QRCodePNGRenderer
from hotelhub.infrastructure.repositories.hotels.sqlalchemy_hotel_repository import (
    SqlAlchemyHotelRepository,
)
from hotelhub.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemySessionTokenRepository,
    SqlAlchemyUserRepository,
)
from hotelhub.interfaces.http.controllers.auth_controller import AuthController
from hotelhub.interfaces.http.controllers.hotels_controller import HotelsController
from hotelhub.interfaces.http.controllers.qr_controller import QRController
from hotelhub.shared.config import AppConfig, load_config


class Container:
    def __init__(self, config: AppConfig | None = None) -> None:
        self._config = config or load_config()

    @property
    def config(self) -> AppConfig:
        return self._config

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher()

    # Repositories

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(SessionLocal)

    @cached_property
    def session_token_repository(self) -> SqlAlchemySessionTokenRepository:
        return SqlAlchemySessionTokenRepository(
            SessionLocal, lifetime_seconds=self._config.session.lifetime_seconds
        )

    @cached_property
    def hotel_repository(self) -> SqlAlchemyHotelRepository:
        return SqlAlchemyHotelRepository(SessionLocal)

    # QR codes

    @cached_property
    def token_signer(self) -> JWTHotelTokenSigner:
        return JWTHotelTokenSigner(
            self._config.secret_key,
            issuer=self._config.qr.issuer,
            audience=self._config.qr.audience,
        )

    @cached_property
    def qr_renderer(self) -> QRCodePNGRenderer:
        return QRCodePNGRenderer()

    @cached_property
    def issue_token_use_case(self) -> IssueHotelTokenUseCase:
        return IssueHotelTokenUseCase(
            hotels=self.hotel_repository,
            signer=self.token_signer,
            renderer=self.qr_renderer,
            config=self._config.qr,
        )

    @cached_property
    def validate_token_use_case(self) -> ValidateHotelTokenUseCase:
        return ValidateHotelTokenUseCase(
            hotels=self.hotel_repository,
            signer=self.token_signer,
        )

    # Users and sessions

    @cached_property
    def register_guest_use_case(self) -> RegisterGuestUseCase:
        return RegisterGuestUseCase(
            users=self.user_repository,
            tokens=self.session_token_repository,
            hotels=self.hotel_repository,
            password_hasher=self.password_hasher,
            validate_token=self.validate_token_use_case,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            tokens=self.session_token_repository,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def check_auth_use_case(self) -> CheckAuthUseCase:
        return CheckAuthUseCase(
            users=self.user_repository,
            tokens=self.session_token_repository,
        )

    @cached_property
    def logout_user_use_case(self) -> LogoutUserUseCase:
        return LogoutUserUseCase(tokens=self.session_token_repository)

    # Controllers

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            validate_token_use_case=self.validate_token_use_case,
            register_use_case=self.register_guest_use_case,
            login_use_case=self.login_user_use_case,
            check_auth_use_case=self.check_auth_use_case,
            logout_use_case=self.logout_user_use_case,
        )

    @cached_property
    def hotels_controller(self) -> HotelsController:
        return HotelsController(hotels=self.hotel_repository)

    @cached_property
    def qr_controller(self) -> QRController:
        return QRController(issue_use_case=self.issue_token_use_case)


container = Container()
