# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from hotelhub.application.use_cases.qr.validate_token import ValidateHotelTokenUseCase
from hotelhub.application.use_cases.users.check_auth import CheckAuthUseCase
from hotelhub.application.use_cases.users.login_user import LoginUserUseCase
from hotelhub.application.use_cases.users.logout_user import LogoutUserUseCase
from hotelhub.application.use_cases.users.register_guest import RegisterGuestUseCase
from hotelhub.domain.users.exceptions import RoleMismatchError
from hotelhub.infrastructure.audit import AuditAction, audit_log
from hotelhub.infrastructure.auth_middleware import session_cookie
from hotelhub.interfaces.http.dto.auth import (
    AuthSuccessDTO,
    LoginRequestDTO,
    RegisterRequestDTO,
    SessionDTO,
    ValidateQRRequestDTO,
)
from hotelhub.interfaces.http.utils import clear_session_cookies, client_ip, set_session_cookies
from hotelhub.shared.errors.base import AppError
from hotelhub.shared.errors.validation import raise_validation_error
from hotelhub.shared.logging import logger
from hotelhub.shared.middleware.csrf import csrf_protect
from hotelhub.shared.middleware.rate_limit import rate_limit


class AuthController:
    def __init__(
        self,
        *,
        validate_token_use_case: ValidateHotelTokenUseCase,
        register_use_case: RegisterGuestUseCase,
        login_use_case: LoginUserUseCase,
        check_auth_use_case: CheckAuthUseCase,
        logout_use_case: LogoutUserUseCase,
    ) -> None:
        self._validate_token_use_case = validate_token_use_case
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._check_auth_use_case = check_auth_use_case
        self._logout_use_case = logout_use_case

    @rate_limit(limit=30, window_seconds=60.0)
    def validate_qr(self) -> tuple[Response, int]:
        try:
            dto = ValidateQRRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        resolved = self._validate_token_use_case.execute(dto.qr_token, ip_address=client_ip())
        audit_log(
            AuditAction.QR_VALIDATED,
            ip_address=client_ip(),
            details={"hotel_id": resolved.hotel_id},
        )
        return jsonify(resolved.to_dict()), 200

    @rate_limit(limit=5, window_seconds=60.0)
    def register(self) -> tuple[Response, int]:
        try:
            dto = RegisterRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        user, session = self._register_use_case.execute(dto.to_domain(), ip_address=client_ip())

        audit_log(
            AuditAction.REGISTER,
            user_id=user.id,
            ip_address=client_ip(),
            details={"hotel_id": user.hotel_id, "qr_based": bool(dto.qr_token)},
            success=True,
        )

        response = jsonify(SessionDTO.from_session(user, session).to_payload())
        set_session_cookies(response, session)
        logger.info(f"auth.register: ok user_id={user.id}")
        return response, 201

    @rate_limit(limit=10, window_seconds=60.0)
    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        ip_address = client_ip()

        try:
            user, session = self._login_use_case.execute(
                dto.email, dto.password, dto.role, ip_address
            )
        except RoleMismatchError:
            audit_log(
                AuditAction.LOGIN_ROLE_MISMATCH,
                ip_address=ip_address,
                details={"portal": dto.role.value},
                success=False,
            )
            raise
        except AppError as exc:
            audit_log(
                AuditAction.LOGIN_FAILED,
                ip_address=ip_address,
                details={"reason": exc.code, "portal": dto.role.value},
                success=False,
            )
            raise

        audit_log(
            AuditAction.LOGIN_SUCCESS,
            user_id=user.id,
            ip_address=ip_address,
            details={"portal": dto.role.value},
            success=True,
        )

        response = jsonify(SessionDTO.from_session(user, session).to_payload())
        set_session_cookies(response, session)
        logger.info(f"auth.login: ok user_id={user.id} role={session.role.value}")
        return response, 200

    def check(self) -> tuple[Response, int]:
        user, session = self._check_auth_use_case.execute(session_cookie())
        return jsonify(SessionDTO.from_session(user, session).to_payload()), 200

    @csrf_protect
    def logout(self) -> tuple[Response, int]:
        token = session_cookie()
        self._logout_use_case.execute(token)

        audit_log(
            AuditAction.LOGOUT,
            user_id=None,
            ip_address=client_ip(),
            details={},
            success=True,
        )

        response = jsonify(AuthSuccessDTO().model_dump())
        clear_session_cookies(response)
        logger.info("auth.logout: ok")
        return response, 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api/auth")
        bp.add_url_rule("/validate-qr", view_func=self.validate_qr, methods=["POST"])
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/check", view_func=self.check, methods=["GET"])
        bp.add_url_rule("/logout", view_func=self.logout, methods=["DELETE", "POST"])
        return bp
