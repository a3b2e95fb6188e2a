# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import base64
from http import HTTPStatus
from io import BytesIO

from flask import Blueprint, Response, g, jsonify, request, send_file
from pydantic import ValidationError

from hotelhub.application.use_cases.qr.issue_token import IssueHotelTokenUseCase
from hotelhub.domain.hotels import HotelToken
from hotelhub.domain.roles import Role
from hotelhub.infrastructure.audit import AuditAction, audit_log
from hotelhub.infrastructure.auth_middleware import require_role
from hotelhub.interfaces.http.dto.qr import QRQueryDTO, QRTokenDTO
from hotelhub.interfaces.http.utils import client_ip
from hotelhub.shared.errors.base import AccessDeniedError, AppError
from hotelhub.shared.errors.validation import raise_validation_error
from hotelhub.shared.logging import logger
from hotelhub.shared.middleware.csrf import csrf_protect


class HotelScopeRequiredError(AppError):
    def __init__(self) -> None:
        super().__init__(
            code="hotel_scope_required",
            status=HTTPStatus.BAD_REQUEST,
            message="Pass hotelId to manage a hotel's QR code",
        )


def _query() -> QRQueryDTO:
    try:
        return QRQueryDTO.model_validate(request.args.to_dict())
    except ValidationError as exc:
        raise_validation_error(exc)


def _target_hotel_id(query: QRQueryDTO) -> int:
    """Hotel admins act on their own hotel; super admins name one."""
    session = g.session
    if session.role is Role.HOTEL_ADMIN:
        if session.hotel_id is None:
            raise AccessDeniedError(role=session.role.value)
        if query.hotel_id is not None and query.hotel_id != session.hotel_id:
            raise AccessDeniedError(role=session.role.value)
        return session.hotel_id
    if query.hotel_id is None:
        raise HotelScopeRequiredError()
    return query.hotel_id


class QRController:
    def __init__(self, *, issue_use_case: IssueHotelTokenUseCase) -> None:
        self._issue = issue_use_case

    def _payload(self, hotel_id: int, token: HotelToken) -> dict:
        png = self._issue.render(hotel_id)
        metadata = self._issue.metadata(hotel_id)
        return QRTokenDTO(
            token=token.value,
            registration_url=self._issue.registration_url(token),
            image="data:image/png;base64," + base64.b64encode(png).decode("ascii"),
            metadata=metadata.to_dict(),
        ).to_payload()

    @require_role(Role.HOTEL_ADMIN, Role.SUPER_ADMIN)
    def generate(self) -> tuple[Response, int]:
        hotel_id = _target_hotel_id(_query())
        token = self._issue.generate(hotel_id)
        audit_log(
            AuditAction.QR_GENERATED,
            user_id=g.user_id,
            ip_address=client_ip(),
            details={"hotel_id": hotel_id},
        )
        return jsonify(self._payload(hotel_id, token)), 200

    @require_role(Role.HOTEL_ADMIN, Role.SUPER_ADMIN)
    @csrf_protect
    def regenerate(self) -> tuple[Response, int]:
        hotel_id = _target_hotel_id(_query())
        token = self._issue.regenerate(hotel_id)
        audit_log(
            AuditAction.QR_REGENERATED,
            user_id=g.user_id,
            ip_address=client_ip(),
            details={"hotel_id": hotel_id},
        )
        logger.info(f"qr.regenerate: by user {g.user_id} for hotel {hotel_id}")
        return jsonify(self._payload(hotel_id, token)), 200

    @require_role(Role.HOTEL_ADMIN, Role.SUPER_ADMIN)
    def download(self) -> Response:
        query = _query()
        hotel_id = _target_hotel_id(query)
        size = self._issue.clamp_size(query.size, default=self._issue.download_size)
        png = self._issue.render(hotel_id, size)
        audit_log(
            AuditAction.QR_DOWNLOADED,
            user_id=g.user_id,
            ip_address=client_ip(),
            details={"hotel_id": hotel_id, "size": size},
        )
        return send_file(
            BytesIO(png),
            mimetype="image/png",
            as_attachment=True,
            download_name=f"hotel-{hotel_id}-qr-{size}px.png",
        )

    @require_role(Role.HOTEL_ADMIN, Role.SUPER_ADMIN)
    def info(self) -> tuple[Response, int]:
        hotel_id = _target_hotel_id(_query())
        return jsonify(self._issue.metadata(hotel_id).to_dict()), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("hotel_qr", __name__, url_prefix="/api/hotel/qr")
        bp.add_url_rule("/generate", view_func=self.generate, methods=["GET"])
        bp.add_url_rule("/regenerate", view_func=self.regenerate, methods=["POST"])
        bp.add_url_rule("/download", view_func=self.download, methods=["GET"])
        bp.add_url_rule("/info", view_func=self.info, methods=["GET"])
        return bp
