# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify

from hotelhub.domain.hotels import HotelRepository
from hotelhub.interfaces.http.dto.qr import HotelDTO


class HotelsController:
    """Public hotel directory used for manual selection at registration."""

    def __init__(self, *, hotels: HotelRepository) -> None:
        self._hotels = hotels

    def list_active(self) -> tuple[Response, int]:
        items = [HotelDTO.from_domain(hotel).model_dump() for hotel in self._hotels.list_active()]
        return jsonify({"hotels": items}), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("hotels", __name__, url_prefix="/api/hotels")
        bp.add_url_rule("", view_func=self.list_active, methods=["GET"])
        return bp
