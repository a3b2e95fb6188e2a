from __future__ import annotations

import asyncio
from datetime import date
from typing import Any

import pytest

from hotelhub.application.use_cases.qr import IssueHotelTokenUseCase, ValidateHotelTokenUseCase
from hotelhub.client.api import ApiError
from hotelhub.client.notifications import TransientNotice
from hotelhub.client.opencv import OpenCVCameraProvider, OpenCVFrameDecoder
from hotelhub.client.registration import (
    FormState,
    HotelSelectionLockedError,
    RegistrationFormController,
)
from hotelhub.client.scanner import DecodeFailedError, QRScanner
from hotelhub.client.session import SessionService
from hotelhub.domain.hotels import Hotel
from hotelhub.infrastructure.qr import QRCodePNGRenderer
from hotelhub.shared.errors.base import AppError

GUEST_FIELDS = {
    "first_name": "Ada",
    "email": "Ada@Example.com",
    "phone": "+1 555 010 2030",
    "password": "Sunny#Days1",
    "check_in_date": date(2026, 11, 1),
    "check_out_date": date(2026, 11, 4),
}


class FakeApi:
    """Answers validate-qr with the real validator; register is scripted."""

    def __init__(self, validator: ValidateHotelTokenUseCase) -> None:
        self._validator = validator
        self.calls: list[tuple[str, Any]] = []
        self.register_error: ApiError | None = None

    async def validate_qr(self, token: str) -> dict[str, Any]:
        self.calls.append(("validate_qr", token))
        try:
            return self._validator.execute(token).to_dict()
        except AppError as exc:
            raise ApiError(int(exc.status), exc.code, exc.message or exc.code) from exc

    async def register(self, payload: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("register", payload))
        if self.register_error is not None:
            raise self.register_error
        hotel_id = payload.get("selectedHotelId") or 1
        return {
            "user": {"id": 7, "firstName": payload["firstName"], "email": payload["email"], "hotelId": hotel_id},
            "role": "guest",
            "expiresAt": "2026-11-08T10:00:00+00:00",
        }


@pytest.fixture()
def hotel(hotels) -> Hotel:
    return hotels.add(Hotel(id=0, name="Seaside Inn", address="1 Beach Rd", is_active=True))


@pytest.fixture()
def issuer(hotels, signer, renderer, qr_config) -> IssueHotelTokenUseCase:
    return IssueHotelTokenUseCase(hotels=hotels, signer=signer, renderer=renderer, config=qr_config)


@pytest.fixture()
def api(hotels, signer, audit) -> FakeApi:
    return FakeApi(ValidateHotelTokenUseCase(hotels=hotels, signer=signer, audit=audit))


@pytest.fixture()
def form(api) -> RegistrationFormController:
    sessions = SessionService(api, login_timeout=1)
    return RegistrationFormController(api, sessions, notice=TransientNotice(ttl=5))


def _registrations(api: FakeApi) -> list[Any]:
    return [payload for name, payload in api.calls if name == "register"]


def test_date_order_error_blocks_submission(form, api, hotel) -> None:
    form.select_hotel(hotel.id)
    form.set_fields(**{**GUEST_FIELDS, "check_out_date": date(2026, 10, 30)})

    assert asyncio.run(form.submit()) is False

    assert "check_out_date" in form.field_errors
    assert api.calls == []
    assert form.state is FormState.HOTEL_RESOLVED


def test_missing_hotel_is_a_field_error(form, api) -> None:
    form.set_fields(**GUEST_FIELDS)

    assert form.validate() is None
    assert "selected_hotel_id" in form.field_errors
    assert form.state is FormState.EMPTY
    assert api.calls == []


def test_scanned_registration_url_locks_hotel_and_registers(form, api, issuer, hotel) -> None:
    token = issuer.generate(hotel.id)
    payload = issuer.registration_url(token)

    form.begin_scan()
    assert form.state is FormState.HOTEL_PENDING
    assert asyncio.run(form.apply_scan(payload)) is True

    assert form.state is FormState.HOTEL_RESOLVED
    assert form.hotel_locked is True
    assert form.selected_hotel_id == hotel.id
    assert form.scanned_hotel.hotel_name == "Seaside Inn"
    assert api.calls == [("validate_qr", token.value)]

    form.set_fields(**GUEST_FIELDS)
    assert asyncio.run(form.submit()) is True

    sent = _registrations(api)[0]
    assert sent["qrToken"] == token.value
    assert sent["qrBased"] is True
    assert sent["selectedHotelId"] == hotel.id
    assert sent["email"] == "ada@example.com"
    assert form.state is FormState.SUCCESS
    assert form.landing_path == f"/hotels/{hotel.id}/categories"


def test_locked_hotel_cannot_be_changed_until_cleared(form, issuer, hotel, hotels) -> None:
    other = hotels.add(Hotel(id=0, name="Mountain Lodge", address=None, is_active=True))
    asyncio.run(form.apply_scan(issuer.generate(hotel.id).value))

    with pytest.raises(HotelSelectionLockedError):
        form.select_hotel(other.id)

    form.clear_qr_selection()
    assert form.state is FormState.EMPTY
    assert form.qr_token is None
    assert form.selected_hotel_id is None

    form.select_hotel(other.id)
    assert form.selected_hotel_id == other.id


def test_rejected_scan_restores_previous_state(form, api, issuer, hotel, hotels) -> None:
    form.select_hotel(hotel.id)
    stale = issuer.generate(hotel.id)
    issuer.regenerate(hotel.id)

    assert asyncio.run(form.apply_scan(stale.value)) is False

    assert form.state is FormState.HOTEL_RESOLVED
    assert form.selected_hotel_id == hotel.id
    assert form.hotel_locked is False
    assert "replaced" in form.scan_error


def test_refresh_token_payload_never_reaches_api(form, api) -> None:
    assert asyncio.run(form.apply_scan('{"refreshToken": "leaked"}')) is False

    assert api.calls == []
    assert form.state is FormState.EMPTY
    assert form.scan_error


def test_failed_submission_keeps_values_and_shows_notice(form, api, hotel) -> None:
    api.register_error = ApiError(409, "user_exists", "An account with this email already exists")
    form.select_hotel(hotel.id)
    form.set_fields(**GUEST_FIELDS)

    assert asyncio.run(form.submit()) is False

    assert form.notice.current() == "An account with this email already exists"
    assert form.fields["email"] == "Ada@Example.com"
    assert form.selected_hotel_id == hotel.id
    assert form.transitions[-3:] == [FormState.SUBMITTING, FormState.FAILURE, FormState.HOTEL_RESOLVED]
    assert form.session is None


def test_unknown_field_names_are_rejected(form) -> None:
    with pytest.raises(TypeError):
        form.set_fields(nickname="ada")


def test_setting_a_field_clears_its_error(form) -> None:
    form.set_fields(**{**GUEST_FIELDS, "phone": "call me"})
    form.validate()
    assert "phone" in form.field_errors

    form.set_fields(phone="+1 555 010 2030")
    assert "phone" not in form.field_errors


def test_scan_with_cancelled_scanner_returns_to_rest(form) -> None:
    class CancelledScanner:
        async def scan(self) -> None:
            return None

    assert asyncio.run(form.scan(CancelledScanner())) is False
    assert form.state is FormState.EMPTY


def test_malformed_url_scan_reports_decode_failure(form, api) -> None:
    assert asyncio.run(form.apply_scan("http://[hotel/register?qr=ABC")) is False

    assert api.calls == []
    assert form.state is FormState.EMPTY
    assert form.scan_error == DecodeFailedError.message


@pytest.mark.parametrize("size", [300, 600])
def test_rendered_qr_code_scans_back_into_the_form(form, api, hotels, signer, qr_config, hotel, size) -> None:
    issuer = IssueHotelTokenUseCase(
        hotels=hotels, signer=signer, renderer=QRCodePNGRenderer(), config=qr_config
    )
    issuer.generate(hotel.id)
    token = issuer.regenerate(hotel.id)
    png = issuer.render(hotel.id, size)

    scanner = QRScanner(OpenCVCameraProvider(), OpenCVFrameDecoder(), frame_interval=0)
    scanned = scanner.scan_image(png)
    assert scanned == token.value

    assert asyncio.run(form.apply_scan(scanned)) is True
    assert form.selected_hotel_id == hotel.id
    assert form.hotel_locked is True
    assert api.calls == [("validate_qr", token.value)]

    form.clear_qr_selection()
    assert form.state is FormState.EMPTY
    assert form.selected_hotel_id is None
    assert form.hotel_locked is False
