# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Guest registration form flow.

The controller owns the form values and the hotel selection. A scanned
hotel QR code locks the hotel field until :meth:`clear_qr_selection`; field
errors never reach the network; a failed submission keeps every value.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import ValidationError

from hotelhub.client.api import ApiError, HotelHubClient
from hotelhub.client.config import load_client_config
from hotelhub.client.notifications import TransientNotice
from hotelhub.client.scanner import QRScanner, ScannerError, extract_token
from hotelhub.client.session import ClientSession, SessionPayloadError, SessionService
from hotelhub.shared.logging import logger
from hotelhub.shared.schemas import GuestRegistrationSchema

FORM_FIELDS = (
    "first_name",
    "email",
    "phone",
    "password",
    "check_in_date",
    "check_out_date",
    "room_number",
)


class FormState(StrEnum):
    EMPTY = "empty"
    HOTEL_PENDING = "hotel_pending"
    HOTEL_RESOLVED = "hotel_resolved"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILURE = "failure"


class HotelSelectionLockedError(Exception):
    code = "hotel_selection_locked"

    def __init__(self) -> None:
        super().__init__("Hotel comes from the scanned QR code; clear it to choose another")


class RegistrationForm(GuestRegistrationSchema):
    pass


@dataclass(slots=True, frozen=True)
class ScannedHotel:
    hotel_id: int
    hotel_name: str
    address: str | None
    expires_at: datetime | None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> ScannedHotel:
        expires = payload.get("expiresAt")
        return cls(
            hotel_id=int(payload["hotelId"]),
            hotel_name=str(payload.get("hotelName") or ""),
            address=payload.get("address"),
            expires_at=datetime.fromisoformat(expires) if isinstance(expires, str) else None,
        )


class RegistrationFormController:
    def __init__(
        self,
        api: HotelHubClient,
        sessions: SessionService,
        *,
        notice: TransientNotice | None = None,
    ) -> None:
        self._api = api
        self._sessions = sessions
        self.notice = notice or TransientNotice(load_client_config().notice_ttl)

        self.state = FormState.EMPTY
        self.transitions: list[FormState] = [FormState.EMPTY]
        self.fields: dict[str, Any] = {name: None for name in FORM_FIELDS}
        self.field_errors: dict[str, str] = {}
        self.scan_error: str | None = None

        self.selected_hotel_id: int | None = None
        self.scanned_hotel: ScannedHotel | None = None
        self.qr_token: str | None = None
        self.session: ClientSession | None = None
        self._resume_state: FormState | None = None

    # State helpers

    @property
    def hotel_locked(self) -> bool:
        return self.qr_token is not None

    @property
    def landing_path(self) -> str | None:
        return self.session.landing_path if self.session else None

    def _set_state(self, state: FormState) -> None:
        if state is not self.state:
            logger.debug(f"registration: {self.state.value} -> {state.value}")
        self.state = state
        self.transitions.append(state)

    def _resting_state(self) -> FormState:
        if self.selected_hotel_id is not None:
            return FormState.HOTEL_RESOLVED
        return FormState.EMPTY

    # Hotel selection

    def begin_scan(self) -> None:
        if self.state in (FormState.SUBMITTING, FormState.VALIDATING):
            raise RuntimeError(f"cannot scan while {self.state.value}")
        self._resume_state = self._resting_state()
        self.scan_error = None
        self._set_state(FormState.HOTEL_PENDING)

    def _scan_failed(self, message: str) -> bool:
        self.scan_error = message
        self._set_state(self._resume_state or self._resting_state())
        self._resume_state = None
        return False

    async def apply_scan(self, payload: str | None) -> bool:
        """Resolve a decoded QR payload; on failure the previous state returns."""
        if self.state is not FormState.HOTEL_PENDING:
            self.begin_scan()
        try:
            token = extract_token(payload)
        except ScannerError as exc:
            return self._scan_failed(exc.message)

        try:
            resolved = ScannedHotel.from_payload(await self._api.validate_qr(token))
        except ApiError as exc:
            logger.info(f"registration: QR rejected code={exc.code}")
            return self._scan_failed(exc.message)
        except (KeyError, TypeError, ValueError):
            return self._scan_failed("Unexpected answer from the server")

        self.qr_token = token
        self.scanned_hotel = resolved
        self.selected_hotel_id = resolved.hotel_id
        self.field_errors.pop("selected_hotel_id", None)
        self._resume_state = None
        self._set_state(FormState.HOTEL_RESOLVED)
        return True

    async def scan(self, scanner: QRScanner) -> bool:
        self.begin_scan()
        try:
            token = await scanner.scan()
        except ScannerError as exc:
            return self._scan_failed(exc.message)
        if token is None:
            self._set_state(self._resume_state or self._resting_state())
            self._resume_state = None
            return False
        return await self.apply_scan(token)

    def select_hotel(self, hotel_id: int) -> None:
        if self.hotel_locked:
            raise HotelSelectionLockedError()
        self.selected_hotel_id = int(hotel_id)
        self.field_errors.pop("selected_hotel_id", None)
        self._set_state(FormState.HOTEL_RESOLVED)

    def clear_qr_selection(self) -> None:
        self.qr_token = None
        self.scanned_hotel = None
        self.selected_hotel_id = None
        self.scan_error = None
        self._set_state(FormState.EMPTY)

    # Fields

    def set_fields(self, **values: Any) -> None:
        unknown = sorted(set(values) - set(FORM_FIELDS))
        if unknown:
            raise TypeError(f"unknown registration fields: {', '.join(unknown)}")
        for name, value in values.items():
            self.fields[name] = value
            self.field_errors.pop(name, None)

    def _form_data(self) -> dict[str, Any]:
        data = {name: value for name, value in self.fields.items() if value is not None}
        data["selected_hotel_id"] = self.selected_hotel_id
        data["qr_token"] = self.qr_token
        data["qr_based"] = self.qr_token is not None
        return data

    def validate(self) -> RegistrationForm | None:
        resting = self._resting_state()
        self._set_state(FormState.VALIDATING)
        try:
            form = RegistrationForm.model_validate(self._form_data())
        except ValidationError as exc:
            self.field_errors = _field_errors(exc)
            self._set_state(resting)
            return None
        self.field_errors = {}
        return form

    async def submit(self) -> bool:
        form = self.validate()
        if form is None:
            return False

        self._set_state(FormState.SUBMITTING)
        try:
            payload = await self._api.register(form.model_dump(by_alias=True, mode="json"))
            session = self._sessions.establish(payload)
        except (ApiError, SessionPayloadError) as exc:
            message = exc.message if isinstance(exc, ApiError) else "Unexpected answer from the server"
            self.notice.show(message)
            self._set_state(FormState.FAILURE)
            self._set_state(self._resting_state())
            return False

        self.session = session
        self._set_state(FormState.SUCCESS)
        return True


_ALIAS_TO_FIELD = {
    (info.alias or name): name for name, info in RegistrationForm.model_fields.items()
}


def _field_errors(exc: ValidationError) -> dict[str, str]:
    errors: dict[str, str] = {}
    for error in exc.errors():
        loc = error.get("loc") or ("form",)
        key = _ALIAS_TO_FIELD.get(str(loc[0]), str(loc[0]))
        errors.setdefault(key, error.get("msg", "Invalid value"))
    return errors


__all__ = [
    "FormState",
    "HotelSelectionLockedError",
    "RegistrationForm",
    "RegistrationFormController",
    "ScannedHotel",
]
