# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from hotelhub.application.interfaces import Clock, utcnow
from hotelhub.application.use_cases.qr.validate_token import ValidateHotelTokenUseCase
from hotelhub.domain.hotels import HotelInactiveError, HotelNotFoundError, HotelRepository
from hotelhub.domain.roles import Role
from hotelhub.domain.users.entities import RegistrationRequest, Session, User
from hotelhub.domain.users.exceptions import HotelSelectionMismatchError, UserAlreadyExistsError
from hotelhub.domain.users.repositories import PasswordHasher, SessionTokenRepository, UserRepository
from hotelhub.shared.logging import logger


class RegisterGuestUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: SessionTokenRepository,
        hotels: HotelRepository,
        password_hasher: PasswordHasher,
        validate_token: ValidateHotelTokenUseCase,
        clock: Clock = utcnow,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._hotels = hotels
        self._password_hasher = password_hasher
        self._validate_token = validate_token
        self._clock = clock

    def execute(
        self, request: RegistrationRequest, ip_address: str | None = None
    ) -> tuple[User, Session]:
        hotel_id = self._resolve_hotel(request, ip_address)

        email = request.email.strip().lower()
        if self._users.find_by_email(email):
            raise UserAlreadyExistsError()

        user = User(
            id=0,
            first_name=request.first_name,
            email=email,
            phone=request.phone,
            password_hash=self._password_hasher.hash(request.password),
            role=Role.GUEST,
            created_at=self._clock(),
            hotel_id=hotel_id,
            room_number=request.room_number,
            check_in_date=request.check_in_date,
            check_out_date=request.check_out_date,
        )
        persisted = self._users.add(user)
        token = self._tokens.replace_for_user(persisted.id)
        logger.info(
            f"register_guest: user_id={persisted.id} hotel_id={hotel_id} qr={bool(request.qr_token)}"
        )
        session = Session(
            user_id=persisted.id,
            role=persisted.role,
            expires_at=token.expires_at,
            hotel_id=persisted.hotel_id,
            token=token.token,
        )
        return persisted, session

    def _resolve_hotel(self, request: RegistrationRequest, ip_address: str | None) -> int:
        if request.qr_token:
            resolved = self._validate_token.execute(request.qr_token, ip_address=ip_address)
            if (
                request.selected_hotel_id is not None
                and request.selected_hotel_id != resolved.hotel_id
            ):
                raise HotelSelectionMismatchError(
                    context={
                        "selected_hotel_id": request.selected_hotel_id,
                        "qr_hotel_id": resolved.hotel_id,
                    }
                )
            return resolved.hotel_id

        hotel_id = request.selected_hotel_id
        hotel = self._hotels.get(hotel_id) if hotel_id is not None else None
        if hotel is None:
            raise HotelNotFoundError(
                context={"hotel_id": hotel_id},
                message="Selected hotel not found",
            )
        if not hotel.is_active:
            raise HotelInactiveError(context={"hotel_id": hotel.id})
        return hotel.id
