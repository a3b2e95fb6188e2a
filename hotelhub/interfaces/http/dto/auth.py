from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from hotelhub.domain.roles import Role, UnknownRoleError, normalize_role
from hotelhub.domain.users.entities import RegistrationRequest, Session, User
from hotelhub.shared.errors.validation_types import ValidationErrorType
from hotelhub.shared.schemas import GuestRegistrationSchema


class ValidateQRRequestDTO(BaseModel):
    model_config = ConfigDict(validate_by_name=True, validate_by_alias=True)

    qr_token: str | None = Field(None, alias="qrToken", max_length=4096)


class RegisterRequestDTO(GuestRegistrationSchema):
    def to_domain(self) -> RegistrationRequest:
        return RegistrationRequest(
            first_name=self.first_name,
            email=self.email,
            phone=self.phone,
            password=self.password,
            check_in_date=self.check_in_date,
            check_out_date=self.check_out_date,
            selected_hotel_id=self.selected_hotel_id,
            room_number=self.room_number,
            qr_based=self.qr_based or bool(self.qr_token),
            qr_token=self.qr_token,
        )


class LoginRequestDTO(BaseModel):
    email: str = Field(min_length=3, max_length=254)
    password: str = Field(min_length=1, max_length=128)  # No strength check on login
    role: Role

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        value = value.strip().lower()
        if "@" not in value:
            raise PydanticCustomError(
                ValidationErrorType.MISSING,
                "Please enter a valid email address",
                {},
            )
        return value

    @field_validator("role", mode="before")
    @classmethod
    def validate_role(cls, value: Any) -> Role:
        try:
            return normalize_role(value)
        except UnknownRoleError:
            raise PydanticCustomError(
                ValidationErrorType.ROLE_INVALID,
                "Unknown account role",
                {"allowed": ", ".join(role.value for role in Role)},
            ) from None


class SessionDTO(BaseModel):
    user: dict[str, Any]
    role: Role
    landing_path: str = Field(serialization_alias="landingPath")
    expires_at: str = Field(serialization_alias="expiresAt")

    @classmethod
    def from_session(cls, user: User, session: Session) -> SessionDTO:
        return cls(
            user=user.public_dict(),
            role=session.role,
            landing_path=session.landing_path,
            expires_at=session.expires_at.isoformat(),
        )

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class AuthSuccessDTO(BaseModel):
    ok: bool = True
