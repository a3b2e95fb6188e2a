# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from hotelhub.domain.hotels import Hotel


class QRQueryDTO(BaseModel):
    model_config = ConfigDict(validate_by_name=True, validate_by_alias=True)

    hotel_id: int | None = Field(None, alias="hotelId", ge=1)
    size: int | None = Field(None, ge=1, le=10000)


class QRTokenDTO(BaseModel):
    token: str
    registration_url: str = Field(serialization_alias="registrationUrl")
    image: str
    metadata: dict[str, Any]

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class HotelDTO(BaseModel):
    id: int
    name: str
    address: str | None = None

    @classmethod
    def from_domain(cls, hotel: Hotel) -> HotelDTO:
        return cls(id=hotel.id, name=hotel.name, address=hotel.address)
