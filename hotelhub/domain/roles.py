# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Account roles and the dashboards they land on."""

from __future__ import annotations

from enum import StrEnum
from http import HTTPStatus

from hotelhub.shared.errors.base import DomainError


class Role(StrEnum):
    GUEST = "guest"
    HOTEL_ADMIN = "hotel"
    SERVICE_PROVIDER = "service"
    SUPER_ADMIN = "superadmin"


class UnknownRoleError(DomainError):
    code = "role_invalid"
    status = HTTPStatus.BAD_REQUEST
    message = "Unknown account role"


_ALIASES: dict[str, Role] = {
    "guest": Role.GUEST,
    "client": Role.GUEST,
    "hotel": Role.HOTEL_ADMIN,
    "hotel_admin": Role.HOTEL_ADMIN,
    "hoteladmin": Role.HOTEL_ADMIN,
    "service": Role.SERVICE_PROVIDER,
    "service_provider": Role.SERVICE_PROVIDER,
    "serviceprovider": Role.SERVICE_PROVIDER,
    "superadmin": Role.SUPER_ADMIN,
    "super_admin": Role.SUPER_ADMIN,
}


def normalize_role(value: Role | str | None) -> Role:
    """Map any role spelling seen on the wire onto :class:`Role`.

    This is the only place that interprets raw role strings; everything past
    the session boundary works with the enum.
    """

    if isinstance(value, Role):
        return value
    if not isinstance(value, str):
        raise UnknownRoleError(context={"role": repr(value)})
    key = value.strip().lower().replace("-", "_").replace(" ", "_")
    role = _ALIASES.get(key)
    if role is None:
        raise UnknownRoleError(context={"role": value})
    return role


def landing_path(role: Role, hotel_id: int | str | None = None) -> str:
    if role is Role.GUEST:
        return f"/hotels/{hotel_id}/categories" if hotel_id else "/"
    if role is Role.HOTEL_ADMIN:
        return "/hotel/dashboard"
    if role is Role.SERVICE_PROVIDER:
        return "/service/dashboard"
    return "/superadmin/dashboard"


FORBIDDEN_PATH = "/403"

__all__ = ["FORBIDDEN_PATH", "Role", "UnknownRoleError", "landing_path", "normalize_role"]
