# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Create a hotel, its admin account and its first registration QR token."""

from __future__ import annotations

import argparse
from datetime import UTC, datetime

from pydantic_core import PydanticCustomError

from hotelhub.domain.hotels import Hotel
from hotelhub.domain.roles import Role
from hotelhub.domain.users.entities import User
from hotelhub.infrastructure.container import container
from hotelhub.infrastructure.db import init_db
from hotelhub.shared.schemas import check_password_policy


def seed(name: str, address: str | None, admin_email: str, admin_password: str, admin_name: str) -> tuple[Hotel, User, str]:
    init_db()
    hotel = container.hotel_repository.add(Hotel(id=0, name=name, address=address, is_active=True))
    admin = container.user_repository.add(
        User(
            id=0,
            first_name=admin_name,
            email=admin_email.strip().lower(),
            phone=None,
            password_hash=container.password_hasher.hash(admin_password),
            role=Role.HOTEL_ADMIN,
            created_at=datetime.now(UTC),
            hotel_id=hotel.id,
        )
    )
    token = container.issue_token_use_case.generate(hotel.id)
    return hotel, admin, container.issue_token_use_case.registration_url(token)


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a hotel and its admin account")
    parser.add_argument("name", help="Hotel name")
    parser.add_argument("--address", default=None, help="Street address shown to guests")
    parser.add_argument("--admin-email", required=True, help="Login email of the hotel admin")
    parser.add_argument("--admin-password", required=True, help="Password of the hotel admin")
    parser.add_argument("--admin-name", default="Reception", help="First name of the hotel admin")
    args = parser.parse_args()

    try:
        check_password_policy(args.admin_password)
    except PydanticCustomError as exc:
        parser.error(exc.message())

    hotel, admin, url = seed(
        args.name, args.address, args.admin_email, args.admin_password, args.admin_name
    )
    print(f"Created hotel {hotel.id} ({hotel.name}) with admin user {admin.id}")
    print(f"Registration URL: {url}")


if __name__ == "__main__":
    main()
