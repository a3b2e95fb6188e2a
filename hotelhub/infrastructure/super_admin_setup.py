# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import sys

from hotelhub.domain.roles import Role
from hotelhub.infrastructure.audit import AuditAction, audit_log
from hotelhub.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)
from hotelhub.shared.config import load_config
from hotelhub.shared.logging import logger


class SuperAdminSetupError(Exception):
    pass


def setup_super_admin(users: SqlAlchemyUserRepository | None = None) -> None:
    """Promote the account named by ``SUPER_ADMIN_EMAIL`` at start-up."""
    config = load_config()

    if not config.super_admin_email:
        logger.info("super_admin_setup: No SUPER_ADMIN_EMAIL configured, skipping")
        return

    if users is None:
        from hotelhub.infrastructure.db.session import SessionLocal

        users = SqlAlchemyUserRepository(SessionLocal)

    try:
        user = users.find_by_email(config.super_admin_email)
    except Exception as e:
        logger.error(f"super_admin_setup: Failed to look up super admin: {e}")
        raise SuperAdminSetupError(f"Failed to look up super admin: {e}") from e

    if user is None:
        error_msg = (
            f"SUPER_ADMIN_EMAIL '{config.super_admin_email}' not found in database. "
            "Please register this account first or update SUPER_ADMIN_EMAIL."
        )
        logger.error(f"super_admin_setup: {error_msg}")
        print(f"\n❌ SUPER ADMIN SETUP ERROR: {error_msg}\n", file=sys.stderr)
        sys.exit(1)

    if user.role is Role.SUPER_ADMIN:
        logger.info(f"super_admin_setup: user {user.id} already is super admin")
        return

    users.set_role(user.id, Role.SUPER_ADMIN)
    audit_log(AuditAction.SUPER_ADMIN_GRANTED, user_id=user.id, details={"previous_role": user.role.value})
    logger.info(f"super_admin_setup: granted super admin to user {user.id}")


__all__ = ["SuperAdminSetupError", "setup_super_admin"]
