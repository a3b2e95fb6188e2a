# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .check_auth import CheckAuthUseCase
from .login_user import AccountLockedError, LoginUserUseCase
from .logout_user import LogoutUserUseCase
from .register_guest import RegisterGuestUseCase

__all__ = [
    "AccountLockedError",
    "CheckAuthUseCase",
    "LoginUserUseCase",
    "LogoutUserUseCase",
    "RegisterGuestUseCase",
]
