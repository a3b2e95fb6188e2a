# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .registration import PHONE_PATTERN, GuestRegistrationSchema, check_password_policy

__all__ = ["GuestRegistrationSchema", "PHONE_PATTERN", "check_password_policy"]
