# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .exceptions import InvariantViolation, InvariantViolationError
from .roles import Role, landing_path, normalize_role

__all__ = [
    "InvariantViolation",
    "InvariantViolationError",
    "Role",
    "landing_path",
    "normalize_role",
]
