# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .settings import AppConfig, QRConfig, SecurityConfig, SessionConfig, load_config

__all__ = ["AppConfig", "QRConfig", "SecurityConfig", "SessionConfig", "load_config"]
