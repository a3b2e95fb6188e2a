# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets
from datetime import UTC, datetime

from flask import Response, request

from hotelhub.domain.users.entities import Session
from hotelhub.shared.config import load_config


def client_ip() -> str | None:
    ip_address = request.headers.get("X-Forwarded-For", request.remote_addr)
    if ip_address and "," in ip_address:
        ip_address = ip_address.split(",")[0].strip()
    return ip_address


def set_session_cookies(response: Response, session: Session) -> None:
    config = load_config()
    if session.token is None:
        raise ValueError("session has no token to hand out")
    max_age = max(0, int((session.expires_at - datetime.now(UTC)).total_seconds()))
    response.set_cookie(
        config.session.cookie_name,
        session.token,
        httponly=True,
        samesite=config.security.cookie_samesite,
        secure=config.security.cookie_secure,
        max_age=max_age,
    )
    if config.security.enable_csrf:
        response.set_cookie(
            "csrf_token",
            secrets.token_urlsafe(32),
            httponly=False,
            samesite=config.security.cookie_samesite,
            secure=config.security.cookie_secure,
            max_age=max_age,
        )


def clear_session_cookies(response: Response) -> None:
    config = load_config()
    response.delete_cookie(
        config.session.cookie_name,
        samesite=config.security.cookie_samesite,
        secure=config.security.cookie_secure,
        httponly=True,
    )
    response.delete_cookie("csrf_token")


__all__ = ["clear_session_cookies", "client_ip", "set_session_cookies"]
