# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import hashlib
from collections.abc import Callable
from functools import wraps
from typing import Any

from flask import g, request

from hotelhub.domain.roles import Role, normalize_role
from hotelhub.domain.users.entities import Session
from hotelhub.domain.users.exceptions import UnauthenticatedError
from hotelhub.shared.config import load_config
from hotelhub.shared.errors.base import AccessDeniedError, AuthenticationRequiredError
from hotelhub.shared.logging import logger


def session_cookie() -> str | None:
    return request.cookies.get(load_config().session.cookie_name) or None


def _current_session() -> Session | None:
    from hotelhub.infrastructure.container import container

    token_value = session_cookie()
    if not token_value:
        if load_config().debug_logging:
            logger.debug("No session cookie found in request")
        return None

    try:
        user, session = container.check_auth_use_case.execute(token_value)
    except UnauthenticatedError:
        if load_config().debug_logging:
            token_hash = hashlib.sha256(token_value.encode()).hexdigest()[:8]
            logger.debug(f"Session rejected: <hash:{token_hash}>")
        return None

    g.user = user
    return session


def require_role(*roles: Role | str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Allow the view only for sessions whose role is one of ``roles``.

    Without roles any authenticated session passes. The session is exposed
    as ``g.session`` and its user id as ``g.user_id``.
    """

    allowed = frozenset(normalize_role(role) for role in roles)

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            session = _current_session()

            if session is None:
                logger.warning(f"Access denied: no session on {request.method} {request.path}")
                raise AuthenticationRequiredError()

            if allowed and session.role not in allowed:
                logger.warning(
                    f"Access denied: user {session.user_id} role={session.role.value} "
                    f"on {request.method} {request.path}"
                )
                raise AccessDeniedError(role=session.role.value)

            g.user_id = session.user_id
            g.session = session
            return func(*args, **kwargs)

        return wrapper

    return decorator


__all__ = ["require_role", "session_cookie"]
