# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Protocol

from hotelhub.infrastructure.audit import AuditAction


class Clock(Protocol):
    def __call__(self) -> datetime: ...


class AuditSink(Protocol):
    def __call__(
        self,
        action: AuditAction,
        user_id: int | None = None,
        ip_address: str | None = None,
        details: dict[str, Any] | None = None,
        success: bool = True,
    ) -> None: ...


def utcnow() -> datetime:
    return datetime.now(UTC)


__all__ = ["AuditSink", "Clock", "utcnow"]
