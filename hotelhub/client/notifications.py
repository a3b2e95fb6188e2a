# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class Notice:
    message: str
    expires_at: float


class TransientNotice:
    """A single top-level message that dismisses itself after ``ttl`` seconds."""

    def __init__(self, ttl: float = 5.0, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._ttl = ttl
        self._clock = clock
        self._notice: Notice | None = None

    def show(self, message: str) -> None:
        self._notice = Notice(message=message, expires_at=self._clock() + self._ttl)

    def current(self) -> str | None:
        notice = self._notice
        if notice is None:
            return None
        if self._clock() >= notice.expires_at:
            self._notice = None
            return None
        return notice.message

    def dismiss(self) -> None:
        self._notice = None


__all__ = ["Notice", "TransientNotice"]
