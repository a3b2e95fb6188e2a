# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time
from collections import defaultdict, deque
from dataclasses import dataclass
from threading import Lock
from typing import ClassVar

from hotelhub.shared.logging import logger


@dataclass
class LoginAttempt:
    timestamp: float
    success: bool
    ip_address: str | None = None


class LoginAttemptsTracker:
    MAX_ATTEMPTS: ClassVar[int] = 5
    LOCKOUT_DURATION: ClassVar[float] = 15 * 60  # 15 minutes in seconds
    ATTEMPT_WINDOW: ClassVar[float] = 60 * 60  # 1 hour in seconds

    def __init__(self) -> None:
        self._attempts: dict[str, deque[LoginAttempt]] = defaultdict(
            lambda: deque(maxlen=self.MAX_ATTEMPTS * 2)
        )
        self._lock = Lock()
        self._lockouts: dict[str, float] = {}  # email -> unlock_time

    def record_attempt(
        self, email: str, success: bool, ip_address: str | None = None
    ) -> None:
        with self._lock:
            attempt = LoginAttempt(
                timestamp=time.time(),
                success=success,
                ip_address=ip_address,
            )

            self._attempts[email].append(attempt)

            if success and email in self._lockouts:
                del self._lockouts[email]
                logger.info(f"login_attempts: cleared lockout for email={email}")
            elif not success:
                self._check_and_lock(email)

    def is_locked(self, email: str) -> bool:
        with self._lock:
            if email not in self._lockouts:
                return False

            unlock_time = self._lockouts[email]
            now = time.time()

            if now >= unlock_time:
                del self._lockouts[email]
                logger.info(f"login_attempts: lockout expired for email={email}")
                return False

            return True

    def get_lockout_remaining(self, email: str) -> float:
        with self._lock:
            if email not in self._lockouts:
                return 0.0

            now = time.time()
            remaining = max(0.0, self._lockouts[email] - now)
            return remaining

    def clear_attempts(self, email: str) -> None:
        with self._lock:
            if email in self._attempts:
                del self._attempts[email]
            if email in self._lockouts:
                del self._lockouts[email]
            logger.info(f"login_attempts: cleared all attempts for email={email}")

    def _check_and_lock(self, email: str) -> None:
        now = time.time()
        cutoff = now - self.ATTEMPT_WINDOW

        failed_attempts = [
            attempt
            for attempt in self._attempts[email]
            if not attempt.success and attempt.timestamp > cutoff
        ]

        if len(failed_attempts) >= self.MAX_ATTEMPTS:
            unlock_time = now + self.LOCKOUT_DURATION
            self._lockouts[email] = unlock_time

            ips = {
                attempt.ip_address for attempt in failed_attempts if attempt.ip_address
            }
            logger.warning(
                f"login_attempts: ACCOUNT LOCKED email={email} "
                f"failed_attempts={len(failed_attempts)} "
                f"lockout_duration={self.LOCKOUT_DURATION}s "
                f"ip_addresses={list(ips) if ips else 'unknown'}"
            )


_tracker = LoginAttemptsTracker()


def record_login_attempt(
    email: str, success: bool, ip_address: str | None = None
) -> None:
    _tracker.record_attempt(email, success, ip_address)


def is_account_locked(email: str) -> bool:
    return _tracker.is_locked(email)


def get_lockout_remaining(email: str) -> float:
    return _tracker.get_lockout_remaining(email)


def clear_login_attempts(email: str) -> None:
    _tracker.clear_attempts(email)


__all__ = [
    "LoginAttemptsTracker",
    "record_login_attempt",
    "is_account_locked",
    "get_lockout_remaining",
    "clear_login_attempts",
]
