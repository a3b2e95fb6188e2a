# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .interfaces import AuditSink, Clock, utcnow

__all__ = ["AuditSink", "Clock", "utcnow"]
