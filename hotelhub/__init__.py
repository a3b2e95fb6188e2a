# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""HotelHub guest onboarding: hotel QR codes, guest registration and sessions."""

__version__ = "0.1.0"
