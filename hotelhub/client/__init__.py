# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Guest-side onboarding: QR scanning, the registration form and the session."""

from .api import ApiError, HotelHubClient
from .notifications import TransientNotice
from .registration import (
    FormState,
    HotelSelectionLockedError,
    RegistrationForm,
    RegistrationFormController,
)
from .scanner import (
    CameraPermissionDeniedError,
    DecodeFailedError,
    NoCameraError,
    PermissionState,
    QRScanner,
    RefreshTokenPayloadError,
    ScannerError,
    UnsupportedPlatformError,
    extract_token,
)
from .session import ClientSession, ForbiddenError, LoginTimeoutError, SessionService, normalize_session

__all__ = [
    "ApiError",
    "CameraPermissionDeniedError",
    "ClientSession",
    "DecodeFailedError",
    "ForbiddenError",
    "FormState",
    "HotelHubClient",
    "HotelSelectionLockedError",
    "LoginTimeoutError",
    "NoCameraError",
    "PermissionState",
    "QRScanner",
    "RefreshTokenPayloadError",
    "RegistrationForm",
    "RegistrationFormController",
    "ScannerError",
    "SessionService",
    "TransientNotice",
    "UnsupportedPlatformError",
    "extract_token",
    "normalize_session",
]
