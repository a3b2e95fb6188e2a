# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Reading hotel registration tokens from QR codes.

A scan yields the token carried by the code: the ``qr`` query parameter when
the code holds a registration URL, the raw text otherwise.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterator
from contextlib import contextmanager
from enum import StrEnum
from pathlib import Path
from typing import Any, ClassVar, Protocol
from urllib.parse import parse_qs, urlsplit

from hotelhub.client.config import load_client_config
from hotelhub.shared.logging import logger

_REFRESH_MARKERS = ("refreshtoken", "refresh_token")


class ScannerError(Exception):
    code: ClassVar[str] = "scanner_error"
    message: ClassVar[str] = "Could not scan the QR code"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.message)
        self.detail = detail


class CameraPermissionDeniedError(ScannerError):
    code = "camera_permission_denied"
    message = "Camera access was denied. Allow camera access and try again."


class NoCameraError(ScannerError):
    code = "no_camera"
    message = "No camera was found on this device. Upload a photo of the QR code instead."


class UnsupportedPlatformError(ScannerError):
    code = "unsupported_platform"
    message = "QR scanning is not supported here. Select your hotel manually."


class DecodeFailedError(ScannerError):
    code = "decode_failed"
    message = "Could not read a hotel QR code. Please try again."


class RefreshTokenPayloadError(ScannerError):
    code = "refresh_token_payload"
    message = "This is not a hotel QR code. Please scan the code displayed at the hotel."


class PermissionState(StrEnum):
    PROMPT = "prompt"
    GRANTED = "granted"
    DENIED = "denied"


class Camera(Protocol):
    def read(self) -> Any | None: ...
    def release(self) -> None: ...


class CameraProvider(Protocol):
    def request_permission(self) -> PermissionState: ...

    def open(self) -> Camera:
        """Acquire the camera; raises a :class:`ScannerError` when unavailable."""
        ...


class FrameDecoder(Protocol):
    def decode(self, frame: Any) -> str | None: ...
    def decode_image(self, data: bytes | str | Path) -> str | None: ...


def extract_token(payload: str | None) -> str:
    if payload is None:
        raise DecodeFailedError("empty payload")
    text = payload.strip()
    if not text:
        raise DecodeFailedError("empty payload")

    lowered = text.lower()
    if any(marker in lowered for marker in _REFRESH_MARKERS):
        raise RefreshTokenPayloadError()

    try:
        parts = urlsplit(text)
        is_link = bool(parts.scheme and parts.netloc) or (text.startswith("/") and bool(parts.query))
        values = parse_qs(parts.query).get("qr", []) if is_link else []
    except ValueError as exc:
        raise DecodeFailedError("malformed URL") from exc
    if is_link:
        token = values[0].strip() if values else ""
        if not token:
            raise DecodeFailedError("URL without qr parameter")
        return token

    return text


class QRScanner:
    def __init__(
        self,
        camera: CameraProvider,
        decoder: FrameDecoder,
        *,
        frame_interval: float | None = None,
    ) -> None:
        self._camera_provider = camera
        self._decoder = decoder
        self._frame_interval = (
            load_client_config().scan_interval if frame_interval is None else frame_interval
        )
        self._permission = PermissionState.PROMPT
        self._cancelled = asyncio.Event()
        self._active: Camera | None = None
        self._closed = False

    @property
    def permission(self) -> PermissionState:
        return self._permission

    @property
    def scanning(self) -> bool:
        return self._active is not None

    def request_permissions(self) -> PermissionState:
        """Ask for camera access; safe to call again after a denial."""
        try:
            self._permission = self._camera_provider.request_permission()
        except NoCameraError:
            self._permission = PermissionState.DENIED
            raise
        logger.debug(f"scanner: permission={self._permission.value}")
        return self._permission

    @contextmanager
    def _camera_session(self) -> Iterator[Camera]:
        camera = self._camera_provider.open()
        self._active = camera
        try:
            yield camera
        finally:
            self._active = None
            camera.release()
            logger.debug("scanner: camera released")

    async def scan(self) -> str | None:
        """Scan frames until a code decodes; ``None`` when cancelled."""
        if self._closed:
            raise RuntimeError("scanner is closed")
        if self._active is not None:
            raise RuntimeError("a scan is already running")

        if self._permission is not PermissionState.GRANTED:
            if self.request_permissions() is not PermissionState.GRANTED:
                raise CameraPermissionDeniedError()

        self._cancelled = asyncio.Event()
        with self._camera_session() as camera:
            while not self._cancelled.is_set():
                frame = await asyncio.to_thread(camera.read)
                payload = self._decode_frame(frame) if frame is not None else None
                if payload:
                    logger.info("scanner: code decoded")
                    return extract_token(payload)
                await asyncio.sleep(self._frame_interval)

        logger.info("scanner: scan cancelled")
        return None

    def scan_image(self, data: bytes | str | Path) -> str:
        payload = self._decoder.decode_image(data)
        if not payload:
            raise DecodeFailedError("no QR code found in image")
        return extract_token(payload)

    def cancel(self) -> None:
        self._cancelled.set()

    def close(self) -> None:
        self._closed = True
        self.cancel()

    def _decode_frame(self, frame: Any) -> str | None:
        try:
            return self._decoder.decode(frame)
        except ScannerError:
            raise
        except Exception as exc:
            logger.opt(exception=exc).debug("scanner: frame decode error")
            return None


__all__ = [
    "Camera",
    "CameraPermissionDeniedError",
    "CameraProvider",
    "DecodeFailedError",
    "FrameDecoder",
    "NoCameraError",
    "PermissionState",
    "QRScanner",
    "RefreshTokenPayloadError",
    "ScannerError",
    "UnsupportedPlatformError",
    "extract_token",
]
