# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""OpenCV camera and decoder used by :class:`~hotelhub.client.scanner.QRScanner`."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import cv2
import numpy as np

from hotelhub.client.scanner import (
    DecodeFailedError,
    NoCameraError,
    PermissionState,
    UnsupportedPlatformError,
)


class OpenCVCamera:
    def __init__(self, capture: cv2.VideoCapture) -> None:
        self._capture = capture

    def read(self) -> Any | None:
        ok, frame = self._capture.read()
        return frame if ok else None

    def release(self) -> None:
        self._capture.release()


class OpenCVCameraProvider:
    def __init__(self, index: int = 0) -> None:
        self._index = index

    def _capture(self) -> cv2.VideoCapture:
        if not hasattr(cv2, "VideoCapture"):
            raise UnsupportedPlatformError("OpenCV build has no video support")
        return cv2.VideoCapture(self._index)

    def request_permission(self) -> PermissionState:
        # OpenCV cannot tell a denied camera from a busy one.
        capture = self._capture()
        try:
            return PermissionState.GRANTED if capture.isOpened() else PermissionState.DENIED
        finally:
            capture.release()

    def open(self) -> OpenCVCamera:
        capture = self._capture()
        if not capture.isOpened():
            capture.release()
            raise NoCameraError(f"camera {self._index} could not be opened")
        return OpenCVCamera(capture)


class OpenCVFrameDecoder:
    def __init__(self) -> None:
        if not hasattr(cv2, "QRCodeDetector"):
            raise UnsupportedPlatformError("OpenCV build has no QR detector")
        self._detector = cv2.QRCodeDetector()

    def decode(self, frame: Any) -> str | None:
        data, points, _ = self._detector.detectAndDecode(frame)
        if points is None or not data:
            return None
        return data

    def decode_image(self, data: bytes | str | Path) -> str | None:
        if isinstance(data, bytes | bytearray):
            image = cv2.imdecode(np.frombuffer(data, dtype=np.uint8), cv2.IMREAD_COLOR)
        else:
            image = cv2.imread(str(data), cv2.IMREAD_COLOR)
        if image is None:
            raise DecodeFailedError("image could not be read")
        return self.decode(image)


__all__ = ["OpenCVCamera", "OpenCVCameraProvider", "OpenCVFrameDecoder"]
