# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from io import BytesIO

import qrcode
from PIL import Image

from hotelhub.domain.hotels import QRImageRenderer


class QRCodePNGRenderer(QRImageRenderer):
    """Render payloads as square PNGs using high error correction.

    Modules are drawn at a whole number of pixels and centred on a white
    canvas of the requested size. Only payloads too dense for ``size`` are
    scaled down.
    """

    def __init__(self, *, border: int = 4) -> None:
        self._border = border

    def render_png(self, data: str, size: int) -> bytes:
        qr = qrcode.QRCode(
            version=None,
            error_correction=qrcode.constants.ERROR_CORRECT_H,
            box_size=1,
            border=self._border,
        )
        qr.add_data(data)
        qr.make(fit=True)
        qr.box_size = max(1, size // (qr.modules_count + 2 * self._border))

        code = qr.make_image(fill_color="black", back_color="white").get_image().convert("RGB")
        if code.width > size:
            code = code.resize((size, size), Image.Resampling.NEAREST)

        canvas = Image.new("RGB", (size, size), "white")
        offset = (size - code.width) // 2
        canvas.paste(code, (offset, offset))

        buffer = BytesIO()
        canvas.save(buffer, format="PNG")
        return buffer.getvalue()
