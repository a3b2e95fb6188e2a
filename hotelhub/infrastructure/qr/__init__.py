# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .renderer import QRCodePNGRenderer
from .signer import JWTHotelTokenSigner

__all__ = ["JWTHotelTokenSigner", "QRCodePNGRenderer"]
