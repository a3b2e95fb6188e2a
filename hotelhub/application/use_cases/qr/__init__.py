# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .issue_token import IssueHotelTokenUseCase, QRMetadata
from .validate_token import ValidateHotelTokenUseCase

__all__ = ["IssueHotelTokenUseCase", "QRMetadata", "ValidateHotelTokenUseCase"]
