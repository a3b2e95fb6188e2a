# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientConfig(BaseSettings):
    api_url: str = Field("http://localhost:5000", alias="HOTELHUB_API_URL")
    request_timeout: float = Field(15.0, gt=0, alias="HOTELHUB_REQUEST_TIMEOUT")
    login_timeout: float = Field(30.0, gt=0, alias="HOTELHUB_LOGIN_TIMEOUT")
    notice_ttl: float = Field(5.0, gt=0, alias="HOTELHUB_NOTICE_TTL")
    scan_interval: float = Field(0.05, ge=0, alias="HOTELHUB_SCAN_INTERVAL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        validate_by_name=True,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def load_client_config() -> ClientConfig:
    return ClientConfig()  # type: ignore[call-arg]


__all__ = ["ClientConfig", "load_client_config"]
