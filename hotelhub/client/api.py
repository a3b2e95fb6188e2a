# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Async HTTP client for the HotelHub API."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import httpx

from hotelhub.client.config import load_client_config
from hotelhub.shared.logging import logger


@dataclass(slots=True, eq=False)
class ApiError(Exception):
    status: int
    code: str
    message: str
    context: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message)

    @classmethod
    def from_response(cls, response: httpx.Response) -> ApiError:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, Mapping):
            body = {}
        code = str(body.get("error") or f"http_{response.status_code}")
        message = str(body.get("message") or response.reason_phrase or "Request failed")
        context = body.get("context") if isinstance(body.get("context"), Mapping) else {}
        return cls(status=response.status_code, code=code, message=message, context=context)


class HotelHubClient:
    """Keeps the session cookie between calls, like a browser would."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        config = load_client_config()
        self._http = httpx.AsyncClient(
            base_url=base_url or config.api_url,
            timeout=timeout or config.request_timeout,
            transport=transport,
        )

    async def __aenter__(self) -> HotelHubClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.TimeoutException as exc:
            logger.warning(f"api: timeout on {method} {path}")
            raise ApiError(0, "network_timeout", "The server took too long to respond") from exc
        except httpx.TransportError as exc:
            logger.warning(f"api: network error on {method} {path}: {type(exc).__name__}")
            raise ApiError(0, "network_error", "Could not reach the server") from exc

        if response.is_success:
            return response.json() if response.content else {}

        error = ApiError.from_response(response)
        logger.debug(f"api: {method} {path} -> {error.status} {error.code}")
        raise error

    async def validate_qr(self, token: str) -> dict[str, Any]:
        return await self._request("POST", "/api/auth/validate-qr", json={"qrToken": token})

    async def list_hotels(self) -> list[dict[str, Any]]:
        body = await self._request("GET", "/api/hotels")
        return list(body.get("hotels", []))

    async def register(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        return await self._request("POST", "/api/auth/register", json=dict(payload))

    async def login(self, email: str, password: str, role: str) -> dict[str, Any]:
        return await self._request(
            "POST",
            "/api/auth/login",
            json={"email": email, "password": password, "role": role},
        )

    async def check_auth(self) -> dict[str, Any]:
        return await self._request("GET", "/api/auth/check")

    async def logout(self) -> None:
        await self._request("DELETE", "/api/auth/logout")


__all__ = ["ApiError", "HotelHubClient"]
