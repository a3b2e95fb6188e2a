from __future__ import annotations

import asyncio
import json
from typing import Any
from unittest.mock import MagicMock

import httpx
import pytest

from hotelhub.client import session as session_module
from hotelhub.client.api import ApiError, HotelHubClient
from hotelhub.client.notifications import TransientNotice
from hotelhub.client.session import (
    ForbiddenError,
    LoginTimeoutError,
    SessionPayloadError,
    SessionService,
    normalize_session,
)
from hotelhub.domain.roles import Role


# -- normalize_session --------------------------------------------------------


def test_flat_payload() -> None:
    session = normalize_session(
        {
            "user": {"id": 3, "firstName": "Ada", "email": "ada@example.com", "hotelId": 2},
            "role": "guest",
            "expiresAt": "2026-11-08T10:00:00+00:00",
        }
    )

    assert session.user_id == 3
    assert session.role is Role.GUEST
    assert session.hotel_id == 2
    assert session.expires_at.year == 2026
    assert session.landing_path == "/hotels/2/categories"


def test_wrapped_payload_with_role_on_user() -> None:
    session = normalize_session({"data": {"user": {"_id": "9", "role": "hotel_admin"}}})

    assert session.user_id == 9
    assert session.role is Role.HOTEL_ADMIN
    assert session.landing_path == "/hotel/dashboard"


def test_hotel_object_is_reduced_to_its_id() -> None:
    session = normalize_session({"user": {"id": 1, "hotel": {"_id": 5}}, "role": "client"})

    assert session.hotel_id == 5
    assert session.role is Role.GUEST


@pytest.mark.parametrize(
    "payload",
    [
        None,
        [],
        {"role": "guest"},
        {"user": {"firstName": "Ada"}, "role": "guest"},
        {"user": {"id": 1}, "role": "janitor"},
        {"user": {"id": 1}},
    ],
)
def test_malformed_payloads_are_rejected(payload) -> None:
    with pytest.raises(SessionPayloadError):
        normalize_session(payload)


# -- SessionService -----------------------------------------------------------


class ScriptedClient:
    def __init__(self, *, login_delay: float = 0.0, login_error: ApiError | None = None) -> None:
        self.login_delay = login_delay
        self.login_error = login_error
        self.check_error: ApiError | None = None
        self.logged_out = False
        self.login_finished = False

    async def login(self, email: str, password: str, role: str) -> dict[str, Any]:
        await asyncio.sleep(self.login_delay)
        self.login_finished = True
        if self.login_error is not None:
            raise self.login_error
        return {"user": {"id": 4, "email": email}, "role": role}

    async def check_auth(self) -> dict[str, Any]:
        if self.check_error is not None:
            raise self.check_error
        return {"user": {"id": 4}, "role": "superadmin"}

    async def logout(self) -> None:
        self.logged_out = True


def test_login_establishes_session() -> None:
    service = SessionService(ScriptedClient(), login_timeout=1)

    session = asyncio.run(service.login("ada@example.com", "pw", "service"))

    assert session.role is Role.SERVICE_PROVIDER
    assert service.landing_path == "/service/dashboard"
    assert service.loading is False


def test_login_times_out_and_resets_loading() -> None:
    client = ScriptedClient(login_delay=0.2)
    service = SessionService(client, login_timeout=0.05)

    with pytest.raises(LoginTimeoutError):
        asyncio.run(service.login("ada@example.com", "pw", Role.GUEST))

    assert service.loading is False
    assert service.session is None


def test_abandoned_login_failure_is_retrieved_and_logged(monkeypatch) -> None:
    recorder = MagicMock()
    monkeypatch.setattr(session_module, "logger", recorder)
    client = ScriptedClient(login_delay=0.1, login_error=ApiError(401, "invalid_credentials", "nope"))
    service = SessionService(client, login_timeout=0.01)

    async def scenario() -> None:
        with pytest.raises(LoginTimeoutError):
            await service.login("ada@example.com", "pw", Role.GUEST)
        await asyncio.sleep(0.3)

    asyncio.run(scenario())

    assert client.login_finished is True
    warnings = [call.args[0] for call in recorder.warning.call_args_list]
    assert any("abandoned request failed" in message and "invalid_credentials" in message for message in warnings)


def test_forbidden_login_redirects() -> None:
    client = ScriptedClient(login_error=ApiError(403, "role_mismatch", "Use the guest portal"))
    service = SessionService(client, login_timeout=1)

    with pytest.raises(ForbiddenError) as exc_info:
        asyncio.run(service.login("ada@example.com", "pw", "hotel"))

    assert exc_info.value.redirect == "/403"
    assert exc_info.value.message == "Use the guest portal"


def test_other_login_errors_propagate() -> None:
    client = ScriptedClient(login_error=ApiError(401, "invalid_credentials", "Invalid email or password"))
    service = SessionService(client, login_timeout=1)

    with pytest.raises(ApiError):
        asyncio.run(service.login("ada@example.com", "wrong", "guest"))


def test_check_auth_unauthenticated_is_none() -> None:
    client = ScriptedClient()
    client.check_error = ApiError(401, "unauthenticated", "Please log in")
    service = SessionService(client, login_timeout=1)

    assert asyncio.run(service.check_auth()) is None
    assert service.session is None


def test_check_auth_server_errors_propagate() -> None:
    client = ScriptedClient()
    client.check_error = ApiError(500, "internal_error", "boom")
    service = SessionService(client, login_timeout=1)

    with pytest.raises(ApiError):
        asyncio.run(service.check_auth())


def test_logout_clears_session() -> None:
    client = ScriptedClient()
    service = SessionService(client, login_timeout=1)
    asyncio.run(service.check_auth())
    assert service.session is not None

    asyncio.run(service.logout())

    assert client.logged_out is True
    assert service.session is None


# -- HotelHubClient -----------------------------------------------------------


def _client(handler) -> HotelHubClient:
    return HotelHubClient("http://api.test", timeout=1, transport=httpx.MockTransport(handler))


def test_client_posts_qr_token_and_returns_body() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"hotelId": 1, "hotelName": "Seaside Inn"})

    async def run() -> dict[str, Any]:
        async with _client(handler) as client:
            return await client.validate_qr("tok")

    body = asyncio.run(run())

    assert body["hotelId"] == 1
    assert seen[0].url.path == "/api/auth/validate-qr"
    assert json.loads(seen[0].content) == {"qrToken": "tok"}


def test_client_maps_error_body_to_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            400,
            json={"error": "qr_token_expired", "message": "QR code has expired.", "context": {"hotel_id": 1}},
        )

    async def run() -> None:
        async with _client(handler) as client:
            await client.validate_qr("tok")

    with pytest.raises(ApiError) as exc_info:
        asyncio.run(run())

    assert exc_info.value.status == 400
    assert exc_info.value.code == "qr_token_expired"
    assert exc_info.value.context == {"hotel_id": 1}


def test_client_maps_non_json_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html>bad gateway</html>")

    async def run() -> None:
        async with _client(handler) as client:
            await client.list_hotels()

    with pytest.raises(ApiError) as exc_info:
        asyncio.run(run())

    assert exc_info.value.code == "http_502"


@pytest.mark.parametrize(
    ("exc", "code"),
    [
        (httpx.ReadTimeout("slow"), "network_timeout"),
        (httpx.ConnectError("refused"), "network_error"),
    ],
)
def test_client_maps_transport_failures(exc, code) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc

    async def run() -> None:
        async with _client(handler) as client:
            await client.check_auth()

    with pytest.raises(ApiError) as exc_info:
        asyncio.run(run())

    assert exc_info.value.status == 0
    assert exc_info.value.code == code


def test_list_hotels_unwraps_collection() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"hotels": [{"id": 1, "name": "Seaside Inn"}]})

    async def run() -> list[dict[str, Any]]:
        async with _client(handler) as client:
            return await client.list_hotels()

    assert asyncio.run(run()) == [{"id": 1, "name": "Seaside Inn"}]


# -- TransientNotice ----------------------------------------------------------


def test_notice_expires_after_ttl() -> None:
    now = [100.0]
    notice = TransientNotice(ttl=5, clock=lambda: now[0])

    notice.show("Registration failed")
    assert notice.current() == "Registration failed"

    now[0] += 5
    assert notice.current() is None
