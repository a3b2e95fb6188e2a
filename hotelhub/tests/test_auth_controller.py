from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from typing import cast
from unittest.mock import MagicMock

import pytest
from flask import Flask

from hotelhub.application.use_cases.users.register_guest import RegisterGuestUseCase
from hotelhub.domain.hotels import ExpiredTokenError, ResolvedHotel
from hotelhub.domain.roles import Role
from hotelhub.domain.users.entities import RegistrationRequest, Session, User
from hotelhub.domain.users.exceptions import RoleMismatchError, UnauthenticatedError
from hotelhub.interfaces.http.controllers.auth_controller import AuthController
from hotelhub.shared.middleware.error_handler import configure_error_handling

REGISTRATION = {
    "firstName": "Ada",
    "email": "ada@example.com",
    "phone": "+1 555 010 2030",
    "password": "Sunny#Days1",
    "checkInDate": "2026-11-01",
    "checkOutDate": "2026-11-04",
    "selectedHotelId": 3,
}


@pytest.fixture()
def flask_app() -> Flask:
    app = Flask(__name__)
    configure_error_handling(app)
    return app


def _guest(role: Role = Role.GUEST, hotel_id: int | None = 3) -> tuple[User, Session]:
    user = User(
        id=1,
        first_name="Ada",
        email="ada@example.com",
        phone="+1 555 010 2030",
        password_hash="hash",
        role=role,
        created_at=datetime.now(UTC),
        hotel_id=hotel_id,
    )
    session = Session(
        user_id=1,
        role=role,
        expires_at=datetime.now(UTC) + timedelta(days=7),
        hotel_id=hotel_id,
        token="token123",
    )
    return user, session


def _controller(**overrides) -> AuthController:
    use_cases = {
        "validate_token_use_case": MagicMock(),
        "register_use_case": MagicMock(),
        "login_use_case": MagicMock(),
        "check_auth_use_case": MagicMock(),
        "logout_use_case": MagicMock(),
    }
    use_cases.update(overrides)
    return AuthController(**use_cases)


def test_register_endpoint_sets_cookie(flask_app: Flask) -> None:
    received: dict[str, RegistrationRequest] = {}

    class StubRegister:
        def execute(self, request: RegistrationRequest, ip_address=None) -> tuple[User, Session]:
            received["request"] = request
            return _guest()

    controller = _controller(register_use_case=cast(RegisterGuestUseCase, StubRegister()))
    flask_app.register_blueprint(controller.as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/api/auth/register", json=REGISTRATION)

    assert response.status_code == 201
    assert received["request"].check_in_date == date(2026, 11, 1)
    assert received["request"].selected_hotel_id == 3
    assert response.headers["Set-Cookie"].startswith("auth_token=token123")
    assert "HttpOnly" in response.headers["Set-Cookie"]
    body = response.get_json()
    assert body["role"] == "guest"
    assert body["landingPath"] == "/hotels/3/categories"
    assert "passwordHash" not in body["user"]


def test_register_field_errors_return_422(flask_app: Flask) -> None:
    register = MagicMock()
    flask_app.register_blueprint(_controller(register_use_case=register).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/register",
            json={**REGISTRATION, "checkOutDate": "2026-10-01", "password": "short"},
        )

    assert response.status_code == 422
    payload = response.get_json()
    assert payload["error"] == "validation_error"
    assert {"checkOutDate", "password"} <= set(payload["context"]["fields"])
    register.execute.assert_not_called()


def test_validate_qr_returns_hotel(flask_app: Flask) -> None:
    validate = MagicMock()
    validate.execute.return_value = ResolvedHotel(
        hotel_id=3,
        hotel_name="Seaside Inn",
        address="1 Beach Rd",
        expires_at=datetime(2027, 1, 1, tzinfo=UTC),
    )
    flask_app.register_blueprint(_controller(validate_token_use_case=validate).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/api/auth/validate-qr", json={"qrToken": "tok"})

    assert response.status_code == 200
    assert response.get_json()["hotelName"] == "Seaside Inn"
    assert validate.execute.call_args.args[0] == "tok"


def test_validate_qr_error_is_reported(flask_app: Flask) -> None:
    validate = MagicMock()
    validate.execute.side_effect = ExpiredTokenError()
    flask_app.register_blueprint(_controller(validate_token_use_case=validate).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/api/auth/validate-qr", json={})

    assert response.status_code == 400
    assert response.get_json()["error"] == "qr_token_expired"


def test_login_invalid_payload_returns_422(flask_app: Flask) -> None:
    flask_app.register_blueprint(_controller().as_blueprint())

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/login", json={"email": "ada", "password": "x", "role": "janitor"}
        )

    assert response.status_code == 422
    payload = response.get_json()
    assert payload["error"] == "validation_error"
    assert {"email", "role"} <= set(payload["context"]["fields"])


def test_login_role_mismatch_is_forbidden(flask_app: Flask) -> None:
    login = MagicMock()
    login.execute.side_effect = RoleMismatchError(context={"portal": "hotel"})
    flask_app.register_blueprint(_controller(login_use_case=login).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/login",
            json={"email": "ada@example.com", "password": "pw", "role": "hotel_admin"},
        )

    assert response.status_code == 403
    assert response.get_json()["error"] == "role_mismatch"
    assert login.execute.call_args.args[2] is Role.HOTEL_ADMIN


def test_login_success_sets_cookie(flask_app: Flask) -> None:
    login = MagicMock()
    login.execute.return_value = _guest(Role.HOTEL_ADMIN)
    flask_app.register_blueprint(_controller(login_use_case=login).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/login",
            json={"email": "ADA@example.com", "password": "pw", "role": "hotel"},
        )

    assert response.status_code == 200
    assert response.get_json()["landingPath"] == "/hotel/dashboard"
    assert login.execute.call_args.args[0] == "ada@example.com"


def test_check_without_cookie_is_unauthorized(flask_app: Flask) -> None:
    check = MagicMock()
    check.execute.side_effect = UnauthenticatedError()
    flask_app.register_blueprint(_controller(check_auth_use_case=check).as_blueprint())

    with flask_app.test_client() as client:
        response = client.get("/api/auth/check")

    assert response.status_code == 401
    check.execute.assert_called_once_with(None)


def test_check_reads_session_cookie(flask_app: Flask) -> None:
    check = MagicMock()
    check.execute.return_value = _guest()
    flask_app.register_blueprint(_controller(check_auth_use_case=check).as_blueprint())

    with flask_app.test_client() as client:
        client.set_cookie("auth_token", "token123")
        response = client.get("/api/auth/check")

    assert response.status_code == 200
    check.execute.assert_called_once_with("token123")


def test_logout_revokes_and_clears_cookie(flask_app: Flask) -> None:
    logout = MagicMock()
    flask_app.register_blueprint(_controller(logout_use_case=logout).as_blueprint())

    with flask_app.test_client() as client:
        client.set_cookie("auth_token", "token123")
        response = client.delete("/api/auth/logout")

    assert response.status_code == 200
    logout.execute.assert_called_once_with("token123")
    assert "auth_token=;" in response.headers["Set-Cookie"]
