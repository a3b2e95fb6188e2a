from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from hotelhub.application.use_cases.qr import IssueHotelTokenUseCase, ValidateHotelTokenUseCase
from hotelhub.domain.hotels import (
    ExpiredTokenError,
    Hotel,
    HotelInactiveError,
    HotelNotFoundError,
    InvalidTokenError,
    TokenSupersededError,
)
from hotelhub.infrastructure.audit import AuditAction
from hotelhub.infrastructure.qr import JWTHotelTokenSigner

from conftest import SECRET


def _past_clock(days: int):
    return lambda: datetime.now(UTC) - timedelta(days=days)


@pytest.fixture()
def hotel(hotels) -> Hotel:
    return hotels.add(Hotel(id=0, name="Seaside Inn", address="1 Beach Rd", is_active=True))


@pytest.fixture()
def issuer(hotels, signer, renderer, qr_config) -> IssueHotelTokenUseCase:
    return IssueHotelTokenUseCase(hotels=hotels, signer=signer, renderer=renderer, config=qr_config)


@pytest.fixture()
def validator(hotels, signer, audit) -> ValidateHotelTokenUseCase:
    return ValidateHotelTokenUseCase(hotels=hotels, signer=signer, audit=audit)


def test_generate_then_validate_resolves_hotel(issuer, validator, hotel) -> None:
    token = issuer.generate(hotel.id)

    resolved = validator.execute(token.value)

    assert resolved.hotel_id == hotel.id
    assert resolved.hotel_name == "Seaside Inn"
    assert resolved.address == "1 Beach Rd"
    assert resolved.expires_at == token.expires_at


def test_token_lifetime_defaults_to_ninety_days(issuer, hotel) -> None:
    token = issuer.generate(hotel.id)
    assert token.expires_at - token.issued_at == timedelta(days=90)


def test_generate_reuses_current_token(issuer, hotel) -> None:
    first = issuer.generate(hotel.id)
    second = issuer.generate(hotel.id)
    assert first == second


def test_generate_replaces_expired_token(hotels, signer, renderer, qr_config, hotel, validator) -> None:
    stale = IssueHotelTokenUseCase(
        hotels=hotels, signer=signer, renderer=renderer, config=qr_config, clock=_past_clock(100)
    ).generate(hotel.id)
    fresh_issuer = IssueHotelTokenUseCase(
        hotels=hotels, signer=signer, renderer=renderer, config=qr_config
    )

    fresh = fresh_issuer.generate(hotel.id)

    assert fresh.token_id != stale.token_id
    assert validator.execute(fresh.value).hotel_id == hotel.id


def test_regenerate_supersedes_previous_token(issuer, validator, hotel) -> None:
    old = issuer.generate(hotel.id)
    new = issuer.regenerate(hotel.id)

    assert new.token_id != old.token_id
    assert validator.execute(new.value).hotel_id == hotel.id
    with pytest.raises(TokenSupersededError):
        validator.execute(old.value)


def test_superseded_is_reported_as_invalid_token(issuer, validator, hotel) -> None:
    old = issuer.generate(hotel.id)
    issuer.regenerate(hotel.id)
    with pytest.raises(InvalidTokenError):
        validator.execute(old.value)


def test_latest_token_wins_across_hotels(issuer, validator, hotels, hotel) -> None:
    other = hotels.add(Hotel(id=0, name="Mountain Lodge", address=None, is_active=True))
    token_a = issuer.regenerate(hotel.id)
    token_b = issuer.regenerate(other.id)

    assert validator.execute(token_a.value).hotel_id == hotel.id
    assert validator.execute(token_b.value).hotel_id == other.id


def test_expired_token_fails_with_expired(hotels, signer, renderer, qr_config, hotel, validator) -> None:
    token = IssueHotelTokenUseCase(
        hotels=hotels, signer=signer, renderer=renderer, config=qr_config, clock=_past_clock(91)
    ).generate(hotel.id)

    with pytest.raises(ExpiredTokenError):
        validator.execute(token.value)


def test_expired_token_with_bad_signature_still_reports_expired(
    hotels, renderer, qr_config, hotel, validator
) -> None:
    forger = JWTHotelTokenSigner(
        "not-the-server-secret-at-all-0123456789",
        issuer="hotel-platform-qr",
        audience="guest-registration",
    )
    token = IssueHotelTokenUseCase(
        hotels=hotels, signer=forger, renderer=renderer, config=qr_config, clock=_past_clock(120)
    ).generate(hotel.id)

    with pytest.raises(ExpiredTokenError):
        validator.execute(token.value)


def test_forged_signature_is_invalid(hotels, renderer, qr_config, hotel, validator) -> None:
    forger = JWTHotelTokenSigner(
        "not-the-server-secret-at-all-0123456789",
        issuer="hotel-platform-qr",
        audience="guest-registration",
    )
    token = IssueHotelTokenUseCase(
        hotels=hotels, signer=forger, renderer=renderer, config=qr_config
    ).generate(hotel.id)

    with pytest.raises(InvalidTokenError):
        validator.execute(token.value)


def test_token_of_one_hotel_does_not_verify_as_another(issuer, validator, hotels, hotel) -> None:
    other = hotels.add(Hotel(id=0, name="Mountain Lodge", address=None, is_active=True))
    token = issuer.generate(hotel.id)
    payload = jwt.decode(token.value, options={"verify_signature": False})
    payload["hotelId"] = other.id
    # Re-signed with the first hotel's key.
    forged = jwt.encode(payload, f"{SECRET}{hotel.id}", algorithm="HS256")

    with pytest.raises(InvalidTokenError):
        validator.execute(forged)


def test_wrong_audience_is_invalid(hotels, renderer, qr_config, hotel, validator) -> None:
    foreign = JWTHotelTokenSigner(SECRET, issuer="hotel-platform-qr", audience="somebody-else")
    token = IssueHotelTokenUseCase(
        hotels=hotels, signer=foreign, renderer=renderer, config=qr_config
    ).generate(hotel.id)

    with pytest.raises(InvalidTokenError):
        validator.execute(token.value)


@pytest.mark.parametrize(
    "value",
    [
        None,
        "",
        "   ",
        "ABC123",
        "a.b.c",
        "eyJhbGciOiJIUzI1NiJ9.e30.",
        "eyJhbGciOiJub25lIn0.eyJ0eXBlIjoiaG90ZWxfcmVnaXN0cmF0aW9uX3FyIn0.",
        "\ud800",
        "💥" * 10,
        "x" * 5000,
        "https://guests.example.com/register?qr=abc",
        42,
        ["not", "a", "token"],
    ],
)
def test_garbage_input_fails_closed(validator, value, audit) -> None:
    with pytest.raises(InvalidTokenError):
        validator.execute(value)
    assert audit.events[-1]["action"] is AuditAction.QR_VALIDATION_FAILED
    assert audit.events[-1]["success"] is False


def test_foreign_jwt_is_invalid(validator) -> None:
    foreign = jwt.encode(
        {"sub": "user-1", "exp": datetime.now(UTC) + timedelta(hours=1)},
        "some-other-application-secret-0123456789",
        algorithm="HS256",
    )
    with pytest.raises(InvalidTokenError):
        validator.execute(foreign)


def test_missing_hotel_is_not_found(issuer, validator, hotels, hotel) -> None:
    token = issuer.generate(hotel.id)
    del hotels.hotels[hotel.id]

    with pytest.raises(HotelNotFoundError):
        validator.execute(token.value)


def test_inactive_hotel_is_rejected(issuer, validator, hotels, hotel) -> None:
    token = issuer.generate(hotel.id)
    hotels.deactivate(hotel.id)

    with pytest.raises(HotelInactiveError):
        validator.execute(token.value)


def test_failures_are_audited_with_reason(issuer, validator, hotels, hotel, audit) -> None:
    token = issuer.generate(hotel.id)
    hotels.deactivate(hotel.id)

    with pytest.raises(HotelInactiveError):
        validator.execute(token.value, ip_address="203.0.113.9")

    event = audit.events[-1]
    assert event["details"]["reason"] == "hotel_inactive"
    assert event["ip"] == "203.0.113.9"


def test_issue_rejects_unknown_and_inactive_hotels(issuer, hotels, hotel) -> None:
    with pytest.raises(HotelNotFoundError):
        issuer.generate(999)
    hotels.deactivate(hotel.id)
    with pytest.raises(HotelInactiveError):
        issuer.regenerate(hotel.id)


def test_registration_url_carries_token(issuer, hotel) -> None:
    token = issuer.generate(hotel.id)
    assert issuer.registration_url(token) == f"https://guests.example.com/register?qr={token.value}"


def test_render_clamps_size(issuer, hotel, renderer) -> None:
    issuer.render(hotel.id, 5)
    issuer.render(hotel.id, 50_000)
    issuer.render(hotel.id)

    assert [size for _, size in renderer.calls] == [100, 2000, 300]
    assert renderer.calls[0][0].startswith("https://guests.example.com/register?qr=")


def test_metadata_lists_recommended_sizes(issuer, hotel) -> None:
    info = issuer.metadata(hotel.id).to_dict()

    assert info["hotelId"] == hotel.id
    assert info["recommendedSizes"] == {"display": 300, "print": 600, "poster": 1200}
    assert info["registrationUrlBase"] == "https://guests.example.com/register"
    assert info["registrationUrl"].startswith(info["registrationUrlBase"] + "?qr=")
