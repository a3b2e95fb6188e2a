from __future__ import annotations

from io import BytesIO

import pytest
from PIL import Image

from hotelhub.application.use_cases.qr import IssueHotelTokenUseCase
from hotelhub.client.opencv import OpenCVFrameDecoder
from hotelhub.client.scanner import DecodeFailedError, extract_token
from hotelhub.domain.hotels import Hotel
from hotelhub.infrastructure.qr import QRCodePNGRenderer


@pytest.mark.parametrize("size", [100, 300, 1200])
def test_png_has_requested_size(size: int) -> None:
    png = QRCodePNGRenderer().render_png("https://guests.example.com/register?qr=abc", size)

    image = Image.open(BytesIO(png))
    assert image.format == "PNG"
    assert image.size == (size, size)


def test_png_is_black_on_white() -> None:
    png = QRCodePNGRenderer().render_png("hotel", 300)

    colors = {color for _, color in Image.open(BytesIO(png)).convert("RGB").getcolors()}
    assert colors == {(0, 0, 0), (255, 255, 255)}


def test_decoder_rejects_unreadable_image() -> None:
    with pytest.raises(DecodeFailedError):
        OpenCVFrameDecoder().decode_image(b"definitely not an image")


def test_decoder_returns_none_for_blank_image() -> None:
    buffer = BytesIO()
    Image.new("RGB", (200, 200), "white").save(buffer, format="PNG")

    assert OpenCVFrameDecoder().decode_image(buffer.getvalue()) is None


@pytest.mark.parametrize("size", [300, 600])
@pytest.mark.parametrize("address", ["1 Beach Rd", "Apartment 12, 400 Long Promenade Boulevard, Seaside Village, 90210"])
def test_issued_token_survives_render_and_decode(hotels, signer, qr_config, size, address) -> None:
    hotel = hotels.add(Hotel(id=0, name="Seaside Inn", address=address, is_active=True))
    issuer = IssueHotelTokenUseCase(
        hotels=hotels, signer=signer, renderer=QRCodePNGRenderer(), config=qr_config
    )
    token = issuer.generate(hotel.id)

    payload = OpenCVFrameDecoder().decode_image(issuer.render(hotel.id, size))

    assert payload == issuer.registration_url(token)
    assert extract_token(payload) == token.value
