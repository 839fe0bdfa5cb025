"""Tests for QR code generation."""

import asyncio
import base64
import io

import pytest
from PIL import Image

from lanshare.api.deps import get_qr_encoder
from lanshare.services.qr import BaseQREncoder, QREncodeError
from lanshare.services.qr.png import PNGQREncoder


class FailingQREncoder(BaseQREncoder):
    async def encode(self, data: str) -> bytes:
        raise QREncodeError("too much data")

    def image_mime_type(self) -> str:
        return "image/png"


def test_generate_qrcode(client):
    response = client.get("/generate-qrcode", params={"data": "http://192.168.1.20:8080/"})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    expected = base64.b64encode(b"qr:http://192.168.1.20:8080/").decode()
    assert response.text == f"data:image/png;base64,{expected}"


def test_generate_qrcode_missing_data(client):
    assert client.get("/generate-qrcode").status_code == 400
    assert client.get("/generate-qrcode", params={"data": ""}).status_code == 400


def test_generate_qrcode_encoder_failure(client, app):
    app.dependency_overrides[get_qr_encoder] = lambda: FailingQREncoder()
    response = client.get("/generate-qrcode", params={"data": "x"})
    assert response.status_code == 500
    assert response.content == b""


def test_browse_page_survives_encoder_failure(client, app):
    app.dependency_overrides[get_qr_encoder] = lambda: FailingQREncoder()
    response = client.get("/")
    assert response.status_code == 200
    assert "data:image/png" not in response.text


def test_png_encoder_produces_square_png():
    png = asyncio.run(PNGQREncoder(size=150).encode("http://192.168.1.20:8080/docs/"))
    assert png.startswith(b"\x89PNG")
    assert Image.open(io.BytesIO(png)).size == (150, 150)


def test_png_encoder_data_uri():
    uri = asyncio.run(PNGQREncoder(size=64).data_uri("hello"))
    assert uri.startswith("data:image/png;base64,")


def test_png_encoder_overflow():
    with pytest.raises(QREncodeError):
        asyncio.run(PNGQREncoder().encode("x" * 5000))
