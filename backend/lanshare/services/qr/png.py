"""PNG QR encoder backed by the qrcode library and Pillow."""

import asyncio
import io

import qrcode
from PIL import Image
from qrcode.constants import ERROR_CORRECT_M
from qrcode.exceptions import DataOverflowError

from lanshare.services.qr.base import BaseQREncoder, QREncodeError


class PNGQREncoder(BaseQREncoder):
    """Medium error correction, with the default quiet-zone border, scaled to a square of `size` pixels."""

    def __init__(self, size: int = 150):
        self._size = size

    def _render(self, data: str) -> bytes:
        qr = qrcode.QRCode(version=None, error_correction=ERROR_CORRECT_M, box_size=10, border=4)
        try:
            qr.add_data(data)
            qr.make(fit=True)
        except (DataOverflowError, ValueError) as e:
            raise QREncodeError(f"Cannot encode {len(data)} characters as a QR code: {e}") from e

        img = qr.make_image(fill_color="black", back_color="white").get_image()
        img = img.convert("L").resize((self._size, self._size), Image.NEAREST)
        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return buf.getvalue()

    async def encode(self, data: str) -> bytes:
        return await asyncio.to_thread(self._render, data)

    def image_mime_type(self) -> str:
        return "image/png"
