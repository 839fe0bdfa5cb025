"""Abstract QR encoder interface. The router only ever talks to this."""

import base64
from abc import ABC, abstractmethod


class QREncodeError(Exception):
    pass


class BaseQREncoder(ABC):
    @abstractmethod
    async def encode(self, data: str) -> bytes:
        """Encode data as a QR code image. Raises QREncodeError on failure."""
        ...

    @abstractmethod
    def image_mime_type(self) -> str:
        """Return the MIME type of the encoded image."""
        ...

    async def data_uri(self, data: str) -> str:
        """Encode data and wrap the image in a data: URI an <img> tag can embed."""
        image = await self.encode(data)
        return f"data:{self.image_mime_type()};base64,{base64.b64encode(image).decode('ascii')}"
