"""QR encoder factory."""

from lanshare.core.config import Settings
from lanshare.services.qr.base import BaseQREncoder, QREncodeError

__all__ = ["BaseQREncoder", "QREncodeError", "get_qr_encoder"]


def get_qr_encoder(settings: Settings) -> BaseQREncoder:
    """Returns the PNG encoder sized from settings."""
    from lanshare.services.qr.png import PNGQREncoder
    return PNGQREncoder(size=settings.qr_size)
