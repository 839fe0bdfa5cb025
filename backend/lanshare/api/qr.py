import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse, Response

from lanshare.api.deps import get_qr_encoder
from lanshare.services.qr import BaseQREncoder, QREncodeError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/generate-qrcode")
async def generate_qrcode(data: str = "", qr: BaseQREncoder = Depends(get_qr_encoder)):
    """Return a data: URI of the QR code for `data`, ready for an <img src>."""
    if not data:
        raise HTTPException(status_code=400, detail="Missing QR code data")

    try:
        payload = await qr.data_uri(data)
    except QREncodeError as e:
        logger.error(f"QR code generation failed: {e}")
        return Response(status_code=500)

    return PlainTextResponse(payload)
