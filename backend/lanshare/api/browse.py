"""Browse route - directory listings, and redirects for anything that is a file.

Files are never served from here; they always go through /download/.
"""

import logging
import stat

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from lanshare.api.deps import get_qr_encoder, get_share, raw_path_suffix, wants_json
from lanshare.core.sandbox import PathError
from lanshare.services.listing import NotReadableError, download_url
from lanshare.services.qr import BaseQREncoder, QREncodeError
from lanshare.services.render import render_listing
from lanshare.services.share import FileShare

logger = logging.getLogger(__name__)

router = APIRouter()


def _page_url(request: Request, share: FileShare, path: str) -> str:
    base = share.settings.public_url or str(request.base_url)
    return base.rstrip("/") + path


@router.get("/{path:path}")
async def browse(
    request: Request,
    share: FileShare = Depends(get_share),
    qr: BaseQREncoder = Depends(get_qr_encoder),
):
    try:
        target = share.validator.validate(raw_path_suffix(request, "/"))
    except PathError as e:
        logger.warning(f"Rejected browse path: {e}")
        raise HTTPException(status_code=403, detail="Forbidden or invalid path")

    try:
        st = target.absolute.stat()
    except (FileNotFoundError, NotADirectoryError):
        raise HTTPException(status_code=404, detail="File or directory not found")
    except OSError as e:
        logger.error(f"Cannot stat {target.absolute}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

    if not stat.S_ISDIR(st.st_mode):
        return RedirectResponse(download_url(target.relative), status_code=302)

    try:
        listing = share.lister.build_listing(target)
    except NotReadableError as e:
        logger.error(str(e))
        raise HTTPException(status_code=500, detail="Cannot read directory")

    listing.current_url = _page_url(request, share, listing.path)
    if wants_json(request):
        return listing

    try:
        listing.qr_code_url = await qr.data_uri(listing.current_url)
    except QREncodeError as e:
        logger.error(f"QR code generation failed: {e}")

    return HTMLResponse(render_listing(listing, app_name=share.settings.app_name))
