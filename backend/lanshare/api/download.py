import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import FileResponse

from lanshare.api.deps import get_share, raw_path_suffix
from lanshare.core.sandbox import PathError
from lanshare.services.share import FileShare
from lanshare.services.transfer import IsDirectoryError, NotFoundError, TransferError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/download/{path:path}")
async def download(request: Request, share: FileShare = Depends(get_share)):
    try:
        raw = raw_path_suffix(request, "/download/")
        if not raw:
            raise HTTPException(status_code=400, detail="Invalid download path")
        target = share.validator.validate(raw)
    except PathError as e:
        logger.warning(f"Rejected download path: {e}")
        raise HTTPException(status_code=403, detail="Forbidden or invalid path")

    try:
        dl = share.transfer.prepare_download(target)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="File not found")
    except IsDirectoryError:
        raise HTTPException(status_code=400, detail="Cannot download a directory")
    except TransferError as e:
        logger.warning(str(e))
        raise HTTPException(status_code=400, detail="Not a regular file")
    except OSError as e:
        logger.error(f"Cannot stat {target.absolute}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

    return FileResponse(
        dl.path,
        media_type=dl.media_type,
        headers={"Content-Disposition": dl.content_disposition},
        stat_result=dl.stat_result,
    )
