"""Upload routes - multipart uploads into an existing directory of the share."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse, RedirectResponse
from starlette.datastructures import UploadFile

from lanshare.api.deps import get_share, raw_path_suffix
from lanshare.core.limits import BodyTooLargeError
from lanshare.core.sandbox import PathError, ValidatedPath
from lanshare.services.listing import browse_url
from lanshare.services.share import FileShare
from lanshare.services.transfer import BadMultipartError, NoFilesError, NotDirectoryError, NotFoundError

logger = logging.getLogger(__name__)

router = APIRouter()


def _upload_target(request: Request, share: FileShare) -> ValidatedPath:
    try:
        target = share.validator.validate(raw_path_suffix(request, "/upload/"))
    except PathError as e:
        logger.warning(f"Rejected upload path: {e}")
        raise HTTPException(status_code=400, detail="Invalid upload target path")

    try:
        share.transfer.ensure_directory(target)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Upload target directory does not exist")
    except NotDirectoryError:
        raise HTTPException(status_code=400, detail="Upload target must be a directory")
    return target


def _check_declared_length(request: Request, limit: int) -> None:
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > limit:
        raise BodyTooLargeError(f"Declared body of {declared} bytes exceeds {limit}")


def _file_parts(form) -> list[UploadFile]:
    parts = [item for item in form.getlist("file") if isinstance(item, UploadFile)]
    if not parts:
        raise NoFilesError("No files found in the upload")
    return parts


@router.get("/upload/{path:path}")
async def upload_redirect(request: Request, share: FileShare = Depends(get_share)):
    target = _upload_target(request, share)
    return RedirectResponse(browse_url(target.relative), status_code=303)


@router.post("/upload/{path:path}")
async def upload(request: Request, share: FileShare = Depends(get_share)):
    target = _upload_target(request, share)

    try:
        if not request.headers.get("content-type", "").startswith("multipart/form-data"):
            raise BadMultipartError("Upload must be multipart/form-data")
        _check_declared_length(request, share.settings.max_upload_bytes)
        form = await request.form()
    except BadMultipartError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except BodyTooLargeError as e:
        logger.warning(f"Upload into '/{target.relative}' rejected: {e}")
        raise HTTPException(status_code=413, detail="Upload too large")

    try:
        parts = _file_parts(form)
        report = await share.transfer.upload(target, parts)
    except NoFilesError as e:
        raise HTTPException(status_code=400, detail=str(e))
    finally:
        await form.close()

    logger.info(
        f"Upload into '/{target.relative}': {report.success_count} succeeded, {report.failure_count} failed"
    )
    return PlainTextResponse(report.summary())
