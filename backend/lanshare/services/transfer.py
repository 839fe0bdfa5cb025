"""File transfer - download preparation and per-part uploads into a validated directory.

Uploads are written to a hidden temporary sibling and moved into place only
once the whole part has been received, so a failed part never leaves partial
content on disk.
"""

import logging
import os
import stat
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable
from urllib.parse import quote

from fastapi import UploadFile

from lanshare.core.sandbox import PathError, PathValidator, ValidatedPath
from lanshare.models.share import UploadFailure, UploadReport

logger = logging.getLogger(__name__)

MIME_TYPES = {
    ".html": "text/html",
    ".htm": "text/html",
    ".txt": "text/plain",
    ".css": "text/css",
    ".js": "application/javascript",
    ".json": "application/json",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".svg": "image/svg+xml",
    ".pdf": "application/pdf",
    ".mp3": "audio/mpeg",
    ".mp4": "video/mp4",
    ".webm": "video/webm",
    ".zip": "application/zip",
    ".rar": "application/x-rar-compressed",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".xls": "application/vnd.ms-excel",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".ppt": "application/vnd.ms-powerpoint",
    ".pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
}
DEFAULT_MIME_TYPE = "application/octet-stream"

# in-progress uploads; hidden from listings
UPLOAD_TEMP_PREFIX = ".upload-"


class TransferError(Exception):
    pass


class NotFoundError(TransferError):
    pass


class IsDirectoryError(TransferError):
    pass


class NotDirectoryError(TransferError):
    pass


class WriteFailedError(TransferError):
    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class FormError(Exception):
    pass


class BadMultipartError(FormError):
    pass


class NoFilesError(FormError):
    pass


def guess_mime_type(filename: str) -> str:
    return MIME_TYPES.get(Path(filename).suffix.lower(), DEFAULT_MIME_TYPE)


def content_disposition(filename: str) -> str:
    """Attachment header with an ASCII fallback and an RFC 5987 UTF-8 name."""
    fallback = "".join(
        c if c.isascii() and c.isprintable() and c not in '"\\' else "_" for c in filename
    )
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


def base_filename(filename: str | None) -> str:
    """Drop any directory components a client put in an upload file name."""
    return (filename or "").replace("\\", "/").rsplit("/", 1)[-1]


@dataclass
class Download:
    path: Path
    filename: str
    media_type: str
    stat_result: os.stat_result

    @property
    def size(self) -> int:
        return self.stat_result.st_size

    @property
    def content_disposition(self) -> str:
        return content_disposition(self.filename)


class FileTransfer:
    def __init__(self, validator: PathValidator, chunk_size: int = 1024 * 1024) -> None:
        self.validator = validator
        self.chunk_size = chunk_size

    def prepare_download(self, path: ValidatedPath) -> Download:
        try:
            st = path.absolute.stat()
        except (FileNotFoundError, NotADirectoryError) as e:
            raise NotFoundError(f"File '{path.relative}' not found") from e

        if stat.S_ISDIR(st.st_mode):
            raise IsDirectoryError(f"'{path.relative}' is a directory")
        if not stat.S_ISREG(st.st_mode):
            raise TransferError(f"'{path.relative}' is not a regular file")

        return Download(
            path=path.absolute,
            filename=path.absolute.name,
            media_type=guess_mime_type(path.absolute.name),
            stat_result=st,
        )

    def ensure_directory(self, target: ValidatedPath) -> None:
        try:
            st = target.absolute.stat()
        except (FileNotFoundError, NotADirectoryError) as e:
            raise NotFoundError(f"Directory '{target.relative}' not found") from e
        if not stat.S_ISDIR(st.st_mode):
            raise NotDirectoryError(f"'{target.relative}' is not a directory")

    async def upload(self, target: ValidatedPath, parts: Iterable[UploadFile]) -> UploadReport:
        """Write every part into target. One failed part never stops the others."""
        self.ensure_directory(target)

        report = UploadReport()
        for part in parts:
            name = part.filename or ""
            try:
                dest = await self.save_part(target, part)
            except WriteFailedError as e:
                logger.warning(f"Upload of {name!r} into '/{target.relative}' failed: {e.__cause__ or e}")
                report.failed.append(UploadFailure(filename=name, reason=e.reason))
                continue
            logger.info(f"Uploaded {name!r} -> {dest.absolute}")
            report.succeeded.append(dest.name)
        return report

    async def save_part(self, target: ValidatedPath, part: UploadFile) -> ValidatedPath:
        try:
            dest = self.validator.child(target, base_filename(part.filename))
        except PathError as e:
            raise WriteFailedError("invalid file name") from e

        tmp = target.absolute / f"{UPLOAD_TEMP_PREFIX}{uuid.uuid4().hex}.part"
        committed = False
        try:
            with open(tmp, "xb") as out:
                while chunk := await part.read(self.chunk_size):
                    out.write(chunk)
            os.replace(tmp, dest.absolute)
            committed = True
        except Exception as e:
            raise WriteFailedError("write failed") from e
        finally:
            if not committed:
                tmp.unlink(missing_ok=True)
        return dest
