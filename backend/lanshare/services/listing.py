"""Directory listing - read-only view of a validated directory's direct children."""

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from urllib.parse import quote

from lanshare.core.sandbox import ValidatedPath
from lanshare.models.share import DirectoryEntry, DirectoryListing
from lanshare.services.transfer import UPLOAD_TEMP_PREFIX

logger = logging.getLogger(__name__)

DOWNLOAD_PREFIX = "/download/"
UPLOAD_PREFIX = "/upload/"


class ListError(Exception):
    pass


class NotReadableError(ListError):
    pass


def humanize_size(size: int) -> str:
    unit = 1024
    if size < unit:
        return f"{size} B"
    div, exp = unit, 0
    n = size // unit
    while n >= unit:
        div *= unit
        exp += 1
        n //= unit
    return f"{size / div:.1f} {'KMGTPE'[exp]}B"


def format_mtime(value: datetime) -> str:
    return value.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def browse_url(relative: str) -> str:
    """URL of the directory view for a relative path, always with a trailing slash."""
    if not relative:
        return "/"
    return "/" + quote(relative, safe="/") + "/"


def download_url(relative: str) -> str:
    return DOWNLOAD_PREFIX + quote(relative, safe="/")


def parent_url(relative: str) -> str:
    if "/" not in relative:
        return "/"
    return browse_url(relative.rsplit("/", 1)[0])


class DirectoryLister:
    def __init__(self, root: Path, follow_symlinks: bool = False) -> None:
        self.root = root.resolve()
        self.follow_symlinks = follow_symlinks

    def list(self, directory: ValidatedPath) -> list[DirectoryEntry]:
        try:
            with os.scandir(directory.absolute) as it:
                children = sorted(it, key=lambda e: e.name)
        except OSError as e:
            raise NotReadableError(f"Cannot read directory '{directory.relative}': {e}") from e

        entries = []
        for child in children:
            entry = self._entry(child, directory.relative)
            if entry is not None:
                entries.append(entry)
        return entries

    def build_listing(self, directory: ValidatedPath) -> DirectoryListing:
        return DirectoryListing(
            path=browse_url(directory.relative),
            parent_path=parent_url(directory.relative),
            is_root=directory.is_root,
            upload_url=UPLOAD_PREFIX + directory.url_path,
            entries=self.list(directory),
        )

    def _entry(self, child: os.DirEntry, parent_relative: str) -> DirectoryEntry | None:
        if child.name.startswith(UPLOAD_TEMP_PREFIX):
            return None
        try:
            if child.is_symlink() and not self._symlink_allowed(child):
                return None
            is_dir = child.is_dir()
            stat = child.stat()
        except (OSError, RuntimeError) as e:
            logger.debug(f"Skipping unreadable entry {child.name!r}: {e}")
            return None

        relative = f"{parent_relative}/{child.name}" if parent_relative else child.name
        return DirectoryEntry(
            name=child.name,
            kind="directory" if is_dir else "file",
            size_bytes=0 if is_dir else stat.st_size,
            modified_at=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
            is_dir=is_dir,
            url=browse_url(relative) if is_dir else download_url(relative),
        )

    def _symlink_allowed(self, child: os.DirEntry) -> bool:
        if not self.follow_symlinks:
            return False
        return Path(child.path).resolve().is_relative_to(self.root)
