"""The share - one object holding every collaborator the routes dispatch to."""

from pathlib import Path

from lanshare.core.config import Settings
from lanshare.core.sandbox import PathValidator
from lanshare.services.listing import DirectoryLister
from lanshare.services.qr import BaseQREncoder, get_qr_encoder
from lanshare.services.transfer import FileTransfer


class FileShare:
    def __init__(self, settings: Settings, qr: BaseQREncoder | None = None) -> None:
        self.settings = settings
        self.validator = PathValidator(settings.share_dir, settings.follow_symlinks)
        self.lister = DirectoryLister(self.validator.root, settings.follow_symlinks)
        self.transfer = FileTransfer(self.validator, settings.upload_chunk_size)
        self.qr = qr or get_qr_encoder(settings)

    @property
    def root(self) -> Path:
        return self.validator.root
