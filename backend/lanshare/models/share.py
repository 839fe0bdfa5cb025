from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, computed_field


class DirectoryEntry(BaseModel):
    name: str
    kind: Literal["file", "directory"]
    size_bytes: int
    modified_at: datetime
    is_dir: bool
    url: str  # browse URL for directories, download URL for files


class DirectoryListing(BaseModel):
    path: str  # "/" or "/sub/dir/"
    parent_path: str
    is_root: bool
    upload_url: str
    entries: list[DirectoryEntry] = Field(default_factory=list)
    current_url: str = ""
    qr_code_url: str = ""  # data URI, empty when the encoder failed

    @computed_field
    @property
    def is_empty(self) -> bool:
        return not self.entries


class UploadFailure(BaseModel):
    filename: str
    reason: str


class UploadReport(BaseModel):
    succeeded: list[str] = Field(default_factory=list)
    failed: list[UploadFailure] = Field(default_factory=list)

    @property
    def success_count(self) -> int:
        return len(self.succeeded)

    @property
    def failure_count(self) -> int:
        return len(self.failed)

    def summary(self) -> str:
        lines = [f"Upload complete. Succeeded: {self.success_count}, failed: {self.failure_count}"]
        lines.extend(f"{f.filename}: {f.reason}" for f in self.failed)
        return "\n".join(lines)
