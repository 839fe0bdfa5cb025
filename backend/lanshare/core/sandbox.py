"""Sandboxed path resolution - ensures every file operation stays within the share root.

A raw request path becomes a ValidatedPath in four stages:

1. decode_path      - strict percent-decoding
2. normalize_path   - forward slashes, lexical collapse of '.' and '..'
3. join_root        - join onto the share root and canonicalize
4. ensure_contained - the canonical path must still be inside the root

Each stage is a plain function. PathValidator chains them for a fixed root.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote, unquote

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_DRIVE = re.compile(r"^[A-Za-z]:$")


class PathError(Exception):
    """A request path that must not reach the filesystem."""


class BadEncodingError(PathError):
    pass


class OutsideSandboxError(PathError):
    pass


@dataclass(frozen=True)
class ValidatedPath:
    relative: str  # "" for the root, never a leading slash
    absolute: Path

    @property
    def is_root(self) -> bool:
        return self.relative == ""

    @property
    def name(self) -> str:
        return self.relative.rsplit("/", 1)[-1]

    @property
    def url_path(self) -> str:
        """The relative path percent-encoded for use in a URL."""
        return quote(self.relative, safe="/")


def decode_path(raw_path: str) -> str:
    if _BAD_ESCAPE.search(raw_path):
        raise BadEncodingError(f"Malformed percent-escape in '{raw_path}'")
    try:
        decoded = unquote(raw_path, errors="strict")
    except UnicodeDecodeError as e:
        raise BadEncodingError(f"Path '{raw_path}' is not valid UTF-8") from e
    if "\x00" in decoded:
        raise BadEncodingError("Path contains a NUL byte")
    return decoded


def normalize_path(decoded: str) -> str:
    """Collapse '.' and '..' lexically. Climbing above the root is an error, not a clamp."""
    parts: list[str] = []
    for segment in decoded.replace("\\", "/").split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            if not parts:
                raise OutsideSandboxError(f"Path '{decoded}' climbs above the share root")
            parts.pop()
            continue
        if not parts and _DRIVE.match(segment):
            raise OutsideSandboxError(f"Path '{decoded}' is drive-qualified")
        parts.append(segment)
    return "/".join(parts)


def _reject_symlinks(relative: str, root: Path) -> None:
    current = root
    for segment in relative.split("/"):
        current = current / segment
        if current.is_symlink():
            raise OutsideSandboxError(f"Path '{relative}' goes through a symbolic link")
        if not current.exists():
            return


def join_root(relative: str, root: Path, follow_symlinks: bool = False) -> Path:
    """Join a normalized relative path onto the root and resolve it, symlinks included."""
    if not relative:
        return root
    if not follow_symlinks:
        _reject_symlinks(relative, root)
    try:
        return root.joinpath(*relative.split("/")).resolve()
    except (OSError, RuntimeError) as e:
        # symlink loops
        raise OutsideSandboxError(f"Path '{relative}' cannot be resolved") from e


def ensure_contained(candidate: Path, root: Path) -> None:
    try:
        rel = candidate.relative_to(root)
    except ValueError:
        raise OutsideSandboxError(f"Path '{candidate}' escapes the sandbox")
    if rel.parts[:1] == ("..",):
        raise OutsideSandboxError(f"Path '{candidate}' escapes the sandbox")


class PathValidator:
    """The only way to obtain a ValidatedPath for a given share root."""

    def __init__(self, root: Path, follow_symlinks: bool = False) -> None:
        self.root = root.resolve()
        self.follow_symlinks = follow_symlinks

    def validate(self, raw_path: str) -> ValidatedPath:
        return self._contain(normalize_path(decode_path(raw_path)))

    def child(self, parent: ValidatedPath, name: str) -> ValidatedPath:
        """Validate a single-segment child of an already validated directory."""
        if not name or name in (".", "..") or "/" in name or "\\" in name or "\x00" in name:
            raise OutsideSandboxError(f"'{name}' is not a plain file name")
        relative = f"{parent.relative}/{name}" if parent.relative else name
        return self._contain(normalize_path(relative))

    def _contain(self, relative: str) -> ValidatedPath:
        absolute = join_root(relative, self.root, self.follow_symlinks)
        ensure_contained(absolute, self.root)
        return ValidatedPath(relative=relative, absolute=absolute)


def validate_path(raw_path: str, share_root: Path, follow_symlinks: bool = False) -> ValidatedPath:
    """Resolve a raw request path within share_root. Raises PathError if it is rejected."""
    return PathValidator(share_root, follow_symlinks).validate(raw_path)
