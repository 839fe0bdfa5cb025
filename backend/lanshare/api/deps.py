"""Shared route dependencies."""

from urllib.parse import quote

from fastapi import Request

from lanshare.core.sandbox import BadEncodingError
from lanshare.services.qr import BaseQREncoder
from lanshare.services.share import FileShare


def get_share(request: Request) -> FileShare:
    return request.app.state.share


def get_qr_encoder(request: Request) -> BaseQREncoder:
    return request.app.state.share.qr


def raw_path_suffix(request: Request, prefix: str) -> str:
    """The still percent-encoded request path after prefix.

    Routing matches on the decoded path; the validator wants the raw one so it
    does the decoding itself, exactly once.
    """
    raw = request.scope.get("raw_path")
    try:
        path = raw.decode("utf-8") if raw is not None else ""
    except UnicodeDecodeError as e:
        raise BadEncodingError("Request path is not valid UTF-8") from e
    if not path.startswith(prefix):
        # no raw_path from the server, or the prefix itself was percent-encoded
        path = quote(request.scope["path"], safe="/")
    return path[len(prefix):]


def wants_json(request: Request) -> bool:
    accept = request.headers.get("accept", "")
    return "application/json" in accept and "text/html" not in accept
