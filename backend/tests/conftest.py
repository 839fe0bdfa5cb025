"""Shared test fixtures for backend tests."""

import pytest
from fastapi.testclient import TestClient

from lanshare.core.config import Settings
from lanshare.main import create_app
from lanshare.services.qr import BaseQREncoder
from lanshare.services.share import FileShare


class FakeQREncoder(BaseQREncoder):
    """Deterministic stand-in so page tests don't depend on QR bitmaps."""

    async def encode(self, data: str) -> bytes:
        return b"qr:" + data.encode()

    def image_mime_type(self) -> str:
        return "image/png"


@pytest.fixture
def share_root(tmp_path):
    """An empty share root, resolved so comparisons survive symlinked temp dirs."""
    root = tmp_path / "share"
    root.mkdir()
    return root.resolve()


@pytest.fixture
def settings(share_root):
    return Settings(share_dir=share_root)


@pytest.fixture
def share(settings):
    return FileShare(settings, qr=FakeQREncoder())


@pytest.fixture
def app(settings, share):
    return create_app(settings, share=share)


@pytest.fixture
def client(app):
    """FastAPI TestClient over a temporary share root."""
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
