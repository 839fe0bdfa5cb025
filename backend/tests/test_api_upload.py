"""Tests for the upload routes."""

from fastapi.testclient import TestClient

from lanshare.core.config import Settings
from lanshare.main import create_app


def test_upload_then_download_round_trip(client, share_root):
    (share_root / "d").mkdir()

    response = client.post("/upload/d/", files={"file": ("x.txt", b"hello world", "text/plain")})
    assert response.status_code == 200
    assert response.text == "Upload complete. Succeeded: 1, failed: 0"

    response = client.get("/download/d/x.txt")
    assert response.status_code == 200
    assert response.content == b"hello world"
    assert response.headers["content-length"] == str(len(b"hello world"))


def test_upload_multiple_files(client, share_root):
    response = client.post(
        "/upload/",
        files=[("file", ("a.txt", b"A")), ("file", ("b.txt", b"B"))],
    )
    assert response.status_code == 200
    assert response.text.startswith("Upload complete. Succeeded: 2, failed: 0")
    assert (share_root / "a.txt").read_bytes() == b"A"
    assert (share_root / "b.txt").read_bytes() == b"B"


def test_upload_partial_failure_reports_both(client, share_root):
    (share_root / "d" / "b.txt").mkdir(parents=True)

    response = client.post(
        "/upload/d",
        files=[("file", ("a.txt", b"A")), ("file", ("b.txt", b"B"))],
    )
    assert response.status_code == 200
    assert response.text.splitlines() == [
        "Upload complete. Succeeded: 1, failed: 1",
        "b.txt: write failed",
    ]
    assert (share_root / "d" / "b.txt").is_dir()


def test_upload_filename_directories_are_stripped(client, share_root):
    (share_root / "d").mkdir()
    response = client.post("/upload/d", files={"file": ("../../evil.txt", b"x")})
    assert response.status_code == 200
    assert (share_root / "d" / "evil.txt").exists()
    assert not (share_root / "evil.txt").exists()


def test_get_upload_redirects_to_browse(client, share_root):
    (share_root / "d").mkdir()
    response = client.get("/upload/d", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/d/"

    response = client.get("/upload/", follow_redirects=False)
    assert response.headers["location"] == "/"


def test_upload_target_errors(client, share_root):
    (share_root / "file.txt").write_text("x")
    files = {"file": ("a.txt", b"A")}
    assert client.post("/upload/missing", files=files).status_code == 404
    assert client.post("/upload/file.txt", files=files).status_code == 400
    assert client.post("/upload/..%2f..%2ftmp", files=files).status_code == 400
    assert client.get("/upload/missing").status_code == 404


def test_upload_requires_multipart(client):
    response = client.post("/upload/", content=b"raw", headers={"Content-Type": "text/plain"})
    assert response.status_code == 400


def test_upload_without_file_field(client):
    response = client.post("/upload/", files={"other": ("a.txt", b"A")})
    assert response.status_code == 400
    assert response.json()["detail"] == "No files found in the upload"


def test_upload_method_not_allowed(client):
    assert client.put("/upload/", content=b"x").status_code == 405


def test_upload_over_size_cap_is_413(share_root):
    settings = Settings(share_dir=share_root, max_upload_bytes=64)
    with TestClient(create_app(settings)) as c:
        response = c.post("/upload/", files={"file": ("big.bin", b"x" * 1024)})
    assert response.status_code == 413
    assert not (share_root / "big.bin").exists()


def test_chunked_upload_over_size_cap_is_413(share_root):
    boundary = "lanshare-boundary"
    body = (
        f"--{boundary}\r\n"
        'Content-Disposition: form-data; name="file"; filename="big.bin"\r\n'
        "Content-Type: application/octet-stream\r\n\r\n"
    ).encode() + b"x" * 4096 + f"\r\n--{boundary}--\r\n".encode()

    def chunks():
        for start in range(0, len(body), 512):
            yield body[start:start + 512]

    settings = Settings(share_dir=share_root, max_upload_bytes=64)
    with TestClient(create_app(settings)) as c:
        response = c.post(
            "/upload/",
            content=chunks(),
            headers={"Content-Type": f"multipart/form-data; boundary={boundary}"},
        )

    assert "content-length" not in response.request.headers
    assert response.status_code == 413
    assert list(share_root.iterdir()) == []
