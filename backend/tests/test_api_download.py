"""Tests for the download route."""


def test_download_file(client, share_root):
    (share_root / "sub").mkdir()
    (share_root / "sub" / "r.txt").write_bytes(b"0123456789")

    response = client.get("/download/sub/r.txt")
    assert response.status_code == 200
    assert response.content == b"0123456789"
    assert response.headers["content-length"] == "10"
    assert response.headers["content-type"].startswith("text/plain")
    assert response.headers["content-disposition"] == (
        "attachment; filename=\"r.txt\"; filename*=UTF-8''r.txt"
    )


def test_download_unknown_extension(client, share_root):
    (share_root / "blob.xyz").write_bytes(b"\x00\x01\x02")
    response = client.get("/download/blob.xyz")
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/octet-stream"


def test_download_non_ascii_name(client, share_root):
    (share_root / "报告.pdf").write_bytes(b"%PDF")
    response = client.get("/download/%E6%8A%A5%E5%91%8A.pdf")
    assert response.status_code == 200
    assert "filename*=UTF-8''%E6%8A%A5%E5%91%8A.pdf" in response.headers["content-disposition"]
    assert response.headers["content-type"] == "application/pdf"


def test_download_empty_path_is_400(client):
    response = client.get("/download/")
    assert response.status_code == 400


def test_download_directory_is_400(client, share_root):
    (share_root / "sub").mkdir()
    response = client.get("/download/sub")
    assert response.status_code == 400
    assert response.json()["detail"] == "Cannot download a directory"


def test_download_missing_is_404(client):
    assert client.get("/download/missing.txt").status_code == 404


def test_download_traversal_is_403(client, share_root):
    response = client.get("/download/..%2f..%2fetc%2fpasswd")
    assert response.status_code == 403
    assert str(share_root) not in response.text
