import io
import shutil

import pytest


@pytest.mark.parametrize(
    "method, path",
    [
        ("get", "/products"),
        ("get", "/receipts"),
        ("get", "/receipts/missing.pdf"),
        ("get", "/receipts/a/b"),
        ("put", "/receipts"),
        ("get", "/no-such-route"),
    ],
)
def test_every_response_allows_any_origin(client, method, path):
    resp = getattr(client, method)(path, headers={"Origin": "http://localhost:3000"})
    assert resp.headers["Access-Control-Allow-Origin"] == "*"


def test_allow_origin_without_origin_header(client):
    assert client.get("/products").headers["Access-Control-Allow-Origin"] == "*"


def test_preflight_short_circuits(client, receipt_dir):
    resp = client.options(
        "/receipts",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )
    assert resp.status_code == 200
    assert resp.data == b""
    assert resp.headers["Access-Control-Allow-Origin"] == "*"
    assert "POST" in resp.headers["Access-Control-Allow-Methods"]
    assert "content-type" in resp.headers["Access-Control-Allow-Headers"].lower()
    assert sorted(p.name for p in receipt_dir.iterdir()) == [".partial"]


def test_preflight_on_item_path(client):
    resp = client.options(
        "/receipts/scan.png",
        headers={"Origin": "http://example.com", "Access-Control-Request-Method": "GET"},
    )
    assert resp.status_code == 200
    assert resp.data == b""
    assert resp.headers["Access-Control-Allow-Origin"] == "*"


def _upload(client, name, payload):
    return client.post(
        "/receipts",
        data={"receipt": (io.BytesIO(payload), name)},
        content_type="multipart/form-data",
        headers={"Origin": "http://localhost:3000"},
    )


def test_created_upload_allows_any_origin(client):
    resp = _upload(client, "scan.txt", b"ok")
    assert resp.status_code == 201
    assert resp.headers["Access-Control-Allow-Origin"] == "*"


def test_too_large_upload_allows_any_origin(client):
    resp = _upload(client, "huge.bin", b"\x00" * (5 * 1024 * 1024 + 1))
    assert resp.status_code == 413
    assert resp.headers["Access-Control-Allow-Origin"] == "*"


def test_server_error_allows_any_origin(client, receipt_dir):
    shutil.rmtree(receipt_dir)
    resp = client.get("/receipts", headers={"Origin": "http://localhost:3000"})
    assert resp.status_code == 500
    assert resp.headers["Access-Control-Allow-Origin"] == "*"


@pytest.mark.parametrize("path", ["/products", "/receipts", "/receipts/missing.pdf"])
def test_methods_and_headers_advertised_on_every_response(client, path):
    resp = client.get(path)
    methods = resp.headers["Access-Control-Allow-Methods"]
    for method in ("POST", "GET", "OPTIONS", "PUT", "DELETE"):
        assert method in methods
    assert "Content-Type" in resp.headers["Access-Control-Allow-Headers"]
    assert "X-CSRF-Token" in resp.headers["Access-Control-Allow-Headers"]


def test_preflight_headers_are_not_duplicated(client):
    resp = client.options(
        "/receipts",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )
    assert len(resp.headers.getlist("Access-Control-Allow-Methods")) == 1
    assert len(resp.headers.getlist("Access-Control-Allow-Headers")) == 1
    assert len(resp.headers.getlist("Access-Control-Allow-Origin")) == 1
