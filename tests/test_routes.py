import base64

import pytest
from fastapi.testclient import TestClient

import ingest
from app import create_app
from config import Config
from errors import EncodeError
from ingest import run_ingestion
from scanner import derive_name
from helpers import close_to, pixel, png_header

AUTH = {"Authorization": "Bearer " + base64.b64encode(b"pw").decode()}


@pytest.fixture()
def client(image_root, make_image):
    make_image(image_root / "pc" / "photo.jpg", size=(800, 600))
    make_image(image_root / "pc" / "other.png", size=(100, 300))
    config = Config(image_folder=str(image_root), pwd="pw")
    catalog = run_ingestion(image_root)
    with TestClient(create_app(config, catalog)) as c:
        yield c


def upload(client, subfolder, *files, headers=AUTH):
    return client.post(
        f"/api/images/{subfolder}",
        files=[("files", (name, data, "image/png")) for name, data in files],
        headers=headers,
    )


# --- listing & serving

def test_list_category(client):
    r = client.get("/api/list/pc")
    assert r.status_code == 200
    assert sorted(r.json()) == ["other.webp", "photo.webp"]


def test_list_all_and_empty(client):
    assert len(client.get("/api/list/all").json()) == 2
    r = client.get("/api/list/mp")
    assert r.status_code == 404
    assert r.json()["detail"] == "No images found."


def test_invalid_subfolder(client):
    for url in ("/api/list/desktop", "/api/images/desktop"):
        r = client.get(url)
        assert r.status_code == 404
        assert r.json()["detail"] == "Invalid subfolder."


def test_get_image(client, image_root):
    r = client.get("/api/image/photo.webp", headers={"CF-Connecting-IP": "203.0.113.9"})
    assert r.status_code == 200
    assert r.headers["content-type"] == "image/webp"
    assert r.content == (image_root / "pc" / "photo.webp").read_bytes()


def test_get_image_not_found(client):
    r = client.get("/api/image/missing.webp")
    assert r.status_code == 404
    assert r.json()["detail"] == "Image not found."


def test_random_image(client, image_root):
    r = client.get("/api/images/pc")
    assert r.status_code == 200
    assert r.content in {
        (image_root / "pc" / "photo.webp").read_bytes(),
        (image_root / "pc" / "other.webp").read_bytes(),
    }
    assert client.get("/api/images/mp").status_code == 404


def test_thumbnail(client, image_root):
    r = client.get("/api/thumbnail/photo.webp")
    assert r.status_code == 200
    assert r.content == (image_root / "thumbnails" / "photo.webp").read_bytes()
    assert client.get("/api/thumbnail/missing.webp").status_code == 404


def test_gallery_page(client):
    r = client.get("/")
    assert r.status_code == 200
    assert "/api/thumbnail/photo.webp" in r.text
    assert client.get("/?category=nope").status_code == 404


# --- uploads

def test_upload_requires_token(client, image_bytes):
    assert upload(client, "pc", ("a.png", image_bytes()), headers={}).status_code == 401
    bad = {"Authorization": "Bearer pw"}
    r = upload(client, "pc", ("a.png", image_bytes()), headers=bad)
    assert r.status_code == 401
    assert r.json()["detail"] == "Unauthorized."


def test_upload_then_fetch(client, image_bytes):
    name = derive_name("a.png")
    r = upload(client, "mp", ("a.png", image_bytes()), ("b.png", image_bytes()))
    assert r.status_code == 200
    assert r.json() == [f"/api/image/{name}", f"/api/image/{derive_name('b.png')}"]

    assert client.get(f"/api/image/{name}").status_code == 200
    assert client.get(f"/api/thumbnail/{name}").status_code == 200
    assert sorted(client.get("/api/list/mp").json()) == sorted(
        [name, derive_name("b.png")]
    )


def test_upload_same_name_last_write_wins(client, image_bytes, image_root, tmp_path):
    upload(client, "pc", ("a.png", image_bytes(color=(255, 0, 0))))
    upload(client, "pc", ("a.png", image_bytes(color=(0, 0, 255))))

    r = client.get(f"/api/image/{derive_name('a.png')}")
    assert r.status_code == 200
    fetched = tmp_path / "fetched.webp"
    fetched.write_bytes(r.content)
    assert close_to(pixel(fetched), (0, 0, 255))
    assert client.get("/api/list/pc").json().count(derive_name("a.png")) == 1


def test_upload_into_all_is_rejected(client, image_bytes):
    assert upload(client, "all", ("a.png", image_bytes())).status_code == 404


def test_upload_without_filename(client):
    r = client.post("/api/images/pc", data={"files": "plain text"}, headers=AUTH)
    assert r.status_code == 400
    assert r.json()["detail"] == "No filename found."


def test_upload_undecodable(client):
    r = upload(client, "pc", ("a.png", b"garbage"))
    assert r.status_code == 500
    body = r.json()
    assert body["detail"] == "Failed to save image."
    assert body["files"][0]["status"] == "failed"


def test_upload_thumbnail_failure_is_partial_success(client, image_bytes, monkeypatch):
    def broken(path, *args, **kwargs):
        raise EncodeError(path, "disk full")

    monkeypatch.setattr(ingest, "ensure_thumbnail", broken)
    r = upload(client, "pc", ("a.png", image_bytes()))

    assert r.status_code == 207
    body = r.json()
    assert body["detail"] == "Image uploaded successfully, but failed to create thumbnail."
    assert body["files"][0]["status"] == "thumbnail_failed"
    # the image itself is served
    assert client.get(body["files"][0]["url"]).status_code == 200


def test_upload_oversized_image_is_structured_failure(client):
    r = upload(client, "pc", ("big.png", png_header(20000, 20000)))
    assert r.status_code == 500
    assert r.json()["detail"] == "Failed to save image."
