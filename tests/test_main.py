"""Tests for Neon Upload API endpoints."""

import base64
import io
import re
import time
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from src.neon_upload.config import SUPPORTED_MIME_TYPES, settings
from src.neon_upload.main import app

client = TestClient(app)

SERVER_FILENAME = re.compile(r"^\d{13}_[0-9a-f]{12}\.[a-z0-9]+$")


def make_jpeg(size: tuple[int, int] = (100, 100)) -> bytes:
    img = Image.new("RGB", size, color="red")
    buf = io.BytesIO()
    img.save(buf, format="JPEG")
    return buf.getvalue()


def post_file(name: str, content: bytes, content_type: str):
    return client.post(
        "/api/upload",
        files={"file": (name, io.BytesIO(content), content_type)},
    )


# ──────────────────────────────────────────────
# Health & page
# ──────────────────────────────────────────────
def test_health_check() -> None:
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["storage"] == "mock"
    assert data["publicBaseUrl"] == settings.public_base_url


def test_index_page_served() -> None:
    response = client.get("/")
    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]
    assert "/api/upload" in response.text
    assert '<input id="picker" type="file" disabled' in response.text


# ──────────────────────────────────────────────
# GET /api/upload
# ──────────────────────────────────────────────
def test_capabilities_document() -> None:
    response = client.get("/api/upload")
    assert response.status_code == 200
    data = response.json()
    assert data["endpoint"] == "/api/upload"
    assert data["method"] == "POST"
    assert data["contentType"] == "multipart/form-data"
    assert data["supportedFormats"] == SUPPORTED_MIME_TYPES
    assert set(data["fileTypes"]) == {"image", "video", "audio"}
    assert data["maxFileSizes"] == {
        "image": 10 * 1024 * 1024,
        "video": 50 * 1024 * 1024,
        "audio": 10 * 1024 * 1024,
    }
    assert data["previewMaxSize"] == 5 * 1024 * 1024


def test_capabilities_stable_across_calls() -> None:
    first = client.get("/api/upload").json()
    post_file("photo.jpg", make_jpeg(), "image/jpeg")
    second = client.get("/api/upload").json()
    assert first == second


# ──────────────────────────────────────────────
# POST /api/upload – success
# ──────────────────────────────────────────────
def test_upload_image_success() -> None:
    content = make_jpeg()
    response = post_file("test_image.jpg", content, "image/jpeg")

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["filename"] == "test_image.jpg"
    assert SERVER_FILENAME.match(data["serverFilename"])
    assert data["serverFilename"].endswith(".jpg")
    assert data["pathname"] == f"/uploads/{data['serverFilename']}"
    assert data["url"] == f"https://your-app.vercel.app{data['pathname']}"
    assert data["size"] == len(content)
    assert data["contentType"] == "image/jpeg"
    assert data["fileType"] == "image"
    assert data["uploadedAt"]
    assert data["message"]


def test_upload_preview_decodes_to_original_bytes() -> None:
    content = make_jpeg((64, 64))
    data = post_file("tiny.jpg", content, "image/jpeg").json()

    prefix = "data:image/jpeg;base64,"
    assert data["previewUrl"].startswith(prefix)
    decoded = base64.b64decode(data["previewUrl"][len(prefix):])
    assert len(decoded) == len(content)
    assert decoded == content


@pytest.mark.parametrize(
    ("name", "content_type", "file_type"),
    [
        ("clip.mp4", "video/mp4", "video"),
        ("movie.mov", "video/quicktime", "video"),
        ("song.mp3", "audio/mpeg", "audio"),
        ("voice.wav", "audio/wav", "audio"),
        ("logo.svg", "image/svg+xml", "image"),
    ],
)
def test_upload_media_kinds(name: str, content_type: str, file_type: str) -> None:
    response = post_file(name, b"\x00\x01fake-media" * 10, content_type)
    assert response.status_code == 200
    data = response.json()
    assert data["fileType"] == file_type
    assert data["contentType"] == content_type
    assert data["previewUrl"].startswith(f"data:{content_type};base64,")


def test_upload_without_extension_uses_mime_extension() -> None:
    data = post_file("snapshot", make_jpeg(), "image/png").json()
    assert data["serverFilename"].endswith(".png")


def test_preview_omitted_at_threshold(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "preview_max_size", 100)

    at_threshold = post_file("a.png", b"x" * 100, "image/png").json()
    below = post_file("b.png", b"x" * 99, "image/png").json()

    assert at_threshold["previewUrl"] is None
    assert at_threshold["url"]
    assert below["previewUrl"] is not None


def test_server_filenames_unique() -> None:
    names = {
        post_file("same.jpg", b"abc", "image/jpeg").json()["serverFilename"]
        for _ in range(20)
    }
    assert len(names) == 20


# ──────────────────────────────────────────────
# POST /api/upload – validation
# ──────────────────────────────────────────────
def test_upload_unsupported_type() -> None:
    response = post_file("notes.txt", b"fake content", "text/plain")
    assert response.status_code == 400
    data = response.json()
    assert "not supported" in data["error"]
    assert "url" not in data


@pytest.mark.parametrize("content_type", ["application/pdf", "image/heic", "video/webm"])
def test_upload_outside_allow_list(content_type: str) -> None:
    response = post_file("file.bin", b"data", content_type)
    assert response.status_code == 400
    assert "url" not in response.json()


def test_upload_no_file() -> None:
    response = client.post("/api/upload")
    assert response.status_code == 400
    assert response.json() == {"error": "No file provided"}


def test_upload_image_over_limit() -> None:
    content = b"\xff" * (10 * 1024 * 1024 + 1)
    response = post_file("huge.png", content, "image/png")
    assert response.status_code == 400
    assert "10MB" in response.json()["error"]


def test_upload_video_limit_is_larger(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "max_upload_size", 1024)
    monkeypatch.setattr(settings, "max_video_upload_size", 4096)

    assert post_file("a.mp4", b"v" * 4096, "video/mp4").status_code == 200
    assert post_file("b.mp4", b"v" * 4097, "video/mp4").status_code == 400
    assert post_file("c.mp3", b"a" * 1025, "audio/mpeg").status_code == 400
    assert post_file("d.jpg", b"i" * 1024, "image/jpeg").status_code == 200


# ──────────────────────────────────────────────
# Errors
# ──────────────────────────────────────────────
@patch("src.neon_upload.router.upload.mock_upload")
def test_upload_unexpected_failure(mock_upload: MagicMock) -> None:
    mock_upload.side_effect = RuntimeError("storage offline")

    response = post_file("photo.jpg", make_jpeg(), "image/jpeg")

    assert response.status_code == 500
    assert response.json() == {"error": "Upload failed", "details": "storage offline"}


def test_method_not_allowed_uses_error_body() -> None:
    response = client.put("/api/upload")
    assert response.status_code == 405
    assert "error" in response.json()


def test_malformed_file_field() -> None:
    response = client.post("/api/upload", data={"file": "hello"})
    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "Invalid request"
    assert data["details"].startswith("body.file")
    assert "Error(" not in data["details"]


@patch("src.neon_upload.router.upload.validate_upload")
def test_unhandled_error_returns_json(mock_validate: MagicMock) -> None:
    mock_validate.side_effect = RuntimeError("size check exploded")
    lenient_client = TestClient(app, raise_server_exceptions=False)

    response = lenient_client.post(
        "/api/upload",
        files={"file": ("photo.jpg", io.BytesIO(b"abc"), "image/jpeg")},
    )

    assert response.status_code == 500
    assert response.json() == {
        "error": "Internal server error",
        "details": "size check exploded",
    }


# ──────────────────────────────────────────────
# Simulated latency
# ──────────────────────────────────────────────
def test_upload_waits_for_configured_delay(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "upload_delay_min", 0.05)
    monkeypatch.setattr(settings, "upload_delay_max", 0.1)

    started = time.perf_counter()
    response = post_file("slow.png", b"x" * 10, "image/png")
    elapsed = time.perf_counter() - started

    assert response.status_code == 200
    assert elapsed >= 0.05
