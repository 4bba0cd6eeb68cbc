"""
Tests for the summarization HTTP endpoints.

The completion backend is replaced through FastAPI dependency overrides,
so no request leaves the process.
"""

import asyncio
import os

import pytest
from fastapi.testclient import TestClient

from conftest import FakeBackend
from core.errors import LLMRateLimitError, LLMServiceError
from main import app
from summarization import service
from summarization.service import get_completion_backend, read_upload

DOCUMENT = "Primeiro parágrafo do relatório.\n\nSegundo parágrafo com dados: 42%."


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


def _use_backend(backend):
    app.dependency_overrides[get_completion_backend] = lambda: backend
    return backend


def _upload(client, content, filename="doc.txt", params=None, data=None):
    return client.post(
        "/api/v1/summarize/file",
        files={"file": (filename, content, "text/plain")},
        params=params,
        data=data,
    )


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.text == "ok"


class TestWebPage:

    def test_index_served(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "fileInput" in response.text

    def test_script_posts_to_file_endpoint(self, client):
        response = client.get("/static/app.js")
        assert response.status_code == 200
        assert "/api/v1/summarize/file" in response.text
        assert "resumo.txt" in response.text


class TestFileEndpoint:

    def test_txt_upload_summarized(self, client):
        backend = _use_backend(FakeBackend())

        response = _upload(client, DOCUMENT.encode("utf-8"))

        assert response.status_code == 200
        body = response.json()
        assert body["summary"] == "summary 1"
        assert body["mode"] == "detailed"
        assert body["method"] == "direct"
        assert body["total_chunks"] == 1
        assert body["request_id"]
        assert len(backend.calls) == 1

    def test_mode_query_parameter(self, client):
        backend = _use_backend(FakeBackend())

        response = _upload(client, DOCUMENT.encode("utf-8"), params={"mode": "SHORT"})

        assert response.status_code == 200
        assert response.json()["mode"] == "short"
        assert "3–5 frases" in backend.prompts[0]

    def test_mode_form_field(self, client):
        backend = _use_backend(FakeBackend())

        response = _upload(client, DOCUMENT.encode("utf-8"), data={"mode": "short"})

        assert response.status_code == 200
        assert "3–5 frases" in backend.prompts[0]

    def test_unknown_mode_falls_back_to_detailed(self, client):
        _use_backend(FakeBackend())

        response = _upload(client, DOCUMENT.encode("utf-8"), params={"mode": "weird"})

        assert response.json()["mode"] == "detailed"

    def test_unsupported_extension(self, client):
        backend = _use_backend(FakeBackend())

        response = _upload(client, b"<html></html>", filename="page.html")

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "unsupported_file_type"
        assert backend.calls == []

    def test_missing_file(self, client):
        _use_backend(FakeBackend())

        response = client.post("/api/v1/summarize/file")

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "missing_file"

    def test_text_too_short(self, client):
        backend = _use_backend(FakeBackend())

        response = _upload(client, b"  tiny  \n")

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "no_text"
        assert backend.calls == []

    def test_rate_limit_maps_to_429(self, client):
        _use_backend(FakeBackend(fail_on=1, error=LLMRateLimitError("quota", status=429)))

        response = _upload(client, DOCUMENT.encode("utf-8"))

        assert response.status_code == 429
        assert response.json()["detail"]["error"] == "rate_limited"

    def test_error_body_shape(self, client):
        _use_backend(FakeBackend())

        response = _upload(client, b"<html></html>", filename="page.html")

        assert set(response.json()) == {"detail"}
        assert set(response.json()["detail"]) == {"error", "message"}

    def test_other_backend_failure_maps_to_500(self, client):
        _use_backend(FakeBackend(fail_on=1, error=LLMServiceError("down")))

        response = _upload(client, DOCUMENT.encode("utf-8"))

        assert response.status_code == 500
        assert response.json()["detail"]["error"] == "processing_failed"

    def test_file_too_large(self, client, monkeypatch):
        _use_backend(FakeBackend())
        monkeypatch.setattr(service, "EXTRACTOR_MAX_FILE_SIZE_MB", 0)

        response = _upload(client, DOCUMENT.encode("utf-8"))

        assert response.status_code == 413

    def test_upload_removed_after_extraction(self, client, monkeypatch):
        _use_backend(FakeBackend())
        seen_paths = []

        class RecordingExtractor:
            def extract(self, file_path):
                seen_paths.append(file_path)
                return DOCUMENT

        monkeypatch.setattr(service, "TextExtractor", RecordingExtractor)

        response = _upload(client, b"ignored content")

        assert response.status_code == 200
        assert len(seen_paths) == 1
        assert seen_paths[0].endswith(".txt")
        assert not os.path.exists(seen_paths[0])

    def test_backend_not_configured(self, client, monkeypatch):
        monkeypatch.setattr(service, "is_configured", lambda: False)

        response = _upload(client, DOCUMENT.encode("utf-8"))

        assert response.status_code == 500
        assert response.json()["detail"]["error"] == "not_configured"


class TestTextEndpoint:

    def test_long_text_uses_map_reduce(self, client):
        backend = _use_backend(FakeBackend())
        text = "\n\n".join(c * 50 for c in "abc")

        response = client.post(
            "/api/v1/summarize/text",
            json={"text": text, "mode": "short", "chunk_size": 60, "user_id": "u-1"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["method"] == "map_reduce"
        assert body["total_chunks"] == 3
        assert body["summary"] == "summary 4"
        assert body["user_id"] == "u-1"
        assert len(backend.calls) == 4

    def test_short_text_rejected(self, client):
        _use_backend(FakeBackend())

        response = client.post("/api/v1/summarize/text", json={"text": "curto"})

        assert response.status_code == 400

    def test_request_id_echoed(self, client):
        _use_backend(FakeBackend())

        response = client.post(
            "/api/v1/summarize/text",
            json={"text": DOCUMENT, "request_id": "req-123"},
        )

        assert response.json()["request_id"] == "req-123"


class TestInfoEndpoints:

    def test_modes(self, client):
        body = client.get("/api/v1/summarize/modes").json()
        assert set(body["modes"]) == {"short", "detailed"}
        assert body["default"] == "detailed"

    def test_config(self, client):
        body = client.get("/api/v1/summarize/config").json()
        assert body["chunk_size"] == 6000
        assert body["min_text_chars"] == 20
        assert "backend" in body


class RecordingUpload:
    """Stands in for UploadFile and records how many bytes were requested."""

    def __init__(self, total_bytes, declared_size=None):
        self.total_bytes = total_bytes
        self.size = declared_size
        self.read_sizes = []

    async def read(self, size=-1):
        self.read_sizes.append(size)
        if size < 0:
            return b"x" * self.total_bytes
        return b"x" * min(size, self.total_bytes)


class TestReadUpload:

    def test_declared_size_rejected_before_reading(self):
        upload = RecordingUpload(20 * 1024 * 1024, declared_size=20 * 1024 * 1024)

        with pytest.raises(ValueError, match="exceeds"):
            asyncio.run(read_upload(upload, 15))

        assert upload.read_sizes == []

    def test_undeclared_size_read_is_bounded(self):
        upload = RecordingUpload(20 * 1024 * 1024)

        with pytest.raises(ValueError, match="exceeds"):
            asyncio.run(read_upload(upload, 1))

        assert upload.read_sizes == [1024 * 1024 + 1]

    def test_upload_within_limit_returned(self):
        upload = RecordingUpload(1024, declared_size=1024)

        content = asyncio.run(read_upload(upload, 1))

        assert content == b"x" * 1024
        assert upload.read_sizes == [1024 * 1024 + 1]
