"""Tests for the development server JSON API."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest
from PIL import Image
from starlette.testclient import TestClient

import slidef.server.app as server_app
from slidef.server.app import create_app


@pytest.fixture
def client(tmp_dir: Path):
    with TestClient(create_app(tmp_dir, watch=False)) as test_client:
        yield test_client


def _import(client: TestClient, source: bytes, **params):
    params.setdefault("format", "png")
    params.setdefault("scale", "1")
    return client.post("/api/import", params=params, content=source)


class TestSlidesApi:
    def test_empty_list(self, client):
        response = client.get("/api/slides")
        assert response.status_code == 200
        assert response.json() == {"slides": []}

    def test_import_and_list(self, client, pdf_bytes, tmp_dir):
        response = _import(client, pdf_bytes, name="My Talk")
        assert response.status_code == 200
        metadata = response.json()["metadata"]
        assert metadata["name"] == "my-talk"
        assert metadata["title"] == "My Talk"
        assert metadata["pageCount"] == 3
        assert (tmp_dir / "slides" / "my-talk" / "images" / "page-003.png").is_file()

        names = [s["name"] for s in client.get("/api/slides").json()["slides"]]
        assert names == ["my-talk"]

    def test_repeated_import_unique(self, client, make_pdf):
        source = make_pdf(pages=1)
        first = _import(client, source, name="My Talk").json()["metadata"]["name"]
        second = _import(client, source, name="My Talk").json()["metadata"]["name"]
        assert (first, second) == ("my-talk", "my-talk-2")

    def test_name_from_filename(self, client, make_pdf):
        response = _import(client, make_pdf(pages=1), filename="Board Update.pdf")
        metadata = response.json()["metadata"]
        assert metadata["name"] == "board-update"
        assert metadata["filename"] == "Board Update.pdf"

    def test_created_at_param(self, client, make_pdf):
        response = _import(client, make_pdf(pages=1), name="d", createdAt="2024-02-29")
        assert response.json()["metadata"]["createdAt"] == "2024-02-29"

    def test_bad_options_rejected_before_writing(self, client, pdf_bytes, tmp_dir):
        response = _import(client, pdf_bytes, name="deck", scale="0")
        assert response.status_code == 400
        assert response.json()["kind"] == "validation"
        assert list((tmp_dir / "slides").iterdir()) == []

    def test_bad_quality(self, client, pdf_bytes):
        response = _import(client, pdf_bytes, name="deck", format="webp", quality="101")
        assert response.status_code == 400

    def test_empty_upload(self, client):
        assert client.post("/api/import", content=b"").status_code == 400

    def test_corrupt_pdf_cleaned_up(self, client, tmp_dir):
        response = _import(client, b"not a pdf", name="broken")
        assert response.status_code == 422
        assert response.json()["kind"] == "document_parse"
        assert not (tmp_dir / "slides" / "broken").exists()

    def test_encoder_failure_cleaned_up(self, client, pdf_bytes, tmp_dir, monkeypatch):
        def failing_save(self, *args, **kwargs):
            raise OSError("disk full")

        monkeypatch.setattr(Image.Image, "save", failing_save)
        response = _import(client, pdf_bytes, name="deck")
        assert response.status_code == 422
        assert response.json()["kind"] == "page_render"
        assert not (tmp_dir / "slides" / "deck").exists()

    def test_get_update_delete(self, client, make_pdf):
        _import(client, make_pdf(pages=1), name="Deck")

        assert client.get("/api/slides/deck").json()["name"] == "deck"

        response = client.put("/api/slides/deck", json={"title": "Renamed"})
        assert response.status_code == 200
        assert response.json()["metadata"]["title"] == "Renamed"

        assert client.delete("/api/slides/deck").json() == {"success": True}
        assert client.get("/api/slides/deck").status_code == 404

    def test_delete_missing_is_success(self, client):
        assert client.delete("/api/slides/ghost").status_code == 200

    def test_update_missing(self, client):
        response = client.put("/api/slides/ghost", json={"title": "x"})
        assert response.status_code == 404
        assert response.json()["kind"] == "not_found"

    def test_update_locked_field(self, client, make_pdf):
        _import(client, make_pdf(pages=1), name="Deck")
        assert client.put("/api/slides/deck", json={"pageCount": 9}).status_code == 400

    def test_update_requires_object(self, client, make_pdf):
        _import(client, make_pdf(pages=1), name="Deck")
        assert client.put("/api/slides/deck", json=["title"]).status_code == 400


class TestConfigApi:
    def test_defaults(self, client):
        config = client.get("/api/config").json()
        assert config["title"] == "Slide Presentations"
        assert config["slidesDir"] == "slides"

    def test_update_preserves_unknown_keys(self, client, tmp_dir):
        (tmp_dir / "slidef.config.json").write_text(json.dumps({"custom": True}))
        response = client.post("/api/config", json={"title": "Talks"})
        assert response.status_code == 200
        assert response.json()["config"]["title"] == "Talks"

        on_disk = json.loads((tmp_dir / "slidef.config.json").read_text())
        assert on_disk["custom"] is True
        assert on_disk["title"] == "Talks"


def _on_event_loop() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


class TestBlockingWork:
    @pytest.mark.parametrize(
        ("method", "attribute", "path", "body"),
        [
            ("GET", "list_all", "/api/slides", None),
            ("GET", "get", "/api/slides/deck", None),
            ("PUT", "update", "/api/slides/deck", {"title": "x"}),
            ("DELETE", "remove", "/api/slides/deck", None),
        ],
    )
    def test_store_calls_leave_event_loop(
        self, client, make_pdf, monkeypatch, method, attribute, path, body
    ):
        _import(client, make_pdf(pages=1), name="Deck")
        store = client.app.state.store
        original = getattr(store, attribute)
        seen: list[bool] = []

        def recording(*args, **kwargs):
            seen.append(_on_event_loop())
            return original(*args, **kwargs)

        monkeypatch.setattr(store, attribute, recording)
        response = client.request(method, path, json=body)
        assert response.status_code == 200
        assert seen == [False]

    def test_config_io_leaves_event_loop(self, client, monkeypatch):
        seen: list[bool] = []
        original = server_app.load_project_config

        def recording(root):
            seen.append(_on_event_loop())
            return original(root)

        monkeypatch.setattr(server_app, "load_project_config", recording)
        assert client.get("/api/config").status_code == 200
        assert seen == [False]


class TestAppState:
    def test_custom_slides_dir(self, tmp_dir):
        app = create_app(tmp_dir, slides_dir="decks", watch=False)
        assert app.state.store.root == (tmp_dir / "decks").resolve()
