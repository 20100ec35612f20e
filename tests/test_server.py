"""Web API routes."""

from __future__ import annotations

import base64
import io
import logging
import zipfile

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from gallery import config, server


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(server, "state", server.AppState())
    monkeypatch.setattr(config, "OUTPUT_DIR", tmp_path)
    server.state.width, server.state.height = 120, 90
    return TestClient(server.app)


def _select(client, sketch="wfc", **extra):
    return client.post("/api/select", json={"sketch": sketch, "width": 120, "height": 90, "seed": 1, **extra})


def test_list_sketches(client) -> None:
    r = client.get("/api/sketches")

    assert r.status_code == 200
    body = r.json()
    assert len(body["sketches"]) == 16
    assert body["current"] == "flow"


def test_state_includes_frame(client) -> None:
    body = client.get("/api/state").json()

    assert body["slug"] == "flow"
    img = Image.open(io.BytesIO(base64.b64decode(body["frame"])))
    assert img.size == (120, 90)


def test_select_by_slug_and_index(client) -> None:
    body = _select(client, "urban").json()
    assert body["title"] == "Urban Sketches"
    assert body["seed"] == 1

    body = _select(client, 9).json()
    assert body["slug"] == "nebula"


def test_select_passes_config(client) -> None:
    body = _select(client, "crystals", config={"max_crystals": 4}).json()

    assert body["stats"]["max_crystals"] == 4


def test_select_rejects_unknown_sketch_and_bad_size(client) -> None:
    r = _select(client, "mandelbrot")
    assert r.status_code == 400
    assert "Available" in r.json()["error"]

    r = client.post("/api/select", json={"sketch": "flow", "width": 0})
    assert r.status_code == 400


def test_step_advances_frames(client) -> None:
    _select(client)

    body = client.post("/api/step", json={"frames": 3}).json()

    assert body["frame_count"] == 3
    assert body["stats"]["cols"] == 3


def test_step_bounds(client) -> None:
    assert client.post("/api/step", json={"frames": 0}).status_code == 400
    assert client.post("/api/step", json={"frames": 601}).status_code == 400


def test_pointer_events(client) -> None:
    _select(client, "symphony")

    body = client.post("/api/pointer", json={"kind": "click", "x": 10, "y": 10}).json()
    assert body["stats"]["playing"] is False
    assert "frame" not in body

    for kind in ("press", "drag", "release", "move"):
        assert client.post("/api/pointer", json={"kind": kind, "x": 5, "y": 5}).status_code == 200

    r = client.post("/api/pointer", json={"kind": "wheel", "x": 0, "y": 0})
    assert r.status_code == 400


def test_key_event(client) -> None:
    _select(client, "symphony")
    mode = client.get("/api/state").json()["stats"]["mode"]

    body = client.post("/api/key", json={"key": "ArrowRight"}).json()

    assert body["stats"]["mode"] != mode
    assert client.post("/api/key", json={"key": ""}).status_code == 400


def test_resize(client) -> None:
    _select(client)

    body = client.post("/api/resize", json={"width": 200, "height": 80}).json()

    assert (body["width"], body["height"]) == (200, 80)
    assert body["stats"]["cols"] == 5
    assert client.post("/api/resize", json={"width": 5000, "height": 80}).status_code == 400


def test_export_writes_png(client, tmp_path) -> None:
    _select(client)
    client.post("/api/step", json={"frames": 2})

    body = client.post("/api/export").json()

    assert body["path"] == str(tmp_path / "wfc_00002.png")
    assert (tmp_path / "wfc_00002.png").exists()
    assert body["image"]


def test_export_frames_zip(client) -> None:
    _select(client)

    r = client.get("/api/export_frames", params={"frames": 4, "every": 2})

    assert r.status_code == 200
    assert r.headers["content-type"] == "application/zip"
    names = zipfile.ZipFile(io.BytesIO(r.content)).namelist()
    assert names == ["wfc_00002.png", "wfc_00004.png"]


def test_export_frames_bounds(client) -> None:
    assert client.get("/api/export_frames", params={"frames": 0}).status_code == 400
    assert client.get("/api/export_frames", params={"every": 0}).status_code == 400


def test_new_2048_board(client) -> None:
    body = client.post("/api/2048/new").json()

    assert body["size"] == 4
    assert sum(v is not None for v in body["cells"]) == 2


def test_failed_select_keeps_previous_sketch(client) -> None:
    _select(client, "wfc")

    r = _select(client, "flow", config={"flow_mode": "vortex"})
    assert r.status_code == 400

    body = client.get("/api/state").json()
    assert body["slug"] == "wfc"
    assert body["title"] == "Emergent Patterns"


@pytest.mark.parametrize("slug, bad_config", [
    ("origami", {"tile_size": 0}),
    ("wfc", {"tile_size": 0}),
    ("flow", {"max_particles": "many"}),
])
def test_select_rejects_unusable_config(client, slug, bad_config) -> None:
    _select(client, "crystals")

    r = _select(client, slug, config=bad_config)

    assert r.status_code == 400
    assert "error" in r.json()
    assert client.get("/api/state").json()["slug"] == "crystals"


def test_lifespan_configures_logging() -> None:
    logging.getLogger("gallery").handlers.clear()

    with TestClient(server.app):
        assert logging.getLogger("gallery").handlers
