from __future__ import annotations

from io import BytesIO

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from lungscan.backend import inference
from lungscan.backend.app import create_app
from lungscan.config import load_backend_config
from lungscan.errors import ModelServerError

LABELS = ["adenocarcinoma", "large.cell.carcinoma", "normal", "squamous.cell.carcinoma"]


def _mk_png_bytes() -> bytes:
    img = Image.new("RGB", (32, 32), (200, 200, 200))
    b = BytesIO()
    img.save(b, format="PNG")
    return b.getvalue()


@pytest.fixture
def client() -> TestClient:
    cfg = load_backend_config()
    cfg.update({"model_url": "http://model/v1/models/lung_ct:predict", "img_size": 16, "class_labels": LABELS})
    return TestClient(create_app(cfg))


def test_health(client: TestClient) -> None:
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "model_url": "http://model/v1/models/lung_ct:predict"}


def test_predict_returns_argmax_label(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    seen: dict[str, object] = {}

    def _scores(img_arr, model_url, timeout):
        seen["shape"] = img_arr.shape
        seen["url"] = model_url
        return [0.05, 0.1, 0.8, 0.05]

    monkeypatch.setattr(inference, "request_scores", _scores)
    files = {"file": ("scan.png", _mk_png_bytes(), "image/png")}
    r = client.post("/predict/", files=files)

    assert r.status_code == 200
    body = r.json()
    assert body["predicted_class"] == "normal"
    assert body["confidence"] == pytest.approx(0.8)
    assert set(body["probabilities"]) == set(LABELS)
    assert seen["shape"] == (1, 16, 16, 3)
    assert seen["url"] == "http://model/v1/models/lung_ct:predict"


def test_predict_empty_file(client: TestClient) -> None:
    r = client.post("/predict/", files={"file": ("scan.png", b"", "image/png")})
    assert r.status_code == 400
    assert r.json() == {"error": "Empty file received"}


def test_predict_non_image_type(client: TestClient) -> None:
    r = client.post("/predict/", files={"file": ("notes.txt", b"hello", "text/plain")})
    assert r.status_code == 415
    assert "text/plain" in r.json()["error"]


def test_predict_undecodable_image(client: TestClient) -> None:
    r = client.post("/predict/", files={"file": ("scan.png", b"garbage", "image/png")})
    assert r.status_code == 400
    assert "decode" in r.json()["error"]


def test_predict_model_server_failure(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    def _fail(*a, **k):
        raise ModelServerError("model server request failed: refused")

    monkeypatch.setattr(inference, "request_scores", _fail)
    r = client.post("/predict/", files={"file": ("scan.png", _mk_png_bytes(), "image/png")})
    assert r.status_code == 502
    assert "refused" in r.json()["error"]


def test_predict_unexpected_error(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    def _boom(*a, **k):
        raise RuntimeError("boom")

    monkeypatch.setattr(inference, "request_scores", _boom)
    r = client.post("/predict/", files={"file": ("scan.png", _mk_png_bytes(), "image/png")})
    assert r.status_code == 500
    assert r.json() == {"error": "Unexpected error: boom"}


def test_missing_file_field(client: TestClient) -> None:
    r = client.post("/predict/", data={"other": "x"})
    assert r.status_code == 422


def test_predict_accepts_uppercase_image_type(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(inference, "request_scores", lambda *a, **k: [0.7, 0.1, 0.1, 0.1])
    r = client.post("/predict/", files={"file": ("SCAN.PNG", _mk_png_bytes(), "IMAGE/PNG")})
    assert r.status_code == 200
    assert r.json()["predicted_class"] == "adenocarcinoma"
