import io
import logging

import requests
from fastapi import FastAPI
from fastapi.testclient import TestClient
from PIL import Image

from api.routes import colorblocks as colorblocks_router
from services import background as background_service


def _client() -> TestClient:
    app = FastAPI()
    app.include_router(colorblocks_router.router, prefix="/colorblocks")
    return TestClient(app)


def test_preview_returns_full_size_png():
    resp = _client().post("/colorblocks/preview", json={"statement": "Hello there"})
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "image/png"
    image = Image.open(io.BytesIO(resp.content))
    assert image.size == (1080, 1080)
    assert image.convert("RGB").getpixel((5, 5)) == (76, 175, 80)


def test_preview_display_size_scales_copy():
    resp = _client().post("/colorblocks/preview?display_size=320", json={"statement": "Hello"})
    assert resp.status_code == 200
    assert Image.open(io.BytesIO(resp.content)).size == (320, 320)


def test_preview_download_is_an_attachment():
    resp = _client().post("/colorblocks/preview/download", json={"heading": "Launch", "statement": "Hi"})
    assert resp.status_code == 200
    disposition = resp.headers["content-disposition"]
    assert disposition.startswith('attachment; filename="colorblock-')
    assert disposition.endswith('.png"')


def test_preview_ops_describe_layout():
    body = {
        "heading": "Launch day",
        "statement": "Line one\nLine two",
        "footer": "acme.example",
        "text_alignment": "left",
        "background_color": "#112233",
    }
    resp = _client().post("/colorblocks/preview/ops", json=body)
    assert resp.status_code == 200
    data = resp.json()

    assert data["width"] == 1080 and data["height"] == 1080
    assert data["background"] == {"kind": "color", "color": "#112233", "url": None, "fallback_reason": None}
    assert [z["zone"] for z in data["zones"]] == ["heading", "statement", "footer"]
    assert data["zones"][0]["start_y"] == 300
    assert data["zones"][1]["lines"] == ["Line one", "Line two"]
    assert {z["x"] for z in data["zones"]} == {80}
    assert data["ops"][0]["op"] == "fillRect"
    assert [op["text"] for op in data["ops"] if op["op"] == "fillText"] == [
        "Launch day",
        "Line one",
        "Line two",
        "acme.example",
    ]


def test_preview_rejects_bad_color():
    resp = _client().post("/colorblocks/preview", json={"statement": "Hi", "background_color": "greenish"})
    assert resp.status_code == 422


def test_preview_rejects_bad_alignment_and_font_size():
    client = _client()
    assert client.post("/colorblocks/preview", json={"statement": "Hi", "text_alignment": "justify"}).status_code == 422
    assert client.post("/colorblocks/preview", json={"statement": "Hi", "statement_font_size": 0}).status_code == 422


def test_preview_ops_reports_background_fallback(monkeypatch, caplog):
    def unreachable(url, headers=None, timeout=None):
        raise requests.ConnectionError("unreachable")

    monkeypatch.setattr(background_service._SESSION, "get", unreachable)
    body = {"statement": "Hi", "background_image_url": "https://cdn.example/bg.png"}

    with caplog.at_level(logging.INFO, logger="api.routes.colorblocks"):
        resp = _client().post("/colorblocks/preview/ops", json=body)

    assert resp.status_code == 200
    background = resp.json()["background"]
    assert background["kind"] == "color"
    assert background["fallback_reason"].startswith("fetch failed")
    assert "background image unavailable" in caplog.text
