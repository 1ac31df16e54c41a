import base64
import io
from unittest.mock import MagicMock

import requests
from PIL import Image

from services import background as bg
from settings import settings


def _png_bytes(color="white", size=(8, 8)):
    buf = io.BytesIO()
    Image.new("RGB", size, color=color).save(buf, format="PNG")
    return buf.getvalue()


def _response(content=b"", error=None):
    resp = MagicMock()
    resp.content = content
    if error is not None:
        resp.raise_for_status.side_effect = error
    else:
        resp.raise_for_status.return_value = None
    return resp


def test_resolve_image_url_joins_root_relative_with_origin():
    assert bg.resolve_image_url("/media/bg.png", "http://testserver/") == "http://testserver/media/bg.png"
    assert bg.resolve_image_url("/media/bg.png", "http://testserver") == "http://testserver/media/bg.png"


def test_resolve_image_url_leaves_other_urls_alone():
    assert bg.resolve_image_url("/media/bg.png") == "/media/bg.png"
    assert bg.resolve_image_url("https://cdn.example/bg.png", "http://testserver/") == "https://cdn.example/bg.png"
    assert bg.resolve_image_url("//cdn.example/bg.png", "http://testserver/") == "//cdn.example/bg.png"


def test_no_image_url_uses_color_without_reason():
    result = bg.resolve_background(None, "#4CAF50")
    assert result == bg.FallbackColorBackground(color="#4CAF50")

    result = bg.resolve_background("   ", "#4CAF50")
    assert isinstance(result, bg.FallbackColorBackground)
    assert result.reason is None


def test_data_uri_decodes_to_bitmap():
    uri = "data:image/png;base64," + base64.b64encode(_png_bytes(size=(4, 2))).decode("ascii")
    result = bg.resolve_background(uri, "#4CAF50")
    assert isinstance(result, bg.BitmapBackground)
    assert result.image.size == (4, 2)
    assert result.image.mode == "RGBA"


def test_invalid_base64_payload_falls_back():
    result = bg.resolve_background("data:image/png;base64,!!!notbase64", "#000000")
    assert isinstance(result, bg.FallbackColorBackground)
    assert result.reason.startswith("invalid data URI")


def test_http_error_falls_back(monkeypatch):
    resp = _response(error=requests.HTTPError("404 Client Error"))
    monkeypatch.setattr(bg._SESSION, "get", lambda url, headers=None, timeout=None: resp)

    result = bg.resolve_background("https://cdn.example/missing.png", "#123456")
    assert isinstance(result, bg.FallbackColorBackground)
    assert result.color == "#123456"
    assert result.reason.startswith("fetch failed")


def test_non_image_bytes_fall_back(monkeypatch):
    resp = _response(content=b"<html>not an image</html>")
    monkeypatch.setattr(bg._SESSION, "get", lambda url, headers=None, timeout=None: resp)

    result = bg.resolve_background("https://cdn.example/page.html", "#123456")
    assert isinstance(result, bg.FallbackColorBackground)
    assert result.reason.startswith("decode failed")


def test_fetch_uses_origin_timeout_and_user_agent(monkeypatch):
    seen = {}

    def fake_get(url, headers=None, timeout=None):
        seen.update(url=url, headers=headers, timeout=timeout)
        return _response(content=_png_bytes())

    monkeypatch.setattr(bg._SESSION, "get", fake_get)
    result = bg.resolve_background("/media/bg.png", "#000000", origin="http://testserver/")

    assert isinstance(result, bg.BitmapBackground)
    assert seen["url"] == "http://testserver/media/bg.png"
    assert seen["timeout"] == settings.BACKGROUND_FETCH_TIMEOUT
    assert seen["headers"]["User-Agent"] == settings.BACKGROUND_USER_AGENT


def test_fetch_timeout_falls_back(monkeypatch):
    def slow_get(url, headers=None, timeout=None):
        raise requests.Timeout("read timed out")

    monkeypatch.setattr(bg._SESSION, "get", slow_get)
    result = bg.resolve_background("https://cdn.example/slow.png", "#4CAF50", timeout=0.01)
    assert isinstance(result, bg.FallbackColorBackground)
    assert result.reason is not None
