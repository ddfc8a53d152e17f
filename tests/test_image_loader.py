"""Image loader: decoding, downscaling, soft failures and fan-out."""

import io
import logging

import pytest
import requests
from PIL import Image

from quotation_pdf.errors import ImageLoadError
from quotation_pdf.models import LineItem
from quotation_pdf.rendering.image_loader import ImageLoader


class _FakeResponse:
    def __init__(self, content=b"", status=200):
        self.content = content
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


def _png_bytes(size=(100, 50), mode="RGB", color=(10, 20, 30)):
    out = io.BytesIO()
    Image.new(mode, size, color).save(out, format="PNG")
    return out.getvalue()


class TestLoad:

    def test_local_file_is_reencoded_as_jpeg(self, make_image_file):
        p = make_image_file(size=(400, 300))
        img = ImageLoader().load(str(p))
        assert (img.width, img.height) == (400, 300)
        assert img.encoded_bytes[:2] == b"\xff\xd8"

    def test_wide_source_is_downscaled_proportionally(self, make_image_file):
        p = make_image_file(size=(1600, 900))
        img = ImageLoader(max_width_px=800).load(str(p))
        assert (img.width, img.height) == (800, 450)
        with Image.open(io.BytesIO(img.encoded_bytes)) as decoded:
            assert decoded.size == (800, 450)

    def test_ceiling_is_configurable(self, make_image_file):
        p = make_image_file(size=(1000, 500))
        img = ImageLoader(max_width_px=500).load(str(p))
        assert (img.width, img.height) == (500, 250)

    def test_transparent_png_is_flattened(self, make_image_file):
        p = make_image_file(size=(50, 50), mode="RGBA", color=(0, 0, 0, 0))
        img = ImageLoader().load(str(p))
        with Image.open(io.BytesIO(img.encoded_bytes)) as decoded:
            assert decoded.mode == "RGB"
            r, g, b = decoded.getpixel((25, 25))
            assert min(r, g, b) > 240

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ImageLoadError) as exc:
            ImageLoader().load(str(tmp_path / "nope.png"))
        assert exc.value.source.endswith("nope.png")

    def test_garbage_bytes_raise(self, tmp_path):
        p = tmp_path / "broken.jpg"
        p.write_bytes(b"this is not an image")
        with pytest.raises(ImageLoadError):
            ImageLoader().load(str(p))

    def test_blank_source_raises(self):
        with pytest.raises(ImageLoadError):
            ImageLoader().load("  ")


class TestRemote:

    def test_remote_url_is_fetched_with_timeout(self, monkeypatch):
        calls = []

        def fake_get(url, timeout=None):
            calls.append((url, timeout))
            return _FakeResponse(_png_bytes((120, 60)))

        monkeypatch.setattr(requests, "get", fake_get)
        img = ImageLoader(timeout=3.5).load("https://cdn.example.com/p.png")
        assert (img.width, img.height) == (120, 60)
        assert calls == [("https://cdn.example.com/p.png", 3.5)]

    def test_http_error_becomes_image_load_error(self, monkeypatch):
        monkeypatch.setattr(requests, "get", lambda url, timeout=None: _FakeResponse(status=404))
        with pytest.raises(ImageLoadError):
            ImageLoader().load("https://cdn.example.com/missing.png")

    def test_connection_error_becomes_image_load_error(self, monkeypatch):
        def boom(url, timeout=None):
            raise requests.ConnectionError("refused")

        monkeypatch.setattr(requests, "get", boom)
        with pytest.raises(ImageLoadError):
            ImageLoader().load("http://10.0.0.1/p.png")


class TestSoftLoading:

    def test_load_optional_logs_and_returns_none(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING, logger="quotation_pdf.rendering.image_loader"):
            assert ImageLoader().load_optional(str(tmp_path / "nope.png")) is None
        assert "Image load failed" in caplog.text

    def test_load_optional_without_source(self):
        assert ImageLoader().load_optional(None) is None
        assert ImageLoader().load_optional("") is None

    def test_load_for_items_skips_missing_and_failed(self, make_image_file, tmp_path):
        ok = make_image_file("ok.png", size=(300, 600))
        items = [
            LineItem(id="a", name="A", image_url=str(ok)),
            LineItem(id="b", name="B", image_url=str(tmp_path / "gone.png")),
            LineItem(id="c", name="C", image_url=None),
        ]
        images = ImageLoader(max_workers=4).load_for_items(items)
        assert set(images) == {"a"}
        assert (images["a"].width, images["a"].height) == (300, 600)

    def test_load_for_items_without_images(self):
        assert ImageLoader().load_for_items([LineItem(id="a", name="A")]) == {}
