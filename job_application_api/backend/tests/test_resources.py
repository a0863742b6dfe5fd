"""Tests for the resource cache and font acquisition."""

import sys
import os
import asyncio
from io import BytesIO

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen

from app.core.config import settings
from app.core.errors import ResourceAcquisitionError
from app.services import fonts
from app.services.resource_cache import ResourceCache


def _square():
    pen = TTGlyphPen(None)
    pen.moveTo((0, 0))
    pen.lineTo((0, 500))
    pen.lineTo((500, 500))
    pen.lineTo((500, 0))
    pen.closePath()
    return pen.glyph()


def build_tiny_ttf() -> bytes:
    """A two-glyph TrueType font, enough to pass validation and load in PyMuPDF."""
    fb = FontBuilder(1000, isTTF=True)
    fb.setupGlyphOrder([".notdef", "A"])
    fb.setupCharacterMap({ord("A"): "A"})
    fb.setupGlyf({".notdef": _square(), "A": _square()})
    fb.setupHorizontalMetrics({".notdef": (500, 0), "A": (500, 0)})
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable({"familyName": "Tiny", "styleName": "Regular"})
    fb.setupOS2()
    fb.setupPost()
    buf = BytesIO()
    fb.save(buf)
    return buf.getvalue()


TINY_TTF = build_tiny_ttf()


class CountingLoader:
    def __init__(self, data=b"font-bytes", error=None):
        self.data = data
        self.error = error
        self.calls = []

    async def __call__(self, key):
        self.calls.append(key)
        await asyncio.sleep(0)
        if self.error:
            raise self.error
        return self.data


class TestResourceCache:

    def test_loaded_once(self):
        loader = CountingLoader()
        cache = ResourceCache(loader)

        async def run():
            first = await cache.acquire("sarabun")
            second = await cache.acquire("sarabun")
            return first, second

        first, second = asyncio.run(run())
        assert first == second == b"font-bytes"
        assert loader.calls == ["sarabun"]
        assert "sarabun" in cache

    def test_concurrent_cold_loads_are_harmless(self):
        loader = CountingLoader()
        cache = ResourceCache(loader)

        async def run():
            return await asyncio.gather(cache.acquire("sarabun"), cache.acquire("sarabun"))

        results = asyncio.run(run())
        assert results == [b"font-bytes", b"font-bytes"]
        # no lock: both callers may load, the entry ends up the same
        assert 1 <= len(loader.calls) <= 2
        assert len(cache) == 1

    def test_loader_failure_is_wrapped_and_not_cached(self):
        loader = CountingLoader(error=ValueError("boom"))
        cache = ResourceCache(loader)
        with pytest.raises(ResourceAcquisitionError) as exc:
            asyncio.run(cache.acquire("sarabun"))
        assert exc.value.resource == "sarabun"
        assert "sarabun" not in cache

        loader.error = None
        assert asyncio.run(cache.acquire("sarabun")) == b"font-bytes"

    def test_empty_data_is_an_error(self):
        cache = ResourceCache(CountingLoader(data=b""))
        with pytest.raises(ResourceAcquisitionError):
            asyncio.run(cache.acquire("sarabun"))
        assert len(cache) == 0


class TestFonts:

    def test_valid_font_passes(self):
        fonts.validate_font("tiny", TINY_TTF)

    def test_truncated_font_fails(self):
        with pytest.raises(ResourceAcquisitionError):
            fonts.validate_font("tiny", TINY_TTF[:40])

    def test_font_cut_in_half_fails(self):
        with pytest.raises(ResourceAcquisitionError) as exc:
            fonts.validate_font("tiny", TINY_TTF[:len(TINY_TTF) // 2])
        assert exc.value.resource == "tiny"

    def test_truncated_download_is_not_cached(self, monkeypatch):
        monkeypatch.setattr(settings, "FONT_DIR", "")
        responses = [TINY_TTF[:len(TINY_TTF) // 2], TINY_TTF]

        async def flaky_download(url):
            return responses.pop(0)

        monkeypatch.setattr(fonts, "download_font", flaky_download)
        cache = fonts.build_font_cache()

        with pytest.raises(ResourceAcquisitionError):
            asyncio.run(cache.acquire(fonts.REGULAR_FONT))
        assert fonts.REGULAR_FONT not in cache

        # the next request fetches again and gets the complete file
        assert asyncio.run(cache.acquire(fonts.REGULAR_FONT)) == TINY_TTF
        assert responses == []

    def test_html_error_page_fails(self):
        with pytest.raises(ResourceAcquisitionError):
            fonts.validate_font("tiny", b"<html>404 Not Found</html>")

    def test_reads_from_font_dir_first(self, tmp_path, monkeypatch):
        (tmp_path / "Sarabun-Regular.ttf").write_bytes(TINY_TTF)
        monkeypatch.setattr(settings, "FONT_DIR", str(tmp_path))

        async def no_download(url):
            raise AssertionError("should not download")

        monkeypatch.setattr(fonts, "download_font", no_download)
        assert asyncio.run(fonts.fetch_font(fonts.REGULAR_FONT)) == TINY_TTF

    def test_downloads_when_not_local(self, monkeypatch):
        monkeypatch.setattr(settings, "FONT_DIR", "")
        urls = []

        async def fake_download(url):
            urls.append(url)
            return TINY_TTF

        monkeypatch.setattr(fonts, "download_font", fake_download)
        assert asyncio.run(fonts.fetch_font(fonts.BOLD_FONT)) == TINY_TTF
        assert urls == [fonts.FONT_SOURCES[fonts.BOLD_FONT][1]]

    def test_bad_download_is_rejected(self, monkeypatch):
        monkeypatch.setattr(settings, "FONT_DIR", "")

        async def fake_download(url):
            return b"<html>rate limited</html>"

        monkeypatch.setattr(fonts, "download_font", fake_download)
        with pytest.raises(ResourceAcquisitionError):
            asyncio.run(fonts.fetch_font(fonts.REGULAR_FONT))

    def test_unknown_font(self):
        with pytest.raises(ResourceAcquisitionError):
            asyncio.run(fonts.fetch_font("comic-sans"))

    def test_load_font_set_uses_cache(self, monkeypatch):
        monkeypatch.setattr(settings, "FONT_DIR", "")
        calls = []

        async def fake_download(url):
            calls.append(url)
            return TINY_TTF

        monkeypatch.setattr(fonts, "download_font", fake_download)
        cache = fonts.build_font_cache()

        async def run():
            await fonts.load_font_set(cache)
            return await fonts.load_font_set(cache)

        font_set = asyncio.run(run())
        assert font_set.regular.name == fonts.REGULAR_FONT
        assert font_set.bold.buffer == TINY_TTF
        assert len(calls) == 2
        assert len(cache) == 2
