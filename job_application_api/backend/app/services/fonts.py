"""
Font acquisition for the application PDF.

Sarabun (regular + bold) covers Thai and Latin. Files are read from FONT_DIR
when present, otherwise downloaded once per process through the resource
cache. Every file is checked with fontTools and loaded once with PyMuPDF
before it is accepted, so a truncated download fails here and never
reaches the cache.
"""

import logging
from io import BytesIO
from pathlib import Path
from typing import Dict, Tuple

import fitz  # PyMuPDF
import httpx
from fontTools.ttLib import TTFont

from app.core.config import settings
from app.core.errors import ResourceAcquisitionError
from app.pdf.surface import FontFace, FontSet
from app.services.resource_cache import ResourceCache

logger = logging.getLogger(__name__)

REGULAR_FONT = "sarabun"
BOLD_FONT = "sarabunbold"

# cache key -> (local filename, download URL)
FONT_SOURCES: Dict[str, Tuple[str, str]] = {
    REGULAR_FONT: ("Sarabun-Regular.ttf", settings.FONT_REGULAR_URL),
    BOLD_FONT: ("Sarabun-Bold.ttf", settings.FONT_BOLD_URL),
}


def validate_font(key: str, data: bytes) -> None:
    """
    Raise ResourceAcquisitionError unless `data` is a complete TrueType/OpenType
    font that PyMuPDF can load. Runs inside the cache loader, so rejected bytes
    are never cached.
    """
    try:
        font = TTFont(BytesIO(data), lazy=True)
        has_outlines = "glyf" in font or "CFF " in font
        has_cmap = "cmap" in font
        # tables listed in the directory must lie inside the file
        truncated = [
            str(tag) for tag, entry in font.reader.tables.items()
            if entry.offset + entry.length > len(data)
        ]
        font.close()
    except Exception as e:
        raise ResourceAcquisitionError(key, f"not a valid font file: {e}") from e
    if truncated:
        raise ResourceAcquisitionError(key, f"font file is truncated (tables {', '.join(truncated)} cut off)")
    if not (has_outlines and has_cmap):
        raise ResourceAcquisitionError(key, "font file has no glyph outlines or character map")

    try:
        fitz.Font(fontbuffer=data)
    except Exception as e:
        raise ResourceAcquisitionError(key, f"font rejected by PyMuPDF: {e}") from e


async def download_font(url: str) -> bytes:
    async with httpx.AsyncClient(follow_redirects=True, timeout=settings.FONT_DOWNLOAD_TIMEOUT) as client:
        response = await client.get(url)
    if response.status_code != 200:
        raise ResourceAcquisitionError(url, f"HTTP {response.status_code}")
    return response.content


async def fetch_font(key: str) -> bytes:
    """Cache loader: local FONT_DIR first, then the configured URL."""
    if key not in FONT_SOURCES:
        raise ResourceAcquisitionError(key, "unknown font")
    filename, url = FONT_SOURCES[key]

    data = None
    if settings.FONT_DIR:
        path = Path(settings.FONT_DIR) / filename
        if path.exists():
            logger.info(f"Reading font {key} from {path}")
            data = path.read_bytes()
    if data is None:
        logger.info(f"Downloading font {key} from {url}")
        try:
            data = await download_font(url)
        except httpx.HTTPError as e:
            raise ResourceAcquisitionError(key, f"download failed: {e}") from e

    validate_font(key, data)
    return data


def build_font_cache() -> ResourceCache:
    return ResourceCache(fetch_font)


async def load_font_set(cache: ResourceCache) -> FontSet:
    """Acquire both Sarabun faces; raises ResourceAcquisitionError before any page exists."""
    regular = await cache.acquire(REGULAR_FONT)
    bold = await cache.acquire(BOLD_FONT)
    return FontSet(
        regular=FontFace(REGULAR_FONT, regular),
        bold=FontFace(BOLD_FONT, bold),
    )
