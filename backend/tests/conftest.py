"""
Font Converter Backend - Test Configuration (conftest.py)
=========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Session-scoped (built once, fonts are immutable bytes):
    ├── ttf_bytes:    TrueType font generated with FontBuilder
    ├── otf_bytes:    CFF-flavoured OpenType font generated with FontBuilder
    ├── woff_bytes:   ttf_bytes wrapped as WOFF
    └── woff2_bytes:  ttf_bytes wrapped as WOFF2

    Function-scoped:
    └── test_client:  HTTPX AsyncClient bound to the FastAPI app
"""

import os
from io import BytesIO

# Must be set before the application settings are imported
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["CORS_ORIGINS"] = "*"

import pytest
import pytest_asyncio
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.t2CharStringPen import T2CharStringPen
from fontTools.pens.ttGlyphPen import TTGlyphPen
from fontTools.ttLib import TTFont
from httpx import ASGITransport, AsyncClient

GLYPH_ORDER = [".notdef", "A"]
ADVANCE_WIDTHS = {".notdef": 500, "A": 600}


def _draw_box(pen) -> None:
    pen.moveTo((50, 0))
    pen.lineTo((450, 0))
    pen.lineTo((450, 700))
    pen.lineTo((50, 700))
    pen.closePath()


def _draw_triangle(pen) -> None:
    pen.moveTo((100, 0))
    pen.lineTo((500, 0))
    pen.lineTo((300, 700))
    pen.closePath()


def _finish(fb: FontBuilder) -> bytes:
    fb.setupHorizontalMetrics({".notdef": (500, 50), "A": (600, 100)})
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable({"familyName": "Converter Test", "styleName": "Regular"})
    fb.setupOS2(sTypoAscender=800, sTypoDescender=-200, usWinAscent=800, usWinDescent=200)
    fb.setupPost()
    buffer = BytesIO()
    fb.save(buffer)
    return buffer.getvalue()


def build_ttf() -> bytes:
    """Minimal TrueType font: .notdef box and a triangle for 'A'."""
    fb = FontBuilder(unitsPerEm=1000, isTTF=True)
    fb.setupGlyphOrder(GLYPH_ORDER)
    fb.setupCharacterMap({ord("A"): "A"})

    glyphs = {}
    for name, draw in ((".notdef", _draw_box), ("A", _draw_triangle)):
        pen = TTGlyphPen(None)
        draw(pen)
        glyphs[name] = pen.glyph()
    fb.setupGlyf(glyphs)
    return _finish(fb)


def build_otf() -> bytes:
    """Minimal CFF OpenType font with the same outlines."""
    fb = FontBuilder(unitsPerEm=1000, isTTF=False)
    fb.setupGlyphOrder(GLYPH_ORDER)
    fb.setupCharacterMap({ord("A"): "A"})

    charstrings = {}
    for name, draw in ((".notdef", _draw_box), ("A", _draw_triangle)):
        pen = T2CharStringPen(ADVANCE_WIDTHS[name], None)
        draw(pen)
        charstrings[name] = pen.getCharString()
    fb.setupCFF("ConverterTest-Regular", {"FullName": "Converter Test Regular"}, charstrings, {})
    return _finish(fb)


def rewrap(data: bytes, flavor) -> bytes:
    font = TTFont(BytesIO(data))
    font.flavor = flavor
    buffer = BytesIO()
    font.save(buffer)
    return buffer.getvalue()


@pytest.fixture(scope="session")
def ttf_bytes() -> bytes:
    return build_ttf()


@pytest.fixture(scope="session")
def otf_bytes() -> bytes:
    return build_otf()


@pytest.fixture(scope="session")
def woff_bytes(ttf_bytes) -> bytes:
    return rewrap(ttf_bytes, "woff")


@pytest.fixture(scope="session")
def woff2_bytes(ttf_bytes) -> bytes:
    return rewrap(ttf_bytes, "woff2")


@pytest.fixture
def garbage_bytes() -> bytes:
    """Content that passes the extension check but is not a font."""
    return b"This is definitely not a font file.\n" * 4


@pytest_asyncio.fixture
async def test_client():
    """
    HTTPX AsyncClient talking to the FastAPI app through ASGITransport.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/api/health")
    """
    from font_converter.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
