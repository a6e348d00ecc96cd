"""Shared fixtures: a small monospace outline font built in memory with fontTools."""

from __future__ import annotations

import io

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen

from arcwarp.errors import FontResolutionError
from arcwarp.font import AwFont
from arcwarp.glyph_source import AwFontCache, AwGlyphSource, parse_font_bytes
from arcwarp.measure import AwFontMeasurer

TEST_FAMILY = "Arcwarp Mono"

# Every glyph advances 600 units; box glyphs fill 50..550 x -400..800, which is
# symmetric about the middle (200) of the ascender/descender band.
UNITS_PER_EM = 1000
ADVANCE = 600
ASCENDER = 800
DESCENDER = -400
BOX_LETTERS = "ABCDEFGHIJKLMNPQRSTUVWXYZ"


def _box_glyph():
    pen = TTGlyphPen(None)
    pen.moveTo((50, DESCENDER))
    pen.lineTo((50, ASCENDER))
    pen.lineTo((550, ASCENDER))
    pen.lineTo((550, DESCENDER))
    pen.closePath()
    return pen.glyph()


def _ring_glyph():
    """Quadratic ring around (300, 200) with a counter drawn in the opposite direction."""
    pen = TTGlyphPen(None)
    pen.moveTo((300, -50))
    pen.qCurveTo((550, -50), (550, 200))
    pen.qCurveTo((550, 450), (300, 450))
    pen.qCurveTo((50, 450), (50, 200))
    pen.qCurveTo((50, -50), (300, -50))
    pen.closePath()
    pen.moveTo((300, 50))
    pen.qCurveTo((150, 50), (150, 200))
    pen.qCurveTo((150, 350), (300, 350))
    pen.qCurveTo((450, 350), (450, 200))
    pen.qCurveTo((450, 50), (300, 50))
    pen.closePath()
    return pen.glyph()


def _empty_glyph():
    return TTGlyphPen(None).glyph()


def build_test_font_bytes() -> bytes:
    """TrueType font file with box glyphs for A-Z (except O), a ring for O, and a space."""
    glyph_order = [".notdef", "space", "O"] + list(BOX_LETTERS)
    cmap = {ord(" "): "space", ord("O"): "O"}
    cmap.update({ord(letter): letter for letter in BOX_LETTERS})

    glyphs = {".notdef": _empty_glyph(), "space": _empty_glyph(), "O": _ring_glyph()}
    glyphs.update({letter: _box_glyph() for letter in BOX_LETTERS})

    metrics = {name: (ADVANCE, 0 if name in (".notdef", "space") else 50) for name in glyph_order}

    builder = FontBuilder(UNITS_PER_EM, isTTF=True)
    builder.setupGlyphOrder(glyph_order)
    builder.setupCharacterMap(cmap)
    builder.setupGlyf(glyphs)
    builder.setupHorizontalMetrics(metrics)
    builder.setupHorizontalHeader(ascent=ASCENDER, descent=DESCENDER)
    builder.setupNameTable({"familyName": TEST_FAMILY, "styleName": "Regular"})
    builder.setupOS2(sTypoAscender=ASCENDER, sTypoDescender=DESCENDER, usWinAscent=ASCENDER, usWinDescent=-DESCENDER)
    builder.setupPost()

    buffer = io.BytesIO()
    builder.save(buffer)
    return buffer.getvalue()


@pytest.fixture(scope="session")
def font_bytes() -> bytes:
    """Compiled test font."""
    return build_test_font_bytes()


@pytest.fixture
def mono_font(font_bytes) -> AwFont:
    """Test font parsed the way fetched fonts are parsed."""
    return parse_font_bytes(font_bytes)


@pytest.fixture
def font_measurer(mono_font) -> AwFontMeasurer:
    """Deterministic text measurement by the test font's advances."""
    return AwFontMeasurer(mono_font)


@pytest.fixture
def loader_calls():
    """Font keys requested from the loaders below."""
    return []


@pytest.fixture
def glyph_source(mono_font, loader_calls) -> AwGlyphSource:
    """Glyph source resolving every key to the test font (without network access)."""

    async def loader(font_key: str) -> AwFont:
        loader_calls.append(font_key)
        return mono_font

    return AwGlyphSource(AwFontCache(), loader)


@pytest.fixture
def failing_source(loader_calls) -> AwGlyphSource:
    """Glyph source whose every resolution fails."""

    async def loader(font_key: str) -> AwFont:
        loader_calls.append(font_key)
        raise FontResolutionError(font_key, "offline")

    return AwGlyphSource(AwFontCache(), loader)


@pytest.fixture
def resolved_source(glyph_source, mono_font) -> AwGlyphSource:
    """Glyph source with the test family already in its cache."""
    glyph_source.register(TEST_FAMILY, mono_font)
    return glyph_source
