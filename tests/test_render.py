"""Tests for the raster renderer, the vector exporter and their agreement."""

from __future__ import annotations

import asyncio
import gzip
import logging
import re

import numpy as np
import pytest

from arcwarp.common import AwPaint
from arcwarp.curved_text import AwCurvedText
from arcwarp.image import AwImage
from arcwarp.page import AwSvgPage
from arcwarp.path import AwPath
from arcwarp.persistence import deserialize, serialize
from arcwarp.raster import AwRasterRenderer, parse_color
from arcwarp.vector import AwVectorExporter

FAMILY = "Arcwarp Mono"


def make_text(glyph_source, text="HELLO", intensity=50, **kwargs) -> AwCurvedText:
    """Curved text of the test font centered at (150, 100)."""
    kwargs.setdefault("font_size", 40.0)
    return AwCurvedText(
        text, font_family=FAMILY, curve_intensity=intensity, left=150, top=100, glyph_source=glyph_source, **kwargs
    )


def render(obj: AwCurvedText, width: int = 300, height: int = 200) -> AwImage:
    """Object painted onto a transparent surface."""
    image = AwImage.blank(width, height)
    AwRasterRenderer().render(image, obj)
    return image


###############################################################################
# Raster
###############################################################################


class TestRaster:
    """Painting onto AwImage."""

    def test_parse_color(self):
        """CSS colors with the opacity folded into alpha."""
        assert parse_color("#ff0000") == (255, 0, 0, 255)
        assert parse_color("red", 0.5) == (255, 0, 0, 128)
        assert parse_color("#00ff0080") == (0, 255, 0, 128)

    def test_fill_square(self):
        """A square is filled where it lies."""
        square = AwPath([(-10, -10), (10, -10), (10, 10), (-10, 10)], ["M", "L", "L", "L", "Z"])
        image = AwImage.blank(100, 100)
        AwRasterRenderer().fill_path(image, square, (1, 0, 0, 1, 50, 50), AwPaint(fill="#ff0000"))
        extent = image.painted_extent()
        assert extent.xmin == pytest.approx(40, abs=1)
        assert extent.xmax == pytest.approx(60, abs=1)
        assert tuple(image.image[50, 50]) == (255, 0, 0, 255)

    def test_counter_stays_open(self, resolved_source):
        """The inside of O is not painted (even-odd fill)."""
        obj = make_text(resolved_source, "O", 0, font_size=100.0)
        image = render(obj)
        # ring center (300, 200) units is the middle of the line, i.e. the object center
        assert image.alpha[100, 150] == 0
        assert image.alpha[100, 150 - 20] > 0

    def test_stroke_only(self, resolved_source):
        """A path without fill but with stroke paints only the outline."""
        obj = make_text(resolved_source, "H", 0, font_size=100.0, fill="none", stroke="#0000ff", stroke_width=2)
        image = render(obj)
        assert image.painted_extent() is not None
        assert image.alpha[100, 150] == 0

    def test_opacity(self, resolved_source):
        """Opacity scales the painted alpha."""
        obj = make_text(resolved_source, "H", 0, font_size=100.0, opacity=0.5)
        image = render(obj)
        assert image.alpha[100, 150] == 128

    def test_fallback_characters_are_drawn(self, failing_source):
        """Without outlines each character is drawn with a Pillow font."""
        obj = make_text(failing_source, "HELLO", 50)
        image = render(obj)
        assert obj.outline_layout() is None
        assert image.painted_extent() is not None

    def test_empty_text_paints_nothing(self, resolved_source):
        """Empty text leaves the surface untouched."""
        assert render(make_text(resolved_source, "", 50)).painted_extent() is None


###############################################################################
# Vector
###############################################################################


class TestVector:
    """SVG fragments."""

    def test_curved_text_is_a_path(self, resolved_source):
        """Curved outlines are exported as one even-odd path inside a transformed group."""
        markup = AwVectorExporter().to_svg(make_text(resolved_source, angle=30, scale_x=2, scale_y=1.5))
        assert markup.startswith("<g")
        assert 'transform="translate(150 100) rotate(30) scale(2 1.5)"' in markup
        assert 'fill-rule="evenodd"' in markup
        assert "<path" in markup and "<text" not in markup

    def test_path_numbers_are_bounded(self, resolved_source):
        """Coordinates have at most four decimals and no exponent."""
        data = AwVectorExporter().path_data(make_text(resolved_source, intensity=37))
        numbers = re.findall(r"-?[0-9.]+(?:[eE][-+]?[0-9]+)?", data)
        assert numbers
        assert all("e" not in number.lower() for number in numbers)
        assert all(len(number.split(".")[1]) <= 4 for number in numbers if "." in number)

    def test_straight_text_is_text_markup(self, resolved_source):
        """Zero intensity exports flat centered text."""
        markup = AwVectorExporter().to_svg(make_text(resolved_source, intensity=0, char_spacing=100))
        assert "<path" not in markup
        assert ">HELLO</text>" in markup
        assert 'text-anchor="middle"' in markup
        assert 'letter-spacing="4"' in markup

    def test_straight_text_as_path(self, resolved_source):
        """With text_as_path straight text is exported as outline."""
        markup = AwVectorExporter(text_as_path=True).to_svg(make_text(resolved_source, intensity=0))
        assert "<path" in markup

    def test_fallback_exports_placed_characters(self, failing_source):
        """Without outlines every character becomes a rotated text element."""
        markup = AwVectorExporter().to_svg(make_text(failing_source, intensity=50))
        assert markup.count("<text") == 5
        assert "rotate(" in markup
        assert "<path" not in markup

    def test_paint_attributes(self, resolved_source):
        """Fill, stroke and opacity are carried."""
        obj = make_text(resolved_source, fill="#ff0000", stroke="#000000", stroke_width=1.5, opacity=0.25)
        markup = AwVectorExporter().to_svg(obj)
        assert 'fill="#ff0000"' in markup
        assert 'stroke="#000000"' in markup
        assert 'stroke-width="1.5"' in markup
        assert 'opacity="0.25"' in markup

    def test_persisted_path_data_used_without_outlines(self, failing_source):
        """A restored object exports its persisted path while outlines are missing."""
        obj = AwCurvedText(
            "HELLO",
            curve_intensity=40,
            width=100,
            height=60,
            glyph_source=failing_source,
            from_persisted_state=True,
            path_data="M 0 0 L 10 0 L 10 10 Z",
        )
        markup = AwVectorExporter().to_svg(obj)
        assert 'd="M 0 0 L 10 0 L 10 10 Z"' in markup


###############################################################################
# Agreement
###############################################################################


@pytest.mark.parametrize(
    "text, intensity, font_size, scale",
    [
        ("HELLO", 0, 40.0, 1.0),
        ("HELLO", 50, 40.0, 1.0),
        ("HELLO", -50, 40.0, 1.0),
        ("HELLO", 100, 40.0, 1.0),
        ("OHO", 25, 30.0, 1.5),
        ("WORLD", -80, 24.0, 2.0),
    ],
)
def test_raster_and_vector_extents_agree(resolved_source, text, intensity, font_size, scale):
    """Painted pixels and the exported path's bounding box match within one pixel."""
    obj = make_text(resolved_source, text, intensity, font_size=font_size, scale_x=scale, scale_y=scale)
    painted = render(obj).painted_extent()
    vector = AwVectorExporter(text_as_path=True).path_bounding_box(obj)
    assert painted is not None and vector is not None

    # compare pixel centers with the geometric box
    centers = painted.expanded(-0.5, -0.5)
    np.testing.assert_allclose(centers.extent, vector.extent, atol=1.0 + 1e-6)


def test_reloaded_object_without_font_agrees(resolved_source, failing_source):
    """A reloaded object whose font is missing paints and exports its persisted outline alike."""
    restored = deserialize(serialize(make_text(resolved_source, intensity=70)), failing_source)
    asyncio.run(restored.load_outline())
    assert restored.outline_layout() is None
    assert restored.persisted_path() is not None

    painted = render(restored).painted_extent()
    vector = AwVectorExporter().path_bounding_box(restored)
    assert painted is not None and vector is not None
    np.testing.assert_allclose(painted.expanded(-0.5, -0.5).extent, vector.extent, atol=1.0 + 1e-6)


def test_unusable_persisted_path_falls_back_on_both_sides(failing_source, caplog):
    """Path data that cannot be parsed is dropped; both emitters draw characters instead."""
    record = serialize(make_text(failing_source, intensity=50))
    record.update(width=120.0, height=60.0, pathData="M 0 0 L 10")
    with caplog.at_level(logging.WARNING, logger="arcwarp.curved_text"):
        restored = deserialize(record, failing_source)
    assert "unusable path data" in caplog.text
    assert restored.persisted_path_data() is None
    assert restored.is_from_persisted_state

    assert render(restored).painted_extent() is not None
    exporter = AwVectorExporter()
    assert exporter.path_bounding_box(restored) is None
    assert exporter.to_svg(restored).count("<text") == 5


###############################################################################
# Page
###############################################################################


class TestAwSvgPage:
    """SVG document assembly."""

    def test_layers(self):
        """Fragments go to the main layer; the debug layer is optional."""
        page = AwSvgPage(200, 100, background="white")
        page.add(page.drawing.circle(center=(10, 10), r=5), add_to_debug_layer=True)
        page.add(page.drawing.rect(insert=(0, 0), size=(5, 5)))
        assert 'viewBox="0 0 200 100"' in page.tostring()
        assert "<circle" not in page.tostring()
        assert "<circle" in page.tostring(include_debug_layer=True)
        assert page.tostring().count("<rect") == 2

    def test_save_compressed(self, tmp_path):
        """svgz files are gzip compressed."""
        filename = tmp_path / "page.svgz"
        AwSvgPage(10, 10).save_as(str(filename), compressed=True)
        assert gzip.decompress(filename.read_bytes()).startswith(b"<?xml")
