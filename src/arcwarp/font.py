"""Outline-capable font handle with cached glyph access and font metrics."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Union

from fontTools.ttLib import TTFont

from arcwarp.common import spacing_to_units
from arcwarp.font_support import AwFontProperties
from arcwarp.fonttools import FontHelper
from arcwarp.glyph import AwGlyph, AwGlyphCachedFactory, AwGlyphFromTTFontFactory

logger = logging.getLogger(__name__)

# CSS keyword weights
FONT_WEIGHT_KEYWORDS: Dict[str, int] = {"normal": 400, "bold": 700}


def weight_to_number(font_weight: Union[str, int, float, None]) -> Optional[float]:
    """
    Numeric weight for a CSS-like font weight ("normal", "bold", "600", 600).
    Returns None for values without a numeric meaning ("lighter", "", None).
    """
    if font_weight is None:
        return None
    if isinstance(font_weight, (int, float)):
        return float(font_weight)
    text = str(font_weight).strip().lower()
    if text in FONT_WEIGHT_KEYWORDS:
        return float(FONT_WEIGHT_KEYWORDS[text])
    try:
        return float(text)
    except ValueError:
        return None


###############################################################################
# AwFont
###############################################################################
@dataclass(eq=False)
class AwFont:
    """Font abstraction with cached glyph access and font metrics.

    Uses an AwGlyphCachedFactory to store glyphs and provides access to
    font properties. If the font was created from a TTFont, variable fonts
    can be instanced to a numeric weight; instances are cached per weight.
    """

    _glyph_factory: AwGlyphCachedFactory
    _ttfont: Optional[TTFont] = None
    _instances: Dict[float, AwFont] = field(default_factory=dict)

    def __init__(self, glyph_factory: AwGlyphCachedFactory, ttfont: Optional[TTFont] = None) -> None:
        self._glyph_factory = glyph_factory
        self._ttfont = ttfont
        self._instances = {}

    @classmethod
    def from_ttfont(cls, ttfont: TTFont) -> AwFont:
        """Font reading its glyphs lazily from the given TTFont."""
        source = AwGlyphFromTTFontFactory(ttfont)
        factory = AwGlyphCachedFactory(source_factory=source, font_properties=source.get_font_properties())
        return cls(factory, ttfont)

    @property
    def glyph_factory(self) -> AwGlyphCachedFactory:
        """Returns the glyph factory used by this font."""
        return self._glyph_factory

    @property
    def ttfont(self) -> Optional[TTFont]:
        """The TTFont this font reads from, if any."""
        return self._ttfont

    @property
    def props(self) -> AwFontProperties:
        """Returns the AwFontProperties object associated with this font."""
        props = self._glyph_factory.get_font_properties()
        if props is None:
            props = AwFontProperties()
        return props

    @property
    def units_per_em(self) -> float:
        """Design units per em."""
        return self.props.units_per_em

    def get_glyph(self, character: str) -> AwGlyph:
        """Returns the AwGlyph for the given character from the factory."""
        return self._glyph_factory.get_glyph(character)

    def advance_width(self, character: str, font_size: float) -> float:
        """Advance width of a character in pixels."""
        return self.get_glyph(character).width * self.props.scale(font_size)

    def measure_text(self, text: str, font_size: float, char_spacing: float = 0.0) -> float:
        """
        Flat width of the text run in pixels:
        sum of scaled advances plus the spacing between characters.
        """
        if not text:
            return 0.0
        spacing = spacing_to_units(char_spacing, font_size)
        advances = sum(self.advance_width(character, font_size) for character in text)
        return advances + spacing * (len(text) - 1)

    def baseline_shift(self, font_size: float) -> float:
        """Distance from the baseline to the vertical middle of the line (pixels, y up)."""
        return self.props.baseline_shift(font_size)

    @property
    def weight_range(self):
        """(min, max) of the 'wght' axis, or None for static fonts."""
        if self._ttfont is None:
            return None
        return FontHelper.get_axis_range(self._ttfont, "wght")

    def instanced(self, font_weight: Union[str, int, float, None]) -> AwFont:
        """
        Font instance for the given weight.

        Returns this font if it is static, has no 'wght' axis or the weight has no numeric meaning.
        The requested weight is clamped to the axis range.
        """
        weight = weight_to_number(font_weight)
        weight_range = self.weight_range
        if weight is None or weight_range is None or self._ttfont is None:
            return self
        weight = max(weight_range[0], min(weight_range[1], weight))
        if weight not in self._instances:
            logger.debug("Instancing variable font at wght=%g", weight)
            instance = FontHelper.instantiate_ttfont(self._ttfont, {"wght": weight})
            self._instances[weight] = AwFont.from_ttfont(instance)
        return self._instances[weight]


###############################################################################
# Main
###############################################################################


def main() -> None:
    """Main entry point for the font module."""
    print(weight_to_number("bold"), weight_to_number("300"), weight_to_number("lighter"))


if __name__ == "__main__":
    main()
