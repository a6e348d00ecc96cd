"""Font glyph handling: outlines in font units and the factories creating them."""

from __future__ import annotations

import logging
from abc import abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Optional

from fontTools.ttLib import TTFont

from arcwarp.font_support import AwFontProperties
from arcwarp.fonttools import AwGlyphPtsCmdsPen
from arcwarp.geom import AwBox
from arcwarp.path import AwPath

logger = logging.getLogger(__name__)

NOTDEF_GLYPH_NAME = ".notdef"

###############################################################################
# Glyph
###############################################################################


@dataclass
class AwGlyph:
    """Representation of a font glyph, i.e. a single character of a certain font.

    Uses dimensions in unitsPerEm (y up, baseline at 0), i.e. independent from font_size.
    It is composed of a set of points and a set of commands that define how to draw the shape.
    Glyphs are owned by the glyph cache of their font and never mutated.

    Attributes:
        character: Unicode character represented by this glyph
        width: advance width in font units
        path: outline of the glyph
    """

    _character: str
    _width: float
    _path: AwPath

    def __init__(self, character: str, width: float, path: AwPath) -> None:
        """
        Initialize an AwGlyph.

        Args:
            character (str): A single character.
            width (float): The advance width of the glyph in unitsPerEm.
            path (AwPath): The path object containing points and commands for the glyph.
        """
        self._character = character
        self._width = float(width)
        self._path = path

    @classmethod
    def empty(cls, character: str) -> AwGlyph:
        """Glyph without outline and with zero advance."""
        return cls(character, 0.0, AwPath())

    @classmethod
    def from_ttfont_character(cls, ttfont: TTFont, character: str) -> AwGlyph:
        """
        Factory method to create an AwGlyph from a TTFont and character.

        Characters missing from the font's cmap are drawn with the ".notdef" glyph.
        If the font has no ".notdef" either, an empty glyph with zero advance is returned.

        Parameters:
            ttfont (TTFont): The TTFont to use.
            character (str): The character to use.
        """
        cmap = ttfont.getBestCmap() or {}
        glyph_set = ttfont.getGlyphSet()
        glyph_name = cmap.get(ord(character))
        if glyph_name is None:
            if NOTDEF_GLYPH_NAME not in glyph_set:
                logger.debug("No glyph and no .notdef for %r, using an empty glyph", character)
                return cls.empty(character)
            logger.debug("No glyph for %r, using .notdef", character)
            glyph_name = NOTDEF_GLYPH_NAME

        pen = AwGlyphPtsCmdsPen(glyph_set)
        glyph_set[glyph_name].draw(pen)
        width = glyph_set[glyph_name].width
        return cls(character, width, AwPath(pen.points, pen.commands))

    @property
    def character(self) -> str:
        """
        The character of this glyph.
        """
        return self._character

    @property
    def path(self) -> AwPath:
        """
        The outline of this glyph.
        """
        return self._path

    @property
    def width(self) -> float:
        """
        The advance width of this glyph in font units.
        """
        return self._width

    def bounding_box(self) -> AwBox:
        """Bounding box of the outline in font units."""
        return self._path.bounding_box()


###############################################################################
# AwGlyphFactory
###############################################################################


class AwGlyphFactory:
    """
    Abstract base class for glyph factories.
    A glyph factory is responsible for creating glyph representations for a character.
    """

    @abstractmethod
    def get_glyph(self, character: str) -> AwGlyph:
        """
        Creates and returns a glyph representation for the specified character.
        Args:
            character (str): The character to create a glyph for.
        Returns:
            AwGlyph: An instance representing the glyph of the specified character.
        """

    def get_font_properties(self) -> Optional[AwFontProperties]:
        """
        Return font properties if available, None otherwise.

        Child classes override this method if they can provide font properties,
        or forward the request to their source factory.
        """
        return None


###############################################################################
# AwGlyphCachedFactory
###############################################################################


@dataclass
class AwGlyphCachedFactory(AwGlyphFactory):
    """Glyph factory backed by an in-memory glyph dictionary with optional source.

    The factory first tries to return a glyph from its internal ``_glyphs`` cache.
    If the glyph is not present and a ``_source_factory`` is configured, it will
    delegate creation to that factory, cache the result, and return it.
    """

    _glyphs: Dict[str, AwGlyph] = field(default_factory=dict)
    _source_factory: Optional[AwGlyphFactory] = None
    _font_properties: Optional[AwFontProperties] = None

    def __init__(
        self,
        glyphs: Optional[Dict[str, AwGlyph]] = None,
        source_factory: Optional[AwGlyphFactory] = None,
        font_properties: Optional[AwFontProperties] = None,
    ) -> None:
        """Initialize the factory with an optional glyph cache and source factory."""
        self._glyphs = {} if glyphs is None else glyphs
        self._source_factory = source_factory
        self._font_properties = font_properties

    @property
    def glyphs(self) -> Dict[str, AwGlyph]:
        """Return the internal glyph cache mapping characters to glyph instances."""
        return self._glyphs

    @property
    def source_factory(self) -> Optional[AwGlyphFactory]:
        """Return the optional backing glyph factory used as a cache miss source."""
        return self._source_factory

    def get_glyph(self, character: str) -> AwGlyph:
        """
        Retrieve a glyph from the cache or source factory.

        Raises:
            KeyError: If glyph is not found in cache and no source factory is set.
        """
        if character in self._glyphs:
            return self._glyphs[character]

        if self._source_factory is None:
            raise KeyError(f"Glyph for character {character!r} not found and no source_factory provided.")

        glyph = self._source_factory.get_glyph(character)
        self._glyphs[character] = glyph
        return glyph

    def get_font_properties(self) -> Optional[AwFontProperties]:
        """
        Return the font properties given at construction,
        else forward the request to the source factory.
        """
        if self._font_properties is None and self._source_factory is not None:
            self._font_properties = self._source_factory.get_font_properties()
        return self._font_properties


###############################################################################
# AwGlyphFromTTFontFactory
###############################################################################


@dataclass
class AwGlyphFromTTFontFactory(AwGlyphFactory):
    """Factory creating glyphs by drawing them from a fontTools TTFont."""

    _ttfont: TTFont

    def __init__(self, ttfont: TTFont) -> None:
        self._ttfont = ttfont

    @property
    def ttfont(self) -> TTFont:
        """
        Returns the TTFont instance associated with this glyph factory.
        """
        return self._ttfont

    def get_glyph(self, character: str) -> AwGlyph:
        return AwGlyph.from_ttfont_character(self._ttfont, character)

    def get_font_properties(self) -> Optional[AwFontProperties]:
        return AwFontProperties.from_ttfont(self._ttfont)


def main():
    """Main"""
    glyph = AwGlyph("I", 300, AwPath([(50, 0), (250, 0), (250, 700), (50, 700)], ["M", "L", "L", "L", "Z"]))
    factory = AwGlyphCachedFactory(glyphs={"I": glyph})
    print(factory.get_glyph("I").bounding_box())
    print(sorted(factory.glyphs))


if __name__ == "__main__":
    main()
