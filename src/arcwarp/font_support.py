"""Font properties and supporting utilities for OpenType fonts."""

from __future__ import annotations

from dataclasses import dataclass

from fontTools.pens.boundsPen import BoundsPen
from fontTools.ttLib import TTFont


###############################################################################
# AwFontProperties
###############################################################################
@dataclass
class AwFontProperties:
    """
    Represents the metric and naming properties of a font.

    The properties are as follows:

    - `ascender`: The highest y-coordinate above the baseline (mostly positive value).
    - `descender`: The lowest y-coordinate below the baseline (usually negative value).
    - `line_gap`: Additional spacing between lines.
    - `cap_height`: Height of uppercase 'H'.
    - `units_per_em`: Units per em.
    - `family_name`: Font family name.
    - `subfamily_name`: Style name (Regular, Bold, etc.).
    - `full_name`: Full font name.
    - `is_variable`: True if the font has variation axes.
    """

    ascender: float = 0.0
    descender: float = 0.0
    line_gap: float = 0.0
    cap_height: float = 0.0
    units_per_em: float = 1000.0
    family_name: str = ""
    subfamily_name: str = ""
    full_name: str = ""
    is_variable: bool = False

    @property
    def line_height(self) -> float:
        """Computed line height of the font (ascender - descender + line_gap)."""
        return self.ascender - self.descender + self.line_gap

    @property
    def band_middle(self) -> float:
        """Middle of the ascender/descender band in font units."""
        return (self.ascender + self.descender) / 2.0

    def scale(self, font_size: float) -> float:
        """Factor from font units to pixels for the given font size."""
        return font_size / self.units_per_em

    def baseline_shift(self, font_size: float) -> float:
        """
        Distance (pixels, y up) from the baseline to the middle of the ascender/descender band.

        Glyph coordinates minus this shift are centered vertically on the line,
        which matches drawing text with a "middle" text baseline.
        """
        return self.band_middle * self.scale(font_size)

    @classmethod
    def _glyph_visual_height(cls, font: TTFont, char: str) -> float:
        """Return yMax - yMin of the glyph for `char`, or 0.0 if missing/empty."""
        cmap = font.getBestCmap()
        if not cmap or ord(char) not in cmap:
            return 0.0

        glyph_set = font.getGlyphSet()
        pen = BoundsPen(glyph_set)
        try:
            glyph_set[cmap[ord(char)]].draw(pen)
        except KeyError:
            return 0.0

        if pen.bounds is None:
            return 0.0

        _, y_min, _, y_max = pen.bounds
        return max(0.0, float(y_max - y_min))

    @classmethod
    def _get_name_safe(cls, ttfont: TTFont, name_id: int) -> str:
        """Name record as string, or "" if the font has no name table or no such record."""
        if "name" not in ttfont:
            return ""
        name = ttfont["name"].getDebugName(name_id)
        return name if name is not None else ""

    @classmethod
    def from_ttfont(cls, ttfont: TTFont) -> AwFontProperties:
        """
        Create AwFontProperties from a fontTools TTFont object.
        Works with static and variable fonts (the default instance is described).
        """
        hhea = ttfont["hhea"]
        head = ttfont["head"]

        return cls(
            ascender=float(hhea.ascender),  # type: ignore
            descender=float(hhea.descender),  # type: ignore
            line_gap=float(hhea.lineGap),  # type: ignore
            cap_height=cls._glyph_visual_height(ttfont, "H"),
            units_per_em=float(head.unitsPerEm),  # type: ignore
            family_name=cls._get_name_safe(ttfont, 1),
            subfamily_name=cls._get_name_safe(ttfont, 2),
            full_name=cls._get_name_safe(ttfont, 4),
            is_variable="fvar" in ttfont,
        )

    def __repr__(self) -> str:
        return f"AwFontProperties({self.family_name} {self.subfamily_name}, {self.units_per_em}upem)"


def main():
    """Main"""
    props = AwFontProperties(ascender=800, descender=-200, units_per_em=1000, family_name="Demo")
    print(props, props.line_height)
    print("baseline shift @40px:", props.baseline_shift(40.0))


if __name__ == "__main__":
    main()
