"""Central module containing constants and definitions for curved text processing."""

from __future__ import annotations

import math
import os
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Literal

###############################################################################
# Types
###############################################################################


AwGlyphCmds = Literal[  # Type-Definition for SvgPath-Commands used in AwGlyph
    # MoveTo (2) - start a new subpath and move the current point to (x,y)
    "M",
    # LineTo (2) - draw a straight line from the current point to (x,y)
    "L",
    # Cubic Bezier To (6) - draw a cubic Bezier curve with two control points and an endpoint (x,y)
    "C",
    # Quadratic Bezier To (4) - draw a quadratic Bezier curve with one control point and an endpoint (x,y)
    "Q",
    # ClosePath (0) - close subpath by drawing a line from the current point to start point
    "Z",
]


###############################################################################
# Enums and Consts
###############################################################################


class OriginX(Enum):
    """Horizontal anchor of an object relative to its (left, top) position."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class OriginY(Enum):
    """Vertical anchor of an object relative to its (left, top) position."""

    TOP = "top"
    CENTER = "center"
    BOTTOM = "bottom"


class BoundsTier(Enum):
    """Which computation produced an object's width/height."""

    STRAIGHT = "straight"
    OUTLINE = "outline"
    PLACEMENT = "placement"
    HEURISTIC = "heuristic"
    PERSISTED = "persisted"


@dataclass(frozen=True)
class AwPaint:
    """Fill, stroke and opacity of an object. An empty color means no paint."""

    fill: str = "#000000"
    stroke: str = ""
    stroke_width: float = 0.0
    opacity: float = 1.0

    @property
    def has_fill(self) -> bool:
        """True if the fill is painted."""
        return bool(self.fill) and self.fill.lower() not in ("none", "transparent")

    @property
    def has_stroke(self) -> bool:
        """True if a visible stroke is painted."""
        return self.stroke_width > 0 and bool(self.stroke) and self.stroke.lower() not in ("none", "transparent")


CURVE_INTENSITY_MIN: int = -100
CURVE_INTENSITY_MAX: int = 100

# Sweeps below this angle (rad) are treated as straight text
MIN_ARC_ANGLE: float = 0.01

# Height of a straight line of text = font_size * LINE_HEIGHT_FACTOR
LINE_HEIGHT_FACTOR: float = 1.2

# char_spacing is given in 1/1000 em
CHAR_SPACING_UNITS: float = 1000.0

# Minimum width of a measured text run
MIN_TEXT_WIDTH: float = 10.0

# Decimal places used when writing path coordinates
PATH_DECIMALS: int = 4

# Number of line segments per curve when rasterizing
POLYGONIZE_STEPS: int = 16

DEFAULT_TEXT: str = "Text"
DEFAULT_FONT_FAMILY: str = "Arial"
DEFAULT_FONT_SIZE: float = 40.0
DEFAULT_FILL: str = "#000000"

# Substitute outline fonts for common system families (metric compatible where possible)
SYSTEM_FONT_URLS: Dict[str, str] = {
    "Arial": "https://fonts.gstatic.com/s/arimo/v29/P5sfzZCDf9_T_3cV7NCUECyoxNk.ttf",
    "Times New Roman": "https://fonts.gstatic.com/s/tinos/v24/buE4poGnedXvwgX8dGVh8TI-.ttf",
    "Courier New": "https://fonts.gstatic.com/s/cousine/v27/d6lIkaiiRdih4SpPzSMlzTbtz9k.ttf",
    "Georgia": "https://fonts.gstatic.com/s/tinos/v24/buE4poGnedXvwgX8dGVh8TI-.ttf",
    "Verdana": "https://fonts.gstatic.com/s/arimo/v29/P5sfzZCDf9_T_3cV7NCUECyoxNk.ttf",
    "Helvetica": "https://fonts.gstatic.com/s/arimo/v29/P5sfzZCDf9_T_3cV7NCUECyoxNk.ttf",
}


###############################################################################
# Functions
###############################################################################


def clamp_intensity(intensity: float) -> int:
    """Clamp a curve intensity to [-100, 100] and round it to an integer."""
    return int(round(max(CURVE_INTENSITY_MIN, min(CURVE_INTENSITY_MAX, intensity))))


def spacing_to_units(char_spacing: float, font_size: float) -> float:
    """Convert a char_spacing (1/1000 em) into the additional advance per character."""
    return char_spacing / CHAR_SPACING_UNITS * font_size


def line_height(font_size: float) -> float:
    """Height of a straight line of text."""
    return font_size * LINE_HEIGHT_FACTOR


def main() -> None:
    """Display system information and a few derived constants."""
    print("sys.path:  ", sys.path)
    print()
    print("PYTHONPATH:", os.environ.get("PYTHONPATH", ""))
    print()

    print(f"line height @40px:     {line_height(DEFAULT_FONT_SIZE):g}")
    print(f"spacing 100 @40px:     {spacing_to_units(100, DEFAULT_FONT_SIZE):g}")
    print(f"arc angle @100:        {2 * math.pi:g}")
    for origin in OriginX:
        print(origin, origin.value)

    print()


if __name__ == "__main__":
    main()
