"""Width and height of curved text in local (pre-scale, pre-rotation) units."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from arcwarp.arc import AwArcParameters, solve_arc
from arcwarp.common import MIN_TEXT_WIDTH, BoundsTier, clamp_intensity, line_height
from arcwarp.geom import AwBox
from arcwarp.glyph_source import OutlineAvailable, OutlineState
from arcwarp.measure import AwTextMeasurer
from arcwarp.warp import layout_outline_text, measure_run, place_fallback_characters

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AwBounds:
    """
    Size of an object plus the computation that produced it.

    Attributes:
        width: width in local units
        height: height in local units
        tier: which computation produced the size
        box: local box the size was taken from, if it is known
    """

    width: float
    height: float
    tier: BoundsTier
    box: Optional[AwBox] = None


def heuristic_height(width: float, font_size: float, curve_intensity: float) -> float:
    """
    Estimated height of curved text without any per-character measurement.

    Grows linearly from the line height (straight) to the width (full circle)
    and is non-decreasing in |curve_intensity|.
    """
    base = line_height(font_size)
    ratio = min(1.0, abs(clamp_intensity(curve_intensity)) / 100)
    return max(base, base + (width - base) * ratio)


def compute_bounds(
    text: str,
    font_size: float,
    char_spacing: float,
    curve_intensity: float,
    outline: OutlineState,
    measurer: Optional[AwTextMeasurer] = None,
    fallback_width: Optional[float] = None,
) -> AwBounds:
    """
    Compute the bounds of a curved text run.

    Args:
        text: the text run
        font_size: font size in pixels
        char_spacing: letter spacing in 1/1000 em
        curve_intensity: intensity in [-100, 100]
        outline: outline state of the font
        measurer: generic text measurement used without outlines
        fallback_width: width to use when nothing can be measured (e.g. the current width)

    Returns:
        AwBounds: width, height and the tier used
    """
    intensity = clamp_intensity(curve_intensity)
    straight_height = line_height(font_size)

    if isinstance(outline, OutlineAvailable):
        font = outline.font
        flat_width = font.measure_text(text, font_size, char_spacing)
        arc = solve_arc(flat_width, intensity)
        if not isinstance(arc, AwArcParameters):
            return AwBounds(max(flat_width, MIN_TEXT_WIDTH), straight_height, BoundsTier.STRAIGHT)
        warped = layout_outline_text(text, font, font_size, char_spacing, intensity)
        box = warped.control_box()
        return AwBounds(box.width, box.height, BoundsTier.OUTLINE, box)

    if measurer is not None:
        flat_width = measure_run(text, measurer, font_size, char_spacing)
        arc = solve_arc(flat_width, intensity)
        if not isinstance(arc, AwArcParameters):
            return AwBounds(max(flat_width, MIN_TEXT_WIDTH), straight_height, BoundsTier.STRAIGHT)
        placed = place_fallback_characters(text, measurer, font_size, char_spacing, intensity)
        box = placed[0].box()
        for character in placed[1:]:
            box = box.union(character.box())
        return AwBounds(box.width, box.height, BoundsTier.PLACEMENT, box)

    width = max(fallback_width or 0.0, MIN_TEXT_WIDTH)
    if intensity == 0:
        return AwBounds(width, straight_height, BoundsTier.STRAIGHT)
    logger.debug("No outlines and no measurement for %r, estimating bounds", text)
    return AwBounds(width, heuristic_height(width, font_size, intensity), BoundsTier.HEURISTIC)


def main():
    """Main"""
    for intensity in (0, 10, 30, 50, 100):
        print(intensity, heuristic_height(200.0, 40.0, intensity))


if __name__ == "__main__":
    main()
