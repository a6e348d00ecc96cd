"""Laying out a text run: warped glyph outlines, flat outlines and per-character fallback placement."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List

import numpy as np

from arcwarp.arc import STRAIGHT, ArcResult, AwArcParameters, solve_arc, warp_points
from arcwarp.common import spacing_to_units
from arcwarp.font import AwFont
from arcwarp.geom import AwBox, GeomMath
from arcwarp.measure import AwTextMeasurer
from arcwarp.path import AwPath


###############################################################################
# Outline layout
###############################################################################


@dataclass
class AwWarpedText:
    """
    Outline of a text run in object-local, y-down coordinates.

    Attributes:
        path: all glyph outlines of the run (warped onto the arc, or flat and centered)
        cursors: start of every character along the flat run
        total_width: flat width of the run
        arc: the arc the run was warped onto, or STRAIGHT
    """

    path: AwPath
    cursors: List[float] = field(default_factory=list)
    total_width: float = 0.0
    arc: ArcResult = STRAIGHT

    @property
    def is_straight(self) -> bool:
        """True if the run was laid out flat."""
        return not isinstance(self.arc, AwArcParameters)

    def control_box(self) -> AwBox:
        """Box around every point of the run including curve control points."""
        return self.path.control_box()


def _flat_glyph_path(font: AwFont, character: str, scale: float, shift: float) -> AwPath:
    """Glyph outline in pixels: x from the glyph origin, y above the middle of the line."""
    return font.get_glyph(character).path.scaled_translated(scale, scale, 0.0, -shift)


def warp_outline_text(
    text: str, font: AwFont, font_size: float, char_spacing: float, arc: AwArcParameters
) -> AwWarpedText:
    """
    Bend the glyph outlines of _text_ onto _arc_.

    Every point of every command (control points included) is warped, and the
    cursor advances by the scaled advance width plus the letter spacing.
    """
    scale = font.props.scale(font_size)
    shift = font.baseline_shift(font_size)
    spacing = spacing_to_units(char_spacing, font_size)

    paths: List[AwPath] = []
    cursors: List[float] = []
    cursor = 0.0
    for character in text:
        cursors.append(cursor)
        glyph_path = _flat_glyph_path(font, character, scale, shift)
        start = cursor
        paths.append(glyph_path.map_points(lambda xs, ys, start=start: warp_points(xs, ys, start, arc.total_width, arc)))
        cursor += font.get_glyph(character).width * scale + spacing

    return AwWarpedText(AwPath.join_paths(*paths), cursors, arc.total_width, arc)


def flat_outline_text(text: str, font: AwFont, font_size: float, char_spacing: float) -> AwWarpedText:
    """Glyph outlines of _text_ laid out flat, centered on the origin (y-down)."""
    scale = font.props.scale(font_size)
    shift = font.baseline_shift(font_size)
    spacing = spacing_to_units(char_spacing, font_size)
    total_width = font.measure_text(text, font_size, char_spacing)
    left = -total_width / 2

    paths: List[AwPath] = []
    cursors: List[float] = []
    cursor = 0.0
    for character in text:
        cursors.append(cursor)
        glyph_path = font.get_glyph(character).path
        paths.append(glyph_path.scaled_translated(scale, -scale, left + cursor, shift))
        cursor += font.get_glyph(character).width * scale + spacing

    return AwWarpedText(AwPath.join_paths(*paths), cursors, total_width, STRAIGHT)


def layout_outline_text(
    text: str, font: AwFont, font_size: float, char_spacing: float, curve_intensity: float
) -> AwWarpedText:
    """Measure the run, solve its arc and return the warped (or flat) outline."""
    total_width = font.measure_text(text, font_size, char_spacing)
    arc = solve_arc(total_width, curve_intensity)
    if isinstance(arc, AwArcParameters):
        return warp_outline_text(text, font, font_size, char_spacing, arc)
    return flat_outline_text(text, font, font_size, char_spacing)


###############################################################################
# Fallback placement
###############################################################################


@dataclass(frozen=True)
class AwPlacedCharacter:
    """
    A whole character placed on the arc without outline data.

    Attributes:
        character: the character
        x, y: center of the character cell (object-local, y-down)
        rotation: rotation in radians (y-down, clockwise on screen)
        width: measured advance of the character
        height: height of the character cell
    """

    character: str
    x: float
    y: float
    rotation: float
    width: float
    height: float

    @property
    def rotation_deg(self) -> float:
        """Rotation in degrees."""
        return math.degrees(self.rotation)

    def box(self) -> AwBox:
        """Axis-aligned box of the rotated character cell."""
        cell = AwBox(-self.width / 2, -self.height / 2, self.width / 2, self.height / 2)
        return cell.transform_affine(GeomMath.rotate_scale_trafo(self.rotation_deg, 1.0, 1.0, self.x, self.y))


def measure_run(text: str, measurer: AwTextMeasurer, font_size: float, char_spacing: float) -> float:
    """Flat width of a run measured character by character, plus the spacing between them."""
    if not text:
        return 0.0
    spacing = spacing_to_units(char_spacing, font_size)
    return sum(measurer.measure(character, font_size) for character in text) + spacing * (len(text) - 1)


def place_fallback_characters(
    text: str, measurer: AwTextMeasurer, font_size: float, char_spacing: float, curve_intensity: float
) -> List[AwPlacedCharacter]:
    """
    Place every character of _text_ as a rotated unit at the arc position of its midpoint.

    Curvature within a character is lost; the result keeps the object drawable
    until outlines are available. Straight runs are placed flat, centered on the origin.
    """
    widths = [measurer.measure(character, font_size) for character in text]
    spacing = spacing_to_units(char_spacing, font_size)
    total_width = float(np.sum(widths)) + spacing * max(0, len(text) - 1)
    arc = solve_arc(total_width, curve_intensity)

    placed: List[AwPlacedCharacter] = []
    cursor = 0.0
    for character, width in zip(text, widths):
        middle = cursor + width / 2
        if isinstance(arc, AwArcParameters):
            angle = arc.angle_at(middle)
            x = math.cos(angle) * arc.radius
            y = math.sin(angle) * arc.radius + arc.vertical_offset
            rotation = arc.tangent_angle_at(middle)
        else:
            x, y, rotation = middle - total_width / 2, 0.0, 0.0
        placed.append(AwPlacedCharacter(character, x, y, rotation, width, font_size))
        cursor += width + spacing
    return placed


def main():
    """Main"""
    glyph_path = AwPath([(0, -200), (500, -200), (500, 800), (0, 800)], ["M", "L", "L", "L", "Z"])
    print(glyph_path.svg_path_string())


if __name__ == "__main__":
    main()
