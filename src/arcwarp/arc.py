"""Circular arc parameters for curved text and the point warp onto the arc.

Coordinates are object-local and y-down (screen convention). A negative
curve intensity bends the text into an arch (upper part of a circle), a
positive intensity into a smile (lower part of a circle). The magnitude
maps linearly onto the swept angle: 100 is a full circle.

The same `AwArcParameters` drive the raster renderer, the vector exporter
and the bounds calculation, so all three agree point for point.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np
from numpy.typing import NDArray

from arcwarp.common import MIN_ARC_ANGLE, clamp_intensity


###############################################################################
# Arc parameters
###############################################################################


class Straight:
    """Marker for a degenerate sweep: text is measured and drawn flat."""

    def __repr__(self) -> str:
        return "STRAIGHT"

    def __bool__(self) -> bool:
        return False


STRAIGHT = Straight()


@dataclass(frozen=True)
class AwArcParameters:
    """
    Geometry of the circle the text run is laid on.

    Attributes:
        intensity: curve intensity in [-100, 100], never 0 here
        total_width: flat width of the text run (arc length of the warped baseline)
        arc_angle: swept angle in radians (2 pi |intensity| / 100)
        radius: circle radius, radius * arc_angle == total_width
        center_angle: angle of the middle of the run (-pi/2 arch, +pi/2 smile)
        sweep: signed sweep walked from start_angle (left to right on screen)
        start_angle: angle of the start of the run
        sagitta: height of the arc segment
        vertical_offset: shifts the circle so the arc is centered on the origin
    """

    intensity: int
    total_width: float
    arc_angle: float
    radius: float
    center_angle: float
    sweep: float
    start_angle: float
    sagitta: float
    vertical_offset: float

    @property
    def is_arch(self) -> bool:
        """True for negative intensity (text on the upper part of the circle)."""
        return self.intensity < 0

    def angle_at(self, distance: float) -> float:
        """Angle on the circle for a distance along the flat text run."""
        return self.start_angle + self.sweep * (distance / self.total_width)

    def tangent_angle_at(self, distance: float) -> float:
        """
        Rotation (radians, y-down) of an upright character placed at _distance_.
        Zero in the middle of the run.
        """
        angle = self.angle_at(distance)
        if self.is_arch:
            return angle + math.pi / 2
        return angle - math.pi / 2


ArcResult = Union[AwArcParameters, Straight]


def solve_arc(total_width: float, curve_intensity: float) -> ArcResult:
    """
    Derive the arc a text run of _total_width_ is bent onto.

    Returns STRAIGHT if the swept angle is below MIN_ARC_ANGLE or the run has no width,
    so callers never divide by a vanishing sweep.
    """
    intensity = clamp_intensity(curve_intensity)
    arc_angle = 2 * math.pi * abs(intensity) / 100
    if arc_angle < MIN_ARC_ANGLE or not total_width > 0:
        return STRAIGHT

    radius = total_width / arc_angle
    center_angle = -math.pi / 2 if intensity < 0 else math.pi / 2
    # arch walks counterclockwise through the top, smile clockwise through the bottom
    sweep = arc_angle if intensity < 0 else -arc_angle
    sagitta = radius * (1 - math.cos(arc_angle / 2))
    if intensity < 0:
        vertical_offset = radius - sagitta / 2
    else:
        vertical_offset = -radius + sagitta / 2

    return AwArcParameters(
        intensity=intensity,
        total_width=float(total_width),
        arc_angle=arc_angle,
        radius=radius,
        center_angle=center_angle,
        sweep=sweep,
        start_angle=center_angle - sweep / 2,
        sagitta=sagitta,
        vertical_offset=vertical_offset,
    )


###############################################################################
# Point warp
###############################################################################


def warp_point(
    x: float, y_from_baseline: float, cursor_x: float, total_width: float, arc: AwArcParameters
) -> Tuple[float, float]:
    """
    Map a flat point onto the arc.

    Args:
        x: horizontal position within the glyph (pixels)
        y_from_baseline: vertical distance above the text line (pixels, y up)
        cursor_x: start of the glyph along the text run
        total_width: flat width of the text run
        arc: arc parameters of the run

    Returns:
        (x, y) in object-local, y-down coordinates
    """
    t = (cursor_x + x) / total_width
    angle = arc.start_angle + arc.sweep * t
    radius = arc.radius + y_from_baseline if arc.intensity < 0 else arc.radius - y_from_baseline
    return math.cos(angle) * radius, math.sin(angle) * radius + arc.vertical_offset


def warp_points(
    xs: NDArray[np.float64],
    ys_from_baseline: NDArray[np.float64],
    cursor_x: float,
    total_width: float,
    arc: AwArcParameters,
) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Vectorized warp_point for arrays of glyph points."""
    t = (cursor_x + xs) / total_width
    angles = arc.start_angle + arc.sweep * t
    radii = arc.radius + ys_from_baseline if arc.intensity < 0 else arc.radius - ys_from_baseline
    return np.cos(angles) * radii, np.sin(angles) * radii + arc.vertical_offset


def main():
    """Main"""
    for intensity in (0, -50, 50, 100):
        arc = solve_arc(200.0, intensity)
        print(intensity, arc)
        if isinstance(arc, AwArcParameters):
            print("  start:", warp_point(0.0, 0.0, 0.0, 200.0, arc))
            print("  mid:  ", warp_point(0.0, 0.0, 100.0, 200.0, arc))
            print("  end:  ", warp_point(0.0, 0.0, 200.0, 200.0, arc))


if __name__ == "__main__":
    main()
