"""Classes related to the FontTools library."""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

import numpy as np
from fontTools.pens.basePen import BasePen
from fontTools.ttLib import TTFont
from fontTools.varLib import instancer
from numpy.typing import NDArray

from arcwarp.common import AwGlyphCmds


class FontHelper:
    """
    Class to provide various static methods related to font handling.
    """

    @staticmethod
    def is_variable_font(ttfont: TTFont) -> bool:
        """True if the font carries an 'fvar' table."""
        return "fvar" in ttfont

    @staticmethod
    def get_default_axes_values(variable_font: TTFont) -> Dict[str, float]:
        """
        Get the default axes values of a given variable TTFont.
        Use returned values to instantiate a new font.
        """
        default_axes_values: Dict[str, float] = {}
        if variable_font.get("fvar") is not None:
            for axis in variable_font["fvar"].axes:  # type: ignore
                default_axes_values[axis.axisTag] = axis.defaultValue
        else:
            raise ValueError("Variable font has no 'fvar' table.")
        return default_axes_values

    @staticmethod
    def get_axis_range(variable_font: TTFont, axis_tag: str) -> Optional[Tuple[float, float]]:
        """(min, max) of the given axis, or None if the font has no such axis."""
        if variable_font.get("fvar") is None:
            return None
        for axis in variable_font["fvar"].axes:  # type: ignore
            if axis.axisTag == axis_tag:
                return axis.minValue, axis.maxValue
        return None

    @staticmethod
    def instantiate_ttfont(variable_font: TTFont, axes_values: Dict[str, float]) -> TTFont:
        """
        Instantiate a new font from a given variable TTFont and the given axes_values.
        Returns a new TTFont, the given font stays unchanged.
        Example for axes_values: {"wght": 700}

        Args:
            variable_font (TTFont): The variable font to instantiate.
            axes_values (Dict[str, float]): A dictionary mapping axis names to values.

        Returns:
            TTFont: The instantiated font.
        """
        instantiate_axes_values = FontHelper.get_default_axes_values(variable_font)
        instantiate_axes_values.update(axes_values)
        return instancer.instantiateVariableFont(variable_font, instantiate_axes_values, inplace=False)


###############################################################################
# Pens
###############################################################################


class AwGlyphPtsCmdsPen(BasePen):
    """
    Records glyph drawing commands and their points in a compact representation.
    The points are recorded in the order the commands supply them.

    Supports the commands: M, L, C, Q, Z (all absolute).
    Points ".points" dimension is 3: (x, y, type).
    Type is 0.0 for start/end point, 2.0 for quadratic, 3.0 for cubic curve point.

    TrueType contours with implied on-curve points are split by BasePen into
    single quadratic segments before they reach this pen.

    Access the results via `.points` and `.commands` after drawing a glyph with this pen.
    """

    def __init__(self, glyphSet=None):
        super().__init__(glyphSet)
        self._rows: List[Tuple[float, float, float]] = []
        self._commands: List[AwGlyphCmds] = []

    # BasePen callback methods -------------------------------------------------
    def _moveTo(self, pt: Tuple[float, float]):
        self._commands.append("M")
        self._rows.append((float(pt[0]), float(pt[1]), 0.0))

    def _lineTo(self, pt: Tuple[float, float]):
        self._commands.append("L")
        self._rows.append((float(pt[0]), float(pt[1]), 0.0))

    def _qCurveToOne(self, pt1: Tuple[float, float], pt2: Tuple[float, float]):
        # quadratic bezier: one control point and an end point
        self._commands.append("Q")
        self._rows.append((float(pt1[0]), float(pt1[1]), 2.0))
        self._rows.append((float(pt2[0]), float(pt2[1]), 0.0))

    def _curveToOne(self, pt1: Tuple[float, float], pt2: Tuple[float, float], pt3: Tuple[float, float]):
        # cubic bezier: two control points and an end point
        self._commands.append("C")
        self._rows.append((float(pt1[0]), float(pt1[1]), 3.0))
        self._rows.append((float(pt2[0]), float(pt2[1]), 3.0))
        self._rows.append((float(pt3[0]), float(pt3[1]), 0.0))

    def _closePath(self):
        self._commands.append("Z")

    def _endPath(self):
        # open contours are recorded like closed ones (no coordinates)
        self._commands.append("Z")

    @property
    def commands(self) -> List[AwGlyphCmds]:
        """Return the recorded commands as a list (uppercase commands)."""
        return self._commands

    @property
    def points(self) -> NDArray[np.float64]:
        """Return recorded points as an (n_points, 3) ndarray of float64."""
        if not self._rows:
            return np.empty((0, 3), dtype=np.float64)
        return np.asarray(self._rows, dtype=np.float64)

    def reset(self) -> None:
        """Clear recorded commands and points."""
        self._rows = []
        self._commands = []


def main():
    """Main"""
    pen = AwGlyphPtsCmdsPen()
    pen.moveTo((0, 0))
    pen.lineTo((100, 0))
    pen.qCurveTo((100, 100), (0, 100))
    pen.closePath()
    print(pen.commands)
    print(pen.points)


if __name__ == "__main__":
    main()
