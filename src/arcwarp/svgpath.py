"""Handling Paths for SVG"""

from __future__ import annotations

import math
import re
from typing import ClassVar, List

from svgpathtools import parse_path

from arcwarp.common import PATH_DECIMALS
from arcwarp.geom import AwBox


class AwSvgPath:
    """
    This class provides a collection of static methods for writing and inspecting SVG-paths.
    A SVG-path is characterized by a string describing a sequence of points.
    The points' connection types are according to their commands.
    Commands written by arcwarp (command : number of values):
        MoveTo:           2: M
        LineTo:           2: L
        CubicBezier:      6: C
        QuadraticBezier:  4: Q
        ClosePath:        0: Z
    """

    # Command letters:
    SVG_CMDS: ClassVar[str] = "MmLlHhVvCcSsQqTtAaZz"

    @staticmethod
    def format_number(value: float, decimals: int = PATH_DECIMALS) -> str:
        """
        Format a coordinate with at most _decimals_ decimal places.

        Trailing zeros are dropped, negative zero is written as "0" and
        scientific notation is never used (1e-7 becomes "0", 1e21 stays a plain integer).

        Args:
            value (float): the number to format
            decimals (int): maximum number of decimal places

        Returns:
            str: the formatted number
        """
        value = float(value)
        if not math.isfinite(value):
            raise ValueError(f"Cannot format non-finite coordinate {value}")
        text = f"{value:.{decimals}f}"
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        if text in ("-0", ""):
            text = "0"
        return text

    @staticmethod
    def split_commands(path_string: str) -> List[str]:
        """Split a path string into its commands (each with its arguments)."""
        return re.findall(f"[{AwSvgPath.SVG_CMDS}][^{AwSvgPath.SVG_CMDS}]*", path_string)

    @staticmethod
    def bounding_box(path_string: str) -> AwBox:
        """
        Tight bounding box of the drawn path described by _path_string_.

        Curve extrema are solved analytically by svgpathtools, so the result is
        the box a consumer of the exported markup would compute.
        Returns a box of size 0 at the origin for an empty path.
        """
        if not AwSvgPath.split_commands(path_string):
            return AwBox(0.0, 0.0, 0.0, 0.0)
        path = parse_path(path_string)
        if not len(path):
            return AwBox(0.0, 0.0, 0.0, 0.0)
        xmin, xmax, ymin, ymax = path.bbox()
        return AwBox(xmin, ymin, xmax, ymax)


def main():
    """Main"""
    print(AwSvgPath.format_number(1.23456789))
    print(AwSvgPath.format_number(-0.00001))
    print(AwSvgPath.format_number(1e-7))
    print(AwSvgPath.format_number(12.5))
    print(AwSvgPath.bounding_box("M 0 0 Q 50 100 100 0 Z"))


if __name__ == "__main__":
    main()
