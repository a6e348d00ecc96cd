"""Handling geometries"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray


###############################################################################
# GeomMath
###############################################################################
class GeomMath:
    """Class to provide various static methods related to geometry handling."""

    @staticmethod
    def transform_point(
        affine_trafo: Sequence[Union[int, float]], point: Sequence[Union[int, float]]
    ) -> Tuple[float, float]:
        """
        Perform an affine transformation on the given 2D point.

        The given _affine_trafo_ is a list of 6 floats, performing an affine transformation.
        The transformation is defined as:
            | x' | = | a00 a01 b0 |   | x |
            | y' | = | a10 a11 b1 | * | y |
            | 1  | = |  0   0  1  |   | 1 |
        with
            affine_trafo = [a00, a01, a10, a11, b0, b1]

        Args:
            affine_trafo (Tuple/List[float]): Affine transformation - [a00, a01, a10, a11, b0, b1]
            point (Tuple/List[float]): 2D point - (x, y)

        Returns:
            Tuple[float, float]: the transformed point
        """
        x_new = float(affine_trafo[0] * point[0] + affine_trafo[1] * point[1] + affine_trafo[4])
        y_new = float(affine_trafo[2] * point[0] + affine_trafo[3] * point[1] + affine_trafo[5])
        return (x_new, y_new)

    @staticmethod
    def rotate_scale_trafo(
        angle_deg: float, scale_x: float = 1.0, scale_y: float = 1.0, translate_x: float = 0.0, translate_y: float = 0.0
    ) -> Tuple[float, float, float, float, float, float]:
        """
        Build the affine transformation translate * rotate * scale (applied right to left).

        Uses the y-down screen convention: a positive angle rotates clockwise on screen.

        Returns:
            Tuple of 6 floats [a00, a01, a10, a11, b0, b1]
        """
        rad = math.radians(angle_deg)
        cos_a, sin_a = math.cos(rad), math.sin(rad)
        return (
            cos_a * scale_x,
            -sin_a * scale_y,
            sin_a * scale_x,
            cos_a * scale_y,
            translate_x,
            translate_y,
        )


###############################################################################
# AwBox
###############################################################################
@dataclass
class AwBox:
    """
    Represents a rectangular box with coordinates and dimensions.

    Attributes:
        xmin (float): The minimum x-coordinate.
        ymin (float): The minimum y-coordinate.
        xmax (float): The maximum x-coordinate.
        ymax (float): The maximum y-coordinate.
    """

    _xmin: float
    _ymin: float
    _xmax: float
    _ymax: float

    def __init__(self, xmin: float, ymin: float, xmax: float, ymax: float):
        self._xmin = float(xmin)
        self._ymin = float(ymin)
        self._xmax = float(xmax)
        self._ymax = float(ymax)

        # Normalize coordinates to ensure xmin <= xmax and ymin <= ymax
        if self._xmin > self._xmax:
            self._xmin, self._xmax = self._xmax, self._xmin
        if self._ymin > self._ymax:
            self._ymin, self._ymax = self._ymax, self._ymin

    @classmethod
    def from_points(cls, points: Union[NDArray[np.float64], Iterable[Tuple[float, float]]]) -> AwBox:
        """
        Tightest box around the given points (only x and y columns are used).

        Returns a box of size 0 at the origin if there are no points.
        """
        arr = np.asarray(points if isinstance(points, np.ndarray) else list(points), dtype=np.float64)
        if arr.size == 0:
            return cls(0.0, 0.0, 0.0, 0.0)
        arr = arr.reshape(-1, arr.shape[-1])
        return cls(arr[:, 0].min(), arr[:, 1].min(), arr[:, 0].max(), arr[:, 1].max())

    @property
    def xmin(self) -> float:
        """float: The minimum x-coordinate."""
        return self._xmin

    @property
    def ymin(self) -> float:
        """float: The minimum y-coordinate."""
        return self._ymin

    @property
    def xmax(self) -> float:
        """float: The maximum x-coordinate."""
        return self._xmax

    @property
    def ymax(self) -> float:
        """float: The maximum y-coordinate."""
        return self._ymax

    @property
    def extent(self) -> Tuple[float, float, float, float]:
        """The extent of the box as Tuple (xmin, ymin, xmax, ymax)."""
        return self._xmin, self._ymin, self._xmax, self._ymax

    @property
    def width(self) -> float:
        """float: The width of the box (difference between xmax and xmin)."""
        return self._xmax - self._xmin

    @property
    def height(self) -> float:
        """float: The height of the box (difference between ymax and ymin)."""
        return self._ymax - self._ymin

    @property
    def centroid(self) -> Tuple[float, float]:
        """The centroid of the box as (x, y)."""
        return (self._xmin + self._xmax) / 2, (self._ymin + self._ymax) / 2

    def union(self, other: AwBox) -> AwBox:
        """Smallest box containing this box and the other one."""
        return AwBox(
            min(self._xmin, other.xmin),
            min(self._ymin, other.ymin),
            max(self._xmax, other.xmax),
            max(self._ymax, other.ymax),
        )

    def expanded(self, margin_x: float, margin_y: float) -> AwBox:
        """Box grown by the given margins on each side."""
        return AwBox(self._xmin - margin_x, self._ymin - margin_y, self._xmax + margin_x, self._ymax + margin_y)

    def transform_affine(self, affine_trafo: Sequence[Union[int, float]]) -> AwBox:
        """
        Transform the AwBox using the given affine transformation [a00, a01, a10, a11, b0, b1].

        All four corners are transformed, so the result stays axis-aligned and
        encloses the transformed box also for rotations.

        Args:
            affine_trafo (List[float]): Affine transformation [a00, a01, a10, a11, b0, b1]

        Returns:
            AwBox: The transformed box
        """
        corners = [
            GeomMath.transform_point(affine_trafo, (x, y))
            for x in (self._xmin, self._xmax)
            for y in (self._ymin, self._ymax)
        ]
        return AwBox.from_points(corners)

    def __str__(self):
        return (
            f"AwBox(xmin={self.xmin}, ymin={self.ymin}, "
            f"xmax={self.xmax}, ymax={self.ymax}, "
            f"width={self.width}, height={self.height})"
        )


def main():
    """Main"""
    box = AwBox(0, 0, 100, 20)
    print(box)
    print(box.transform_affine(GeomMath.rotate_scale_trafo(90.0)))


if __name__ == "__main__":
    main()
