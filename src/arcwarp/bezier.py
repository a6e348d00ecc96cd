"""Sampling of Bezier segments, used to flatten glyph outlines."""

from __future__ import annotations

from math import comb
from typing import Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

ControlPoints = Union[Sequence[Tuple[float, float]], NDArray[np.float64]]


def bernstein_basis(degree: int, steps: int) -> NDArray[np.float64]:
    """
    Bernstein polynomials of _degree_ sampled at steps+1 evenly spaced parameters.

    Returns:
        Array of shape (steps+1, degree+1); row k holds the weights of the control points at t = k/steps.
    """
    t = np.linspace(0.0, 1.0, steps + 1)[:, np.newaxis]
    i = np.arange(degree + 1)[np.newaxis, :]
    coefficients = np.array([comb(degree, k) for k in range(degree + 1)], dtype=np.float64)
    return coefficients * t**i * (1.0 - t) ** (degree - i)


def flatten_bezier(control_points: ControlPoints, steps: int) -> NDArray[np.float64]:
    """
    Points along a Bezier segment of any degree.

    Args:
        control_points: start point, control points and end point (x, y); extra columns are ignored
        steps: number of line segments replacing the curve

    Returns:
        Array of shape (steps+1, 2) starting at the first and ending at the last control point.
    """
    pts = np.asarray(control_points, dtype=np.float64)[:, :2]
    if len(pts) < 2:
        raise ValueError(f"A Bezier segment needs at least 2 control points, got {len(pts)}")
    if steps < 1:
        raise ValueError(f"steps must be positive, got {steps}")
    return bernstein_basis(len(pts) - 1, steps) @ pts


def main():
    """Main"""
    print(flatten_bezier([(0.0, 0.0), (50.0, 100.0), (100.0, 0.0)], 4))


if __name__ == "__main__":
    main()
