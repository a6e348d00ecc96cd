"""Glyph path handling: points plus M/L/C/Q/Z commands, as used by warped text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray
from svgpathtools import CubicBezier, Line, QuadraticBezier, parse_path

from arcwarp.bezier import flatten_bezier
from arcwarp.common import PATH_DECIMALS, POLYGONIZE_STEPS, AwGlyphCmds
from arcwarp.geom import AwBox
from arcwarp.svgpath import AwSvgPath

# Number of points consumed by each command
CMD_POINT_COUNT = {"M": 1, "L": 1, "Q": 2, "C": 3, "Z": 0}

# Point type column values: 0.0 on-curve, 2.0 quadratic control, 3.0 cubic control
CMD_POINT_TYPES = {"M": (0.0,), "L": (0.0,), "Q": (2.0, 0.0), "C": (3.0, 3.0, 0.0), "Z": ()}

PointMapper = Callable[[NDArray[np.float64], NDArray[np.float64]], Tuple[NDArray[np.float64], NDArray[np.float64]]]


###############################################################################
# AwPath
###############################################################################


@dataclass
class AwPath:
    """Path represented by points and corresponding commands.

    A path contains 0..n segments; each segment starts with M, is followed by
    an arbitrary mix of L/Q/C, and may optionally end with Z.
    A path may also be empty (no points and no commands).

    Attributes:
        _points: Array of points (shape: n_points, 3) = (x, y, type)
        _commands: List of commands, each consuming 0..3 points
        _bounding_box: Cached bounding box
    """

    _points: NDArray[np.float64]
    _commands: List[AwGlyphCmds]
    _bounding_box: Optional[AwBox] = None

    def __init__(
        self,
        points: Optional[
            Union[
                Sequence[Tuple[float, float]],
                Sequence[Tuple[float, float, float]],
                NDArray[np.float64],
            ]
        ] = None,
        commands: Optional[Sequence[AwGlyphCmds]] = None,
    ):
        """
        Initialize an AwPath from 2D points or (x, y, type) points.

        Args:
            points: a sequence of (x, y) or (x, y, type).
            commands: List of drawing commands corresponding to the points.
        """
        if points is None:
            arr = np.empty((0, 3), dtype=np.float64)
        else:
            arr = np.asarray(points, dtype=np.float64)
            if arr.size == 0:
                arr = np.empty((0, 3), dtype=np.float64)

        if arr.ndim != 2:
            raise ValueError(f"points must have 2 dimensions, got {arr.ndim}")

        commands_list: List[AwGlyphCmds] = [] if commands is None else list(commands)

        if arr.shape[1] == 2:
            # Generate type column based on commands
            types: List[float] = []
            for cmd in commands_list:
                types.extend(CMD_POINT_TYPES.get(cmd, ()))
            if len(types) != arr.shape[0]:
                raise ValueError(
                    f"Number of points ({arr.shape[0]}) does not match commands (requires {len(types)} points)"
                )
            arr = np.column_stack([arr, np.asarray(types, dtype=np.float64)])
        elif arr.shape[1] != 3:
            raise ValueError(f"points must have shape (n, 2) or (n, 3), got {arr.shape}")

        self._points = arr
        self._commands = commands_list
        self._bounding_box = None
        self._validate()

    def _validate(self) -> None:
        """Check that segments start with M, Z terminates a segment and the point count fits."""
        expected = 0
        segment_open = False
        for idx, cmd in enumerate(self._commands):
            if cmd not in CMD_POINT_COUNT:
                raise ValueError(f"Unknown command '{cmd}' at position {idx}")
            if cmd == "M":
                segment_open = True
            elif not segment_open:
                raise ValueError(f"Each segment must start with 'M' command (found '{cmd}' at position {idx})")
            if cmd == "Z":
                segment_open = False
            expected += CMD_POINT_COUNT[cmd]

        if self._points.shape[0] != expected:
            raise ValueError(
                f"Number of points ({self._points.shape[0]}) does not match commands (requires {expected} points)"
            )

    @property
    def points(self) -> NDArray[np.float64]:
        """
        The points of this path as a numpy array of shape (n_points, 3).
        """
        return self._points

    @property
    def commands(self) -> List[AwGlyphCmds]:
        """
        The commands of this path as a list of path commands.
        """
        return self._commands

    @property
    def is_empty(self) -> bool:
        """True if the path has no commands."""
        return not self._commands

    def iter_commands(self) -> Iterator[Tuple[AwGlyphCmds, NDArray[np.float64]]]:
        """Yield each command together with the (k, 2) array of points it consumes."""
        p_idx = 0
        for cmd in self._commands:
            count = CMD_POINT_COUNT[cmd]
            yield cmd, self._points[p_idx : p_idx + count, :2]
            p_idx += count

    def map_points(self, mapper: PointMapper) -> AwPath:
        """
        Return a new path with every point (on-curve and control points alike) mapped.

        Args:
            mapper: vectorized function taking (xs, ys) arrays and returning new (xs, ys) arrays.
        """
        if not self._points.size:
            return AwPath(None, list(self._commands))
        new_x, new_y = mapper(self._points[:, 0], self._points[:, 1])
        new_points = np.column_stack([new_x, new_y, self._points[:, 2]])
        return AwPath(new_points, list(self._commands))

    def scaled_translated(self, scale_x: float, scale_y: float, translate_x: float, translate_y: float) -> AwPath:
        """Return a copy with x' = x * scale_x + translate_x and y' = y * scale_y + translate_y."""
        return self.map_points(lambda xs, ys: (xs * scale_x + translate_x, ys * scale_y + translate_y))

    def control_box(self) -> AwBox:
        """
        Box around all points of the path including the control points of curves.

        A Bezier curve lies within the convex hull of its control points,
        so this box always encloses the drawn outline.
        """
        return AwBox.from_points(self._points[:, :2])

    def bounding_box(self) -> AwBox:
        """
        Returns bounding box (tightest box around the drawn path).
        Curves are polygonized to find their extrema.
        """
        if self._bounding_box is not None:
            return self._bounding_box

        if not self._points.size:
            self._bounding_box = AwBox(0.0, 0.0, 0.0, 0.0)
            return self._bounding_box

        if not any(cmd in ("Q", "C") for cmd in self._commands):
            self._bounding_box = self.control_box()
            return self._bounding_box

        polylines = self.polygonize_contours(POLYGONIZE_STEPS * 4)
        self._bounding_box = AwBox.from_points(np.vstack(polylines))
        return self._bounding_box

    def polygonize_contours(self, steps: int = POLYGONIZE_STEPS) -> List[NDArray[np.float64]]:
        """
        Convert the path into one polyline per segment.

        Args:
            steps: Number of line segments used for each curve.

        Returns:
            List of (k, 2) arrays, one for each segment starting with M.
        """
        contours: List[NDArray[np.float64]] = []
        current: List[NDArray[np.float64]] = []
        last_point: Optional[NDArray[np.float64]] = None

        for cmd, pts in self.iter_commands():
            if cmd == "M":
                if current:
                    contours.append(np.vstack(current))
                current = [pts.copy()]
                last_point = pts[0]
            elif cmd == "L":
                current.append(pts.copy())
                last_point = pts[0]
            elif cmd in ("Q", "C"):
                curve = flatten_bezier(np.vstack([last_point, pts]), steps)
                current.append(curve[1:])
                last_point = pts[-1]
            elif cmd == "Z":
                if current:
                    contours.append(np.vstack(current))
                current = []

        if current:
            contours.append(np.vstack(current))
        return contours

    def svg_path_string(self, decimals: int = PATH_DECIMALS) -> str:
        """
        Returns the SVG path representation (absolute coordinates) of this path.

        Coordinates are written with at most _decimals_ decimal places and never
        in scientific notation.

        Returns:
            str: The SVG path string. Returns "" if there are no commands.
        """
        parts: List[str] = []
        for cmd, pts in self.iter_commands():
            if cmd == "Z":
                parts.append("Z")
                continue
            coords = " ".join(AwSvgPath.format_number(value, decimals) for value in pts.ravel())
            parts.append(f"{cmd} {coords}")
        return " ".join(parts)

    @classmethod
    def join_paths(cls, *paths: AwPath) -> AwPath:
        """Concatenate the given paths into one path."""
        non_empty = [path for path in paths if not path.is_empty]
        if not non_empty:
            return cls()
        points = np.vstack([path.points for path in non_empty])
        commands: List[AwGlyphCmds] = []
        for path in non_empty:
            commands.extend(path.commands)
        return cls(points, commands)

    @classmethod
    def from_svg_path_string(cls, path_string: str, arc_steps: int = POLYGONIZE_STEPS) -> AwPath:
        """
        Parse SVG path data (absolute or relative commands) into an AwPath.

        Lines and Bezier curves are kept as L/Q/C, elliptical arcs are replaced
        by _arc_steps_ line segments. Closed subpaths end with Z.

        Raises:
            ValueError: If the path data cannot be parsed.
        """
        if not AwSvgPath.split_commands(path_string):
            return cls()
        points: List[Tuple[float, float]] = []
        commands: List[AwGlyphCmds] = []
        for subpath in parse_path(path_string).continuous_subpaths():
            if not len(subpath):
                continue
            start = subpath.start
            points.append((start.real, start.imag))
            commands.append("M")
            segments = list(subpath)
            closed = subpath.isclosed()
            if closed and len(segments) > 1 and isinstance(segments[-1], Line):
                # Z draws the closing line
                segments.pop()
            for segment in segments:
                if isinstance(segment, Line):
                    controls = [segment.end]
                    commands.append("L")
                elif isinstance(segment, QuadraticBezier):
                    controls = [segment.control, segment.end]
                    commands.append("Q")
                elif isinstance(segment, CubicBezier):
                    controls = [segment.control1, segment.control2, segment.end]
                    commands.append("C")
                else:
                    controls = [segment.point(t) for t in np.linspace(0.0, 1.0, arc_steps + 1)[1:]]
                    commands.extend(["L"] * len(controls))
                points.extend((point.real, point.imag) for point in controls)
            if closed:
                commands.append("Z")
        return cls(points, commands)


def main():
    """Main"""
    path = AwPath([(0, 0), (10, 0), (10, 20), (20, 20), (0, 20)], ["M", "L", "Q", "L", "Z"])
    print(path.svg_path_string())
    print(path.control_box())
    print(path.bounding_box())


if __name__ == "__main__":
    main()
