"""Test module for arcwarp.geom, arcwarp.bezier and arcwarp.path

The tests are run using pytest.
"""

import math

import numpy as np
import pytest

from arcwarp.bezier import bernstein_basis, flatten_bezier
from arcwarp.geom import AwBox, GeomMath
from arcwarp.path import AwPath

###############################################################################
# GeomMath Tests
###############################################################################


class TestGeomMath:
    """Test class for GeomMath functionality."""

    def test_transform_point_identity(self):
        """Test point transformation with identity matrix."""
        assert GeomMath.transform_point([1, 0, 0, 1, 0, 0], (10.0, 20.0)) == (10.0, 20.0)

    def test_transform_point_translation(self):
        """Test point transformation with translation."""
        assert GeomMath.transform_point([1, 0, 0, 1, 5.0, 10.0], (10.0, 20.0)) == (15.0, 30.0)

    def test_rotate_scale_trafo_rotates_clockwise_on_screen(self):
        """A positive angle turns the x axis towards y-down."""
        trafo = GeomMath.rotate_scale_trafo(90.0)
        x, y = GeomMath.transform_point(trafo, (1.0, 0.0))
        assert x == pytest.approx(0.0, abs=1e-12)
        assert y == pytest.approx(1.0)

    def test_rotate_scale_trafo_order(self):
        """Scale is applied first, then rotation, then translation."""
        trafo = GeomMath.rotate_scale_trafo(90.0, 2.0, 3.0, 100.0, 50.0)
        x, y = GeomMath.transform_point(trafo, (1.0, 1.0))
        # scaled (2, 3) -> rotated (-3, 2) -> translated
        assert x == pytest.approx(97.0)
        assert y == pytest.approx(52.0)


###############################################################################
# AwBox Tests
###############################################################################


class TestAwBox:
    """Test class for AwBox functionality."""

    def test_normalizes_coordinates(self):
        """Swapped corners are normalized."""
        box = AwBox(10, 20, 0, 5)
        assert box.extent == (0.0, 5.0, 10.0, 20.0)
        assert box.width == 10.0
        assert box.height == 15.0

    def test_from_points(self):
        """Tightest box around points."""
        box = AwBox.from_points([(1, 5), (-2, 3), (4, -1)])
        assert box.extent == (-2.0, -1.0, 4.0, 5.0)

    def test_from_no_points(self):
        """No points give an empty box at the origin."""
        assert AwBox.from_points([]).extent == (0.0, 0.0, 0.0, 0.0)

    def test_union_and_expanded(self):
        """Union covers both boxes; expanded grows every side."""
        box = AwBox(0, 0, 1, 1).union(AwBox(2, -1, 3, 0.5))
        assert box.extent == (0.0, -1.0, 3.0, 1.0)
        assert box.expanded(1, 2).extent == (-1.0, -3.0, 4.0, 3.0)

    def test_transform_affine_rotation_encloses_corners(self):
        """A rotated box is enclosed by the axis-aligned result."""
        box = AwBox(-1, -1, 1, 1).transform_affine(GeomMath.rotate_scale_trafo(45.0))
        assert box.xmax == pytest.approx(math.sqrt(2))
        assert box.ymin == pytest.approx(-math.sqrt(2))


###############################################################################
# Bezier Tests
###############################################################################


class TestFlattenBezier:
    """Test class for flattening Bezier segments."""

    def test_quadratic_endpoints_and_midpoint(self):
        """The polyline starts and ends on the anchors and passes the curve's midpoint."""
        result = flatten_bezier([(0.0, 0.0), (50.0, 100.0), (100.0, 0.0)], 4)
        assert result.shape == (5, 2)
        np.testing.assert_allclose(result[0], [0.0, 0.0])
        np.testing.assert_allclose(result[-1], [100.0, 0.0])
        np.testing.assert_allclose(result[2], [50.0, 50.0])

    def test_cubic_midpoint(self):
        """Cubic segments are sampled with the degree 3 basis."""
        result = flatten_bezier([(0, 0), (0, 10), (10, 10), (10, 0)], 8)
        assert result.shape == (9, 2)
        np.testing.assert_allclose(result[-1], [10.0, 0.0])
        np.testing.assert_allclose(result[4], [5.0, 7.5])

    def test_line_is_evenly_sampled(self):
        """Two control points give points along the straight line."""
        np.testing.assert_allclose(flatten_bezier([(0, 0), (8, 4)], 4)[1], [2.0, 1.0])

    def test_basis_rows_sum_to_one(self):
        """Bernstein weights form a partition of unity."""
        np.testing.assert_allclose(bernstein_basis(3, 10).sum(axis=1), np.ones(11))

    @pytest.mark.parametrize("points, steps", [([(0, 0)], 4), ([(0, 0), (1, 1)], 0)])
    def test_rejects_degenerate_input(self, points, steps):
        """A segment needs two points and at least one step."""
        with pytest.raises(ValueError):
            flatten_bezier(points, steps)


###############################################################################
# AwPath Tests
###############################################################################


class TestAwPath:
    """Test class for AwPath functionality."""

    @pytest.fixture
    def square(self):
        """Closed unit-ish square."""
        return AwPath([(0, 0), (10, 0), (10, 10), (0, 10)], ["M", "L", "L", "L", "Z"])

    def test_points_get_type_column(self, square):
        """2D input gets a point type column."""
        assert square.points.shape == (4, 3)
        assert not square.is_empty

    def test_empty_path(self):
        """Paths may be empty."""
        path = AwPath()
        assert path.is_empty
        assert path.svg_path_string() == ""
        assert path.bounding_box().extent == (0.0, 0.0, 0.0, 0.0)

    def test_rejects_mismatched_points(self):
        """The number of points must match the commands."""
        with pytest.raises(ValueError):
            AwPath([(0, 0), (1, 1)], ["M"])

    def test_rejects_segment_without_move(self):
        """Every segment starts with M."""
        with pytest.raises(ValueError):
            AwPath([(0, 0)], ["L"])

    def test_map_points_maps_control_points(self):
        """Control points are mapped like anchors."""
        path = AwPath([(0, 0), (5, 10), (10, 0)], ["M", "Q"])
        moved = path.map_points(lambda xs, ys: (xs + 1, ys * 2))
        np.testing.assert_allclose(moved.points[:, :2], [[1, 0], [6, 20], [11, 0]])
        np.testing.assert_allclose(moved.points[:, 2], [0.0, 2.0, 0.0])

    def test_control_box_vs_bounding_box(self):
        """The control box includes the control point, the bounding box only the drawn curve."""
        path = AwPath([(0, 0), (5, 10), (10, 0)], ["M", "Q"])
        assert path.control_box().ymax == 10.0
        assert path.bounding_box().ymax == pytest.approx(5.0, abs=1e-3)

    def test_polygonize_contours_one_per_segment(self, square):
        """Each M starts a new contour."""
        joined = AwPath.join_paths(square, square.scaled_translated(1, 1, 20, 0))
        contours = joined.polygonize_contours()
        assert len(contours) == 2
        np.testing.assert_allclose(contours[1][0], [20.0, 0.0])

    def test_svg_path_string(self):
        """Commands are written with absolute coordinates and trimmed decimals."""
        path = AwPath([(0, 0), (10.5, 0), (10, 2.123456)], ["M", "L", "L", "Z"])
        assert path.svg_path_string() == "M 0 0 L 10.5 0 L 10 2.1235 Z"

    def test_from_svg_path_string_keeps_commands(self, square):
        """Written path data is read back into the same commands and points."""
        path = AwPath([(0, 0), (5, 10), (10, 0), (10, -5), (0, -5)], ["M", "Q", "L", "L", "Z"])
        for original in (square, path):
            parsed = AwPath.from_svg_path_string(original.svg_path_string())
            assert parsed.commands == original.commands
            np.testing.assert_allclose(parsed.points, original.points)

    def test_from_svg_path_string_relative_and_cubic(self):
        """Relative commands are made absolute, C stays cubic, open subpaths stay open."""
        path = AwPath.from_svg_path_string("m 10 10 l 5 0 c 0 5 5 5 5 0 M 50 50 L 60 50 L 60 60 Z")
        assert path.commands == ["M", "L", "C", "M", "L", "L", "Z"]
        np.testing.assert_allclose(path.points[2:5, :2], [[15, 15], [20, 15], [20, 10]])

    def test_from_svg_path_string_flattens_arcs(self):
        """Elliptical arcs become line segments ending at the arc's end point."""
        path = AwPath.from_svg_path_string("M 0 0 A 10 10 0 0 1 20 0 Z", arc_steps=8)
        assert path.commands == ["M"] + ["L"] * 8 + ["Z"]
        np.testing.assert_allclose(path.points[8, :2], [20.0, 0.0], atol=1e-9)
        assert path.bounding_box().height == pytest.approx(10.0, abs=0.5)

    @pytest.mark.parametrize("path_string", ["", "   "])
    def test_from_svg_path_string_empty(self, path_string):
        """No commands give an empty path."""
        assert AwPath.from_svg_path_string(path_string).is_empty

    def test_from_svg_path_string_rejects_garbage(self):
        """Truncated path data raises ValueError."""
        with pytest.raises(ValueError):
            AwPath.from_svg_path_string("M 0 0 L 10")
