"""Tests for the arc parameter solver and the point warp."""

from __future__ import annotations

import math

import numpy as np
import pytest

from arcwarp.arc import STRAIGHT, AwArcParameters, solve_arc, warp_point, warp_points


class TestSolveArc:
    """Arc parameters for a text run."""

    @pytest.mark.parametrize("intensity", [0, 0.1, -0.1])
    def test_zero_intensity_is_straight(self, intensity):
        """Vanishing sweeps are not solved."""
        assert solve_arc(120.0, intensity) is STRAIGHT

    @pytest.mark.parametrize("width", [0.0, -5.0])
    def test_no_width_is_straight(self, width):
        """Empty runs are never divided by."""
        assert solve_arc(width, 50) is STRAIGHT

    def test_straight_is_falsy(self):
        """STRAIGHT can be tested like a missing value."""
        assert not STRAIGHT
        assert repr(STRAIGHT) == "STRAIGHT"

    @pytest.mark.parametrize("intensity", [-100, -73, -50, -1, 1, 2, 25, 50, 99, 100])
    def test_arc_length_equals_width(self, intensity):
        """radius * arc_angle equals the flat width."""
        arc = solve_arc(317.5, intensity)
        assert isinstance(arc, AwArcParameters)
        assert arc.radius * arc.arc_angle == pytest.approx(317.5, rel=1e-3)
        assert arc.arc_angle == pytest.approx(2 * math.pi * abs(intensity) / 100)

    def test_half_circle(self):
        """Intensity 50 sweeps pi."""
        arc = solve_arc(120.0, 50)
        assert arc.arc_angle == pytest.approx(math.pi)
        assert arc.radius == pytest.approx(120.0 / math.pi)
        assert arc.sagitta == pytest.approx(arc.radius)
        assert arc.vertical_offset == pytest.approx(-arc.radius / 2)

    def test_center_angle_and_sign(self):
        """Negative intensity arches over the top, positive smiles along the bottom."""
        arch = solve_arc(100.0, -30)
        smile = solve_arc(100.0, 30)
        assert arch.center_angle == pytest.approx(-math.pi / 2)
        assert smile.center_angle == pytest.approx(math.pi / 2)
        assert arch.is_arch and not smile.is_arch
        assert arch.vertical_offset == pytest.approx(-smile.vertical_offset)

    def test_intensity_is_clamped(self):
        """Out of range intensities are clamped."""
        assert solve_arc(100.0, 250).intensity == 100
        assert solve_arc(100.0, -250).intensity == -100

    def test_full_circle_is_centered(self):
        """At 100 the circle's center is the origin."""
        arc = solve_arc(100.0, 100)
        assert arc.vertical_offset == pytest.approx(0.0, abs=1e-9)


class TestWarpPoint:
    """Mapping of flat points onto the arc."""

    @pytest.mark.parametrize("intensity", [-60, -20, 20, 60])
    def test_baseline_middle_is_on_center_angle(self, intensity):
        """The middle of the run lands straight above/below the circle center."""
        arc = solve_arc(200.0, intensity)
        x, y = warp_point(0.0, 0.0, 100.0, 200.0, arc)
        assert x == pytest.approx(0.0, abs=1e-9)
        assert y == pytest.approx(math.sin(arc.center_angle) * arc.radius + arc.vertical_offset)

    @pytest.mark.parametrize("intensity", [-60, 60])
    def test_run_reads_left_to_right(self, intensity):
        """Start of the run is left of its end, for arches and smiles."""
        arc = solve_arc(200.0, intensity)
        start = warp_point(0.0, 0.0, 0.0, 200.0, arc)
        end = warp_point(0.0, 0.0, 200.0, 200.0, arc)
        assert start[0] < end[0]
        assert start[1] == pytest.approx(end[1])

    def test_arch_middle_is_above_ends(self):
        """An arch bulges up (y-down), a smile down."""
        arch = solve_arc(200.0, -40)
        smile = solve_arc(200.0, 40)
        assert warp_point(0, 0, 100, 200, arch)[1] < warp_point(0, 0, 0, 200, arch)[1]
        assert warp_point(0, 0, 100, 200, smile)[1] > warp_point(0, 0, 0, 200, smile)[1]

    @pytest.mark.parametrize("intensity", [-50, 50])
    def test_points_above_baseline_move_outward_or_inward(self, intensity):
        """Ascenders stand upright: above the baseline is up on the screen in the middle of the run."""
        arc = solve_arc(200.0, intensity)
        on_line = warp_point(0.0, 0.0, 100.0, 200.0, arc)
        above = warp_point(0.0, 10.0, 100.0, 200.0, arc)
        assert above[1] == pytest.approx(on_line[1] - 10.0)

    def test_distance_from_center(self):
        """Points sit on concentric circles around the arc center."""
        arc = solve_arc(200.0, -50)
        x, y = warp_point(30.0, 12.0, 40.0, 200.0, arc)
        assert math.hypot(x, y - arc.vertical_offset) == pytest.approx(arc.radius + 12.0)

    def test_warp_points_matches_warp_point(self):
        """The vectorized warp agrees with the scalar one."""
        arc = solve_arc(150.0, 35)
        xs = np.array([0.0, 12.5, 40.0])
        ys = np.array([-5.0, 0.0, 20.0])
        wx, wy = warp_points(xs, ys, 30.0, 150.0, arc)
        for i in range(3):
            assert (wx[i], wy[i]) == pytest.approx(warp_point(xs[i], ys[i], 30.0, 150.0, arc))

    def test_tangent_angle_is_zero_in_the_middle(self):
        """Characters in the middle are upright; to the left they lean left on an arch."""
        arc = solve_arc(200.0, -50)
        assert arc.tangent_angle_at(100.0) == pytest.approx(0.0, abs=1e-12)
        assert arc.tangent_angle_at(0.0) == pytest.approx(-math.pi / 2)
        smile = solve_arc(200.0, 50)
        assert smile.tangent_angle_at(0.0) == pytest.approx(math.pi / 2)
