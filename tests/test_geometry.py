"""
Tests for virion/geometry.py

Covers:
- Golden-angle direction spread and determinism
- Displacement field purity and bounds
- Surface normals
- Rotations
"""

import math

import numpy as np
import pytest

from virion.config import APPENDAGE_MAX, APPENDAGE_MIN, DISPLACEMENT_CONFIG
from virion.geometry import (
    angles_from_direction,
    direction_from_angles,
    displacement,
    fibonacci_directions,
    min_angular_separation,
    rotate_y,
    rotation_from_up,
    surface_normals,
    surface_offset,
    surface_points,
    surface_radius,
)


# =============================================================================
# DIRECTIONS
# =============================================================================

class TestFibonacciDirections:

    @pytest.mark.parametrize("n", range(APPENDAGE_MIN, APPENDAGE_MAX + 1))
    def test_unit_length(self, n):
        d = fibonacci_directions(n)
        assert d.shape == (n, 3)
        np.testing.assert_allclose(np.linalg.norm(d, axis=1), 1.0, atol=1e-12)

    @pytest.mark.parametrize("n", range(APPENDAGE_MIN, APPENDAGE_MAX + 1))
    def test_no_clustering(self, n):
        """Golden spiral keeps every pair well apart (>= 35 deg at n=12)."""
        assert min_angular_separation(fibonacci_directions(n)) > 30.0

    def test_poles(self):
        d = fibonacci_directions(8)
        np.testing.assert_allclose(d[0], [0.0, 1.0, 0.0], atol=1e-12)
        np.testing.assert_allclose(d[-1][1], -1.0, atol=1e-12)

    def test_deterministic(self):
        np.testing.assert_array_equal(fibonacci_directions(9), fibonacci_directions(9))

    def test_single_direction_is_up(self):
        np.testing.assert_array_equal(fibonacci_directions(1), [[0.0, 1.0, 0.0]])

    def test_zero_rejected(self):
        with pytest.raises(ValueError):
            fibonacci_directions(0)


class TestAngles:

    def test_round_trip(self):
        theta = np.array([0.3, 1.2, 2.8])
        phi = np.array([0.1, 3.0, 5.5])
        t2, p2 = angles_from_direction(direction_from_angles(theta, phi))
        np.testing.assert_allclose(t2, theta, atol=1e-9)
        np.testing.assert_allclose(p2, phi, atol=1e-9)

    def test_theta_zero_is_up(self):
        np.testing.assert_allclose(direction_from_angles(0.0, 1.0), [0.0, 1.0, 0.0], atol=1e-12)


# =============================================================================
# DISPLACEMENT
# =============================================================================

class TestDisplacement:

    def test_bounded_by_amplitude(self, parasitic_traits):
        dirs = fibonacci_directions(500)
        amp = DISPLACEMENT_CONFIG.amplitude[1]
        offset = surface_offset(dirs, parasitic_traits.lobe_phases, amp)
        assert np.all(np.abs(offset) <= amp + 1e-12)

    def test_pure_function(self, symbiotic_traits):
        a = displacement(1.1, 2.2, symbiotic_traits)
        b = displacement(1.1, 2.2, symbiotic_traits)
        assert a == b

    def test_continuous(self, parasitic_traits):
        """Nearby angles give nearby offsets."""
        a = float(displacement(1.0, 2.0, parasitic_traits))
        b = float(displacement(1.0 + 1e-6, 2.0, parasitic_traits))
        assert abs(a - b) < 1e-5

    def test_pole_single_valued(self, parasitic_traits):
        """theta = 0 is the same point for every phi."""
        values = [float(displacement(0.0, phi, parasitic_traits)) for phi in (0.0, 1.0, 4.0)]
        assert max(values) - min(values) < 1e-12

    def test_lobes_differ_between_tokens(self, symbiotic_traits, max_count_traits):
        dirs = fibonacci_directions(64)
        assert not np.allclose(
            surface_radius(dirs, symbiotic_traits),
            surface_radius(dirs, max_count_traits),
        )

    def test_surface_points_on_radius(self, symbiotic_traits):
        dirs = fibonacci_directions(32)
        pts = surface_points(dirs, symbiotic_traits)
        np.testing.assert_allclose(
            np.linalg.norm(pts, axis=1), surface_radius(dirs, symbiotic_traits), atol=1e-12
        )


class TestSurfaceNormals:

    def test_unit_and_outward(self, parasitic_traits):
        dirs = fibonacci_directions(40)
        n = surface_normals(dirs, parasitic_traits)
        np.testing.assert_allclose(np.linalg.norm(n, axis=1), 1.0, atol=1e-9)
        assert np.all(np.sum(n * dirs, axis=1) > 0.5)

    def test_close_to_radial_on_mild_surface(self, symbiotic_traits):
        """Small lobes tilt the normal only slightly away from radial."""
        dirs = fibonacci_directions(40)
        n = surface_normals(dirs, symbiotic_traits)
        cos = np.sum(n * dirs, axis=1)
        assert np.all(cos > math.cos(math.radians(30)))


# =============================================================================
# ROTATIONS
# =============================================================================

class TestRotationFromUp:

    @pytest.mark.parametrize("direction", [
        [1.0, 0.0, 0.0],
        [0.0, 0.0, -1.0],
        [0.3, -0.5, 0.8],
        [0.0, 1.0, 0.0],
        [0.0, -1.0, 0.0],
    ])
    def test_maps_up_onto_direction(self, direction):
        d = np.asarray(direction) / np.linalg.norm(direction)
        r = rotation_from_up(d)
        np.testing.assert_allclose(r @ [0.0, 1.0, 0.0], d, atol=1e-12)

    def test_is_proper_rotation(self):
        r = rotation_from_up([0.2, 0.4, -0.9])
        np.testing.assert_allclose(r @ r.T, np.eye(3), atol=1e-12)
        assert np.linalg.det(r) == pytest.approx(1.0)

    def test_rotate_y_quarter_turn(self):
        p = rotate_y(np.array([[1.0, 0.0, 0.0]]), math.pi / 2)
        np.testing.assert_allclose(p, [[0.0, 0.0, -1.0]], atol=1e-12)
