"""
virion/geometry.py
Sphere point distribution and the surface displacement field

Conventions: y is up; theta is the polar angle from +y, phi the azimuth
in the xz-plane. All functions are vectorized over (N, 3) direction arrays.
"""
from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from .config import BODY_CONFIG, DISPLACEMENT_CONFIG

GOLDEN_ANGLE = math.pi * (3.0 - math.sqrt(5.0))
EPS = 1e-9

_UP = np.array([0.0, 1.0, 0.0])


# =============================================================================
# Directions
# =============================================================================

def fibonacci_directions(n: int) -> np.ndarray:
    """
    N evenly spread unit directions on the golden-angle spiral.

    y runs from +1 to -1 in equal steps; the azimuth advances by the golden
    angle. Same n -> same directions, no special cases beyond n == 1.
    """
    if n < 1:
        raise ValueError(f"need at least one direction, got {n}")
    if n == 1:
        return _UP[None, :].copy()

    i = np.arange(n, dtype=np.float64)
    y = 1.0 - (i / (n - 1)) * 2.0
    radius = np.sqrt(np.clip(1.0 - y * y, 0.0, None))
    theta = GOLDEN_ANGLE * i
    dirs = np.stack([np.cos(theta) * radius, y, np.sin(theta) * radius], axis=1)
    return normalize(dirs)


def normalize(v: np.ndarray) -> np.ndarray:
    norms = np.linalg.norm(v, axis=-1, keepdims=True)
    return v / np.maximum(norms, EPS)


def direction_from_angles(theta, phi) -> np.ndarray:
    """Unit direction(s) from polar angle theta (from +y) and azimuth phi."""
    theta = np.asarray(theta, dtype=np.float64)
    phi = np.asarray(phi, dtype=np.float64)
    s = np.sin(theta)
    return np.stack([s * np.cos(phi), np.cos(theta), s * np.sin(phi)], axis=-1)


def angles_from_direction(d: np.ndarray):
    """Inverse of direction_from_angles: returns (theta, phi), phi in [0, 2pi)."""
    d = normalize(np.asarray(d, dtype=np.float64))
    theta = np.arccos(np.clip(d[..., 1], -1.0, 1.0))
    phi = np.mod(np.arctan2(d[..., 2], d[..., 0]), 2.0 * math.pi)
    return theta, phi


def random_directions(rng: np.random.Generator, n: int) -> np.ndarray:
    """Uniform unit directions (normalized gaussians)."""
    return normalize(rng.normal(size=(n, 3)))


def min_angular_separation(directions: np.ndarray) -> float:
    """Smallest pairwise angle between directions, in degrees."""
    d = normalize(np.asarray(directions, dtype=np.float64))
    if len(d) < 2:
        return 180.0
    dots = np.clip(d @ d.T, -1.0, 1.0)
    np.fill_diagonal(dots, -1.0)
    return math.degrees(math.acos(float(dots.max())))


# =============================================================================
# Surface Displacement Field
# =============================================================================

def surface_offset(
    directions: np.ndarray,
    phases: Sequence[float],
    amplitude: float,
    frequency: float = DISPLACEMENT_CONFIG.frequency,
) -> np.ndarray:
    """
    Relative radial offset for each direction, in [-amplitude, amplitude].

    Product of three phase-shifted sines of the direction components: a few
    broad lobes, continuous everywhere including the poles.
    """
    d = np.asarray(directions, dtype=np.float64)
    p0, p1, p2 = phases
    return amplitude * (
        np.sin(frequency * d[..., 0] + p0)
        * np.sin(frequency * d[..., 1] + p1)
        * np.sin(frequency * d[..., 2] + p2)
    )


def displacement_amplitude(traits) -> float:
    return DISPLACEMENT_CONFIG.amplitude[int(traits.alignment)]


def surface_radius(directions: np.ndarray, traits, base_radius: float = BODY_CONFIG.radius) -> np.ndarray:
    """Radius of the displaced body surface along each direction."""
    offset = surface_offset(directions, traits.lobe_phases, displacement_amplitude(traits))
    return base_radius * (1.0 + offset)


def displacement(theta, phi, traits) -> np.ndarray:
    """Radial offset at spherical angles (theta from +y, phi azimuth)."""
    return surface_offset(
        direction_from_angles(theta, phi),
        traits.lobe_phases,
        displacement_amplitude(traits),
    )


def surface_points(directions: np.ndarray, traits) -> np.ndarray:
    """Points on the displaced surface."""
    d = normalize(np.asarray(directions, dtype=np.float64))
    return d * surface_radius(d, traits)[..., None]


def tangent_basis(directions: np.ndarray):
    """Two unit tangents per direction, avoiding the degenerate helper axis."""
    d = normalize(np.asarray(directions, dtype=np.float64))
    helper = np.where(
        (np.abs(d[:, 1]) < 0.9)[:, None],
        np.array([0.0, 1.0, 0.0]),
        np.array([1.0, 0.0, 0.0]),
    )
    t1 = normalize(np.cross(helper, d))
    t2 = np.cross(d, t1)
    return t1, t2


def surface_normals(directions: np.ndarray, traits, step: float = DISPLACEMENT_CONFIG.normal_step) -> np.ndarray:
    """
    Outward unit normals of the displaced surface.

    Central differences of the surface point along two tangents.
    """
    d = normalize(np.atleast_2d(np.asarray(directions, dtype=np.float64)))
    t1, t2 = tangent_basis(d)

    def _p(dirs):
        return surface_points(normalize(dirs), traits)

    du = _p(d + step * t1) - _p(d - step * t1)
    dv = _p(d + step * t2) - _p(d - step * t2)
    n = normalize(np.cross(du, dv))
    flip = np.sum(n * d, axis=1) < 0
    n[flip] *= -1.0
    return n


# =============================================================================
# Orientation
# =============================================================================

def rotation_from_up(direction) -> np.ndarray:
    """
    3x3 rotation taking +y onto `direction` (shortest arc).
    """
    v = np.asarray(direction, dtype=np.float64)
    v = v / max(float(np.linalg.norm(v)), EPS)
    c = float(np.dot(_UP, v))
    if c > 1.0 - 1e-12:
        return np.eye(3)
    if c < -1.0 + 1e-12:
        # Antiparallel: half turn about x
        return np.diag([1.0, -1.0, -1.0])
    axis = np.cross(_UP, v)
    s2 = float(np.dot(axis, axis))
    k = np.array([
        [0.0, -axis[2], axis[1]],
        [axis[2], 0.0, -axis[0]],
        [-axis[1], axis[0], 0.0],
    ])
    return np.eye(3) + k + (k @ k) * ((1.0 - c) / s2)


def rotate_y(points: np.ndarray, angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    m = np.array([[c, 0.0, s], [0.0, 1.0, 0.0], [-s, 0.0, c]])
    return points @ m.T


def rotate_x(points: np.ndarray, angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    m = np.array([[1.0, 0.0, 0.0], [0.0, c, -s], [0.0, s, c]])
    return points @ m.T


def rotate_z(points: np.ndarray, angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    m = np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])
    return points @ m.T
