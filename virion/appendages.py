"""
virion/appendages.py
Appendage placement and per-appendage particle geometry

Placement: golden-angle directions, rooted on the displaced surface and
pointing along the local surface normal.
Shape: one of two families chosen by alignment - a rounded club
(Symbiotic) or a tapering needle (Parasitic). Never blended.
"""

from typing import List

import numpy as np

from .config import APPENDAGE_SHAPES, AppendageShape
from .geometry import fibonacci_directions, rotation_from_up, surface_normals, surface_radius
from .models import (
    Alignment,
    Appendage,
    AppendagePlacement,
    AppendageVariance,
    Palette,
    ParticleCloud,
    TraitRecord,
)
from .seeds import particle_rng


def appendage_shape(alignment: Alignment) -> AppendageShape:
    """Shape descriptor for an alignment."""
    return APPENDAGE_SHAPES[int(Alignment(alignment))]


def place_appendages(traits: TraitRecord) -> List[AppendagePlacement]:
    """Root point, direction and outward normal for every appendage."""
    shape = appendage_shape(traits.alignment)
    directions = fibonacci_directions(traits.appendage_count)
    radii = surface_radius(directions, traits)
    normals = surface_normals(directions, traits)

    placements = []
    for i, d in enumerate(directions):
        variance = traits.appendage_variance[i]
        placements.append(AppendagePlacement(
            index=i,
            direction=d,
            root=d * radii[i],
            normal=normals[i],
            length=shape.stalk_length * variance.length,
        ))
    return placements


def _club_particles(shape: AppendageShape, variance: AppendageVariance,
                    rng: np.random.Generator) -> np.ndarray:
    """Thin stalk topped by a spherical head."""
    n = shape.particle_count
    n_head = int(round(n * shape.head_fraction))
    n_stalk = n - n_head
    length = shape.stalk_length * variance.length
    head_radius = shape.head_radius * variance.head

    # Stalk: uniform disc cross-section
    r = shape.stalk_radius * np.sqrt(rng.random(n_stalk))
    theta = rng.random(n_stalk) * 2.0 * np.pi
    h = rng.random(n_stalk) * length
    stalk = np.stack([r * np.cos(theta), h, r * np.sin(theta)], axis=1)

    # Head: uniform ball centred on the stalk tip
    r = head_radius * np.cbrt(rng.random(n_head))
    theta = rng.random(n_head) * 2.0 * np.pi
    phi = np.arccos(2.0 * rng.random(n_head) - 1.0)
    head = np.stack([
        r * np.sin(phi) * np.cos(theta),
        r * np.sin(phi) * np.sin(theta) + length,
        r * np.cos(phi),
    ], axis=1)
    return np.concatenate([stalk, head])


def _needle_particles(shape: AppendageShape, variance: AppendageVariance,
                      rng: np.random.Generator) -> np.ndarray:
    """Solid cone tapering to a sharp tip at +y = length."""
    n = shape.particle_count
    length = shape.stalk_length * variance.length
    base_radius = shape.stalk_radius * variance.head

    # Density follows cross-section area: more particles near the base
    h = length * (1.0 - np.cbrt(rng.random(n - 1)))
    r = base_radius * (1.0 - h / length) * np.sqrt(rng.random(n - 1))
    theta = rng.random(n - 1) * 2.0 * np.pi
    body = np.stack([r * np.cos(theta), h, r * np.sin(theta)], axis=1)
    tip = np.array([[0.0, length, 0.0]])
    return np.concatenate([body, tip])


_PARTICLE_BUILDERS = {
    "club": _club_particles,
    "needle": _needle_particles,
}


def appendage_particles(shape: AppendageShape, variance: AppendageVariance,
                        rng: np.random.Generator) -> np.ndarray:
    """Local-space particles (root at origin, pointing along +y)."""
    builder = _PARTICLE_BUILDERS.get(shape.head_type)
    if builder is None:
        raise ValueError(f"Unknown appendage head type: {shape.head_type}")
    return builder(shape, variance, rng)


def build_appendages(traits: TraitRecord, palette: Palette) -> List[Appendage]:
    """Placed, oriented particle clouds for every appendage."""
    shape = appendage_shape(traits.alignment)
    appendages = []
    for placement in place_appendages(traits):
        rng = particle_rng(traits.seed, "appendage", placement.index)
        local = appendage_particles(shape, traits.appendage_variance[placement.index], rng)
        rot = rotation_from_up(placement.normal)
        world = placement.root + local @ rot.T
        appendages.append(Appendage(
            placement=placement,
            shape=shape,
            cloud=ParticleCloud(
                positions=world.astype(np.float32),
                colors=None,
                color=palette.glow,
                size=shape.particle_size,
                opacity=1.0,
            ),
        ))
    return appendages
