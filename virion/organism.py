"""
virion/organism.py
TraitRecord -> OrganismScene

Body: particle cloud filling the displaced surface, glow core fading to
the complementary shell. Appendages and atmosphere are added on top.
Particle jitter comes from seeded streams, so a scene is reproducible
per token ID.
"""

from functools import lru_cache

import numpy as np

from .animation import animation_params
from .appendages import build_appendages
from .config import ATMOSPHERE_CONFIG, BODY_CONFIG, CACHE_CONFIG
from .geometry import random_directions, surface_radius
from .logger import logger
from .models import OrganismScene, Palette, ParticleCloud, TraitRecord
from .palette import palette as resolve_palette
from .seeds import particle_rng, validate_token_id
from .traits import derive_traits


def body_colors(fractions: np.ndarray, palette: Palette) -> np.ndarray:
    """
    Core -> shell gradient by radial fraction.

    r < core_fraction: glow; r > shell_fraction: secondary; linear mix between.
    """
    core = np.array(palette.rgb_float("glow"), dtype=np.float32)
    shell = np.array(palette.rgb_float("secondary"), dtype=np.float32)
    span = BODY_CONFIG.shell_fraction - BODY_CONFIG.core_fraction
    t = np.clip((fractions - BODY_CONFIG.core_fraction) / span, 0.0, 1.0)
    return (core[None, :] * (1.0 - t[:, None]) + shell[None, :] * t[:, None]).astype(np.float32)


def build_body(traits: TraitRecord, palette: Palette) -> ParticleCloud:
    """Particle cloud bounded by the displaced surface."""
    cfg = BODY_CONFIG
    rng = particle_rng(traits.seed, "body")
    directions = random_directions(rng, cfg.particle_count)
    fractions = rng.random(cfg.particle_count) ** cfg.radial_bias
    radii = fractions * surface_radius(directions, traits, cfg.radius)
    return ParticleCloud(
        positions=(directions * radii[:, None]).astype(np.float32),
        colors=body_colors(fractions, palette),
        color=palette.secondary,
        size=cfg.particle_size,
        opacity=palette.opacity,
    )


def build_atmosphere(traits: TraitRecord, palette: Palette) -> ParticleCloud:
    """Sparse dust shell well outside the body."""
    cfg = ATMOSPHERE_CONFIG
    rng = particle_rng(traits.seed, "atmosphere")
    directions = random_directions(rng, cfg.particle_count)
    radii = cfg.min_radius + rng.random(cfg.particle_count) * (cfg.max_radius - cfg.min_radius)
    return ParticleCloud(
        positions=(directions * radii[:, None]).astype(np.float32),
        colors=None,
        color=palette.primary,
        size=cfg.particle_size,
        opacity=cfg.opacity,
    )


def build_scene(traits: TraitRecord) -> OrganismScene:
    """
    Render description for a trait record.

    Raises:
        TraitError: the record is out of domain
    """
    traits.validate()
    pal = resolve_palette(traits.hue, traits.alignment)
    scene = OrganismScene(
        traits=traits,
        palette=pal,
        body=build_body(traits, pal),
        appendages=build_appendages(traits, pal),
        atmosphere=build_atmosphere(traits, pal),
        animation=animation_params(traits.alignment),
        blocker_radius=BODY_CONFIG.blocker_radius,
    )
    logger.debug(
        f"Scene for token {traits.token_id}: {scene.particle_count} particles, "
        f"{len(scene.appendages)} {scene.appendages[0].shape.head_type} appendages",
        component="ORGANISM",
    )
    return scene


@lru_cache(maxsize=CACHE_CONFIG.scene_cache_size)
def _cached_scene(token_id: int) -> OrganismScene:
    return build_scene(derive_traits(token_id))


def scene_for_token(token_id: int) -> OrganismScene:
    """
    Memoized scene by token ID (output is a pure function of the ID).

    The returned scene is shared between callers; treat it as read-only.
    """
    return _cached_scene(validate_token_id(token_id))


def clear_scene_cache() -> None:
    _cached_scene.cache_clear()


def scene_cache_info():
    return _cached_scene.cache_info()
