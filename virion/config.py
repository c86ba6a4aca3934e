"""
virion/config.py
Configuration constants for Virion

Trait bit layout, body/appendage tuning and render settings.
"""

from dataclasses import dataclass, field
from typing import Dict

# =============================================================================
# Version / Domain Separation
# =============================================================================

SPEC_VERSION = "1.0.0"

# IMPORTANT: every renderer that must agree on traits hashes this exact string.
# Changing it re-rolls every organism.
DOMAIN_SEPARATOR = "VIRUS_EVO_V1"

TOKEN_ID_BITS = 256
MAX_TOKEN_ID = (1 << TOKEN_ID_BITS) - 1

# =============================================================================
# Trait Bit Layout
# =============================================================================

HUE_MODULUS = 360

APPENDAGE_MIN = 6
APPENDAGE_SPAN = 7          # 6..12
APPENDAGE_MAX = APPENDAGE_MIN + APPENDAGE_SPAN - 1

ALIGNMENT_SHIFT = 8
ARCHETYPE_SHIFT = 12
ARCHETYPE_COUNT = 4

# One byte per appendage, 12 appendages max -> bits 16..111
VARIANCE_SHIFT = 16
VARIANCE_BITS = 8
VARIANCE_MIN = 0.85
VARIANCE_MAX = 1.15

# Surface lobe phases -> bits 128..151
LOBE_SHIFT = 128
LOBE_BITS = 8
LOBE_COUNT = 3

# =============================================================================
# Body
# =============================================================================

@dataclass
class BodyConfig:
    """Particle-cloud body settings."""
    particle_count: int = 12000
    radius: float = 1.0
    core_fraction: float = 0.3     # r < core: pure glow color
    shell_fraction: float = 0.6    # r > shell: pure secondary color
    radial_bias: float = 0.8       # u ** bias keeps plenty of particles near center
    blocker_radius: float = 0.1
    particle_size: float = 0.03


BODY_CONFIG = BodyConfig()


@dataclass
class DisplacementConfig:
    """Low-frequency lobe field on the body surface."""
    frequency: float = 2.5
    amplitude: Dict[int, float] = field(default_factory=lambda: {
        0: 0.07,   # Symbiotic: soft swelling
        1: 0.12,   # Parasitic: lumpier
    })
    normal_step: float = 1e-3


DISPLACEMENT_CONFIG = DisplacementConfig()

# =============================================================================
# Appendage Shapes
# =============================================================================

@dataclass(frozen=True)
class AppendageShape:
    """Declarative per-alignment appendage geometry (local +y is outward)."""
    head_type: str          # "club" or "needle"
    stalk_radius: float
    stalk_length: float
    head_radius: float
    head_fraction: float    # share of particles in the head
    particle_count: int = 250
    particle_size: float = 0.03


APPENDAGE_SHAPES: Dict[int, AppendageShape] = {
    0: AppendageShape(
        head_type="club",
        stalk_radius=0.012,
        stalk_length=0.6,
        head_radius=0.1,
        head_fraction=0.4,
    ),
    1: AppendageShape(
        head_type="needle",
        stalk_radius=0.03,
        stalk_length=0.75,
        head_radius=0.0,
        head_fraction=0.0,
    ),
}

# =============================================================================
# Atmosphere
# =============================================================================

@dataclass
class AtmosphereConfig:
    """Sparse dust shell around the organism."""
    particle_count: int = 50
    min_radius: float = 3.0
    max_radius: float = 7.0
    particle_size: float = 0.04
    opacity: float = 0.3


ATMOSPHERE_CONFIG = AtmosphereConfig()

# =============================================================================
# Animation
# =============================================================================

@dataclass(frozen=True)
class AnimationConfig:
    """Per-alignment animation coefficients (rates in rad/s)."""
    rotation_rate: float
    sway_rate: float
    sway_amplitude: float
    pulse_rate: float
    pulse_amplitude: float
    base_scale: float = 1.8
    float_speed: float = 1.5
    float_amplitude: float = 0.1


ANIMATION_CONFIGS: Dict[int, AnimationConfig] = {
    0: AnimationConfig(
        rotation_rate=0.12,
        sway_rate=0.2,
        sway_amplitude=0.05,
        pulse_rate=1.5,
        pulse_amplitude=0.02,
    ),
    1: AnimationConfig(
        rotation_rate=0.2,
        sway_rate=0.45,
        sway_amplitude=0.08,
        pulse_rate=3.5,
        pulse_amplitude=0.05,
    ),
}

# =============================================================================
# Flat Preview
# =============================================================================

@dataclass
class PreviewConfig:
    """2D preview render settings."""
    size: int = 512
    background: str = "#05070a"
    body_scale: float = 0.22        # body radius as a fraction of image size
    silhouette_samples: int = 180
    glow_blur: float = 6.0
    format: str = "PNG"


PREVIEW_CONFIG = PreviewConfig()

# =============================================================================
# Viewer / Cache
# =============================================================================

@dataclass
class ViewerConfig:
    """Interactive viewer settings."""
    frame_interval_ms: int = 16
    camera_distance: float = 9.0
    min_distance: float = 4.0
    max_distance: float = 20.0
    fov_deg: float = 45.0
    orbit_sensitivity: float = 0.01
    background: str = "#000000"


VIEWER_CONFIG = ViewerConfig()


@dataclass
class CacheConfig:
    """Memoization of scenes keyed by token ID."""
    scene_cache_size: int = 64


CACHE_CONFIG = CacheConfig()
