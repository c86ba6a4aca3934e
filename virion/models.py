"""
virion/models.py
Core data models for Virion

Trait records, palettes and the scene description consumed by renderers.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Optional, Tuple
import numpy as np

from .config import (
    APPENDAGE_MAX,
    APPENDAGE_MIN,
    ARCHETYPE_COUNT,
    HUE_MODULUS,
    MAX_TOKEN_ID,
    VARIANCE_MAX,
    VARIANCE_MIN,
    AppendageShape,
)


class TraitError(ValueError):
    """Raised when a trait record is outside its domain (caller bug)."""
    pass


# =============================================================================
# Alignment
# =============================================================================

class Alignment(IntEnum):
    SYMBIOTIC = 0
    PARASITIC = 1

    @property
    def label(self) -> str:
        return self.name.capitalize()


# =============================================================================
# TraitRecord
# =============================================================================

@dataclass(frozen=True)
class AppendageVariance:
    """Per-appendage jitter, deterministic per (seed, index)."""
    length: float = 1.0
    head: float = 1.0

    def to_dict(self) -> dict:
        return {"length": self.length, "head": self.head}


@dataclass(frozen=True)
class TraitRecord:
    """
    Decoded visual traits for one token.

    Every field is a pure function of the seed; renderers consume only this.
    """
    token_id: int
    seed: int
    hue: int
    appendage_count: int
    alignment: Alignment
    mutation_archetype: int
    appendage_variance: Tuple[AppendageVariance, ...] = ()
    lobe_phases: Tuple[float, ...] = (0.0, 0.0, 0.0)

    @property
    def archetype_name(self) -> str:
        from .naming import archetype_name
        return archetype_name(self.alignment, self.mutation_archetype)

    def validate(self) -> "TraitRecord":
        """Raise TraitError if any field is out of domain."""
        if not 0 <= self.token_id <= MAX_TOKEN_ID:
            raise TraitError(f"token_id {self.token_id} out of range")
        if not 0 <= self.hue < HUE_MODULUS:
            raise TraitError(f"hue {self.hue} out of range 0-{HUE_MODULUS - 1}")
        if not APPENDAGE_MIN <= self.appendage_count <= APPENDAGE_MAX:
            raise TraitError(
                f"appendage_count {self.appendage_count} out of range "
                f"{APPENDAGE_MIN}-{APPENDAGE_MAX}"
            )
        if not isinstance(self.alignment, Alignment):
            raise TraitError(f"alignment {self.alignment!r} is not an Alignment")
        if not 0 <= self.mutation_archetype < ARCHETYPE_COUNT:
            raise TraitError(
                f"mutation_archetype {self.mutation_archetype} out of range "
                f"0-{ARCHETYPE_COUNT - 1}"
            )
        if len(self.appendage_variance) != self.appendage_count:
            raise TraitError(
                f"expected {self.appendage_count} appendage variances, "
                f"got {len(self.appendage_variance)}"
            )
        for v in self.appendage_variance:
            for value in (v.length, v.head):
                if not VARIANCE_MIN <= value <= VARIANCE_MAX:
                    raise TraitError(f"appendage variance {value} out of range")
        if len(self.lobe_phases) != 3:
            raise TraitError("lobe_phases must have 3 entries")
        return self

    def to_dict(self) -> dict:
        return {
            "token_id": self.token_id,
            "seed": hex(self.seed),
            "hue": self.hue,
            "appendage_count": self.appendage_count,
            "alignment": self.alignment.label,
            "mutation_archetype": self.mutation_archetype,
            "archetype_name": self.archetype_name,
            "appendage_variance": [v.to_dict() for v in self.appendage_variance],
            "lobe_phases": list(self.lobe_phases),
        }

    @classmethod
    def from_dict(cls, d: dict) -> "TraitRecord":
        alignment = d["alignment"]
        if isinstance(alignment, str):
            alignment = Alignment[alignment.upper()]
        seed = d["seed"]
        if isinstance(seed, str):
            seed = int(seed, 16)
        return cls(
            token_id=d["token_id"],
            seed=seed,
            hue=d["hue"],
            appendage_count=d["appendage_count"],
            alignment=Alignment(alignment),
            mutation_archetype=d["mutation_archetype"],
            appendage_variance=tuple(
                AppendageVariance(**v) for v in d.get("appendage_variance", [])
            ),
            lobe_phases=tuple(d.get("lobe_phases", (0.0, 0.0, 0.0))),
        )


# =============================================================================
# Palette
# =============================================================================

@dataclass(frozen=True)
class Palette:
    """Named color roles, shared by every renderer."""
    primary: str      # body / atmosphere
    glow: str         # core + appendage highlight
    secondary: str    # outer shell, complementary hue
    opacity: float

    def rgb(self, role: str) -> Tuple[int, int, int]:
        """Role color as 0-255 RGB."""
        from .palette import hex_to_rgb
        return hex_to_rgb(getattr(self, role))

    def rgb_float(self, role: str) -> Tuple[float, float, float]:
        """Role color as 0-1 RGB."""
        r, g, b = self.rgb(role)
        return (r / 255.0, g / 255.0, b / 255.0)

    def to_dict(self) -> dict:
        return {
            "primary": self.primary,
            "glow": self.glow,
            "secondary": self.secondary,
            "opacity": self.opacity,
        }


# =============================================================================
# Scene
# =============================================================================

@dataclass
class ParticleCloud:
    """Point buffer with material parameters."""
    positions: np.ndarray            # (N, 3) float32
    colors: Optional[np.ndarray]     # (N, 3) float32 in 0-1, or None for uniform
    color: str = "#ffffff"           # uniform color when colors is None
    size: float = 0.03
    opacity: float = 1.0
    additive: bool = True

    @property
    def count(self) -> int:
        return int(self.positions.shape[0])

    def to_dict(self, include_buffers: bool = False) -> dict:
        d = {
            "count": self.count,
            "color": self.color,
            "size": self.size,
            "opacity": self.opacity,
            "additive": self.additive,
        }
        if include_buffers:
            d["positions"] = self.positions.tolist()
            d["colors"] = self.colors.tolist() if self.colors is not None else None
        return d


@dataclass
class AppendagePlacement:
    """Where an appendage roots and which way it points."""
    index: int
    direction: np.ndarray    # unit direction from body center
    root: np.ndarray         # point on the displaced surface
    normal: np.ndarray       # unit surface normal at root
    length: float

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "direction": self.direction.tolist(),
            "root": self.root.tolist(),
            "normal": self.normal.tolist(),
            "length": self.length,
        }


@dataclass
class Appendage:
    """Placed appendage with its world-space particles."""
    placement: AppendagePlacement
    shape: AppendageShape
    cloud: ParticleCloud

    def to_dict(self, include_buffers: bool = False) -> dict:
        return {
            "placement": self.placement.to_dict(),
            "head_type": self.shape.head_type,
            "cloud": self.cloud.to_dict(include_buffers),
        }


@dataclass(frozen=True)
class AnimationParams:
    """Time-driven presentation coefficients (deterministic per alignment)."""
    rotation_rate: float
    sway_rate: float
    sway_amplitude: float
    pulse_rate: float
    pulse_amplitude: float
    base_scale: float
    float_speed: float
    float_amplitude: float

    def to_dict(self) -> dict:
        return dict(self.__dict__)


@dataclass(frozen=True)
class FrameState:
    """Per-frame transform of the organism root."""
    rotation_y: float
    rotation_z: float
    scale: float
    float_offset: float = 0.0


@dataclass
class OrganismScene:
    """Complete render description for one token."""
    traits: TraitRecord
    palette: Palette
    body: ParticleCloud
    appendages: List[Appendage]
    atmosphere: ParticleCloud
    animation: AnimationParams
    blocker_radius: float = 0.1

    @property
    def particle_count(self) -> int:
        return (
            self.body.count
            + sum(a.cloud.count for a in self.appendages)
            + self.atmosphere.count
        )

    def to_dict(self, include_buffers: bool = False) -> Dict:
        return {
            "traits": self.traits.to_dict(),
            "palette": self.palette.to_dict(),
            "body": self.body.to_dict(include_buffers),
            "appendages": [a.to_dict(include_buffers) for a in self.appendages],
            "atmosphere": self.atmosphere.to_dict(include_buffers),
            "animation": self.animation.to_dict(),
            "blocker_radius": self.blocker_radius,
            "particle_count": self.particle_count,
        }
