"""
Virion - Deterministic procedural organisms from token IDs

A token ID is hashed into a seed, the seed is decoded into a trait record,
and the trait record drives both a flat preview and a live 3D scene.

Usage:
    python -m virion traits 42
    python -m virion preview 42 -o strain_42.png
    python -m virion view 42
"""

__version__ = "0.1.0"

from .models import (
    Alignment,
    AppendageVariance,
    TraitRecord,
    Palette,
    OrganismScene,
    TraitError,
)
from .seeds import TokenIdError, token_seed, seed_hex, validate_token_id
from .traits import derive_traits, decode_seed
from .palette import palette as resolve_palette
from .organism import build_scene, scene_for_token
from .animation import animation_params, frame_state
from .preview import render_preview, preview_png, preview_data_uri
from .config import DOMAIN_SEPARATOR, SPEC_VERSION

__all__ = [
    # Version
    "__version__",
    "SPEC_VERSION",
    "DOMAIN_SEPARATOR",
    # Models
    "Alignment",
    "AppendageVariance",
    "TraitRecord",
    "Palette",
    "OrganismScene",
    # Errors
    "TokenIdError",
    "TraitError",
    # Derivation
    "validate_token_id",
    "token_seed",
    "seed_hex",
    "derive_traits",
    "decode_seed",
    # Rendering
    "resolve_palette",
    "build_scene",
    "scene_for_token",
    "animation_params",
    "frame_state",
    "render_preview",
    "preview_png",
    "preview_data_uri",
]
