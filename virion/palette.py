"""
virion/palette.py
(hue, alignment) -> Palette

Pure formulas, no shared state. Both alignments use the hue and its
complement; Symbiotic is muted and cool, Parasitic saturated and hostile.
All hue arithmetic wraps mod 360, so hue 359 and hue 0 are neighbours.
"""

from functools import lru_cache
from typing import Tuple

from .config import HUE_MODULUS
from .models import Alignment, Palette, TraitError


# (saturation, lightness) per role, percent
_ROLE_HSL = {
    Alignment.SYMBIOTIC: {
        "primary": (55, 52),
        "glow": (65, 74),
        "secondary": (40, 62),
    },
    Alignment.PARASITIC: {
        "primary": (100, 60),
        "glow": (100, 75),
        "secondary": (90, 65),
    },
}

_OPACITY = {
    Alignment.SYMBIOTIC: 0.9,
    Alignment.PARASITIC: 1.0,
}


# =============================================================================
# Color Utilities
# =============================================================================

def hsl_to_rgb(h: float, s: float, l: float) -> Tuple[int, int, int]:
    """Convert HSL (h in degrees, s/l in 0-1) to RGB (0-255)."""
    def _hue(p: float, q: float, t: float) -> float:
        if t < 0:
            t += 1
        if t > 1:
            t -= 1
        if t < 1 / 6:
            return p + (q - p) * 6 * t
        if t < 1 / 2:
            return q
        if t < 2 / 3:
            return p + (q - p) * (2 / 3 - t) * 6
        return p

    h = (h % HUE_MODULUS) / HUE_MODULUS
    if s == 0:
        v = int(round(l * 255))
        return v, v, v
    q = l * (1 + s) if l < 0.5 else l + s - l * s
    p = 2 * l - q
    r = _hue(p, q, h + 1 / 3)
    g = _hue(p, q, h)
    b = _hue(p, q, h - 1 / 3)
    return int(round(r * 255)), int(round(g * 255)), int(round(b * 255))


def rgb_to_hex(rgb: Tuple[int, int, int]) -> str:
    r, g, b = rgb
    return f"#{r:02x}{g:02x}{b:02x}"


def hex_to_rgb(value: str) -> Tuple[int, int, int]:
    value = value.strip().lstrip("#")
    if len(value) != 6:
        raise ValueError(f"expected #RRGGBB, got {value!r}")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def mix_rgb(a: Tuple[int, int, int], b: Tuple[int, int, int], t: float) -> Tuple[int, int, int]:
    """Linear interpolation between two RGB colors, t in [0, 1]."""
    t = max(0.0, min(1.0, t))
    return tuple(int(round(x + (y - x) * t)) for x, y in zip(a, b))


def complement(hue: int) -> int:
    return (hue + 180) % HUE_MODULUS


def hsl_hex(hue: int, saturation: int, lightness: int) -> str:
    return rgb_to_hex(hsl_to_rgb(hue, saturation / 100.0, lightness / 100.0))


# =============================================================================
# Palette
# =============================================================================

@lru_cache(maxsize=HUE_MODULUS * 2)
def palette(hue: int, alignment: Alignment) -> Palette:
    """
    Resolve the color roles for (hue, alignment).

    Raises:
        TraitError: hue outside 0-359 or unknown alignment
    """
    if not 0 <= hue < HUE_MODULUS:
        raise TraitError(f"hue {hue} out of range 0-{HUE_MODULUS - 1}")
    try:
        alignment = Alignment(alignment)
    except ValueError:
        raise TraitError(f"alignment {alignment!r} is not an Alignment") from None

    roles = _ROLE_HSL[alignment]
    return Palette(
        primary=hsl_hex(hue, *roles["primary"]),
        glow=hsl_hex(hue, *roles["glow"]),
        secondary=hsl_hex(complement(hue), *roles["secondary"]),
        opacity=_OPACITY[alignment],
    )


def color_distance(a: str, b: str) -> int:
    """Largest per-channel difference between two hex colors."""
    return max(abs(x - y) for x, y in zip(hex_to_rgb(a), hex_to_rgb(b)))


def palette_distance(a: Palette, b: Palette) -> int:
    """Largest per-channel difference across all color roles."""
    return max(
        color_distance(a.primary, b.primary),
        color_distance(a.glow, b.glow),
        color_distance(a.secondary, b.secondary),
    )
