"""
virion/traits.py
Seed -> TraitRecord decoding

Bit layout (each trait reads its own range of the 256-bit seed):

    hue                  seed % 360
    appendage_count      6 + seed % 7
    alignment            (seed >> 8) % 2
    mutation_archetype   (seed >> 12) % 4
    appendage_variance   byte at bit 16 + 8*i, i < 12
    lobe_phases          byte at bit 128 + 8*k, k < 3
"""

import math
from typing import Tuple

from .config import (
    ALIGNMENT_SHIFT,
    APPENDAGE_MAX,
    APPENDAGE_MIN,
    APPENDAGE_SPAN,
    ARCHETYPE_COUNT,
    ARCHETYPE_SHIFT,
    HUE_MODULUS,
    LOBE_BITS,
    LOBE_COUNT,
    LOBE_SHIFT,
    VARIANCE_BITS,
    VARIANCE_MAX,
    VARIANCE_MIN,
    VARIANCE_SHIFT,
)
from .logger import logger
from .models import Alignment, AppendageVariance, TraitRecord
from .seeds import token_seed, validate_token_id

_VARIANCE_MASK = (1 << VARIANCE_BITS) - 1
_LOBE_MASK = (1 << LOBE_BITS) - 1


def _nibble_to_scale(nibble: int) -> float:
    return VARIANCE_MIN + (VARIANCE_MAX - VARIANCE_MIN) * (nibble / 15.0)


def appendage_variance(seed: int, index: int) -> AppendageVariance:
    """
    Length/head jitter for appendage `index`.

    Low nibble of the appendage's byte drives length, high nibble drives
    head size. Both land in [VARIANCE_MIN, VARIANCE_MAX].
    """
    if not 0 <= index < APPENDAGE_MAX:
        raise IndexError(f"appendage index {index} out of range 0-{APPENDAGE_MAX - 1}")
    byte = (seed >> (VARIANCE_SHIFT + VARIANCE_BITS * index)) & _VARIANCE_MASK
    return AppendageVariance(
        length=_nibble_to_scale(byte & 0x0F),
        head=_nibble_to_scale(byte >> 4),
    )


def lobe_phases(seed: int) -> Tuple[float, ...]:
    """Phases in [0, 2pi) for the three surface lobe axes."""
    return tuple(
        ((seed >> (LOBE_SHIFT + LOBE_BITS * k)) & _LOBE_MASK)
        * (2.0 * math.pi / (1 << LOBE_BITS))
        for k in range(LOBE_COUNT)
    )


def decode_seed(token_id: int, seed: int) -> TraitRecord:
    """Decode a seed into its TraitRecord. Pure; no hashing."""
    count = APPENDAGE_MIN + seed % APPENDAGE_SPAN
    return TraitRecord(
        token_id=token_id,
        seed=seed,
        hue=seed % HUE_MODULUS,
        appendage_count=count,
        alignment=Alignment((seed >> ALIGNMENT_SHIFT) % 2),
        mutation_archetype=(seed >> ARCHETYPE_SHIFT) % ARCHETYPE_COUNT,
        appendage_variance=tuple(appendage_variance(seed, i) for i in range(count)),
        lobe_phases=lobe_phases(seed),
    )


def derive_traits(token_id: int) -> TraitRecord:
    """
    Derive the TraitRecord for a token ID.

    Raises:
        TokenIdError: token_id is not an int in [0, 2**256 - 1]
    """
    token_id = validate_token_id(token_id)
    traits = decode_seed(token_id, token_seed(token_id))
    logger.traits(
        token_id,
        f"hue={traits.hue} count={traits.appendage_count} "
        f"alignment={traits.alignment.label} archetype={traits.mutation_archetype}",
    )
    return traits
