"""
virion/naming.py
Display names for strains and mutation archetypes

Archetype names are split by alignment. The two sets are disjoint so a
name alone tells you which family the strain belongs to.
"""

from typing import Dict, List, Tuple

from .config import ARCHETYPE_COUNT
from .models import Alignment, TraitError

# IMPORTANT: Order is stable - index is the decoded archetype value
ARCHETYPE_NAMES: Dict[Alignment, Tuple[str, ...]] = {
    Alignment.SYMBIOTIC: (
        "Mycelial Bloom",
        "Coral Lattice",
        "Lumen Drift",
        "Tidal Weave",
    ),
    Alignment.PARASITIC: (
        "Hollow Thorn",
        "Rust Crown",
        "Blight Needle",
        "Ashen Maw",
    ),
}

STRAIN_NAME_PREFIX = "Viral Strain"


def archetype_name(alignment: Alignment, archetype: int) -> str:
    """Name for a mutation archetype, drawn only from the alignment's own set."""
    try:
        names = ARCHETYPE_NAMES[Alignment(alignment)]
    except ValueError:
        raise TraitError(f"alignment {alignment!r} is not an Alignment") from None
    if not 0 <= archetype < ARCHETYPE_COUNT:
        raise TraitError(
            f"mutation_archetype {archetype} out of range 0-{ARCHETYPE_COUNT - 1}"
        )
    return names[archetype]


def strain_name(token_id: int) -> str:
    """Display name: 'Viral Strain #42'."""
    return f"{STRAIN_NAME_PREFIX} #{token_id}"


def trait_attributes(traits) -> List[dict]:
    """Marketplace-style attribute list for a TraitRecord."""
    return [
        {"trait_type": "Alignment", "value": traits.alignment.label},
        {"trait_type": "Mutation", "value": traits.archetype_name},
        {"trait_type": "Hue", "value": traits.hue},
        {"trait_type": "Spikes", "value": traits.appendage_count},
    ]
