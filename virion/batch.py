"""
virion/batch.py
Parallel generation over many token IDs

Each call depends only on its own ID, so workers need no coordination.
Results come back in input order.
"""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Iterable, List, Union

from .logger import logger
from .models import OrganismScene, TraitRecord
from .organism import build_scene
from .seeds import seed_hex, validate_token_id
from .traits import derive_traits


def _generate_one(token_id: int, build: bool) -> Union[TraitRecord, OrganismScene]:
    traits = derive_traits(token_id)
    return build_scene(traits) if build else traits


def generate_many(
    token_ids: Iterable[int],
    max_workers: int = 4,
    build: bool = False,
) -> List[Union[TraitRecord, OrganismScene]]:
    """
    Derive traits (or full scenes when build=True) for many IDs in parallel.

    All IDs are validated up front; one bad ID fails the whole call before
    any work starts.
    """
    ids = [validate_token_id(t) for t in token_ids]
    results: List = [None] * len(ids)

    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as ex:
        futs = {ex.submit(_generate_one, t, build): i for i, t in enumerate(ids)}
        for fut in as_completed(futs):
            results[futs[fut]] = fut.result()

    logger.info(
        f"Generated {len(ids)} {'scenes' if build else 'trait records'}",
        component="BATCH",
    )
    return results


def golden_vectors(token_ids: Iterable[int]) -> List[dict]:
    """Trait rows for freezing cross-implementation test vectors."""
    rows = []
    for traits in generate_many(token_ids):
        rows.append({
            "token_id": traits.token_id,
            "seed": seed_hex(traits.token_id),
            "hue": traits.hue,
            "appendage_count": traits.appendage_count,
            "alignment": int(traits.alignment),
            "mutation_archetype": traits.mutation_archetype,
        })
    return rows
