"""Pytest configuration - headless Qt and shared fixtures.

Golden vectors are Keccak-256 of abi.encodePacked(uint256 id, uint256 id,
"VIRUS_EVO_V1"), computed once and frozen. Any implementation that must
agree on traits reproduces exactly these rows.
"""
from __future__ import annotations

import os
from pathlib import Path

import pytest

# Must be set before any QApplication exists
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

ROOT = Path(__file__).resolve().parents[1]

MAX_ID = 2 ** 256 - 1

GOLDEN_VECTORS = [
    # (token_id, seed hex, hue, appendage_count, alignment, mutation_archetype)
    (0, "0x48a13514ad7eeae1f35e848578038e7d7fdb9c9bf54a19d90edf35aead25bddf", 55, 11, 1, 3),
    (1, "0xaadffe1973e48e53b05f949261e2a12a5852b10837b31f8b8a4c2c193c8a6ee6", 326, 8, 0, 2),
    (7, "0xf5d890cd62e1cc553e80225fe0b87df75f51ebec4066359cec73ecddd8f4e278", 192, 9, 0, 2),
    (12, "0x0a1f2c62ac021f9f054cc34d2f1485daf7bedc4df96d0a58869c48480652a046", 350, 12, 0, 2),
    (42, "0x3e801d82cdc0e5e32bd6e02a2f807aa9823d08e8967e2fbd6b32023d44651db0", 8, 7, 1, 1),
    (1337, "0x07d1e45f1ab44b693654fcc91b8fb21daeebf210140aa08307e4c5cb63e3c24a", 330, 6, 0, 0),
    (MAX_ID, "0x6795c126d3813db592ce9d00af4c029183e742f6ca9ef06dd2f678f8d5931336", 22, 6, 1, 1),
]


@pytest.fixture
def project_root():
    """Return path to project root."""
    return ROOT


@pytest.fixture
def golden_vectors():
    return list(GOLDEN_VECTORS)


@pytest.fixture
def symbiotic_traits():
    """Token 1337: Symbiotic, minimum appendage count (6)."""
    from virion.traits import derive_traits
    return derive_traits(1337)


@pytest.fixture
def parasitic_traits():
    """Token 42: Parasitic, 7 appendages."""
    from virion.traits import derive_traits
    return derive_traits(42)


@pytest.fixture
def max_count_traits():
    """Token 12: Symbiotic, maximum appendage count (12)."""
    from virion.traits import derive_traits
    return derive_traits(12)
