"""
Tests for virion/traits.py and virion/naming.py

Covers:
- Golden trait vectors
- Range invariants over many IDs
- Per-appendage variance and lobe phases
- Archetype names stay inside their alignment's set
- TraitRecord validation and dict round trip
"""

import dataclasses
import math

import pytest

from virion.config import (
    APPENDAGE_MAX,
    APPENDAGE_MIN,
    ARCHETYPE_COUNT,
    MAX_TOKEN_ID,
    VARIANCE_MAX,
    VARIANCE_MIN,
)
from virion.models import Alignment, AppendageVariance, TraitError, TraitRecord
from virion.naming import (
    ARCHETYPE_NAMES,
    archetype_name,
    strain_name,
    trait_attributes,
)
from virion.seeds import TokenIdError, token_seed
from virion.traits import appendage_variance, decode_seed, derive_traits, lobe_phases


# =============================================================================
# GOLDEN VECTORS
# =============================================================================

class TestGoldenVectors:
    """Frozen rows every renderer must reproduce."""

    def test_golden_table(self, golden_vectors):
        for token_id, _, hue, count, alignment, archetype in golden_vectors:
            t = derive_traits(token_id)
            assert (t.hue, t.appendage_count, int(t.alignment), t.mutation_archetype) == (
                hue, count, alignment, archetype
            ), f"token {token_id}"

    def test_token_42(self):
        t = derive_traits(42)
        assert t.hue == 8
        assert t.appendage_count == 7
        assert t.alignment is Alignment.PARASITIC
        assert t.mutation_archetype == 1

    def test_max_token_id(self):
        t = derive_traits(MAX_TOKEN_ID)
        assert t.token_id == MAX_TOKEN_ID
        assert t.hue == 22

    def test_min_and_max_counts_present(self):
        assert derive_traits(1337).appendage_count == APPENDAGE_MIN
        assert derive_traits(12).appendage_count == APPENDAGE_MAX


# =============================================================================
# INVARIANTS
# =============================================================================

class TestDeriveTraits:

    def test_deterministic(self):
        assert derive_traits(99) == derive_traits(99)

    def test_ranges_over_many_ids(self):
        for token_id in range(200):
            t = derive_traits(token_id)
            assert 0 <= t.hue <= 359
            assert APPENDAGE_MIN <= t.appendage_count <= APPENDAGE_MAX
            assert t.alignment in (Alignment.SYMBIOTIC, Alignment.PARASITIC)
            assert 0 <= t.mutation_archetype < ARCHETYPE_COUNT
            assert len(t.appendage_variance) == t.appendage_count
            t.validate()

    def test_both_alignments_occur(self):
        alignments = {derive_traits(i).alignment for i in range(50)}
        assert alignments == {Alignment.SYMBIOTIC, Alignment.PARASITIC}

    def test_invalid_id_raises(self):
        with pytest.raises(TokenIdError):
            derive_traits(-1)
        with pytest.raises(TokenIdError):
            derive_traits(MAX_TOKEN_ID + 1)

    def test_decode_seed_matches_derive(self):
        assert decode_seed(42, token_seed(42)) == derive_traits(42)

    def test_decode_seed_bit_layout(self):
        seed = (1 << 8) | (3 << 12)   # 12544
        t = decode_seed(0, seed)
        assert t.hue == 12544 % 360
        assert t.appendage_count == APPENDAGE_MIN   # 12544 % 7 == 0
        assert t.alignment is Alignment.PARASITIC
        assert t.mutation_archetype == 3


class TestVariance:

    def test_in_range(self):
        seed = token_seed(7)
        for i in range(APPENDAGE_MAX):
            v = appendage_variance(seed, i)
            assert VARIANCE_MIN <= v.length <= VARIANCE_MAX
            assert VARIANCE_MIN <= v.head <= VARIANCE_MAX

    def test_nibble_extremes(self):
        # byte for appendage 0 lives at bits 16..23; 0xF0 -> short stalk, big head
        v = appendage_variance(0xF0 << 16, 0)
        assert v.length == pytest.approx(VARIANCE_MIN)
        assert v.head == pytest.approx(VARIANCE_MAX)

    def test_deterministic_per_index(self):
        seed = token_seed(3)
        assert appendage_variance(seed, 4) == appendage_variance(seed, 4)

    def test_index_out_of_range(self):
        with pytest.raises(IndexError):
            appendage_variance(token_seed(3), APPENDAGE_MAX)

    def test_record_uses_prefix(self):
        t = derive_traits(12)
        for i, v in enumerate(t.appendage_variance):
            assert v == appendage_variance(t.seed, i)


class TestLobePhases:

    def test_three_phases_in_range(self):
        phases = lobe_phases(token_seed(5))
        assert len(phases) == 3
        for p in phases:
            assert 0.0 <= p < 2.0 * math.pi

    def test_zero_seed(self):
        assert lobe_phases(0) == (0.0, 0.0, 0.0)


# =============================================================================
# NAMING
# =============================================================================

class TestArchetypeNames:

    def test_sets_are_disjoint(self):
        sym = set(ARCHETYPE_NAMES[Alignment.SYMBIOTIC])
        par = set(ARCHETYPE_NAMES[Alignment.PARASITIC])
        assert len(sym) == len(par) == ARCHETYPE_COUNT
        assert not sym & par

    def test_name_stays_in_alignment_set(self):
        for token_id in range(100):
            t = derive_traits(token_id)
            assert t.archetype_name in ARCHETYPE_NAMES[t.alignment]

    def test_out_of_range_archetype(self):
        with pytest.raises(TraitError):
            archetype_name(Alignment.SYMBIOTIC, ARCHETYPE_COUNT)

    def test_unknown_alignment(self):
        with pytest.raises(TraitError):
            archetype_name(2, 0)

    def test_strain_name(self):
        assert strain_name(42) == "Viral Strain #42"

    def test_attributes(self, parasitic_traits):
        attrs = {a["trait_type"]: a["value"] for a in trait_attributes(parasitic_traits)}
        assert attrs == {
            "Alignment": "Parasitic",
            "Mutation": parasitic_traits.archetype_name,
            "Hue": 8,
            "Spikes": 7,
        }


# =============================================================================
# VALIDATION
# =============================================================================

class TestTraitRecordValidation:

    def test_hue_out_of_range(self, symbiotic_traits):
        with pytest.raises(TraitError, match="hue"):
            dataclasses.replace(symbiotic_traits, hue=360).validate()

    def test_count_out_of_range(self, symbiotic_traits):
        bad = dataclasses.replace(
            symbiotic_traits,
            appendage_count=13,
            appendage_variance=(AppendageVariance(),) * 13,
        )
        with pytest.raises(TraitError, match="appendage_count"):
            bad.validate()

    def test_variance_length_mismatch(self, symbiotic_traits):
        bad = dataclasses.replace(symbiotic_traits, appendage_variance=())
        with pytest.raises(TraitError):
            bad.validate()

    def test_alignment_must_be_enum(self, symbiotic_traits):
        with pytest.raises(TraitError, match="alignment"):
            dataclasses.replace(symbiotic_traits, alignment=3).validate()

    def test_archetype_out_of_range(self, symbiotic_traits):
        with pytest.raises(TraitError, match="mutation_archetype"):
            dataclasses.replace(symbiotic_traits, mutation_archetype=4).validate()

    def test_trait_error_is_value_error(self):
        assert issubclass(TraitError, ValueError)


class TestTraitRecordDict:

    def test_round_trip(self, parasitic_traits):
        d = parasitic_traits.to_dict()
        assert d["alignment"] == "Parasitic"
        assert d["seed"].startswith("0x3e801d82")
        assert TraitRecord.from_dict(d) == parasitic_traits
