"""Tests for the bit genome and its variation operators."""

import numpy as np
import pytest

from minions.config import GenomeConfig
from minions.errors import MalformedGenotype
from minions.genotype import (
    GeneField, Genotype, GenomeLayout, Segment,
    crossover, flip_bits, mutate, sample_mutation_count, uniform_layout,
)


@pytest.fixture
def layout64():
    return uniform_layout(64, 4)


class TestGenotype:

    def test_wrong_length_is_malformed(self, layout64):
        with pytest.raises(MalformedGenotype) as excinfo:
            Genotype(np.zeros(63, dtype=np.uint8), layout64)
        assert excinfo.value.expected_length == 64
        assert excinfo.value.actual_length == 63

    def test_non_binary_is_malformed(self, layout64):
        bits = np.zeros(64, dtype=np.uint8)
        bits[5] = 2
        with pytest.raises(MalformedGenotype):
            Genotype(bits, layout64)

    def test_bad_bitstring_is_malformed(self, layout64):
        with pytest.raises(MalformedGenotype):
            Genotype.from_bitstring("01" * 31 + "2a", layout64)
        with pytest.raises(MalformedGenotype):
            Genotype.from_bitstring("0" * 65, layout64)

    def test_malformed_is_a_value_error(self, layout64):
        with pytest.raises(ValueError):
            Genotype([0, 1], layout64)

    def test_bits_are_read_only(self, layout64, rng):
        g = Genotype.random(layout64, rng)
        with pytest.raises(ValueError):
            g.bits[0] = 1

    def test_bitstring_round_trip(self, layout64, rng):
        g = Genotype.random(layout64, rng)
        again = Genotype.from_bitstring(g.to_bitstring(), layout64)
        assert again == g
        assert again.id == g.id
        assert hash(again) == hash(g)

    def test_field_values_are_msb_first(self):
        layout = GenomeLayout([Segment("only", (GeneField("x", count=2, bits=4),))])
        g = Genotype.from_bitstring("10000011", layout)
        assert g.field_values("x").tolist() == [8, 3]
        assert g.field_value("x") == 8

    def test_layout_rejects_duplicate_fields(self):
        with pytest.raises(ValueError):
            GenomeLayout([
                Segment("a", (GeneField("x"),)),
                Segment("b", (GeneField("x"),)),
            ])

    def test_fingerprint_tracks_layout(self):
        assert uniform_layout(64, 4).fingerprint == uniform_layout(64, 4).fingerprint
        assert uniform_layout(64, 4).fingerprint != uniform_layout(64, 8).fingerprint


class TestMutate:

    def test_flips_exactly_k_distinct_bits(self, layout64, rng):
        for _ in range(200):
            g = Genotype.random(layout64, rng)
            child = mutate(g, 3, rng)
            assert g.hamming(child) == 3

    def test_zero_mutations_is_identity(self, layout64, rng):
        g = Genotype.random(layout64, rng)
        assert mutate(g, 0, rng) == g

    def test_parent_is_untouched(self, layout64, rng):
        g = Genotype.random(layout64, rng)
        before = g.to_bitstring()
        mutate(g, 10, rng)
        assert g.to_bitstring() == before

    def test_out_of_range_counts_are_clamped(self, layout64, rng):
        g = Genotype.random(layout64, rng)
        assert mutate(g, -3, rng) == g
        assert g.hamming(mutate(g, 1000, rng)) == 64

    def test_flip_bits_wraps_and_dedups(self, layout64):
        g = Genotype(np.zeros(64, dtype=np.uint8), layout64)
        child = flip_bits(g, [0, 64, 3, 3])
        assert child.bits[0] == 1
        assert child.bits[3] == 1
        assert g.hamming(child) == 2


class TestMutationCount:

    def test_poisson_counts_within_bounds(self, rng):
        cfg = GenomeConfig()
        counts = [sample_mutation_count(rng, cfg) for _ in range(2000)]
        assert min(counts) >= cfg.mutation_min
        assert max(counts) <= cfg.mutation_max
        assert 0.8 < np.mean(counts) < 2.0

    def test_uniform_counts_within_bounds(self, rng):
        cfg = GenomeConfig(mutation_distribution="uniform", mutation_min=1, mutation_max=2)
        counts = {sample_mutation_count(rng, cfg) for _ in range(500)}
        assert counts == {1, 2}


class TestCrossover:

    @pytest.fixture
    def parents(self):
        layout = uniform_layout(12, 3)
        a = Genotype(np.zeros(12, dtype=np.uint8), layout)
        b = Genotype(np.ones(12, dtype=np.uint8), layout)
        return a, b

    def test_explicit_segment_picks(self, parents):
        a, b = parents
        child = crossover(a, b, picks=[0, 1, 1])
        assert child.to_bitstring() == "0000" + "1111" + "1111"
        assert np.array_equal(child.segment_bits("s0"), a.segment_bits("s0"))

    def test_each_segment_comes_whole_from_one_parent(self, parents, rng):
        a, b = parents
        for _ in range(50):
            child = crossover(a, b, rng)
            for name in child.layout.segment_names:
                seg = child.segment_bits(name)
                assert seg.min() == seg.max()

    def test_bit_policy_takes_each_bit_from_a_parent(self, rng):
        layout = uniform_layout(64, 4)
        a = Genotype.random(layout, rng)
        b = Genotype.random(layout, rng)
        child = crossover(a, b, rng, policy="bit")
        assert np.all((child.bits == a.bits) | (child.bits == b.bits))

    def test_all_zero_picks_reproduce_parent_a(self, parents):
        a, b = parents
        assert crossover(a, b, picks=[0, 0, 0]) == a

    def test_mismatched_layouts_are_malformed(self, rng):
        a = Genotype.random(uniform_layout(12, 3), rng)
        b = Genotype.random(uniform_layout(16, 4), rng)
        with pytest.raises(MalformedGenotype):
            crossover(a, b, rng)

    def test_unknown_policy(self, parents, rng):
        a, b = parents
        with pytest.raises(ValueError):
            crossover(a, b, rng, policy="uniform")

    def test_wrong_number_of_picks(self, parents):
        a, b = parents
        with pytest.raises(ValueError):
            crossover(a, b, picks=[0, 1])
