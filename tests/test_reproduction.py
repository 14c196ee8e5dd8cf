"""Tests for spores: creation, fertilization, hatching and expiry."""

import numpy as np
import pytest

from minions.organisms import Minion, SporeState
from minions.reproduction import (
    advance_spore, can_fertilize, create_spore, fertilize, hatch,
)

from helpers import genotype_with_gender, make_mature


def _minion(config, genotype, minion_id=1, energy=30.0):
    return Minion(minion_id, genotype, config, energy=energy, lineage_id="L0001")


@pytest.fixture
def parent(config, layout, rng):
    return make_mature(_minion(config, genotype_with_gender(layout, rng, 0)))


@pytest.fixture
def stranger(config, layout, rng):
    return _minion(config, genotype_with_gender(layout, rng, 1), minion_id=2)


class TestCreateSpore:

    def test_immature_minion_cannot_reproduce(self, config, layout, rng):
        m = _minion(config, genotype_with_gender(layout, rng, 0))
        m.vitals.max_energy = 100.0
        m.vitals.energy = 80.0
        assert create_spore(m, 99, rng, config) is None
        assert m.energy == 80.0

    def test_low_energy_cannot_reproduce(self, parent, config, rng):
        parent.vitals.energy = 25.0
        assert create_spore(parent, 99, rng, config) is None

    def test_spore_cost_and_inheritance(self, parent, config, rng):
        spore = create_spore(parent, 99, rng, config)
        assert spore.id == 99
        assert spore.parent_id == parent.id
        assert spore.lineage_id == parent.lineage_id
        assert spore.generation == parent.generation + 1
        assert spore.countdown == config.reproduction.hatch_ticks
        assert spore.state == SporeState.UNFERTILIZED
        assert parent.energy == pytest.approx(50.0 - config.reproduction.spore_cost)
        assert parent.spores_created == 1
        assert spore.genotype.hamming(parent.genotype) <= config.genome.mutation_max


class TestFertilize:

    def test_same_gender_is_a_no_op(self, parent, config, rng):
        spore = create_spore(parent, 99, rng, config)
        assert not can_fertilize(spore, parent)
        assert fertilize(spore, parent, rng) is None

    def test_different_gender_fertilizes(self, parent, stranger, config, rng):
        spore = create_spore(parent, 99, rng, config)
        result = fertilize(spore, stranger, rng)
        assert result.state == SporeState.FERTILIZED
        assert result.partner_id == stranger.id
        assert spore.state == SporeState.UNFERTILIZED

        for name in result.genotype.layout.segment_names:
            seg = result.genotype.segment_bits(name)
            assert (np.array_equal(seg, spore.genotype.segment_bits(name))
                    or np.array_equal(seg, stranger.genotype.segment_bits(name)))

    def test_fertilized_spore_cannot_be_fertilized_again(self, parent, stranger, config, rng):
        spore = fertilize(create_spore(parent, 99, rng, config), stranger, rng)
        assert fertilize(spore, stranger, rng) is None


class TestLifecycle:

    def test_unfertilized_spore_expires(self, parent, config, rng):
        config.reproduction.hatch_ticks = 3
        spore = create_spore(parent, 99, rng, config)
        states = [advance_spore(spore) for _ in range(3)]
        assert states == [SporeState.UNFERTILIZED, SporeState.UNFERTILIZED, SporeState.EXPIRED]
        assert advance_spore(spore) == SporeState.EXPIRED

    def test_fertilized_spore_hatches_exactly_one_minion(self, parent, stranger, config, rng):
        config.reproduction.hatch_ticks = 2
        spore = fertilize(create_spore(parent, 99, rng, config), stranger, rng)
        advance_spore(spore)
        assert advance_spore(spore) == SporeState.HATCHED

        child = hatch(spore, 100, config, tick=7)
        assert child.id == 100
        assert child.genotype == spore.genotype
        assert child.lineage_id == parent.lineage_id
        assert child.generation == 1
        assert child.parent_ids == (parent.id, stranger.id)
        assert child.born_tick == 7
        assert child.energy == pytest.approx(config.reproduction.spore_cost)

    def test_hatching_a_pending_spore_fails(self, parent, config, rng):
        spore = create_spore(parent, 99, rng, config)
        with pytest.raises(ValueError):
            hatch(spore, 100, config)
