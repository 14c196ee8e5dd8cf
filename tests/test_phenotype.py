"""Tests for genome layout and phenotype decoding."""

import numpy as np
import pytest

from minions.actuators import ACTUATOR_COUNT, Actuator
from minions.config import EcosystemConfig
from minions.errors import MalformedGenotype
from minions.genotype import Genotype, uniform_layout
from minions.phenotype import Gender, decode, minion_layout

from helpers import genotype_with_gender


def _assert_within_bounds(phenotype, config):
    body = phenotype.body
    b = config.body
    assert b.segment_count[0] <= body.segment_count <= b.segment_count[1]
    assert b.limb_count[0] <= body.limb_count <= b.limb_count[1]
    assert b.limb_length[0] <= body.limb_length <= b.limb_length[1]
    assert b.joint_limit[0] <= body.joint_limit <= b.joint_limit[1]
    assert len(body.segment_masses) == body.segment_count
    assert all(b.segment_mass[0] <= m <= b.segment_mass[1] for m in body.segment_masses)

    v = phenotype.visual
    assert 0.0 <= v.hue <= 1.0
    assert 0.0 <= v.saturation <= 1.0
    assert 0.0 <= v.brightness <= 1.0

    r = config.brain.weight_range
    for arr in (phenotype.brain.input_hidden, phenotype.brain.hidden_bias,
                phenotype.brain.hidden_output, phenotype.brain.output_bias):
        assert np.all(np.abs(arr) <= r)

    assert np.all(phenotype.thresholds >= config.brain.threshold_min)
    assert np.all(phenotype.thresholds <= config.brain.threshold_max)


class TestLayout:

    def test_segments(self, layout):
        assert layout.segment_names == ["body", "appearance", "gender", "brain", "thresholds"]

    def test_length(self, layout):
        # body 30 + appearance 26 + gender 4 + brain (24+6+36+6)*8 + thresholds 6*8
        assert layout.length == 684

    def test_layout_follows_bit_widths(self):
        narrow = EcosystemConfig()
        narrow.genome.weight_bits = 4
        assert minion_layout(narrow).length < minion_layout(EcosystemConfig()).length


class TestDecode:

    def test_extreme_genotypes_decode(self, config, layout):
        for fill in (0, 1):
            g = Genotype(np.full(layout.length, fill, dtype=np.uint8), layout)
            _assert_within_bounds(decode(g, config), config)

    def test_random_genotypes_decode(self, config, layout, rng):
        for _ in range(100):
            _assert_within_bounds(decode(Genotype.random(layout, rng), config), config)

    def test_decoding_is_deterministic(self, config, layout, rng):
        g = Genotype.random(layout, rng)
        p1, p2 = decode(g, config), decode(g, config)
        assert p1.body == p2.body
        assert p1.visual == p2.visual
        assert p1.gender == p2.gender
        assert np.array_equal(p1.brain.hidden_output, p2.brain.hidden_output)
        assert np.array_equal(p1.thresholds, p2.thresholds)
        assert p1.genotype_id == g.id

    def test_brain_shapes(self, config, layout, rng):
        brain = decode(Genotype.random(layout, rng), config).brain
        hidden = config.brain.hidden_width
        assert brain.input_hidden.shape == (hidden, 4)
        assert brain.hidden_bias.shape == (hidden,)
        assert brain.hidden_output.shape == (ACTUATOR_COUNT, hidden)
        assert brain.output_bias.shape == (ACTUATOR_COUNT,)

    def test_phenotype_arrays_are_read_only(self, config, layout, rng):
        p = decode(Genotype.random(layout, rng), config)
        with pytest.raises(ValueError):
            p.thresholds[0] = 0.5
        with pytest.raises(ValueError):
            p.brain.input_hidden[0, 0] = 0.0

    @pytest.mark.parametrize("value,expected", [
        (0, Gender.ALPHA), (1, Gender.BETA), (6, Gender.GAMMA), (15, Gender.DELTA),
    ])
    def test_gender_reduces_modulo_four(self, config, layout, rng, value, expected):
        g = genotype_with_gender(layout, rng, value)
        assert decode(g, config).gender == expected

    def test_threshold_lookup(self, config, layout, rng):
        p = decode(Genotype.random(layout, rng), config)
        assert p.threshold(Actuator.EAT) == float(p.thresholds[Actuator.EAT.value])

    def test_foreign_layout_is_malformed(self, config, rng):
        foreign = Genotype.random(uniform_layout(64, 4), rng)
        with pytest.raises(MalformedGenotype):
            decode(foreign, config)

    def test_rgb(self, config, layout, rng):
        r, g, b = decode(Genotype.random(layout, rng), config).visual.get_rgb()
        assert all(0 <= c <= 255 for c in (r, g, b))
