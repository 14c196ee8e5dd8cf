"""Tests for the decision network."""

import numpy as np
import pytest

from minions.genotype import Genotype
from minions.neural import evaluate
from minions.phenotype import BrainParams, decode


def _zero_brain(output_bias):
    return BrainParams(
        input_hidden=np.zeros((2, 4)),
        hidden_bias=np.zeros(2),
        hidden_output=np.zeros((6, 2)),
        output_bias=np.asarray(output_bias, dtype=np.float64),
    )


def test_output_is_tanh_of_bias_for_zero_weights():
    brain = _zero_brain(np.full(6, 0.5))
    out = evaluate(brain, np.array([0.3, -0.2, 0.9, 1.0]))
    assert np.allclose(out, np.tanh(0.5))


def test_outputs_are_bounded(config, layout, rng):
    brain = decode(Genotype.random(layout, rng), config).brain
    for _ in range(50):
        out = evaluate(brain, rng.uniform(-1, 1, size=4))
        assert out.shape == (6,)
        assert np.all(np.abs(out) < 1.0)


def test_evaluation_is_pure(config, layout, rng):
    brain = decode(Genotype.random(layout, rng), config).brain
    weights = brain.hidden_output.copy()
    x = np.array([0.1, 0.2, 0.3, 0.4])
    first = evaluate(brain, x)
    evaluate(brain, -x)
    assert np.array_equal(evaluate(brain, x), first)
    assert np.array_equal(brain.hidden_output, weights)


def test_wrong_input_width():
    with pytest.raises(ValueError):
        evaluate(_zero_brain(np.zeros(6)), np.zeros(3))
