"""
Decision network evaluation.

A fixed 3-layer feed-forward pass with tanh saturation. The function is
pure: parameters come from the phenotype, nothing is stored between
calls, and nothing is ever updated.
"""

import numpy as np

from .phenotype import BrainParams


def evaluate(brain: BrainParams, inputs: np.ndarray) -> np.ndarray:
    """
    Run one forward pass.

    Args:
        brain: Phenotype-supplied weights and biases
        inputs: Sensor vector of width brain.input_width

    Returns:
        Output vector in (-1, 1), one entry per actuator
    """
    x = np.asarray(inputs, dtype=np.float64)
    if x.shape != (brain.input_width,):
        raise ValueError(f"Brain expects {brain.input_width} inputs, got shape {x.shape}")

    hidden = np.tanh(brain.input_hidden @ x + brain.hidden_bias)
    return np.tanh(brain.hidden_output @ hidden + brain.output_bias)
