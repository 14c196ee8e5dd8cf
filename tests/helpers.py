"""Builders shared by several test modules."""

from minions.genotype import Genotype
from minions.metabolism import MinionState


def genotype_with_gender(layout, rng, gender_value: int) -> Genotype:
    """Random genotype whose 4-bit gender field holds `gender_value`."""
    bits = Genotype.random(layout, rng).bits.copy()
    width = layout.field("gender").bits
    bits[layout.field_slice("gender")] = [(gender_value >> (width - 1 - i)) & 1 for i in range(width)]
    return Genotype(bits, layout)


def make_mature(minion, energy: float = 50.0, capacity: float = 100.0):
    """Force a minion into the mature state with a known energy budget."""
    minion.vitals.max_energy = capacity
    minion.vitals.energy = energy
    minion.vitals.state = MinionState.MATURE
    return minion
