"""
Reproduction - Spores, fertilization and hatching

PATHS:
1. Asexual: a mature minion with enough energy pays the spore cost and
   drops a spore carrying a mutated copy of its genotype.
2. Sexual: an unfertilized spore touched by a minion of a different
   gender is fertilized; its genotype becomes the crossover of the
   spore's and the toucher's.
3. Hatching: when the countdown reaches zero a fertilized spore hatches
   into exactly one minion; an unfertilized one expires.

Unmet preconditions are not errors; they return None.
"""

from dataclasses import replace
from typing import Optional

import numpy as np

from .config import EcosystemConfig
from .genotype import crossover, mutate, sample_mutation_count
from .organisms import Minion, Spore, SporeState


def can_reproduce(minion: Minion, config: EcosystemConfig) -> bool:
    """Mature, alive, and holding at least the reproduction energy reserve."""
    cfg = config.reproduction
    return (minion.is_alive and minion.is_mature
            and minion.energy >= max(cfg.reproduce_min_energy, cfg.spore_cost))


def create_spore(minion: Minion, spore_id: int,
                 rng: np.random.Generator,
                 config: EcosystemConfig) -> Optional[Spore]:
    """
    Asexual reproduction step.

    Returns:
        The new spore, or None if the minion is immature, dead, or short
        of energy. The spore cost is deducted from the parent.
    """
    cfg = config.reproduction
    if not can_reproduce(minion, config):
        return None

    count = sample_mutation_count(rng, config.genome)
    genotype = mutate(minion.genotype, count, rng)

    minion.vitals.spend(cfg.spore_cost)
    minion.spores_created += 1

    return Spore(
        id=spore_id,
        genotype=genotype,
        parent_id=minion.id,
        parent_gender=minion.gender,
        lineage_id=minion.lineage_id,
        generation=minion.generation + 1,
        countdown=cfg.hatch_ticks,
        energy=cfg.spore_cost,
    )


def can_fertilize(spore: Spore, minion: Minion) -> bool:
    """A living minion of another gender may fertilize a still-unfertilized spore."""
    return (spore.state == SporeState.UNFERTILIZED
            and minion.is_alive
            and minion.gender != spore.parent_gender)


def fertilize(spore: Spore, minion: Minion,
              rng: np.random.Generator,
              policy: str = "segment") -> Optional[Spore]:
    """
    Fertilize a spore on contact.

    Returns:
        A fertilized copy of the spore, or None (no-op) if the
        preconditions do not hold.
    """
    if not can_fertilize(spore, minion):
        return None
    child = crossover(spore.genotype, minion.genotype, rng, policy=policy)
    return replace(spore, genotype=child, state=SporeState.FERTILIZED, partner_id=minion.id)


def advance_spore(spore: Spore) -> SporeState:
    """
    Count a pending spore down by one tick.

    Returns:
        The spore's state after the tick (HATCHED / EXPIRED on reaching zero)
    """
    if not spore.is_pending:
        return spore.state
    spore.countdown -= 1
    if spore.countdown <= 0:
        spore.countdown = 0
        spore.state = SporeState.HATCHED if spore.state == SporeState.FERTILIZED else SporeState.EXPIRED
    return spore.state


def hatch(spore: Spore, minion_id: int, config: EcosystemConfig, tick: int = 0) -> Minion:
    """Create the minion a hatched spore produces. Its genotype is the spore's, unchanged."""
    if spore.state != SporeState.HATCHED:
        raise ValueError(f"Spore {spore.id} is {spore.state.value}, only hatched spores produce minions")

    parents = (spore.parent_id,) if spore.partner_id is None else (spore.parent_id, spore.partner_id)
    return Minion(
        minion_id=minion_id,
        genotype=spore.genotype,
        config=config,
        energy=spore.energy,
        lineage_id=spore.lineage_id,
        generation=spore.generation,
        parent_ids=parents,
        born_tick=tick,
    )
