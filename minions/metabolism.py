"""
Metabolism & Lifecycle - Energy pool, growth and death

A minion's life is a small state machine:

    IMMATURE --(growth >= maturity threshold)--> MATURE
    IMMATURE / MATURE --(energy reaches 0)--> DEAD   (terminal)

Energy only enters through eating and only leaves through upkeep,
actuator costs and spore creation. It is clamped at zero, and reaching
zero kills the minion in the same call that spent it.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import List

from .config import MetabolismConfig


class MinionState(Enum):
    """Lifecycle state of a minion."""
    IMMATURE = "immature"
    MATURE = "mature"
    DEAD = "dead"


@dataclass
class Vitals:
    """
    Energy, growth and lifecycle state of one minion.

    Invariants:
    - energy >= 0
    - growth never decreases
    - DEAD is terminal
    """
    energy: float
    max_energy: float
    growth: float = 0.0
    state: MinionState = MinionState.IMMATURE
    heartbeat: float = 0.0              # 0-1 phase, display only

    @property
    def is_alive(self) -> bool:
        return self.state != MinionState.DEAD

    @property
    def is_mature(self) -> bool:
        return self.state == MinionState.MATURE

    def spend(self, amount: float) -> bool:
        """
        Deduct energy.

        Returns:
            True if this call killed the minion
        """
        if not self.is_alive:
            return False
        self.energy = max(0.0, self.energy - max(0.0, amount))
        if self.energy <= 0.0:
            self.die()
            return True
        return False

    def feed(self, nutrition: float, config: MetabolismConfig) -> float:
        """
        Digest a resource: gain energy (up to capacity) and growth (up to cap).

        Returns:
            Energy actually gained
        """
        if not self.is_alive or nutrition <= 0:
            return 0.0

        gained = min(nutrition * config.digestion_efficiency, self.max_energy - self.energy)
        gained = max(0.0, gained)
        self.energy += gained

        self.growth = min(config.growth_cap, self.growth + nutrition * config.growth_per_nutrition)
        if self.state == MinionState.IMMATURE and self.growth >= config.maturity_threshold:
            self.state = MinionState.MATURE

        return gained

    def die(self):
        self.energy = 0.0
        self.state = MinionState.DEAD

    def advance_heartbeat(self, dt: float, config: MetabolismConfig, speed: float = 1.0):
        """Heartbeat runs faster with more energy, clamped to a sane band."""
        if not self.is_alive:
            return
        rate = min(max(self.energy, config.heartbeat_energy_min), config.heartbeat_energy_max)
        self.heartbeat = math.fmod(self.heartbeat + dt * speed * config.heartbeat_scale * rate, 1.0)


def energy_capacity(total_mass: float, config: MetabolismConfig) -> float:
    """Bigger bodies store more energy."""
    return total_mass * config.max_energy_per_mass


def corpse_nutrition(total_mass: float, config: MetabolismConfig) -> List[float]:
    """
    Nutrition values of the resources released by a dead minion.

    One resource per unit of released mass (at least one), each carrying
    `corpse_chunk` nutrition. Nothing is released when corpse_fraction is 0.
    """
    if config.corpse_fraction <= 0 or config.corpse_chunk <= 0:
        return []
    pieces = max(1, int(round(config.corpse_fraction * total_mass)))
    return [config.corpse_chunk] * pieces
