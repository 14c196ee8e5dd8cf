"""
Actuator Mapping - Brain outputs to actions and energy costs

Each brain output is compared against the minion's own personality
threshold for that actuator. Outputs above threshold engage the
actuator in proportion to the excess; everything else stays inert.
Eat and reproduce are gated the same way plus an energy precondition,
and reproduce additionally requires maturity.

Every tick costs at least the idle upkeep.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict

import numpy as np

from .config import ActuatorCosts, ReproductionConfig


class Actuator(Enum):
    """Brain output slots, in network output order."""
    LEFT_RUDDER = 0
    RIGHT_RUDDER = 1
    THRUSTER = 2
    BRAKE = 3
    EAT = 4
    REPRODUCE = 5


ACTUATOR_COUNT = len(Actuator)
MOTOR_ACTUATORS = (Actuator.LEFT_RUDDER, Actuator.RIGHT_RUDDER, Actuator.THRUSTER, Actuator.BRAKE)


@dataclass(frozen=True)
class ActionPlan:
    """What a minion does this tick and what it pays for it."""
    intensities: Dict[Actuator, float]  # 0-1 per motor actuator
    eat: bool = False
    reproduce: bool = False
    energy_cost: float = 0.0

    @property
    def rudder(self) -> float:
        """Signed steering command, positive turns right."""
        return self.intensities[Actuator.RIGHT_RUDDER] - self.intensities[Actuator.LEFT_RUDDER]

    @property
    def thrust(self) -> float:
        return self.intensities[Actuator.THRUSTER]

    @property
    def brake(self) -> float:
        return self.intensities[Actuator.BRAKE]

    @property
    def is_idle(self) -> bool:
        return not (self.eat or self.reproduce or any(v > 0 for v in self.intensities.values()))


def idle_plan(costs: ActuatorCosts) -> ActionPlan:
    """Plan with nothing engaged; still pays upkeep."""
    return ActionPlan(intensities={a: 0.0 for a in MOTOR_ACTUATORS}, energy_cost=costs.upkeep)


def engagement(output: float, threshold: float) -> float:
    """Intensity of an actuator: the excess over threshold rescaled to [0, 1]."""
    if output <= threshold:
        return 0.0
    return float(min(1.0, (output - threshold) / (1.0 - threshold)))


def map_outputs(outputs: np.ndarray,
                thresholds: np.ndarray,
                energy: float,
                is_mature: bool,
                costs: ActuatorCosts,
                reproduction: ReproductionConfig) -> ActionPlan:
    """
    Turn brain outputs into an action plan.

    Args:
        outputs: Brain output vector, one entry per Actuator
        thresholds: Personality thresholds, one per Actuator
        energy: Current energy of the minion
        is_mature: Whether the reproduce action is unlocked
        costs: Per-actuator costs
        reproduction: Supplies the reproduce energy precondition

    Returns:
        ActionPlan with the tick's total energy cost. The spore cost
        itself is paid when the spore is created, not here.
    """
    intensities = {
        a: engagement(float(outputs[a.value]), float(thresholds[a.value]))
        for a in MOTOR_ACTUATORS
    }

    cost = costs.upkeep
    cost += intensities[Actuator.LEFT_RUDDER] * costs.left_rudder
    cost += intensities[Actuator.RIGHT_RUDDER] * costs.right_rudder
    cost += intensities[Actuator.THRUSTER] * costs.thruster
    cost += intensities[Actuator.BRAKE] * costs.brake

    eat = (engagement(float(outputs[Actuator.EAT.value]), float(thresholds[Actuator.EAT.value])) > 0
           and energy >= costs.eat_min_energy)
    if eat:
        cost += costs.eat

    reproduce = (is_mature
                 and engagement(float(outputs[Actuator.REPRODUCE.value]),
                                float(thresholds[Actuator.REPRODUCE.value])) > 0
                 and energy >= max(reproduction.reproduce_min_energy, reproduction.spore_cost))

    return ActionPlan(intensities=intensities, eat=eat, reproduce=reproduce, energy_cost=cost)
