"""Tests for mapping brain outputs to actions and costs."""

import numpy as np
import pytest

from minions.actuators import Actuator, engagement, idle_plan, map_outputs
from minions.config import ActuatorCosts, ReproductionConfig


def _outputs(**values):
    out = np.full(6, -1.0)
    for name, v in values.items():
        out[Actuator[name.upper()].value] = v
    return out


@pytest.fixture
def costs():
    return ActuatorCosts()


@pytest.fixture
def repro():
    return ReproductionConfig()


THRESHOLDS = np.full(6, 0.5)


class TestEngagement:

    def test_below_or_at_threshold_is_inert(self):
        assert engagement(0.2, 0.5) == 0.0
        assert engagement(0.5, 0.5) == 0.0

    def test_excess_is_rescaled(self):
        assert engagement(0.75, 0.5) == pytest.approx(0.5)
        assert engagement(1.0, 0.5) == pytest.approx(1.0)


class TestMapOutputs:

    def test_idle_costs_upkeep_only(self, costs, repro):
        plan = map_outputs(_outputs(), THRESHOLDS, 50.0, True, costs, repro)
        assert plan.is_idle
        assert plan.energy_cost == pytest.approx(costs.upkeep)
        assert plan.energy_cost == idle_plan(costs).energy_cost

    def test_full_thrust_costs(self, costs, repro):
        plan = map_outputs(_outputs(thruster=1.0), THRESHOLDS, 50.0, False, costs, repro)
        assert plan.thrust == pytest.approx(1.0)
        assert plan.energy_cost == pytest.approx(costs.upkeep + costs.thruster)

    def test_rudder_is_right_minus_left(self, costs, repro):
        plan = map_outputs(_outputs(left_rudder=1.0, right_rudder=0.75), THRESHOLDS, 50.0, False,
                           costs, repro)
        assert plan.rudder == pytest.approx(-0.5)

    def test_eat_needs_minimum_energy(self, repro):
        costs = ActuatorCosts(eat_min_energy=5.0)
        assert map_outputs(_outputs(eat=0.9), THRESHOLDS, 10.0, False, costs, repro).eat
        assert not map_outputs(_outputs(eat=0.9), THRESHOLDS, 1.0, False, costs, repro).eat

    def test_eat_adds_its_cost(self, costs, repro):
        plan = map_outputs(_outputs(eat=0.9), THRESHOLDS, 10.0, False, costs, repro)
        assert plan.energy_cost == pytest.approx(costs.upkeep + costs.eat)

    def test_immature_minions_never_reproduce(self, costs, repro):
        plan = map_outputs(_outputs(reproduce=1.0), THRESHOLDS, 100.0, False, costs, repro)
        assert not plan.reproduce

    def test_reproduce_needs_energy(self, costs, repro):
        assert map_outputs(_outputs(reproduce=1.0), THRESHOLDS, 100.0, True, costs, repro).reproduce
        assert not map_outputs(_outputs(reproduce=1.0), THRESHOLDS, 10.0, True, costs, repro).reproduce
