"""Shared fixtures for the minions test suite."""

import numpy as np
import pytest

from minions.config import ActuatorCosts, EcosystemConfig
from minions.phenotype import minion_layout


@pytest.fixture
def config():
    return EcosystemConfig()


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def layout(config):
    return minion_layout(config)


@pytest.fixture
def quiet_config():
    """No emitters, no random founders, no ticker; worlds are built by hand."""
    cfg = EcosystemConfig()
    cfg.world.emitters = []
    cfg.world.initial_population = 0
    cfg.run.ticker_interval = 0
    return cfg


@pytest.fixture
def free_config(quiet_config):
    """Quiet world where nothing costs energy."""
    quiet_config.costs = ActuatorCosts(upkeep=0.0, left_rudder=0.0, right_rudder=0.0,
                                       thruster=0.0, brake=0.0, eat=0.0)
    return quiet_config
