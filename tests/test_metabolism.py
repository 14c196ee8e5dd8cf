"""Tests for the energy pool and lifecycle state machine."""

import pytest

from minions.config import MetabolismConfig
from minions.metabolism import MinionState, Vitals, corpse_nutrition, energy_capacity


@pytest.fixture
def cfg():
    return MetabolismConfig()


class TestVitals:

    def test_upkeep_drains_to_death_on_tenth_tick(self):
        vitals = Vitals(energy=10.0, max_energy=100.0)
        for tick in range(1, 11):
            died = vitals.spend(1.0)
            assert died == (tick == 10)
        assert vitals.state == MinionState.DEAD
        assert vitals.energy == 0.0

    def test_energy_never_goes_negative(self):
        vitals = Vitals(energy=1.0, max_energy=100.0)
        assert vitals.spend(5.0)
        assert vitals.energy == 0.0

    def test_death_is_terminal(self, cfg):
        vitals = Vitals(energy=1.0, max_energy=100.0)
        vitals.spend(1.0)
        assert vitals.feed(50.0, cfg) == 0.0
        assert not vitals.spend(1.0)
        assert vitals.state == MinionState.DEAD

    def test_feeding_caps_at_capacity(self, cfg):
        vitals = Vitals(energy=95.0, max_energy=100.0)
        assert vitals.feed(8.0, cfg) == pytest.approx(5.0)
        assert vitals.energy == pytest.approx(100.0)

    def test_growth_unlocks_maturity(self, cfg):
        vitals = Vitals(energy=10.0, max_energy=100.0)
        vitals.feed(5.0, cfg)
        assert vitals.state == MinionState.IMMATURE
        vitals.feed(5.0, cfg)
        assert vitals.state == MinionState.MATURE
        assert vitals.is_mature

    def test_growth_is_capped(self, cfg):
        vitals = Vitals(energy=10.0, max_energy=100.0)
        for _ in range(100):
            vitals.feed(10.0, cfg)
        assert vitals.growth == pytest.approx(cfg.growth_cap)

    def test_heartbeat_phase(self, cfg):
        vitals = Vitals(energy=120.0, max_energy=200.0)
        for _ in range(500):
            vitals.advance_heartbeat(1.0 / 60.0, cfg)
            assert 0.0 <= vitals.heartbeat < 1.0


class TestCorpse:

    def test_released_chunks(self, cfg):
        assert corpse_nutrition(4.0, cfg) == [cfg.corpse_chunk, cfg.corpse_chunk]

    def test_tiny_bodies_release_one_chunk(self, cfg):
        assert len(corpse_nutrition(0.5, cfg)) == 1

    def test_disabled(self):
        assert corpse_nutrition(4.0, MetabolismConfig(corpse_fraction=0.0)) == []


def test_capacity_scales_with_mass(cfg):
    assert energy_capacity(2.0, cfg) == pytest.approx(2 * cfg.max_energy_per_mass)
