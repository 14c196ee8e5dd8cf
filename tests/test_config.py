"""Tests for the configuration tree."""

import json

import pytest

from minions.config import EcosystemConfig, EmitterConfig


class TestEcosystemConfig:

    def test_defaults(self, config):
        assert config.genome.crossover_policy == "segment"
        assert config.genome.mutation_distribution == "poisson"
        assert config.brain.hidden_width == 6
        assert config.run.workers == 1
        assert len(config.world.emitters) == 2

    def test_dict_round_trip(self, config):
        config.run.seed = 42
        config.world.emitters = [EmitterConfig(x=1.0, y=2.0, rate=0.5, spread=3.0)]
        again = EcosystemConfig.from_dict(config.to_dict())
        assert again == config
        assert isinstance(again.body.segment_count, tuple)
        assert isinstance(again.world.emitters[0], EmitterConfig)

    def test_to_dict_is_json_ready(self, config):
        assert json.loads(json.dumps(config.to_dict())) == config.to_dict()

    def test_file_round_trip(self, config, tmp_path):
        config.costs.upkeep = 0.2
        path = config.to_json_file(tmp_path / "run.json")
        assert EcosystemConfig.from_json_file(path) == config

    def test_partial_overrides_keep_defaults(self):
        cfg = EcosystemConfig.from_dict({'run': {'seed': 9}, 'genome': {'crossover_policy': 'bit'}})
        assert cfg.run.seed == 9
        assert cfg.genome.crossover_policy == "bit"
        assert cfg.run.workers == 1
        assert cfg.world.width == 100.0

    def test_unknown_section(self):
        with pytest.raises(ValueError, match="section"):
            EcosystemConfig.from_dict({'weather': {}})

    def test_unknown_key(self):
        with pytest.raises(ValueError, match="hidden_layers"):
            EcosystemConfig.from_dict({'brain': {'hidden_layers': 3}})

    @pytest.mark.parametrize("overrides", [
        {'genome': {'crossover_policy': 'two-point'}},
        {'genome': {'mutation_distribution': 'gaussian'}},
        {'genome': {'mutation_min': 3, 'mutation_max': 1}},
        {'brain': {'threshold_max': 1.0}},
        {'world': {'initial_energy': 0.0}},
        {'run': {'workers': 0}},
        {'run': {'speed_factors': []}},
    ])
    def test_invalid_values(self, overrides):
        with pytest.raises(ValueError):
            EcosystemConfig.from_dict(overrides)
