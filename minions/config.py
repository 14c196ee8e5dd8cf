"""
Ecosystem Configuration

All tunable constants of the simulation live in one dataclass tree so a
run can be described, saved and restored as a single JSON document.

USAGE:
    from minions.config import EcosystemConfig

    config = EcosystemConfig()
    config.run.seed = 42

    config = EcosystemConfig.from_json_file("experiment.json")
"""

import json
from dataclasses import dataclass, field, fields, asdict
from pathlib import Path
from typing import Any, Dict, List, Tuple


CROSSOVER_POLICIES = ("segment", "bit")
MUTATION_DISTRIBUTIONS = ("poisson", "uniform")


# =============================================================================
# GENETICS
# =============================================================================

@dataclass
class GenomeConfig:
    """Bit widths and variation operators of the genetic encoding."""
    weight_bits: int = 8                # Bits per brain weight / bias
    threshold_bits: int = 8             # Bits per personality threshold
    crossover_policy: str = "segment"   # "segment" or "bit"
    mutation_distribution: str = "poisson"
    mutation_mean: float = 1.5          # Poisson mean of flipped bits per spore
    mutation_min: int = 0
    mutation_max: int = 4


@dataclass
class BodyBounds:
    """Simulation-safe ranges for body-plan parameters (inclusive)."""
    segment_count: Tuple[int, int] = (1, 6)
    limb_count: Tuple[int, int] = (0, 4)
    limb_length: Tuple[float, float] = (0.2, 1.5)
    joint_limit: Tuple[float, float] = (0.1, 1.5)     # Radians
    segment_mass: Tuple[float, float] = (0.5, 2.5)
    mass_taper: Tuple[float, float] = (0.5, 1.0)      # Mass ratio between consecutive segments


@dataclass
class BrainConfig:
    """Fixed topology of the decision network."""
    hidden_width: int = 6
    weight_range: float = 2.0           # Weights map into [-range, +range]
    threshold_min: float = 0.0
    threshold_max: float = 0.9


# =============================================================================
# METABOLISM AND REPRODUCTION
# =============================================================================

@dataclass
class ActuatorCosts:
    """Energy cost per tick of each actuator at full intensity."""
    upkeep: float = 0.05                # Paid every tick, even when idle
    left_rudder: float = 0.02
    right_rudder: float = 0.02
    thruster: float = 0.08
    brake: float = 0.01
    eat: float = 0.01
    eat_min_energy: float = 0.0


@dataclass
class MetabolismConfig:
    """Energy pool, growth and death."""
    max_energy_per_mass: float = 40.0
    digestion_efficiency: float = 1.0
    growth_per_nutrition: float = 0.1
    growth_cap: float = 2.0
    maturity_threshold: float = 1.0
    corpse_fraction: float = 0.5        # Share of body mass released on death
    corpse_chunk: float = 2.0           # Nutrition carried by each released resource
    heartbeat_scale: float = 1.0 / 60.0
    heartbeat_energy_min: float = 50.0
    heartbeat_energy_max: float = 200.0


@dataclass
class ReproductionConfig:
    """Spore creation, fertilization and hatching."""
    spore_cost: float = 20.0            # Energy moved from parent into the spore
    reproduce_min_energy: float = 30.0
    hatch_ticks: int = 120
    spore_radius: float = 0.5


# =============================================================================
# WORLD AND RUN
# =============================================================================

@dataclass
class EmitterConfig:
    """A long-lived resource source."""
    x: float = 0.0
    y: float = 0.0
    rate: float = 0.2                   # Resources per tick (fractional rates accumulate)
    spread: float = 8.0                 # Spawn radius around the emitter


@dataclass
class WorldConfig:
    """Arena, resources and the reference physics."""
    width: float = 100.0
    height: float = 100.0
    sensor_radius: float = 25.0
    contact_scale: float = 0.5          # Body radius = contact_scale * body length
    resource_radius: float = 0.5
    resource_nutrition: float = 8.0
    resource_lifespan: int = 600
    max_resources: int = 400
    emitters: List[EmitterConfig] = field(default_factory=lambda: [
        EmitterConfig(x=-25.0, y=0.0),
        EmitterConfig(x=25.0, y=0.0),
    ])
    initial_population: int = 40
    initial_energy: float = 30.0
    dt: float = 1.0 / 60.0
    damping: float = 0.5                # Velocity e-folding time in seconds
    max_speed: float = 12.0
    turn_rate: float = 3.0              # Radians per second at full rudder
    thrust_force: float = 30.0


@dataclass
class RunConfig:
    """Run harness parameters."""
    seed: int = 0
    workers: int = 1                    # Planning threads; 1 = serial
    ticker_interval: int = 500
    history_length: int = 10000
    smoothing_window: int = 60
    speed_factors: List[int] = field(default_factory=lambda: [1, 2, 4, 8, 16])


# =============================================================================
# ROOT
# =============================================================================

_SECTIONS = {
    'genome': GenomeConfig,
    'body': BodyBounds,
    'brain': BrainConfig,
    'costs': ActuatorCosts,
    'metabolism': MetabolismConfig,
    'reproduction': ReproductionConfig,
    'world': WorldConfig,
    'run': RunConfig,
}


@dataclass
class EcosystemConfig:
    """
    Complete configuration of an ecosystem run.

    Every section has working defaults; a JSON file only needs to name
    the values it overrides.
    """
    genome: GenomeConfig = field(default_factory=GenomeConfig)
    body: BodyBounds = field(default_factory=BodyBounds)
    brain: BrainConfig = field(default_factory=BrainConfig)
    costs: ActuatorCosts = field(default_factory=ActuatorCosts)
    metabolism: MetabolismConfig = field(default_factory=MetabolismConfig)
    reproduction: ReproductionConfig = field(default_factory=ReproductionConfig)
    world: WorldConfig = field(default_factory=WorldConfig)
    run: RunConfig = field(default_factory=RunConfig)

    def __post_init__(self):
        self.validate()

    def validate(self):
        """Reject policy names and bounds that cannot drive a simulation."""
        g = self.genome
        if g.crossover_policy not in CROSSOVER_POLICIES:
            raise ValueError(f"genome.crossover_policy must be one of {CROSSOVER_POLICIES}, "
                             f"got {g.crossover_policy!r}")
        if g.mutation_distribution not in MUTATION_DISTRIBUTIONS:
            raise ValueError(f"genome.mutation_distribution must be one of {MUTATION_DISTRIBUTIONS}, "
                             f"got {g.mutation_distribution!r}")
        if g.mutation_min < 0 or g.mutation_max < g.mutation_min:
            raise ValueError("genome.mutation_min/mutation_max must satisfy 0 <= min <= max")
        if g.weight_bits < 1 or g.threshold_bits < 1:
            raise ValueError("genome bit widths must be positive")
        if self.brain.hidden_width < 1:
            raise ValueError("brain.hidden_width must be positive")
        if not 0.0 <= self.brain.threshold_min <= self.brain.threshold_max < 1.0:
            raise ValueError("brain thresholds must satisfy 0 <= min <= max < 1")
        if not self.world.initial_energy > 0:
            raise ValueError("world.initial_energy must be positive")
        if self.run.workers < 1:
            raise ValueError("run.workers must be at least 1")
        if not self.run.speed_factors:
            raise ValueError("run.speed_factors must not be empty")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to plain JSON-compatible data."""
        data = asdict(self)
        # Tuples become lists so the document round-trips through JSON unchanged
        for key, value in data['body'].items():
            data['body'][key] = list(value)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EcosystemConfig':
        """Build a config, overriding defaults with the given sections."""
        kwargs = {}
        for name, value in data.items():
            if name not in _SECTIONS:
                raise ValueError(f"Unknown config section {name!r}")
            kwargs[name] = _build_section(name, _SECTIONS[name], value)
        return cls(**kwargs)

    def to_json_file(self, path) -> Path:
        path = Path(path)
        path.write_text(json.dumps(self.to_dict(), indent=2))
        return path

    @classmethod
    def from_json_file(cls, path) -> 'EcosystemConfig':
        return cls.from_dict(json.loads(Path(path).read_text()))


def _build_section(section_name: str, section_cls, values: Dict[str, Any]):
    known = {f.name for f in fields(section_cls)}
    for key in values:
        if key not in known:
            raise ValueError(f"Unknown key {key!r} in config section {section_name!r}")

    kwargs = dict(values)
    if section_cls is BodyBounds:
        kwargs = {k: tuple(v) for k, v in kwargs.items()}
    elif section_cls is WorldConfig and 'emitters' in kwargs:
        kwargs['emitters'] = [EmitterConfig(**e) for e in kwargs['emitters']]
    return section_cls(**kwargs)
