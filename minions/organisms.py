"""
Organisms - Minions, spores, resources and emitters

Each organism owns its own genetic and lifecycle data. Geometry lives in
the physics collaborator and is looked up by the organism's id.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from .config import EcosystemConfig
from .genotype import Genotype, GenomeLayout
from .metabolism import MinionState, Vitals, energy_capacity
from .phenotype import Gender, Phenotype, decode


# =============================================================================
# MINION
# =============================================================================

class Minion:
    """
    A living organism: genotype, its cached phenotype, and vitals.

    The phenotype is expressed exactly once, here. Genotypes are immutable,
    so the cache can never go stale.
    """

    def __init__(self,
                 minion_id: int,
                 genotype: Genotype,
                 config: EcosystemConfig,
                 energy: float,
                 lineage_id: str,
                 generation: int = 0,
                 parent_ids: Tuple[int, ...] = (),
                 born_tick: int = 0):
        self.id = minion_id
        self.genotype = genotype
        self.phenotype: Phenotype = decode(genotype, config)

        capacity = energy_capacity(self.phenotype.body.total_mass, config.metabolism)
        self.vitals = Vitals(energy=max(0.0, min(energy, capacity)), max_energy=capacity)

        self.lineage_id = lineage_id
        self.generation = generation
        self.parent_ids = tuple(parent_ids)
        self.born_tick = born_tick

        # Lifetime stats
        self.food_eaten = 0
        self.spores_created = 0
        self.faults = 0

    @property
    def energy(self) -> float:
        return self.vitals.energy

    @property
    def max_energy(self) -> float:
        return self.vitals.max_energy

    @property
    def state(self) -> MinionState:
        return self.vitals.state

    @property
    def gender(self) -> Gender:
        return self.phenotype.gender

    @property
    def is_alive(self) -> bool:
        return self.vitals.is_alive

    @property
    def is_mature(self) -> bool:
        return self.vitals.is_mature

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'genotype': self.genotype.to_bitstring(),
            'energy': self.vitals.energy,
            'growth': self.vitals.growth,
            'state': self.vitals.state.value,
            'heartbeat': self.vitals.heartbeat,
            'lineage_id': self.lineage_id,
            'generation': self.generation,
            'parent_ids': list(self.parent_ids),
            'born_tick': self.born_tick,
            'food_eaten': self.food_eaten,
            'spores_created': self.spores_created,
            'faults': self.faults,
        }

    @classmethod
    def from_dict(cls, data: Dict, config: EcosystemConfig, layout: GenomeLayout) -> 'Minion':
        minion = cls(
            minion_id=int(data['id']),
            genotype=Genotype.from_bitstring(data['genotype'], layout),
            config=config,
            energy=data['energy'],
            lineage_id=data['lineage_id'],
            generation=data.get('generation', 0),
            parent_ids=tuple(data.get('parent_ids', ())),
            born_tick=data.get('born_tick', 0),
        )
        # Restore exactly, bypassing the capacity clamp applied at birth
        minion.vitals.energy = data['energy']
        minion.vitals.growth = data.get('growth', 0.0)
        minion.vitals.state = MinionState(data.get('state', MinionState.IMMATURE.value))
        minion.vitals.heartbeat = data.get('heartbeat', 0.0)
        minion.food_eaten = data.get('food_eaten', 0)
        minion.spores_created = data.get('spores_created', 0)
        minion.faults = data.get('faults', 0)
        return minion

    def __repr__(self) -> str:
        return (f"Minion(id={self.id}, {self.gender.symbol}, {self.state.value}, "
                f"energy={self.energy:.1f}, lineage={self.lineage_id}, gen={self.generation})")


# =============================================================================
# SPORE
# =============================================================================

class SporeState(Enum):
    """Spore lifecycle."""
    UNFERTILIZED = "unfertilized"
    FERTILIZED = "fertilized"
    HATCHED = "hatched"     # Terminal: produced a minion
    EXPIRED = "expired"     # Terminal: countdown ran out unfertilized


@dataclass
class Spore:
    """Reproductive body waiting for fertilization and hatching."""
    id: int
    genotype: Genotype
    parent_id: int
    parent_gender: Gender
    lineage_id: str
    generation: int
    countdown: int
    energy: float
    state: SporeState = SporeState.UNFERTILIZED
    partner_id: Optional[int] = None

    @property
    def is_pending(self) -> bool:
        return self.state in (SporeState.UNFERTILIZED, SporeState.FERTILIZED)

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'genotype': self.genotype.to_bitstring(),
            'parent_id': self.parent_id,
            'parent_gender': self.parent_gender.value,
            'lineage_id': self.lineage_id,
            'generation': self.generation,
            'countdown': self.countdown,
            'energy': self.energy,
            'state': self.state.value,
            'partner_id': self.partner_id,
        }

    @classmethod
    def from_dict(cls, data: Dict, layout: GenomeLayout) -> 'Spore':
        return cls(
            id=int(data['id']),
            genotype=Genotype.from_bitstring(data['genotype'], layout),
            parent_id=int(data['parent_id']),
            parent_gender=Gender(data['parent_gender']),
            lineage_id=data['lineage_id'],
            generation=data['generation'],
            countdown=data['countdown'],
            energy=data['energy'],
            state=SporeState(data['state']),
            partner_id=data.get('partner_id'),
        )


# =============================================================================
# RESOURCES AND EMITTERS
# =============================================================================

class ResourceState(Enum):
    ALIVE = "alive"
    EXPIRED = "expired"
    CONSUMED = "consumed"


@dataclass
class Resource:
    """A nourishment item in the world."""
    id: int
    nutrition: float
    lifespan: int                       # Ticks left
    state: ResourceState = ResourceState.ALIVE
    emitter_id: Optional[int] = None    # None for corpse remains and shot resources

    @property
    def is_alive(self) -> bool:
        return self.state == ResourceState.ALIVE

    def age(self) -> bool:
        """Advance one tick. Returns False once the resource has expired."""
        if not self.is_alive:
            return False
        self.lifespan -= 1
        if self.lifespan <= 0:
            self.lifespan = 0
            self.state = ResourceState.EXPIRED
        return self.is_alive

    def consume(self) -> float:
        """Eat the resource whole. Returns its nutrition, 0 if already gone."""
        if not self.is_alive:
            return 0.0
        self.state = ResourceState.CONSUMED
        return self.nutrition

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'nutrition': self.nutrition,
            'lifespan': self.lifespan,
            'state': self.state.value,
            'emitter_id': self.emitter_id,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'Resource':
        return cls(
            id=int(data['id']),
            nutrition=data['nutrition'],
            lifespan=data['lifespan'],
            state=ResourceState(data.get('state', ResourceState.ALIVE.value)),
            emitter_id=data.get('emitter_id'),
        )


@dataclass
class Emitter:
    """Long-lived resource source. Fractional rates accumulate across ticks."""
    id: int
    x: float
    y: float
    rate: float
    spread: float
    accumulator: float = 0.0

    def due(self) -> int:
        """Advance one tick and return how many resources to spawn now."""
        self.accumulator += self.rate
        count = int(self.accumulator)
        self.accumulator -= count
        return count

    def to_dict(self) -> Dict:
        return {'id': self.id, 'x': self.x, 'y': self.y, 'rate': self.rate,
                'spread': self.spread, 'accumulator': self.accumulator}

    @classmethod
    def from_dict(cls, data: Dict) -> 'Emitter':
        return cls(**data)
