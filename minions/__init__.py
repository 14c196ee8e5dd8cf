# Minions - Evolving Artificial Life
#
# Small organisms with bit-string genotypes, fixed neural brains and
# energy budgets compete for food and reproduce through spores.
#
# LAYOUT:
# ├── genotype.py      - Bit genome, mutation, crossover
# ├── phenotype.py     - Genome layout and decoding (body, looks, gender, brain)
# ├── sensor.py        - Tick snapshot and per-minion perception
# ├── neural.py        - Stateless 3-layer network
# ├── actuators.py     - Outputs to actions and energy costs
# ├── metabolism.py    - Energy, growth, maturity, death
# ├── reproduction.py  - Spores, fertilization, hatching
# ├── ecosystem.py     - World context and tick driver
# └── persistence.py   - World snapshots
#
# The physics engine is a collaborator behind physics.PhysicsWorld;
# KinematicPhysics is the built-in headless implementation.

# =============================================================================
# CONFIGURATION AND ERRORS
# =============================================================================

from .config import (
    EcosystemConfig,
    GenomeConfig,
    BodyBounds,
    BrainConfig,
    ActuatorCosts,
    MetabolismConfig,
    ReproductionConfig,
    EmitterConfig,
    WorldConfig,
    RunConfig,
)

from .errors import (
    MinionsError,
    MalformedGenotype,
    SnapshotError,
)

# =============================================================================
# GENETICS
# =============================================================================

from .genotype import (
    GeneField,
    Segment,
    GenomeLayout,
    Genotype,
    uniform_layout,
    sample_mutation_count,
    mutate,
    crossover,
)

from .phenotype import (
    Gender,
    BodyPlan,
    VisualTraits,
    BrainParams,
    Phenotype,
    minion_layout,
    decode,
)

# =============================================================================
# BEHAVIOUR AND LIFECYCLE
# =============================================================================

from .sensor import (
    SENSOR_WIDTH,
    WorldSnapshot,
    SensorReading,
    sense,
)

from .neural import evaluate

from .actuators import (
    Actuator,
    ActionPlan,
    map_outputs,
)

from .metabolism import (
    MinionState,
    Vitals,
)

from .organisms import (
    Minion,
    Spore,
    SporeState,
    Resource,
    Emitter,
)

from .reproduction import (
    create_spore,
    fertilize,
    advance_spore,
    hatch,
)

from .lineage import (
    LineageStats,
    LineageRegistry,
)

# =============================================================================
# SIMULATION
# =============================================================================

from .physics import (
    PhysicsWorld,
    KinematicPhysics,
    BodyState,
    ContactReport,
)

from .commands import (
    Command,
    CommandQueue,
    NewMinion,
    RandomizeMinion,
    ShootResource,
    PickMinion,
    DeselectAll,
    SaveGenePool,
    SaveWorld,
    RestartFromCheckpoint,
    TogglePause,
    NextSpeedFactor,
    PrevSpeedFactor,
)

from .ecosystem import (
    World,
    Ecosystem,
    TickReport,
)

from .stats import (
    PopulationHistory,
    PopulationRecord,
)

from .genepool import (
    export_gene_pool,
    import_gene_pool,
)

from .persistence import (
    save_snapshot,
    load_snapshot,
)

from .logging_setup import configure_logging

__version__ = "0.1.0"

__all__ = [
    # Configuration
    'EcosystemConfig',
    'GenomeConfig',
    'BodyBounds',
    'BrainConfig',
    'ActuatorCosts',
    'MetabolismConfig',
    'ReproductionConfig',
    'EmitterConfig',
    'WorldConfig',
    'RunConfig',

    # Errors
    'MinionsError',
    'MalformedGenotype',
    'SnapshotError',

    # Genetics
    'GeneField',
    'Segment',
    'GenomeLayout',
    'Genotype',
    'uniform_layout',
    'sample_mutation_count',
    'mutate',
    'crossover',
    'Gender',
    'BodyPlan',
    'VisualTraits',
    'BrainParams',
    'Phenotype',
    'minion_layout',
    'decode',

    # Behaviour
    'SENSOR_WIDTH',
    'WorldSnapshot',
    'SensorReading',
    'sense',
    'evaluate',
    'Actuator',
    'ActionPlan',
    'map_outputs',

    # Lifecycle
    'MinionState',
    'Vitals',
    'Minion',
    'Spore',
    'SporeState',
    'Resource',
    'Emitter',
    'create_spore',
    'fertilize',
    'advance_spore',
    'hatch',
    'LineageStats',
    'LineageRegistry',

    # Simulation
    'PhysicsWorld',
    'KinematicPhysics',
    'BodyState',
    'ContactReport',
    'Command',
    'CommandQueue',
    'NewMinion',
    'RandomizeMinion',
    'ShootResource',
    'PickMinion',
    'DeselectAll',
    'SaveGenePool',
    'SaveWorld',
    'RestartFromCheckpoint',
    'TogglePause',
    'NextSpeedFactor',
    'PrevSpeedFactor',
    'World',
    'Ecosystem',
    'TickReport',
    'PopulationHistory',
    'PopulationRecord',
    'export_gene_pool',
    'import_gene_pool',
    'save_snapshot',
    'load_snapshot',
    'configure_logging',
]
