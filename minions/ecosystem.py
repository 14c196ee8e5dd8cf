"""
Ecosystem Driver - The tick loop

Each tick is split into two phases so the result never depends on the
number of planning workers or the order they finish in:

1. PLANNING (pure, parallel): every living minion senses the read-only
   snapshot of the previous tick boundary, evaluates its brain and maps
   the outputs to an ActionPlan. Nothing is mutated.
2. COMMIT (serial, ascending id): plans are applied one minion at a time.
   Eating, energy spending, death, spore creation, fertilization,
   hatching, resource ageing and emission happen here, and every random
   draw comes from the world's single generator in this fixed order.

Then the physics collaborator is stepped once and the tick counter
advances.

USAGE:
    from minions.ecosystem import Ecosystem

    eco = Ecosystem(config)
    eco.run(10000)
    print(eco.history.latest)
"""

import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Union

import numpy as np
import structlog

from . import persistence
from .actuators import ActionPlan, idle_plan, map_outputs
from .commands import (
    Command, CommandQueue, DeselectAll, NewMinion, NextSpeedFactor, PickMinion,
    PrevSpeedFactor, RandomizeMinion, RestartFromCheckpoint, SaveGenePool,
    SaveWorld, ShootResource, TogglePause,
)
from .config import EcosystemConfig, WorldConfig
from .errors import MinionsError, SnapshotError
from .genepool import export_gene_pool
from .genotype import Genotype, GenomeLayout
from .lineage import LineageRegistry
from .metabolism import corpse_nutrition
from .neural import evaluate
from .organisms import Emitter, Minion, Resource, Spore, SporeState
from .phenotype import minion_layout
from .physics import ContactReport, KinematicPhysics, PhysicsWorld
from .reproduction import advance_spore, can_reproduce, create_spore, fertilize, hatch
from .sensor import Landmark, SensorReading, WorldSnapshot, sense
from .stats import PopulationHistory

logger = structlog.get_logger(__name__)


PhysicsFactory = Callable[[WorldConfig], PhysicsWorld]


# =============================================================================
# WORLD CONTEXT
# =============================================================================

class World:
    """
    Owner of all organism collections and the run's random generator.

    Organisms are keyed by id. Ids are allocated from one counter shared by
    minions, spores and resources, so an id also addresses the organism's
    body in the physics collaborator.
    """

    def __init__(self, config: EcosystemConfig):
        self.config = config
        self.layout: GenomeLayout = minion_layout(config)
        self.rng = np.random.default_rng(config.run.seed)

        self.tick = 0
        self.next_id = 1

        self.minions: Dict[int, Minion] = {}
        self.spores: Dict[int, Spore] = {}
        self.resources: Dict[int, Resource] = {}
        self.emitters: Dict[int, Emitter] = {}

        self.lineages = LineageRegistry()
        self.contacts = ContactReport()

        # Driver state
        self.paused = False
        self.speed_index = 0
        self.selected_id: Optional[int] = None
        self.extinct = False

    def allocate_id(self) -> int:
        new_id = self.next_id
        self.next_id += 1
        return new_id

    @property
    def population(self) -> int:
        return len(self.minions)

    def living_minions(self) -> List[Minion]:
        """Living minions in ascending id order."""
        return [self.minions[i] for i in sorted(self.minions) if self.minions[i].is_alive]

    def to_dict(self) -> Dict:
        return {
            'tick': self.tick,
            'next_id': self.next_id,
            'rng_state': self.rng.bit_generator.state,
            'minions': [self.minions[i].to_dict() for i in sorted(self.minions)],
            'spores': [self.spores[i].to_dict() for i in sorted(self.spores)],
            'resources': [self.resources[i].to_dict() for i in sorted(self.resources)],
            'emitters': [self.emitters[i].to_dict() for i in sorted(self.emitters)],
            'lineages': self.lineages.to_dict(),
            'contacts': self.contacts.to_dict(),
            'paused': self.paused,
            'speed_index': self.speed_index,
            'selected_id': self.selected_id,
            'extinct': self.extinct,
        }

    @classmethod
    def from_dict(cls, data: Dict, config: EcosystemConfig) -> 'World':
        world = cls(config)
        world.tick = int(data['tick'])
        world.next_id = int(data['next_id'])
        world.rng.bit_generator.state = data['rng_state']

        layout = world.layout
        for entry in data.get('minions', []):
            m = Minion.from_dict(entry, config, layout)
            world.minions[m.id] = m
        for entry in data.get('spores', []):
            s = Spore.from_dict(entry, layout)
            world.spores[s.id] = s
        for entry in data.get('resources', []):
            r = Resource.from_dict(entry)
            world.resources[r.id] = r
        for entry in data.get('emitters', []):
            e = Emitter.from_dict(entry)
            world.emitters[e.id] = e

        world.lineages = LineageRegistry.from_dict(data.get('lineages', {}))
        world.contacts = ContactReport.from_dict(data.get('contacts', {}))
        world.paused = bool(data.get('paused', False))
        world.speed_index = int(data.get('speed_index', 0))
        world.selected_id = data.get('selected_id')
        world.extinct = bool(data.get('extinct', False))
        return world


# =============================================================================
# TICK RESULTS
# =============================================================================

@dataclass
class MinionIntent:
    """Output of the planning phase for one minion."""
    minion_id: int
    plan: ActionPlan
    reading: Optional[SensorReading] = None
    faulted: bool = False


@dataclass
class TickReport:
    """What happened during one tick, in commit order."""
    tick: int
    deaths: List[int] = field(default_factory=list)
    spores_created: List[int] = field(default_factory=list)
    fertilized: List[int] = field(default_factory=list)
    hatched: List[int] = field(default_factory=list)
    expired_spores: List[int] = field(default_factory=list)
    resources_eaten: List[int] = field(default_factory=list)
    resources_spawned: List[int] = field(default_factory=list)
    resources_expired: List[int] = field(default_factory=list)
    extinct_lineages: List[str] = field(default_factory=list)
    faults: List[int] = field(default_factory=list)


# =============================================================================
# DRIVER
# =============================================================================

class Ecosystem:
    """
    Runs the simulation one tick at a time.

    Args:
        config: Run configuration (defaults if None)
        physics_factory: Builds the physics collaborator from the world config
        populate: Seed emitters and a random founder population
        founders: Genotypes to seed instead of random ones
    """

    def __init__(self,
                 config: Optional[EcosystemConfig] = None,
                 physics_factory: PhysicsFactory = KinematicPhysics,
                 populate: bool = True,
                 founders: Optional[Sequence[Genotype]] = None):
        self.config = config or EcosystemConfig()
        self.physics_factory = physics_factory
        self.physics: PhysicsWorld = physics_factory(self.config.world)
        self.world = World(self.config)

        self.commands = CommandQueue()
        self.history = self._new_history()
        self.gene_pool: List[Genotype] = list(founders or [])
        self.checkpoint_path: Optional[Path] = None

        self._executor: Optional[ThreadPoolExecutor] = None
        self._stop_requested = False

        if populate:
            self.populate(founders)

    def _new_history(self) -> PopulationHistory:
        run = self.config.run
        return PopulationHistory(maxlen=run.history_length, window=run.smoothing_window,
                                 dt=self.config.world.dt)

    # ------------------------------------------------------------------
    # Seeding and spawning
    # ------------------------------------------------------------------

    def populate(self, founders: Optional[Sequence[Genotype]] = None):
        """Create the configured emitters and the initial population."""
        world = self.world
        for ec in self.config.world.emitters:
            emitter = Emitter(id=world.allocate_id(), x=ec.x, y=ec.y, rate=ec.rate, spread=ec.spread)
            world.emitters[emitter.id] = emitter

        genotypes = list(founders) if founders else [
            Genotype.random(world.layout, world.rng)
            for _ in range(self.config.world.initial_population)
        ]
        for genotype in genotypes:
            x, y = self._random_position()
            heading = float(world.rng.uniform(-math.pi, math.pi))
            self.spawn_minion(genotype, x, y, heading=heading)

        logger.info("ecosystem_populated", minions=len(world.minions),
                    emitters=len(world.emitters), seed=self.config.run.seed)

    def spawn_minion(self, genotype: Genotype, x: float, y: float,
                     heading: float = 0.0,
                     energy: Optional[float] = None,
                     lineage_id: Optional[str] = None,
                     generation: int = 0) -> Minion:
        """
        Add a founder minion. It starts a new lineage unless one is named.

        Raises:
            ValueError: if the starting energy is not positive
        """
        if energy is None:
            energy = self.config.world.initial_energy
        if not energy > 0:
            raise ValueError(f"A minion must spawn with positive energy, got {energy}")

        world = self.world
        minion_id = world.allocate_id()
        lid = world.lineages.found(minion_id, world.tick, lineage_id)
        minion = Minion(
            minion_id=minion_id,
            genotype=genotype,
            config=self.config,
            energy=energy,
            lineage_id=lid,
            generation=generation,
            born_tick=world.tick,
        )
        world.minions[minion_id] = minion
        self.physics.add_minion(minion_id, minion.phenotype.body, x, y, heading)
        world.extinct = False
        return minion

    def spawn_resource(self, x: float, y: float,
                       nutrition: Optional[float] = None,
                       vx: float = 0.0, vy: float = 0.0,
                       emitter_id: Optional[int] = None) -> Resource:
        cfg = self.config.world
        resource = Resource(
            id=self.world.allocate_id(),
            nutrition=cfg.resource_nutrition if nutrition is None else nutrition,
            lifespan=cfg.resource_lifespan,
            emitter_id=emitter_id,
        )
        self.world.resources[resource.id] = resource
        self.physics.add_resource(resource.id, x, y, vx, vy)
        return resource

    def _random_position(self):
        cfg = self.config.world
        x = float(self.world.rng.uniform(-cfg.width / 2, cfg.width / 2))
        y = float(self.world.rng.uniform(-cfg.height / 2, cfg.height / 2))
        return x, y

    # ------------------------------------------------------------------
    # Planning phase
    # ------------------------------------------------------------------

    def snapshot(self) -> WorldSnapshot:
        """Read-only view of the current tick boundary."""
        world = self.world
        physics = self.physics
        bodies = {i: physics.state(i) for i in sorted(world.minions)}
        resources = []
        for i in sorted(world.resources):
            s = physics.state(i)
            resources.append(Landmark(i, s.x, s.y))
        emitters = [Landmark(e.id, e.x, e.y) for e in world.emitters.values()]
        cfg = self.config.world
        return WorldSnapshot.build(world.tick, bodies, resources, emitters, world.contacts,
                                   cfg.sensor_radius, cfg.width, cfg.height)

    def plan(self, minion: Minion, snapshot: WorldSnapshot) -> MinionIntent:
        """Sense, think and choose actions. Reads only the snapshot and the minion."""
        reading = sense(minion, snapshot)
        outputs = evaluate(minion.phenotype.brain, reading.as_inputs())
        action = map_outputs(outputs, minion.phenotype.thresholds, minion.energy,
                             minion.is_mature, self.config.costs, self.config.reproduction)
        return MinionIntent(minion.id, action, reading)

    def _safe_plan(self, minion: Minion, snapshot: WorldSnapshot) -> MinionIntent:
        try:
            return self.plan(minion, snapshot)
        except Exception:
            logger.exception("minion_plan_failed", minion=minion.id, tick=snapshot.tick)
            return MinionIntent(minion.id, idle_plan(self.config.costs), faulted=True)

    def _plan_all(self, snapshot: WorldSnapshot) -> List[MinionIntent]:
        minions = self.world.living_minions()
        workers = self.config.run.workers
        if workers > 1 and len(minions) > 1:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=workers,
                                                    thread_name_prefix="minion-plan")
            # map() yields in submission order, i.e. ascending id
            return list(self._executor.map(lambda m: self._safe_plan(m, snapshot), minions))
        return [self._safe_plan(m, snapshot) for m in minions]

    # ------------------------------------------------------------------
    # Commit phase
    # ------------------------------------------------------------------

    def step(self) -> TickReport:
        """Advance the simulation by exactly one tick."""
        self.apply_commands()

        world = self.world
        report = TickReport(tick=world.tick + 1)

        snapshot = self.snapshot()
        intents = self._plan_all(snapshot)

        for intent in intents:
            self._commit_minion(intent, snapshot, report)

        self._fertilize_spores(snapshot, report)
        self._advance_spores(report)
        self._age_resources(report)
        self._emit_resources(report)

        metabolism = self.config.metabolism
        for minion in world.living_minions():
            minion.vitals.advance_heartbeat(self.config.world.dt, metabolism)

        world.contacts = self.physics.step(self.config.world.dt)
        world.tick += 1

        record = self.history.record(world.tick, world.minions.values(), len(world.spores),
                                     len(world.resources), len(world.lineages.active_lineage_ids))

        interval = self.config.run.ticker_interval
        if interval > 0 and world.tick % interval == 0:
            logger.info("tick", tick=world.tick, population=record.minions,
                        smoothed=round(record.smoothed_minions, 1), trend=round(record.trend_minions, 1),
                        mature=record.mature, spores=record.spores, resources=record.resources,
                        lineages=record.lineages, mean_energy=round(record.mean_energy, 2))

        if not world.extinct and not world.minions and not world.spores:
            world.extinct = True
            logger.warning("population_extinct", tick=world.tick,
                           lineages_founded=len(world.lineages.lineages))

        return report

    def _commit_minion(self, intent: MinionIntent, snapshot: WorldSnapshot, report: TickReport):
        world = self.world
        minion = world.minions.get(intent.minion_id)
        if minion is None or not minion.is_alive:
            return

        plan = intent.plan
        if intent.faulted:
            minion.faults += 1
            report.faults.append(minion.id)

        self.physics.set_controls(minion.id, plan.rudder, plan.thrust, plan.brake)

        if plan.eat:
            self._eat(minion, snapshot, report)

        if minion.vitals.spend(plan.energy_cost):
            self._kill(minion, report)
            return

        if plan.reproduce and can_reproduce(minion, self.config):
            spore = create_spore(minion, world.allocate_id(), world.rng, self.config)
            state = self.physics.state(minion.id)
            self.physics.add_spore(spore.id, state.x, state.y, self.config.reproduction.spore_radius)
            world.spores[spore.id] = spore
            world.lineages.register_spore(spore.lineage_id)
            report.spores_created.append(spore.id)
            if not minion.is_alive:
                self._kill(minion, report)

    def _eat(self, minion: Minion, snapshot: WorldSnapshot, report: TickReport):
        """Eat the nearest touching resource still available this tick."""
        resources = self.world.resources
        gone = {i for i in snapshot.contacts.resources_touching(minion.id)
                if i not in resources or not resources[i].is_alive}
        resource_id = snapshot.nearest_touching_resource(minion.id, exclude=gone)
        if resource_id is None:
            return
        minion.vitals.feed(resources[resource_id].consume(), self.config.metabolism)
        minion.food_eaten += 1
        self._remove_resource(resource_id)
        report.resources_eaten.append(resource_id)

    def _kill(self, minion: Minion, report: TickReport):
        """Remove a dead minion, leaving its remains as resources."""
        world = self.world
        minion.vitals.die()
        state = self.physics.state(minion.id)
        spread = state.radius
        for nutrition in corpse_nutrition(minion.phenotype.body.total_mass, self.config.metabolism):
            dx, dy = world.rng.uniform(-spread, spread, size=2)
            r = self.spawn_resource(state.x + float(dx), state.y + float(dy), nutrition=nutrition)
            report.resources_spawned.append(r.id)

        self.physics.remove(minion.id)
        del world.minions[minion.id]
        if world.selected_id == minion.id:
            world.selected_id = None
        report.deaths.append(minion.id)

        if world.lineages.register_death(minion.lineage_id, world.tick + 1):
            report.extinct_lineages.append(minion.lineage_id)

    def _fertilize_spores(self, snapshot: WorldSnapshot, report: TickReport):
        world = self.world
        for spore_id in sorted(world.spores):
            spore = world.spores[spore_id]
            if spore.state != SporeState.UNFERTILIZED:
                continue
            for minion_id in snapshot.contacts.minions_touching(spore_id):
                minion = world.minions.get(minion_id)
                if minion is None:
                    continue
                fertilized = fertilize(spore, minion, world.rng, self.config.genome.crossover_policy)
                if fertilized is not None:
                    world.spores[spore_id] = fertilized
                    report.fertilized.append(spore_id)
                    break

    def _advance_spores(self, report: TickReport):
        world = self.world
        for spore_id in sorted(world.spores):
            spore = world.spores[spore_id]
            state = advance_spore(spore)
            if state == SporeState.HATCHED:
                position = self.physics.state(spore_id)
                child = hatch(spore, world.allocate_id(), self.config, tick=world.tick + 1)
                world.minions[child.id] = child
                heading = float(world.rng.uniform(-math.pi, math.pi))
                self.physics.add_minion(child.id, child.phenotype.body, position.x, position.y, heading)
                world.lineages.register_hatch(child.lineage_id, child.generation)
                self.physics.remove(spore_id)
                del world.spores[spore_id]
                report.hatched.append(child.id)
            elif state == SporeState.EXPIRED:
                self.physics.remove(spore_id)
                del world.spores[spore_id]
                report.expired_spores.append(spore_id)
                if world.lineages.register_expiry(spore.lineage_id, world.tick + 1):
                    report.extinct_lineages.append(spore.lineage_id)

    def _age_resources(self, report: TickReport):
        for resource_id in sorted(self.world.resources):
            if not self.world.resources[resource_id].age():
                self._remove_resource(resource_id)
                report.resources_expired.append(resource_id)

    def _emit_resources(self, report: TickReport):
        world = self.world
        cap = self.config.world.max_resources
        for emitter_id in sorted(world.emitters):
            emitter = world.emitters[emitter_id]
            for _ in range(emitter.due()):
                if len(world.resources) >= cap:
                    break
                angle = world.rng.uniform(0.0, math.tau)
                dist = emitter.spread * math.sqrt(world.rng.random())
                r = self.spawn_resource(emitter.x + dist * math.cos(angle),
                                        emitter.y + dist * math.sin(angle),
                                        emitter_id=emitter.id)
                report.resources_spawned.append(r.id)

    def _remove_resource(self, resource_id: int):
        self.world.resources.pop(resource_id, None)
        self.physics.remove(resource_id)

    # ------------------------------------------------------------------
    # Run control
    # ------------------------------------------------------------------

    @property
    def speed_factor(self) -> int:
        factors = self.config.run.speed_factors
        return factors[self.world.speed_index % len(factors)]

    @property
    def is_extinct(self) -> bool:
        return self.world.extinct

    def advance(self) -> List[TickReport]:
        """
        Advance one display frame: `speed_factor` ticks, or none while paused.

        Commands are applied either way.
        """
        self.apply_commands()
        if self.world.paused:
            return []
        reports = []
        for _ in range(self.speed_factor):
            reports.append(self.step())
            if self.world.paused:
                break
        return reports

    def run(self, ticks: int, stop_on_extinction: bool = True) -> List[TickReport]:
        """
        Run up to `ticks` ticks, ignoring pause.

        Stops early on whole-population extinction or when stop() is called.
        """
        self._stop_requested = False
        reports = []
        for _ in range(ticks):
            if self._stop_requested:
                logger.info("run_stopped", tick=self.world.tick)
                break
            reports.append(self.step())
            if stop_on_extinction and self.world.extinct:
                break
        return reports

    def stop(self):
        """Ask a running run() to stop after the current tick."""
        self._stop_requested = True

    def close(self):
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def submit(self, command: Command):
        """Queue a command for the start of the next tick."""
        self.commands.submit(command)

    def apply_commands(self) -> int:
        """
        Apply every queued command in submission order.

        A command that fails is logged and skipped; the rest still run.
        Returns how many were taken from the queue.
        """
        commands = self.commands.drain()
        for command in commands:
            try:
                self._apply(command)
            except (MinionsError, OSError, ValueError):
                logger.exception("command_failed", command=type(command).__name__, tick=self.world.tick)
        return len(commands)

    def _apply(self, command: Command):
        world = self.world
        if isinstance(command, NewMinion):
            genotype = command.genotype
            if genotype is None and self.gene_pool:
                genotype = self.gene_pool[int(world.rng.integers(len(self.gene_pool)))]
            if genotype is None:
                genotype = Genotype.random(world.layout, world.rng)
            self.spawn_minion(genotype, *command.position)
        elif isinstance(command, RandomizeMinion):
            self.spawn_minion(Genotype.random(world.layout, world.rng), *command.position)
        elif isinstance(command, ShootResource):
            x, y = command.position
            vx, vy = command.velocity
            self.spawn_resource(x, y, nutrition=command.nutrition, vx=vx, vy=vy)
        elif isinstance(command, PickMinion):
            world.selected_id = self.minion_at(*command.position)
        elif isinstance(command, DeselectAll):
            world.selected_id = None
        elif isinstance(command, SaveGenePool):
            export_gene_pool(world.living_minions(), command.path)
        elif isinstance(command, SaveWorld):
            self.save(command.path)
        elif isinstance(command, RestartFromCheckpoint):
            path = command.path or self.checkpoint_path
            if path is None:
                logger.warning("restart_without_checkpoint", tick=world.tick)
                return
            self.restore(persistence.load_snapshot(path))
            self.checkpoint_path = Path(path)
        elif isinstance(command, TogglePause):
            world.paused = not world.paused
            logger.info("pause_toggled", paused=world.paused, tick=world.tick)
        elif isinstance(command, NextSpeedFactor):
            world.speed_index = (world.speed_index + 1) % len(self.config.run.speed_factors)
        elif isinstance(command, PrevSpeedFactor):
            world.speed_index = (world.speed_index - 1) % len(self.config.run.speed_factors)
        else:
            raise TypeError(f"Unhandled command {type(command).__name__}")

    def minion_at(self, x: float, y: float) -> Optional[int]:
        """Id of the minion nearest to a point, None if there are none."""
        best = None
        best_key = None
        for minion_id in sorted(self.world.minions):
            s = self.physics.state(minion_id)
            key = ((s.x - x) ** 2 + (s.y - y) ** 2, minion_id)
            if best_key is None or key < best_key:
                best, best_key = minion_id, key
        return best

    @property
    def selected(self) -> Optional[Minion]:
        sid = self.world.selected_id
        return self.world.minions.get(sid) if sid is not None else None

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def to_snapshot(self) -> Dict:
        return {
            'config': self.config.to_dict(),
            'world': self.world.to_dict(),
            'physics': self.physics.to_dict(),
        }

    def save(self, filepath: Union[str, Path]) -> Path:
        """Write a snapshot and remember it as the restart checkpoint."""
        path = persistence.save_snapshot(self.to_snapshot(), filepath)
        self.checkpoint_path = path
        return path

    def restore(self, payload: Dict):
        """
        Replace the whole run state with a snapshot payload.

        Raises:
            SnapshotError: if the payload cannot be rebuilt
        """
        try:
            config = EcosystemConfig.from_dict(payload['config'])
            world = World.from_dict(payload['world'], config)
            physics = self.physics_factory(config.world)
            physics.load_dict(payload['physics'])
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise SnapshotError(f"Snapshot cannot be restored: {e!r}") from e

        missing = [i for i in list(world.minions) + list(world.spores) + list(world.resources)
                   if not physics.has(i)]
        if missing:
            raise SnapshotError(f"Snapshot physics has no bodies for ids {missing[:10]}")

        # Nothing is replaced until the whole snapshot has been rebuilt
        self.close()
        self.config = config
        self.world = world
        self.physics = physics
        self.history = self._new_history()

        logger.info("ecosystem_restored", tick=world.tick, minions=len(world.minions),
                    spores=len(world.spores), resources=len(world.resources))

    @classmethod
    def load(cls, filepath: Union[str, Path],
             physics_factory: PhysicsFactory = KinematicPhysics) -> 'Ecosystem':
        """Build an ecosystem from a snapshot file."""
        payload = persistence.load_snapshot(filepath)
        try:
            config = EcosystemConfig.from_dict(payload['config'])
        except (TypeError, ValueError) as e:
            raise SnapshotError(f"Snapshot config is invalid: {e}") from e
        eco = cls(config, physics_factory=physics_factory, populate=False)
        eco.restore(payload)
        eco.checkpoint_path = Path(filepath)
        return eco

    def export_gene_pool(self, filepath: Union[str, Path]) -> Path:
        return export_gene_pool(self.world.living_minions(), filepath)

    def __repr__(self) -> str:
        w = self.world
        return (f"Ecosystem(tick={w.tick}, minions={len(w.minions)}, spores={len(w.spores)}, "
                f"resources={len(w.resources)}, lineages={len(w.lineages.active_lineage_ids)})")
