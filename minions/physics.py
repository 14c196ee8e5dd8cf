"""
Physics Collaborator - Bodies, kinematics and contact events

The ecosystem never stores geometry itself. It hands body plans to a
PhysicsWorld, addresses every body by the organism's stable id, steps it
once per tick and reads back positions and contact events.

KinematicPhysics is the reference collaborator used for headless runs:
2D point bodies with heading, inertial velocity with exponential damping,
a walled arena and circle-overlap contacts.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Tuple

import numpy as np

from .config import WorldConfig
from .quadtree import QuadTree, Rect, Point


# =============================================================================
# EXCHANGE TYPES
# =============================================================================

class BodyKind:
    MINION = "minion"
    RESOURCE = "resource"
    SPORE = "spore"


@dataclass(frozen=True)
class BodyState:
    """Read-only kinematic state of one body."""
    x: float
    y: float
    heading: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    radius: float = 0.5


@dataclass(frozen=True)
class ContactReport:
    """
    Contacts detected by the last physics step.

    Id tuples are sorted ascending so consumers resolve contention by
    lowest id without further sorting.
    """
    minion_resources: Mapping[int, Tuple[int, ...]] = field(default_factory=dict)
    spore_minions: Mapping[int, Tuple[int, ...]] = field(default_factory=dict)

    def resources_touching(self, minion_id: int) -> Tuple[int, ...]:
        return self.minion_resources.get(minion_id, ())

    def minions_touching(self, spore_id: int) -> Tuple[int, ...]:
        return self.spore_minions.get(spore_id, ())

    def to_dict(self) -> Dict:
        return {
            'minion_resources': {str(k): list(v) for k, v in self.minion_resources.items()},
            'spore_minions': {str(k): list(v) for k, v in self.spore_minions.items()},
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'ContactReport':
        return cls(
            minion_resources=MappingProxyType(
                {int(k): tuple(v) for k, v in data.get('minion_resources', {}).items()}),
            spore_minions=MappingProxyType(
                {int(k): tuple(v) for k, v in data.get('spore_minions', {}).items()}),
        )


def body_radius(body_plan, contact_scale: float) -> float:
    """Contact radius of a minion built from a body plan."""
    return contact_scale * body_plan.extent


class PhysicsWorld(ABC):
    """Interface the ecosystem driver expects from a physics engine."""

    @abstractmethod
    def add_minion(self, body_id: int, body_plan, x: float, y: float, heading: float = 0.0): ...

    @abstractmethod
    def add_resource(self, body_id: int, x: float, y: float, vx: float = 0.0, vy: float = 0.0): ...

    @abstractmethod
    def add_spore(self, body_id: int, x: float, y: float, radius: float = 0.5): ...

    @abstractmethod
    def remove(self, body_id: int): ...

    @abstractmethod
    def set_controls(self, body_id: int, rudder: float, thrust: float, brake: float): ...

    @abstractmethod
    def state(self, body_id: int) -> BodyState: ...

    @abstractmethod
    def has(self, body_id: int) -> bool: ...

    @abstractmethod
    def step(self, dt: float) -> ContactReport: ...

    @abstractmethod
    def to_dict(self) -> Dict: ...

    @abstractmethod
    def load_dict(self, data: Dict): ...


# =============================================================================
# REFERENCE IMPLEMENTATION
# =============================================================================

@dataclass
class _Body:
    kind: str
    x: float
    y: float
    heading: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    radius: float = 0.5
    mass: float = 1.0
    rudder: float = 0.0
    thrust: float = 0.0
    brake: float = 0.0


class KinematicPhysics(PhysicsWorld):
    """
    Minimal deterministic physics for headless simulation.

    Coordinate system:
    - (0,0) is the arena centre
    - the arena spans [-width/2, width/2] x [-height/2, height/2]
    - heading 0 points along +x, positive turns counter-clockwise
    """

    BRAKE_GAIN = 8.0                    # Extra damping per unit brake, 1/s

    def __init__(self, config: WorldConfig):
        self.config = config
        self.half_w = config.width / 2
        self.half_h = config.height / 2
        self._bodies: Dict[int, _Body] = {}

    # ------------------------------------------------------------------
    # Body management
    # ------------------------------------------------------------------

    def add_minion(self, body_id: int, body_plan, x: float, y: float, heading: float = 0.0):
        x, y = self._clamp(x, y)
        self._bodies[body_id] = _Body(
            kind=BodyKind.MINION, x=x, y=y, heading=heading,
            radius=body_radius(body_plan, self.config.contact_scale),
            mass=body_plan.total_mass,
        )

    def add_resource(self, body_id: int, x: float, y: float, vx: float = 0.0, vy: float = 0.0):
        x, y = self._clamp(x, y)
        self._bodies[body_id] = _Body(kind=BodyKind.RESOURCE, x=x, y=y, vx=vx, vy=vy,
                                      radius=self.config.resource_radius)

    def add_spore(self, body_id: int, x: float, y: float, radius: float = 0.5):
        x, y = self._clamp(x, y)
        self._bodies[body_id] = _Body(kind=BodyKind.SPORE, x=x, y=y, radius=radius)

    def remove(self, body_id: int):
        self._bodies.pop(body_id, None)

    def has(self, body_id: int) -> bool:
        return body_id in self._bodies

    def set_controls(self, body_id: int, rudder: float, thrust: float, brake: float):
        body = self._bodies[body_id]
        body.rudder = float(np.clip(rudder, -1.0, 1.0))
        body.thrust = float(np.clip(thrust, 0.0, 1.0))
        body.brake = float(np.clip(brake, 0.0, 1.0))

    def state(self, body_id: int) -> BodyState:
        b = self._bodies[body_id]
        return BodyState(x=b.x, y=b.y, heading=b.heading, vx=b.vx, vy=b.vy, radius=b.radius)

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def step(self, dt: float) -> ContactReport:
        """Integrate all bodies by dt and report contacts at the new positions."""
        cfg = self.config
        for body_id in sorted(self._bodies):
            b = self._bodies[body_id]
            if b.kind == BodyKind.SPORE:
                continue

            if b.kind == BodyKind.MINION:
                # Positive rudder steers right, i.e. clockwise
                b.heading = math.remainder(b.heading - b.rudder * cfg.turn_rate * dt, math.tau)
                accel = b.thrust * cfg.thrust_force / max(b.mass, 1e-6)
                b.vx += math.cos(b.heading) * accel * dt
                b.vy += math.sin(b.heading) * accel * dt

            # Inertial decay, braking adds to it
            decay = math.exp(-dt * (1.0 / cfg.damping + b.brake * self.BRAKE_GAIN))
            b.vx *= decay
            b.vy *= decay

            speed = math.hypot(b.vx, b.vy)
            if speed > cfg.max_speed:
                b.vx *= cfg.max_speed / speed
                b.vy *= cfg.max_speed / speed

            new_x, new_y = self._clamp(b.x + b.vx * dt, b.y + b.vy * dt)
            if new_x != b.x + b.vx * dt:
                b.vx = 0.0
            if new_y != b.y + b.vy * dt:
                b.vy = 0.0
            b.x, b.y = new_x, new_y

        return self.contacts()

    def contacts(self) -> ContactReport:
        """Circle-overlap contacts between minions and resources/spores."""
        boundary = Rect(-self.half_w - 1, -self.half_h - 1, self.config.width + 2, self.config.height + 2)
        resource_tree: QuadTree[int] = QuadTree(boundary)
        minion_tree: QuadTree[int] = QuadTree(boundary)
        max_minion_radius = 0.0
        max_resource_radius = 0.0

        for body_id in sorted(self._bodies):
            b = self._bodies[body_id]
            if b.kind == BodyKind.RESOURCE:
                resource_tree.insert(Point(b.x, b.y, body_id))
                max_resource_radius = max(max_resource_radius, b.radius)
            elif b.kind == BodyKind.MINION:
                minion_tree.insert(Point(b.x, b.y, body_id))
                max_minion_radius = max(max_minion_radius, b.radius)

        minion_resources: Dict[int, Tuple[int, ...]] = {}
        spore_minions: Dict[int, Tuple[int, ...]] = {}

        for body_id in sorted(self._bodies):
            b = self._bodies[body_id]
            if b.kind == BodyKind.MINION:
                hits = [
                    p.data for p in resource_tree.query_radius(b.x, b.y, b.radius + max_resource_radius)
                    if self._touching(b, self._bodies[p.data])
                ]
                if hits:
                    minion_resources[body_id] = tuple(sorted(hits))
            elif b.kind == BodyKind.SPORE:
                hits = [
                    p.data for p in minion_tree.query_radius(b.x, b.y, b.radius + max_minion_radius)
                    if self._touching(b, self._bodies[p.data])
                ]
                if hits:
                    spore_minions[body_id] = tuple(sorted(hits))

        return ContactReport(MappingProxyType(minion_resources), MappingProxyType(spore_minions))

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict:
        return {
            'bodies': [
                {'id': body_id, **vars(self._bodies[body_id])}
                for body_id in sorted(self._bodies)
            ]
        }

    def load_dict(self, data: Dict):
        self._bodies = {}
        for entry in data.get('bodies', []):
            entry = dict(entry)
            body_id = int(entry.pop('id'))
            self._bodies[body_id] = _Body(**entry)

    # ------------------------------------------------------------------

    def _clamp(self, x: float, y: float) -> Tuple[float, float]:
        return (min(max(x, -self.half_w), self.half_w),
                min(max(y, -self.half_h), self.half_h))

    @staticmethod
    def _touching(a: _Body, b: _Body) -> bool:
        return (a.x - b.x) ** 2 + (a.y - b.y) ** 2 <= (a.radius + b.radius) ** 2
