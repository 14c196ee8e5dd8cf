"""
Sensor - Per-tick view of the world around one minion

Sensing reads only the immutable snapshot taken at the start of a tick,
so every minion sees the same world regardless of evaluation order or
thread. The result is a fixed-width input vector; absent targets are
encoded as "maximum distance, straight ahead" so the brain always gets
a full-rank input.

INPUT VECTOR (SENSOR_WIDTH = 4):
    0  nearest resource distance   0 (touching) .. 1 (at/over radius, or none)
    1  nearest resource bearing    -1 .. 1, relative to heading, /pi
    2  nearest emitter bearing     -1 .. 1, emitters are sensed at any range
    3  own energy level            0 .. 1 of the minion's energy capacity
"""

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

import numpy as np

from .physics import BodyState, ContactReport
from .quadtree import QuadTree, Rect, Point


SENSOR_WIDTH = 4

ABSENT_DISTANCE = 1.0
ABSENT_BEARING = 0.0


@dataclass(frozen=True)
class Landmark:
    """A sensed object: identity and position."""
    id: int
    x: float
    y: float


@dataclass(frozen=True)
class WorldSnapshot:
    """
    Read-only state of the previous tick boundary.

    Built once per tick by the ecosystem driver and shared by all
    planning workers.
    """
    tick: int
    bodies: Mapping[int, BodyState]
    resources: Tuple[Landmark, ...]
    emitters: Tuple[Landmark, ...]
    contacts: ContactReport
    sensor_radius: float
    resource_index: QuadTree
    resource_lookup: Mapping[int, Landmark]

    @classmethod
    def build(cls, tick: int, bodies, resources, emitters, contacts: ContactReport,
              sensor_radius: float, width: float, height: float) -> 'WorldSnapshot':
        index: QuadTree[Landmark] = QuadTree(Rect(-width / 2 - 1, -height / 2 - 1, width + 2, height + 2))
        resources = tuple(sorted(resources, key=lambda r: r.id))
        for r in resources:
            index.insert(Point(r.x, r.y, r))
        return cls(
            tick=tick,
            bodies=MappingProxyType(dict(bodies)),
            resources=resources,
            emitters=tuple(sorted(emitters, key=lambda e: e.id)),
            contacts=contacts,
            sensor_radius=sensor_radius,
            resource_index=index,
            resource_lookup=MappingProxyType({r.id: r for r in resources}),
        )

    def nearest_touching_resource(self, minion_id: int, exclude=()) -> Optional[int]:
        """
        Closest resource in contact with a minion, ties to the lowest id.

        Ids in `exclude` (already eaten this tick) are skipped.
        """
        body = self.bodies[minion_id]
        touching = [self.resource_lookup[i] for i in self.contacts.resources_touching(minion_id)
                    if i in self.resource_lookup and i not in exclude]
        found, _ = nearest(body, touching)
        return found.id if found is not None else None


@dataclass(frozen=True)
class SensorReading:
    """One minion's perception for one tick."""
    resource_id: Optional[int]
    resource_distance: float
    resource_bearing: float
    emitter_id: Optional[int]
    emitter_bearing: float
    energy: float

    def as_inputs(self) -> np.ndarray:
        return np.array([self.resource_distance, self.resource_bearing,
                         self.emitter_bearing, self.energy], dtype=np.float64)


def relative_bearing(body: BodyState, x: float, y: float) -> float:
    """Angle to (x, y) relative to heading, scaled to [-1, 1]."""
    angle = math.atan2(y - body.y, x - body.x) - body.heading
    return math.remainder(angle, math.tau) / math.pi


def nearest(body: BodyState, candidates) -> Tuple[Optional[Landmark], float]:
    """Nearest landmark by Euclidean distance; ties go to the lowest id."""
    best = None
    best_key = None
    for c in candidates:
        key = ((c.x - body.x) ** 2 + (c.y - body.y) ** 2, c.id)
        if best_key is None or key < best_key:
            best, best_key = c, key
    if best is None:
        return None, math.inf
    return best, math.sqrt(best_key[0])


def sense(minion, snapshot: WorldSnapshot) -> SensorReading:
    """
    Build the sensor reading for a minion from the tick snapshot.

    Args:
        minion: Organism with `id`, `energy` and `max_energy`
        snapshot: The tick's read-only world snapshot
    """
    body = snapshot.bodies[minion.id]
    radius = snapshot.sensor_radius

    in_range = [p.data for p in snapshot.resource_index.query_radius(body.x, body.y, radius)]
    resource, r_dist = nearest(body, in_range)
    if resource is None:
        resource_id, resource_distance, resource_bearing = None, ABSENT_DISTANCE, ABSENT_BEARING
    else:
        resource_id = resource.id
        resource_distance = min(1.0, r_dist / radius) if radius > 0 else ABSENT_DISTANCE
        resource_bearing = relative_bearing(body, resource.x, resource.y)

    emitter, _ = nearest(body, snapshot.emitters)
    if emitter is None:
        emitter_id, emitter_bearing = None, ABSENT_BEARING
    else:
        emitter_id = emitter.id
        emitter_bearing = relative_bearing(body, emitter.x, emitter.y)

    capacity = minion.max_energy
    energy = float(np.clip(minion.energy / capacity, 0.0, 1.0)) if capacity > 0 else 0.0

    return SensorReading(
        resource_id=resource_id,
        resource_distance=resource_distance,
        resource_bearing=resource_bearing,
        emitter_id=emitter_id,
        emitter_bearing=emitter_bearing,
        energy=energy,
    )
