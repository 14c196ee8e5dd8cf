"""
External interactions with a running ecosystem.

Callers (a UI, a script, another thread) never touch the organism
collections directly. They submit commands, and the driver applies the
whole queue at the start of the next tick, before the snapshot is taken.
"""

import queue
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .genotype import Genotype


Position = Tuple[float, float]


class Command:
    """Base class of queued commands."""


@dataclass(frozen=True)
class NewMinion(Command):
    """Spawn a minion; genotype defaults to a gene-pool founder or a random one."""
    position: Position
    genotype: Optional[Genotype] = None


@dataclass(frozen=True)
class RandomizeMinion(Command):
    """Spawn a random founder of a brand new lineage."""
    position: Position


@dataclass(frozen=True)
class ShootResource(Command):
    """Fire a resource into the arena."""
    position: Position
    velocity: Position = (0.0, 0.0)
    nutrition: Optional[float] = None


@dataclass(frozen=True)
class PickMinion(Command):
    """Select the minion nearest to a position, for display."""
    position: Position


@dataclass(frozen=True)
class DeselectAll(Command):
    pass


@dataclass(frozen=True)
class SaveGenePool(Command):
    path: str


@dataclass(frozen=True)
class SaveWorld(Command):
    path: str


@dataclass(frozen=True)
class RestartFromCheckpoint(Command):
    """Restore the given snapshot, or the last one saved or loaded."""
    path: Optional[str] = None


@dataclass(frozen=True)
class TogglePause(Command):
    pass


@dataclass(frozen=True)
class NextSpeedFactor(Command):
    pass


@dataclass(frozen=True)
class PrevSpeedFactor(Command):
    pass


class CommandQueue:
    """Thread-safe FIFO drained once per tick by the driver."""

    def __init__(self):
        self._queue: "queue.Queue[Command]" = queue.Queue()

    def submit(self, command: Command):
        if not isinstance(command, Command):
            raise TypeError(f"Expected a Command, got {type(command).__name__}")
        self._queue.put(command)

    def drain(self) -> List[Command]:
        commands = []
        while True:
            try:
                commands.append(self._queue.get_nowait())
            except queue.Empty:
                return commands

    def __len__(self) -> int:
        return self._queue.qsize()
