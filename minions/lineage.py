"""
Lineage Tracking

Tracks families across generations. Extinction is not a separate
algorithm: it falls out of per-lineage live counts (minions plus pending
spores) reaching zero.
"""

from dataclasses import dataclass, asdict
from typing import Dict, List, Optional, Set

import structlog

logger = structlog.get_logger(__name__)


@dataclass
class LineageStats:
    """Statistics for a single genetic lineage."""
    id: str
    founder_id: int = -1

    # Population
    total_born: int = 0
    living_minions: int = 0
    pending_spores: int = 0
    max_generation: int = 0

    # History
    founded_tick: int = 0
    extinct: bool = False
    extinct_tick: Optional[int] = None

    @property
    def live_count(self) -> int:
        return self.living_minions + self.pending_spores


class LineageRegistry:
    """
    Global bookkeeping of all lineages.

    Only the ecosystem driver calls the register_* methods, at commit time.
    """

    def __init__(self):
        self.lineages: Dict[str, LineageStats] = {}
        self.active_lineage_ids: Set[str] = set()
        self._next_serial = 1

    def new_lineage_id(self) -> str:
        while True:
            lid = f"L{self._next_serial:04d}"
            self._next_serial += 1
            # Imported gene pools may already use serial-looking ids
            if lid not in self.lineages:
                return lid

    def found(self, founder_id: int, tick: int, lineage_id: Optional[str] = None) -> str:
        """Register a founder minion (initial population or spawned). Returns its lineage id."""
        lid = lineage_id or self.new_lineage_id()
        if lid not in self.lineages:
            self.lineages[lid] = LineageStats(id=lid, founder_id=founder_id, founded_tick=tick)
        stats = self.lineages[lid]
        stats.extinct = False
        stats.extinct_tick = None
        self.register_birth(lid, generation=0)
        return lid

    def register_birth(self, lineage_id: str, generation: int):
        stats = self.lineages[lineage_id]
        stats.total_born += 1
        stats.living_minions += 1
        stats.max_generation = max(stats.max_generation, generation)
        self.active_lineage_ids.add(lineage_id)

    def register_spore(self, lineage_id: str):
        self.lineages[lineage_id].pending_spores += 1

    def register_hatch(self, lineage_id: str, generation: int):
        """A spore became a minion: the live count is unchanged."""
        stats = self.lineages[lineage_id]
        stats.pending_spores = max(0, stats.pending_spores - 1)
        self.register_birth(lineage_id, generation)

    def register_death(self, lineage_id: str, tick: int) -> bool:
        """Returns True if this death made the lineage extinct."""
        stats = self.lineages[lineage_id]
        stats.living_minions = max(0, stats.living_minions - 1)
        return self._check_extinct(stats, tick)

    def register_expiry(self, lineage_id: str, tick: int) -> bool:
        """An unfertilized spore expired. Returns True if the lineage went extinct."""
        stats = self.lineages[lineage_id]
        stats.pending_spores = max(0, stats.pending_spores - 1)
        return self._check_extinct(stats, tick)

    def _check_extinct(self, stats: LineageStats, tick: int) -> bool:
        if stats.live_count > 0 or stats.extinct:
            return False
        stats.extinct = True
        stats.extinct_tick = tick
        self.active_lineage_ids.discard(stats.id)
        logger.info("lineage_extinct", lineage=stats.id, tick=tick,
                    total_born=stats.total_born, generations=stats.max_generation)
        return True

    def live_count(self, lineage_id: str) -> int:
        stats = self.lineages.get(lineage_id)
        return stats.live_count if stats else 0

    def get_dominant_lineages(self, limit: int = 5) -> List[LineageStats]:
        """Get most successful active lineages."""
        active = [self.lineages[lid] for lid in sorted(self.active_lineage_ids)]
        return sorted(active, key=lambda x: x.living_minions, reverse=True)[:limit]

    def extinct_lineages(self) -> List[LineageStats]:
        return [s for s in self.lineages.values() if s.extinct]

    def to_dict(self) -> Dict:
        return {
            'next_serial': self._next_serial,
            'lineages': [asdict(s) for s in self.lineages.values()],
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'LineageRegistry':
        registry = cls()
        registry._next_serial = data.get('next_serial', 1)
        for entry in data.get('lineages', []):
            stats = LineageStats(**entry)
            registry.lineages[stats.id] = stats
            if not stats.extinct:
                registry.active_lineage_ids.add(stats.id)
        return registry
