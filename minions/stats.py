"""
Population statistics and smoothing.

PopulationHistory keeps one record per tick in a bounded deque; the
smoothers turn the noisy per-tick population into values fit for the
ticker and for plotting.
"""

import math
from collections import deque
from dataclasses import dataclass, asdict
from typing import Deque, Dict, List


class MovingAverage:
    """Mean over the last `window_size` values."""

    def __init__(self, window_size: int):
        if window_size < 1:
            raise ValueError("window_size must be positive")
        self.values: Deque[float] = deque(maxlen=window_size)
        self.acc = 0.0
        self.last = 0.0

    def smooth(self, value: float) -> float:
        if len(self.values) == self.values.maxlen:
            self.acc -= self.values[0]
        self.values.append(value)
        self.acc += value
        self.last = self.acc / len(self.values)
        return self.last


class Exponential:
    """First-order low-pass filter with time constant tau."""

    def __init__(self, value: float, dt: float, tau: float):
        self.last = value
        self.dt = dt
        self.tau = tau

    def reset(self, value: float):
        self.last = value

    def smooth(self, value: float) -> float:
        alpha = math.exp(-self.dt / self.tau)
        self.last = value * (1.0 - alpha) + self.last * alpha
        return self.last


@dataclass
class PopulationRecord:
    """Census of one tick."""
    tick: int
    minions: int
    mature: int
    spores: int
    resources: int
    lineages: int
    mean_energy: float
    smoothed_minions: float
    trend_minions: float


class PopulationHistory:
    """Bounded per-tick census log with smoothing."""

    def __init__(self, maxlen: int = 10000, window: int = 60, dt: float = 1.0 / 60.0):
        self.records: Deque[PopulationRecord] = deque(maxlen=maxlen)
        self.average = MovingAverage(window)
        self.trend = Exponential(0.0, dt, tau=window * dt)
        self._started = False

    def record(self, tick: int, minions, spores: int, resources: int, lineages: int) -> PopulationRecord:
        minions = list(minions)
        count = len(minions)
        mean_energy = sum(m.energy for m in minions) / count if count else 0.0
        if not self._started:
            self.trend.reset(count)
            self._started = True
        rec = PopulationRecord(
            tick=tick,
            minions=count,
            mature=sum(1 for m in minions if m.is_mature),
            spores=spores,
            resources=resources,
            lineages=lineages,
            mean_energy=mean_energy,
            smoothed_minions=self.average.smooth(count),
            trend_minions=self.trend.smooth(count),
        )
        self.records.append(rec)
        return rec

    @property
    def latest(self):
        return self.records[-1] if self.records else None

    def series(self, name: str) -> List:
        return [getattr(r, name) for r in self.records]

    def to_list(self) -> List[Dict]:
        return [asdict(r) for r in self.records]

    def __len__(self) -> int:
        return len(self.records)
