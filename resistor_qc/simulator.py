from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Optional


@dataclass
class SimulatorConfig:
    spread: float = 0.08  # +/- fraction of nominal for random demo values
    decimals: int = 2
    seed: Optional[int] = None


class SampleSimulator:
    """Generate demo measurements scattered around a nominal resistance."""

    def __init__(self, cfg: Optional[SimulatorConfig] = None):
        self.cfg = cfg or SimulatorConfig()
        self._rng = random.Random(self.cfg.seed)

    def next_value(self, nominal: float) -> float:
        raw = nominal * (1 + self._rng.uniform(-self.cfg.spread, self.cfg.spread))
        return max(0.0, round(raw, self.cfg.decimals))

    def sample(self, nominal: float, size: int) -> List[float]:
        return [self.next_value(nominal) for _ in range(size)]
