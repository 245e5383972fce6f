from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True)
class GenerationMetrics:
    generation: int
    population: int
    created: int
    mutated: int
    survivors: int
    discarded: int
    lifetime: int
    live_nodes: int
    ready_nodes: int
    best_fitness: Optional[int]
    lower_bound: Optional[int]
    duration_ms: float = 0.0
