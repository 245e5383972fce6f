from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .coordinate import Coordinate


@dataclass(frozen=True, slots=True)
class NetSnapshot:
    chain: Tuple[Coordinate, ...]
    fitness: int
    resistance: int
    limits: Optional[Tuple[int, int]]

    def to_payload(self) -> Dict[str, Any]:
        return {
            "chain": [[coordinate.x, coordinate.y] for coordinate in self.chain],
            "fitness": self.fitness,
            "resistance": self.resistance,
            "limits": list(self.limits) if self.limits is not None else None,
        }


@dataclass(frozen=True, slots=True)
class SnapshotMetadata:
    width: int
    height: int
    seed: Optional[int]
    generation: int


@dataclass(frozen=True, slots=True)
class PopulationSnapshot:
    nets: Tuple[NetSnapshot, ...]
    metadata: SnapshotMetadata

    def to_payload(self) -> Dict[str, Any]:
        nets: List[Dict[str, Any]] = [net.to_payload() for net in self.nets]
        return {
            "width": self.metadata.width,
            "height": self.metadata.height,
            "seed": self.metadata.seed,
            "generation": self.metadata.generation,
            "nets": nets,
        }
