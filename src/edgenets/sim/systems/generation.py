from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Sequence, Tuple

from ..core.net import Net
from ..utils.ranges import Range

if TYPE_CHECKING:
    from ..core.engine import EvolutionEngine

MUTATION_RESISTANCE = (1, 255)


@dataclass(frozen=True, slots=True)
class NetFeatures:
    target_count: int
    node_count: int
    horizontal_step: int
    lifetime: int
    regular_count: int
    mutant_count: int


def calculate_features(
    width: int,
    height: int,
    population_size: int,
    population_density: float,
    node_density: float,
    mutation_rate: float,
) -> NetFeatures:
    target = int(math.ceil(height * population_density)) - population_size
    regular = int(target * (1.0 - mutation_rate)) if target > 0 else 0
    mutant = int(target * mutation_rate) if target > 0 else 0
    return NetFeatures(
        target_count=target,
        node_count=int(math.ceil(width * node_density)),
        horizontal_step=int(1.0 / node_density) + 1,
        lifetime=int(height * (1.0 - population_density)),
        regular_count=regular,
        mutant_count=mutant,
    )


def occupied_ranges(nets: Sequence[Net]) -> Tuple[Optional[Range], ...]:
    return tuple(net.limits() for net in nets)


def populate(engine: EvolutionEngine, features: NetFeatures) -> Tuple[int, int]:
    """Add the generation's regular and mutant nets; returns both counts."""
    created = 0
    mutated = 0
    if features.regular_count > 0:
        low, high = engine._resistance_range
        resistance = engine._rng.uniform_int(low, high)
        created = _generate(engine, features, features.regular_count, resistance)
    if features.mutant_count > 0:
        resistance = engine._rng.uniform_int(*MUTATION_RESISTANCE)
        mutated = _generate(engine, features, features.mutant_count, resistance)
    return created, mutated


def _generate(engine: EvolutionEngine, features: NetFeatures, quantity: int, resistance: int) -> int:
    for _ in range(quantity):
        engine._nets.append(_place_net(engine, features, resistance))
    return quantity


def _place_net(engine: EvolutionEngine, features: NetFeatures, resistance: int) -> Net:
    height = engine._pixels.height
    middle = height // 2
    row = engine._rng.gaussian_excluding_ranges(middle, middle, 0, height - 1, occupied_ranges(engine._nets))
    return Net(
        row=row,
        node_count=features.node_count,
        horizontal_step=features.horizontal_step,
        direction=engine._rng.vertical_direction(),
        resistance=resistance,
        dispersion_allowed=engine._config.dispersion_allowed,
    )
