from __future__ import annotations

from ..core.net import Net
from ..core.node import NodeState
from ..types.metrics import GenerationMetrics
from .selection import SelectionResult


def create_metrics(
    generation: int,
    population: int,
    created: int,
    mutated: int,
    lifetime: int,
    selection: SelectionResult[Net],
    duration_ms: float,
) -> GenerationMetrics:
    return GenerationMetrics(
        generation=generation,
        population=population,
        created=created,
        mutated=mutated,
        survivors=len(selection.survivors),
        discarded=selection.discarded,
        lifetime=lifetime,
        live_nodes=sum(len(net) for net in selection.survivors),
        ready_nodes=sum(net.count(NodeState.READY) for net in selection.survivors),
        best_fitness=selection.best_max,
        lower_bound=selection.lower_bound,
        duration_ms=duration_ms,
    )
