from __future__ import annotations

from dataclasses import dataclass
from operator import methodcaller
from typing import Callable, Generic, List, Optional, Protocol, Sequence, TypeVar


class _Scored(Protocol):
    def fitness(self) -> int: ...


T = TypeVar("T", bound=_Scored)

net_fitness: Callable[[_Scored], int] = methodcaller("fitness")


@dataclass
class SelectionResult(Generic[T]):
    survivors: List[T]
    discarded: int
    best_min: Optional[int]
    best_max: Optional[int]
    lower_bound: Optional[int]


def selection_lower_bound(best_min: int, best_max: int, selection_rate: float) -> int:
    return best_max - int((best_max - best_min) * selection_rate)


def select_survivors(
    population: Sequence[T],
    selection_rate: float,
    key: Callable[[T], int] = net_fitness,
) -> SelectionResult[T]:
    """Keep the nets whose fitness falls within the selection band.

    Negative fitness is discarded outright; the band spans from the best
    fitness down by ``selection_rate`` of the non-negative fitness spread.
    """
    scored = sorted(((key(member), member) for member in population), key=lambda pair: pair[0])
    start = 0
    while start < len(scored) and scored[start][0] < 0:
        start += 1
    if start >= len(scored):
        return SelectionResult(survivors=[], discarded=len(scored), best_min=None, best_max=None, lower_bound=None)

    best_min = scored[start][0]
    best_max = scored[-1][0]
    lower_bound = selection_lower_bound(best_min, best_max, selection_rate)
    survivors = [member for fitness, member in scored[start:] if fitness >= lower_bound]
    return SelectionResult(
        survivors=survivors,
        discarded=len(scored) - len(survivors),
        best_min=best_min,
        best_max=best_max,
        lower_bound=lower_bound,
    )
