from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from ..types.coordinate import Coordinate
from ..utils.ranges import Range
from .node import Node, NodeState
from .pixels import PixelSource

EMPTY_FITNESS = -255


class Net:
    """A chain of nodes sharing one row, direction and resistance.

    The chain is the ordered list of live nodes: nodes are created once at
    construction and only ever removed. ``top``/``bottom`` cache the vertical
    extent of the live nodes and are refreshed after every ``run``.
    """

    def __init__(
        self,
        row: int,
        node_count: int,
        horizontal_step: int,
        direction: float,
        resistance: int,
        dispersion_allowed: int,
    ):
        if node_count < 0:
            raise ValueError(f"node_count must be non-negative, got {node_count}")
        self._resistance = resistance
        self._dispersion_allowed = dispersion_allowed
        self._nodes: List[Node] = [
            Node(x=index * horizontal_step, y=row, angle=direction) for index in range(node_count + 1)
        ]
        self._top = row
        self._bottom = row
        self.update_limits()

    @property
    def nodes(self) -> List[Node]:
        return self._nodes

    @property
    def resistance(self) -> int:
        return self._resistance

    @property
    def is_empty(self) -> bool:
        return not self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def limits(self) -> Optional[Range]:
        if not self._nodes:
            return None
        return (self._top, self._bottom)

    def chain(self) -> Tuple[Coordinate, ...]:
        return tuple(node.position for node in self._nodes)

    def update_limits(self) -> None:
        if not self._nodes:
            return
        rows = [node.y for node in self._nodes]
        self._top = min(rows)
        self._bottom = max(rows)

    def fitness(self) -> int:
        if not self._nodes:
            return EMPTY_FITNESS
        score = sum(int(node.state) for node in self._nodes)
        return score + self.thickness_score(abs(self._bottom - self._top))

    def thickness_score(self, thickness: int) -> int:
        if thickness <= self._dispersion_allowed:
            return self._dispersion_allowed - thickness
        return thickness * -2

    def run(self, pixels: PixelSource, ranges: Sequence[Optional[Range]]) -> int:
        """Advance every unsettled node one pixel; returns how many were pruned."""
        survivors: List[Node] = []
        for node in self._nodes:
            if node.state != NodeState.READY:
                node.run(pixels, ranges, self._resistance)
                if node.state == NodeState.WASTE:
                    continue
            survivors.append(node)
        pruned = len(self._nodes) - len(survivors)
        self._nodes = survivors
        self.update_limits()
        return pruned

    def count(self, state: NodeState) -> int:
        return sum(1 for node in self._nodes if node.state == state)
