from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Sequence

from ..types.coordinate import Coordinate
from ..utils.math2d import _movement_components
from ..utils.ranges import Range, is_valid_coordinate, within_ranges
from .pixels import PixelSource


class NodeState(IntEnum):
    FREE = 0
    READY = 1
    BLOCKED = -1
    WASTE = -2


@dataclass(slots=True)
class Node:
    """A point agent crawling against its direction until it meets an edge.

    FREE nodes keep moving, READY nodes sit on an intensity edge, BLOCKED
    nodes could not move this tick and WASTE nodes are dead and get pruned.
    """

    x: int
    y: int
    angle: float
    state: NodeState = NodeState.FREE

    @property
    def position(self) -> Coordinate:
        return Coordinate(self.x, self.y)

    def advance(
        self,
        distance: int,
        pixels: PixelSource,
        ranges: Sequence[Optional[Range]],
        resistance: int,
    ) -> NodeState:
        width = pixels.width
        height = pixels.height
        if not is_valid_coordinate(self.x, self.y, width, height):
            return NodeState.WASTE
        dx, dy = _movement_components(self.angle, distance)
        next_x = self.x - dx
        next_y = self.y - dy
        if not is_valid_coordinate(next_x, next_y, width, height) or within_ranges(next_y, ranges):
            return NodeState.WASTE if self.state == NodeState.BLOCKED else NodeState.BLOCKED
        if abs(self.pixel_difference(pixels, next_x, next_y)) > resistance:
            return NodeState.READY
        self.x = next_x
        self.y = next_y
        return NodeState.FREE

    def pixel_difference(self, pixels: PixelSource, next_x: int, next_y: int) -> int:
        return pixels.intensity_at(self.x, self.y) - pixels.intensity_at(next_x, next_y)

    def run(self, pixels: PixelSource, ranges: Sequence[Optional[Range]], resistance: int) -> NodeState:
        self.state = self.advance(1, pixels, ranges, resistance)
        return self.state
