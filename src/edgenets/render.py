from __future__ import annotations

import math
from typing import Iterator, Tuple

import pygame

from .sim.core.config import RenderConfig
from .sim.types.coordinate import Coordinate
from .sim.types.snapshot import PopulationSnapshot


def draw_population(surface: pygame.Surface, snapshot: PopulationSnapshot, config: RenderConfig) -> int:
    """Paint every surviving chain; returns the number of pixels set."""
    painted = 0
    color = pygame.Color(*config.color)
    for net in snapshot.nets:
        chain = net.chain
        for index, coordinate in enumerate(chain):
            painted += draw_coordinate(surface, color, config.node_level, coordinate)
            if index + 1 < len(chain):
                painted += draw_line(surface, color, config.line_level, coordinate, chain[index + 1])
    return painted


def draw_coordinate(surface: pygame.Surface, color: pygame.Color, level: int, coordinate: Coordinate) -> int:
    painted = 0
    for x, y in _square(coordinate, level, surface.get_size()):
        surface.set_at((x, y), color)
        painted += 1
    return painted


def draw_line(surface: pygame.Surface, color: pygame.Color, level: int, start: Coordinate, end: Coordinate) -> int:
    if level < 0:
        return 0
    painted = 0
    for sample in _segment(start, end):
        painted += draw_coordinate(surface, color, level, sample)
    return painted


def _square(center: Coordinate, level: int, size: Tuple[int, int]) -> Iterator[Tuple[int, int]]:
    if level < 0:
        return
    width, height = size
    for dx in range(-level, level + 1):
        for dy in range(-level, level + 1):
            x = center.x + dx
            y = center.y + dy
            if 0 <= x < width and 0 <= y < height:
                yield x, y


def _segment(start: Coordinate, end: Coordinate) -> Iterator[Coordinate]:
    steps = int(math.hypot(end.x - start.x, end.y - start.y))
    if steps == 0:
        return
    for step in range(1, steps + 1):
        t = step / steps
        yield Coordinate(
            int(round(start.x + (end.x - start.x) * t)),
            int(round(start.y + (end.y - start.y) * t)),
        )
