from __future__ import annotations

import math

from pygame.math import Vector2

UP = 90
DOWN = 270


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _standard_angle(angle: float) -> float:
    return angle % 360.0


def _movement_components(angle: float, distance: float) -> tuple[int, int]:
    """Pixel offsets travelled along ``angle`` degrees, rounded half up."""
    vector = Vector2()
    vector.from_polar((distance, _standard_angle(angle)))
    return _round_half_up(vector.x), _round_half_up(vector.y)
