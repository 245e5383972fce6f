from __future__ import annotations

import random
from typing import Optional, Sequence

from ..utils.math2d import DOWN, UP, _round_half_up
from ..utils.ranges import Range, covers_domain, within_ranges
from .errors import SamplingExhaustedError

DEFAULT_MAX_ATTEMPTS = 10_000


class DeterministicRng:
    def __init__(self, seed: Optional[int], max_attempts: int = DEFAULT_MAX_ATTEMPTS):
        self._seed = seed
        self._random = random.Random(seed)
        self._max_attempts = max_attempts

    @property
    def seed(self) -> Optional[int]:
        return self._seed

    def reset(self) -> None:
        self._random.seed(self._seed)

    def uniform_int(self, lower: int, upper: int) -> int:
        return self._random.randint(lower, upper)

    def gaussian(self, mean: float, stddev: float) -> float:
        return self._random.gauss(mean, stddev)

    def gaussian_int(self, mean: float, stddev: float) -> int:
        return _round_half_up(self.gaussian(mean, stddev))

    def vertical_direction(self) -> int:
        return UP if self._random.random() < 0.5 else DOWN

    def uniform_excluding_ranges(self, lower: int, upper: int, ranges: Sequence[Optional[Range]]) -> int:
        self._ensure_reachable(lower, upper, ranges)
        for _ in range(self._max_attempts):
            chosen = self.uniform_int(lower, upper)
            if not within_ranges(chosen, ranges):
                return chosen
        raise SamplingExhaustedError(lower, upper, self._max_attempts)

    def gaussian_excluding_ranges(
        self,
        mean: float,
        stddev: float,
        lower: int,
        upper: int,
        ranges: Sequence[Optional[Range]],
    ) -> int:
        self._ensure_reachable(lower, upper, ranges)
        for _ in range(self._max_attempts):
            chosen = self.gaussian_int(mean, stddev)
            if lower <= chosen <= upper and not within_ranges(chosen, ranges):
                return chosen
        raise SamplingExhaustedError(lower, upper, self._max_attempts)

    def _ensure_reachable(self, lower: int, upper: int, ranges: Sequence[Optional[Range]]) -> None:
        if covers_domain(lower, upper, ranges):
            raise SamplingExhaustedError(lower, upper, 0, "exclusion ranges cover the whole interval")
