from __future__ import annotations

from typing import Iterable, Optional, Sequence, Tuple

Range = Tuple[int, int]


def within_ranges(value: int, ranges: Iterable[Optional[Range]]) -> bool:
    """True when ``value`` lies inside any inclusive ``(top, bottom)`` range."""
    for limits in ranges:
        if limits is not None and limits[0] <= value <= limits[1]:
            return True
    return False


def covers_domain(lower: int, upper: int, ranges: Sequence[Optional[Range]]) -> bool:
    """True when every integer of ``[lower, upper]`` falls inside some range."""
    spans = sorted(limits for limits in ranges if limits is not None)
    cursor = lower
    for top, bottom in spans:
        if top > cursor:
            return False
        if bottom >= cursor:
            cursor = bottom + 1
            if cursor > upper:
                return True
    return cursor > upper


def is_valid_coordinate(x: int, y: int, width: int, height: int) -> bool:
    return 0 <= x < width and 0 <= y < height
