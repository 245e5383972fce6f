from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Protocol, Sequence, Tuple

if TYPE_CHECKING:
    import pygame


class PixelSource(Protocol):
    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def intensity_at(self, x: int, y: int) -> int: ...


class GrayImage:
    """Read-only grayscale raster addressed as ``rows[y][x]``."""

    def __init__(self, rows: Iterable[Sequence[int]]):
        self._rows: Tuple[Tuple[int, ...], ...] = tuple(tuple(int(value) for value in row) for row in rows)
        if not self._rows or not self._rows[0]:
            raise ValueError("GrayImage needs at least one pixel")
        widths = {len(row) for row in self._rows}
        if len(widths) != 1:
            raise ValueError("GrayImage rows must all have the same width")
        for row in self._rows:
            for value in row:
                if not 0 <= value <= 255:
                    raise ValueError(f"Intensity {value} outside [0, 255]")
        self._width = len(self._rows[0])
        self._height = len(self._rows)

    @classmethod
    def uniform(cls, width: int, height: int, value: int = 0) -> "GrayImage":
        return cls([[value] * width for _ in range(height)])

    @classmethod
    def from_surface(cls, surface: "pygame.Surface") -> "GrayImage":
        # Grayscale input carries the intensity on every channel; blue is read.
        width, height = surface.get_size()
        return cls([[surface.get_at((x, y)).b for x in range(width)] for y in range(height)])

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def intensity_at(self, x: int, y: int) -> int:
        return self._rows[y][x]


def vertical_difference_range(pixels: PixelSource) -> tuple[int, int]:
    """Minimum and maximum of ``|I(x, y - 1) - I(x, y)|`` over the image."""
    if pixels.height < 2:
        return 0, 0
    low, high = 255, 0
    for y in range(1, pixels.height):
        for x in range(pixels.width):
            difference = abs(pixels.intensity_at(x, y - 1) - pixels.intensity_at(x, y))
            if difference > high:
                high = difference
            if difference < low:
                low = difference
    return low, high


def resistance_range(pixels: PixelSource, sensitivity: float) -> tuple[int, int]:
    low, high = vertical_difference_range(pixels)
    # Intensities are 8-bit, so the band never exceeds 255.
    high = min(high + 1, 255)
    low += int((high - low) * (1.0 - sensitivity))
    return low, high
