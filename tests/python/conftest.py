import os
import sys
from pathlib import Path

import pytest

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

ROOT = Path(__file__).resolve().parents[2]
src_root = ROOT / "src"
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))

from edgenets.sim.core.pixels import GrayImage  # noqa: E402


def banded_rows(width: int, height: int, levels: list[int]) -> list[list[int]]:
    band_height = max(1, height // len(levels))
    return [[levels[min(y // band_height, len(levels) - 1)]] * width for y in range(height)]


@pytest.fixture
def banded_image() -> GrayImage:
    return GrayImage(banded_rows(60, 60, [20, 180, 60, 230]))


@pytest.fixture
def step_image() -> GrayImage:
    # Rows 0-4 are black, rows 5-9 are bright.
    return GrayImage(banded_rows(5, 10, [0, 200]))
