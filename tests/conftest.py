"""
Pytest configuration for the maze simulator tests.

Puts the repository root on sys.path so the flat packages (core, sim, nav,
appio, gui) import without installation, and forces a non-interactive
matplotlib backend.
"""

import os
import sys
from pathlib import Path

import numpy as np
import pytest

os.environ.setdefault("MPLBACKEND", "Agg")

_root_path = str(Path(__file__).resolve().parent.parent)
if _root_path not in sys.path:
    sys.path.insert(0, _root_path)

from core.config import OPEN, WALL  # noqa: E402
from sim import MazeMap  # noqa: E402


def grid_from_rows(rows):
    """'#' = wall, anything else = open."""
    return np.array([[WALL if ch == "#" else OPEN for ch in row] for row in rows], dtype=np.uint8)


@pytest.fixture
def small_maze():
    """5x5 ring corridor around a centre pillar, cell size 20."""
    rows = (
        "#####",
        "#...#",
        "#.#.#",
        "#...#",
        "#####",
    )
    return MazeMap(grid_from_rows(rows), cell_size=20.0).freeze()


@pytest.fixture
def open_room():
    """20x20 room: border walls only."""
    grid = np.full((20, 20), OPEN, dtype=np.uint8)
    grid[0, :] = WALL
    grid[-1, :] = WALL
    grid[:, 0] = WALL
    grid[:, -1] = WALL
    return MazeMap(grid, cell_size=20.0).freeze()


class FixedRandom:
    """random.Random stand-in returning queued values; counts draws."""

    def __init__(self, *values):
        self.values = list(values)
        self.calls = 0

    def random(self):
        self.calls += 1
        return self.values.pop(0)
