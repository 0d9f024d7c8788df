# ================================
# file: sim/maze_generator.py
# ================================
from __future__ import annotations
from typing import List, Optional, Tuple, Union
import random
import numpy as np
from core.config import (
    MAZE_WIDTH, MAZE_HEIGHT, MAZE_MIN_SIZE, MAZE_START_CELL, CELL_SIZE, WALL, OPEN
)
from .maze_map import MazeMap

# (dx, dy) with step 2 so carved cells stay separated by a removable wall
CARVE_DIRECTIONS: Tuple[Tuple[int, int], ...] = ((0, -2), (0, 2), (-2, 0), (2, 0))


def shuffle_directions(rng: random.Random) -> List[Tuple[int, int]]:
    """Fisher-Yates from the last index down, one draw per swap."""
    dirs = list(CARVE_DIRECTIONS)
    for i in range(len(dirs) - 1, 0, -1):
        j = int(rng.random() * (i + 1))
        dirs[i], dirs[j] = dirs[j], dirs[i]
    return dirs


class MazeGenerator:
    """
    Generates the 2D wall/open grid using randomized depth-first carving.
    Carving starts at the start cell, steps two cells at a time and knocks out
    the wall in between. The cell one step inside the opposite corner is
    forced open afterwards so there is always a labelled goal.
    """
    def __init__(self, rng: Optional[Union[random.Random, int]] = None,
                 cell_size: float = CELL_SIZE,
                 start_cell: Tuple[int, int] = MAZE_START_CELL) -> None:
        if rng is None or isinstance(rng, int):
            rng = random.Random(rng)
        self.rng = rng
        self.cell_size = float(cell_size)
        self.start_cell = (int(start_cell[0]), int(start_cell[1]))
        # cells in the order they were opened by carving (goal override excluded)
        self.visit_order: List[Tuple[int, int]] = []

    def _carve(self, cells: np.ndarray, width: int, height: int) -> None:
        """Iterative version of the recursive carve.

        Each stack frame is (x, y, shuffled dirs, next index). A frame's
        directions are shuffled when the cell is entered, and the "still a
        wall" test runs when a direction is reached, exactly as in recursion.
        """
        sx, sy = self.start_cell
        cells[sy, sx] = OPEN
        self.visit_order.append((sx, sy))
        stack = [[sx, sy, shuffle_directions(self.rng), 0]]

        while stack:
            frame = stack[-1]
            x, y, dirs, k = frame
            if k >= len(dirs):
                stack.pop()
                continue
            frame[3] = k + 1
            dx, dy = dirs[k]
            nx, ny = x + dx, y + dy
            if 0 < nx < width - 1 and 0 < ny < height - 1 and cells[ny, nx] == WALL:
                cells[y + dy // 2, x + dx // 2] = OPEN
                cells[ny, nx] = OPEN
                self.visit_order.append((nx, ny))
                stack.append([nx, ny, shuffle_directions(self.rng), 0])

    def generate(self, width: int = MAZE_WIDTH, height: int = MAZE_HEIGHT) -> MazeMap:
        """Carve a new maze. Returns a read-only MazeMap."""
        width, height = int(width), int(height)
        if width < MAZE_MIN_SIZE or height < MAZE_MIN_SIZE:
            raise ValueError(
                f"Maze must be at least {MAZE_MIN_SIZE}x{MAZE_MIN_SIZE}, got {width}x{height}")
        sx, sy = self.start_cell
        if not (0 < sx < width - 1 and 0 < sy < height - 1):
            raise ValueError(f"Start cell {self.start_cell} is not inside a {width}x{height} border")

        cells = np.full((height, width), WALL, dtype=np.uint8)
        self.visit_order = []
        self._carve(cells, width, height)

        # Ensure an exit at the opposite corner, even if carving never got there
        cells[height - 2, width - 2] = OPEN

        return MazeMap(cells, cell_size=self.cell_size, start_cell=self.start_cell).freeze()


def generate_maze(width: int = MAZE_WIDTH, height: int = MAZE_HEIGHT,
                  seed: Optional[int] = None) -> MazeMap:
    return MazeGenerator(rng=seed).generate(width, height)
