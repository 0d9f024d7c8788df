# ================================
# file: sim/maze_map.py
# ================================
from __future__ import annotations
from typing import Dict, Tuple
import numpy as np
from core.config import CELL_SIZE, WALL, OPEN, MAZE_START_CELL, MAZE_GOAL_INSET
from core.coords import CoordinateSystem


class MazeMap:
    """Ground-truth maze grid.

    The grid uses values: 0=open, 1=wall, indexed grid[y, x] (row, column).
    Public accessors take (x, y). Anything outside the grid reads as a wall.
    """
    def __init__(self, grid: np.ndarray, cell_size: float = CELL_SIZE,
                 start_cell: Tuple[int, int] = MAZE_START_CELL) -> None:
        grid = np.asarray(grid, dtype=np.uint8)
        if grid.ndim != 2:
            raise ValueError(f"Maze grid must be 2D, got shape {grid.shape}")
        self.grid: np.ndarray = grid.copy()
        self.height: int = int(grid.shape[0])
        self.width: int = int(grid.shape[1])
        self.cell_size: float = float(cell_size)
        self.coords = CoordinateSystem(cell_size=cell_size, width=self.width, height=self.height)

        self.start_cell: Tuple[int, int] = (int(start_cell[0]), int(start_cell[1]))
        self.goal_cell: Tuple[int, int] = (self.width - MAZE_GOAL_INSET,
                                           self.height - MAZE_GOAL_INSET)

    def freeze(self) -> "MazeMap":
        """Mark the grid read-only; a run never edits its maze."""
        self.grid.setflags(write=False)
        return self

    # ---- cell queries ----
    def in_bounds(self, x: int, y: int) -> bool:
        return self.coords.is_in_grid(x, y)

    def cell(self, x: int, y: int) -> int:
        if not self.in_bounds(x, y):
            return WALL
        return int(self.grid[y, x])

    def is_open(self, x: int, y: int) -> bool:
        return self.cell(x, y) == OPEN

    # ---- world queries ----
    def world_to_grid(self, x_world: float, y_world: float) -> Tuple[int, int]:
        return self.coords.world_to_grid(x_world, y_world)

    def grid_to_world(self, grid_x: int, grid_y: int) -> Tuple[float, float]:
        return self.coords.grid_to_world(grid_x, grid_y)

    def cell_at_world(self, x_world: float, y_world: float) -> int:
        gx, gy = self.world_to_grid(x_world, y_world)
        return self.cell(gx, gy)

    def is_obstacle_world(self, x_world: float, y_world: float) -> bool:
        return self.cell_at_world(x_world, y_world) == WALL

    # ---- summaries ----
    def get_maze_info(self) -> Dict:
        return {
            'size': (self.width, self.height),
            'cell_size': self.cell_size,
            'start_cell': self.start_cell,
            'goal_cell': self.goal_cell,
            'wall_count': int(np.sum(self.grid == WALL)),
            'open_count': int(np.sum(self.grid == OPEN)),
        }
