# ================================
# file: core/coords.py
# ================================
from __future__ import annotations
from typing import Tuple
import math

# Import configuration parameters
from core.config import CELL_SIZE, MAZE_WIDTH, MAZE_HEIGHT


def round_half_up(v: float) -> int:
    """Nearest integer, .5 goes up (Python's round() would go to even)."""
    return int(math.floor(v + 0.5))


class CoordinateSystem:
    """World (continuous) <-> grid (cell index) conversions."""

    def __init__(self, cell_size: float = CELL_SIZE, width: int = MAZE_WIDTH,
                 height: int = MAZE_HEIGHT) -> None:
        if cell_size <= 0:
            raise ValueError(f"cell_size must be positive, got {cell_size}")
        self.cell_size = float(cell_size)
        self.width = int(width)
        self.height = int(height)

    # 世界坐标 ↔ 网格坐标
    def world_to_grid(self, x_world: float, y_world: float) -> Tuple[int, int]:
        """World -> nearest cell (x, y). Not clamped: callers test bounds."""
        return (round_half_up(x_world / self.cell_size),
                round_half_up(y_world / self.cell_size))

    def grid_to_world(self, grid_x: int, grid_y: int) -> Tuple[float, float]:
        return (float(grid_x) * self.cell_size, float(grid_y) * self.cell_size)

    def is_in_grid(self, grid_x: int, grid_y: int) -> bool:
        return 0 <= grid_x < self.width and 0 <= grid_y < self.height
