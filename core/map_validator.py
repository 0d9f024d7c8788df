# ================================
# file: core/map_validator.py
# ================================
from __future__ import annotations
"""Map validation module for the maze simulator.
Checks grid invariants after generation and reports connectivity, including
the known case of a goal cell that carving never reached.
"""
from typing import Any, Dict, Tuple
import numpy as np
from scipy.ndimage import label

from core.config import OPEN, WALL


class MapValidator:
    """Checks border walls, start/goal cells and corridor connectivity."""

    def __init__(self, logger_func=None, log_file=None):
        self.logger_func = logger_func
        self.log_file = log_file

    def _log(self, message: str, module: str = "MAP_VALID") -> None:
        """Log message using the provided logger function"""
        if self.logger_func and self.log_file:
            self.logger_func(self.log_file, message, module)

    @staticmethod
    def border_is_wall(grid: np.ndarray) -> bool:
        return bool(np.all(grid[0, :] == WALL) and np.all(grid[-1, :] == WALL)
                    and np.all(grid[:, 0] == WALL) and np.all(grid[:, -1] == WALL))

    @staticmethod
    def label_open_cells(grid: np.ndarray) -> Tuple[np.ndarray, int]:
        """4-neighbour connected components of OPEN cells (0 = wall)."""
        return label(grid == OPEN)

    def analyze(self, maze) -> Dict[str, Any]:
        """Connectivity report for a MazeMap."""
        grid = maze.grid
        labels, n_components = self.label_open_cells(grid)
        sx, sy = maze.start_cell
        gx, gy = maze.goal_cell
        start_label = int(labels[sy, sx])
        goal_label = int(labels[gy, gx])

        open_total = int(np.sum(grid == OPEN))
        reachable = int(np.sum(labels == start_label)) if start_label else 0

        return {
            'border_walls': self.border_is_wall(grid),
            'start_open': maze.is_open(sx, sy),
            'goal_open': maze.is_open(gx, gy),
            'components': int(n_components),
            'reachable_count': reachable,
            'unreachable_count': open_total - reachable,
            'goal_connected': bool(start_label) and start_label == goal_label,
        }

    def validate(self, maze) -> Tuple[bool, Dict[str, Any]]:
        """Hard invariants decide the result; a disconnected goal is only reported."""
        report = self.analyze(maze)
        ok = report['border_walls'] and report['start_open'] and report['goal_open']

        self._log(f"地图验证: {maze.width}x{maze.height}, 连通分量={report['components']}, "
                  f"可达={report['reachable_count']}, 不可达={report['unreachable_count']}")
        if not report['goal_connected']:
            # Goal is forced open after carving; on even dimensions carving cannot reach it
            self._log(f"警告: 目标 {maze.goal_cell} 与起点 {maze.start_cell} 不连通", "MAP_WARN")
        self._log(f"地图验证结果: {'通过' if ok else '失败'}")
        return ok, report
