# ================================
# file: gui/visualizer.py
# ================================
from __future__ import annotations
from typing import Optional
import math
import numpy as np
import matplotlib
import matplotlib.pyplot as plt
import matplotlib.patches as patches

from core import Pose2D, LaserScan
from core.config import (
    GUI_FIGSIZE, GUI_ROBOT_COLOR, GUI_HEADING_COLOR,
    GUI_LIDAR_COLOR, GUI_LIDAR_ALPHA, GUI_GOAL_COLOR, ROBOT_RADIUS, WALL
)


def select_backend(headless: bool = False) -> str:
    """Pick an interactive backend if one works, else fall back to Agg."""
    if not headless:
        for backend in ["TkAgg", "Qt5Agg", "QtAgg", "MacOSX"]:
            try:
                matplotlib.use(backend, force=True)
                print(f"[GUI] matplotlib backend: {backend}")
                return backend
            except Exception as e:
                print(f"[GUI] backend {backend} unavailable: {e}")
    matplotlib.use("Agg", force=True)
    return "Agg"


class Visualizer:
    """Matplotlib viewer: maze, robot disc with heading, lidar beams, goal.

    Pure consumer of simulation state: update() is handed the pose and the
    latest scan and draws nothing else.
    """

    def __init__(self, maze_map, headless: bool = False) -> None:
        self.maze_map = maze_map
        self.backend = select_backend(headless)
        self.interactive = self.backend != "Agg"

        cs = maze_map.cell_size
        H, W = maze_map.grid.shape
        # cell (x, y) is centred on (x*cs, y*cs); y grows downward like a canvas
        self.extent = [-0.5 * cs, (W - 0.5) * cs, (H - 0.5) * cs, -0.5 * cs]

        self.fig, self.ax = plt.subplots(1, 1, figsize=GUI_FIGSIZE)
        if self.interactive:
            plt.ion()

        img = np.where(maze_map.grid == WALL, 0, 255).astype(np.uint8)
        self.im = self.ax.imshow(img, cmap="gray", vmin=0, vmax=255, origin="upper",
                                 extent=self.extent, interpolation="nearest")
        self.ax.set_aspect('equal')
        self.ax.set_title(f"Maze {W}x{H}", fontsize=12, fontweight='bold')

        gx, gy = maze_map.grid_to_world(*maze_map.goal_cell)
        self.goal_patch = patches.Rectangle((gx - 0.5 * cs, gy - 0.5 * cs), cs, cs,
                                            fill=False, edgecolor=GUI_GOAL_COLOR, linewidth=2)
        self.ax.add_patch(self.goal_patch)

        self.robot_patch = patches.Circle((0.0, 0.0), ROBOT_RADIUS, color=GUI_ROBOT_COLOR)
        self.ax.add_patch(self.robot_patch)
        (self.heading_line,) = self.ax.plot([], [], '-', color=GUI_HEADING_COLOR, linewidth=2)
        (self.lidar_lines,) = self.ax.plot([], [], '-', color=GUI_LIDAR_COLOR,
                                           alpha=GUI_LIDAR_ALPHA, linewidth=1)
        self._frames = 0

    @staticmethod
    def beam_segments(pose: Pose2D, scan: LaserScan) -> np.ndarray:
        """(3N, 2) polyline: robot -> beam end, NaN separator, repeated per beam.
        Beams start from the pose the scan was taken at when it carries one.
        """
        r = np.asarray(scan.ranges, dtype=np.float64)
        if r.size == 0:
            return np.empty((0, 2))
        if scan.robot_pose is not None:
            pose = scan.robot_pose
        ang = scan.angle_min + scan.angle_increment * np.arange(r.size)
        pts = np.full((r.size * 3, 2), np.nan)
        pts[0::3, 0] = pose.x
        pts[0::3, 1] = pose.y
        pts[1::3, 0] = pose.x + r * np.cos(ang)
        pts[1::3, 1] = pose.y + r * np.sin(ang)
        return pts

    def update(self, pose: Pose2D, scan: Optional[LaserScan] = None, title: Optional[str] = None) -> None:
        self.robot_patch.center = (pose.x, pose.y)
        hx = pose.x + 2.0 * ROBOT_RADIUS * math.cos(pose.theta)
        hy = pose.y + 2.0 * ROBOT_RADIUS * math.sin(pose.theta)
        self.heading_line.set_data([pose.x, hx], [pose.y, hy])

        if scan is not None:
            seg = self.beam_segments(pose, scan)
            self.lidar_lines.set_data(seg[:, 0], seg[:, 1])
        if title:
            self.ax.set_title(title, fontsize=12, fontweight='bold')

        self._frames += 1
        if self.interactive:
            self.fig.canvas.draw_idle()
            plt.pause(0.001)
        else:
            self.fig.canvas.draw()

    def save(self, path: str) -> None:
        self.fig.savefig(path, dpi=100)

    def close(self) -> None:
        try:
            plt.close(self.fig)
        except Exception as e:
            print(f"[WARN] 关闭图形界面时出错: {e}")
