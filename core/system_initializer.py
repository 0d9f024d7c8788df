# ================================
# file: core/system_initializer.py
# ================================
from __future__ import annotations
"""System initialization module for the maze simulator.
Resolves the policy profile, generates and validates the maze, places the
robot and wires everything into a fresh SimulationSession.
"""
import random
from typing import Optional


from core.config import (
    MAZE_WIDTH, MAZE_HEIGHT, CELL_SIZE, MAZE_START_CELL, ROBOT_START_THETA,
    DEFAULT_POLICY, MAX_STEPS
)
from core.types import Pose2D
from core.map_validator import MapValidator
from sim import MazeGenerator, RobotSim
from nav.policy import WeightedPolicy, resolve_policy_config
from nav.simulation import SimulationSession
from appio import DataLogger


class SystemInitializer:
    """Builds one SimulationSession per run; nothing survives between runs."""

    def __init__(self, logger_func=None, log_file=None, seed: Optional[int] = None):
        self.logger_func = logger_func
        self.log_file = log_file
        # one stream for the whole process; each run draws a fresh maze from it
        self.rng = random.Random(seed)

    def _log(self, message: str, module: str = "INIT") -> None:
        """Log message using the provided logger function"""
        if self.logger_func and self.log_file:
            self.logger_func(self.log_file, message, module)

    def initialize(self, policy_name: Optional[str] = None, width: int = MAZE_WIDTH,
                   height: int = MAZE_HEIGHT, cell_size: float = CELL_SIZE,
                   max_steps: int = MAX_STEPS, **robot_kwargs) -> SimulationSession:
        """Initialize a complete simulation run.

        Parameters
        ----------
        policy_name : Optional[str]
            Key into POLICY_PROFILES; None means DEFAULT_POLICY
        width, height : int
            Maze size in cells
        cell_size : float
            World units per cell
        max_steps : int
            Step limit for the session (0 = unlimited)
        robot_kwargs
            Passed through to RobotSim (speed, sensor_range, lidar_beams, ...)

        Returns
        -------
        SimulationSession
        """
        policy_name = DEFAULT_POLICY if policy_name is None else policy_name

        self._log("=" * 60)
        self._log("系统初始化开始")

        # Configuration is checked before anything is built
        config = resolve_policy_config(policy_name)
        self._log(f"策略: {config.name} {config.as_dict()}")

        maze = MazeGenerator(rng=self.rng, cell_size=cell_size,
                             start_cell=MAZE_START_CELL).generate(width, height)
        info = maze.get_maze_info()
        self._log(f"迷宫尺寸: {info['size'][0]} x {info['size'][1]}, 单元格 {cell_size}")
        self._log(f"  起点 {info['start_cell']}, 目标 {info['goal_cell']}")
        self._log(f"  墙壁网格数: {info['wall_count']}, 自由空间网格数: {info['open_count']}")

        ok, report = MapValidator(self.logger_func, self.log_file).validate(maze)
        if not ok:
            raise RuntimeError(f"Generated maze violates grid invariants: {report}")

        start_x, start_y = maze.grid_to_world(*maze.start_cell)
        robot = RobotSim(maze, Pose2D(start_x, start_y, ROBOT_START_THETA), **robot_kwargs)
        self._log(f"机器人初始位置: ({start_x:.1f}, {start_y:.1f}), 朝向 {ROBOT_START_THETA:.3f} rad")

        policy = WeightedPolicy(config, rng=random.Random(self.rng.random()))
        session = SimulationSession(maze, robot, policy, DataLogger(), max_steps=max_steps,
                                    logger_func=self.logger_func, log_file=self.log_file)
        self._log("系统初始化完成")
        self._log("=" * 60)
        return session
