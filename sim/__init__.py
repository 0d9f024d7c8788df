# ================================
# file: sim/__init__.py
# ================================
"""Simulation world: generated maze grid and the robot with its simulated sensors."""
from .maze_map import MazeMap
from .maze_generator import MazeGenerator, generate_maze
from .robot_sim import RobotSim


__all__ = ["MazeMap", "MazeGenerator", "generate_maze", "RobotSim"]
