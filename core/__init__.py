# ================================
# file: core/__init__.py
# ================================
"""
Core Package

Exports fundamental types, configurations, and utilities.
"""
from core.types import Pose2D, LaserScan, Action, LogEntry, StepResult
from core.coords import CoordinateSystem, round_half_up
from core.config import (
    # Maze configuration
    MAZE_WIDTH, MAZE_HEIGHT, CELL_SIZE, WALL, OPEN, MAZE_START_CELL,

    # Robot configuration
    ROBOT_RADIUS, ROBOT_SPEED, TURN_INCREMENT,

    # Sensor configuration
    SENSOR_RANGE, LIDAR_BEAMS,

    # Rewards
    REWARD_MOVE, REWARD_COLLISION, REWARD_TURN,

    # Policy / loop
    POLICY_PROFILES, DEFAULT_POLICY, STEP_INTERVAL_S,
)

__all__ = [
    # Types
    'Pose2D', 'LaserScan', 'Action', 'LogEntry', 'StepResult',

    # Coordinates
    'CoordinateSystem', 'round_half_up',

    # Configuration
    'MAZE_WIDTH', 'MAZE_HEIGHT', 'CELL_SIZE', 'WALL', 'OPEN', 'MAZE_START_CELL',
    'ROBOT_RADIUS', 'ROBOT_SPEED', 'TURN_INCREMENT',
    'SENSOR_RANGE', 'LIDAR_BEAMS',
    'REWARD_MOVE', 'REWARD_COLLISION', 'REWARD_TURN',
    'POLICY_PROFILES', 'DEFAULT_POLICY', 'STEP_INTERVAL_S',
]
