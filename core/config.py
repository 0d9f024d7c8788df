# ================================
# file: core/config.py
# ================================
"""
Global configuration for the maze lidar robot simulator.
World units are canvas pixels: one grid cell is CELL_SIZE units wide.
Angles are radians, times are seconds.

Organization:
1. Maze & Coordinate System
2. Robot Physical Parameters
3. Sensor Configuration
4. Rewards
5. Policy Profiles
6. Simulation Loop
7. GUI & Logging
"""
from __future__ import annotations
import math

# ================================
# 1. MAZE & COORDINATE SYSTEM
# ================================
MAZE_WIDTH: int = 30            # Grid columns
MAZE_HEIGHT: int = 20           # Grid rows
MAZE_MIN_SIZE: int = 3          # Smallest dimension the +/-2 carving stepping supports
CELL_SIZE: float = 20.0         # World units per grid cell

WALL: int = 1                   # Cell state: obstructed
OPEN: int = 0                   # Cell state: carved corridor

MAZE_START_CELL: tuple = (1, 1)  # (x, y) carving origin, near top-left corner
# Goal is one cell inside the opposite corner: (width-2, height-2)
MAZE_GOAL_INSET: int = 2

# ================================
# 2. ROBOT PHYSICAL PARAMETERS
# ================================
ROBOT_RADIUS: float = 8.0       # Drawing radius (world units)
ROBOT_SPEED: float = 2.0        # Forward step length per action (world units)
TURN_INCREMENT: float = math.pi / 8.0  # Heading change per turn action (rad)

# Robot start pose: centre of the start cell, facing +x
ROBOT_START_X: float = MAZE_START_CELL[0] * CELL_SIZE
ROBOT_START_Y: float = MAZE_START_CELL[1] * CELL_SIZE
ROBOT_START_THETA: float = 0.0

# ================================
# 3. SENSOR CONFIGURATION
# ================================
# Depth probe look-ahead in world units, not cells: 1/CELL_SIZE of a cell, so
# it usually lands in the robot's own cell and reads a wall only near an edge.
DEPTH_PROBE_DISTANCE: float = 1.0
SENSOR_RANGE: float = 50.0          # Lidar max range (world units); also "no hit"
LIDAR_BEAMS: int = 8                # Beams evenly spread over 360 deg
LIDAR_STEP: float = 1.0             # Raycast probe increment (world units)

# ================================
# 4. REWARDS
# ================================
REWARD_MOVE: int = 1            # Forward step committed
REWARD_COLLISION: int = -1      # Forward step blocked by a wall
REWARD_TURN: int = 0            # Any turn

# ================================
# 5. POLICY PROFILES
# ================================
# Static weights, not trained here. They need not sum to 1.
POLICY_PROFILES: dict = {
    "model1": {"forward": 0.5, "turn_left": 0.2, "turn_right": 0.3},
    "model2": {"forward": 0.7, "turn_left": 0.15, "turn_right": 0.15},
    "model3": {"forward": 0.4, "turn_left": 0.4, "turn_right": 0.2},
}
DEFAULT_POLICY: str = "model1"

# ================================
# 6. SIMULATION LOOP
# ================================
STEP_INTERVAL_S: float = 0.1    # Wall-clock cadence between steps
MAX_STEPS: int = 2000           # Headless safety limit (0 disables)

# ================================
# 7. GUI & LOGGING
# ================================
GUI_FIGSIZE: tuple = (9, 6)
GUI_ROBOT_COLOR: str = "blue"
GUI_HEADING_COLOR: str = "red"
GUI_LIDAR_COLOR: str = "lime"
GUI_LIDAR_ALPHA: float = 0.5
GUI_GOAL_COLOR: str = "orange"

LOG_DIR: str = "logs"                       # Run logs and exports
LOG_EVERY_N_STEPS: int = 50                 # Step log throttle
EXPORT_PREFIX: str = "training_data_"       # training_data_<policy>.json
