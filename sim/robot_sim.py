# ================================
# file: sim/robot_sim.py
# ================================
from __future__ import annotations
from typing import Optional, Tuple
import math
from core.types import Action, LaserScan, Pose2D
from core.config import (
    ROBOT_SPEED, TURN_INCREMENT, SENSOR_RANGE, LIDAR_BEAMS, LIDAR_STEP,
    DEPTH_PROBE_DISTANCE, REWARD_MOVE, REWARD_COLLISION, REWARD_TURN,
    ROBOT_START_X, ROBOT_START_Y, ROBOT_START_THETA, WALL
)
from .maze_map import MazeMap


class RobotSim:
    """Point robot with a depth probe, a raycast lidar and discrete actions.
    Sensing and motion read the maze; only the pose is mutated.
    Thread-safety: assume single-threaded calls from the simulation loop.
    """
    def __init__(self, maze: MazeMap, pose: Optional[Pose2D] = None,
                 speed: float = ROBOT_SPEED, turn_increment: float = TURN_INCREMENT,
                 sensor_range: float = SENSOR_RANGE, lidar_beams: int = LIDAR_BEAMS,
                 lidar_step: float = LIDAR_STEP,
                 depth_probe: float = DEPTH_PROBE_DISTANCE) -> None:
        if sensor_range <= 0:
            raise ValueError(f"sensor_range must be positive, got {sensor_range}")
        if lidar_beams < 1:
            raise ValueError(f"lidar_beams must be >= 1, got {lidar_beams}")
        if lidar_step <= 0:
            raise ValueError(f"lidar_step must be positive, got {lidar_step}")
        self.maze = maze
        self.speed = float(speed)
        self.turn_increment = float(turn_increment)
        self.sensor_range = float(sensor_range)
        self.lidar_beams = int(lidar_beams)
        self.lidar_step = float(lidar_step)
        self.depth_probe = float(depth_probe)
        if pose is None:
            pose = Pose2D(ROBOT_START_X, ROBOT_START_Y, ROBOT_START_THETA)
        self.pose = pose.copy()

    def reset(self, pose: Pose2D) -> None:
        self.pose = pose.copy()

    def grid_position(self) -> Tuple[int, int]:
        return self.maze.world_to_grid(self.pose.x, self.pose.y)

    # ---- sensing ----
    def sense_depth(self) -> int:
        """State of the cell one probe distance ahead: 0=open, 1=wall.
        Outside the grid counts as wall.
        """
        fx = self.pose.x + self.depth_probe * math.cos(self.pose.theta)
        fy = self.pose.y + self.depth_probe * math.sin(self.pose.theta)
        return self.maze.cell_at_world(fx, fy)

    def sense_lidar(self) -> LaserScan:
        """Raycast lidar, beams evenly spaced over 360 deg starting at heading."""
        ang_inc = 2.0 * math.pi / float(self.lidar_beams)
        ranges = [self._raycast(self.pose.theta + k * ang_inc)
                  for k in range(self.lidar_beams)]
        return LaserScan(self.pose.theta, ang_inc, ranges, robot_pose=self.pose.copy())

    def _raycast(self, ang: float) -> float:
        # probe at step, 2*step, ... until a wall cell or the max range
        cos_a, sin_a = math.cos(ang), math.sin(ang)
        d = 0.0
        while d < self.sensor_range:
            d = min(d + self.lidar_step, self.sensor_range)
            x = self.pose.x + d * cos_a
            y = self.pose.y + d * sin_a
            if self.maze.cell_at_world(x, y) == WALL:
                return d
        return self.sensor_range

    # ---- motion ----
    def move_forward(self) -> int:
        """Step ROBOT_SPEED along heading if the target cell is open.
        Returns +1 when the step is committed, -1 when blocked (pose untouched).
        """
        new_x = self.pose.x + self.speed * math.cos(self.pose.theta)
        new_y = self.pose.y + self.speed * math.sin(self.pose.theta)
        if self.maze.is_obstacle_world(new_x, new_y):
            return REWARD_COLLISION
        self.pose.x = new_x
        self.pose.y = new_y
        return REWARD_MOVE

    def turn_left(self) -> int:
        self.pose.theta -= self.turn_increment
        return REWARD_TURN

    def turn_right(self) -> int:
        self.pose.theta += self.turn_increment
        return REWARD_TURN

    def apply_action(self, action: Action) -> int:
        if action is Action.FORWARD:
            return self.move_forward()
        if action is Action.TURN_LEFT:
            return self.turn_left()
        if action is Action.TURN_RIGHT:
            return self.turn_right()
        raise ValueError(f"Invalid action {action!r}. Must be one of {[a.value for a in Action]}.")
