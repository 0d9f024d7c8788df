# ================================
# file: core/types.py
# ================================
"""Shared data structures for pose, lidar scans, actions and step records.
Use minimal typing: Tuple/Optional/Dict/Sequence only.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple


class Pose2D:
    """2D pose of the robot in world coordinates.


    Attributes
    -----------
    x, y : world units (grid cell * CELL_SIZE)
    theta : radians, not normalized
    """
    __slots__ = ("x", "y", "theta")


    def __init__(self, x: float, y: float, theta: float) -> None:
        self.x = float(x)
        self.y = float(y)
        self.theta = float(theta)


    def copy(self) -> "Pose2D":
        return Pose2D(self.x, self.y, self.theta)


    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.theta)


    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pose2D):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()

    # mutable, so compared by value but never used as a dict key
    __hash__ = None


    def __repr__(self) -> str:
        return f"Pose2D(x={self.x:.3f}, y={self.y:.3f}, theta={self.theta:.3f})"




class LaserScan:
    """Lidar scan container.


    Parameters
    ----------
    angle_min : float
    Angle (radians) of the first beam; equals the robot heading.
    angle_increment : float
    Angle increment per beam (radians).
    ranges : Sequence[float]
    Hit distance per beam in world units; length equals beam count.
    robot_pose : Optional[Pose2D]
    Pose when scan was taken (optional).
    """
    __slots__ = ("angle_min", "angle_increment", "ranges", "robot_pose")


    def __init__(self, angle_min: float, angle_increment: float,
        ranges: Sequence[float], robot_pose: Optional[Pose2D] = None) -> None:
        self.angle_min = float(angle_min)
        self.angle_increment = float(angle_increment)
        self.ranges = list(ranges)
        self.robot_pose = robot_pose


    def beam_count(self) -> int:
        return len(self.ranges)


    def beam_angles(self) -> list:
        return [self.angle_min + k * self.angle_increment for k in range(len(self.ranges))]


class Action(Enum):
    # values are the names written to exported logs
    FORWARD = "forward"
    TURN_LEFT = "turnLeft"
    TURN_RIGHT = "turnRight"


@dataclass(frozen=True)
class LogEntry:
    """One logged step: pre-action sensing, the action taken and its reward."""
    depth: int
    lidar: Tuple[float, ...]
    action: Action
    reward: int

    @property
    def state(self) -> Dict:
        return {"depth": self.depth, "lidar": list(self.lidar)}

    def to_dict(self) -> Dict:
        return {"state": self.state, "action": self.action.value, "reward": self.reward}


@dataclass
class StepResult:
    step: int
    depth: int
    scan: LaserScan
    action: Action
    reward: int
    pose: Pose2D
    cell: Tuple[int, int]
    done: bool = False
    reason: Optional[str] = None
