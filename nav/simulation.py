# ================================
# file: nav/simulation.py
# ================================
from __future__ import annotations
from typing import Callable, Optional
from enum import Enum
import signal
import threading
import time

from core.types import LaserScan, StepResult
from core.config import STEP_INTERVAL_S, MAX_STEPS, LOG_EVERY_N_STEPS
from sim import MazeMap, RobotSim
from appio import DataLogger
from .policy import Policy


class SimState(Enum):
    RUNNING = 0
    GOAL_REACHED = 1
    STEP_LIMIT = 2
    CANCELLED = 3


class SimulationSession:
    """Everything one run owns: maze, robot, policy and the step log.

    Built fresh for every run; nothing is shared between runs. Driven one
    step at a time by whatever scheduler holds it (timer, test, headless loop).
    """
    def __init__(self, maze: MazeMap, robot: RobotSim, policy: Policy,
                 logger: Optional[DataLogger] = None, max_steps: int = 0,
                 logger_func=None, log_file=None) -> None:
        self.maze = maze
        self.robot = robot
        self.policy = policy
        self.logger = logger if logger is not None else DataLogger()
        self.max_steps = int(max_steps)
        self.logger_func = logger_func
        self.log_file = log_file

        self.state = SimState.RUNNING
        self.step_count = 0
        self.latest_scan: Optional[LaserScan] = None
        self.last_result: Optional[StepResult] = None

    def _log(self, message: str, module: str = "SIM") -> None:
        if self.logger_func and self.log_file:
            self.logger_func(self.log_file, message, module)

    @property
    def done(self) -> bool:
        return self.state is not SimState.RUNNING

    @property
    def goal_cell(self):
        return self.maze.goal_cell

    def at_goal(self) -> bool:
        return self.robot.grid_position() == self.maze.goal_cell

    def stop(self, state: SimState = SimState.CANCELLED) -> None:
        if not self.done:
            self.state = state
            self._log(f"运行结束 ({state.name}) @ step {self.step_count}")

    def cancel(self) -> None:
        self.stop(SimState.CANCELLED)

    def step(self) -> StepResult:
        """Sense, decide, act, log, then check for the goal."""
        if self.done:
            raise RuntimeError(f"Simulation already finished ({self.state.name}); start a new run.")

        # --- Sense ---
        depth = self.robot.sense_depth()
        scan = self.robot.sense_lidar()

        # --- Decide & act ---
        action = self.policy.decide(depth, scan)
        reward = self.robot.apply_action(action)

        # --- Log pre-action state ---
        self.logger.log_step(depth, scan.ranges, action, reward)
        self.step_count += 1
        self.latest_scan = scan

        # --- Termination ---
        cell = self.robot.grid_position()
        reason = None
        if cell == self.maze.goal_cell:
            self.state = SimState.GOAL_REACHED
            reason = "goal"
            print(f"[GOAL] Goal reached at cell {cell} after {self.step_count} steps")
            self._log(f"到达目标 {cell}, 总步数 {self.step_count}, 总奖励 {self.logger.total_reward()}")
        elif self.max_steps > 0 and self.step_count >= self.max_steps:
            self.state = SimState.STEP_LIMIT
            reason = "max_steps"
            self._log(f"达到步数上限 {self.max_steps}, 未到达目标")

        if self.step_count % LOG_EVERY_N_STEPS == 1:
            p = self.robot.pose
            self._log(f"步骤 {self.step_count}: depth={depth} action={action.value} reward={reward} "
                      f"pose=({p.x:.1f}, {p.y:.1f}, {p.theta:.3f}) cell={cell}")

        self.last_result = StepResult(
            step=self.step_count, depth=depth, scan=scan, action=action, reward=reward,
            pose=self.robot.pose.copy(), cell=cell, done=self.done, reason=reason,
        )
        return self.last_result


class SimulationRunner:
    """Scheduler around SimulationSession.

    start() always cancels the previous session before building a new one;
    tick() runs at most one step; run() is the fixed-cadence loop.
    """
    def __init__(self, initializer=None, logger_func=None, log_file=None) -> None:
        if initializer is None:
            from core.system_initializer import SystemInitializer
            initializer = SystemInitializer(logger_func=logger_func, log_file=log_file)
        self.initializer = initializer
        self.session: Optional[SimulationSession] = None
        self._stop_requested = False
        self._previous_sigint = None

    @property
    def active(self) -> bool:
        return self.session is not None and not self.session.done

    def start(self, policy_name: Optional[str] = None, **kwargs) -> SimulationSession:
        """Reset grid, robot and log, and make the new session current."""
        self.cancel()
        self.session = self.initializer.initialize(policy_name=policy_name, **kwargs)
        return self.session

    def cancel(self) -> None:
        if self.session is not None:
            self.session.cancel()

    def tick(self) -> Optional[StepResult]:
        if not self.active:
            return None
        return self.session.step()

    def request_stop(self) -> None:
        """Ask run() to stop once the step in progress has finished."""
        self._stop_requested = True

    def _install_signal_handler(self) -> bool:
        # signal handlers can only be set from the main thread
        if threading.current_thread() is not threading.main_thread():
            return False

        def signal_handler(signum, frame):
            print(f"\n[INFO] 收到信号 {signum}，当前步骤完成后停止...")
            self.request_stop()

        self._previous_sigint = signal.signal(signal.SIGINT, signal_handler)
        return True

    def run(self, interval_s: float = STEP_INTERVAL_S, max_steps: int = MAX_STEPS,
            on_step: Optional[Callable[[SimulationSession, StepResult], None]] = None) -> SimState:
        """Step the current session at a fixed cadence until it finishes.

        max_steps caps this call only (0 = no cap); hitting it ends the run
        as STEP_LIMIT. Ctrl+C is turned into a stop request, so a step that
        has started always completes and is logged before the run is cancelled.
        """
        if self.session is None:
            raise RuntimeError("Call start() before run().")
        self._stop_requested = False
        handler_installed = self._install_signal_handler()
        steps = 0
        try:
            while self.active and not self._stop_requested:
                t0 = time.time()
                result = self.session.step()
                steps += 1
                if on_step is not None:
                    on_step(self.session, result)
                if self.session.done or self._stop_requested:
                    break
                if max_steps > 0 and steps >= max_steps:
                    self.session.stop(SimState.STEP_LIMIT)
                    break
                # 帧预算休眠：只睡剩余部分
                spent = time.time() - t0
                if interval_s > 0 and spent < interval_s:
                    time.sleep(interval_s - spent)
            if self._stop_requested:
                self.cancel()
        except KeyboardInterrupt:
            self.cancel()
        finally:
            if handler_installed:
                previous = self._previous_sigint
                signal.signal(signal.SIGINT, previous if previous is not None else signal.default_int_handler)
        return self.session.state
