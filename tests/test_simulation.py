"""Tests for the step loop, session lifecycle and runner scheduling."""

import signal

import numpy as np
import pytest

from conftest import FixedRandom
from core.system_initializer import SystemInitializer
from core.types import Action, Pose2D
from nav import Policy, PolicyConfig, SimState, SimulationRunner, SimulationSession, WeightedPolicy
from sim import RobotSim, generate_maze

STRAIGHT = PolicyConfig("straight", 1.0, 0.0, 0.0)


def _session(maze, pose, rng=0, max_steps=0):
    robot = RobotSim(maze, pose)
    return SimulationSession(maze, robot, WeightedPolicy(STRAIGHT, rng=rng), max_steps=max_steps)


def test_step_logs_state_before_action(small_maze):
    """The logged state is what the robot sensed before it moved."""
    session = _session(small_maze, Pose2D(20.0, 20.0, 0.0))
    result = session.step()

    entry = session.logger.entries[0]
    assert entry.depth == 0
    assert entry.lidar == (50.0, 15.0, 50.0, 15.0, 11.0, 15.0, 11.0, 15.0)
    assert entry.action is Action.FORWARD
    assert entry.reward == 1
    assert result.pose.x == pytest.approx(22.0)
    assert result.step == 1
    assert session.latest_scan is result.scan


def test_one_entry_per_step(small_maze):
    """N steps produce exactly N log entries."""
    session = _session(small_maze, Pose2D(20.0, 20.0, 0.0))
    for _ in range(17):
        session.step()
    assert len(session.logger) == session.step_count == 17


def test_goal_reached_ends_run(small_maze):
    """Entering the goal cell finishes the session and further steps are refused."""
    robot = RobotSim(small_maze, Pose2D(60.0, 49.0, np.pi / 2))
    policy = WeightedPolicy(STRAIGHT, rng=FixedRandom(0.0))
    session = SimulationSession(small_maze, robot, policy)
    assert robot.grid_position() == (3, 2)

    result = session.step()
    assert result.done and result.reason == "goal"
    assert result.cell == session.goal_cell == (3, 3)
    assert session.state is SimState.GOAL_REACHED
    assert session.at_goal()

    with pytest.raises(RuntimeError):
        session.step()
    assert len(session.logger) == 1


def test_session_step_limit(small_maze):
    """A session with max_steps stops itself as STEP_LIMIT."""
    session = _session(small_maze, Pose2D(20.0, 20.0, 0.0), max_steps=5)
    results = [session.step() for _ in range(5)]
    assert [r.done for r in results] == [False] * 4 + [True]
    assert results[-1].reason == "max_steps"
    assert session.state is SimState.STEP_LIMIT


def test_cancel_is_idempotent(small_maze):
    """Cancelling twice keeps the first terminal state."""
    session = _session(small_maze, Pose2D(20.0, 20.0, 0.0), max_steps=1)
    session.step()
    session.cancel()
    assert session.state is SimState.STEP_LIMIT


@pytest.mark.parametrize("seed", [0, 4, 21])
def test_always_forward_runs_into_wall_and_stays(seed):
    """forward=1.0 on the default maze: +1 until blocked, then -1 forever."""
    maze = generate_maze(30, 20, seed=seed)
    session = _session(maze, Pose2D(20.0, 20.0, 0.0))

    # last open cell of the corridor leaving the start cell along +x
    c = 1
    while maze.is_open(c + 1, 1):
        c += 1
    moves = (c * 20 + 8 - 20) // 2

    n = moves + 40
    rewards = [session.step().reward for _ in range(n)]
    assert rewards == [1] * moves + [-1] * 40
    assert all(e.action is Action.FORWARD for e in session.logger.entries)
    assert all(len(e.lidar) == 8 for e in session.logger.entries)
    assert session.robot.pose.x == pytest.approx(c * 20 + 8)
    assert session.state is SimState.RUNNING


# ---------------- runner ----------------

def test_tick_without_session_is_noop():
    """tick() does nothing when no run is active."""
    runner = SimulationRunner(SystemInitializer(seed=1))
    assert not runner.active
    assert runner.tick() is None


def test_run_without_start_raises():
    """run() needs a session."""
    runner = SimulationRunner(SystemInitializer(seed=1))
    with pytest.raises(RuntimeError):
        runner.run(interval_s=0)


def test_restart_cancels_previous_and_clears_log():
    """start() cancels the old session and begins with an empty log."""
    runner = SimulationRunner(SystemInitializer(seed=2))
    first = runner.start("model1", width=11, height=11, max_steps=0)
    for _ in range(3):
        runner.tick()
    assert len(first.logger) == 3

    second = runner.start("model2", width=11, height=11, max_steps=0)
    assert first.state is SimState.CANCELLED
    assert second is not first
    assert second.logger is not first.logger
    assert len(second.logger) == 0
    assert second.step_count == 0
    assert second.robot.pose.as_tuple() == (20.0, 20.0, 0.0)
    assert second.policy.name == "model2"

    runner.tick()
    # the cancelled session is never stepped again
    assert len(first.logger) == 3


def test_run_stops_at_call_limit():
    """run(max_steps=N) steps N times and ends as STEP_LIMIT."""
    runner = SimulationRunner(SystemInitializer(seed=3))
    session = runner.start("model1", width=31, height=21, max_steps=0)
    seen = []
    state = runner.run(interval_s=0, max_steps=10, on_step=lambda s, r: seen.append(r.step))
    assert state is SimState.STEP_LIMIT
    assert seen == list(range(1, 11))
    assert session.step_count == 10
    assert runner.tick() is None


def test_run_honours_session_limit():
    """A session-level limit ends run() with no call-level cap."""
    runner = SimulationRunner(SystemInitializer(seed=3))
    session = runner.start("model3", width=31, height=21, max_steps=7)
    assert runner.run(interval_s=0, max_steps=0) is SimState.STEP_LIMIT
    assert len(session.logger) == 7


def test_keyboard_interrupt_cancels():
    """Ctrl+C during the loop cancels the session instead of propagating."""
    runner = SimulationRunner(SystemInitializer(seed=3))
    runner.start("model1", width=11, height=11, max_steps=0)

    def _interrupt(session, result):
        raise KeyboardInterrupt

    assert runner.run(interval_s=0, on_step=_interrupt) is SimState.CANCELLED
    assert not runner.active


def test_unknown_policy_fails_before_first_step():
    """A bad profile name aborts start() and leaves no active run."""
    runner = SimulationRunner(SystemInitializer(seed=3))
    with pytest.raises(ValueError):
        runner.start("no-such-model")
    assert runner.session is None


def test_same_seed_same_run():
    """Seeded initializers reproduce maze and action sequence."""
    runs = []
    for _ in range(2):
        runner = SimulationRunner(SystemInitializer(seed=9))
        session = runner.start("model1", width=21, height=15, max_steps=60)
        runner.run(interval_s=0, max_steps=0)
        runs.append((session.maze.grid.copy(), session.logger.to_records()))
    assert np.array_equal(runs[0][0], runs[1][0])
    assert runs[0][1] == runs[1][1]


def test_initializer_logs_through_injected_function():
    """Initialization messages go through logger_func with the INIT tag."""
    lines = []
    init = SystemInitializer(logger_func=lambda f, msg, mod: lines.append((mod, msg)),
                             log_file=object(), seed=0)
    init.initialize("model1", width=11, height=11)
    assert any(mod == "INIT" for mod, _ in lines)
    assert any(mod == "MAP_VALID" for mod, _ in lines)
    assert not any(mod == "MAP_WARN" for mod, _ in lines)


class _InterruptMidStep(Policy):
    """Delivers SIGINT from inside decide(), after sensing and before the action."""

    def decide(self, depth, scan):
        signal.raise_signal(signal.SIGINT)
        return Action.TURN_LEFT


def test_interrupt_mid_step_finishes_the_step(small_maze):
    """Ctrl+C during a step lets it act and log, then cancels the run."""
    before = signal.getsignal(signal.SIGINT)
    robot = RobotSim(small_maze, Pose2D(20.0, 20.0, 0.0))
    runner = SimulationRunner(SystemInitializer(seed=0))
    runner.session = SimulationSession(small_maze, robot, _InterruptMidStep())

    assert runner.run(interval_s=0, max_steps=0) is SimState.CANCELLED
    assert runner.session.step_count == 1
    assert len(runner.session.logger) == 1
    assert runner.session.logger.entries[0].action is Action.TURN_LEFT
    assert robot.pose.theta == pytest.approx(-np.pi / 8)
    assert signal.getsignal(signal.SIGINT) is before


def test_request_stop_from_callback():
    """A stop request ends run() after the current step."""
    runner = SimulationRunner(SystemInitializer(seed=3))
    session = runner.start("model1", width=11, height=11, max_steps=0)
    state = runner.run(interval_s=0, on_step=lambda s, r: runner.request_stop())
    assert state is SimState.CANCELLED
    assert session.step_count == 1
