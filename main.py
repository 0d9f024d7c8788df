# ================================
# file: main.py
# ================================
from __future__ import annotations
"""Project entrypoint: generates a maze and steps the robot until it reaches
the goal, hits the step limit or is interrupted, then exports the step log.

Usage:
    python main.py --policy model2
    python main.py --no-gui --seed 7 --interval 0 --max-steps 500
"""
import argparse
import os
from typing import Optional
from datetime import datetime


from core.config import (
    DEFAULT_POLICY, MAZE_WIDTH, MAZE_HEIGHT, STEP_INTERVAL_S, MAX_STEPS,
    LOG_DIR, EXPORT_PREFIX, POLICY_PROFILES
)
from core.system_initializer import SystemInitializer
from nav import SimulationRunner, SimState


def log_to_file(log_file, message, module="MAIN"):
    """Write message to log file with timestamp and module"""
    timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
    log_entry = f"[{timestamp}] [{module}] {message}\n"
    log_file.write(log_entry)
    log_file.flush()  # Ensure immediate write
    print(log_entry.strip())  # Also print to console


def default_export_path(policy_name: str, log_dir: str = LOG_DIR) -> str:
    return os.path.join(log_dir, f"{EXPORT_PREFIX}{policy_name}.json")


def draw_session(gui, session, title: Optional[str] = None) -> None:
    """Draw the robot as it stands now, with a scan taken from that same pose.
    The step's own scan predates its action, so it is not reused here.
    """
    robot = session.robot
    gui.update(robot.pose, robot.sense_lidar(), title)


def run(policy_name: str = DEFAULT_POLICY, width: int = MAZE_WIDTH, height: int = MAZE_HEIGHT,
        seed: Optional[int] = None, interval_s: float = STEP_INTERVAL_S,
        max_steps: int = MAX_STEPS, use_gui: bool = True,
        export_path: Optional[str] = None, npz_path: Optional[str] = None,
        log_dir: str = LOG_DIR):
    """Wire modules and run one simulation.
    Parameters
    ----------
    policy_name : weight profile from POLICY_PROFILES
    width, height : maze size in cells
    seed       : RNG seed for maze and policy; None = nondeterministic
    interval_s : wall-clock seconds per step (0 = as fast as possible)
    max_steps  : stop after this many steps (0 = until goal or Ctrl+C)
    use_gui    : draw with matplotlib
    export_path: JSON export target; None = logs/training_data_<policy>.json
    npz_path   : optional compressed NPZ export
    """
    os.makedirs(log_dir, exist_ok=True)
    log_filename = f"sim_run_log_{datetime.now().strftime('%Y%m%d_%H%M%S')}.txt"
    log_filepath = os.path.join(log_dir, log_filename)
    export_path = export_path or default_export_path(policy_name, log_dir)

    # Open log file for the entire function duration
    log_file = open(log_filepath, 'w', encoding='utf-8')

    try:
        log_to_file(log_file, "=" * 60)
        log_to_file(log_file, "迷宫机器人仿真运行日志")
        log_to_file(log_file, f"开始时间: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        log_to_file(log_file, f"策略: {policy_name}, 迷宫: {width}x{height}, 种子: {seed}")
        log_to_file(log_file, f"可视化方式: {'Matplotlib' if use_gui else '无 (headless)'}")
        log_to_file(log_file, "=" * 60)

        # --- System initialization (fails before the first step on bad config) ---
        initializer = SystemInitializer(logger_func=log_to_file, log_file=log_file, seed=seed)
        runner = SimulationRunner(initializer)
        session = runner.start(policy_name, width=width, height=height, max_steps=max_steps)

        gui = None
        if use_gui:
            from gui import Visualizer
            gui = Visualizer(session.maze)
            draw_session(gui, session, f"{policy_name} - step 0")

        def _on_step(s, result):
            if gui is not None:
                draw_session(gui, s, f"{policy_name} - step {result.step} - reward {s.logger.total_reward()}")

        log_to_file(log_file, f"开始主循环 @ {interval_s:.3f} s/step")
        try:
            state = runner.run(interval_s=interval_s, max_steps=0, on_step=_on_step)
        finally:
            # Always export whatever was logged, however the run ended
            session.logger.export_json(export_path)
            log_to_file(log_file, f"训练数据已导出: {export_path} ({len(session.logger)} 条)")
            if npz_path:
                session.logger.save(npz_path)
                log_to_file(log_file, f"NPZ 已保存: {npz_path}")
            if gui is not None:
                gui.close()

        if state is SimState.GOAL_REACHED:
            log_to_file(log_file, "任务完成！已到达目标")
        log_to_file(log_file, "=" * 60)
        log_to_file(log_file, f"程序结束 - 状态: {state.name}, 总步数: {session.step_count}, "
                              f"总奖励: {session.logger.total_reward()}")
        log_to_file(log_file, f"日志文件: {log_filepath}")
        log_to_file(log_file, "=" * 60)
        return session

    finally:
        # Ensure log file is closed
        log_file.close()


def _parse_args(argv=None):
    ap = argparse.ArgumentParser(description="Maze lidar robot simulator")
    ap.add_argument("--policy", type=str, default=DEFAULT_POLICY,
                    choices=sorted(POLICY_PROFILES), help="policy weight profile")
    ap.add_argument("--width", type=int, default=MAZE_WIDTH, help="maze width in cells")
    ap.add_argument("--height", type=int, default=MAZE_HEIGHT, help="maze height in cells")
    ap.add_argument("--seed", type=int, default=None, help="RNG seed (maze + policy)")
    ap.add_argument("--interval", type=float, default=STEP_INTERVAL_S, help="seconds per step")
    ap.add_argument("--max-steps", type=int, default=MAX_STEPS, help="step limit, 0 = none")
    ap.add_argument("--no-gui", action="store_true", help="run headless")
    ap.add_argument("--export", type=str, default=None, help="JSON export path")
    ap.add_argument("--npz", type=str, default=None, help="optional NPZ export path")
    ap.add_argument("--log-dir", type=str, default=LOG_DIR, help="run log / export directory")
    return ap.parse_args(argv)


def main(argv=None):
    args = _parse_args(argv)
    run(policy_name=args.policy, width=args.width, height=args.height, seed=args.seed,
        interval_s=args.interval, max_steps=args.max_steps, use_gui=not args.no_gui,
        export_path=args.export, npz_path=args.npz, log_dir=args.log_dir)


if __name__ == "__main__":
    main()
