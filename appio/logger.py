# ================================
# file: appio/logger.py
# ================================
from __future__ import annotations
from typing import List, Sequence, Tuple
import json
import os
import numpy as np
from core.types import Action, LogEntry


class DataLogger:
    """Append-only step log with JSON and NPZ export.

    One entry per simulation step: the sensing taken before the action, the
    action and its reward. A new run starts from an empty logger.
    """
    def __init__(self) -> None:
        self._entries: List[LogEntry] = []

    def log_step(self, depth: int, lidar: Sequence[float], action: Action, reward: int) -> LogEntry:
        entry = LogEntry(depth=int(depth), lidar=tuple(float(r) for r in lidar),
                         action=action, reward=int(reward))
        self._entries.append(entry)
        return entry

    def clear(self) -> None:
        self._entries = []

    @property
    def entries(self) -> Tuple[LogEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def total_reward(self) -> int:
        return sum(e.reward for e in self._entries)

    def to_records(self) -> List[dict]:
        return [e.to_dict() for e in self._entries]

    # ---- export ----
    def export_json(self, path: str) -> str:
        """Write the log as a pretty-printed JSON list of {state, action, reward}."""
        d = os.path.dirname(path)
        if d:
            os.makedirs(d, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.to_records(), f, indent=2)
        return path

    def save(self, path: str) -> None:
        """Compressed NPZ: depth (N,), lidar (N, beams), actions (N,), rewards (N,)."""
        d = os.path.dirname(path)
        if d:
            os.makedirs(d, exist_ok=True)
        n = len(self._entries)
        beams = len(self._entries[0].lidar) if n else 0
        depth = np.array([e.depth for e in self._entries], dtype=np.uint8)
        lidar = np.array([e.lidar for e in self._entries], dtype=np.float32).reshape(n, beams)
        actions = np.array([e.action.value for e in self._entries], dtype=str)
        rewards = np.array([e.reward for e in self._entries], dtype=np.int8)
        np.savez_compressed(path, depth=depth, lidar=lidar, actions=actions, rewards=rewards)


def entry_from_record(record: dict, index: int = 0) -> LogEntry:
    try:
        state = record["state"]
        return LogEntry(depth=int(state["depth"]),
                        lidar=tuple(float(r) for r in state["lidar"]),
                        action=Action(record["action"]),
                        reward=int(record["reward"]))
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Malformed log record at index {index}: {e}") from e


def load_json(path: str) -> List[LogEntry]:
    """Parse a file written by DataLogger.export_json back into LogEntry objects."""
    with open(path, 'r', encoding='utf-8') as f:
        records = json.load(f)
    if not isinstance(records, list):
        raise ValueError(f"Expected a JSON list of step records in {path}")
    return [entry_from_record(r, i) for i, r in enumerate(records)]
