"""Tests for the step log and its exports."""

import json

import numpy as np
import pytest

from appio import DataLogger, load_json
from appio.logger import entry_from_record
from core.types import Action


def _filled_logger():
    logger = DataLogger()
    logger.log_step(0, [50.0, 15.0, 50.0, 15.0], Action.FORWARD, 1)
    logger.log_step(1, [1.0, 15.0, 50.0, 15.0], Action.FORWARD, -1)
    logger.log_step(1, [1.0, 15.0, 50.0, 15.0], Action.TURN_LEFT, 0)
    return logger


def test_record_layout():
    """Each record is {state: {depth, lidar}, action, reward} with wire action names."""
    records = _filled_logger().to_records()
    assert records[0] == {
        "state": {"depth": 0, "lidar": [50.0, 15.0, 50.0, 15.0]},
        "action": "forward",
        "reward": 1,
    }
    assert [r["action"] for r in records] == ["forward", "forward", "turnLeft"]


def test_total_reward_and_len():
    """Running totals follow the entries."""
    logger = _filled_logger()
    assert len(logger) == 3
    assert logger.total_reward() == 0


def test_entries_are_immutable_snapshot():
    """The entries view cannot be used to alter the log."""
    logger = _filled_logger()
    entries = logger.entries
    assert isinstance(entries, tuple)
    with pytest.raises(AttributeError):
        entries[0].reward = 5


def test_clear():
    """clear() empties the log."""
    logger = _filled_logger()
    logger.clear()
    assert len(logger) == 0
    assert logger.to_records() == []


def test_export_json_round_trip(tmp_path):
    """JSON export is a pretty-printed list that load_json reads back."""
    logger = _filled_logger()
    path = logger.export_json(str(tmp_path / "out" / "training_data_model1.json"))

    text = open(path, encoding="utf-8").read()
    assert text.startswith("[\n  {")
    assert json.loads(text) == logger.to_records()
    assert load_json(path) == list(logger.entries)


def test_export_empty_log(tmp_path):
    """An empty run exports an empty list."""
    path = DataLogger().export_json(str(tmp_path / "empty.json"))
    assert json.load(open(path, encoding="utf-8")) == []


def test_save_npz(tmp_path):
    """NPZ arrays line up with the entries."""
    path = str(tmp_path / "run.npz")
    _filled_logger().save(path)
    data = np.load(path)
    assert data["depth"].tolist() == [0, 1, 1]
    assert data["lidar"].shape == (3, 4)
    assert data["lidar"].dtype == np.float32
    assert data["actions"].tolist() == ["forward", "forward", "turnLeft"]
    assert data["rewards"].tolist() == [1, -1, 0]


def test_malformed_record_names_index():
    """A bad record is reported with its position."""
    good = {"state": {"depth": 0, "lidar": [1.0]}, "action": "forward", "reward": 1}
    assert entry_from_record(good).action is Action.FORWARD
    with pytest.raises(ValueError, match="index 4"):
        entry_from_record({"state": {"depth": 0}, "action": "forward", "reward": 1}, 4)
    with pytest.raises(ValueError):
        entry_from_record({"state": {"depth": 0, "lidar": []}, "action": "jump", "reward": 0})


def test_load_json_rejects_non_list(tmp_path):
    """Only a list of records is accepted."""
    path = tmp_path / "bad.json"
    path.write_text('{"state": {}}', encoding="utf-8")
    with pytest.raises(ValueError):
        load_json(str(path))
