# ================================
# file: nav/policy.py
# ================================
from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional, Union
import random

from core.types import Action, LaserScan
from core.config import POLICY_PROFILES


@dataclass(frozen=True)
class PolicyConfig:
    """Named action weights. Each weight is in [0, 1]; they need not sum to 1."""
    name: str
    forward: float
    turn_left: float
    turn_right: float

    def __post_init__(self) -> None:
        for key in ("forward", "turn_left", "turn_right"):
            w = getattr(self, key)
            if not 0.0 <= float(w) <= 1.0:
                raise ValueError(f"Policy '{self.name}': weight {key}={w} outside [0, 1]")

    def as_dict(self) -> Dict[str, float]:
        return {"forward": self.forward, "turn_left": self.turn_left, "turn_right": self.turn_right}


def resolve_policy_config(name: str, profiles: Optional[Dict[str, Dict[str, float]]] = None) -> PolicyConfig:
    """Look up a named weight profile. Unknown names fail here, before any step runs."""
    profiles = POLICY_PROFILES if profiles is None else profiles
    if name not in profiles:
        raise ValueError(f"Unknown policy profile '{name}'. Available: {sorted(profiles)}")
    weights = profiles[name]
    missing = [k for k in ("forward", "turn_left", "turn_right") if k not in weights]
    if missing:
        raise ValueError(f"Policy profile '{name}' is missing weights: {missing}")
    return PolicyConfig(name=name,
                        forward=float(weights["forward"]),
                        turn_left=float(weights["turn_left"]),
                        turn_right=float(weights["turn_right"]))


class Policy(ABC):
    """Maps sensed state to exactly one action."""

    @abstractmethod
    def decide(self, depth: int, scan: LaserScan) -> Action:
        pass


class WeightedPolicy(Policy):
    """Stochastic policy driven by static PolicyConfig weights.

    One uniform draw per decision. With the way ahead open the draw is
    compared against forward, then forward + turn_left; with a wall ahead
    only turn_left is compared. turn_right takes whatever is left, so the
    weights are not a normalized distribution.
    """
    def __init__(self, config: PolicyConfig, rng: Optional[Union[random.Random, int]] = None) -> None:
        if rng is None or isinstance(rng, int):
            rng = random.Random(rng)
        self.config = config
        self.rng = rng

    @property
    def name(self) -> str:
        return self.config.name

    def decide(self, depth: int, scan: LaserScan) -> Action:
        w = self.config
        r = self.rng.random()
        if depth == 0:
            if r < w.forward:
                return Action.FORWARD
            if r < w.forward + w.turn_left:
                return Action.TURN_LEFT
            return Action.TURN_RIGHT
        if r < w.turn_left:
            return Action.TURN_LEFT
        return Action.TURN_RIGHT
