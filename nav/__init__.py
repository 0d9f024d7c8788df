# ================================
# file: nav/__init__.py
# ================================
"""Decision making and the step loop: weighted policy, session and runner."""
from nav.policy import Policy, PolicyConfig, WeightedPolicy, resolve_policy_config
from nav.simulation import SimState, SimulationSession, SimulationRunner

__all__ = [
    'Policy', 'PolicyConfig', 'WeightedPolicy', 'resolve_policy_config',
    'SimState', 'SimulationSession', 'SimulationRunner',
]
