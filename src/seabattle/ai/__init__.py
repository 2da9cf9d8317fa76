"""Computer opponent exports."""

from .strategy import (
    AIMode,
    AIState,
    OpponentMove,
    adjacent_targets,
    compute_opponent_move,
    select_target,
    step,
)

__all__ = [
    "AIMode",
    "AIState",
    "OpponentMove",
    "adjacent_targets",
    "compute_opponent_move",
    "select_target",
    "step",
]
