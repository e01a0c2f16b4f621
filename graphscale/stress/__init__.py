"""Stress objective, majorizer and leveled incremental insertion."""

from .incremental import (
    DepthFirstLevels,
    Level,
    LevelPolicy,
    MaxMinLevels,
    PercentileLevels,
    arrange_incrementally,
    seed_position,
)
from .majorizer import MajorizationResult, StressMajorizer, run_direct
from .objective import node_stress, stress

__all__ = [
    "DepthFirstLevels",
    "Level",
    "LevelPolicy",
    "MajorizationResult",
    "MaxMinLevels",
    "PercentileLevels",
    "StressMajorizer",
    "arrange_incrementally",
    "node_stress",
    "run_direct",
    "seed_position",
    "stress",
]
