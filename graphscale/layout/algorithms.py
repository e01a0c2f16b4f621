"""Catalogue of layout algorithms and their characteristics."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict

from ..graph.model import GraphView


class AlgorithmCategory(enum.Enum):
    SPECTRAL = "spectral"
    MAJORIZATION = "majorization"
    STOCHASTIC = "stochastic"
    INCREMENTAL = "incremental"
    TREE = "tree"
    UTILITY = "utility"


class LayoutAlgorithm(enum.Enum):
    CLASSICAL_MDS = "classical_mds"
    PIVOT_MDS_1 = "pivot_mds_1"
    PIVOT_MDS_5 = "pivot_mds_5"
    PIVOT_MDS_20 = "pivot_mds_20"
    LANDMARK_MDS_10 = "landmark_mds_10"
    LANDMARK_MDS_20 = "landmark_mds_20"
    LANDMARK_MDS_30 = "landmark_mds_30"
    DIRECT_ABSOLUTE = "direct_absolute"
    DIRECT_ABSOLUTE_100 = "direct_absolute_100"
    DIRECT_SEMIPROPORTIONAL = "direct_semiproportional"
    DIRECT_PROPORTIONAL = "direct_proportional"
    STOCHASTIC_EXHAUSTIVE = "stochastic_exhaustive"
    STOCHASTIC_EXHAUSTIVE_VELOCITY = "stochastic_exhaustive_velocity"
    STOCHASTIC_VELOCITY = "stochastic_velocity"
    STOCHASTIC_VELOCITY_ANNEALING = "stochastic_velocity_annealing"
    INCREMENTAL_PERCENTILE = "incremental_percentile"
    INCREMENTAL_DEPTH_FIRST = "incremental_depth_first"
    INCREMENTAL_MAXMIN = "incremental_maxmin"
    TREE = "tree"
    HYPERTREE = "hypertree"
    TREE_TWO_PLUS = "tree_two_plus"
    HYPERTREE_TWO_PLUS = "hypertree_two_plus"
    REATTACH_PENDANTS = "reattach_pendants"
    PACK_COMPONENTS = "pack_components"
    PACK_COMPONENTS_MINIMAL = "pack_components_minimal"


@dataclass(frozen=True)
class AlgorithmInfo:
    category: AlgorithmCategory
    stable: bool
    efficient_limit: int


_SPECTRAL = AlgorithmCategory.SPECTRAL
_DIRECT = AlgorithmCategory.MAJORIZATION
_STOCH = AlgorithmCategory.STOCHASTIC
_INCR = AlgorithmCategory.INCREMENTAL
_TREE = AlgorithmCategory.TREE
_UTIL = AlgorithmCategory.UTILITY

_INFO: Dict[LayoutAlgorithm, AlgorithmInfo] = {
    LayoutAlgorithm.CLASSICAL_MDS: AlgorithmInfo(_SPECTRAL, True, 200),
    LayoutAlgorithm.PIVOT_MDS_1: AlgorithmInfo(_SPECTRAL, False, 50000),
    LayoutAlgorithm.PIVOT_MDS_5: AlgorithmInfo(_SPECTRAL, False, 50000),
    LayoutAlgorithm.PIVOT_MDS_20: AlgorithmInfo(_SPECTRAL, False, 8000),
    LayoutAlgorithm.LANDMARK_MDS_10: AlgorithmInfo(_SPECTRAL, False, 50000),
    LayoutAlgorithm.LANDMARK_MDS_20: AlgorithmInfo(_SPECTRAL, False, 8000),
    LayoutAlgorithm.LANDMARK_MDS_30: AlgorithmInfo(_SPECTRAL, False, 8000),
    LayoutAlgorithm.DIRECT_ABSOLUTE: AlgorithmInfo(_DIRECT, False, 200),
    LayoutAlgorithm.DIRECT_ABSOLUTE_100: AlgorithmInfo(_DIRECT, False, 200),
    LayoutAlgorithm.DIRECT_SEMIPROPORTIONAL: AlgorithmInfo(_DIRECT, False, 200),
    LayoutAlgorithm.DIRECT_PROPORTIONAL: AlgorithmInfo(_DIRECT, False, 200),
    LayoutAlgorithm.STOCHASTIC_EXHAUSTIVE: AlgorithmInfo(_STOCH, False, 200),
    LayoutAlgorithm.STOCHASTIC_EXHAUSTIVE_VELOCITY: AlgorithmInfo(_STOCH, False, 200),
    LayoutAlgorithm.STOCHASTIC_VELOCITY: AlgorithmInfo(_STOCH, False, 400),
    LayoutAlgorithm.STOCHASTIC_VELOCITY_ANNEALING: AlgorithmInfo(_STOCH, False, 400),
    LayoutAlgorithm.INCREMENTAL_PERCENTILE: AlgorithmInfo(_INCR, False, 200),
    LayoutAlgorithm.INCREMENTAL_DEPTH_FIRST: AlgorithmInfo(_INCR, False, 200),
    LayoutAlgorithm.INCREMENTAL_MAXMIN: AlgorithmInfo(_INCR, False, 200),
    LayoutAlgorithm.TREE: AlgorithmInfo(_TREE, True, 50000),
    LayoutAlgorithm.HYPERTREE: AlgorithmInfo(_TREE, True, 50000),
    LayoutAlgorithm.TREE_TWO_PLUS: AlgorithmInfo(_TREE, True, 50000),
    LayoutAlgorithm.HYPERTREE_TWO_PLUS: AlgorithmInfo(_TREE, True, 50000),
    LayoutAlgorithm.REATTACH_PENDANTS: AlgorithmInfo(_UTIL, False, 50000),
    LayoutAlgorithm.PACK_COMPONENTS: AlgorithmInfo(_UTIL, True, 50000),
    LayoutAlgorithm.PACK_COMPONENTS_MINIMAL: AlgorithmInfo(_UTIL, True, 50000),
}


def algorithm_info(algorithm: LayoutAlgorithm) -> AlgorithmInfo:
    return _INFO[LayoutAlgorithm(algorithm)]


def is_efficient(algorithm: LayoutAlgorithm, graph: GraphView) -> bool:
    """Whether ``graph`` is small enough for ``algorithm`` to finish interactively."""

    return graph.entity_count() <= algorithm_info(algorithm).efficient_limit


__all__ = [
    "AlgorithmCategory",
    "AlgorithmInfo",
    "LayoutAlgorithm",
    "algorithm_info",
    "is_efficient",
]
