"""All-pairs shortest paths."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np

from ..graph.components import adjacency_matrix
from ..graph.model import GraphView
from ..logging_utils import apply_debug_logging
from .oracle import DistanceOracle

logger = logging.getLogger(__name__)


def edge_lengths(weights: np.ndarray, reciprocal_weights: bool = False) -> np.ndarray:
    """Turn an adjacency weight matrix into initial path lengths.

    Diagonal 0, edges 1.0 (or ``1/weight``), everything else ``inf``.
    """

    weights = np.asarray(weights, dtype=float)
    dist = np.full(weights.shape, np.inf)
    mask = weights > 0.0
    if reciprocal_weights:
        dist[mask] = 1.0 / weights[mask]
    else:
        dist[mask] = 1.0
    np.fill_diagonal(dist, 0.0)
    return dist


def floyd_warshall(dist: np.ndarray) -> np.ndarray:
    """Relax ``dist`` through every intermediate vertex and return the result.

    The input is not modified. For each ``k`` the whole ``i``/``j`` plane is
    relaxed at once, which matches the triple loop since row and column ``k``
    cannot improve while ``k`` is the intermediate.
    """

    dist = np.array(dist, dtype=float, copy=True)
    n = dist.shape[0]
    for k in range(n):
        through_k = dist[:, k][:, None] + dist[k, :][None, :]
        np.minimum(dist, through_k, out=dist)
    return dist


def shortest_path_matrix(
    graph: GraphView,
    indices: Optional[Sequence[int]] = None,
    *,
    reciprocal_weights: bool = False,
) -> np.ndarray:
    """Shortest-path lengths among ``indices`` using only edges inside the subset."""

    return floyd_warshall(edge_lengths(adjacency_matrix(graph, indices), reciprocal_weights))


class ShortestPathOracle(DistanceOracle):
    """Exact shortest-path oracle: one Floyd–Warshall run per component."""

    def __init__(self, graph: GraphView, *, reciprocal_weights: bool = False) -> None:
        super().__init__(graph)
        self.reciprocal_weights = reciprocal_weights
        self._build(lambda members: shortest_path_matrix(graph, members, reciprocal_weights=reciprocal_weights))


apply_debug_logging(globals(), logger=logger)

__all__ = ["ShortestPathOracle", "edge_lengths", "floyd_warshall", "shortest_path_matrix"]
