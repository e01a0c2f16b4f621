"""Sampled MDS variants: landmark MDS and pivot MDS.

Both pick a small ordered subset of the nodes by max-min sampling, compute
exact shortest-path rows only for that subset and interpolate every other
node from its distances to the subset.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from ..config import SpectralConfig
from ..distance.dijkstra import ShortestPathTree
from ..distance.floyd_warshall import shortest_path_matrix
from ..graph.model import GraphView
from ..logging_utils import apply_debug_logging
from .classical import classical_mds, double_center, finite_distances
from .eigen import EigenPair, hotelling_deflate, power_iterate, top_eigenpairs

logger = logging.getLogger(__name__)

_EIGEN_FLOOR = 1e-12
_RELATIVE_FLOOR = 1e-6


def farthest_point_sampling(
    distance_row: Callable[[int], np.ndarray],
    size: int,
    count: int,
    rng: np.random.Generator,
) -> Tuple[List[int], np.ndarray]:
    """Greedy max-min selection of ``count`` positions out of ``size``.

    ``distance_row(p)`` returns distances from position ``p`` to all
    positions. The first pick is random; each later pick maximizes the
    minimum distance to everything chosen so far. Returns the picks and the
    stacked distance rows, one per pick.
    """

    count = min(count, size)
    picks: List[int] = []
    rows: List[np.ndarray] = []
    nearest = np.full(size, np.inf)
    pick = int(rng.integers(size))
    for _ in range(count):
        row = np.asarray(distance_row(pick), dtype=float)
        picks.append(pick)
        rows.append(row)
        nearest = np.minimum(nearest, row)
        nearest[picks] = -np.inf
        pick = int(np.argmax(nearest))
    return picks, np.vstack(rows) if rows else np.zeros((0, size))


def _component_rows(
    graph: GraphView,
    members: Sequence[int],
    reciprocal_weights: bool,
) -> Callable[[int], np.ndarray]:
    members_arr = np.asarray(members, dtype=int)

    def row(position: int) -> np.ndarray:
        tree = ShortestPathTree(graph, int(members_arr[position]), reciprocal_weights=reciprocal_weights)
        return finite_distances(tree.dist[members_arr])

    return row


def _project(squared: np.ndarray, centering: np.ndarray, pairs: Sequence[EigenPair], dims: int) -> np.ndarray:
    """Place every column of ``squared`` (samples x nodes) with the pseudo-inverse projector."""

    coords = np.zeros((squared.shape[1], dims))
    shifted = squared - centering[:, None]
    largest = max((pair.value for pair in pairs), default=0.0)
    floor = max(_EIGEN_FLOOR, _RELATIVE_FLOOR * largest)
    for axis, pair in enumerate(pairs[:dims]):
        if pair.value <= floor:
            continue
        coords[:, axis] = -0.5 * (shifted.T @ (pair.vector / np.sqrt(pair.value)))
    return coords


def _sample_size(size: int, fraction: float, minimum: int, maximum: int = 0) -> int:
    if not 0.0 < fraction <= 1.0:
        raise ValueError(f"sampling fraction must lie in (0, 1], got {fraction}")
    count = max(int(fraction * size), minimum)
    if maximum > 0:
        count = min(count, maximum)
    return min(count, size)


def _small_component(graph: GraphView, members: Sequence[int], reciprocal_weights: bool) -> np.ndarray:
    return classical_mds(shortest_path_matrix(graph, members, reciprocal_weights=reciprocal_weights))


def landmark_mds(
    graph: GraphView,
    members: Sequence[int],
    fraction: float,
    *,
    config: Optional[SpectralConfig] = None,
    rng: Optional[np.random.Generator] = None,
    reciprocal_weights: bool = False,
    dims: int = 2,
) -> np.ndarray:
    """Landmark MDS over one connected component.

    ``members`` are graph indices of the component; the result has one row
    per member in the same order.
    """

    config = config or SpectralConfig()
    rng = rng if rng is not None else np.random.default_rng()
    n = len(members)
    if n < max(config.landmark_min, 3):
        return _small_component(graph, members, reciprocal_weights)

    count = _sample_size(n, fraction, config.landmark_min, config.landmark_max)
    picks, rows = farthest_point_sampling(_component_rows(graph, members, reciprocal_weights), n, count, rng)
    landmark = rows[:, picks]
    landmark = 0.5 * (landmark + landmark.T)
    squared = landmark**2
    pairs = top_eigenpairs(double_center(squared), dims)
    coords = _project(rows**2, squared.mean(axis=1), pairs, dims)
    logger.info("Landmark MDS placed %d nodes from %d landmarks", n, count)
    return coords


def pivot_mds(
    graph: GraphView,
    members: Sequence[int],
    fraction: float,
    *,
    config: Optional[SpectralConfig] = None,
    rng: Optional[np.random.Generator] = None,
    reciprocal_weights: bool = False,
    dims: int = 2,
) -> np.ndarray:
    """Pivot MDS over one connected component.

    The top eigenvectors of ``CᵀC`` come from power iteration with
    Hotelling deflation; ``√μ`` stands in for the eigenvalue of the full
    double-centered matrix.
    """

    config = config or SpectralConfig()
    rng = rng if rng is not None else np.random.default_rng()
    n = len(members)
    if n < max(config.pivot_min_component, 3):
        return _small_component(graph, members, reciprocal_weights)

    count = _sample_size(n, fraction, config.pivot_min)
    picks, rows = farthest_point_sampling(_component_rows(graph, members, reciprocal_weights), n, count, rng)
    squared = (rows**2).T
    centered = -0.5 * (
        squared
        - squared.mean(axis=0, keepdims=True)
        - squared.mean(axis=1, keepdims=True)
        + squared.mean()
    )
    gram = centered.T @ centered

    pairs: List[EigenPair] = []
    work = gram
    for _ in range(dims):
        pair = power_iterate(
            work,
            rng,
            max_iterations=config.power_max_iterations,
            tolerance=config.power_tolerance,
        )
        pairs.append(EigenPair(float(np.sqrt(max(pair.value, 0.0))), pair.vector))
        work = hotelling_deflate(work, pair)

    coords = _project(squared.T, squared.mean(axis=0), pairs, dims)
    logger.info("Pivot MDS placed %d nodes from %d pivots", n, count)
    return coords


apply_debug_logging(globals(), logger=logger)

__all__ = ["farthest_point_sampling", "landmark_mds", "pivot_mds"]
