"""Classical multidimensional scaling."""

from __future__ import annotations

import logging

import numpy as np

from ..logging_utils import apply_debug_logging
from .eigen import top_eigenpairs

logger = logging.getLogger(__name__)


def finite_distances(dist: np.ndarray) -> np.ndarray:
    """Copy of ``dist`` with infinite entries replaced by the largest finite one."""

    dist = np.array(dist, dtype=float, copy=True)
    finite = np.isfinite(dist)
    if not finite.all():
        fill = float(dist[finite].max()) if finite.any() else 1.0
        dist[~finite] = fill
    return dist


def double_center(squared: np.ndarray) -> np.ndarray:
    n = squared.shape[0]
    J = np.eye(n) - np.ones((n, n)) / float(n)
    return -0.5 * J @ squared @ J


def classical_mds(dist: np.ndarray, dims: int = 2) -> np.ndarray:
    """Embed a symmetric distance matrix into ``dims`` dimensions.

    Returns an ``(n, dims)`` array. Components along non-positive
    eigenvalues collapse to zero. One point sits at the origin, two points
    are placed ``d`` apart on the x axis.
    """

    dist = finite_distances(dist)
    n = dist.shape[0]
    coords = np.zeros((n, dims))
    if n <= 1:
        return coords
    if n == 2:
        coords[1, 0] = dist[0, 1]
        return coords

    pairs = top_eigenpairs(double_center(dist**2), dims)
    for axis, pair in enumerate(pairs):
        coords[:, axis] = np.sqrt(max(pair.value, 0.0)) * pair.vector
    logger.debug(
        "Classical MDS on %d points, eigenvalues %s",
        n,
        [round(pair.value, 6) for pair in pairs],
    )
    return coords


apply_debug_logging(globals(), logger=logger)

__all__ = ["classical_mds", "double_center", "finite_distances"]
