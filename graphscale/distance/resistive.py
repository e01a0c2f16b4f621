"""Effective-resistance distance through the Laplacian pseudoinverse."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np

from ..graph.components import adjacency_matrix, connected_components
from ..graph.model import GraphView
from ..logging_utils import apply_debug_logging
from ..types import DisconnectedGraphError
from .oracle import DistanceOracle

logger = logging.getLogger(__name__)


def laplacian(conductance: np.ndarray) -> np.ndarray:
    """Graph Laplacian of a symmetric conductance matrix (zeros for missing edges)."""

    conductance = np.asarray(conductance, dtype=float)
    lap = -conductance.copy()
    np.fill_diagonal(lap, 0.0)
    np.fill_diagonal(lap, -lap.sum(axis=1))
    return lap


def pseudoinverse(matrix: np.ndarray) -> np.ndarray:
    """Moore–Penrose pseudoinverse from the SVD.

    Singular values below ``max(shape) * s_max * eps`` are treated as zero.
    """

    matrix = np.asarray(matrix, dtype=float)
    if matrix.size == 0:
        return matrix.T.copy()
    u, s, vt = np.linalg.svd(matrix, full_matrices=False)
    tol = max(matrix.shape) * (s[0] if s.size else 0.0) * np.finfo(float).eps
    inv_s = np.zeros_like(s)
    keep = s > tol
    inv_s[keep] = 1.0 / s[keep]
    return (vt.T * inv_s) @ u.T


def resistive_distance_matrix(conductance: np.ndarray) -> np.ndarray:
    """Pairwise effective resistance for a connected conductance matrix."""

    conductance = np.asarray(conductance, dtype=float)
    if conductance.shape[0] <= 1:
        return np.zeros(conductance.shape)
    lp = pseudoinverse(laplacian(conductance))
    diag = np.diag(lp)
    return np.abs(diag[:, None] + diag[None, :] - 2.0 * lp)


def conductance_matrix(
    graph: GraphView,
    indices: Optional[Sequence[int]] = None,
    *,
    use_weights: bool = True,
) -> np.ndarray:
    weights = adjacency_matrix(graph, indices)
    if not use_weights:
        weights = (weights > 0.0).astype(float)
    return weights


class ResistiveDistance:
    """Effective resistance between the entities of one connected graph.

    Edge weights are conductances. A graph with more than one component has
    no finite resistance between components and is rejected.
    """

    def __init__(self, graph: GraphView, *, use_weights: bool = True) -> None:
        components = connected_components(graph)
        if len(components) > 1:
            raise DisconnectedGraphError(
                f"resistive distance needs a connected graph, found {len(components)} components",
                len(components),
            )
        self.graph = graph
        self.matrix = resistive_distance_matrix(conductance_matrix(graph, use_weights=use_weights))

    def d(self, i: int, j: int) -> float:
        return float(self.matrix[i, j])

    def distance(self, a, b) -> float:
        return self.d(self.graph.index_of(a), self.graph.index_of(b))


class ResistiveOracle(DistanceOracle):
    """Effective resistance computed independently inside each component."""

    def __init__(self, graph: GraphView, *, use_weights: bool = True) -> None:
        super().__init__(graph)
        self._build(
            lambda members: resistive_distance_matrix(
                conductance_matrix(graph, members, use_weights=use_weights)
            )
        )


apply_debug_logging(globals(), logger=logger, skip={"ResistiveDistance.d", "ResistiveDistance.distance"})

__all__ = [
    "ResistiveDistance",
    "ResistiveOracle",
    "conductance_matrix",
    "laplacian",
    "pseudoinverse",
    "resistive_distance_matrix",
]
