"""Per-component distance storage shared by every oracle implementation."""

from __future__ import annotations

import logging
import math
from typing import Iterator, List, Optional, Sequence

import numpy as np
from scipy import sparse
from scipy.sparse import csgraph

from ..graph.components import connected_components
from ..graph.model import GraphView
from ..types import Entity

logger = logging.getLogger(__name__)


class DistanceOracle:
    """Symmetric pairwise distances, one dense block per connected component.

    Indices are those of ``graph``. Pairs that straddle two components have
    no defined distance; ``d`` reports ``inf`` for them.
    """

    def __init__(self, graph: GraphView) -> None:
        self.graph = graph
        n = graph.entity_count()
        self._component_of = np.full(n, -1, dtype=int)
        self._local = np.zeros(n, dtype=int)
        self._members: List[np.ndarray] = []
        self._blocks: List[np.ndarray] = []

    # -- construction -------------------------------------------------
    def _store(self, members: Sequence[int], block: np.ndarray) -> None:
        members_arr = np.asarray(members, dtype=int)
        if block.shape != (members_arr.size, members_arr.size):
            raise ValueError(
                f"distance block shape {block.shape} does not match {members_arr.size} members"
            )
        comp = len(self._members)
        self._component_of[members_arr] = comp
        self._local[members_arr] = np.arange(members_arr.size)
        self._members.append(members_arr)
        self._blocks.append(block)

    def _build(self, solve_component) -> None:
        for members in connected_components(self.graph):
            self._store(members, solve_component(members))
        logger.info(
            "%s ready: %d components, largest %d",
            type(self).__name__,
            len(self._members),
            max((m.size for m in self._members), default=0),
        )

    # -- queries ------------------------------------------------------
    def entity_count(self) -> int:
        return self.graph.entity_count()

    def entities(self) -> List[Entity]:
        return [self.graph.entity(i) for i in range(self.graph.entity_count())]

    @property
    def component_count(self) -> int:
        return len(self._members)

    def components(self) -> Iterator[np.ndarray]:
        return iter(self._members)

    def component_of(self, i: int) -> int:
        return int(self._component_of[i])

    def component_members(self, component: int) -> np.ndarray:
        return self._members[component]

    def component_matrix(self, component: int) -> np.ndarray:
        return self._blocks[component]

    def d(self, i: int, j: int) -> float:
        if i == j:
            return 0.0
        ci = self._component_of[i]
        if ci < 0 or ci != self._component_of[j]:
            return math.inf
        return float(self._blocks[ci][self._local[i], self._local[j]])

    def distance(self, a: Entity, b: Entity) -> float:
        return self.d(self.graph.index_of(a), self.graph.index_of(b))

    def submatrix(self, rows: Sequence[int], cols: Optional[Sequence[int]] = None) -> np.ndarray:
        """Distances between ``rows`` and ``cols`` (defaults to ``rows``) as a dense array."""

        rows_arr = np.asarray(rows, dtype=int)
        cols_arr = rows_arr if cols is None else np.asarray(cols, dtype=int)
        out = np.full((rows_arr.size, cols_arr.size), math.inf)
        if rows_arr.size == 0 or cols_arr.size == 0:
            return out
        row_comp = self._component_of[rows_arr]
        col_comp = self._component_of[cols_arr]
        for comp in np.unique(row_comp):
            if comp < 0:
                continue
            r_mask = row_comp == comp
            c_mask = col_comp == comp
            if not c_mask.any():
                continue
            block = self._blocks[comp]
            out[np.ix_(r_mask, c_mask)] = block[np.ix_(self._local[rows_arr[r_mask]], self._local[cols_arr[c_mask]])]
        same = rows_arr[:, None] == cols_arr[None, :]
        out[same] = 0.0
        return out

    def pair_distances(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        """Elementwise ``d(a[...], b[...])`` for equally shaped index arrays."""

        a = np.asarray(a, dtype=int)
        b = np.asarray(b, dtype=int)
        out = np.full(a.shape, math.inf)
        comp_a = self._component_of[a]
        same = (comp_a >= 0) & (comp_a == self._component_of[b])
        for comp in np.unique(comp_a[same]):
            mask = same & (comp_a == comp)
            out[mask] = self._blocks[comp][self._local[a[mask]], self._local[b[mask]]]
        out[a == b] = 0.0
        return out

    def max_finite(self, component: Optional[int] = None) -> float:
        blocks = self._blocks if component is None else [self._blocks[component]]
        best = 0.0
        for block in blocks:
            finite = block[np.isfinite(block)]
            if finite.size:
                best = max(best, float(finite.max()))
        return best


class MatrixOracle(DistanceOracle):
    """Oracle over an explicit dense matrix covering every entity of ``graph``.

    Used for precomputed dissimilarities and as the oracle of a subset view.
    Rows joined by a chain of finite entries, in either direction, share a
    component.
    """

    def __init__(self, graph: GraphView, matrix: np.ndarray) -> None:
        super().__init__(graph)
        matrix = np.asarray(matrix, dtype=float)
        n = graph.entity_count()
        if matrix.shape != (n, n):
            raise ValueError(f"matrix shape {matrix.shape} does not match {n} entities")
        if n == 0:
            return
        reach = sparse.csr_matrix(np.isfinite(matrix).astype(float))
        count, labels = csgraph.connected_components(reach, directed=False)
        groups: List[List[int]] = [[] for _ in range(count)]
        for node, label in enumerate(labels):
            groups[int(label)].append(node)
        groups.sort(key=lambda comp: (-len(comp), comp[0]))
        for group in groups:
            self._store(group, matrix[np.ix_(group, group)].copy())


__all__ = ["DistanceOracle", "MatrixOracle"]
