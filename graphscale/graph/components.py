"""Connected components and matrix exports of graph views."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import numpy as np
from scipy import sparse
from scipy.sparse import csgraph

from .model import GraphView

logger = logging.getLogger(__name__)


def sparse_adjacency(graph: GraphView, indices: Optional[Sequence[int]] = None) -> sparse.csr_matrix:
    """Return the weight matrix of ``graph`` (restricted to ``indices``) in CSR form.

    Rows and columns follow the order of ``indices``; edges leaving the subset
    are dropped.
    """

    if indices is None:
        indices = range(graph.entity_count())
    local = {node: pos for pos, node in enumerate(indices)}
    rows: List[int] = []
    cols: List[int] = []
    data: List[float] = []
    for node, pos in local.items():
        for slot in range(graph.neighbor_count(node)):
            nbor = graph.neighbor(node, slot)
            other = local.get(nbor)
            if other is None or other == pos:
                continue
            rows.append(pos)
            cols.append(other)
            data.append(graph.weight(node, nbor))
    size = len(local)
    return sparse.csr_matrix((data, (rows, cols)), shape=(size, size), dtype=float)


def adjacency_matrix(graph: GraphView, indices: Optional[Sequence[int]] = None) -> np.ndarray:
    """Dense weight matrix with zeros where no edge exists."""

    return sparse_adjacency(graph, indices).toarray()


def connected_components(graph: GraphView) -> List[List[int]]:
    """Return component index lists, largest first, each sorted ascending."""

    n = graph.entity_count()
    if n == 0:
        return []
    count, labels = csgraph.connected_components(sparse_adjacency(graph), directed=False)
    groups: List[List[int]] = [[] for _ in range(count)]
    for node, label in enumerate(labels):
        groups[int(label)].append(node)
    groups.sort(key=lambda comp: (-len(comp), comp[0]))
    logger.info("Found %d connected components over %d entities", count, n)
    return groups


def degree(graph: GraphView, i: int) -> int:
    return graph.neighbor_count(i)


def pendant_parent(graph: GraphView, i: int) -> Optional[int]:
    """Sole neighbor of a degree-1 node, ``None`` for any other degree."""

    if graph.neighbor_count(i) != 1:
        return None
    return graph.neighbor(i, 0)


__all__ = [
    "adjacency_matrix",
    "connected_components",
    "degree",
    "pendant_parent",
    "sparse_adjacency",
]
