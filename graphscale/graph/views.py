"""Derived graph views: undirected merge and pendant-stripped core."""

from __future__ import annotations

import logging
import math
from typing import Any, Iterable, List, Optional, Sequence, Set

from ..types import Entity
from .model import Graph, GraphView

logger = logging.getLogger(__name__)


class UndirectedGraph(Graph):
    """Symmetric view of a directed graph.

    Reciprocal directed edges are merged by summing their weights; when only
    one direction exists its weight is used. Self loops are dropped.
    ``add_edge`` on this view always updates both directions.
    """

    def __init__(self, source: Optional[GraphView] = None) -> None:
        super().__init__()
        if source is None:
            return
        for i in range(source.entity_count()):
            self.add_entity(source.entity(i))
        for i in range(source.entity_count()):
            for slot in range(source.neighbor_count(i)):
                j = source.neighbor(i, slot)
                if i == j or j in self._weights[i]:
                    continue
                self._set_pair(i, j, _merged_weight(source.weight(i, j), source.weight(j, i)))

    @staticmethod
    def from_edges(edges: Iterable[Sequence[Any]]) -> "UndirectedGraph":
        """Build from ``(a, b)`` or ``(a, b, weight)`` tuples."""

        graph = UndirectedGraph()
        for edge in edges:
            graph.add_edge(*edge)
        return graph

    def add_edge(self, a: Entity, b: Entity, weight: Optional[float] = None) -> None:
        i = self.add_entity(a)
        j = self.add_entity(b)
        if i == j:
            return
        if weight is None:
            weight = self._weights[i].get(j, 0.0) + 1.0
        self._set_pair(i, j, float(weight))

    def _set_pair(self, i: int, j: int, weight: float) -> None:
        self._link(i, j, weight)
        self._link(j, i, weight)

    def edge_count(self) -> int:
        return super().edge_count() // 2

    def degree(self, i: int) -> int:
        return len(self._order[i])


def _merged_weight(w_ij: float, w_ji: float) -> float:
    if math.isinf(w_ij):
        return w_ji
    if math.isinf(w_ji):
        return w_ij
    return w_ij + w_ji


class TwoPlusDegreeGraph(UndirectedGraph):
    """Undirected view with every degree-0/1 node removed.

    The full undirected graph is built first and its low-degree nodes are
    marked; the view is then rebuilt from ``source`` without them. Removal is
    one pass only, so a chain hanging off the core loses just its tip.
    """

    def __init__(self, source: GraphView) -> None:
        super().__init__()
        full = source if isinstance(source, UndirectedGraph) else UndirectedGraph(source)
        removed: Set[int] = {i for i in range(full.entity_count()) if full.degree(i) <= 1}
        self.removed: List[Entity] = [full.entity(i) for i in sorted(removed)]
        for i in range(full.entity_count()):
            if i not in removed:
                self.add_entity(full.entity(i))
        for i in range(full.entity_count()):
            if i in removed:
                continue
            a = self._index[full.entity(i)]
            for j in full.neighbors(i):
                if j in removed:
                    continue
                b = self._index[full.entity(j)]
                if b not in self._weights[a]:
                    self._set_pair(a, b, full.weight(i, j))
        logger.info(
            "Stripped %d pendant nodes, %d core nodes remain",
            len(self.removed),
            self.entity_count(),
        )


__all__ = ["TwoPlusDegreeGraph", "UndirectedGraph"]
