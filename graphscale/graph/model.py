"""Adjacency model shared by every layout stage."""

from __future__ import annotations

import math
from typing import Dict, Iterable, Iterator, List, Optional, Protocol, Sequence, runtime_checkable

from ..types import Entity, UnknownEntity


@runtime_checkable
class GraphView(Protocol):
    """Read-only view consumed by oracles and embedders.

    Indices are local to one view instance; ``weight`` returns ``inf`` when the
    edge does not exist.
    """

    def entity_count(self) -> int: ...

    def entity(self, i: int) -> Entity: ...

    def index_of(self, entity: Entity) -> int: ...

    def neighbor_count(self, i: int) -> int: ...

    def neighbor(self, i: int, j: int) -> int: ...

    def weight(self, i: int, j: int) -> float: ...


class Graph:
    """Directed, weighted adjacency lists keyed by entity.

    ``add_edge(a, b)`` without a weight counts parallel edges: every call adds
    one to the stored weight. An explicit weight replaces the stored value.
    """

    def __init__(self, edges: Optional[Iterable[Sequence[object]]] = None) -> None:
        self._entities: List[Entity] = []
        self._index: Dict[Entity, int] = {}
        self._order: List[List[int]] = []
        self._weights: List[Dict[int, float]] = []
        if edges is not None:
            for edge in edges:
                if len(edge) == 2:
                    self.add_edge(edge[0], edge[1])
                else:
                    self.add_edge(edge[0], edge[1], float(edge[2]))  # type: ignore[arg-type]

    # -- construction -------------------------------------------------
    def add_entity(self, entity: Entity) -> int:
        idx = self._index.get(entity)
        if idx is None:
            idx = len(self._entities)
            self._entities.append(entity)
            self._index[entity] = idx
            self._order.append([])
            self._weights.append({})
        return idx

    def add_edge(self, a: Entity, b: Entity, weight: Optional[float] = None) -> None:
        i = self.add_entity(a)
        j = self.add_entity(b)
        self._link(i, j, weight)

    def _link(self, i: int, j: int, weight: Optional[float]) -> None:
        row = self._weights[i]
        if j not in row:
            self._order[i].append(j)
            row[j] = 0.0
        if weight is None:
            row[j] += 1.0
        else:
            row[j] = float(weight)

    # -- GraphView ----------------------------------------------------
    def entity_count(self) -> int:
        return len(self._entities)

    def entity(self, i: int) -> Entity:
        return self._entities[i]

    def entities(self) -> List[Entity]:
        return list(self._entities)

    def has_entity(self, entity: Entity) -> bool:
        return entity in self._index

    def index_of(self, entity: Entity) -> int:
        try:
            return self._index[entity]
        except KeyError:
            raise UnknownEntity(entity) from None

    def neighbor_count(self, i: int) -> int:
        return len(self._order[i])

    def neighbor(self, i: int, j: int) -> int:
        return self._order[i][j]

    def neighbors(self, i: int) -> List[int]:
        return list(self._order[i])

    def weight(self, i: int, j: int) -> float:
        return self._weights[i].get(j, math.inf)

    def edge_count(self) -> int:
        return sum(len(row) for row in self._order)

    def edges(self) -> Iterator[tuple]:
        """Yield ``(i, j, weight)`` for every stored directed edge."""

        for i, row in enumerate(self._order):
            for j in row:
                yield i, j, self._weights[i][j]

    def __len__(self) -> int:
        return len(self._entities)

    def __contains__(self, entity: object) -> bool:
        return entity in self._index

    def __repr__(self) -> str:
        return f"{type(self).__name__}(entities={self.entity_count()}, edges={self.edge_count()})"


__all__ = ["Graph", "GraphView"]
